"""Airtable sink implementation."""

import logging
from urllib.parse import quote

import httpx

from card_digitizer.models.record import CardRecord
from card_digitizer.sink.base import RecordSink

logger = logging.getLogger(__name__)

AIRTABLE_API_URL = "https://api.airtable.com/v0"

# Record field -> table column
COLUMNS = {
    "name": "Name",
    "title": "Position",
    "company": "Company",
    "email": "Email",
    "phone": "Contact No.",
    "address": "Address",
    "website": "Website",
    "industry": "Industry",
    "notes": "Notes on Card",
}

ERROR_HINTS = {
    401: "Authentication failed - check your API key",
    403: "Access denied - check the API key's scopes and base access",
    404: "Base or table not found - check your Base ID and table name",
    422: "Field name mismatch - check your table field names",
}


class AirtableSink(RecordSink):
    """Store records as rows of an Airtable table."""

    def __init__(
        self,
        api_key: str | None,
        base_id: str | None,
        table_name: str = "CRM",
        timeout: float = 30.0,
        api_url: str = AIRTABLE_API_URL,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize Airtable sink.

        Args:
            api_key: Airtable personal access token.
            base_id: Airtable base ID (``app...``).
            table_name: Table name or ID.
            timeout: Request timeout in seconds.
            api_url: Airtable REST API root.
            transport: Optional httpx transport, used by tests.

        Raises:
            ValueError: If the API key or base ID is missing.
        """
        if not api_key:
            raise ValueError("Airtable API key is not configured")
        if not base_id:
            raise ValueError("Airtable Base ID is not configured")
        self._api_key = api_key
        self._base_id = base_id
        self._table_name = table_name
        self._timeout = timeout
        self._api_url = api_url.rstrip("/")
        self._transport = transport

    @property
    def name(self) -> str:
        return f"airtable:{self._table_name}"

    @property
    def table_url(self) -> str:
        return f"{self._api_url}/{self._base_id}/{quote(self._table_name, safe='')}"

    def to_fields(self, record: CardRecord) -> dict[str, str]:
        """Map a record to table columns; missing values become empty strings."""
        return {column: getattr(record, field) or "" for field, column in COLUMNS.items()}

    def save(self, record: CardRecord) -> str:
        """Create one row and return its Airtable record ID."""
        payload = {"records": [{"fields": self.to_fields(record)}]}
        logger.info("Saving record to Airtable table %s", self._table_name)

        with self._client() as client:
            try:
                resp = client.post(self.table_url, json=payload)
                resp.raise_for_status()
            except httpx.ConnectError as e:
                raise ValueError(
                    f"Failed to save data to Airtable: cannot connect to {self._api_url}"
                ) from e
            except httpx.TimeoutException as e:
                raise ValueError("Failed to save data to Airtable: request timed out") from e
            except httpx.HTTPStatusError as e:
                raise ValueError(
                    f"Failed to save data to Airtable: {self._describe_error(e.response)}"
                ) from e

        records = resp.json().get("records") or [{}]
        record_id = records[0].get("id", "")
        logger.info("Created Airtable record %s", record_id)
        return record_id

    def check(self) -> bool:
        """Fetch at most one row to confirm the table is reachable."""
        logger.info("Testing Airtable connection to table %s", self._table_name)
        with self._client() as client:
            try:
                resp = client.get(self.table_url, params={"maxRecords": 1})
                resp.raise_for_status()
                data = resp.json()
            except httpx.HTTPStatusError as e:
                logger.error("Airtable connection test failed: %s", self._describe_error(e.response))
                return False
            except httpx.HTTPError as e:
                logger.error("Airtable connection test failed: %s", e)
                return False
            except ValueError as e:
                logger.error("Airtable connection test failed: response is not JSON (%s)", e)
                return False

        if not isinstance(data, dict):
            logger.error("Airtable connection test failed: unexpected response %r", data)
            return False
        found = len(data.get("records") or [])
        logger.info("Airtable connection OK (%s)", "found records" if found else "no records found")
        return True

    def _client(self) -> httpx.Client:
        return httpx.Client(
            timeout=self._timeout,
            transport=self._transport,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )

    def _describe_error(self, response: httpx.Response) -> str:
        hint = ERROR_HINTS.get(response.status_code)
        message = self._error_message(response)
        if hint:
            return f"{hint} ({message})" if message else hint
        return f"HTTP {response.status_code}: {message or response.text}"

    def _error_message(self, response: httpx.Response) -> str:
        """Pull the message out of Airtable's error body, if any."""
        try:
            error = response.json().get("error")
        except ValueError:
            return ""
        if isinstance(error, dict):
            return error.get("message") or error.get("type") or ""
        return str(error or "")
