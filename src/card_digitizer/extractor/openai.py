"""OpenAI vision extractor implementation."""

import logging

import httpx

from card_digitizer.extractor.base import SYSTEM_PROMPT, USER_PROMPT, Extractor
from card_digitizer.image import CardImage

logger = logging.getLogger(__name__)

# Substrings of OpenAI error bodies and the hint shown for each
ERROR_HINTS = {
    "rate_limit": "Rate limit exceeded - try again later",
    "quota": "Quota exceeded - check your OpenAI billing",
    "invalid_api_key": "Invalid API key - check your OpenAI API key",
    "model_not_found": "Model not found - check the model name",
}


class OpenAIExtractor(Extractor):
    """Extractor using the OpenAI chat completions API with image input."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "gpt-4o-mini",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 60.0,
        max_tokens: int = 1000,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize OpenAI extractor.

        Args:
            api_key: OpenAI API key.
            model: Vision-capable model name.
            base_url: API base URL (OpenAI-compatible servers work too).
            timeout: Request timeout in seconds.
            max_tokens: Upper bound on the reply length.
            transport: Optional httpx transport, used by tests.

        Raises:
            ValueError: If no API key is given.
        """
        if not api_key:
            raise ValueError("OpenAI API key not configured")
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._max_tokens = max_tokens
        self._transport = transport

    @property
    def name(self) -> str:
        return f"openai:{self._model}"

    def _request(self, image: CardImage) -> str:
        """Call the chat completions endpoint and return the reply text."""
        url = f"{self._base_url}/chat/completions"
        payload = {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": USER_PROMPT},
                        {
                            "type": "image_url",
                            "image_url": {"url": image.data_url, "detail": "high"},
                        },
                    ],
                },
            ],
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        logger.info("Calling OpenAI vision model %s", self._model)
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            try:
                resp = client.post(url, json=payload, headers=headers)
                resp.raise_for_status()
            except httpx.ConnectError as e:
                raise ValueError(f"Cannot connect to OpenAI at {self._base_url}") from e
            except httpx.TimeoutException as e:
                raise ValueError(f"OpenAI request timed out after {self._timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ValueError(self._describe_error(e.response)) from e

        data = resp.json()
        choices = data.get("choices") or []
        if not choices:
            return ""
        content = (choices[0].get("message") or {}).get("content") or ""
        logger.debug("OpenAI reply: %d characters", len(content))
        return content

    def _describe_error(self, response: httpx.Response) -> str:
        body = response.text
        for marker, hint in ERROR_HINTS.items():
            if marker in body:
                return f"OpenAI API error ({response.status_code}): {hint}"
        return f"OpenAI API error ({response.status_code}): {body}"
