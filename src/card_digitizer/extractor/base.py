"""Abstract base class for vision extractors."""

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from card_digitizer.image import CardImage, load_card_image
from card_digitizer.models.record import FIELD_NAMES, CardRecord, ScanResult
from card_digitizer.patterns import INDUSTRY_LABELS
from card_digitizer.text_parser import match_industry, normalize_record, parse_card_text

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a business card information extractor.
Read the business card in the image and extract its contact information.

Return ONLY a valid JSON object with this structure (no markdown, no explanation):
{
  "name": "string or null",
  "title": "string or null",
  "company": "string or null",
  "phone": "string or null",
  "email": "string or null",
  "website": "string or null",
  "address": "string or null",
  "industry": "string or null (one of the allowed industries)",
  "notes": "string or null (slogans, specialities or other text on the card)"
}

Allowed industries:
""" + "\n".join(f"- {label}" for label in INDUSTRY_LABELS) + """

Guidelines:
- Copy values exactly as printed; do not invent missing information
- If several phone numbers exist, pick the primary one
- If you cannot produce JSON, return all the text on the card, one item per line"""

USER_PROMPT = "Extract the business card information from this image. Return only the JSON object."


class Extractor(ABC):
    """Abstract base class for vision extractors.

    Subclasses send the image to a model and return its reply text;
    turning that reply into a record is shared here.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the name of this extractor."""
        ...

    @abstractmethod
    def _request(self, image: CardImage) -> str:
        """
        Send the image to the model.

        Args:
            image: Encoded card image.

        Returns:
            The model's reply text.

        Raises:
            ValueError: If the backend cannot be reached or rejects the request.
        """
        ...

    def extract(self, image_path: str | Path) -> ScanResult:
        """
        Extract a card record from an image.

        Args:
            image_path: Path to the business card image.

        Returns:
            ScanResult with the normalized record and the raw reply.

        Raises:
            FileNotFoundError: If the image file does not exist.
            ValueError: If the image is unusable or the backend fails.
        """
        image = load_card_image(image_path)
        reply = self._request(image)
        return self._parse_response(reply)

    def _parse_response(self, response: str) -> ScanResult:
        """Parse a model reply, falling back to heuristics for non-JSON text."""
        if not response.strip():
            raise ValueError(f"{self.name} returned an empty response")

        data = self._load_json(response)
        if data is None:
            logger.warning("%s reply is not JSON, using heuristic text parser", self.name)
            record = parse_card_text(response)
            return ScanResult(
                record=normalize_record(record),
                raw_text=response.strip(),
                used_fallback=True,
            )

        values = {field_name: self._to_str(data.get(field_name)) for field_name in FIELD_NAMES}
        values["industry"] = self._to_industry(values["industry"])
        return ScanResult(
            record=normalize_record(CardRecord(**values)),
            raw_text=response.strip(),
        )

    def _load_json(self, text: str) -> dict | None:
        """Decode the JSON object in a reply, or None if there is none."""
        try:
            data = json.loads(self._extract_json(text))
        except json.JSONDecodeError as e:
            logger.debug("JSON decode failed: %s", e)
            return None
        return data if isinstance(data, dict) else None

    def _extract_json(self, text: str) -> str:
        """Extract JSON from text, handling potential markdown code blocks."""
        # Try to find JSON in code blocks first
        code_block_match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
        if code_block_match:
            return code_block_match.group(1).strip()

        # Try to find raw JSON object
        json_match = re.search(r"\{[\s\S]*\}", text)
        if json_match:
            return json_match.group(0)

        return text.strip()

    def _to_str(self, value: Any) -> str | None:
        """Convert value to string; lists and objects give their first value."""
        if value is None:
            return None
        if isinstance(value, list):
            return self._to_str(value[0]) if value else None
        if isinstance(value, dict):
            return self._to_str(next(iter(value.values()))) if value else None
        return str(value)

    def _to_industry(self, value: str | None) -> str | None:
        """Keep known industry labels, map anything else through the keyword table."""
        if value is None:
            return None
        for label in INDUSTRY_LABELS:
            if value.strip().lower() == label.lower():
                return label
        industry = match_industry(value)
        if industry is None:
            logger.debug("Dropping unknown industry %r", value)
        return industry
