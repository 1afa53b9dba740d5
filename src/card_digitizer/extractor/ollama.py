"""Ollama vision extractor implementation."""

import logging

import httpx

from card_digitizer.extractor.base import SYSTEM_PROMPT, USER_PROMPT, Extractor
from card_digitizer.image import CardImage

logger = logging.getLogger(__name__)


class OllamaExtractor(Extractor):
    """Extractor using a local Ollama vision model."""

    def __init__(
        self,
        model: str = "llava",
        base_url: str = "http://localhost:11434",
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize Ollama extractor.

        Args:
            model: Ollama vision model name (e.g., "llava", "llama3.2-vision").
            base_url: Ollama API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, used by tests.
        """
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    @property
    def name(self) -> str:
        return f"ollama:{self._model}"

    def _request(self, image: CardImage) -> str:
        """Call Ollama API and return the response text."""
        url = f"{self._base_url}/api/generate"
        payload = {
            "model": self._model,
            "prompt": USER_PROMPT,
            "system": SYSTEM_PROMPT,
            "images": [image.data],
            "stream": False,
            "format": "json",
        }

        logger.info("Calling Ollama model %s at %s", self._model, self._base_url)
        with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
            try:
                resp = client.post(url, json=payload)
                resp.raise_for_status()
            except httpx.ConnectError as e:
                raise ValueError(
                    f"Cannot connect to Ollama at {self._base_url}. "
                    "Is Ollama running? Start it with: ollama serve"
                ) from e
            except httpx.TimeoutException as e:
                raise ValueError(f"Ollama request timed out after {self._timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise ValueError(f"Ollama API error: {e.response.text}") from e

        data = resp.json()
        return data.get("response", "")
