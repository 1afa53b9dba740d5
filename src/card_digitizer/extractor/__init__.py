"""Vision extractors turning card photos into records."""

from card_digitizer.extractor.base import Extractor
from card_digitizer.extractor.ollama import OllamaExtractor
from card_digitizer.extractor.openai import OpenAIExtractor

__all__ = ["Extractor", "OllamaExtractor", "OpenAIExtractor"]
