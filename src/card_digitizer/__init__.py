"""Business card digitizer with vision-model extraction and Airtable storage."""

from card_digitizer.models.record import CardRecord
from card_digitizer.scanner import CardScanner
from card_digitizer.text_parser import extract_record, normalize_record, parse_card_text

__version__ = "0.1.0"
__all__ = [
    "CardRecord",
    "CardScanner",
    "extract_record",
    "normalize_record",
    "parse_card_text",
]
