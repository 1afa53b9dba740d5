"""Data models for business card records."""

from card_digitizer.models.record import (
    FIELD_NAMES,
    CardRecord,
    Metadata,
    ScanResult,
)

__all__ = [
    "FIELD_NAMES",
    "CardRecord",
    "Metadata",
    "ScanResult",
]
