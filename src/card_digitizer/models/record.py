"""Pydantic models for business card records."""

from pydantic import BaseModel, Field

FIELD_NAMES = (
    "name",
    "title",
    "company",
    "phone",
    "email",
    "website",
    "address",
    "industry",
    "notes",
)


class CardRecord(BaseModel):
    """Fields extracted from a single business card.

    Every field is optional; a missing value is ``None``, never ``""``.
    """

    name: str | None = Field(default=None, description="Person's name")
    title: str | None = Field(default=None, description="Job title or position")
    company: str | None = Field(default=None, description="Company name")
    phone: str | None = Field(default=None, description="Contact number")
    email: str | None = Field(default=None, description="Email address")
    website: str | None = Field(default=None, description="Website URL")
    address: str | None = Field(default=None, description="Postal address")
    industry: str | None = Field(default=None, description="Industry label")
    notes: str | None = Field(default=None, description="Remaining card text")

    def is_empty(self) -> bool:
        """True when no field is set."""
        return all(getattr(self, f) is None for f in FIELD_NAMES)


class Metadata(BaseModel):
    """Processing metadata."""

    extractor_backend: str = Field(description="Vision extractor used")
    processing_time_ms: float = Field(description="Total processing time in ms")


class ScanResult(BaseModel):
    """Record extracted from an image, with the model reply it came from."""

    record: CardRecord = Field(default_factory=CardRecord)
    raw_text: str = Field(default="", description="Raw model reply for reference")
    used_fallback: bool = Field(
        default=False, description="Whether the heuristic text parser was used"
    )
    metadata: Metadata | None = Field(default=None, description="Processing metadata")
