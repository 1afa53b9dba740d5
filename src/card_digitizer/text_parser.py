"""Heuristic field extraction from business card text.

Used when the vision model reply cannot be decoded as JSON. Every field is
extracted independently by walking an ordered table of patterns or keywords;
the first hit wins and nothing is revisited. One line may therefore fill
several fields (a title line that also names the company, for instance).
"""

import re

from card_digitizer.models.record import FIELD_NAMES, CardRecord
from card_digitizer.patterns import (
    ADDRESS_PATTERNS,
    BUSINESS_TERMS,
    COMPANY_FALLBACK_KEYWORDS,
    COMPANY_KEYWORDS,
    COUNTRY_CODE_ANNOTATION,
    EMAIL_PATTERN,
    INDUSTRY_KEYWORDS,
    INDUSTRY_LABELS,
    NAME_PATTERNS,
    NOTES_MAX_LENGTH,
    NOTES_MIN_LENGTH,
    NOTES_SEPARATOR,
    PHONE_PATTERNS,
    TITLE_KEYWORDS,
    WEBSITE_PATTERN,
)

_WHITESPACE = re.compile(r"\s+")


def parse_card_text(text: str) -> CardRecord:
    """
    Extract card fields from free-form text.

    Never raises; an empty or unrecognisable input yields an empty record.

    Args:
        text: Transcribed text of a business card, one item per line.

    Returns:
        CardRecord with the fields that could be detected.
    """
    lines = split_lines(text)

    name = _find_name(lines)
    title = _first_line_containing(lines, TITLE_KEYWORDS)
    company = _find_company(lines)
    address = _find_address(lines)
    industry, industry_line = _find_industry(lines)

    consumed = {line for line in (name, title, company, address, industry_line) if line}

    return CardRecord(
        name=name,
        title=title,
        company=company,
        phone=_find_phone(text),
        email=_first_match(EMAIL_PATTERN, text),
        website=_first_match(WEBSITE_PATTERN, text),
        address=address,
        industry=industry,
        notes=_collect_notes(lines, consumed),
    )


def normalize_record(record: CardRecord) -> CardRecord:
    """
    Trim every field and collapse internal whitespace to single spaces.

    Fields that end up empty become ``None``. Idempotent.
    """
    values = {}
    for field_name in FIELD_NAMES:
        value = getattr(record, field_name)
        if value is not None:
            value = normalize_whitespace(value) or None
        values[field_name] = value
    return CardRecord(**values)


def extract_record(text: str) -> CardRecord:
    """Parse card text and normalize the result."""
    return normalize_record(parse_card_text(text))


def split_lines(text: str) -> list[str]:
    """Split text into trimmed, non-empty lines."""
    return [line.strip() for line in text.split("\n") if line.strip()]


def normalize_whitespace(value: str) -> str:
    """Strip and collapse whitespace runs."""
    return _WHITESPACE.sub(" ", value).strip()


def clean_phone(value: str) -> str:
    """Drop a "(+NN)" country code annotation and collapse whitespace."""
    value = COUNTRY_CODE_ANNOTATION.sub("", value.strip(), count=1)
    return normalize_whitespace(value)


def match_industry(value: str) -> str | None:
    """Map free text to one of the industry labels, or None."""
    industry, _ = _find_industry([value])
    return industry


def is_email(line: str) -> bool:
    return EMAIL_PATTERN.search(line) is not None


def is_phone(line: str) -> bool:
    return any(pattern.search(line) for pattern in PHONE_PATTERNS)


def is_website(line: str) -> bool:
    return WEBSITE_PATTERN.search(line) is not None


def _is_contact_line(line: str) -> bool:
    return is_email(line) or is_phone(line) or is_website(line)


def _first_match(pattern: re.Pattern, text: str) -> str | None:
    match = pattern.search(text)
    return match.group(0) if match else None


def _first_line_containing(lines: list[str], keywords) -> str | None:
    for line in lines:
        lower = line.lower()
        if any(keyword in lower for keyword in keywords):
            return line
    return None


def _find_phone(text: str) -> str | None:
    for pattern in PHONE_PATTERNS:
        match = pattern.search(text)
        if match:
            return clean_phone(match.group(0))
    return None


def _find_name(lines: list[str]) -> str | None:
    for line in lines:
        if any(pattern.fullmatch(line) for pattern in NAME_PATTERNS):
            return line

    if not lines:
        return None

    # Fall back to the first line unless it looks like a company or contact
    first = lines[0]
    lower = first.lower()
    if any(term in lower for term in BUSINESS_TERMS):
        return None
    if is_email(first) or is_phone(first):
        return None
    return first


def _find_company(lines: list[str]) -> str | None:
    company = _first_line_containing(lines, COMPANY_KEYWORDS)
    if company:
        return company

    candidates = [line for line in lines if not _is_contact_line(line)]
    return _first_line_containing(candidates, COMPANY_FALLBACK_KEYWORDS)


def _find_address(lines: list[str]) -> str | None:
    for line in lines:
        if any(pattern.search(line) for pattern in ADDRESS_PATTERNS):
            return line
    return None


def _find_industry(lines: list[str]) -> tuple[str | None, str | None]:
    """Return (industry label, line it was found on)."""
    for line in lines:
        lower = line.lower()
        for label in INDUSTRY_LABELS:
            if label.lower() in lower:
                return label, line

    for line in lines:
        lower = line.lower()
        for keyword, label in INDUSTRY_KEYWORDS.items():
            if keyword in lower:
                return label, line

    return None, None


def _collect_notes(lines: list[str], consumed: set[str]) -> str | None:
    remaining = [
        line
        for line in lines
        if line not in consumed
        and not _is_contact_line(line)
        and NOTES_MIN_LENGTH < len(line) < NOTES_MAX_LENGTH
    ]
    return NOTES_SEPARATOR.join(remaining) if remaining else None
