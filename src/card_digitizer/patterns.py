"""Ordered regex and keyword tables for heuristic card parsing.

Order matters everywhere in this module: the parser walks each table from
top to bottom and the first hit wins.
"""

import re

EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

PHONE_PATTERNS = (
    # North American: (415) 555-0100, +1 415.555.0100
    re.compile(r"(\+?1[-.\s]?)?\(?([0-9]{3})\)?[-.\s]?([0-9]{3})[-.\s]?([0-9]{4})"),
    # International digit groups: +65 1234 5678, +65-1234-5678
    re.compile(r"(\+\d{1,3}[-.\s]?)?(\d{1,4}[-.\s]?\d{1,4}[-.\s]?\d{1,4})"),
    # Letter-prefixed local: P 9833 2268
    re.compile(r"[Pp]\s*(\d{4}\s*\d{4})"),
    # Generic grouped digits
    re.compile(r"\b\d{2,4}[-.\s]?\d{2,4}[-.\s]?\d{2,4}\b"),
)

# Leading country code annotation such as "(+63) "
COUNTRY_CODE_ANNOTATION = re.compile(r"\(\+\d+\)\s*")

# Never starts inside an email address (local part or domain).
WEBSITE_PATTERN = re.compile(
    r"(?<![@\w.-])(?![\w.%+-]*@)"
    r"(?:https?://)?(?:www\.)?[a-zA-Z0-9-]+\.[a-zA-Z]{2,}(?:/\S*)?"
)

NAME_PATTERNS = (
    re.compile(r"[A-Z][a-z]+ [A-Z][a-z]+"),  # First Last
    re.compile(r"[A-Z][a-z]+ [A-Z]\. [A-Z][a-z]+"),  # First M. Last
    re.compile(r"[A-Z][a-z]+ [A-Z][a-z]+ [A-Z][a-z]+"),  # First Middle Last
)

# A first line containing any of these is never taken as a name.
BUSINESS_TERMS = (
    "inc",
    "llc",
    "corp",
    "company",
    "ltd",
    "co",
    "group",
    "associates",
)

TITLE_KEYWORDS = (
    "manager",
    "director",
    "president",
    "ceo",
    "cto",
    "cfo",
    "vp",
    "vice president",
    "senior",
    "lead",
    "head",
    "chief",
    "executive",
    "officer",
    "coordinator",
    "specialist",
    "analyst",
    "consultant",
    "advisor",
    "developer",
    "engineer",
    "designer",
    "architect",
    "supervisor",
    "administrator",
)

COMPANY_KEYWORDS = (
    "inc",
    "llc",
    "corp",
    "corporation",
    "company",
    "ltd",
    "limited",
    "co",
    "group",
    "associates",
    "partners",
    "solutions",
    "systems",
    "technologies",
    "consulting",
    "services",
    "enterprises",
    "ventures",
    "finance",
    "bank",
    "capital",
    "investment",
    "holdings",
    "international",
    "global",
)

# Second company pass, only over lines that are not contact lines.
COMPANY_FALLBACK_KEYWORDS = ("finance", "company", "corp", "inc", "ltd", "group")

_STREET_SUFFIXES = "Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Boulevard|Blvd"
_EXTENDED_SUFFIXES = (
    _STREET_SUFFIXES
    + "|Crescent|Cres|Way|Place|Pl|Close|Cl|Terrace|Ter|Square|Sq|Park|Pk"
    "|Gardens|Gdns|Heights|Hts|View|Vw|Hill|Rise|Green|Grove|Valley|Vale"
    "|Meadows|Manor|Court|Ct"
)
_BUILDING_SUFFIXES = "Center|Centre|Building|Bldg|Tower|Plaza|Mall|Complex"

ADDRESS_PATTERNS = (
    # US: 123 Main Street, Springfield, IL 62704
    re.compile(
        rf"\d+\s+[A-Za-z\s]+(?:{_STREET_SUFFIXES}).*?(?:,\s*)?"
        r"[A-Za-z\s]+,?\s*[A-Z]{2}\s*\d{5}(?:-\d{4})?",
        re.IGNORECASE,
    ),
    # Singapore: 71 Ayer Rajah Crescent #05-01 Singapore 139951
    re.compile(
        rf"\d+\s+[A-Za-z\s]+(?:{_EXTENDED_SUFFIXES}).*?"
        r"(?:#\d+-\d+)?\s*(?:Singapore|SGP)?\s*\d{6}",
        re.IGNORECASE,
    ),
    # Philippines: 5F DMG Center, D. M. Guevara St.
    re.compile(
        rf"\d+[A-Za-z]?\s+[A-Za-z\s]+(?:{_BUILDING_SUFFIXES}|{_EXTENDED_SUFFIXES})",
        re.IGNORECASE,
    ),
    # Generic numbered street
    re.compile(
        rf"\d+[A-Za-z]?\s+[A-Za-z\s]+(?:{_EXTENDED_SUFFIXES}|{_BUILDING_SUFFIXES})",
        re.IGNORECASE,
    ),
)

INDUSTRY_LABELS = (
    "Banking & Finance",
    "Investment & Private Equity",
    "Technology & Software",
    "Real Estate & Property Development",
    "Hospitality & Leisure",
    "Food & Beverage",
    "Professional Services",
    "Logistics & Transportation",
    "Retail & Consumer Goods",
    "Telecommunications",
    "Manufacturing & Industrial",
    "Education & Training",
    "Energy & Utilities",
    "Government & Nonprofit",
    "Media & Advertising",
    "Healthcare & Pharmaceutical",
    "Agriculture",
    "Personal Services",
)

# Plain substring keys, checked in insertion order within each line.
INDUSTRY_KEYWORDS = {
    "banking": "Banking & Finance",
    "finance": "Banking & Finance",
    "financial": "Banking & Finance",
    "investment": "Investment & Private Equity",
    "private equity": "Investment & Private Equity",
    "venture capital": "Investment & Private Equity",
    "vc": "Investment & Private Equity",
    "technology": "Technology & Software",
    "tech": "Technology & Software",
    "software": "Technology & Software",
    "it": "Technology & Software",
    "real estate": "Real Estate & Property Development",
    "property": "Real Estate & Property Development",
    "development": "Real Estate & Property Development",
    "hospitality": "Hospitality & Leisure",
    "hotel": "Hospitality & Leisure",
    "leisure": "Hospitality & Leisure",
    "food": "Food & Beverage",
    "beverage": "Food & Beverage",
    "restaurant": "Food & Beverage",
    "professional services": "Professional Services",
    "consulting": "Professional Services",
    "legal": "Professional Services",
    "law": "Professional Services",
    "logistics": "Logistics & Transportation",
    "transportation": "Logistics & Transportation",
    "shipping": "Logistics & Transportation",
    "retail": "Retail & Consumer Goods",
    "consumer goods": "Retail & Consumer Goods",
    "telecommunications": "Telecommunications",
    "telecom": "Telecommunications",
    "manufacturing": "Manufacturing & Industrial",
    "industrial": "Manufacturing & Industrial",
    "education": "Education & Training",
    "training": "Education & Training",
    "energy": "Energy & Utilities",
    "utilities": "Energy & Utilities",
    "government": "Government & Nonprofit",
    "nonprofit": "Government & Nonprofit",
    "media": "Media & Advertising",
    "advertising": "Media & Advertising",
    "healthcare": "Healthcare & Pharmaceutical",
    "medical": "Healthcare & Pharmaceutical",
    "pharmaceutical": "Healthcare & Pharmaceutical",
    "agriculture": "Agriculture",
    "personal services": "Personal Services",
}

NOTES_SEPARATOR = " | "
NOTES_MIN_LENGTH = 3
NOTES_MAX_LENGTH = 100
