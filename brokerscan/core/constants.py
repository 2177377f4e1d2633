"""Canonical field names, data-category labels and shared enumerations.

Every broker-specific raw shape is reduced to the canonical fields below.
Category labels are the human-facing "Data Found" badges; a record that
populates several canonical fields may still surface a single label (street,
city, state and zip all report ``Address``).
"""
from __future__ import annotations

from enum import Enum


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Confidence(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RemovalStatus(str, Enum):
    PENDING = "pending"
    SUBMITTED = "submitted"
    COMPLETED = "completed"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Canonical fields
# ---------------------------------------------------------------------------

NAME = "name"
FIRST_NAME = "first_name"
LAST_NAME = "last_name"
ALIASES = "aliases"
AGE = "age"
BIRTH_DATE = "birth_date"
ADDRESS = "address"
STREET_ADDRESS = "street_address"
CITY = "city"
STATE = "state"
ZIP_CODE = "zip_code"
LIVES_IN = "lives_in"
COUNTY = "county"
PREVIOUS_ADDRESSES = "previous_addresses"
PHONES = "phones"
EMAILS = "emails"
RELATIVES = "relatives"
ASSOCIATES = "associates"
PROFILE_LINK = "profile_link"
SOCIAL_MEDIA = "social_media"
CRIMINAL_RECORDS = "criminal_records"
COURT_RECORDS = "court_records"
PROPERTY_RECORDS = "property_records"
BANKRUPTCY_RECORDS = "bankruptcy_records"
EVICTIONS = "evictions"
LIENS = "liens"
EDUCATION = "education"
EMPLOYMENT = "employment"
BUSINESS_RECORDS = "business_records"
PROFESSIONAL_LICENSES = "professional_licenses"

CANONICAL_FIELDS: frozenset[str] = frozenset({
    NAME, FIRST_NAME, LAST_NAME, ALIASES, AGE, BIRTH_DATE,
    ADDRESS, STREET_ADDRESS, CITY, STATE, ZIP_CODE, LIVES_IN, COUNTY,
    PREVIOUS_ADDRESSES, PHONES, EMAILS, RELATIVES, ASSOCIATES,
    PROFILE_LINK, SOCIAL_MEDIA, CRIMINAL_RECORDS, COURT_RECORDS,
    PROPERTY_RECORDS, BANKRUPTCY_RECORDS, EVICTIONS, LIENS, EDUCATION,
    EMPLOYMENT, BUSINESS_RECORDS, PROFESSIONAL_LICENSES,
})

# Fields whose values go through the address formatter during normalization.
ADDRESS_FIELDS: frozenset[str] = frozenset({ADDRESS, PREVIOUS_ADDRESSES})

# ---------------------------------------------------------------------------
# Data-category labels
# ---------------------------------------------------------------------------

CATEGORY_NAME = "Name"
CATEGORY_ALIASES = "Aliases"
CATEGORY_AGE = "Age"
CATEGORY_BIRTH_DATE = "Birth Date"
CATEGORY_ADDRESS = "Address"
CATEGORY_COUNTY = "County"
CATEGORY_ADDRESS_HISTORY = "Address History"
CATEGORY_EMAIL = "Email"
CATEGORY_PHONE = "Phone"
CATEGORY_RELATIVES = "Relatives"
CATEGORY_ASSOCIATES = "Associates"
CATEGORY_PROFILE_LINK = "Profile Link"
CATEGORY_SOCIAL_MEDIA = "Social Media"
CATEGORY_CRIMINAL_RECORDS = "Criminal Records"
CATEGORY_COURT_RECORDS = "Court Records"
CATEGORY_PROPERTY_RECORDS = "Property Records"
CATEGORY_BANKRUPTCY_RECORDS = "Bankruptcy Records"
CATEGORY_EVICTIONS = "Evictions"
CATEGORY_LIENS = "Liens"
CATEGORY_EDUCATION = "Education"
CATEGORY_EMPLOYMENT = "Employment"
CATEGORY_BUSINESS_RECORDS = "Business Records"
CATEGORY_PROFESSIONAL_LICENSES = "Professional Licenses"

# Raw value some skip-trace sources return instead of omitting the column.
NOT_FOUND_SENTINEL = "Person Not Found"

# Base match probability per risk tier for simulated lookups.
TIER_MATCH_PROBABILITY: dict[RiskLevel, float] = {
    RiskLevel.HIGH: 0.75,
    RiskLevel.MEDIUM: 0.60,
    RiskLevel.LOW: 0.40,
}

# Confidence reported by simulated lookups, by risk tier.
TIER_CONFIDENCE: dict[RiskLevel, Confidence] = {
    RiskLevel.HIGH: Confidence.HIGH,
    RiskLevel.MEDIUM: Confidence.MEDIUM,
    RiskLevel.LOW: Confidence.LOW,
}
