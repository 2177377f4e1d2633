"""Phone number formatting for outbound search parameters.

People-search APIs match best on the US national display form
``(212) 555-1234``.  Numbers that ``phonenumbers`` cannot parse or
validate are handed back unchanged so the caller can still send them.

Safety rule: raw values are never logged.
"""
from __future__ import annotations

import logging

import phonenumbers

logger = logging.getLogger(__name__)

_DEFAULT_REGION = "US"


def format_phone(raw: str | None, *, default_region: str = _DEFAULT_REGION) -> str | None:
    """Return *raw* in national display format.

    Returns ``None`` for empty input and *raw* itself (stripped) when it
    is not a valid number for *default_region*.  Never raises.
    """
    if not raw or not raw.strip():
        return None

    try:
        parsed = phonenumbers.parse(raw, default_region)
    except phonenumbers.NumberParseException:
        logger.debug("phone_normalizer: could not parse input (length=%d)", len(raw))
        return raw.strip()

    if not phonenumbers.is_valid_number(parsed):
        logger.debug("phone_normalizer: parsed but invalid number")
        return raw.strip()

    if phonenumbers.region_code_for_number(parsed) != default_region:
        return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.INTERNATIONAL)
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.NATIONAL)
