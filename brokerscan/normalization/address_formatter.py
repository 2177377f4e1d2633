"""Address formatter.

Brokers hand back addresses in three shapes: a ready-made display string,
a structured mapping (schema.org ``PostalAddress`` keys, or their
snake_case equivalents), or nothing at all.  ``format_address`` reduces all
of them to one display string and never raises: anything unrecognised is
coerced with ``str()``.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

# Output order is fixed: street -> locality -> region -> postal code.
# Each part accepts its schema.org key first, then snake_case aliases.
_PARTS: tuple[tuple[str, ...], ...] = (
    ("streetAddress", "street_address", "street"),
    ("addressLocality", "city", "locality"),
    ("addressRegion", "state", "region"),
    ("postalCode", "zip_code", "zip", "postal_code"),
)

_STATE_ZIP_RE = re.compile(r"^(.+?)\s+(\d{5}(?:-\d{4})?)$")


def _part(address: Mapping[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = address.get(key)
        if value not in (None, ""):
            return str(value)
    return None


def format_address(value: Any) -> str:
    """Return a single display string for *value*.

    ``None`` and ``""`` give ``""``; strings pass through unchanged;
    mappings are comma-joined from whichever sub-parts are present.
    """
    if value is None or value == "":
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        parts = [_part(value, keys) for keys in _PARTS]
        return ", ".join(p for p in parts if p)
    return str(value)


def format_addresses(value: Any) -> list[str]:
    """Format a list of addresses element-wise.

    A single (non-list) address is wrapped in a one-element list.
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [format_address(item) for item in value]
    return [format_address(value)]


def parse_address(text: str | None) -> dict[str, str]:
    """Split ``"street, city, ST 12345"`` into its components.

    Returns ``{"street", "city", "state", "zip"}`` when the text has at
    least three comma-separated parts and the last one ends in a ZIP code,
    ``{"full_address": text}`` otherwise, and ``{}`` for empty input.
    """
    if not text or not text.strip():
        return {}

    parts = [part.strip() for part in text.split(",")]
    if len(parts) >= 3:
        street, city, state_zip = parts[0], parts[1], parts[2]
        match = _STATE_ZIP_RE.match(state_zip)
        if match:
            return {
                "street": street,
                "city": city,
                "state": match.group(1),
                "zip": match.group(2),
            }

    return {"full_address": text.strip()}
