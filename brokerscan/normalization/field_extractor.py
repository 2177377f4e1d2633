"""Field extractor: raw broker item -> canonical fields.

A mapping table is an ordered tuple of mapping objects.  Each mapping knows
which canonical field it fills, which data-category label it reports, and
how to pull a usable value out of one raw item.  Extraction is a pure
function of (item, table): no I/O, no counters, no timestamps.

Mapping kinds
-------------
FieldMapping          : first usable candidate key wins
ListFieldMapping      : like FieldMapping, but the value is always a list
CompositeFieldMapping : joins several raw keys ("First Name" + "Last Name")
AddressFieldMapping   : gathers column-style address parts into a mapping
IndexedFieldMapping   : collects "Phone-1".."Phone-5" style columns, with
                        optional per-index sub-keys, into an ordered list

Mappings may carry *anchors*: raw keys of which at least one must be usable
before the mapping yields anything.  Skip-trace region and postal code only
count as an address when a street, locality or "Lives in" value is present.

A value is *usable* iff it is not ``None``, not blank, not the
``"Person Not Found"`` sentinel and not an empty list or mapping.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from brokerscan.core import constants as c


def is_usable(value: Any) -> bool:
    """Return True if *value* carries real data."""
    if value is None:
        return False
    if isinstance(value, str):
        stripped = value.strip()
        return bool(stripped) and stripped != c.NOT_FOUND_SENTINEL
    if isinstance(value, (list, tuple, dict, set, frozenset)):
        return len(value) > 0
    return True


def _anchored(item: Mapping[str, Any], anchors: tuple[str, ...]) -> bool:
    return not anchors or any(is_usable(item.get(key)) for key in anchors)


# --------------------------------------------------------------------------
# Mapping kinds
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldMapping:
    field: str
    keys: tuple[str, ...]
    category: str
    anchors: tuple[str, ...] = ()

    def extract(self, item: Mapping[str, Any]) -> Any:
        if not _anchored(item, self.anchors):
            return None
        for key in self.keys:
            value = item.get(key)
            if is_usable(value):
                return value
        return None

    def raw_keys(self) -> tuple[str, ...]:
        return self.keys


@dataclass(frozen=True)
class ListFieldMapping(FieldMapping):
    def extract(self, item: Mapping[str, Any]) -> list[Any] | None:
        value = super().extract(item)
        if value is None:
            return None
        if isinstance(value, (list, tuple)):
            items = [v for v in value if is_usable(v)]
            return items or None
        return [value]


@dataclass(frozen=True)
class CompositeFieldMapping:
    field: str
    parts: tuple[str, ...]
    category: str
    separator: str = " "

    def extract(self, item: Mapping[str, Any]) -> str | None:
        values = [str(item[key]).strip() for key in self.parts if is_usable(item.get(key))]
        if not values:
            return None
        return self.separator.join(values)

    def raw_keys(self) -> tuple[str, ...]:
        return self.parts


@dataclass(frozen=True)
class AddressFieldMapping:
    """Build a structured address from separate raw columns.

    *parts* maps a structured key (``streetAddress``, ``addressLocality``,
    ``addressRegion``, ``postalCode``) to the raw column holding it.
    """

    field: str
    parts: tuple[tuple[str, str], ...]
    category: str
    anchors: tuple[str, ...] = ()

    def extract(self, item: Mapping[str, Any]) -> dict[str, Any] | None:
        if not _anchored(item, self.anchors):
            return None
        address = {
            structured: item[raw]
            for structured, raw in self.parts
            if is_usable(item.get(raw))
        }
        return address or None

    def raw_keys(self) -> tuple[str, ...]:
        return tuple(raw for _, raw in self.parts)


@dataclass(frozen=True)
class IndexedFieldMapping:
    """Collect ``<template>`` columns for indexes 1..count into a list.

    *key_template* is formatted with ``index``, e.g. ``"Phone-{index}"``.
    With *subkeys*, each element is a mapping holding the main value under
    *value_key* plus every usable sub-value; ``subkeys`` maps the output key
    to a suffix appended to the indexed column name.
    """

    field: str
    key_template: str
    category: str
    count: int = 5
    value_key: str = "number"
    subkeys: tuple[tuple[str, str], ...] = ()

    def extract(self, item: Mapping[str, Any]) -> list[Any] | None:
        collected: list[Any] = []
        for index in range(1, self.count + 1):
            key = self.key_template.format(index=index)
            value = item.get(key)
            if not is_usable(value):
                continue
            if not self.subkeys:
                collected.append(value)
                continue
            entry = {self.value_key: value}
            for out_key, suffix in self.subkeys:
                sub_value = item.get(f"{key}{suffix}")
                entry[out_key] = sub_value if is_usable(sub_value) else None
            collected.append(entry)
        return collected or None

    def raw_keys(self) -> tuple[str, ...]:
        keys: list[str] = []
        for index in range(1, self.count + 1):
            key = self.key_template.format(index=index)
            keys.append(key)
            keys.extend(f"{key}{suffix}" for _, suffix in self.subkeys)
        return tuple(keys)


FieldRule = FieldMapping | ListFieldMapping | CompositeFieldMapping | AddressFieldMapping | IndexedFieldMapping


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ExtractedFields:
    fields: dict[str, Any]
    categories: tuple[str, ...]


def extract_fields(item: Mapping[str, Any], table: tuple[FieldRule, ...]) -> ExtractedFields:
    """Apply *table* to one raw *item*.

    Mappings are evaluated in table order.  When two mappings target the
    same canonical field, the first one that produced a value wins.
    Categories are reported in first-seen order without duplicates.
    """
    fields: dict[str, Any] = {}
    categories: list[str] = []
    for mapping in table:
        if mapping.field in fields:
            continue
        value = mapping.extract(item)
        if value is None:
            continue
        fields[mapping.field] = value
        if mapping.category not in categories:
            categories.append(mapping.category)
    return ExtractedFields(fields=fields, categories=tuple(categories))


def mapped_keys(table: tuple[FieldRule, ...]) -> frozenset[str]:
    """Return every raw key *table* can consume."""
    keys: set[str] = set()
    for mapping in table:
        keys.update(mapping.raw_keys())
    return frozenset(keys)


# ---------------------------------------------------------------------------
# Built-in tables
# ---------------------------------------------------------------------------

_PHONE_SUBKEYS: tuple[tuple[str, str], ...] = (
    ("type", " Type"),
    ("provider", " Provider"),
    ("first_reported", " First Reported"),
    ("last_reported", " Last Reported"),
)

_ADDRESS_ANCHORS: tuple[str, ...] = ("Street Address", "Address Locality", "Lives in")

# Column-style output of the skip-trace actor ("First Name", "Phone-1", ...).
SKIP_TRACE_FIELDS: tuple[FieldRule, ...] = (
    CompositeFieldMapping(c.NAME, ("First Name", "Last Name"), c.CATEGORY_NAME),
    FieldMapping(c.FIRST_NAME, ("First Name",), c.CATEGORY_NAME),
    FieldMapping(c.LAST_NAME, ("Last Name",), c.CATEGORY_NAME),
    FieldMapping(c.AGE, ("Age",), c.CATEGORY_AGE),
    FieldMapping(c.BIRTH_DATE, ("Born",), c.CATEGORY_BIRTH_DATE),
    AddressFieldMapping(
        c.ADDRESS,
        (
            ("streetAddress", "Street Address"),
            ("addressLocality", "Address Locality"),
            ("addressRegion", "Address Region"),
            ("postalCode", "Postal Code"),
        ),
        c.CATEGORY_ADDRESS,
        anchors=_ADDRESS_ANCHORS,
    ),
    FieldMapping(c.STREET_ADDRESS, ("Street Address",), c.CATEGORY_ADDRESS),
    FieldMapping(c.CITY, ("Address Locality",), c.CATEGORY_ADDRESS),
    FieldMapping(c.STATE, ("Address Region",), c.CATEGORY_ADDRESS, anchors=_ADDRESS_ANCHORS),
    FieldMapping(c.ZIP_CODE, ("Postal Code",), c.CATEGORY_ADDRESS, anchors=_ADDRESS_ANCHORS),
    FieldMapping(c.LIVES_IN, ("Lives in",), c.CATEGORY_ADDRESS),
    FieldMapping(c.COUNTY, ("County Name",), c.CATEGORY_COUNTY),
    FieldMapping(c.PREVIOUS_ADDRESSES, ("Previous Addresses",), c.CATEGORY_ADDRESS_HISTORY),
    IndexedFieldMapping(c.EMAILS, "Email-{index}", c.CATEGORY_EMAIL),
    IndexedFieldMapping(c.PHONES, "Phone-{index}", c.CATEGORY_PHONE, subkeys=_PHONE_SUBKEYS),
    FieldMapping(c.RELATIVES, ("Relatives",), c.CATEGORY_RELATIVES),
    FieldMapping(c.ASSOCIATES, ("Associates",), c.CATEGORY_ASSOCIATES),
    FieldMapping(c.PROFILE_LINK, ("Person Link",), c.CATEGORY_PROFILE_LINK),
)

# snake_case people-search payloads, including synthesized placeholder items.
PEOPLE_SEARCH_FIELDS: tuple[FieldRule, ...] = (
    FieldMapping(c.NAME, ("name", "full_name"), c.CATEGORY_NAME),
    CompositeFieldMapping(c.NAME, ("first_name", "last_name"), c.CATEGORY_NAME),
    ListFieldMapping(c.ALIASES, ("aliases",), c.CATEGORY_ALIASES),
    FieldMapping(c.AGE, ("age",), c.CATEGORY_AGE),
    FieldMapping(c.BIRTH_DATE, ("dob", "birth_date"), c.CATEGORY_BIRTH_DATE),
    FieldMapping(c.ADDRESS, ("address", "current_address"), c.CATEGORY_ADDRESS),
    FieldMapping(c.LIVES_IN, ("lives_in",), c.CATEGORY_ADDRESS),
    ListFieldMapping(c.PREVIOUS_ADDRESSES, ("previous_addresses",), c.CATEGORY_ADDRESS_HISTORY),
    ListFieldMapping(c.PHONES, ("phones", "phone_numbers", "phone", "phone_number"), c.CATEGORY_PHONE),
    ListFieldMapping(c.EMAILS, ("emails", "email_addresses", "email", "email_address"), c.CATEGORY_EMAIL),
    FieldMapping(c.RELATIVES, ("relatives",), c.CATEGORY_RELATIVES),
    FieldMapping(c.ASSOCIATES, ("associates",), c.CATEGORY_ASSOCIATES),
    FieldMapping(c.SOCIAL_MEDIA, ("social_media", "social_profiles"), c.CATEGORY_SOCIAL_MEDIA),
    FieldMapping(c.CRIMINAL_RECORDS, ("criminal_records",), c.CATEGORY_CRIMINAL_RECORDS),
    FieldMapping(c.COURT_RECORDS, ("court_records",), c.CATEGORY_COURT_RECORDS),
    FieldMapping(c.PROPERTY_RECORDS, ("property_records",), c.CATEGORY_PROPERTY_RECORDS),
    FieldMapping(c.BANKRUPTCY_RECORDS, ("bankruptcy_records", "bankruptcies"), c.CATEGORY_BANKRUPTCY_RECORDS),
    FieldMapping(c.EDUCATION, ("education",), c.CATEGORY_EDUCATION),
    FieldMapping(c.EMPLOYMENT, ("employment", "work_history"), c.CATEGORY_EMPLOYMENT),
    FieldMapping(c.BUSINESS_RECORDS, ("business_records",), c.CATEGORY_BUSINESS_RECORDS),
    FieldMapping(c.PROFESSIONAL_LICENSES, ("professional_licenses",), c.CATEGORY_PROFESSIONAL_LICENSES),
    FieldMapping(c.PROFILE_LINK, ("profile_link", "person_link", "url"), c.CATEGORY_PROFILE_LINK),
)

BACKGROUND_CHECK_FIELDS: tuple[FieldRule, ...] = (
    FieldMapping(c.NAME, ("name",), c.CATEGORY_NAME),
    FieldMapping(c.ADDRESS, ("address",), c.CATEGORY_ADDRESS),
    ListFieldMapping(c.PHONES, ("phones", "phone"), c.CATEGORY_PHONE),
    FieldMapping(c.CRIMINAL_RECORDS, ("criminal_records",), c.CATEGORY_CRIMINAL_RECORDS),
    FieldMapping(c.COURT_RECORDS, ("court_records",), c.CATEGORY_COURT_RECORDS),
    FieldMapping(c.EVICTIONS, ("evictions",), c.CATEGORY_EVICTIONS),
    FieldMapping(c.LIENS, ("liens",), c.CATEGORY_LIENS),
)

CRIMINAL_RECORD_FIELDS: tuple[FieldRule, ...] = (
    FieldMapping(c.NAME, ("name",), c.CATEGORY_NAME),
    FieldMapping(c.CRIMINAL_RECORDS, ("records", "criminal_records"), c.CATEGORY_CRIMINAL_RECORDS),
)
