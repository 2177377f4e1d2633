"""Record normalizer: all raw items from one source -> NormalizedRecords.

Runs the field extractor over every item, formats address-shaped fields,
and unions the per-item data categories into one ordered ``data_found``
tuple.  Message composition belongs to the result aggregator; an empty
input simply yields empty output.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from brokerscan.core import constants as c
from brokerscan.normalization.address_formatter import format_address, format_addresses
from brokerscan.normalization.field_extractor import (
    FieldRule,
    extract_fields,
    is_usable,
    mapped_keys,
)


@dataclass(frozen=True)
class NormalizedRecord:
    """One raw item reduced to canonical fields.

    ``extras`` holds usable raw keys that no mapping consumed; they are
    kept for reference but never count as canonical fields.
    """

    record_id: int
    source: str
    fields: dict[str, Any] = field(default_factory=dict)
    extras: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "source": self.source,
            **self.fields,
            "additional": dict(self.extras),
        }


@dataclass(frozen=True)
class NormalizationOutput:
    records: tuple[NormalizedRecord, ...]
    data_found: tuple[str, ...]


def _format_address_fields(fields: dict[str, Any]) -> dict[str, Any]:
    formatted = dict(fields)
    if c.ADDRESS in formatted:
        formatted[c.ADDRESS] = format_address(formatted[c.ADDRESS])
    if c.PREVIOUS_ADDRESSES in formatted:
        formatted[c.PREVIOUS_ADDRESSES] = format_addresses(formatted[c.PREVIOUS_ADDRESSES])
    return formatted


def normalize_record(
    item: Mapping[str, Any],
    *,
    record_id: int,
    source: str,
    table: tuple[FieldRule, ...],
) -> tuple[NormalizedRecord, tuple[str, ...]]:
    """Normalize a single raw *item*; return the record and its categories."""
    extracted = extract_fields(item, table)
    consumed = mapped_keys(table)
    extras = {
        key: value
        for key, value in item.items()
        if key not in consumed and is_usable(value)
    }
    record = NormalizedRecord(
        record_id=record_id,
        source=source,
        fields=_format_address_fields(extracted.fields),
        extras=extras,
    )
    return record, extracted.categories


def normalize_records(
    raw_items: Sequence[Mapping[str, Any]] | None,
    source: str,
    table: tuple[FieldRule, ...],
) -> NormalizationOutput:
    """Normalize every item in *raw_items* (``None`` is treated as empty)."""
    records: list[NormalizedRecord] = []
    data_found: list[str] = []

    for index, item in enumerate(raw_items or ()):
        record, categories = normalize_record(
            item, record_id=index + 1, source=source, table=table
        )
        records.append(record)
        for category in categories:
            if category not in data_found:
                data_found.append(category)

    return NormalizationOutput(records=tuple(records), data_found=tuple(data_found))
