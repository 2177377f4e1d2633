"""Result aggregator: NormalizationOutput -> one flattened result.

The first normalized record is the *primary* record and its fields are
hoisted to the top level of ``details``.  Records are not ranked or merged;
the remaining records are still available under ``details["records"]``.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from brokerscan.core import constants as c
from brokerscan.core.constants import Confidence
from brokerscan.normalization.field_extractor import SKIP_TRACE_FIELDS, FieldRule
from brokerscan.normalization.record_normalizer import (
    NormalizationOutput,
    NormalizedRecord,
    normalize_records,
)
from brokerscan.scan.results import BrokerResult

# Raw keys echoed by skip-trace sources that describe the search itself.
_SEARCH_METADATA_KEYS: dict[str, str] = {
    "Search Option": "search_option",
    "Input Given": "input_given",
}


@dataclass(frozen=True)
class NormalizedResult:
    """What a broker lookup yields before the scan envelope is added."""

    data_found: tuple[str, ...]
    description: str
    details: dict[str, Any] = field(default_factory=dict)
    confidence: Confidence = Confidence.MEDIUM
    success: bool = True


def describe(source: str, output: NormalizationOutput, searched_name: str) -> str:
    if output.data_found:
        return (
            f"{source} found {len(output.records)} record(s) with "
            f"{len(output.data_found)} data categories: {', '.join(output.data_found)}"
        )
    return f"{source} searched but found no matching records for {searched_name}"


def _first(values: Any) -> Any:
    if isinstance(values, Sequence) and not isinstance(values, str):
        return values[0] if values else None
    return values


def _primary_phone(phones: Any) -> Any:
    first = _first(phones)
    if isinstance(first, Mapping):
        return first.get("number")
    return first


def _flatten(primary: NormalizedRecord | None) -> dict[str, Any]:
    if primary is None:
        return {}
    flat = dict(primary.fields)
    flat["phones"] = flat.get(c.PHONES) or []
    flat["emails"] = flat.get(c.EMAILS) or []
    flat["phone"] = _primary_phone(flat["phones"])
    flat["email"] = _first(flat["emails"])
    flat["current_address"] = primary.fields.get(c.ADDRESS) or primary.fields.get(c.LIVES_IN)
    flat["person_link"] = primary.fields.get(c.PROFILE_LINK)
    return flat


def aggregate(
    output: NormalizationOutput,
    *,
    source: str,
    searched_name: str,
    confidence: Confidence = Confidence.MEDIUM,
    metadata: Mapping[str, Any] | None = None,
) -> NormalizedResult:
    """Collapse *output* into a :class:`NormalizedResult`."""
    primary = output.records[0] if output.records else None

    search_metadata = dict(metadata or {})
    if primary is not None:
        for raw_key, key in _SEARCH_METADATA_KEYS.items():
            if raw_key in primary.extras:
                search_metadata[key] = primary.extras[raw_key]

    details: dict[str, Any] = {
        "total_records": len(output.records),
        "records": [record.to_dict() for record in output.records],
        **_flatten(primary),
    }
    if search_metadata:
        details["search_metadata"] = search_metadata

    return NormalizedResult(
        data_found=output.data_found,
        description=describe(source, output, searched_name),
        details=details,
        confidence=confidence,
    )


def normalize_one(
    source: str,
    raw_items: Sequence[Mapping[str, Any]] | None,
    *,
    searched_name: str,
    table: tuple[FieldRule, ...] = SKIP_TRACE_FIELDS,
    confidence: Confidence = Confidence.HIGH,
    metadata: Mapping[str, Any] | None = None,
    url: str | None = None,
) -> BrokerResult:
    """Normalize one source's raw items into a finished :class:`BrokerResult`.

    Single-broker entry point used by the quick-search path.
    """
    output = normalize_records(raw_items, source, table)
    result = aggregate(
        output,
        source=source,
        searched_name=searched_name,
        confidence=confidence,
        metadata=metadata,
    )
    return BrokerResult(
        broker=source,
        success=True,
        data_found=result.data_found,
        description=result.description,
        details=result.details,
        confidence=result.confidence,
        scanned_at=datetime.now(timezone.utc),
        url=url,
    )
