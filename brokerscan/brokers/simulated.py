"""Simulated broker lookup.

Public broker sites have no API, and scraping them is out of scope, so the
default strategy produces placeholder data.  Whether a broker "has" the
subject comes from the match-likelihood provider; on a match one raw item
is synthesized from the broker's declared data types and sent through the
normal normalization pipeline, so downstream code sees the same shapes a
real integration produces.

Every placeholder value is derived from a hash of (broker, field, name):
repeated scans of the same name return identical results.
"""
from __future__ import annotations

import logging
from typing import Any

from brokerscan.brokers.descriptor import BrokerDescriptor, SearchQuery
from brokerscan.brokers.likelihood import HashedLikelihoodProvider, MatchLikelihoodProvider, unit_hash
from brokerscan.core.constants import TIER_CONFIDENCE, Confidence, RiskLevel
from brokerscan.normalization.field_extractor import PEOPLE_SEARCH_FIELDS
from brokerscan.normalization.name_normalizer import clean_name, split_full_name
from brokerscan.normalization.record_normalizer import normalize_records
from brokerscan.normalization.result_aggregator import NormalizedResult, aggregate

logger = logging.getLogger(__name__)

# Data types a broker of each tier will show on a simulated match.
_TIER_EXPOSURE: dict[RiskLevel, frozenset[str]] = {
    RiskLevel.HIGH: frozenset({
        "name", "age", "address", "address_history", "phone", "email",
        "relatives", "social_media",
    }),
    RiskLevel.MEDIUM: frozenset({"name", "age", "address", "phone"}),
    RiskLevel.LOW: frozenset({"name"}),
}

_CITIES: tuple[tuple[str, str, str], ...] = (
    ("Springfield", "IL", "62701"),
    ("Columbus", "OH", "43004"),
    ("Austin", "TX", "73301"),
    ("Portland", "OR", "97201"),
    ("Raleigh", "NC", "27601"),
    ("Madison", "WI", "53703"),
    ("Tucson", "AZ", "85701"),
    ("Albany", "NY", "12207"),
)
_STREETS: tuple[str, ...] = ("Main St", "Oak Ave", "Maple Dr", "Cedar Ln", "Pine St", "Elm Ct")
_RELATIVE_FIRST_NAMES: tuple[str, ...] = ("Alex", "Chris", "Jordan", "Morgan", "Sam", "Taylor")


class _Draw:
    """Deterministic placeholder values for one (broker, name) pair."""

    def __init__(self, broker: str, name: str) -> None:
        self._prefix = f"{broker}:{clean_name(name).lower()}"

    def number(self, label: str, low: int, high: int) -> int:
        return low + int(unit_hash(f"{self._prefix}:{label}") * (high - low + 1))

    def choice(self, label: str, options: tuple[Any, ...]) -> Any:
        return options[self.number(label, 0, len(options) - 1)]

    def address(self, label: str) -> dict[str, str]:
        city, state, postal = self.choice(f"{label}:city", _CITIES)
        return {
            "streetAddress": f"{self.number(f'{label}:num', 100, 9899)} {self.choice(f'{label}:street', _STREETS)}",
            "addressLocality": city,
            "addressRegion": state,
            "postalCode": postal,
        }


def synthesize_item(descriptor: BrokerDescriptor, query: SearchQuery) -> dict[str, Any]:
    """Build one placeholder raw item for *descriptor* and *query*."""
    exposed = descriptor.data_types & _TIER_EXPOSURE[descriptor.risk_level]
    draw = _Draw(descriptor.name, query.full_name)
    first, last = split_full_name(query.full_name)

    item: dict[str, Any] = {"name": clean_name(query.full_name)}
    if "age" in exposed:
        item["age"] = draw.number("age", 25, 74)
    if "address" in exposed:
        item["address"] = draw.address("current")
    if "address_history" in exposed:
        item["previous_addresses"] = [draw.address("previous-1"), draw.address("previous-2")]
    if "phone" in exposed:
        item["phones"] = [f"({draw.number('area', 201, 989)}) 555-{draw.number('line', 100, 199):04d}"]
    if "email" in exposed and first:
        local = f"{first}.{last}".strip(".").lower().replace(" ", "")
        item["emails"] = [f"{local}@example.com"]
    if "relatives" in exposed and last:
        item["relatives"] = [f"{draw.choice('relative', _RELATIVE_FIRST_NAMES)} {last}"]
    if "social_media" in exposed:
        item["social_media"] = [f"{descriptor.url.rstrip('/')}/profile/{draw.number('profile', 10000, 99999)}"]
    return item


class SimulatedBrokerStrategy:
    """Default strategy for brokers without a real integration."""

    def __init__(self, likelihood: MatchLikelihoodProvider | None = None) -> None:
        self.likelihood = likelihood or HashedLikelihoodProvider()

    async def __call__(self, descriptor: BrokerDescriptor, query: SearchQuery) -> NormalizedResult:
        matched = self.likelihood.should_show_results(
            query.full_name, descriptor.base_probability, salt=descriptor.name
        )
        raw_items = [synthesize_item(descriptor, query)] if matched else []
        logger.debug("Simulated lookup on %s: matched=%s", descriptor.name, matched)

        output = normalize_records(raw_items, descriptor.name, PEOPLE_SEARCH_FIELDS)
        return aggregate(
            output,
            source=descriptor.name,
            searched_name=query.full_name,
            confidence=TIER_CONFIDENCE.get(descriptor.risk_level, Confidence.MEDIUM),
            metadata={"search_method": "simulated"},
        )
