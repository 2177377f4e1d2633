"""Searchbug people-search API integration.

Three products share one request shape (``GET <base>/<path>?key=...``
with split first/last name and parsed address parts) and differ only in
endpoint, accepted parameters, and which mapping table normalizes their
``results`` list.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from brokerscan.brokers.descriptor import BrokerDescriptor, SearchQuery
from brokerscan.core.constants import Confidence
from brokerscan.core.errors import ConfigurationError, TransportError
from brokerscan.core.settings import Settings
from brokerscan.normalization.address_formatter import parse_address
from brokerscan.normalization.field_extractor import (
    BACKGROUND_CHECK_FIELDS,
    CRIMINAL_RECORD_FIELDS,
    PEOPLE_SEARCH_FIELDS,
    FieldRule,
)
from brokerscan.normalization.name_normalizer import split_full_name
from brokerscan.normalization.record_normalizer import normalize_records
from brokerscan.normalization.result_aggregator import NormalizedResult, aggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchbugProduct:
    key: str
    path: str
    table: tuple[FieldRule, ...]
    confidence: Confidence
    params: tuple[str, ...]

    @property
    def search_method(self) -> str:
        return f"searchbug_{self.key}"


PEOPLE = SearchbugProduct(
    key="people",
    path="ppl.aspx",
    table=PEOPLE_SEARCH_FIELDS,
    confidence=Confidence.MEDIUM,
    params=("first", "last", "address", "city", "state", "zip", "phone", "email"),
)
BACKGROUND = SearchbugProduct(
    key="background",
    path="bkg.aspx",
    table=BACKGROUND_CHECK_FIELDS,
    confidence=Confidence.HIGH,
    params=("first", "last", "address", "city", "state", "phone"),
)
CRIMINAL = SearchbugProduct(
    key="criminal",
    path="crim.aspx",
    table=CRIMINAL_RECORD_FIELDS,
    confidence=Confidence.HIGH,
    params=("first", "last", "state"),
)

# Broker name -> product, as the brokers appear in a roster.
SEARCHBUG_PRODUCTS: dict[str, SearchbugProduct] = {
    "Searchbug People Search": PEOPLE,
    "Searchbug Background Check": BACKGROUND,
    "Searchbug Criminal Records": CRIMINAL,
}


def find_product(name: str) -> SearchbugProduct | None:
    """Look a product up by roster broker name or by product key."""
    product = SEARCHBUG_PRODUCTS.get(name)
    if product is not None:
        return product
    return next((p for p in SEARCHBUG_PRODUCTS.values() if p.key == name.strip().lower()), None)


def build_params(query: SearchQuery, product: SearchbugProduct) -> dict[str, str]:
    """Query-string parameters for *product*, without the API key."""
    first, last = split_full_name(query.full_name)
    address = parse_address(query.address)
    candidates = {
        "first": first,
        "last": last,
        "address": address.get("street") or address.get("full_address", ""),
        "city": address.get("city", ""),
        "state": address.get("state", ""),
        "zip": address.get("zip", ""),
        "phone": query.phone or "",
        "email": query.email or "",
    }
    params = {name: candidates[name] for name in product.params}
    params["format"] = "json"
    return params


class SearchbugStrategy:
    """Broker strategy for one Searchbug product."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient, product: SearchbugProduct) -> None:
        self.settings = settings
        self.client = client
        self.product = product

    async def fetch_results(self, query: SearchQuery, source: str) -> list[dict[str, Any]]:
        api_key = self.settings.searchbug_api_key
        if not api_key:
            raise ConfigurationError("SEARCHBUG_API_KEY is not configured")

        url = f"{self.settings.searchbug_base_url.rstrip('/')}/{self.product.path}"
        params = {"key": api_key, **build_params(query, self.product)}
        try:
            response = await self.client.get(
                url,
                params=params,
                headers={
                    "User-Agent": self.settings.http_user_agent,
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"Searchbug {self.product.key} API returned HTTP {exc.response.status_code}",
                broker=source,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Searchbug {self.product.key} request failed: {exc}", broker=source) from exc
        except ValueError as exc:
            raise TransportError(f"Searchbug {self.product.key} returned malformed JSON", broker=source) from exc

        if not isinstance(payload, dict):
            raise TransportError(f"Searchbug {self.product.key} returned an unexpected payload", broker=source)

        results = payload.get("results") or []
        if not isinstance(results, list):
            raise TransportError(f"Searchbug {self.product.key} 'results' is not a list", broker=source)
        return [item for item in results if isinstance(item, dict)]

    async def __call__(self, descriptor: BrokerDescriptor, query: SearchQuery) -> NormalizedResult:
        results = await self.fetch_results(query.cleaned(), descriptor.name)
        logger.info("Searchbug %s returned %d result(s)", self.product.key, len(results))

        output = normalize_records(results, descriptor.name, self.product.table)
        return aggregate(
            output,
            source=descriptor.name,
            searched_name=query.full_name,
            confidence=self.product.confidence,
            metadata={"search_method": self.product.search_method},
        )
