"""Skip-trace people search via an Apify actor.

Runs the configured actor synchronously through the Apify REST API
(``POST /acts/{actor}/run-sync-get-dataset-items``) and normalizes the
returned dataset items, which use spreadsheet-style column names
(``"First Name"``, ``"Phone-1 Provider"``, ...).

- Missing ``APIFY_API_TOKEN`` raises ``ConfigurationError``.
- Network errors, non-2xx responses and non-list payloads raise
  ``TransportError``.
- The searched identity is never logged; only which inputs were present.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

import httpx

from brokerscan.brokers.descriptor import BrokerDescriptor, SearchQuery
from brokerscan.core.constants import Confidence
from brokerscan.core.errors import ConfigurationError, TransportError
from brokerscan.core.settings import Settings
from brokerscan.normalization.field_extractor import SKIP_TRACE_FIELDS
from brokerscan.normalization.record_normalizer import normalize_records
from brokerscan.normalization.result_aggregator import NormalizedResult, aggregate

logger = logging.getLogger(__name__)

SKIP_TRACE_SOURCE = "APIFY Skip Trace"
SEARCH_METHOD = "apify_skip_trace"


def build_actor_input(query: SearchQuery, *, max_results: int) -> dict[str, Any]:
    """Actor input document for *query*; absent fields become empty lists."""
    return {
        "max_results": max_results,
        "name": [query.full_name] if query.full_name else [],
        "street_citystatezip": [query.address] if query.address else [],
        "phone_number": [query.phone] if query.phone else [],
        "email": [query.email] if query.email else [],
    }


class SkipTraceClient:
    """Thin async client for the skip-trace actor."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient) -> None:
        self.settings = settings
        self.client = client

    def _endpoint(self) -> str:
        base = self.settings.apify_base_url.rstrip("/")
        return f"{base}/acts/{self.settings.apify_actor_id}/run-sync-get-dataset-items"

    async def fetch_items(self, query: SearchQuery, *, max_results: int | None = None) -> list[Mapping[str, Any]]:
        """Run the actor for *query* and return its dataset items."""
        token = self.settings.apify_api_token
        if not token:
            raise ConfigurationError("APIFY_API_TOKEN is not configured")

        actor_input = build_actor_input(
            query, max_results=max_results or self.settings.skip_trace_max_results
        )
        logger.info(
            "Skip-trace search started (has_address=%s has_phone=%s has_email=%s max_results=%d)",
            bool(actor_input["street_citystatezip"]),
            bool(actor_input["phone_number"]),
            bool(actor_input["email"]),
            actor_input["max_results"],
        )

        start = time.monotonic()
        try:
            response = await self.client.post(
                self._endpoint(),
                json=actor_input,
                headers={
                    "Authorization": f"Bearer {token}",
                    "User-Agent": self.settings.http_user_agent,
                },
            )
            response.raise_for_status()
            items = response.json()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"Skip-trace actor returned HTTP {exc.response.status_code}",
                broker=SKIP_TRACE_SOURCE,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Skip-trace request failed: {exc}", broker=SKIP_TRACE_SOURCE) from exc
        except ValueError as exc:
            raise TransportError("Skip-trace actor returned malformed JSON", broker=SKIP_TRACE_SOURCE) from exc

        if not isinstance(items, list):
            raise TransportError(
                f"Skip-trace actor returned {type(items).__name__}, expected a list",
                broker=SKIP_TRACE_SOURCE,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info("Skip-trace search finished: %d item(s) in %dms", len(items), elapsed_ms)
        return [item for item in items if isinstance(item, Mapping)]


class SkipTraceStrategy:
    """Broker strategy backed by :class:`SkipTraceClient`."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient) -> None:
        self.api = SkipTraceClient(settings, client)

    async def __call__(self, descriptor: BrokerDescriptor, query: SearchQuery) -> NormalizedResult:
        items = await self.api.fetch_items(query.cleaned())
        output = normalize_records(items, SKIP_TRACE_SOURCE, SKIP_TRACE_FIELDS)
        return aggregate(
            output,
            source=SKIP_TRACE_SOURCE,
            searched_name=query.full_name,
            confidence=Confidence.HIGH,
            metadata={"search_method": SEARCH_METHOD},
        )
