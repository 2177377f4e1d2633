"""FastAPI dependency injection: roster, HTTP client and scan services."""
from __future__ import annotations

from functools import lru_cache

import httpx
from fastapi import Depends, Request

from brokerscan.brokers.descriptor import BrokerDescriptor
from brokerscan.brokers.loader import load_roster
from brokerscan.brokers.registry import BrokerRegistry
from brokerscan.brokers.skip_trace import SkipTraceClient
from brokerscan.core.settings import Settings, get_settings
from brokerscan.scan.orchestrator import BatchScanOrchestrator


@lru_cache(maxsize=1)
def _cached_roster(path: str) -> tuple[BrokerDescriptor, ...]:
    return tuple(load_roster(path))


def get_roster(settings: Settings = Depends(get_settings)) -> tuple[BrokerDescriptor, ...]:
    """Return the broker roster loaded from ``BROKER_ROSTER_PATH``."""
    return _cached_roster(str(settings.broker_roster_path))


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the shared ``httpx.AsyncClient`` opened by the app lifespan."""
    return request.app.state.http_client


def get_registry(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> BrokerRegistry:
    return BrokerRegistry.default(settings, client)


def get_orchestrator(
    settings: Settings = Depends(get_settings),
    roster: tuple[BrokerDescriptor, ...] = Depends(get_roster),
    registry: BrokerRegistry = Depends(get_registry),
) -> BatchScanOrchestrator:
    return BatchScanOrchestrator(
        roster,
        registry,
        batch_delay_s=settings.scan_batch_delay_s,
        call_timeout_s=settings.scan_call_timeout_s,
    )


def get_skip_trace_client(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> SkipTraceClient:
    return SkipTraceClient(settings, client)
