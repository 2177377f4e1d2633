"""Broker strategy registry: maps broker name to its lookup strategy.

Usage
-----
    registry = BrokerRegistry(default=SimulatedBrokerStrategy())
    registry.register("Searchbug People Search", SearchbugStrategy(...))

    strategy = registry.get(descriptor.name)
    result = await strategy(descriptor, query)

Rules
-----
- New brokers are added by registering a strategy, never by branching on
  the broker name inside a strategy.
- ``get()`` falls back to the default strategy for unregistered names and
  raises ``KeyError`` when there is no default.
- Strategies raise ``TransportError`` / ``ConfigurationError`` only for
  transport or configuration failures; "no data" is an ordinary result.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

import httpx

from brokerscan.brokers.descriptor import BrokerDescriptor, SearchQuery

if TYPE_CHECKING:
    from brokerscan.core.settings import Settings
    from brokerscan.normalization.result_aggregator import NormalizedResult


class BrokerStrategy(Protocol):
    async def __call__(self, descriptor: BrokerDescriptor, query: SearchQuery) -> NormalizedResult:
        ...


class BrokerRegistry:
    """In-memory registry of broker lookup strategies."""

    def __init__(
        self,
        strategies: dict[str, BrokerStrategy] | None = None,
        *,
        default: BrokerStrategy | None = None,
    ) -> None:
        self._strategies: dict[str, BrokerStrategy] = dict(strategies or {})
        self._default = default

    def register(self, name: str, strategy: BrokerStrategy) -> None:
        """Register (or replace) the strategy for broker *name*."""
        if not name or not name.strip():
            raise ValueError("broker name must be a non-empty string")
        self._strategies[name] = strategy

    def get(self, name: str) -> BrokerStrategy:
        """Return the strategy for *name*, else the default strategy."""
        strategy = self._strategies.get(name, self._default)
        if strategy is None:
            raise KeyError(f"No strategy registered for broker {name!r} and no default set")
        return strategy

    def names(self) -> list[str]:
        """Return explicitly registered broker names, sorted."""
        return sorted(self._strategies)

    @classmethod
    def default(cls, settings: Settings, client: httpx.AsyncClient) -> BrokerRegistry:
        """Registry with the simulated fallback and every API integration."""
        from brokerscan.brokers.searchbug import SEARCHBUG_PRODUCTS, SearchbugStrategy
        from brokerscan.brokers.simulated import SimulatedBrokerStrategy
        from brokerscan.brokers.skip_trace import SKIP_TRACE_SOURCE, SkipTraceStrategy

        registry = cls(default=SimulatedBrokerStrategy())
        registry.register(SKIP_TRACE_SOURCE, SkipTraceStrategy(settings, client))
        for name, product in SEARCHBUG_PRODUCTS.items():
            registry.register(name, SearchbugStrategy(settings, client, product))
        return registry
