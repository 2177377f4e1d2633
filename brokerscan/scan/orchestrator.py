"""Batch scan orchestrator.

Runs one search against a roster of brokers:

1. Validate the query (blank name -> ``ValidationError``, nothing is called).
2. Keep brokers whose ``priority`` is at or below ``ScanOptions.priority``.
3. Split them into consecutive batches of ``ScanOptions.batch_size``.
4. Run batches strictly one after another; inside a batch every broker
   call runs concurrently and the batch waits for all of them to settle.
5. Sleep ``batch_delay_s`` between batches (not after the last one) to
   keep the outbound request rate low.
6. Fold every ``BrokerResult`` into a ``ScanSummary``.

A broker call that raises, or exceeds ``call_timeout_s``, becomes a failed
``BrokerResult``; it never aborts its batch or the scan.  Results keep
roster order regardless of completion order.
"""
from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Iterator, Sequence
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import TypeVar
from uuid import uuid4

from brokerscan.brokers.descriptor import BrokerDescriptor, SearchQuery
from brokerscan.brokers.registry import BrokerRegistry
from brokerscan.core.constants import RiskLevel
from brokerscan.core.errors import ValidationError
from brokerscan.scan.results import BrokerResult, ScanSummary

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_PRIORITY = 3
DEFAULT_BATCH_SIZE = 5
DEFAULT_BATCH_DELAY_S = 2.0
DEFAULT_CALL_TIMEOUT_S = 30.0


@dataclass(frozen=True)
class ScanOptions:
    priority: int = DEFAULT_PRIORITY
    batch_size: int = DEFAULT_BATCH_SIZE

    def validate(self) -> None:
        if self.batch_size < 1:
            raise ValidationError(f"batch_size must be at least 1, got {self.batch_size}")


def partition(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """Yield consecutive chunks of *items*, each at most *size* long."""
    if size < 1:
        raise ValueError("size must be at least 1")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])


class BatchScanOrchestrator:
    """Scan a broker roster in throttled, failure-isolated batches.

    Parameters
    ----------
    roster:
        Broker descriptors in scan order.  Supplied by the caller; the
        orchestrator holds no process-wide broker state.
    registry:
        Resolves each broker name to its lookup strategy.
    batch_delay_s:
        Pause between consecutive batches.
    call_timeout_s:
        Upper bound for a single broker call; ``None`` disables it.
    sleep:
        Awaitable sleep used for the inter-batch pause (injectable for tests).
    """

    def __init__(
        self,
        roster: Sequence[BrokerDescriptor],
        registry: BrokerRegistry,
        *,
        batch_delay_s: float = DEFAULT_BATCH_DELAY_S,
        call_timeout_s: float | None = DEFAULT_CALL_TIMEOUT_S,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.roster = tuple(roster)
        self.registry = registry
        self.batch_delay_s = batch_delay_s
        self.call_timeout_s = call_timeout_s
        self._sleep = sleep

    # -- public API ---------------------------------------------------------

    def select(self, options: ScanOptions) -> list[BrokerDescriptor]:
        """Return the roster entries included by *options*, in roster order."""
        return [broker for broker in self.roster if broker.priority <= options.priority]

    async def scan(self, query: SearchQuery, options: ScanOptions | None = None) -> ScanSummary:
        """Scan every selected broker for *query*.

        Raises
        ------
        ValidationError
            If ``query.full_name`` is blank or the options are invalid.
            No broker is contacted in that case.
        """
        query.validate()
        options = options or ScanOptions()
        options.validate()

        brokers = self.select(options)
        batches = list(partition(brokers, options.batch_size))
        logger.info(
            "Starting bulk scan: %d broker(s) in %d batch(es) of up to %d",
            len(brokers), len(batches), options.batch_size,
        )

        started_at = datetime.now(timezone.utc)
        start = time.monotonic()
        results: list[BrokerResult] = []

        for number, batch in enumerate(batches, start=1):
            logger.info("Processing batch %d of %d", number, len(batches))
            results.extend(await self._run_batch(batch, query))
            if number < len(batches):
                await self._sleep(self.batch_delay_s)

        duration_ms = int((time.monotonic() - start) * 1000)
        summary = self._summarize(brokers, results, query, options, started_at, duration_ms)
        logger.info(
            "Bulk scan %s completed: scanned=%d with_data=%d data_points=%d duration=%dms",
            summary.scan_id, summary.total_scanned, summary.brokers_with_data,
            summary.total_data_points, duration_ms,
        )
        return summary

    # -- internals ----------------------------------------------------------

    async def _run_batch(self, batch: list[BrokerDescriptor], query: SearchQuery) -> list[BrokerResult]:
        outcomes = await asyncio.gather(
            *(self._scan_one(broker, query) for broker in batch),
            return_exceptions=True,
        )
        results: list[BrokerResult] = []
        for broker, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                if not isinstance(outcome, Exception):
                    raise outcome
                outcome = _failure(broker, str(outcome) or type(outcome).__name__)
            results.append(outcome)
        return results

    async def _scan_one(self, broker: BrokerDescriptor, query: SearchQuery) -> BrokerResult:
        try:
            strategy = self.registry.get(broker.name)
            if self.call_timeout_s is None:
                normalized = await strategy(broker, query)
            else:
                normalized = await asyncio.wait_for(strategy(broker, query), timeout=self.call_timeout_s)
        except TimeoutError:
            logger.warning("Broker %s timed out after %ss", broker.name, self.call_timeout_s)
            return _failure(broker, f"Timed out after {self.call_timeout_s}s")
        except Exception as exc:
            logger.warning("Broker %s failed: %s", broker.name, type(exc).__name__)
            return _failure(broker, str(exc) or type(exc).__name__)

        return BrokerResult(
            broker=broker.name,
            success=normalized.success,
            data_found=tuple(normalized.data_found),
            description=normalized.description,
            details=normalized.details,
            confidence=normalized.confidence,
            scanned_at=datetime.now(timezone.utc),
            url=broker.url,
            risk_level=broker.risk_level,
            priority=broker.priority,
        )

    @staticmethod
    def _summarize(
        brokers: list[BrokerDescriptor],
        results: list[BrokerResult],
        query: SearchQuery,
        options: ScanOptions,
        started_at: datetime,
        duration_ms: int,
    ) -> ScanSummary:
        risk_tier_counts = {level.value: 0 for level in (RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW)}
        for broker, result in zip(brokers, results):
            if result.has_data:
                risk_tier_counts[broker.risk_level.value] += 1

        return ScanSummary(
            scan_id=f"bulk_scan_{uuid4().hex}",
            started_at=started_at,
            duration_ms=duration_ms,
            total_scanned=len(results),
            successful_scans=sum(1 for r in results if r.success is not False),
            brokers_with_data=sum(1 for r in results if r.has_data),
            total_data_points=sum(len(r.data_found) for r in results),
            risk_tier_counts=risk_tier_counts,
            results=tuple(results),
            query=query.to_dict(),
            options=asdict(options),
        )


def _failure(broker: BrokerDescriptor, error: str) -> BrokerResult:
    return BrokerResult(
        broker=broker.name,
        success=False,
        data_found=(),
        description=f"Scan failed: {error}",
        details={},
        confidence=None,
        scanned_at=datetime.now(timezone.utc),
        url=broker.url,
        risk_level=broker.risk_level,
        priority=broker.priority,
        error=error,
    )
