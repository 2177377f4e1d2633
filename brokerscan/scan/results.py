"""Scan result types.

``BrokerResult`` is one broker's outcome inside a scan; ``ScanSummary``
is the whole run.  Both are built once and never mutated.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from brokerscan.core.constants import Confidence, RiskLevel


@dataclass(frozen=True)
class BrokerResult:
    broker: str
    success: bool
    data_found: tuple[str, ...]
    description: str
    details: dict[str, Any]
    confidence: Confidence | None
    scanned_at: datetime
    url: str | None = None
    risk_level: RiskLevel | None = None
    priority: int | None = None
    error: str | None = None

    @property
    def has_data(self) -> bool:
        return len(self.data_found) > 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BrokerResult:
        """Rebuild a result from the shape produced by :meth:`to_dict`."""
        timestamp = data.get("scan_timestamp")
        risk_level = data.get("risk_level")
        confidence = data.get("confidence")
        return cls(
            broker=data["broker"],
            success=data.get("success", True),
            data_found=tuple(data.get("data_found") or ()),
            description=data.get("description", ""),
            details=dict(data.get("details") or {}),
            confidence=Confidence(confidence) if confidence else None,
            scanned_at=datetime.fromisoformat(timestamp) if timestamp else datetime.now(timezone.utc),
            url=data.get("url"),
            risk_level=RiskLevel(risk_level) if risk_level else None,
            priority=data.get("priority"),
            error=data.get("error"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "broker": self.broker,
            "url": self.url,
            "risk_level": self.risk_level.value if self.risk_level else None,
            "priority": self.priority,
            "success": self.success,
            "data_found": list(self.data_found),
            "description": self.description,
            "details": self.details,
            "confidence": self.confidence.value if self.confidence else None,
            "error": self.error,
            "scan_timestamp": self.scanned_at.isoformat(),
        }


@dataclass(frozen=True)
class ScanSummary:
    scan_id: str
    started_at: datetime
    duration_ms: int
    total_scanned: int
    successful_scans: int
    brokers_with_data: int
    total_data_points: int
    risk_tier_counts: dict[str, int]
    results: tuple[BrokerResult, ...]
    query: dict[str, Any] = field(default_factory=dict)
    options: dict[str, Any] = field(default_factory=dict)

    @property
    def failed_scans(self) -> int:
        return self.total_scanned - self.successful_scans

    def to_dict(self) -> dict[str, Any]:
        return {
            "scan_id": self.scan_id,
            "scan_timestamp": self.started_at.isoformat(),
            "scan_duration_ms": self.duration_ms,
            "personal_info": self.query,
            "scan_options": self.options,
            "total_brokers_scanned": self.total_scanned,
            "successful_scans": self.successful_scans,
            "brokers_with_data": self.brokers_with_data,
            "total_data_points": self.total_data_points,
            "high_risk_exposures": self.risk_tier_counts.get(RiskLevel.HIGH.value, 0),
            "medium_risk_exposures": self.risk_tier_counts.get(RiskLevel.MEDIUM.value, 0),
            "low_risk_exposures": self.risk_tier_counts.get(RiskLevel.LOW.value, 0),
            "scan_results": [result.to_dict() for result in self.results],
        }
