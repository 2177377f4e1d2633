"""Exposure analysis over finished broker results.

Turns one or more scans' worth of ``BrokerResult`` objects into the
dashboard view: which brokers expose the subject, which data categories,
an overall risk grade, a 0–100 privacy score, and recommended next steps.
Removal-request tracking is summarised from caller-supplied records; the
records themselves live in an external store.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

from brokerscan.core.constants import RemovalStatus, RiskLevel
from brokerscan.scan.results import BrokerResult

MAX_EXPOSURE_DEDUCTION = 40
POINTS_PER_DATA_POINT = 2
REMOVAL_BONUS = 20
HIGH_RISK_PENALTY = 5


@dataclass
class BrokerExposure:
    name: str
    url: str | None
    risk_level: RiskLevel | None
    data_types: list[str] = field(default_factory=list)
    first_seen: datetime | None = None
    last_seen: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "risk_level": self.risk_level.value if self.risk_level else None,
            "data_types": list(self.data_types),
            "first_seen": self.first_seen.isoformat() if self.first_seen else None,
            "last_seen": self.last_seen.isoformat() if self.last_seen else None,
        }


@dataclass(frozen=True)
class RiskAssessment:
    overall_risk: RiskLevel
    risk_distribution: dict[str, int]
    high_risk_percentage: float
    total_brokers: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall_risk": self.overall_risk.value,
            "risk_distribution": dict(self.risk_distribution),
            "high_risk_percentage": self.high_risk_percentage,
            "total_brokers": self.total_brokers,
        }


@dataclass(frozen=True)
class ExposureAnalysis:
    brokers_with_data: list[BrokerExposure]
    data_types_distribution: dict[str, int]
    total_data_points: int
    risk_assessment: RiskAssessment

    def to_dict(self) -> dict[str, Any]:
        return {
            "brokers_with_data": [broker.to_dict() for broker in self.brokers_with_data],
            "data_types_distribution": dict(self.data_types_distribution),
            "total_data_points": self.total_data_points,
            "risk_assessment": self.risk_assessment.to_dict(),
        }


@dataclass(frozen=True)
class RemovalRequest:
    broker: str
    status: RemovalStatus = RemovalStatus.PENDING
    notes: str = ""


@dataclass(frozen=True)
class RemovalSummary:
    total_requests: int
    pending: int
    submitted: int
    completed: int
    failed: int
    completion_rate: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def assess_risk(brokers_with_data: Sequence[BrokerExposure]) -> RiskAssessment:
    """Grade exposure by the share of high-risk brokers holding data.

    ``high`` above 30 % high-risk; ``medium`` above 10 % or with more than
    two medium-risk brokers; ``low`` otherwise.
    """
    distribution = {level.value: 0 for level in (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH)}
    for broker in brokers_with_data:
        if broker.risk_level is not None:
            distribution[broker.risk_level.value] += 1

    total = len(brokers_with_data)
    high_pct = round(distribution["high"] / total * 100, 1) if total else 0.0

    if high_pct > 30:
        overall = RiskLevel.HIGH
    elif high_pct > 10 or distribution["medium"] > 2:
        overall = RiskLevel.MEDIUM
    else:
        overall = RiskLevel.LOW

    return RiskAssessment(
        overall_risk=overall,
        risk_distribution=distribution,
        high_risk_percentage=high_pct,
        total_brokers=total,
    )


def analyze_exposure(results: Iterable[BrokerResult]) -> ExposureAnalysis:
    """Group results that found data by broker."""
    brokers: dict[str, BrokerExposure] = {}
    distribution: dict[str, int] = {}
    total_points = 0

    for result in results:
        if not result.has_data:
            continue
        exposure = brokers.get(result.broker)
        if exposure is None:
            exposure = BrokerExposure(
                name=result.broker,
                url=result.url,
                risk_level=result.risk_level,
                first_seen=result.scanned_at,
                last_seen=result.scanned_at,
            )
            brokers[result.broker] = exposure

        for data_type in result.data_found:
            if data_type not in exposure.data_types:
                exposure.data_types.append(data_type)
            distribution[data_type] = distribution.get(data_type, 0) + 1
            total_points += 1

        if exposure.first_seen is None or result.scanned_at < exposure.first_seen:
            exposure.first_seen = result.scanned_at
        if exposure.last_seen is None or result.scanned_at > exposure.last_seen:
            exposure.last_seen = result.scanned_at

    with_data = list(brokers.values())
    return ExposureAnalysis(
        brokers_with_data=with_data,
        data_types_distribution=distribution,
        total_data_points=total_points,
        risk_assessment=assess_risk(with_data),
    )


def summarize_removals(requests: Iterable[RemovalRequest]) -> RemovalSummary:
    counts = {status: 0 for status in RemovalStatus}
    total = 0
    for request in requests:
        counts[RemovalStatus(request.status)] += 1
        total += 1

    completed = counts[RemovalStatus.COMPLETED]
    return RemovalSummary(
        total_requests=total,
        pending=counts[RemovalStatus.PENDING],
        submitted=counts[RemovalStatus.SUBMITTED],
        completed=completed,
        failed=counts[RemovalStatus.FAILED],
        completion_rate=round(completed / total * 100, 1) if total else 0.0,
    )


def privacy_score(exposure: ExposureAnalysis, removals: RemovalSummary) -> int:
    """Score from 0 (fully exposed) to 100 (nothing found)."""
    score = 100.0
    score -= min(exposure.total_data_points * POINTS_PER_DATA_POINT, MAX_EXPOSURE_DEDUCTION)
    if removals.total_requests > 0:
        score += removals.completed / removals.total_requests * REMOVAL_BONUS
    high_risk = sum(1 for b in exposure.brokers_with_data if b.risk_level == RiskLevel.HIGH)
    score -= high_risk * HIGH_RISK_PENALTY
    return min(max(round(score), 0), 100)


def recommendations(exposure: ExposureAnalysis, removals: RemovalSummary) -> list[dict[str, Any]]:
    """Ordered list of suggested actions."""
    recs: list[dict[str, Any]] = []

    if exposure.brokers_with_data:
        recs.append({
            "priority": "high",
            "category": "data_removal",
            "title": "Request Data Removal",
            "description": (
                f"You have data exposed on {len(exposure.brokers_with_data)} data broker sites. "
                "Consider sending deletion requests."
            ),
            "action": "send_deletion_requests",
            "brokers": [b.name for b in exposure.brokers_with_data],
        })

    high_risk = [b for b in exposure.brokers_with_data if b.risk_level == RiskLevel.HIGH]
    if high_risk:
        recs.append({
            "priority": "urgent",
            "category": "high_risk",
            "title": "Address High-Risk Exposures",
            "description": f"Prioritize removal from {len(high_risk)} high-risk data brokers.",
            "action": "prioritize_removal",
            "brokers": [b.name for b in high_risk],
        })

    if removals.failed > 0:
        recs.append({
            "priority": "medium",
            "category": "follow_up",
            "title": "Follow Up on Failed Removals",
            "description": (
                f"{removals.failed} removal requests failed. "
                "Consider retrying or contacting brokers directly."
            ),
            "action": "retry_failed_removals",
        })

    recs.append({
        "priority": "low",
        "category": "monitoring",
        "title": "Set Up Regular Monitoring",
        "description": "Schedule monthly scans to monitor for new data exposures.",
        "action": "setup_monitoring",
    })
    return recs


def compare_scans(previous: Sequence[BrokerResult], current: Sequence[BrokerResult]) -> dict[str, Any]:
    """Diff two scans of the same subject by broker.

    With no previous results the current exposures form the baseline.
    """
    current_with_data = [r for r in current if r.has_data]
    if not previous:
        return {
            "new_exposures": current_with_data,
            "removed_exposures": [],
            "changed_data": [],
            "summary": "First scan - establishing baseline",
        }

    before = {r.broker: r for r in previous}
    after = {r.broker: r for r in current}
    new_exposures: list[BrokerResult] = []
    changed: list[dict[str, Any]] = []

    for result in current_with_data:
        old = before.get(result.broker)
        if old is None or not old.has_data:
            new_exposures.append(result)
            continue
        added = [d for d in result.data_found if d not in old.data_found]
        if added:
            changed.append({"broker": result.broker, "new_data_types": added})

    removed = [r for r in previous if r.has_data and not (r.broker in after and after[r.broker].has_data)]

    return {
        "new_exposures": new_exposures,
        "removed_exposures": removed,
        "changed_data": changed,
        "summary": (
            f"{len(new_exposures)} new exposure(s), {len(removed)} removed, "
            f"{len(changed)} broker(s) with new data types"
        ),
    }


def exposure_report(
    results: Sequence[BrokerResult],
    *,
    removals: Iterable[RemovalRequest] = (),
    previous: Sequence[BrokerResult] | None = None,
) -> dict[str, Any]:
    """Dashboard view of one scan, as returned next to the scan summary.

    ``comparison`` is only present when *previous* results are supplied.
    """
    exposure = analyze_exposure(results)
    removal_summary = summarize_removals(removals)
    report: dict[str, Any] = {
        **exposure.to_dict(),
        "removal_summary": removal_summary.to_dict(),
        "privacy_score": privacy_score(exposure, removal_summary),
        "recommendations": recommendations(exposure, removal_summary),
    }
    if previous is not None:
        comparison = compare_scans(previous, results)
        report["comparison"] = {
            "new_exposures": [r.broker for r in comparison["new_exposures"]],
            "removed_exposures": [r.broker for r in comparison["removed_exposures"]],
            "changed_data": comparison["changed_data"],
            "summary": comparison["summary"],
        }
    return report
