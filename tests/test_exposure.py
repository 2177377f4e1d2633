"""Tests for brokerscan.scan.exposure."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from brokerscan.core.constants import Confidence, RemovalStatus, RiskLevel
from brokerscan.scan.exposure import (
    BrokerExposure,
    RemovalRequest,
    analyze_exposure,
    assess_risk,
    compare_scans,
    exposure_report,
    privacy_score,
    recommendations,
    summarize_removals,
)
from brokerscan.scan.results import BrokerResult

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _result(broker: str, data_found=("Name",), risk_level=RiskLevel.HIGH, when=T0) -> BrokerResult:
    return BrokerResult(
        broker=broker,
        success=True,
        data_found=tuple(data_found),
        description="",
        details={},
        confidence=Confidence.HIGH,
        scanned_at=when,
        url=f"https://{broker.lower()}.example",
        risk_level=risk_level,
    )


def _exposures(high: int = 0, medium: int = 0, low: int = 0) -> list[BrokerExposure]:
    levels = [RiskLevel.HIGH] * high + [RiskLevel.MEDIUM] * medium + [RiskLevel.LOW] * low
    return [BrokerExposure(name=f"B{i}", url=None, risk_level=level) for i, level in enumerate(levels)]


class TestAssessRisk:
    def test_high_when_over_thirty_percent(self) -> None:
        assessment = assess_risk(_exposures(high=2, medium=1))
        assert assessment.overall_risk == RiskLevel.HIGH
        assert assessment.high_risk_percentage == 66.7
        assert assessment.risk_distribution == {"low": 0, "medium": 1, "high": 2}

    def test_medium_on_many_medium_brokers(self) -> None:
        assert assess_risk(_exposures(high=1, medium=3, low=6)).overall_risk == RiskLevel.MEDIUM

    def test_boundaries_are_exclusive(self) -> None:
        assert assess_risk(_exposures(high=1, medium=2, low=7)).overall_risk == RiskLevel.LOW

    def test_empty(self) -> None:
        assessment = assess_risk([])
        assert assessment.overall_risk == RiskLevel.LOW
        assert assessment.high_risk_percentage == 0.0


class TestAnalyzeExposure:
    def test_groups_by_broker_and_skips_empty_results(self) -> None:
        later = T0 + timedelta(days=30)
        results = [
            _result("Spokeo", ("Name", "Phone")),
            _result("Spokeo", ("Name", "Email"), when=later),
            _result("AnyWho", (), risk_level=RiskLevel.LOW),
        ]

        analysis = analyze_exposure(results)

        assert [b.name for b in analysis.brokers_with_data] == ["Spokeo"]
        spokeo = analysis.brokers_with_data[0]
        assert spokeo.data_types == ["Name", "Phone", "Email"]
        assert spokeo.first_seen == T0
        assert spokeo.last_seen == later
        assert analysis.data_types_distribution == {"Name": 2, "Phone": 1, "Email": 1}
        assert analysis.total_data_points == 4


class TestRemovalsAndScore:
    def test_summarize_removals(self) -> None:
        summary = summarize_removals([
            RemovalRequest("A", RemovalStatus.COMPLETED),
            RemovalRequest("B", RemovalStatus.PENDING),
            RemovalRequest("C", RemovalStatus.FAILED),
        ])
        assert (summary.total_requests, summary.completed, summary.failed) == (3, 1, 1)
        assert summary.completion_rate == 33.3

    def test_privacy_score(self) -> None:
        results = [
            _result("A", ("Name", "Age", "Phone")),
            _result("B", ("Name", "Age", "Phone")),
            _result("C", ("Name", "Age", "Phone"), risk_level=RiskLevel.MEDIUM),
        ]
        removals = summarize_removals([
            RemovalRequest("A", RemovalStatus.COMPLETED),
            RemovalRequest("B", RemovalStatus.COMPLETED),
            RemovalRequest("C"),
            RemovalRequest("D"),
        ])
        # 100 - 18 (9 points) + 10 (half completed) - 10 (two high-risk brokers)
        assert privacy_score(analyze_exposure(results), removals) == 82

    def test_privacy_score_never_negative(self) -> None:
        results = [_result(f"B{i}", ("Name", "Age", "Phone", "Email")) for i in range(20)]
        assert privacy_score(analyze_exposure(results), summarize_removals([])) == 0

    def test_clean_slate_scores_100(self) -> None:
        assert privacy_score(analyze_exposure([]), summarize_removals([])) == 100


class TestRecommendations:
    def test_order_and_categories(self) -> None:
        analysis = analyze_exposure([_result("Spokeo"), _result("AnyWho", risk_level=RiskLevel.LOW)])
        removals = summarize_removals([RemovalRequest("Spokeo", RemovalStatus.FAILED)])

        recs = recommendations(analysis, removals)

        assert [r["category"] for r in recs] == ["data_removal", "high_risk", "follow_up", "monitoring"]
        assert recs[1]["priority"] == "urgent"
        assert recs[1]["brokers"] == ["Spokeo"]

    def test_monitoring_always_present(self) -> None:
        recs = recommendations(analyze_exposure([]), summarize_removals([]))
        assert [r["category"] for r in recs] == ["monitoring"]


class TestCompareScans:
    def test_first_scan_is_baseline(self) -> None:
        current = [_result("Spokeo"), _result("AnyWho", ())]
        comparison = compare_scans([], current)
        assert comparison["summary"] == "First scan - establishing baseline"
        assert [r.broker for r in comparison["new_exposures"]] == ["Spokeo"]

    def test_diff(self) -> None:
        previous = [_result("Spokeo", ("Name",)), _result("MyLife", ("Name",)), _result("AnyWho", ())]
        current = [_result("Spokeo", ("Name", "Phone")), _result("MyLife", ()), _result("AnyWho", ("Name",))]

        comparison = compare_scans(previous, current)

        assert [r.broker for r in comparison["new_exposures"]] == ["AnyWho"]
        assert [r.broker for r in comparison["removed_exposures"]] == ["MyLife"]
        assert comparison["changed_data"] == [{"broker": "Spokeo", "new_data_types": ["Phone"]}]


class TestExposureReport:
    def test_report_shape(self) -> None:
        results = [_result("Spokeo", ("Name", "Phone")), _result("AnyWho", (), risk_level=RiskLevel.LOW)]

        report = exposure_report(results, removals=[RemovalRequest("Spokeo", RemovalStatus.COMPLETED)])

        assert [b["name"] for b in report["brokers_with_data"]] == ["Spokeo"]
        assert report["brokers_with_data"][0]["risk_level"] == "high"
        assert report["total_data_points"] == 2
        assert report["risk_assessment"]["overall_risk"] == "high"
        assert report["removal_summary"]["completion_rate"] == 100.0
        # 100 - 4 + 20 - 5 would be 111; the score is capped at 100
        assert report["privacy_score"] == 100
        assert "comparison" not in report

    def test_report_with_previous_scan(self) -> None:
        previous = [_result("MyLife", ("Name",))]
        report = exposure_report([_result("Spokeo", ("Name",))], previous=previous)

        assert report["comparison"]["new_exposures"] == ["Spokeo"]
        assert report["comparison"]["removed_exposures"] == ["MyLife"]


class TestBrokerResultFromDict:
    def test_rebuilds_serialized_result(self) -> None:
        original = _result("Spokeo", ("Name", "Age"))
        assert BrokerResult.from_dict(original.to_dict()) == original

    def test_minimal_entry(self) -> None:
        rebuilt = BrokerResult.from_dict({"broker": "Spokeo", "data_found": ["Name"]})
        assert rebuilt.has_data
        assert rebuilt.risk_level is None
        assert rebuilt.confidence is None
