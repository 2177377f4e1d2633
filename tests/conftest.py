from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from brokerscan.brokers.descriptor import BrokerDescriptor, SearchQuery
from brokerscan.core.constants import RiskLevel

ROSTER_PATH = Path(__file__).resolve().parents[1] / "config" / "brokers.yaml"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def jane() -> SearchQuery:
    return SearchQuery(full_name="Jane Doe")


def _make_broker(
    name: str,
    *,
    priority: int = 1,
    risk_level: RiskLevel = RiskLevel.HIGH,
    data_types: tuple[str, ...] = ("name",),
    match_probability: float | None = None,
) -> BrokerDescriptor:
    return BrokerDescriptor(
        name=name,
        url=f"https://{name.lower()}.example",
        risk_level=risk_level,
        priority=priority,
        data_types=frozenset(data_types),
        match_probability=match_probability,
    )


@pytest.fixture
def make_broker():
    """Factory for roster entries: ``make_broker("Spokeo", priority=2)``."""
    return _make_broker


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.setenv("BROKER_ROSTER_PATH", str(ROSTER_PATH))

    from brokerscan.core.settings import get_settings

    get_settings.cache_clear()

    from brokerscan.main import app

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    get_settings.cache_clear()
