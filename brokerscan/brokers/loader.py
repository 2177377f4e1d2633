"""Broker roster YAML loader.

Loads ``config/brokers.yaml`` (a mapping with a ``brokers`` list) and
returns ``BrokerDescriptor`` instances in file order.  File order is scan
order.
"""
from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from brokerscan.brokers.descriptor import BrokerDescriptor
from brokerscan.core.constants import RiskLevel

_REQUIRED_FIELDS: frozenset[str] = frozenset({
    "name",
    "url",
    "risk_level",
    "priority",
})


def parse_descriptor(data: Mapping[str, Any], *, origin: str = "<roster>") -> BrokerDescriptor:
    """Build a descriptor from one roster entry.

    Raises
    ------
    ValueError
        If a required field is missing or a value has the wrong shape.
    """
    if not isinstance(data, Mapping):
        raise ValueError(f"{origin}: expected a mapping per broker, got {type(data).__name__}")

    missing = _REQUIRED_FIELDS - data.keys()
    if missing:
        raise ValueError(f"{origin}: broker entry missing required fields: {sorted(missing)}")

    try:
        risk_level = RiskLevel(str(data["risk_level"]).lower())
    except ValueError:
        raise ValueError(f"{origin}: unknown risk_level {data['risk_level']!r} for {data['name']!r}")

    probability = data.get("match_probability")
    if probability is not None:
        probability = float(probability)
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"{origin}: match_probability for {data['name']!r} must be within [0, 1]")

    return BrokerDescriptor(
        name=str(data["name"]),
        url=str(data["url"]),
        risk_level=risk_level,
        priority=int(data["priority"]),
        data_types=frozenset(data.get("data_types") or ()),
        match_probability=probability,
        description=str(data.get("description") or ""),
    )


def load_roster(path: str | Path) -> list[BrokerDescriptor]:
    """Load every broker from the roster YAML file at *path*.

    Raises
    ------
    ValueError
        If the document is not a mapping with a ``brokers`` list, any entry
        fails validation, or two entries share a name.
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if not isinstance(data, dict) or not isinstance(data.get("brokers"), list):
        raise ValueError(f"{path}: expected a mapping with a 'brokers' list")

    roster: list[BrokerDescriptor] = []
    seen: set[str] = set()
    for entry in data["brokers"]:
        descriptor = parse_descriptor(entry, origin=str(path))
        if descriptor.name in seen:
            raise ValueError(f"{path}: duplicate broker name {descriptor.name!r}")
        seen.add(descriptor.name)
        roster.append(descriptor)
    return roster
