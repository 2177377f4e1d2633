"""Broker descriptor and search query dataclasses.

A ``BrokerDescriptor`` describes one external site or service to scan.
Descriptors come from the static roster (``config/brokers.yaml``) and are
never changed at runtime.  A ``SearchQuery`` is the caller's input for one
search or scan.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from brokerscan.core.constants import TIER_MATCH_PROBABILITY, RiskLevel
from brokerscan.core.errors import ValidationError
from brokerscan.normalization.name_normalizer import clean_name
from brokerscan.normalization.phone_normalizer import format_phone


@dataclass(frozen=True)
class BrokerDescriptor:
    """One data broker in the roster."""

    name: str
    url: str
    risk_level: RiskLevel
    priority: int
    data_types: frozenset[str] = field(default_factory=frozenset)
    match_probability: float | None = None
    description: str = ""

    @property
    def base_probability(self) -> float:
        """Probability that a simulated lookup on this broker finds a match."""
        if self.match_probability is not None:
            return self.match_probability
        return TIER_MATCH_PROBABILITY[self.risk_level]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "url": self.url,
            "risk_level": self.risk_level.value,
            "priority": self.priority,
            "data_types": sorted(self.data_types),
            "description": self.description,
        }


@dataclass(frozen=True)
class SearchQuery:
    """Who to search for.  ``full_name`` is required."""

    full_name: str
    phone: str | None = None
    email: str | None = None
    address: str | None = None

    def validate(self) -> None:
        """Raise ``ValidationError`` if ``full_name`` is missing or blank."""
        if not self.full_name or not self.full_name.strip():
            raise ValidationError("Missing required field: full_name")

    def cleaned(self) -> SearchQuery:
        """Return a copy formatted for outbound search APIs.

        Name whitespace collapsed, phone in national display form, email
        lowercased; blank optional fields become ``None``.
        """
        email = self.email.strip().lower() if self.email and self.email.strip() else None
        address = self.address.strip() if self.address and self.address.strip() else None
        return replace(
            self,
            full_name=clean_name(self.full_name),
            phone=format_phone(self.phone),
            email=email,
            address=address,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.full_name,
            "phone": self.phone,
            "email": self.email,
            "address": self.address,
        }
