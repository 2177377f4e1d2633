"""Match-likelihood seam for simulated broker lookups.

Simulated lookups decide "match" vs "no results" through a
:class:`MatchLikelihoodProvider`.  The default provider hashes the searched
name into ``[0, 1)`` so the same name always gets the same outcome.
Replace the provider to plug in a real data source; the orchestrator does
not need to change.
"""
from __future__ import annotations

import hashlib
from typing import Protocol

from brokerscan.normalization.name_normalizer import clean_name


class MatchLikelihoodProvider(Protocol):
    def should_show_results(self, full_name: str, base_probability: float, *, salt: str = "") -> bool:
        ...


def unit_hash(text: str) -> float:
    """Map *text* deterministically onto ``[0, 1)``."""
    digest = hashlib.sha256(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") / 2**64


class HashedLikelihoodProvider:
    """Deterministic provider: ``unit_hash(salt:name) < base_probability``.

    The name is case- and whitespace-normalized before hashing.  *salt*
    lets each broker draw independently for the same name.
    """

    def score(self, full_name: str, *, salt: str = "") -> float:
        return unit_hash(f"{salt}:{clean_name(full_name).lower()}")

    def should_show_results(self, full_name: str, base_probability: float, *, salt: str = "") -> bool:
        return self.score(full_name, salt=salt) < base_probability
