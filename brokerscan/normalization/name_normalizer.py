"""Name helpers for building search parameters."""
from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")


def clean_name(raw: str | None) -> str:
    """Strip *raw* and collapse internal whitespace runs."""
    if not raw:
        return ""
    return _WHITESPACE_RE.sub(" ", raw).strip()


def split_full_name(full_name: str | None) -> tuple[str, str]:
    """Split *full_name* into ``(first, last)``.

    Everything after the first token is the last name, so
    ``"Mary Ann Smith"`` gives ``("Mary", "Ann Smith")``.
    """
    cleaned = clean_name(full_name)
    if not cleaned:
        return "", ""
    first, _, rest = cleaned.partition(" ")
    return first, rest
