"""Heuristics for spotting API-key-like values."""

from __future__ import annotations

import re
from typing import Final

# Whole-string patterns, tried in order. Any hit counts as a key.
KEY_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"[A-Za-z0-9_-]{20,}"),
    re.compile(r"[A-Za-z0-9_-]{30,}"),
    re.compile(r"(?:sk|pk|api|secret)[_-][A-Za-z0-9_-]{20,}"),
)

NAME_KEYWORDS: Final[tuple[str, ...]] = (
    "api",
    "token",
    "key",
    "secret",
    "auth",
    "credential",
)


def is_likely_key(value: str | None) -> bool:
    """Check whether a value looks like an API key.

    There is no entropy check, so UUIDs, hashes and other long
    identifiers match as well.

    Args:
        value: Candidate value

    Returns:
        True if the entire value matches one of the key patterns
    """
    if not value:
        return False
    return any(pattern.fullmatch(value) for pattern in KEY_PATTERNS)


def name_suggests_secret(name: str | None) -> bool:
    """Check whether an item's display name hints at a stored secret."""
    if not name:
        return False
    lowered = name.lower()
    return any(keyword in lowered for keyword in NAME_KEYWORDS)
