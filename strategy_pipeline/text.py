"""Text helpers shared by the stage modules and the markdown report."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List


def normalize_text(*parts: object) -> str:
    """Join the provided fragments into one lower-case blob.

    Anything that is not a string (``None``, numbers, stray payloads) is
    treated as empty so callers never have to guard malformed input.
    """

    return " ".join(part for part in parts if isinstance(part, str)).lower()


# Keywords this short must stand alone, so "ai" never fires inside "email".
SHORT_KEYWORD_LENGTH = 3


@lru_cache(maxsize=256)
def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    escaped = re.escape(keyword.lower())
    if len(keyword) <= SHORT_KEYWORD_LENGTH:
        return re.compile(rf"(?<![a-z0-9]){escaped}(?:s|es)?(?![a-z0-9])")
    return re.compile(rf"(?<![a-z0-9]){escaped}")


def mentions(text: str, keyword: str) -> bool:
    """True when *keyword* starts a word or phrase in *text*.

    Longer keywords also match their inflections ("shop" in "shopping");
    short ones must stand alone, optionally pluralised.
    """

    return _keyword_pattern(keyword).search(text) is not None


def mentions_any(text: str, keywords: Iterable[str]) -> bool:
    return any(mentions(text, keyword) for keyword in keywords)


def unique(items: Iterable[str]) -> List[str]:
    """Drop duplicates while keeping the first occurrence order."""

    seen: set[str] = set()
    ordered: List[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        ordered.append(item)
    return ordered


def bullet_list(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items if item)


def format_currency(value: float) -> str:
    """Format a numeric value into a friendly budget string."""

    if value >= 1_000_000:
        return f"${value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"${value / 1_000:.1f}K"
    return f"${int(value)}"
