"""Strategies for combining existing content with new content."""

from __future__ import annotations

from enum import StrEnum


class MergeStrategy(StrEnum):
    """How new content is combined with old content."""

    REPLACE = "replace"
    APPEND = "append"
    PREPEND = "prepend"


def is_valid_strategy(value: object) -> bool:
    """True if ``value`` names a known merge strategy."""
    if not isinstance(value, str):
        return False
    try:
        MergeStrategy(value)
    except ValueError:
        return False
    return True


def apply_strategy(strategy: MergeStrategy | str, old: str, new: str) -> str:
    """Combine ``old`` and ``new``; unknown strategies replace."""
    try:
        kind = MergeStrategy(strategy)
    except ValueError:
        return new
    match kind:
        case MergeStrategy.APPEND:
            return f"{old}\n{new}" if old else new
        case MergeStrategy.PREPEND:
            return f"{new}\n{old}" if old else new
    return new