"""
Riven grading errors.

Two kinds of failure exist:

- Precondition failures (InvalidComposition, InvalidRollParameters) reject a
  whole request before any range work starts.
- Per-stat failures (UnresolvableStat, OracleFailure) only affect the stat
  that raised them. The grader records them on the GradedStat and keeps going.
"""
from __future__ import annotations

from typing import Optional


class RivenGradingError(Exception):
    """Base class for every error raised by the grading engine."""


class InvalidComposition(RivenGradingError):
    """Buff/curse counts are outside the allowed shape of a roll."""


class InvalidRollParameters(RivenGradingError):
    """Rank or disposition is out of range."""


class UnresolvableStat(RivenGradingError):
    """A stat tag (or its category) is unknown, or cannot roll in the requested slot."""

    def __init__(self, tag: str, reason: str = "unknown stat"):
        self.tag = tag
        self.reason = reason
        super().__init__(f"{tag}: {reason}")


class OracleFailure(RivenGradingError):
    """The valuation oracle raised while evaluating a synthetic roll."""

    def __init__(self, tag: str, cause: Optional[BaseException] = None):
        self.tag = tag
        self.cause = cause
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "no value returned"
        super().__init__(f"valuation failed for {tag} ({detail})")


class CatalogLoadError(RivenGradingError):
    """The stat catalog file is missing or malformed."""
