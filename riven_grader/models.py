"""
Riven Grading Models.

Data structures passed between the range resolver, quality scorer,
grade classifier and roll aggregator. Everything here is created per request
and discarded once the caller has consumed the result.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from riven_grader.constants import (
    MAX_TOTAL_STATS,
    MIN_BUFFS,
    MIN_TOTAL_STATS,
)
from riven_grader.errors import InvalidComposition
from riven_grader.grade_classifier import Grade, quality_to_percent_diff


class Slot(Enum):
    """Which side of the roll a stat occupies."""
    BUFF = "buff"
    CURSE = "curse"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ItemProfile:
    """Weapon category plus its disposition multiplier."""
    category: str       # catalog category key, e.g. "rifle"
    disposition: float  # e.g. 1.35; scales every stat of the category
    name: str = ""      # display name, informational only


@dataclass(frozen=True)
class RollComposition:
    """
    Number of buffs and curses on a roll.

    Raises:
        InvalidComposition: on construction when the counts are not a valid roll shape.
    """
    positive_count: int
    negative_count: int

    def __post_init__(self) -> None:
        if self.negative_count < 0:
            raise InvalidComposition(
                f"Curse count cannot be negative (got {self.negative_count})"
            )
        if self.positive_count < MIN_BUFFS:
            raise InvalidComposition(
                f"A roll needs at least {MIN_BUFFS} buff (got {self.positive_count})"
            )
        if not MIN_TOTAL_STATS <= self.total <= MAX_TOTAL_STATS:
            raise InvalidComposition(
                f"A roll must have between {MIN_TOTAL_STATS} and {MAX_TOTAL_STATS} "
                f"total stats; got {self.positive_count} positive and "
                f"{self.negative_count} negative"
            )

    @property
    def total(self) -> int:
        return self.positive_count + self.negative_count

    def count(self, slot: Slot) -> int:
        return self.positive_count if slot is Slot.BUFF else self.negative_count

    @property
    def key(self) -> str:
        """Lookup key used by composition scaling tables, e.g. "3/1"."""
        return f"{self.positive_count}/{self.negative_count}"


@dataclass(frozen=True)
class StatRange:
    """
    Polarity-normalized value range of one stat.

    ``min`` is the worst possible roll and ``max`` the best, on an axis where
    larger is better, so ``min <= max``. When the stat's best raw value is
    numerically lower than its worst (recoil), the bounds are stored negated
    and ``orientation`` is -1; multiplying an internal value by
    ``orientation`` puts it on the same axis.
    """
    min: float
    max: float
    orientation: int = 1

    @property
    def center(self) -> float:
        return (self.min + self.max) / 2

    @property
    def width(self) -> float:
        return self.max - self.min

    @property
    def is_degenerate(self) -> bool:
        return self.max == self.min

    def raw_bounds(self) -> Tuple[float, float]:
        """(worst, best) in the oracle's own sign convention."""
        return (self.min * self.orientation, self.max * self.orientation)

    def position(self, quality: float) -> float:
        """Value on the normalized axis at the given quality."""
        if self.is_degenerate:
            return self.min
        return self.min + quality * self.width


@dataclass(frozen=True)
class OracleSlot:
    """One stat slot of a synthetic roll handed to the valuation oracle."""
    tag: str
    magnitude: float  # normalized roll strength, 0..1


@dataclass(frozen=True)
class ObservedStat:
    """A stat as read off the roll by the caller."""
    tag: str
    display_value: float  # signed, as displayed (x-multipliers as e.g. 0.8)


@dataclass
class GradedStat:
    """Grading result for one observed stat."""
    tag: str
    value: float                              # observed display value
    grade: Grade
    quality: Optional[float] = None           # 0..1, None when unresolved
    percent_diff_from_center: Optional[float] = None
    slot: Optional[Slot] = None
    range: Optional[StatRange] = None
    error: Optional[str] = None               # why the stat could not be graded

    @property
    def is_resolved(self) -> bool:
        return self.grade is not Grade.UNRESOLVED

    @classmethod
    def unresolved(cls, tag: str, value: float, error: str,
                   slot: Optional[Slot] = None) -> "GradedStat":
        return cls(tag=tag, value=value, grade=Grade.UNRESOLVED, slot=slot, error=error)


@dataclass(frozen=True)
class RollGrade:
    """Aggregate grade of a whole roll."""
    overall_quality: Optional[float]
    overall_grade: Grade
    graded_count: int = 0
    excluded_count: int = 0

    @property
    def is_resolved(self) -> bool:
        return self.overall_quality is not None

    @property
    def percent_diff_from_center(self) -> Optional[float]:
        if self.overall_quality is None:
            return None
        return quality_to_percent_diff(self.overall_quality)


@dataclass
class RollReport:
    """Everything a presentation layer needs to show one graded roll."""
    profile: ItemProfile
    composition: RollComposition
    rank: int
    stats: List[GradedStat] = field(default_factory=list)
    roll_grade: RollGrade = field(
        default_factory=lambda: RollGrade(overall_quality=None, overall_grade=Grade.UNRESOLVED)
    )

    @property
    def unresolved_stats(self) -> List[GradedStat]:
        return [s for s in self.stats if not s.is_resolved]


@dataclass(frozen=True)
class StatRangeEntry:
    """One line of a stat range listing."""
    tag: str
    display_name: str
    slot: Slot
    range: Optional[StatRange] = None
    error: Optional[str] = None

