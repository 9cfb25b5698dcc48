"""
Grade Classifier

Maps a roll's deviation from the center of its range to a letter grade.

Quality (0..1) is rescaled to a percentage-point deviation from center with
``(quality - 0.5) * 30``, so the whole range spans -15..+15. The grade is a
stepwise lookup on the absolute deviation, with the sign picking the
positive (S..B+) or negative (B-..F) column:

    |diff|        positive  negative
    9.5 - 11.5       S         F
    7.5 - 9.5        A+        C-
    5.5 - 7.5        A         C
    3.5 - 5.5        A-        C+
    1.5 - 3.5        B+        B-
    0   - 1.5        B         B
    > 11.5          ???       ???

The true extremes of a range are practically unreachable, so a roll that
lands beyond 11.5 points is flagged as indeterminate instead of being forced
into S or F.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from riven_grader.constants import (
    CENTER_GRADE,
    CENTER_QUALITY,
    GRADE_THRESHOLDS,
    INDETERMINATE_THRESHOLD,
    PERCENT_DIFF_SCALE,
)


class Grade(Enum):
    """Letter grades, best first, plus the two non-letter markers."""
    S = "S"
    A_PLUS = "A+"
    A = "A"
    A_MINUS = "A-"
    B_PLUS = "B+"
    B = "B"
    B_MINUS = "B-"
    C_PLUS = "C+"
    C = "C"
    C_MINUS = "C-"
    F = "F"
    INDETERMINATE = "???"  # beyond the grading window
    UNRESOLVED = "N/A"     # stat could not be graded at all

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_label(cls, label: str) -> Optional["Grade"]:
        """Look up a grade by its label ("A+", "???", ...)."""
        label = label.strip().upper()
        for grade in cls:
            if grade.value == label:
                return grade
        return None

    @property
    def is_letter(self) -> bool:
        return self not in (Grade.INDETERMINATE, Grade.UNRESOLVED)

    @property
    def ordinal(self) -> Optional[int]:
        """Position on the letter scale, 0 = S .. 10 = F; None for markers."""
        if not self.is_letter:
            return None
        return GRADE_SCALE.index(self)

    @property
    def is_positive_side(self) -> bool:
        """True for B and above."""
        return self.is_letter and self.ordinal <= GRADE_SCALE.index(Grade.B)

    def mirror(self) -> "Grade":
        """The grade on the opposite side of the table (S <-> F, B <-> B)."""
        if not self.is_letter:
            return self
        return GRADE_SCALE[len(GRADE_SCALE) - 1 - self.ordinal]


# Letter grades, best to worst
GRADE_SCALE: List[Grade] = [
    Grade.S, Grade.A_PLUS, Grade.A, Grade.A_MINUS, Grade.B_PLUS,
    Grade.B,
    Grade.B_MINUS, Grade.C_PLUS, Grade.C, Grade.C_MINUS, Grade.F,
]


@dataclass(frozen=True)
class GradeBand:
    """One row of the grade table, for drawing a legend."""
    positive: Grade
    negative: Grade
    lower: float  # inclusive
    upper: float  # exclusive, except the outermost row

    @property
    def label(self) -> str:
        if self.lower == 0:
            return f"±{self.upper:g}"
        return f"{self.lower:g}-{self.upper:g}"


def _build_grade_table() -> List[GradeBand]:
    rows = []
    upper = INDETERMINATE_THRESHOLD
    for threshold, positive, negative in GRADE_THRESHOLDS:
        rows.append(GradeBand(Grade(positive), Grade(negative), threshold, upper))
        upper = threshold
    rows.append(GradeBand(Grade(CENTER_GRADE), Grade(CENTER_GRADE), 0.0, upper))
    return rows


GRADE_TABLE: List[GradeBand] = _build_grade_table()


def quality_to_percent_diff(quality: float) -> float:
    """Rescale a 0..1 quality onto the +/-15 point deviation scale."""
    return (quality - CENTER_QUALITY) * PERCENT_DIFF_SCALE


def classify(percent_diff: float) -> Grade:
    """
    Classify a percent deviation from center.

    Args:
        percent_diff: Signed deviation, as produced by quality_to_percent_diff().

    Returns:
        Letter grade, or Grade.INDETERMINATE beyond the grading window.
    """
    if math.isnan(percent_diff):
        return Grade.INDETERMINATE

    magnitude = abs(percent_diff)
    if magnitude > INDETERMINATE_THRESHOLD:
        return Grade.INDETERMINATE

    for threshold, positive, negative in GRADE_THRESHOLDS:
        if magnitude >= threshold:
            return Grade(positive) if percent_diff >= 0 else Grade(negative)

    return Grade(CENTER_GRADE)


def classify_quality(quality: float) -> Grade:
    """Shortcut for classify(quality_to_percent_diff(quality))."""
    return classify(quality_to_percent_diff(quality))
