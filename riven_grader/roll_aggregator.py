"""
Roll Aggregator

Combines per-stat results into one overall grade.

Ranges come out of the resolver already oriented worst -> best for both
buffs and curses, so every resolved stat's quality is averaged as-is.
Stats that could not be resolved are left out of the mean.
"""
from __future__ import annotations

import logging
from typing import Iterable

from riven_grader.grade_classifier import Grade, classify, quality_to_percent_diff
from riven_grader.models import GradedStat, RollGrade

logger = logging.getLogger(__name__)


def aggregate(graded_stats: Iterable[GradedStat]) -> RollGrade:
    """
    Average the resolved stats' qualities and classify the result.

    Returns:
        RollGrade; overall_quality is None and the grade is Grade.UNRESOLVED
        when no stat could be graded.
    """
    qualities = []
    excluded = 0
    for stat in graded_stats:
        if stat.is_resolved and stat.quality is not None:
            qualities.append(stat.quality)
        else:
            excluded += 1

    if not qualities:
        logger.debug(f"No gradable stats ({excluded} excluded)")
        return RollGrade(
            overall_quality=None,
            overall_grade=Grade.UNRESOLVED,
            graded_count=0,
            excluded_count=excluded,
        )

    overall = sum(qualities) / len(qualities)
    grade = classify(quality_to_percent_diff(overall))
    logger.debug(
        f"Aggregated {len(qualities)} stats ({excluded} excluded): "
        f"quality={overall:.4f} grade={grade}"
    )
    return RollGrade(
        overall_quality=overall,
        overall_grade=grade,
        graded_count=len(qualities),
        excluded_count=excluded,
    )
