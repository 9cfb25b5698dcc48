"""
Quality Scorer

Places an observed stat value inside its resolved range.

The observed value arrives as displayed ("+120.5%", "+2.1", "x0.80") and is
first converted to the unit the range was derived in:

- PERCENTAGE: compared as-is
- RAW_VALUE: multiplied by 100
- MULTIPLIER: converted back to a signed delta (multiplier - 1)

The internal value is then multiplied by the range's orientation, so stats
whose best roll is the most negative one (recoil) are compared on the same
"larger is better" axis as everything else.
"""
from __future__ import annotations

import logging
import math
from typing import Tuple

from riven_grader.constants import CENTER_QUALITY
from riven_grader.grade_classifier import quality_to_percent_diff
from riven_grader.models import StatRange
from riven_grader.stat_catalog.models import StatDefinition, ValueClass

logger = logging.getLogger(__name__)

# Raw values are shown as bare amounts, ranges use percent-like units
RAW_VALUE_SCALE = 100.0


def to_internal_value(display_value: float, value_class: ValueClass) -> float:
    """Convert a displayed value to the unit its range is expressed in."""
    if value_class is ValueClass.RAW_VALUE:
        return display_value * RAW_VALUE_SCALE
    if value_class is ValueClass.MULTIPLIER:
        return display_value - 1.0
    return display_value


def quality_in_range(value: float, stat_range: StatRange) -> float:
    """
    Position of an already oriented value within the range, clamped to [0, 1].

    Measured from the center, so a value equal to ``stat_range.center`` scores
    exactly 0.5. A zero-width range has no meaningful position and scores as
    centered.
    """
    if stat_range.max <= stat_range.min:
        return CENTER_QUALITY
    quality = CENTER_QUALITY + (value - stat_range.center) / stat_range.width
    return max(0.0, min(1.0, quality))


def score(
    observed_display_value: float,
    stat_range: StatRange,
    definition: StatDefinition,
) -> Tuple[float, float]:
    """
    Score an observed value.

    Args:
        observed_display_value: Signed value as displayed on the roll.
        stat_range: Range resolved for the stat's slot.
        definition: Catalog entry of the stat (for its value class).

    Returns:
        (quality in [0, 1], percent deviation from center in [-15, 15])

    Raises:
        ValueError: if the observed value is NaN or infinite.
    """
    if not math.isfinite(observed_display_value):
        raise ValueError(f"Observed value must be finite (got {observed_display_value})")
    internal = to_internal_value(observed_display_value, definition.value_class)
    quality = quality_in_range(internal * stat_range.orientation, stat_range)
    percent_diff = quality_to_percent_diff(quality)
    logger.debug(
        f"Scored {definition.tag}: display={observed_display_value} "
        f"internal={internal:.4f} range=[{stat_range.min:.4f}, {stat_range.max:.4f}] "
        f"quality={quality:.4f} diff={percent_diff:+.2f}"
    )
    return quality, percent_diff
