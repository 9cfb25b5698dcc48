"""
Plain-text formatting helpers for stat values and ranges.

Display conventions:
- percentage stats: "+120.5%"
- raw value stats (punch through, range): "+2.1"
- multiplier stats (faction damage): "x0.80"

Damage, Critical Chance and Critical Damage curses are shown with their sign
flipped in range listings (``reversed_display_symbol`` in the catalog).
"""
from __future__ import annotations

from typing import Tuple

from riven_grader.models import Slot, StatRange
from riven_grader.quality_scorer import RAW_VALUE_SCALE
from riven_grader.stat_catalog.models import StatDefinition, ValueClass


def to_display_value(internal_value: float, value_class: ValueClass) -> float:
    """Inverse of quality_scorer.to_internal_value()."""
    if value_class is ValueClass.RAW_VALUE:
        return internal_value / RAW_VALUE_SCALE
    if value_class is ValueClass.MULTIPLIER:
        return internal_value + 1.0
    return internal_value


def format_stat_value(display_value: float, value_class: ValueClass) -> str:
    """Format a displayed value the way the game shows it."""
    if value_class is ValueClass.RAW_VALUE:
        return f"{display_value:+.1f}"
    if value_class is ValueClass.MULTIPLIER:
        return f"x{display_value:.2f}"
    return f"{display_value:+.1f}%"


def display_bounds(
    stat_range: StatRange,
    definition: StatDefinition,
    slot: Slot,
) -> Tuple[float, float]:
    """Range bounds in display units, lowest first."""
    reverse = slot is Slot.CURSE and definition.reversed_display_symbol
    values = []
    for internal in stat_range.raw_bounds():
        if reverse:
            internal = -internal
        values.append(to_display_value(internal, definition.value_class))
    low, high = sorted(values)
    return low, high


def format_range(stat_range: StatRange, definition: StatDefinition, slot: Slot) -> str:
    """e.g. "+60.0% to +300.0%", "x0.40 to x0.70"."""
    low, high = display_bounds(stat_range, definition, slot)
    value_class = definition.value_class
    return f"{format_stat_value(low, value_class)} to {format_stat_value(high, value_class)}"


def format_percent_diff(percent_diff: float) -> str:
    return f"{percent_diff:+.1f}%"
