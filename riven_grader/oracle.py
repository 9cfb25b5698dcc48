"""
Table Valuation Oracle

Reference implementation of IValuationOracle driven by the stat catalog's
base ranges:

    value = lerp(low, high, magnitude)
            * disposition
            * (1 + 0.125 * rank)
            * category scale
            * composition factor

where (low, high) is the stat's buff range for buff slots and its curse range
for curse slots, and the composition factor comes from the catalog's
composition scaling table (1.0 when the buff/curse count has no entry).

Values come out in each stat's internal unit (see ValueClass). A ported
version of the in-game formulas can replace this class without touching the
range, quality or grade logic.
"""
from __future__ import annotations

import logging
from typing import List, Sequence

from riven_grader.constants import MAGNITUDE_MAX, MAGNITUDE_MIN, RANK_SCALE_STEP
from riven_grader.models import OracleSlot, RollComposition, Slot
from riven_grader.stat_catalog.models import CatalogSnapshot

logger = logging.getLogger(__name__)


def rank_factor(rank: int) -> float:
    """Linear rank scaling: 1.0 at rank 0, 2.0 at rank 8."""
    return 1.0 + RANK_SCALE_STEP * rank


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


class TableValuationOracle:
    """Evaluates synthetic rolls against one catalog snapshot."""

    def __init__(self, snapshot: CatalogSnapshot):
        self._snapshot = snapshot

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    def evaluate(
        self,
        category: str,
        slots: Sequence[OracleSlot],
        disposition: float,
        rank: int,
        composition: RollComposition,
    ) -> List[float]:
        """
        Evaluate every slot of a synthetic roll.

        Raises:
            KeyError: unknown category or stat tag.
            ValueError: slot count mismatch, bad magnitude or disposition.
            UnresolvableStat: a buff-only stat placed in a curse slot.
        """
        if len(slots) != composition.total:
            raise ValueError(
                f"Expected {composition.total} slots for composition "
                f"{composition.key}, got {len(slots)}"
            )
        if disposition <= 0:
            raise ValueError(f"Disposition must be positive (got {disposition})")

        category_def = self._snapshot.categories[category]
        common = disposition * rank_factor(rank) * category_def.scale

        values = []
        for index, oracle_slot in enumerate(slots):
            if not MAGNITUDE_MIN <= oracle_slot.magnitude <= MAGNITUDE_MAX:
                raise ValueError(
                    f"Magnitude for {oracle_slot.tag} out of range: {oracle_slot.magnitude}"
                )
            slot = Slot.BUFF if index < composition.positive_count else Slot.CURSE
            definition = self._snapshot.stats[oracle_slot.tag]
            low, high = definition.base_range(slot)
            factor = self._snapshot.composition_factor(composition, slot)
            values.append(lerp(low, high, oracle_slot.magnitude) * common * factor)

        return values
