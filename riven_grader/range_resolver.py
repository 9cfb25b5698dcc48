"""
Range Resolver

Derives the value range of one stat on a given weapon by asking the
valuation oracle for the stat's value at the normalized extremes
(magnitude 0 and 1).

Each query is a synthetic roll with the same buff/curse counts as the real
one: the measured stat sits in the first buff slot (or the first curse slot)
and every other slot holds a neutral placeholder, because per-stat scaling
depends on how many stats the roll carries.

The returned StatRange is oriented so that ``min`` is the worst roll and
``max`` the best:

- buff slot: magnitude 1 is best
- curse slot: magnitude 0 (mildest curse) is best

When the best raw value is numerically below the worst one (recoil, where a
more negative value is better), both bounds are negated and the range's
orientation is -1, keeping ``min <= max`` for every stat.
"""
from __future__ import annotations

import logging
import math
from typing import List, Optional

from riven_grader.constants import MAGNITUDE_MAX, MAGNITUDE_MIN, PLACEHOLDER_TAG
from riven_grader.errors import OracleFailure, RivenGradingError, UnresolvableStat
from riven_grader.interfaces import IValuationOracle
from riven_grader.models import OracleSlot, RollComposition, Slot, StatRange, StatRangeEntry
from riven_grader.oracle import TableValuationOracle
from riven_grader.stat_catalog.models import CatalogSnapshot, CategoryDefinition

logger = logging.getLogger(__name__)


def normalize_range(worst: float, best: float) -> StatRange:
    """Build a StatRange from raw worst/best values."""
    if best >= worst:
        return StatRange(min=worst, max=best, orientation=1)
    return StatRange(min=-worst, max=-best, orientation=-1)


class RangeResolver:
    """Resolves stat ranges against one catalog snapshot."""

    def __init__(self, snapshot: CatalogSnapshot, oracle: Optional[IValuationOracle] = None):
        """
        Args:
            snapshot: Catalog tables to resolve against.
            oracle: Valuation oracle; a TableValuationOracle over the snapshot when None.
        """
        self.snapshot = snapshot
        self.oracle = oracle if oracle is not None else TableValuationOracle(snapshot)

    def resolve(
        self,
        tag: str,
        category: str,
        disposition: float,
        rank: int,
        composition: RollComposition,
        slot: Slot = Slot.BUFF,
    ) -> StatRange:
        """
        Resolve the range of one stat in one slot.

        Raises:
            UnresolvableStat: unknown tag or category, a stat the category
                cannot roll, or a slot the stat/composition cannot fill.
            OracleFailure: the oracle raised or returned an unusable value.
        """
        definition = self.snapshot.get_stat(tag)
        category_def = self._category_for(tag, category)

        if not category_def.allows(tag):
            raise UnresolvableStat(tag, f"cannot roll on {category_def.display_name} rivens")
        if slot is Slot.CURSE and not definition.can_be_curse:
            raise UnresolvableStat(tag, "cannot roll as a curse")
        if composition.count(slot) == 0:
            raise UnresolvableStat(tag, f"roll has no {slot} slots")

        at_min = self._value_at(tag, MAGNITUDE_MIN, category_def.key, disposition, rank, composition, slot)
        at_max = self._value_at(tag, MAGNITUDE_MAX, category_def.key, disposition, rank, composition, slot)

        if slot is Slot.BUFF:
            worst, best = at_min, at_max
        else:
            worst, best = at_max, at_min

        stat_range = normalize_range(worst, best)
        logger.debug(
            f"Range {tag} [{slot}] on {category_def.key} "
            f"(disp={disposition}, rank={rank}, {composition.key}): "
            f"worst={worst:.4f} best={best:.4f} -> {stat_range}"
        )
        return stat_range

    def resolve_all(
        self,
        category: str,
        disposition: float,
        rank: int,
        composition: RollComposition,
    ) -> List[StatRangeEntry]:
        """
        List the buff range of every stat the category can roll, followed by
        the curse range of every stat that can be a curse (only when the
        composition has curse slots).

        Per-stat failures are reported on the entry instead of raised.

        Raises:
            UnresolvableStat: if the category itself is unknown.
        """
        category_def = self.snapshot.get_category(category)
        tags = [tag for tag in self.snapshot.stats if category_def.allows(tag)]

        entries = [
            self._entry(tag, category_def.key, disposition, rank, composition, Slot.BUFF)
            for tag in tags
        ]
        if composition.negative_count > 0:
            entries.extend(
                self._entry(tag, category_def.key, disposition, rank, composition, Slot.CURSE)
                for tag in tags
                if self.snapshot.stats[tag].can_be_curse
            )
        return entries

    def _entry(
        self,
        tag: str,
        category: str,
        disposition: float,
        rank: int,
        composition: RollComposition,
        slot: Slot,
    ) -> StatRangeEntry:
        display_name = self.snapshot.stats[tag].display_name
        try:
            stat_range = self.resolve(tag, category, disposition, rank, composition, slot)
        except RivenGradingError as e:
            logger.warning(f"Could not resolve {slot} range for {tag}: {e}")
            return StatRangeEntry(tag=tag, display_name=display_name, slot=slot, error=str(e))
        return StatRangeEntry(tag=tag, display_name=display_name, slot=slot, range=stat_range)

    def _category_for(self, tag: str, category: str) -> CategoryDefinition:
        try:
            return self.snapshot.get_category(category)
        except UnresolvableStat as e:
            raise UnresolvableStat(tag, f"unknown weapon category {category!r}") from e

    @staticmethod
    def _synthetic_slots(
        tag: str,
        magnitude: float,
        composition: RollComposition,
        slot: Slot,
    ) -> List[OracleSlot]:
        """Buffs then curses, with the measured stat first in its slot group."""
        placeholder = OracleSlot(PLACEHOLDER_TAG, MAGNITUDE_MIN)
        buffs = [placeholder] * composition.positive_count
        curses = [placeholder] * composition.negative_count
        target = OracleSlot(tag, magnitude)
        if slot is Slot.BUFF:
            buffs[0] = target
        else:
            curses[0] = target
        return buffs + curses

    def _value_at(
        self,
        tag: str,
        magnitude: float,
        category: str,
        disposition: float,
        rank: int,
        composition: RollComposition,
        slot: Slot,
    ) -> float:
        slots = self._synthetic_slots(tag, magnitude, composition, slot)
        index = 0 if slot is Slot.BUFF else composition.positive_count

        try:
            values = self.oracle.evaluate(category, slots, disposition, rank, composition)
        except UnresolvableStat:
            raise
        except Exception as e:  # the oracle is a black box
            raise OracleFailure(tag, e) from e

        if values is None or len(values) != len(slots):
            raise OracleFailure(tag)
        try:
            value = float(values[index])
        except (TypeError, ValueError) as e:
            raise OracleFailure(tag, e) from e
        if not math.isfinite(value):
            raise OracleFailure(tag, ValueError(f"non-finite value {value}"))
        return value
