"""
Stat Catalog Models.

Immutable metadata for every stat a roll can carry and for every weapon
category. A CatalogSnapshot is built once from the catalog file and never
mutated; reloading builds a new snapshot (see store.py).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from riven_grader.errors import UnresolvableStat
from riven_grader.models import RollComposition, Slot


class ValueClass(Enum):
    """
    How a stat is displayed, which fixes the unit its ranges are stored in.

    PERCENTAGE: "+120.5%"; ranges in percent, compared as displayed.
    RAW_VALUE:  "+2.1" (punch through, melee range); ranges in the same
                percent-like unit, so displayed values are scaled by 100.
    MULTIPLIER: "x0.80" (faction damage); ranges are signed deltas, so
                displayed values are converted with ``multiplier - 1``.
    """
    PERCENTAGE = "percentage"
    RAW_VALUE = "raw_value"
    MULTIPLIER = "multiplier"

    @classmethod
    def from_string(cls, value: str) -> "ValueClass":
        """
        Raises:
            ValueError: for unknown value class names.
        """
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Unknown value class: {value!r}")


@dataclass(frozen=True)
class StatDefinition:
    """Everything the grader needs to know about one stat tag."""
    tag: str                                   # e.g. "WeaponCritChanceMod"
    display_name: str                          # e.g. "Critical Chance"
    value_class: ValueClass = ValueClass.PERCENTAGE
    polarity_inverted: bool = False            # negative is beneficial (recoil)
    reversed_display_symbol: bool = False      # curse sign shown flipped
    buff_range: Tuple[float, float] = (0.0, 0.0)           # at magnitude (0, 1)
    curse_range: Optional[Tuple[float, float]] = None      # None = buff only
    aliases: Tuple[str, ...] = ()

    @property
    def can_be_curse(self) -> bool:
        return self.curse_range is not None

    def base_range(self, slot: Slot) -> Tuple[float, float]:
        """
        Base (rank 0, disposition 1) values at magnitude 0 and 1.

        Raises:
            UnresolvableStat: when the stat cannot roll as a curse.
        """
        if slot is Slot.BUFF:
            return self.buff_range
        if self.curse_range is None:
            raise UnresolvableStat(self.tag, "cannot roll as a curse")
        return self.curse_range

    def slot_for(self, internal_value: float) -> Slot:
        """Which slot an observed value belongs to, from its sign."""
        negative = internal_value < 0
        if negative != self.polarity_inverted:
            return Slot.CURSE
        return Slot.BUFF

    def matches_name(self, name: str) -> bool:
        normalized = name.strip().lower()
        if normalized == self.display_name.lower() or normalized == self.tag.lower():
            return True
        return any(normalized == alias.lower() for alias in self.aliases)


@dataclass(frozen=True)
class CategoryDefinition:
    """A weapon category (riven type) and the stats it can roll."""
    key: str                 # e.g. "rifle"
    display_name: str        # e.g. "Rifle"
    riven_type: str          # e.g. "LotusRifleRandomModRare"
    allowed_tags: FrozenSet[str] = frozenset()
    scale: float = 1.0

    def allows(self, tag: str) -> bool:
        return tag in self.allowed_tags


@dataclass(frozen=True)
class CompositionScale:
    """Magnitude multipliers applied for a given buff/curse count."""
    buff: float = 1.0
    curse: float = 1.0

    def for_slot(self, slot: Slot) -> float:
        return self.buff if slot is Slot.BUFF else self.curse


_NEUTRAL_SCALE = CompositionScale()


@dataclass(frozen=True)
class CatalogSnapshot:
    """Read-only view of one loaded catalog."""
    stats: Mapping[str, StatDefinition]
    categories: Mapping[str, CategoryDefinition]
    composition_scaling: Mapping[str, CompositionScale] = field(
        default_factory=lambda: MappingProxyType({})
    )
    version: str = "unversioned"

    def __post_init__(self) -> None:
        # Freeze plain dicts handed in by callers
        for name in ("stats", "categories", "composition_scaling"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    def has_stat(self, tag: str) -> bool:
        return tag in self.stats

    def get_stat(self, tag: str) -> StatDefinition:
        """
        Raises:
            UnresolvableStat: if the tag is not in the catalog.
        """
        definition = self.stats.get(tag)
        if definition is None:
            raise UnresolvableStat(tag, "not in stat catalog")
        return definition

    def get_category(self, key: str) -> CategoryDefinition:
        """
        Raises:
            UnresolvableStat: if the category is not in the catalog.
        """
        category = self.categories.get(key.lower())
        if category is None:
            raise UnresolvableStat(key, "unknown weapon category")
        return category

    def find_stat_by_name(self, name: str) -> Optional[StatDefinition]:
        """Exact, case-insensitive lookup by display name, tag or alias."""
        for definition in self.stats.values():
            if definition.matches_name(name):
                return definition
        return None

    def composition_factor(self, composition: RollComposition, slot: Slot) -> float:
        scale = self.composition_scaling.get(composition.key, _NEUTRAL_SCALE)
        return scale.for_slot(slot)
