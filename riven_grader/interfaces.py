"""
Collaborator interfaces.

Protocol definitions for the pieces the grading engine consumes but does not
own: the valuation oracle (value formulas), and the free-text resolvers
that turn user input into stat tags and item profiles. Any object with the
matching methods satisfies the protocol, so alternate formula ports or fuzzy
matchers can be injected without touching range/quality/grade logic.

Usage:
    from riven_grader.interfaces import IValuationOracle

    class PortedFormulaOracle:
        def evaluate(self, category, slots, disposition, rank, composition):
            ...

    grader = RollGrader(oracle=PortedFormulaOracle())
"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from riven_grader.models import ItemProfile, OracleSlot, RollComposition


@runtime_checkable
class IValuationOracle(Protocol):
    """Maps a roll composition plus per-slot magnitudes to concrete values.

    Must be deterministic and side-effect free: range derivation calls it
    twice (magnitude 0 and 1) and relies on the results bounding every
    intermediate magnitude.
    """

    def evaluate(
        self,
        category: str,
        slots: Sequence["OracleSlot"],
        disposition: float,
        rank: int,
        composition: "RollComposition",
    ) -> List[float]:
        """Evaluate a synthetic roll.

        Args:
            category: Catalog category key (e.g. "rifle").
            slots: Buff slots followed by curse slots, matching composition.
            disposition: Category disposition multiplier.
            rank: Roll rank (0-8).
            composition: Buff/curse counts.

        Returns:
            One value per slot, in slot order, in each stat's internal unit.
        """
        ...


@runtime_checkable
class IStatTagResolver(Protocol):
    """Turns a user-facing stat name into a canonical stat tag."""

    def resolve_tag(self, text: str) -> Optional[str]:
        """Return the stat tag, or None when the name is not recognized."""
        ...


@runtime_checkable
class IItemProfileResolver(Protocol):
    """Turns a weapon name into its category and disposition."""

    def resolve_profile(self, text: str) -> Optional["ItemProfile"]:
        """Return the profile, or None when the weapon is not known."""
        ...
