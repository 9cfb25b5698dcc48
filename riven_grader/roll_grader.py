"""
Roll Grader

Grades a whole roll: validates the request, resolves every stat's range for
its slot, scores and classifies each observed value, and aggregates the
results.

Control flow per stat:

    name/tag -> StatDefinition -> internal value -> slot (from the sign)
             -> RangeResolver.resolve -> score -> classify

A stat that cannot be resolved (unknown tag, stat not allowed on the
category, non-finite value, oracle failure) is recorded as UNRESOLVED with
its error message and excluded from the aggregate. Invalid rank, disposition
or stat count reject the whole request.

The catalog snapshot is read once per request, so a concurrent reload never
mixes two catalogs inside one report.

Usage:
    from riven_grader import ItemProfile, ObservedStat, RollComposition, RollGrader

    grader = RollGrader()
    report = grader.grade(
        ItemProfile(category="rifle", disposition=1.3),
        RollComposition(2, 1),
        rank=8,
        observed=[
            ObservedStat("Critical Chance", 180.2),
            ObservedStat("Multishot", 95.0),
            ObservedStat("Recoil", 80.1),
        ],
    )
    print(report.roll_grade.overall_grade)
"""
from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Optional, Sequence

from riven_grader.constants import MAX_RANK, MIN_RANK
from riven_grader.errors import (
    InvalidComposition,
    InvalidRollParameters,
    OracleFailure,
    RivenGradingError,
    UnresolvableStat,
)
from riven_grader.grade_classifier import classify
from riven_grader.interfaces import IItemProfileResolver, IStatTagResolver, IValuationOracle
from riven_grader.models import (
    GradedStat,
    ItemProfile,
    ObservedStat,
    RollComposition,
    RollReport,
)
from riven_grader.quality_scorer import score, to_internal_value
from riven_grader.range_resolver import RangeResolver
from riven_grader.result import Result, try_result
from riven_grader.roll_aggregator import aggregate
from riven_grader.stat_catalog.lookup import CatalogTagResolver
from riven_grader.stat_catalog.models import CatalogSnapshot
from riven_grader.stat_catalog.store import CatalogStore, get_catalog_store

logger = logging.getLogger(__name__)


def validate_roll_parameters(rank: int, disposition: float) -> None:
    """
    Raises:
        InvalidRollParameters: rank not an integer in 0..8, or disposition not
            a positive finite number.
    """
    if isinstance(rank, bool) or not isinstance(rank, int) or not MIN_RANK <= rank <= MAX_RANK:
        raise InvalidRollParameters(
            f"Rank must be an integer between {MIN_RANK} and {MAX_RANK} (got {rank!r})"
        )
    if (
        isinstance(disposition, bool)
        or not isinstance(disposition, Real)
        or not math.isfinite(disposition)
        or disposition <= 0
    ):
        raise InvalidRollParameters(
            f"Disposition must be a positive number (got {disposition!r})"
        )


class RollGrader:
    """Grades observed rolls against the published stat catalog."""

    def __init__(
        self,
        store: Optional[CatalogStore] = None,
        oracle: Optional[IValuationOracle] = None,
        tag_resolver: Optional[IStatTagResolver] = None,
        profile_resolver: Optional[IItemProfileResolver] = None,
    ):
        """
        Args:
            store: Catalog store; the process-wide store when None.
            oracle: Valuation oracle; a TableValuationOracle over each
                request's snapshot when None.
            tag_resolver: Maps stat names to tags; exact catalog lookup when None.
            profile_resolver: Maps weapon names to profiles, for grade_named().
        """
        self.store = store if store is not None else get_catalog_store()
        self.oracle = oracle
        self.tag_resolver = tag_resolver if tag_resolver is not None else CatalogTagResolver(self.store)
        self.profile_resolver = profile_resolver

    def grade(
        self,
        profile: ItemProfile,
        composition: RollComposition,
        rank: int,
        observed: Sequence[ObservedStat],
    ) -> RollReport:
        """
        Grade every observed stat and the roll as a whole.

        Args:
            profile: Weapon category and disposition.
            composition: Buff/curse counts of the roll.
            rank: Riven rank (0-8).
            observed: Stats as read off the roll, in any order.

        Returns:
            RollReport with one GradedStat per observed stat.

        Raises:
            InvalidRollParameters: rank or disposition out of range.
            InvalidComposition: stat count does not match the composition.
        """
        validate_roll_parameters(rank, profile.disposition)
        if len(observed) != composition.total:
            raise InvalidComposition(
                f"Stat count mismatch: expected {composition.total} stats "
                f"({composition.positive_count} positive, {composition.negative_count} negative), "
                f"got {len(observed)}"
            )

        snapshot = self.store.snapshot
        resolver = RangeResolver(snapshot, self.oracle)

        logger.debug(
            f"Grading {profile.name or profile.category} roll: "
            f"category={profile.category} disp={profile.disposition} "
            f"rank={rank} composition={composition.key} catalog={snapshot.version}"
        )

        stats = [
            self._grade_stat(snapshot, resolver, profile, composition, rank, stat)
            for stat in observed
        ]
        roll_grade = aggregate(stats)

        logger.info(
            f"Graded roll on {profile.name or profile.category}: {roll_grade.overall_grade} "
            f"({roll_grade.graded_count} graded, {roll_grade.excluded_count} unresolved)"
        )
        return RollReport(
            profile=profile,
            composition=composition,
            rank=rank,
            stats=stats,
            roll_grade=roll_grade,
        )

    def try_grade(
        self,
        profile: ItemProfile,
        composition: RollComposition,
        rank: int,
        observed: Sequence[ObservedStat],
    ) -> Result[RollReport, RivenGradingError]:
        """Like grade(), but returns Err(error) instead of raising."""
        result = try_result(
            lambda: self.grade(profile, composition, rank, observed),
            (RivenGradingError,),
        )
        if result.is_err():
            logger.warning(f"Roll rejected: {result.error}")
        return result

    def grade_named(
        self,
        weapon_name: str,
        composition: RollComposition,
        rank: int,
        observed: Sequence[ObservedStat],
    ) -> RollReport:
        """
        Grade a roll by weapon name, using the profile resolver.

        Raises:
            InvalidRollParameters: no profile resolver, or the weapon is unknown.
            InvalidComposition: stat count does not match the composition.
        """
        if self.profile_resolver is None:
            raise InvalidRollParameters("No weapon profiles configured")
        profile = self.profile_resolver.resolve_profile(weapon_name)
        if profile is None:
            raise InvalidRollParameters(f"Unknown weapon: {weapon_name!r}")
        return self.grade(profile, composition, rank, observed)

    def _resolve_tag(self, snapshot: CatalogSnapshot, name: str) -> str:
        if snapshot.has_stat(name):
            return name
        tag = self.tag_resolver.resolve_tag(name)
        if tag is None:
            raise UnresolvableStat(name, "no stat with this name")
        return tag

    def _grade_stat(
        self,
        snapshot: CatalogSnapshot,
        resolver: RangeResolver,
        profile: ItemProfile,
        composition: RollComposition,
        rank: int,
        observed: ObservedStat,
    ) -> GradedStat:
        slot = None
        try:
            if not math.isfinite(observed.display_value):
                raise UnresolvableStat(observed.tag, "observed value is not a finite number")
            tag = self._resolve_tag(snapshot, observed.tag)
            definition = snapshot.get_stat(tag)
            internal = to_internal_value(observed.display_value, definition.value_class)
            slot = definition.slot_for(internal)
            stat_range = resolver.resolve(
                tag, profile.category, profile.disposition, rank, composition, slot
            )
        except (UnresolvableStat, OracleFailure) as e:
            logger.warning(f"Could not grade {observed.tag} ({observed.display_value}): {e}")
            return GradedStat.unresolved(observed.tag, observed.display_value, str(e), slot)

        quality, percent_diff = score(observed.display_value, stat_range, definition)
        grade = classify(percent_diff)
        logger.debug(
            f"{tag} [{slot}] value={observed.display_value} internal={internal:.4f} "
            f"range=[{stat_range.min:.4f}, {stat_range.max:.4f}] "
            f"quality={quality:.4f} diff={percent_diff:+.2f} grade={grade}"
        )
        return GradedStat(
            tag=tag,
            value=observed.display_value,
            grade=grade,
            quality=quality,
            percent_diff_from_center=percent_diff,
            slot=slot,
            range=stat_range,
        )
