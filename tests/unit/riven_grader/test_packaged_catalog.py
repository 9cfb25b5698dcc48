"""
Checks against the stat catalog shipped with the package.

These load the real data file, so they are marked as integration tests.
"""
from __future__ import annotations

import pytest

from riven_grader.formatting import to_display_value
from riven_grader.grade_classifier import Grade
from riven_grader.models import ItemProfile, ObservedStat, RollComposition, Slot
from riven_grader.range_resolver import RangeResolver
from riven_grader.roll_grader import RollGrader
from riven_grader.stat_catalog import CatalogStore, default_catalog_path, load_catalog

pytestmark = pytest.mark.integration

HEAVY_ATTACK = "WeaponMeleeComboBonusOnHitMod"


@pytest.fixture(scope="module")
def packaged():
    return load_catalog()


def test_packaged_catalog_loads(packaged):
    assert default_catalog_path().exists()
    assert len(packaged.stats) == 36
    assert set(packaged.categories) == {
        "rifle", "pistol", "shotgun", "melee", "kitgun", "zaw", "archgun",
    }


@pytest.mark.parametrize("category", ["rifle", "pistol", "shotgun", "melee", "kitgun", "zaw", "archgun"])
def test_every_listed_range_is_ordered(packaged, category):
    entries = RangeResolver(packaged).resolve_all(category, 1.0, 8, RollComposition(3, 1))

    assert entries
    for entry in entries:
        assert entry.error is None, entry
        assert entry.range.min <= entry.range.max


@pytest.mark.parametrize("category", ["melee", "zaw"])
def test_heavy_attack_is_buff_only(packaged, category):
    entries = RangeResolver(packaged).resolve_all(category, 1.0, 8, RollComposition(2, 1))
    slots = [entry.slot for entry in entries if entry.tag == HEAVY_ATTACK]
    assert slots == [Slot.BUFF]


def test_gun_categories_exclude_melee_stats(packaged):
    entries = RangeResolver(packaged).resolve_all("rifle", 1.0, 8, RollComposition(2, 0))
    assert HEAVY_ATTACK not in {entry.tag for entry in entries}


def test_centered_pistol_roll_grades_b(packaged):
    """Observed values at the center of each resolved range grade B."""
    profile = ItemProfile(category="pistol", disposition=1.1)
    composition = RollComposition(2, 1)
    resolver = RangeResolver(packaged)

    observed = []
    for tag, slot in (
        ("WeaponFireIterationsMod", Slot.BUFF),
        ("WeaponDamageAmountMod", Slot.BUFF),
        ("WeaponRecoilReductionMod", Slot.CURSE),
    ):
        stat_range = resolver.resolve(tag, profile.category, profile.disposition, 8, composition, slot)
        definition = packaged.get_stat(tag)
        center = to_display_value(stat_range.center * stat_range.orientation, definition.value_class)
        observed.append(ObservedStat(definition.display_name, center))

    report = RollGrader(store=CatalogStore(snapshot=packaged)).grade(profile, composition, 8, observed)

    assert [s.slot for s in report.stats] == [Slot.BUFF, Slot.BUFF, Slot.CURSE]
    assert [s.grade for s in report.stats] == [Grade.B, Grade.B, Grade.B]
    assert report.roll_grade.overall_quality == pytest.approx(0.5)
