"""
Tests for RangeResolver.

At disposition 1.0 and rank 8 every base range in the test catalog doubles,
e.g. Damage buff (0.3, 1.5) -> (0.6, 3.0).
"""
import math
from unittest.mock import Mock

import pytest

from riven_grader.errors import OracleFailure, UnresolvableStat
from riven_grader.models import OracleSlot, RollComposition, Slot, StatRange
from riven_grader.oracle import TableValuationOracle
from riven_grader.range_resolver import RangeResolver, normalize_range

pytestmark = pytest.mark.unit


class TestNormalizeRange:
    def test_ascending(self):
        assert normalize_range(0.6, 3.0) == StatRange(0.6, 3.0, 1)

    def test_descending_is_negated(self):
        assert normalize_range(-60.0, -140.0) == StatRange(60.0, 140.0, -1)

    def test_degenerate(self):
        assert normalize_range(100.0, 100.0) == StatRange(100.0, 100.0, 1)


class TestResolve:
    """Tests for RangeResolver.resolve()."""

    def test_damage_buff_scenario(self, resolver, composition):
        """Damage (0.3, 1.5) at disposition 1.0, rank 8 resolves to (0.6, 3.0)."""
        stat_range = resolver.resolve("WeaponDamageAmountMod", "rifle", 1.0, 8, composition)
        assert stat_range.min == pytest.approx(0.6)
        assert stat_range.max == pytest.approx(3.0)
        assert stat_range.center == pytest.approx(1.8)
        assert stat_range.orientation == 1

    def test_curse_best_is_mildest(self, resolver, composition):
        """For a curse, magnitude 0 (closest to zero) is the best roll."""
        stat_range = resolver.resolve(
            "WeaponDamageAmountMod", "rifle", 1.0, 8, composition, Slot.CURSE
        )
        assert stat_range.min == pytest.approx(-1.4)
        assert stat_range.max == pytest.approx(-0.6)
        assert stat_range.orientation == 1

    def test_recoil_buff_is_negated(self, resolver, composition):
        """Recoil buff: more negative is better, so the axis is flipped."""
        stat_range = resolver.resolve("WeaponRecoilReductionMod", "rifle", 1.0, 8, composition)
        assert stat_range == StatRange(pytest.approx(60.0), pytest.approx(140.0), -1)
        assert stat_range.raw_bounds() == pytest.approx((-60.0, -140.0))

    def test_recoil_curse_is_negated(self, resolver, composition):
        stat_range = resolver.resolve(
            "WeaponRecoilReductionMod", "rifle", 1.0, 8, composition, Slot.CURSE
        )
        assert stat_range.min == pytest.approx(-140.0)
        assert stat_range.max == pytest.approx(-60.0)
        assert stat_range.orientation == -1

    @pytest.mark.parametrize("tag", [
        "WeaponCritChanceMod", "WeaponDamageAmountMod", "WeaponRecoilReductionMod",
        "WeaponPunctureDepthMod", "WeaponFactionDamageGrineer", "WeaponZoomFovMod",
    ])
    @pytest.mark.parametrize("slot", [Slot.BUFF, Slot.CURSE])
    def test_min_never_exceeds_max(self, resolver, composition, tag, slot):
        stat_range = resolver.resolve(tag, "rifle", 1.3, 5, composition, slot)
        assert stat_range.min <= stat_range.max

    def test_degenerate_range(self, resolver, composition):
        stat_range = resolver.resolve("WeaponZoomFovMod", "rifle", 1.0, 8, composition)
        assert stat_range.is_degenerate
        assert stat_range.min == pytest.approx(100.0)

    def test_rank_and_disposition_scale(self, resolver, composition):
        stat_range = resolver.resolve("WeaponDamageAmountMod", "rifle", 0.5, 0, composition)
        assert stat_range.min == pytest.approx(0.15)
        assert stat_range.max == pytest.approx(0.75)

    def test_category_lookup_is_case_insensitive(self, resolver, composition):
        stat_range = resolver.resolve("WeaponDamageAmountMod", "Rifle", 1.0, 8, composition)
        assert stat_range.max == pytest.approx(3.0)


class TestResolveErrors:
    """Per-stat failures raised by resolve()."""

    def test_unknown_tag(self, resolver, composition):
        with pytest.raises(UnresolvableStat, match="not in stat catalog"):
            resolver.resolve("WeaponBogusMod", "rifle", 1.0, 8, composition)

    def test_unknown_category_is_scoped_to_the_stat(self, resolver, composition):
        with pytest.raises(UnresolvableStat) as exc_info:
            resolver.resolve("WeaponDamageAmountMod", "bow", 1.0, 8, composition)
        assert exc_info.value.tag == "WeaponDamageAmountMod"
        assert "unknown weapon category 'bow'" in str(exc_info.value)

    def test_stat_not_allowed_on_category(self, resolver, composition):
        with pytest.raises(UnresolvableStat, match="cannot roll on Melee rivens"):
            resolver.resolve("WeaponRecoilReductionMod", "melee", 1.0, 8, composition)

    def test_buff_only_stat_as_curse(self, resolver, composition):
        with pytest.raises(UnresolvableStat, match="cannot roll as a curse"):
            resolver.resolve(
                "WeaponMeleeComboBonusOnHitMod", "melee", 1.0, 8, composition, Slot.CURSE
            )

    def test_curse_without_curse_slots(self, resolver):
        with pytest.raises(UnresolvableStat, match="no curse slots"):
            resolver.resolve(
                "WeaponDamageAmountMod", "rifle", 1.0, 8, RollComposition(3, 0), Slot.CURSE
            )

    def test_oracle_exception_becomes_oracle_failure(self, snapshot, composition):
        oracle = Mock()
        oracle.evaluate.side_effect = RuntimeError("formula exploded")
        resolver = RangeResolver(snapshot, oracle)

        with pytest.raises(OracleFailure) as exc_info:
            resolver.resolve("WeaponDamageAmountMod", "rifle", 1.0, 8, composition)

        assert exc_info.value.tag == "WeaponDamageAmountMod"
        assert isinstance(exc_info.value.cause, RuntimeError)
        assert "formula exploded" in str(exc_info.value)

    def test_wrong_result_length(self, snapshot, composition):
        oracle = Mock()
        oracle.evaluate.return_value = [1.0]
        with pytest.raises(OracleFailure, match="no value returned"):
            RangeResolver(snapshot, oracle).resolve(
                "WeaponDamageAmountMod", "rifle", 1.0, 8, composition
            )

    def test_non_finite_value(self, snapshot, composition):
        oracle = Mock()
        oracle.evaluate.return_value = [math.nan, 0.0, 0.0, 0.0]
        with pytest.raises(OracleFailure, match="non-finite"):
            RangeResolver(snapshot, oracle).resolve(
                "WeaponDamageAmountMod", "rifle", 1.0, 8, composition
            )


class TestSyntheticSlots:
    """The oracle sees a roll shaped like the real one."""

    def test_buff_query(self, snapshot, composition):
        oracle = Mock(wraps=TableValuationOracle(snapshot))
        RangeResolver(snapshot, oracle).resolve(
            "WeaponDamageAmountMod", "rifle", 1.3, 6, composition
        )

        assert oracle.evaluate.call_count == 2
        low_call, high_call = oracle.evaluate.call_args_list
        placeholder = OracleSlot("WeaponCritChanceMod", 0.0)
        assert low_call.args == (
            "rifle",
            [OracleSlot("WeaponDamageAmountMod", 0.0), placeholder, placeholder, placeholder],
            1.3, 6, composition,
        )
        assert high_call.args[1][0] == OracleSlot("WeaponDamageAmountMod", 1.0)

    def test_curse_query_uses_first_curse_slot(self, snapshot):
        composition = RollComposition(2, 1)
        oracle = Mock(wraps=TableValuationOracle(snapshot))
        RangeResolver(snapshot, oracle).resolve(
            "WeaponRecoilReductionMod", "rifle", 1.0, 8, composition, Slot.CURSE
        )

        slots = oracle.evaluate.call_args_list[1].args[1]
        assert slots == [
            OracleSlot("WeaponCritChanceMod", 0.0),
            OracleSlot("WeaponCritChanceMod", 0.0),
            OracleSlot("WeaponRecoilReductionMod", 1.0),
        ]

    def test_composition_scaling_applies(self, composition):
        from tests.conftest_utils import build_test_snapshot

        snapshot = build_test_snapshot(composition_scaling={"3/1": {"buff": 0.5}})
        stat_range = RangeResolver(snapshot).resolve(
            "WeaponDamageAmountMod", "rifle", 1.0, 8, composition
        )
        assert stat_range.max == pytest.approx(1.5)


class TestResolveAll:
    """Tests for the stat range listing."""

    def test_buffs_then_curses(self, resolver, composition):
        entries = resolver.resolve_all("rifle", 1.0, 8, composition)
        buffs = [e for e in entries if e.slot is Slot.BUFF]
        curses = [e for e in entries if e.slot is Slot.CURSE]

        assert len(buffs) == 6
        assert len(curses) == 6
        assert entries[:6] == buffs
        assert all(e.range is not None and e.error is None for e in entries)

    def test_buff_only_stats_have_no_curse_entry(self, resolver, composition):
        entries = resolver.resolve_all("melee", 1.0, 8, composition)
        heavy = [e for e in entries if e.tag == "WeaponMeleeComboBonusOnHitMod"]
        assert [e.slot for e in heavy] == [Slot.BUFF]

    def test_no_curses_without_curse_slots(self, resolver):
        entries = resolver.resolve_all("rifle", 1.0, 8, RollComposition(3, 0))
        assert {e.slot for e in entries} == {Slot.BUFF}

    def test_display_names(self, resolver, composition):
        entries = resolver.resolve_all("rifle", 1.0, 8, composition)
        assert entries[0].display_name == "Critical Chance"

    def test_failures_reported_per_entry(self, snapshot, composition, caplog):
        oracle = Mock()
        oracle.evaluate.side_effect = RuntimeError("down")
        entries = RangeResolver(snapshot, oracle).resolve_all("rifle", 1.0, 8, composition)

        assert entries
        assert all(e.range is None for e in entries)
        assert "valuation failed" in entries[0].error
        assert "Could not resolve buff range" in caplog.text

    def test_unknown_category_raises(self, resolver, composition):
        with pytest.raises(UnresolvableStat):
            resolver.resolve_all("bow", 1.0, 8, composition)
