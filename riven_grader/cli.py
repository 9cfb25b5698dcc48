"""
Command-line interface for the Riven Grader.

Provides print utilities and the CLI entry point.
"""
from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from riven_grader.config import Config
from riven_grader.errors import CatalogLoadError, RivenGradingError
from riven_grader.formatting import format_percent_diff, format_range, format_stat_value
from riven_grader.logging_setup import setup_logging
from riven_grader.models import (
    ItemProfile,
    ObservedStat,
    RollComposition,
    RollReport,
    Slot,
    StatRangeEntry,
)
from riven_grader.range_resolver import RangeResolver
from riven_grader.roll_grader import RollGrader, validate_roll_parameters
from riven_grader.stat_catalog import CatalogStore, WeaponProfileTable
from riven_grader.stat_catalog.models import CatalogSnapshot

# Exit codes
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def parse_stat_argument(text: str) -> ObservedStat:
    """
    Parse "Critical Chance=120.5" into an ObservedStat.

    A trailing "%" and a leading "x" (multiplier stats) are accepted.

    Raises:
        argparse.ArgumentTypeError: if the text is not NAME=VALUE.
    """
    name, sep, value = text.rpartition("=")
    name = name.strip()
    value = value.strip().rstrip("%").lstrip("xX")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number in {text!r}")
    if not math.isfinite(number):
        raise argparse.ArgumentTypeError(f"not a finite number in {text!r}")
    return ObservedStat(tag=name, display_value=number)


def _banner(title: str) -> None:
    print(f"\n{'='*60}")
    print(f" {title}")
    print(f"{'='*60}")


def _composition_label(composition: RollComposition) -> str:
    buffs = f"{composition.positive_count} buff{'s' if composition.positive_count != 1 else ''}"
    curses = f"{composition.negative_count} curse{'s' if composition.negative_count != 1 else ''}"
    return f"{buffs} / {curses}"


def print_report(report: RollReport, snapshot: CatalogSnapshot) -> None:
    """Pretty-print a graded roll."""
    profile = report.profile
    title = profile.name or profile.category.title()
    _banner(
        f"{title} (disposition {profile.disposition:.2f}, rank {report.rank}, "
        f"{_composition_label(report.composition)})"
    )

    for stat in report.stats:
        definition = snapshot.stats.get(stat.tag)
        name = definition.display_name if definition else stat.tag
        if not stat.is_resolved:
            print(f"  {name:28} {stat.value:>10g}  {stat.grade}  ({stat.error})")
            continue

        value = format_stat_value(stat.value, definition.value_class)
        range_text = format_range(stat.range, definition, stat.slot)
        print(
            f"  {name:28} {value:>10} [{stat.slot}] {range_text:28} "
            f"q={stat.quality:.2f} {format_percent_diff(stat.percent_diff_from_center):>7}  {stat.grade}"
        )

    roll_grade = report.roll_grade
    if roll_grade.is_resolved:
        print(
            f"\n  Overall: {roll_grade.overall_grade} "
            f"(quality {roll_grade.overall_quality:.2f}, "
            f"{format_percent_diff(roll_grade.percent_diff_from_center)})"
        )
    else:
        print(f"\n  Overall: {roll_grade.overall_grade} (no gradable stats)")


def print_ranges(entries: Sequence[StatRangeEntry], snapshot: CatalogSnapshot) -> None:
    """Pretty-print a stat range listing, buffs first."""
    for slot, heading in ((Slot.BUFF, "Buffs"), (Slot.CURSE, "Curses")):
        rows = [entry for entry in entries if entry.slot is slot]
        if not rows:
            continue
        print(f"\n  {heading}:")
        for entry in rows:
            if entry.range is None:
                print(f"    {entry.display_name:28} unavailable ({entry.error})")
                continue
            definition = snapshot.stats[entry.tag]
            print(f"    {entry.display_name:28} {format_range(entry.range, definition, slot)}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="riven-grader",
        description="Riven Grader - grade riven rolls against their stat ranges",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  riven-grader grade -c rifle -d 1.3 --buffs 2 --curses 1 \\
      --stat "Critical Chance=180.2" --stat "Multishot=95" --stat "Recoil=80"
  riven-grader grade -w "Soma Prime" --buffs 2 --curses 0 \\
      --stat "Damage=120" --stat "Damage to Grineer=x1.55"
  riven-grader ranges -c melee -d 0.85 --rank 8
        """,
    )
    parser.add_argument("--config", type=Path, help="Config file (default: ~/.riven_grader/config.json)")
    parser.add_argument("--catalog", type=Path, help="Stat catalog file (overrides config)")
    parser.add_argument("--debug", action="store_true", help="Log range/quality traces")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress info messages")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_roll_arguments(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("-w", "--weapon", help="Weapon name from the config's weapon table")
        sub.add_argument("-c", "--category", help="Weapon category (rifle, pistol, shotgun, melee, ...)")
        sub.add_argument("-d", "--disposition", type=float, help="Weapon disposition (e.g. 1.3)")
        sub.add_argument("-r", "--rank", type=int, help="Riven rank 0-8 (default from config: 8)")
        sub.add_argument("--buffs", type=int, help="Number of positive stats (default from config)")
        sub.add_argument("--curses", type=int, help="Number of negative stats (default from config)")

    grade = subparsers.add_parser("grade", help="Grade a riven roll")
    add_roll_arguments(grade)
    grade.add_argument(
        "-s", "--stat", dest="stats", action="append", type=parse_stat_argument, default=[],
        metavar="NAME=VALUE", help="Observed stat, repeat for each stat (e.g. \"Recoil=-60\")",
    )

    ranges = subparsers.add_parser("ranges", help="List stat ranges for a weapon")
    add_roll_arguments(ranges)

    return parser


def _resolve_profile(
    args: argparse.Namespace,
    parser: argparse.ArgumentParser,
    weapons: WeaponProfileTable,
) -> ItemProfile:
    if args.weapon:
        profile = weapons.resolve_profile(args.weapon)
        if profile is None:
            parser.error(f"unknown weapon {args.weapon!r}; add it to the config or use --category/--disposition")
        return profile
    if not args.category or args.disposition is None:
        parser.error("either --weapon or both --category and --disposition are required")
    return ItemProfile(category=args.category.lower(), disposition=args.disposition)


def _roll_parameters(args: argparse.Namespace, config: Config) -> Tuple[int, RollComposition]:
    rank = args.rank if args.rank is not None else config.default_rank
    buffs = args.buffs if args.buffs is not None else config.default_buffs
    curses = args.curses if args.curses is not None else config.default_curses
    return rank, RollComposition(buffs, curses)


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point. Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = Config(args.config)

    # Setup logging
    if args.quiet:
        logging.basicConfig(level=logging.WARNING, format="%(message)s")
    else:
        setup_logging(debug=args.debug or config.debug_logging)

    store = CatalogStore(path=args.catalog or config.catalog_path)
    weapons = WeaponProfileTable.from_mapping(config.weapons)
    profile = _resolve_profile(args, parser, weapons)

    try:
        snapshot = store.snapshot
        rank, composition = _roll_parameters(args, config)
        validate_roll_parameters(rank, profile.disposition)

        if args.command == "ranges":
            resolver = RangeResolver(snapshot)
            entries = resolver.resolve_all(profile.category, profile.disposition, rank, composition)
            _banner(
                f"{snapshot.get_category(profile.category).display_name} stat ranges "
                f"(disposition {profile.disposition:.2f}, rank {rank}, {_composition_label(composition)})"
            )
            print_ranges(entries, snapshot)
            return EXIT_OK

        grader = RollGrader(store=store)
        report = grader.grade(profile, composition, rank, args.stats)
        print_report(report, snapshot)
        return EXIT_OK

    except CatalogLoadError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except RivenGradingError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID_INPUT


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
