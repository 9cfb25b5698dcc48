"""
Stat catalog loader.

Parses the catalog JSON file into a CatalogSnapshot. File layout:

    {
      "version": "...",
      "stats": [
        {"tag": "WeaponRecoilReductionMod", "name": "Recoil",
         "value_class": "percentage", "polarity_inverted": true,
         "buff_range": [-30, -70], "curse_range": [30, 70]},
        ...
      ],
      "stat_groups": {"gun": ["WeaponRecoilReductionMod", ...]},
      "categories": [
        {"key": "rifle", "name": "Rifle", "riven_type": "LotusRifleRandomModRare",
         "stat_groups": ["common", "gun"], "stats": [], "scale": 1.0}
      ],
      "composition_scaling": {"3/1": {"buff": 1.0, "curse": 1.0}}
    }
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from riven_grader.constants import CATALOG_FILE_NAME, PLACEHOLDER_TAG
from riven_grader.errors import CatalogLoadError
from riven_grader.stat_catalog.models import (
    CatalogSnapshot,
    CategoryDefinition,
    CompositionScale,
    StatDefinition,
    ValueClass,
)

logger = logging.getLogger(__name__)


def default_catalog_path() -> Path:
    """Catalog file shipped with the package."""
    return Path(__file__).parent.parent / "data" / CATALOG_FILE_NAME


def load_catalog(path: Optional[Path] = None) -> CatalogSnapshot:
    """
    Load and validate a catalog file.

    Args:
        path: Catalog JSON file; the packaged catalog when None.

    Returns:
        A fully built CatalogSnapshot.

    Raises:
        CatalogLoadError: if the file cannot be read or is malformed.
    """
    path = Path(path) if path is not None else default_catalog_path()
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Cannot read stat catalog {path}: {e}") from e

    snapshot = parse_catalog(raw)
    logger.info(
        f"Loaded stat catalog {snapshot.version} from {path}: "
        f"{len(snapshot.stats)} stats, {len(snapshot.categories)} categories"
    )
    return snapshot


def parse_catalog(raw: Dict[str, Any]) -> CatalogSnapshot:
    """
    Build a snapshot from already-decoded catalog data.

    Raises:
        CatalogLoadError: on missing fields, bad values or dangling references.
    """
    if not isinstance(raw, dict):
        raise CatalogLoadError("Stat catalog must be a JSON object")

    try:
        stats = {d.tag: d for d in (_parse_stat(entry) for entry in raw["stats"])}
        groups = raw.get("stat_groups", {})
        categories = {
            c.key: c for c in (_parse_category(entry, groups, stats) for entry in raw["categories"])
        }
        scaling = {
            key: CompositionScale(buff=float(value.get("buff", 1.0)),
                                  curse=float(value.get("curse", 1.0)))
            for key, value in raw.get("composition_scaling", {}).items()
        }
    except CatalogLoadError:
        raise
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CatalogLoadError(f"Malformed stat catalog: {type(e).__name__}: {e}") from e

    if PLACEHOLDER_TAG not in stats:
        raise CatalogLoadError(f"Stat catalog must define the placeholder stat {PLACEHOLDER_TAG}")
    if not stats[PLACEHOLDER_TAG].can_be_curse:
        raise CatalogLoadError(f"Placeholder stat {PLACEHOLDER_TAG} must be able to roll as a curse")

    return CatalogSnapshot(
        stats=stats,
        categories=categories,
        composition_scaling=scaling,
        version=str(raw.get("version", "unversioned")),
    )


def _parse_range(value: Any) -> Tuple[float, float]:
    low, high = value
    return (float(low), float(high))


def _parse_stat(entry: Dict[str, Any]) -> StatDefinition:
    curse_range = entry.get("curse_range")
    return StatDefinition(
        tag=entry["tag"],
        display_name=entry["name"],
        value_class=ValueClass.from_string(entry.get("value_class", "percentage")),
        polarity_inverted=bool(entry.get("polarity_inverted", False)),
        reversed_display_symbol=bool(entry.get("reversed_display_symbol", False)),
        buff_range=_parse_range(entry["buff_range"]),
        curse_range=_parse_range(curse_range) if curse_range is not None else None,
        aliases=tuple(entry.get("aliases", ())),
    )


def _expand_groups(names: Iterable[str], groups: Dict[str, List[str]], category: str) -> List[str]:
    tags: List[str] = []
    for name in names:
        if name not in groups:
            raise CatalogLoadError(f"Category {category!r} references unknown stat group {name!r}")
        tags.extend(groups[name])
    return tags


def _parse_category(
    entry: Dict[str, Any],
    groups: Dict[str, List[str]],
    stats: Dict[str, StatDefinition],
) -> CategoryDefinition:
    key = entry["key"].lower()
    tags = _expand_groups(entry.get("stat_groups", ()), groups, key)
    tags.extend(entry.get("stats", ()))

    unknown = sorted(set(tags) - set(stats))
    if unknown:
        raise CatalogLoadError(f"Category {key!r} references unknown stats: {', '.join(unknown)}")

    scale = float(entry.get("scale", 1.0))
    if scale <= 0:
        raise CatalogLoadError(f"Category {key!r} scale must be positive (got {scale})")

    return CategoryDefinition(
        key=key,
        display_name=entry.get("name", key.title()),
        riven_type=entry.get("riven_type", ""),
        allowed_tags=frozenset(tags),
        scale=scale,
    )
