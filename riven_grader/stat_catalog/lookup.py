"""
Exact-match lookups from user-facing names.

CatalogTagResolver turns "Critical Chance", "crit chance" or
"WeaponCritChanceMod" into a stat tag. WeaponProfileTable turns a weapon name
into an ItemProfile. Both only do exact (case-insensitive) matching; fuzzy
matching belongs to callers that implement IStatTagResolver /
IItemProfileResolver themselves.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from riven_grader.models import ItemProfile
from riven_grader.stat_catalog.models import CatalogSnapshot
from riven_grader.stat_catalog.store import CatalogStore

logger = logging.getLogger(__name__)


class CatalogTagResolver:
    """IStatTagResolver backed by the catalog's names, aliases and tags."""

    def __init__(self, source: Union[CatalogStore, CatalogSnapshot]):
        self._source = source

    def _snapshot(self) -> CatalogSnapshot:
        if isinstance(self._source, CatalogStore):
            return self._source.snapshot
        return self._source

    def resolve_tag(self, text: str) -> Optional[str]:
        definition = self._snapshot().find_stat_by_name(text)
        if definition is None:
            logger.debug(f"No stat matches {text!r}")
            return None
        return definition.tag


class WeaponProfileTable:
    """IItemProfileResolver over a fixed weapon -> profile mapping."""

    def __init__(self, profiles: Iterable[ItemProfile] = ()):
        self._profiles: Dict[str, ItemProfile] = {}
        for profile in profiles:
            self.add(profile)

    def add(self, profile: ItemProfile) -> None:
        self._profiles[profile.name.strip().lower()] = profile

    def __len__(self) -> int:
        return len(self._profiles)

    def resolve_profile(self, text: str) -> Optional[ItemProfile]:
        return self._profiles.get(text.strip().lower())

    @classmethod
    def from_mapping(cls, weapons: Mapping[str, Mapping[str, Any]]) -> "WeaponProfileTable":
        """
        Build from {"Soma Prime": {"category": "rifle", "disposition": 0.5}}.

        Malformed entries are skipped with a warning.
        """
        table = cls()
        for name, entry in weapons.items():
            try:
                profile = ItemProfile(
                    category=str(entry["category"]).lower(),
                    disposition=float(entry["disposition"]),
                    name=name,
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping weapon {name!r}: {e!r}")
                continue
            table.add(profile)
        return table
