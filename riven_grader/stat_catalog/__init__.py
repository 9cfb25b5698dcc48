"""
Stat Catalog Package.

Static registry of stat tags (value class, polarity, base ranges) and weapon
categories, loaded once and swapped atomically on reload.

Public API:
- CatalogStore / get_catalog_store(): published snapshot holder
- CatalogSnapshot: read-only tables
- StatDefinition, CategoryDefinition, ValueClass: catalog entries
- load_catalog / parse_catalog: build a snapshot from JSON
- CatalogTagResolver, WeaponProfileTable: exact name lookups

Example:
    from riven_grader.stat_catalog import get_catalog_store
    snapshot = get_catalog_store().snapshot
    recoil = snapshot.get_stat("WeaponRecoilReductionMod")
"""
from riven_grader.stat_catalog.models import (
    CatalogSnapshot,
    CategoryDefinition,
    CompositionScale,
    StatDefinition,
    ValueClass,
)
from riven_grader.stat_catalog.loader import default_catalog_path, load_catalog, parse_catalog
from riven_grader.stat_catalog.store import CatalogStore, get_catalog_store, reset_catalog_store
from riven_grader.stat_catalog.lookup import CatalogTagResolver, WeaponProfileTable

__all__ = [
    "CatalogSnapshot",
    "CatalogStore",
    "CatalogTagResolver",
    "CategoryDefinition",
    "CompositionScale",
    "StatDefinition",
    "ValueClass",
    "WeaponProfileTable",
    "default_catalog_path",
    "get_catalog_store",
    "load_catalog",
    "parse_catalog",
    "reset_catalog_store",
]
