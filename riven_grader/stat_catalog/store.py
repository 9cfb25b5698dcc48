"""
Catalog store with lock-free reads.

Grading calls read ``store.snapshot`` and keep that reference for the whole
request, so a reload never changes the tables under a running computation.
A reload builds the complete replacement snapshot first and publishes it with
a single attribute assignment. The lock only serializes loaders.
"""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional

from riven_grader.errors import CatalogLoadError
from riven_grader.stat_catalog.loader import load_catalog
from riven_grader.stat_catalog.models import CatalogSnapshot

logger = logging.getLogger(__name__)


class CatalogStore:
    """Holds the currently published CatalogSnapshot."""

    def __init__(
        self,
        path: Optional[Path] = None,
        snapshot: Optional[CatalogSnapshot] = None,
    ):
        """
        Args:
            path: Catalog file to load from; packaged catalog when None.
            snapshot: Pre-built snapshot to publish immediately (skips loading).
        """
        self._path = Path(path) if path is not None else None
        self._snapshot: Optional[CatalogSnapshot] = snapshot
        self._load_lock = threading.Lock()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def snapshot(self) -> CatalogSnapshot:
        """The current snapshot, loading it on first access."""
        snapshot = self._snapshot
        if snapshot is not None:
            return snapshot
        with self._load_lock:
            if self._snapshot is None:
                self._snapshot = load_catalog(self._path)
            return self._snapshot

    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    def reload(self, path: Optional[Path] = None) -> CatalogSnapshot:
        """
        Load a replacement catalog and publish it.

        Args:
            path: New catalog file; keeps the current path when None.

        Returns:
            The newly published snapshot.

        Raises:
            CatalogLoadError: if loading fails. The previous snapshot stays published.
        """
        with self._load_lock:
            source = Path(path) if path is not None else self._path
            try:
                replacement = load_catalog(source)
            except CatalogLoadError as e:
                logger.error(f"Catalog reload failed, keeping current catalog: {e}")
                raise
            previous = self._snapshot
            self._snapshot = replacement
            self._path = source
        logger.info(
            f"Stat catalog swapped: {previous.version if previous else 'none'} "
            f"-> {replacement.version}"
        )
        return replacement

    def publish(self, snapshot: CatalogSnapshot) -> None:
        """Publish an already-built snapshot (e.g. one parsed from another source)."""
        with self._load_lock:
            self._snapshot = snapshot
        logger.info(f"Stat catalog published: {snapshot.version}")


_store_instance: Optional[CatalogStore] = None


def get_catalog_store() -> CatalogStore:
    """Get the process-wide catalog store."""
    global _store_instance
    if _store_instance is None:
        _store_instance = CatalogStore()
    return _store_instance


def reset_catalog_store(store: Optional[CatalogStore] = None) -> None:
    """Replace (or clear) the process-wide store. Intended for tests and startup."""
    global _store_instance
    _store_instance = store
