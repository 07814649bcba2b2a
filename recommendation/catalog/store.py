"""
Catalog Store

Holds the current CatalogSnapshot and refreshes it from its source when
it goes stale. A refresh swaps in a whole new snapshot; callers keep the
snapshot they were handed for the rest of their request.
"""

import logging
import os
import threading
import time
from typing import Callable, Optional

from ..logic.adapter import build_snapshot
from ..logic.contracts import CatalogSnapshot
from .loader import source_from_env

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_SECONDS = 600


class CatalogStore:
    def __init__(self, source, refresh_seconds: float = DEFAULT_REFRESH_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.source = source
        self.refresh_seconds = refresh_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot: Optional[CatalogSnapshot] = None
        self._fetched_at: Optional[float] = None

    def _is_stale(self) -> bool:
        if self._snapshot is None or self._fetched_at is None:
            return True
        return self._clock() - self._fetched_at >= self.refresh_seconds

    def refresh(self) -> CatalogSnapshot:
        """Load a fresh snapshot from the source and make it current."""
        courses, payments = self.source.fetch()
        snapshot = build_snapshot(courses, payments, source=self.source.name)
        self._snapshot = snapshot
        self._fetched_at = self._clock()
        logger.info(f"Catalog refreshed from {snapshot.source}: {len(snapshot.courses)} courses, {len(snapshot.payments)} payment rows")
        return snapshot

    def get_snapshot(self) -> CatalogSnapshot:
        """
        Current snapshot, refreshing first if it is stale.

        A failed refresh keeps serving the previous snapshot. With no
        previous snapshot the error propagates.
        """
        with self._lock:
            if not self._is_stale():
                return self._snapshot
            try:
                return self.refresh()
            except Exception as e:
                if self._snapshot is None:
                    raise
                logger.error(f"Catalog refresh failed, serving snapshot from {self._snapshot.loaded_at.isoformat()}: {e}")
                # Retry after another full interval instead of on every request
                self._fetched_at = self._clock()
                return self._snapshot


_store: Optional[CatalogStore] = None


def get_catalog_store() -> CatalogStore:
    """Process-wide store built from environment settings."""
    global _store
    if _store is None:
        _store = CatalogStore(
            source_from_env(),
            refresh_seconds=float(os.getenv("CATALOG_REFRESH_SECONDS", DEFAULT_REFRESH_SECONDS)),
        )
    return _store
