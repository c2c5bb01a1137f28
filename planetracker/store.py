"""
In-memory snapshot store for low-latency telemetry queries.

Holds the current Snapshot plus refresh metadata, enabling:
- Lock-free reads of an immutable snapshot by API handlers
- Atomic whole-snapshot replacement by the refresh scheduler
- Stale-but-available data when a refresh fails

Design rationale:
Only the snapshot reference is swapped under the lock. Records are never
mutated once published, so readers holding an older reference keep a
consistent view and never observe a mix of two fetch cycles.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Optional

from planetracker.models import Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreStatus:
    """Point-in-time view of the store's metadata."""
    count: int
    last_updated: Optional[float]
    loading: bool
    error: Optional[str]
    error_at: Optional[float]

    @property
    def is_stale(self) -> bool:
        """True while the last refresh failed and older data is being served."""
        return self.error is not None

    def to_dict(self) -> dict:
        return {
            'count': self.count,
            'last_updated': self.last_updated,
            'loading': self.loading,
            'error': self.error,
            'error_at': self.error_at,
            'stale': self.is_stale,
        }


class SnapshotStore:
    """
    Thread-safe holder of the current flight snapshot.

    Starts out with an empty snapshot; replaced wholesale on every
    successful refresh cycle.
    """

    def __init__(self, snapshot: Optional[Snapshot] = None):
        self._snapshot = snapshot if snapshot is not None else Snapshot()
        self._lock = threading.Lock()

        # Refresh metadata
        self._loading = False
        self._error: Optional[str] = None
        self._error_at: Optional[float] = None
        self._replace_count = 0

    def read(self) -> Snapshot:
        """Current snapshot. The returned object never changes."""
        with self._lock:
            return self._snapshot

    def replace(self, snapshot: Snapshot) -> None:
        """
        Atomically publish a new snapshot.

        Clears any error left by a previous failed cycle.
        """
        with self._lock:
            self._snapshot = snapshot
            self._error = None
            self._error_at = None
            self._replace_count += 1

        logger.debug(f'Snapshot replaced with {len(snapshot)} flights')

    def record_error(self, message: str) -> None:
        """
        Record a failed refresh.

        Replaces any earlier error; the current snapshot is kept.
        """
        with self._lock:
            self._error = message
            self._error_at = time.time()

    def set_loading(self, loading: bool) -> None:
        with self._lock:
            self._loading = loading

    @property
    def status(self) -> StoreStatus:
        """Get store metadata."""
        with self._lock:
            return StoreStatus(
                count=len(self._snapshot),
                last_updated=self._snapshot.fetched_at,
                loading=self._loading,
                error=self._error,
                error_at=self._error_at,
            )

    @property
    def stats(self) -> dict:
        """Get store statistics."""
        with self._lock:
            return {
                'entries': len(self._snapshot),
                'replacements': self._replace_count,
                'last_refresh': self._snapshot.fetched_at,
            }
