"""
Refresh pipeline - orchestrates data flow from OpenSky to the snapshot store.

Pipeline stages:
1. Fetch: Poll OpenSky API for state vectors
2. Parse: Turn raw arrays into StateVectors, dropping unusable rows
3. Enrich: Compute display units for each record
4. Publish: Atomically replace the store's snapshot

At most one cycle is in flight at any time. Timer ticks and manual refresh
requests that arrive while a cycle is running are coalesced (dropped), not
queued, and never cancel the running cycle.
"""

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from planetracker.config import config
from planetracker.errors import DecodeError, FetchError
from planetracker.ingestion.derived import derive_record
from planetracker.ingestion.opensky_client import OpenSkyClient, StatesPayload
from planetracker.ingestion.parser import parse_states
from planetracker.models import BoundingBox, Snapshot
from planetracker.store import SnapshotStore

logger = logging.getLogger(__name__)


class RefreshEventKind(str, Enum):
    LOADING = 'loading'
    UPDATED = 'updated'
    ERROR = 'error'


@dataclass(frozen=True)
class RefreshEvent:
    """Notification delivered to scheduler subscribers."""
    kind: RefreshEventKind
    snapshot: Optional[Snapshot] = None
    error: Optional[str] = None


def build_snapshot(payload: StatesPayload) -> Snapshot:
    """
    Run parser and calculator over a payload.

    A payload with `"states": null` yields an empty snapshot.
    """
    states, rejected = parse_states(payload.states or [])
    records = [derive_record(sv) for sv in states]
    return Snapshot.from_records(records, api_time=payload.time, rejected=rejected)


def query_bounding_box(
    client: OpenSkyClient,
    north: float,
    south: float,
    east: float,
    west: float,
) -> Snapshot:
    """
    One-off regional query that bypasses the shared store.

    Records the feed returns outside the box are dropped.

    Raises:
        ValueError for an invalid box, NetworkError, DecodeError
    """
    bbox = BoundingBox.from_edges(north=north, south=south, east=east, west=west)
    payload = client.fetch_bounding_box(north=north, south=south, east=east, west=west)
    snapshot = build_snapshot(payload)

    inside = snapshot.within(bbox)
    logger.debug(f'Bounding box query returned {len(inside)} of {len(snapshot)} aircraft')

    return Snapshot.from_records(
        inside,
        api_time=snapshot.api_time,
        rejected=snapshot.rejected,
        fetched_at=snapshot.fetched_at,
    )


class RefreshScheduler:
    """
    Manages the refresh lifecycle.

    Coordinates fetching from OpenSky, parsing, and publishing to the
    snapshot store. Runs a background thread for periodic polling and
    accepts manual refresh requests from any thread.
    """

    def __init__(
        self,
        client: Optional[OpenSkyClient] = None,
        store: Optional[SnapshotStore] = None,
        interval: Optional[float] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            client: OpenSky API client (created from config if None)
            store: Snapshot store to publish into (new empty store if None)
            interval: Seconds between refresh ticks
        """
        self.client = client or OpenSkyClient.from_config()
        self.store = store or SnapshotStore()
        self.interval = interval if interval is not None else config.refresh.interval_seconds

        # Single-flight gate
        self._gate = threading.Lock()

        # Lifecycle
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        # State tracking
        self._last_success_time: Optional[float] = None
        self._fetch_count: int = 0
        self._error_count: int = 0
        self._coalesced_count: int = 0
        self._stats_lock = threading.Lock()

        self._subscribers: List[Callable[[RefreshEvent], None]] = []
        self._subscribers_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Callable[[RefreshEvent], None]) -> Callable[[], None]:
        """
        Register callback for loading/updated/error events.

        Returns a function that removes the subscription.
        """
        with self._subscribers_lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._subscribers_lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self, event: RefreshEvent) -> None:
        with self._subscribers_lock:
            callbacks = list(self._subscribers)

        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.error(f'Refresh subscriber error: {e}')

    # -------------------------------------------------------------------------
    # Refresh cycles
    # -------------------------------------------------------------------------

    @property
    def in_flight(self) -> bool:
        return self._gate.locked()

    def _try_acquire(self) -> bool:
        if self._gate.acquire(blocking=False):
            return True
        with self._stats_lock:
            self._coalesced_count += 1
        logger.debug('Refresh already in flight, trigger coalesced')
        return False

    def _run_locked(self) -> None:
        """Run one cycle; caller must hold the gate, which is released here."""
        try:
            self._run_cycle()
        finally:
            self._gate.release()

    def _run_cycle(self) -> None:
        self.store.set_loading(True)
        self._notify(RefreshEvent(RefreshEventKind.LOADING))

        try:
            payload = self.client.fetch_global()
            if payload.states is None:
                raise DecodeError('No flight data received')
            snapshot = build_snapshot(payload)
        except FetchError as e:
            with self._stats_lock:
                self._error_count += 1
            message = str(e)
            logger.error(f'Refresh failed: {message}')
            self.store.record_error(message)
            self.store.set_loading(False)
            self._notify(RefreshEvent(RefreshEventKind.ERROR, error=message))
            return
        except Exception as e:
            with self._stats_lock:
                self._error_count += 1
            message = f'Unexpected refresh error: {e!r}'
            self.store.record_error(message)
            self.store.set_loading(False)
            self._notify(RefreshEvent(RefreshEventKind.ERROR, error=message))
            raise

        self.store.replace(snapshot)
        self.store.set_loading(False)
        with self._stats_lock:
            self._fetch_count += 1
            self._last_success_time = time.time()

        logger.info(f'Processed {len(snapshot)} aircraft ({snapshot.rejected} rejected)')
        self._notify(RefreshEvent(RefreshEventKind.UPDATED, snapshot=snapshot))

    def refresh(self) -> bool:
        """
        Run one refresh cycle in the calling thread.

        Returns False without fetching if a cycle is already in flight.
        """
        if not self._try_acquire():
            return False
        self._run_locked()
        return True

    def trigger(self) -> bool:
        """
        Start one refresh cycle on a worker thread.

        Returns False if a cycle is already in flight.
        """
        if not self._try_acquire():
            return False

        worker = threading.Thread(target=self._run_locked, daemon=True)
        try:
            worker.start()
        except RuntimeError:
            self._gate.release()
            raise
        return True

    # -------------------------------------------------------------------------
    # Background loop
    # -------------------------------------------------------------------------

    def _run_loop(self, stop_event: threading.Event) -> None:
        logger.info(f'Starting periodic refresh (interval={self.interval}s)')

        # First cycle immediately, then once per interval
        while not stop_event.is_set():
            try:
                self.refresh()
            except Exception:
                logger.exception('Unexpected refresh error')
            if stop_event.wait(self.interval):
                break

        logger.info('Periodic refresh stopped')

    def start(self) -> None:
        """Start periodic refresh in a background thread."""
        if self.is_running:
            logger.warning('Refresh scheduler already running')
            return

        # Fresh event per loop; an earlier loop keeps its own, already set
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run_loop,
            args=(self._stop_event,),
            name='planetracker-refresh',
            daemon=True,
        )
        self._thread.start()
        logger.info('Background refresh started')

    def stop(self, wait: bool = True) -> None:
        """
        Stop periodic refresh.

        Future ticks are cancelled; a cycle already in flight is allowed to
        complete.
        """
        self._stop_event.set()
        if wait and self._thread and self._thread is not threading.current_thread():
            self._thread.join(timeout=config.refresh.stop_timeout_seconds)
        logger.info('Refresh scheduler stopped')

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive() and not self._stop_event.is_set())

    @property
    def last_success_time(self) -> Optional[float]:
        with self._stats_lock:
            return self._last_success_time

    @property
    def stats(self) -> dict:
        """Get refresh statistics."""
        with self._stats_lock:
            counters = {
                'fetch_count': self._fetch_count,
                'error_count': self._error_count,
                'coalesced_count': self._coalesced_count,
                'last_success_time': self._last_success_time,
            }
        return {
            **counters,
            'in_flight': self.in_flight,
            'running': self.is_running,
            'interval': self.interval,
        }
