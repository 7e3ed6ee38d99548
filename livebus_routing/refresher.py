import logging
import threading
from .config import Config


class SnapshotRefresher:
    """
    Keeps a current NetworkSnapshot by refetching on a fixed interval.

    Each refresh publishes a whole new snapshot by swapping one reference, so a
    planning call that took a snapshot from current() keeps a consistent view
    while newer snapshots are published.
    """

    def __init__(self, fetch, interval=None):
        """
        Args:
            fetch: Callable returning a NetworkSnapshot, e.g. APIClient().get_snapshot
            interval: Seconds between refreshes (defaults to Config.REFRESH_INTERVAL_SECONDS)
        """
        self.fetch = fetch
        self.interval = interval if interval is not None else Config.REFRESH_INTERVAL_SECONDS
        self._snapshot = None
        self._stop_event = threading.Event()
        self._thread = None

    def current(self):
        return self._snapshot

    def refresh(self):
        """
        Fetches once and publishes the result. On failure the previous snapshot
        stays published.
        """
        try:
            snapshot = self.fetch()
        except Exception as e:
            logging.error(f"Snapshot refresh failed, keeping previous snapshot: {e}", exc_info=True)
            return self._snapshot

        if snapshot is None:
            logging.warning("Snapshot fetch returned nothing, keeping previous snapshot")
            return self._snapshot

        self._snapshot = snapshot
        logging.debug(f"Published {snapshot}")
        return snapshot

    def _run(self):
        while not self._stop_event.is_set():
            self.refresh()
            self._stop_event.wait(self.interval)

    def start(self):
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="snapshot-refresher", daemon=True)
        self._thread.start()
        logging.info(f"Snapshot refresher started (every {self.interval:.0f}s)")

    def stop(self, timeout=None):
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logging.info("Snapshot refresher stopped")
