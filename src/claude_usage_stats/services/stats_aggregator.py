"""Usage statistics with a cached-first, refresh-in-background access pattern."""

import logging
from pathlib import Path

from PySide6.QtCore import QObject, Signal, Property, QThread

from claude_usage_stats.services.project_discovery import discover_projects
from claude_usage_stats.services.stats_cache import StatsCache
from claude_usage_stats.services.usage_stats import DEFAULT_TOP_PROJECTS, compute_snapshot
from claude_usage_stats.types import UsageSnapshot

logger = logging.getLogger(__name__)

CLAUDE_PROJECTS_DIR = Path.home() / ".claude" / "projects"


def aggregate(
    projects_root: str | Path,
    home: str | None = None,
    top_n: int | None = DEFAULT_TOP_PROJECTS,
) -> UsageSnapshot:
    """Discover every project under ``projects_root`` and fold it into a snapshot."""
    projects = discover_projects(projects_root, home=home)
    return compute_snapshot(projects, projects_root, top_n=top_n)


class _AggregationWorker(QThread):
    """Background thread running one full aggregation."""

    snapshot_ready = Signal(object)  # UsageSnapshot, or None on failure

    def __init__(self, projects_root: Path, home: str | None, top_n: int | None, parent=None):
        super().__init__(parent)
        self._projects_root = projects_root
        self._home = home
        self._top_n = top_n

    def run(self):
        try:
            snapshot = aggregate(self._projects_root, home=self._home, top_n=self._top_n)
        except Exception:
            logger.exception("Usage aggregation failed for %s", self._projects_root)
            snapshot = None
        self.snapshot_ready.emit(snapshot)


class StatsAggregator(QObject):
    """Owns the current snapshot and the in-progress flag.

    ``load()`` hands back whatever is available right away (reading the disk
    cache the first time) and starts one background aggregation. Calls made
    while a run is in flight do nothing more. Finished runs replace the whole
    snapshot at once and overwrite the cache file.
    """

    stats_changed = Signal(object)  # UsageSnapshot
    refreshing_changed = Signal()

    def __init__(
        self,
        parent=None,
        projects_root: str | Path | None = None,
        cache_path: str | Path | None = None,
        home: str | None = None,
        top_n: int | None = DEFAULT_TOP_PROJECTS,
    ):
        super().__init__(parent)
        self._projects_root = Path(projects_root) if projects_root else CLAUDE_PROJECTS_DIR
        self._cache = StatsCache(cache_path)
        self._home = home
        self._top_n = top_n
        self._snapshot: UsageSnapshot | None = None
        self._refreshing = False
        self._worker: _AggregationWorker | None = None

    def _get_refreshing(self) -> bool:
        return self._refreshing

    def _set_refreshing(self, value: bool):
        if self._refreshing != value:
            self._refreshing = value
            self.refreshing_changed.emit()

    refreshing = Property(bool, _get_refreshing, notify=refreshing_changed)

    def get_snapshot(self) -> UsageSnapshot | None:
        return self._snapshot

    def load(self) -> UsageSnapshot | None:
        """Return the current snapshot and start a background refresh."""
        if self._refreshing:
            return self._snapshot

        # Show cached data immediately if available
        if self._snapshot is None:
            cached = self._cache.load()
            if cached is not None:
                self._publish(cached)

        self._set_refreshing(True)
        worker = _AggregationWorker(self._projects_root, self._home, self._top_n, self)
        worker.snapshot_ready.connect(self._on_aggregated)
        worker.finished.connect(worker.deleteLater)
        self._worker = worker
        worker.start()
        return self._snapshot

    def refresh_sync(self) -> UsageSnapshot | None:
        """Aggregate on the calling thread; a no-op while a background run is active."""
        if self._refreshing:
            return self._snapshot
        self._set_refreshing(True)
        try:
            snapshot = aggregate(self._projects_root, home=self._home, top_n=self._top_n)
        except Exception:
            logger.exception("Usage aggregation failed for %s", self._projects_root)
            snapshot = None
        self._on_aggregated(snapshot)
        return self._snapshot

    def _on_aggregated(self, snapshot: UsageSnapshot | None):
        """Callback when a run finishes; always on this object's thread."""
        self._worker = None
        if snapshot is not None:
            self._publish(snapshot)
            self._cache.save(snapshot)
        self._set_refreshing(False)

    def _publish(self, snapshot: UsageSnapshot):
        self._snapshot = snapshot
        self.stats_changed.emit(snapshot)

    def cleanup(self):
        """Wait for any in-flight run before teardown."""
        if self._worker is not None and self._worker.isRunning():
            self._worker.snapshot_ready.disconnect(self._on_aggregated)
            if not self._worker.wait(5000):
                # Still running: keep the flag so load() cannot start a second run
                logger.warning("Usage aggregation still running at cleanup")
                return
        self._worker = None
        self._set_refreshing(False)
