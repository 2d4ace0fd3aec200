"""Application entry point: headless stats refresh printing JSON snapshots."""

import logging
import signal
import sys

import orjson
from PySide6.QtCore import QCoreApplication

from claude_usage_stats.services.config_manager import ConfigManager
from claude_usage_stats.services.stats_aggregator import StatsAggregator
from claude_usage_stats.services.stats_cache import snapshot_to_dict
from claude_usage_stats.types import UsageSnapshot


def _print_snapshot(snapshot: UsageSnapshot, label: str):
    document = {"source": label, "stats": snapshot_to_dict(snapshot)}
    sys.stdout.write(orjson.dumps(document, option=orjson.OPT_INDENT_2).decode() + "\n")
    sys.stdout.flush()


def run() -> int:
    """Print the cached snapshot (if any), refresh in the background, print the result."""
    app = QCoreApplication(sys.argv)
    app.setApplicationName("Claude Usage Stats")
    app.setOrganizationName("claude-usage-stats")
    app.setOrganizationDomain("claude.local")

    config = ConfigManager()
    logging.basicConfig(
        level=logging.DEBUG if config.get_bool("advanced/debugLogging") else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Allow Ctrl+C to kill the app
    signal.signal(signal.SIGINT, signal.SIG_DFL)

    aggregator = StatsAggregator(
        projects_root=config.projects_root(),
        cache_path=config.stats_cache_path(),
        top_n=config.top_projects(),
    )

    cached = aggregator.load()
    if cached is not None:
        _print_snapshot(cached, "cache")

    def on_refreshing_changed():
        if aggregator.refreshing:
            return
        snapshot = aggregator.get_snapshot()
        if snapshot is not None:
            _print_snapshot(snapshot, "fresh")
        app.quit()

    aggregator.refreshing_changed.connect(on_refreshing_changed)

    ret = app.exec()
    aggregator.cleanup()
    return ret
