"""Services for Claude usage stats."""

from claude_usage_stats.services.session_scanner import (
    parse_session_file,
    scan_session,
    stream_session_file,
)
from claude_usage_stats.services.project_discovery import discover_projects, list_sessions
from claude_usage_stats.services.usage_stats import compute_snapshot
from claude_usage_stats.services.stats_cache import StatsCache
from claude_usage_stats.services.stats_aggregator import StatsAggregator, aggregate
from claude_usage_stats.services.config_manager import ConfigManager

__all__ = [
    "parse_session_file",
    "scan_session",
    "stream_session_file",
    "discover_projects",
    "list_sessions",
    "compute_snapshot",
    "StatsCache",
    "StatsAggregator",
    "aggregate",
    "ConfigManager",
]
