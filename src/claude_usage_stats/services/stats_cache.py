"""JSON file cache for the last computed usage snapshot."""

import logging
import os
import tempfile
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import orjson

from claude_usage_stats.types import (
    DailyEntry,
    NamedCount,
    ProjectEntry,
    TokenUsage,
    UsageSnapshot,
)

logger = logging.getLogger(__name__)


class StatsCache:
    """Persists one UsageSnapshot; dates are stored as epoch seconds.

    Every failure is logged and absorbed: a missing or unreadable cache
    just means there is no snapshot yet.
    """

    def __init__(self, path: str | Path | None = None):
        if path is None:
            path = Path.home() / ".claude" / "stats-cache.json"
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> UsageSnapshot | None:
        try:
            data = orjson.loads(self._path.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable stats cache %s: %s", self._path, e)
            return None

        try:
            return snapshot_from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError, OverflowError, OSError) as e:
            logger.warning("Ignoring malformed stats cache %s: %s", self._path, e)
            return None

    def save(self, snapshot: UsageSnapshot) -> bool:
        """Atomically replace the cache file. Returns False on failure."""
        tmp_path = None
        try:
            payload = orjson.dumps(snapshot_to_dict(snapshot))
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                delete=False, dir=self._path.parent, prefix=".stats-cache-", suffix=".tmp",
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self._path)
            return True
        except (OSError, TypeError) as e:
            logger.warning("Failed to write stats cache %s: %s", self._path, e)
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            return False

    def clear(self) -> bool:
        try:
            self._path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove stats cache %s: %s", self._path, e)
            return False
        return True


def snapshot_to_dict(snapshot: UsageSnapshot) -> dict[str, Any]:
    return {
        "totalSessions": snapshot.total_sessions,
        "totalProjects": snapshot.total_projects,
        "totalMessages": snapshot.total_messages,
        "totalStorageBytes": snapshot.total_storage_bytes,
        "totalInputTokens": snapshot.tokens.input_tokens,
        "totalOutputTokens": snapshot.tokens.output_tokens,
        "totalCacheReadTokens": snapshot.tokens.cache_read_input_tokens,
        "totalCacheCreationTokens": snapshot.tokens.cache_creation_input_tokens,
        "modelsUsed": [{"name": m.name, "count": m.count} for m in snapshot.models_used],
        "toolsUsed": [{"name": t.name, "count": t.count} for t in snapshot.tools_used],
        "dailyActivity": [
            {"date": _day_to_epoch(d.date), "sessionCount": d.session_count}
            for d in snapshot.daily_activity
        ],
        "topProjects": [
            {
                "name": p.name,
                "path": p.path,
                "sessions": p.sessions,
                "inputTokens": p.tokens.input_tokens,
                "outputTokens": p.tokens.output_tokens,
                "cacheReadTokens": p.tokens.cache_read_input_tokens,
                "cacheCreationTokens": p.tokens.cache_creation_input_tokens,
            }
            for p in snapshot.top_projects
        ],
        "avgSessionDuration": snapshot.avg_session_duration,
        "avgMessagesPerSession": snapshot.avg_messages_per_session,
        "cachedAt": snapshot.computed_at.timestamp(),
    }


def snapshot_from_dict(data: dict[str, Any]) -> UsageSnapshot:
    """Rebuild a snapshot; raises KeyError/TypeError/ValueError on bad or negative values."""
    return UsageSnapshot(
        total_sessions=_count(data["totalSessions"]),
        total_projects=_count(data["totalProjects"]),
        total_messages=_count(data["totalMessages"]),
        total_storage_bytes=_count(data["totalStorageBytes"]),
        tokens=TokenUsage(
            input_tokens=_count(data["totalInputTokens"]),
            output_tokens=_count(data["totalOutputTokens"]),
            cache_read_input_tokens=_count(data["totalCacheReadTokens"]),
            cache_creation_input_tokens=_count(data["totalCacheCreationTokens"]),
        ),
        models_used=tuple(
            NamedCount(name=str(m["name"]), count=_count(m["count"])) for m in data["modelsUsed"]
        ),
        tools_used=tuple(
            NamedCount(name=str(t["name"]), count=_count(t["count"])) for t in data["toolsUsed"]
        ),
        daily_activity=tuple(
            DailyEntry(date=_epoch_to_day(d["date"]), session_count=_count(d["sessionCount"]))
            for d in data["dailyActivity"]
        ),
        top_projects=tuple(
            ProjectEntry(
                name=str(p["name"]),
                path=str(p.get("path", "")),
                sessions=_count(p["sessions"]),
                tokens=TokenUsage(
                    input_tokens=_count(p.get("inputTokens", 0)),
                    output_tokens=_count(p.get("outputTokens", 0)),
                    cache_read_input_tokens=_count(p.get("cacheReadTokens", 0)),
                    cache_creation_input_tokens=_count(p.get("cacheCreationTokens", 0)),
                ),
            )
            for p in data["topProjects"]
        ),
        avg_session_duration=float(data["avgSessionDuration"]),
        avg_messages_per_session=float(data["avgMessagesPerSession"]),
        computed_at=datetime.fromtimestamp(float(data["cachedAt"])),
    )


def _day_to_epoch(day: date) -> float:
    # Local midnight, matching how the histogram buckets days
    return datetime.combine(day, time()).timestamp()


def _epoch_to_day(value: Any) -> date:
    return datetime.fromtimestamp(float(value)).date()


def _count(value: Any) -> int:
    count = int(value)
    if count < 0:
        raise ValueError(f"negative count in stats cache: {count}")
    return count
