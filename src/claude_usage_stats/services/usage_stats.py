"""Fold per-session scans into one usage snapshot."""

import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

from claude_usage_stats.services.session_scanner import scan_session
from claude_usage_stats.types import (
    HISTORY_DAYS,
    DailyEntry,
    NamedCount,
    Project,
    ProjectEntry,
    SessionScan,
    TokenUsage,
    UsageSnapshot,
)
from claude_usage_stats.utils.date_grouping import daily_histogram

logger = logging.getLogger(__name__)

DEFAULT_TOP_PROJECTS = 10

ScanFunc = Callable[[Path], SessionScan]


def compute_snapshot(
    projects: Iterable[Project],
    projects_root: str | Path,
    *,
    scan: ScanFunc = scan_session,
    now: datetime | None = None,
    top_n: int | None = DEFAULT_TOP_PROJECTS,
) -> UsageSnapshot:
    """Scan every session of every project and aggregate the results.

    Models and tools are counted once per session that uses them. The daily
    histogram buckets each session by its first timestamp. Only sessions whose
    last timestamp is strictly after the first contribute to the mean
    duration. ``top_n=None`` keeps every project entry.
    """
    if now is None:
        now = datetime.now()
    root = Path(projects_root)
    projects = list(projects)

    total_sessions = 0
    total_messages = 0
    total_bytes = 0
    tokens = TokenUsage()
    model_counts: Counter[str] = Counter()
    tool_counts: Counter[str] = Counter()
    session_starts: list[datetime] = []
    total_duration = 0.0
    duration_samples = 0
    project_entries: list[ProjectEntry] = []

    for project in projects:
        project_tokens = TokenUsage()
        for session in project.sessions:
            result = scan(root / project.id / session.filename)
            summary = result.summary

            total_sessions += 1
            total_bytes += session.size
            total_messages += summary.message_count
            tokens = tokens + result.tokens
            project_tokens = project_tokens + result.tokens

            # Sorted so first-seen order (the tie-break) is reproducible
            for model in sorted(summary.models_used):
                model_counts[model] += 1
            for tool in sorted(summary.tools_used):
                tool_counts[tool] += 1

            if summary.first_timestamp is not None:
                session_starts.append(summary.first_timestamp)

            duration = summary.duration_seconds
            if duration is not None:
                total_duration += duration
                duration_samples += 1

        if project.sessions:
            project_entries.append(ProjectEntry(
                name=project.display_name,
                path=project.original_path,
                sessions=len(project.sessions),
                tokens=project_tokens,
            ))

    project_entries.sort(key=lambda e: e.ranking_tokens, reverse=True)
    if top_n is not None:
        project_entries = project_entries[:top_n]

    daily = tuple(
        DailyEntry(date=day, session_count=count)
        for day, count in daily_histogram(session_starts, days=HISTORY_DAYS, now=now)
    )

    logger.debug(
        "Aggregated %d sessions across %d projects", total_sessions, len(projects),
    )

    return UsageSnapshot(
        total_sessions=total_sessions,
        total_projects=len(projects),
        total_messages=total_messages,
        total_storage_bytes=total_bytes,
        tokens=tokens,
        models_used=_ranked(model_counts),
        tools_used=_ranked(tool_counts),
        daily_activity=daily,
        top_projects=tuple(project_entries),
        avg_session_duration=total_duration / duration_samples if duration_samples else 0.0,
        avg_messages_per_session=total_messages / total_sessions if total_sessions else 0.0,
        computed_at=now,
    )


def _ranked(counts: Counter[str]) -> tuple[NamedCount, ...]:
    """Descending by count; sorted() is stable so ties keep first-seen order."""
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return tuple(NamedCount(name=name, count=count) for name, count in ordered)
