"""Discover Claude projects and their session files under the projects root."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from claude_usage_stats.types import Project, Session
from claude_usage_stats.utils.path_codec import FileSystem, decode_path

logger = logging.getLogger(__name__)


def discover_projects(
    projects_root: str | Path,
    home: str | None = None,
    fs: FileSystem | None = None,
) -> list[Project]:
    """List every project directory with its decoded path and session files.

    Projects are ordered by most recent session activity; projects without
    sessions come last. A missing root yields an empty list.
    """
    root = Path(projects_root)
    if not root.is_dir():
        logger.warning("Projects root does not exist: %s", root)
        return []

    try:
        entries = sorted(root.iterdir())
    except OSError as e:
        logger.warning("Cannot list projects root %s: %s", root, e)
        return []

    projects = []
    for entry in entries:
        if entry.name.startswith(".") or not entry.is_dir():
            continue
        project_id = entry.name
        sessions = list_sessions(entry)
        projects.append(Project(
            id=project_id,
            original_path=decode_path(project_id, home=home, fs=fs),
            sessions=tuple(sessions),
            total_size=sum(s.size for s in sessions),
            last_accessed=max((s.last_modified for s in sessions), default=None),
        ))

    projects.sort(
        key=lambda p: p.last_accessed.timestamp() if p.last_accessed else float("-inf"),
        reverse=True,
    )
    return projects


def list_sessions(project_dir: str | Path) -> list[Session]:
    """Session files (``*.jsonl``) directly inside a project directory."""
    sessions = []
    for jsonl_file in sorted(Path(project_dir).glob("*.jsonl")):
        try:
            stat = jsonl_file.stat()
        except OSError:
            logger.debug("Session file vanished during scan: %s", jsonl_file)
            continue
        if not jsonl_file.is_file():
            continue
        sessions.append(Session(
            filename=jsonl_file.name,
            size=stat.st_size,
            last_modified=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        ))
    return sessions
