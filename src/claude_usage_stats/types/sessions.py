"""Session and project metadata types."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from claude_usage_stats.utils.path_codec import extract_project_name


@dataclass(frozen=True)
class Session:
    filename: str
    size: int
    last_modified: datetime


@dataclass(frozen=True)
class Project:
    id: str              # Encoded directory name
    original_path: str   # Decoded filesystem path (best effort)
    sessions: tuple[Session, ...] = ()
    total_size: int = 0
    last_accessed: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return extract_project_name(self.original_path)

    @property
    def session_count(self) -> int:
        return len(self.sessions)
