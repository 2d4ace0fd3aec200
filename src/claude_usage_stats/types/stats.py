"""Aggregated usage snapshot types."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from claude_usage_stats.types.messages import TokenUsage
from claude_usage_stats.utils.date_grouping import local_day

HISTORY_DAYS = 30


@dataclass(frozen=True)
class NamedCount:
    name: str
    count: int


@dataclass(frozen=True)
class DailyEntry:
    date: date
    session_count: int = 0


@dataclass(frozen=True)
class ProjectEntry:
    name: str
    path: str
    sessions: int
    tokens: TokenUsage = field(default_factory=TokenUsage)

    @property
    def ranking_tokens(self) -> int:
        """Input plus output tokens; cache traffic does not count toward rank."""
        return self.tokens.input_tokens + self.tokens.output_tokens


@dataclass(frozen=True)
class UsageSnapshot:
    total_sessions: int = 0
    total_projects: int = 0
    total_messages: int = 0
    total_storage_bytes: int = 0
    tokens: TokenUsage = field(default_factory=TokenUsage)
    models_used: tuple[NamedCount, ...] = ()
    tools_used: tuple[NamedCount, ...] = ()
    daily_activity: tuple[DailyEntry, ...] = ()
    top_projects: tuple[ProjectEntry, ...] = ()
    avg_session_duration: float = 0.0
    avg_messages_per_session: float = 0.0
    computed_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def empty(cls, now: datetime | None = None) -> "UsageSnapshot":
        """Zeroed snapshot with a full window of empty days ending today."""
        if now is None:
            now = datetime.now()
        today = local_day(now)
        days = tuple(
            DailyEntry(date=today - timedelta(days=offset))
            for offset in reversed(range(HISTORY_DAYS))
        )
        return cls(daily_activity=days, computed_at=now)
