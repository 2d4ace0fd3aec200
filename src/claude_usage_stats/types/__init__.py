"""Type definitions for Claude usage stats."""

from claude_usage_stats.types.messages import (
    ContentBlock,
    MessageRole,
    SessionMessage,
    SessionScan,
    SessionSummary,
    TextBlock,
    ThinkingBlock,
    TokenUsage,
    ToolResultBlock,
    ToolUseBlock,
)
from claude_usage_stats.types.sessions import Session, Project
from claude_usage_stats.types.stats import (
    HISTORY_DAYS,
    DailyEntry,
    NamedCount,
    ProjectEntry,
    UsageSnapshot,
)

__all__ = [
    "ContentBlock",
    "MessageRole",
    "SessionMessage",
    "SessionScan",
    "SessionSummary",
    "TextBlock",
    "ThinkingBlock",
    "TokenUsage",
    "ToolResultBlock",
    "ToolUseBlock",
    "Session",
    "Project",
    "HISTORY_DAYS",
    "DailyEntry",
    "NamedCount",
    "ProjectEntry",
    "UsageSnapshot",
]
