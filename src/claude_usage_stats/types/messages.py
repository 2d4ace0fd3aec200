"""Message-level types for parsed JSONL data."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    TOOL_RESULT = "tool_result"


@dataclass(frozen=True)
class TokenUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0

    @property
    def total(self) -> int:
        return (self.input_tokens + self.output_tokens +
                self.cache_read_input_tokens + self.cache_creation_input_tokens)

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        if not isinstance(other, TokenUsage):
            return NotImplemented
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            cache_read_input_tokens=self.cache_read_input_tokens + other.cache_read_input_tokens,
            cache_creation_input_tokens=(
                self.cache_creation_input_tokens + other.cache_creation_input_tokens
            ),
        )


@dataclass(frozen=True)
class TextBlock:
    text: str


@dataclass(frozen=True)
class ToolUseBlock:
    id: str
    name: str
    input: str  # canonical JSON text


@dataclass(frozen=True)
class ToolResultBlock:
    tool_use_id: str
    content: str


@dataclass(frozen=True)
class ThinkingBlock:
    thinking: str


ContentBlock = Union[TextBlock, ToolUseBlock, ToolResultBlock, ThinkingBlock]


@dataclass(frozen=True)
class SessionMessage:
    role: MessageRole
    content: tuple[ContentBlock, ...] = ()
    timestamp: Optional[datetime] = None
    model: Optional[str] = None
    usage: Optional[TokenUsage] = None

    @property
    def tool_names(self) -> list[str]:
        return [b.name for b in self.content if isinstance(b, ToolUseBlock)]


@dataclass(frozen=True)
class SessionSummary:
    message_count: int = 0
    first_timestamp: Optional[datetime] = None
    last_timestamp: Optional[datetime] = None
    models_used: frozenset[str] = field(default_factory=frozenset)
    tools_used: frozenset[str] = field(default_factory=frozenset)

    @property
    def duration_seconds(self) -> Optional[float]:
        """Seconds between first and last record, or None unless strictly positive."""
        if self.first_timestamp is None or self.last_timestamp is None:
            return None
        seconds = (self.last_timestamp - self.first_timestamp).total_seconds()
        return seconds if seconds > 0 else None


@dataclass(frozen=True)
class SessionScan:
    """Result of a single-pass scan over one session file."""
    summary: SessionSummary = field(default_factory=SessionSummary)
    tokens: TokenUsage = field(default_factory=TokenUsage)
