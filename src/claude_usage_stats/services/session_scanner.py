"""Streaming JSONL scanner for Claude Code session files.

Two modes over the same line rules:

* ``stream_session_file`` / ``parse_session_file`` build the full ordered
  list of ``SessionMessage`` values.
* ``scan_session`` makes one cheap pass that keeps only counts, timestamps,
  model/tool names and token usage. Statistics callers must use this one so
  large transcripts are never materialized.

Neither mode raises for a bad file or a bad line. Unreadable files produce
empty results and corrupt lines are skipped.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator

import orjson

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

logger = logging.getLogger(__name__)

# Max size for a single JSONL line (10MB)
MAX_LINE_SIZE = 10 * 1024 * 1024

TOOL_RESULT_TYPE = "tool_result"

_TURN_ROLES = {
    "user": MessageRole.USER,
    "human": MessageRole.USER,
    "assistant": MessageRole.ASSISTANT,
}


def parse_session_file(file_path: str | Path) -> list[SessionMessage]:
    """Parse an entire JSONL session file into a list of SessionMessage objects."""
    return list(stream_session_file(file_path))


def stream_session_file(file_path: str | Path) -> Iterator[SessionMessage]:
    """Stream-parse a JSONL session file, yielding SessionMessage objects."""
    for raw in _iter_records(file_path):
        msg = _parse_record(raw)
        if msg is not None:
            yield msg


def scan_session(file_path: str | Path) -> SessionScan:
    """Single pass over a session file collecting summary data and token totals."""
    message_count = 0
    first_timestamp: datetime | None = None
    last_timestamp: datetime | None = None
    models: set[str] = set()
    tools: set[str] = set()
    tokens = TokenUsage()

    for raw in _iter_records(file_path):
        role = _record_role(raw)
        if role is None:
            continue
        message_count += 1

        ts = parse_timestamp(raw.get("timestamp"))
        if ts is not None:
            if first_timestamp is None:
                first_timestamp = ts
            last_timestamp = ts

        if role is MessageRole.TOOL_RESULT:
            continue

        message = raw["message"]
        model = message.get("model")
        if isinstance(model, str) and model:
            models.add(model)

        usage = _parse_usage(message.get("usage"))
        if usage is not None:
            tokens = tokens + usage

        content = message.get("content")
        if isinstance(content, list):
            for block in content:
                if isinstance(block, dict) and block.get("type") == "tool_use":
                    name = block.get("name")
                    if isinstance(name, str) and name:
                        tools.add(name)

    summary = SessionSummary(
        message_count=message_count,
        first_timestamp=first_timestamp,
        last_timestamp=last_timestamp,
        models_used=frozenset(models),
        tools_used=frozenset(tools),
    )
    return SessionScan(summary=summary, tokens=tokens)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or a numeric Unix epoch into a UTC datetime.

    Returns None for anything unparsable.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        # Millisecond epochs show up in some exporters
        seconds = value / 1000 if value > 1e12 else value
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str) and value:
        try:
            # ISO 8601 format: "2026-02-13T12:00:00.000Z"
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    return None


def _iter_records(file_path: str | Path) -> Iterator[dict]:
    """Yield every JSON object line of a session file.

    Malformed lines are logged and skipped.
    Lines exceeding MAX_LINE_SIZE are skipped with a warning.
    """
    path = Path(file_path)
    line_num = 0
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                line_num += 1
                line = line.strip()
                if not line:
                    continue

                if len(line) > MAX_LINE_SIZE:
                    logger.warning(
                        "Line %d in %s exceeds %dMB, skipping",
                        line_num, path.name, MAX_LINE_SIZE // (1024 * 1024),
                    )
                    continue

                try:
                    raw = orjson.loads(line)
                except orjson.JSONDecodeError as e:
                    logger.debug("Malformed JSON at line %d in %s: %s", line_num, path.name, e)
                    continue

                if isinstance(raw, dict):
                    yield raw
    except OSError as e:
        logger.warning("Cannot read session file %s: %s", path, e)


def _record_role(raw: dict) -> MessageRole | None:
    """Classify a record, or None when it is not a message record."""
    type_str = raw.get("type")
    if type_str == TOOL_RESULT_TYPE:
        return MessageRole.TOOL_RESULT
    role = _TURN_ROLES.get(type_str) if isinstance(type_str, str) else None
    if role is None or not isinstance(raw.get("message"), dict):
        return None
    return role


def _parse_record(raw: dict) -> SessionMessage | None:
    """Parse a raw JSON dict into a SessionMessage."""
    role = _record_role(raw)
    if role is None:
        return None

    timestamp = parse_timestamp(raw.get("timestamp"))

    if role is MessageRole.TOOL_RESULT:
        block = ToolResultBlock(
            tool_use_id=_string(raw.get("tool_use_id")),
            content=_tool_result_text(raw.get("content")),
        )
        return SessionMessage(role=role, content=(block,), timestamp=timestamp)

    message = raw["message"]
    model = message.get("model")
    return SessionMessage(
        role=role,
        content=tuple(_parse_content(message.get("content"))),
        timestamp=timestamp,
        model=model if isinstance(model, str) and model else None,
        usage=_parse_usage(message.get("usage")),
    )


def _parse_content(content: Any) -> list[ContentBlock]:
    if isinstance(content, str):
        return [TextBlock(text=content)]
    if not isinstance(content, list):
        return []

    blocks: list[ContentBlock] = []
    for block in content:
        if not isinstance(block, dict):
            continue
        block_type = block.get("type")
        if block_type == "text":
            text = block.get("text")
            if isinstance(text, str):
                blocks.append(TextBlock(text=text))
        elif block_type == "tool_use":
            blocks.append(ToolUseBlock(
                id=_string(block.get("id")),
                name=_string(block.get("name")) or "Unknown",
                input=_canonical_json(block.get("input")),
            ))
        elif block_type == "tool_result":
            blocks.append(ToolResultBlock(
                tool_use_id=_string(block.get("tool_use_id")),
                content=_tool_result_text(block.get("content")),
            ))
        elif block_type == "thinking":
            thinking = block.get("thinking")
            if isinstance(thinking, str):
                blocks.append(ThinkingBlock(thinking=thinking))
    return blocks


def _tool_result_text(content: Any) -> str:
    """Flatten tool result content (string, list of text blocks, or any JSON) to text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list) and all(isinstance(item, dict) for item in content):
        return "\n".join(
            item["text"] for item in content if isinstance(item.get("text"), str)
        )
    try:
        return orjson.dumps(content, option=orjson.OPT_INDENT_2).decode()
    except TypeError:
        return ""


def _canonical_json(value: Any) -> str:
    """Key-sorted, indented JSON so tool inputs display and diff stably."""
    if value is None:
        return ""
    try:
        return orjson.dumps(value, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode()
    except TypeError:
        return ""


def _parse_usage(raw_usage: Any) -> TokenUsage | None:
    if not isinstance(raw_usage, dict):
        return None
    return TokenUsage(
        input_tokens=_count(raw_usage.get("input_tokens")),
        output_tokens=_count(raw_usage.get("output_tokens")),
        cache_read_input_tokens=_count(raw_usage.get("cache_read_input_tokens")),
        cache_creation_input_tokens=_count(raw_usage.get("cache_creation_input_tokens")),
    )


def _count(value: Any) -> int:
    """Coerce a usage counter to a non-negative int."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    try:
        return max(int(value), 0)
    except (OverflowError, ValueError):
        return 0


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""
