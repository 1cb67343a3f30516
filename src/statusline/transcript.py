"""Usage aggregation over a Claude session transcript (JSONL).

Every function here fails soft: a missing or unreadable transcript, or one with
no usable lines, yields zero values rather than an exception.
"""

import asyncio
import json
import logging
from collections.abc import Iterable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

from statusline.formatters import round_half_up
from statusline.models import ContextResult, TokenUsage, parse_timestamp

logger = logging.getLogger(__name__)


def iter_records(transcript_path: str | Path | None) -> Iterator[dict[str, Any]]:
    """Yield each JSON object in the transcript, skipping invalid lines."""
    if not transcript_path:
        return
    try:
        content = Path(transcript_path).read_bytes()
    except OSError as e:
        logger.debug(f"Cannot read transcript {transcript_path}: {e}")
        return

    # Undecodable lines are skipped like invalid JSON
    for lineno, raw in enumerate(content.splitlines(), start=1):
        if not raw.strip():
            continue
        try:
            record = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            logger.debug(f"Skipping invalid JSON on line {lineno} of {transcript_path}")
            continue
        if isinstance(record, dict):
            yield record


def _usage_of(record: dict[str, Any]) -> dict[str, Any] | None:
    message = record.get("message")
    if not isinstance(message, dict):
        return None
    usage = message.get("usage")
    return usage if isinstance(usage, dict) else None


def is_main_chain_usage(record: dict[str, Any]) -> bool:
    """True for records that count toward the primary context window."""
    return (
        record.get("isSidechain") is not True
        and record.get("isApiErrorMessage") is not True
        and _usage_of(record) is not None
    )


def get_latest_usage(transcript_path: str | Path | None) -> TokenUsage | None:
    """Return the usage of the most recent main-chain record.

    "Most recent" is by timestamp, not file position: the transcript is not
    guaranteed to be chronological. A record replaces the current best only
    when its timestamp is strictly later. Records without a parseable
    timestamp cannot be ordered and are ignored.
    """
    return latest_usage(iter_records(transcript_path))


def latest_usage(records: Iterable[dict[str, Any]]) -> TokenUsage | None:
    best_usage: dict[str, Any] | None = None
    best_time: datetime | None = None

    for record in records:
        if not is_main_chain_usage(record):
            continue
        entry_time = parse_timestamp(record.get("timestamp"))
        if entry_time is None:
            continue
        if best_time is None or entry_time > best_time:
            best_time = entry_time
            best_usage = _usage_of(record)

    if best_usage is None:
        return None
    return TokenUsage.from_dict(best_usage)


def get_context_length(transcript_path: str | Path | None) -> int:
    """Context tokens (input + cache read + cache creation) of the latest turn."""
    usage = get_latest_usage(transcript_path)
    return usage.context_tokens if usage else 0


def get_session_duration(transcript_path: str | Path | None) -> int:
    """Milliseconds between the earliest and latest timestamps in the transcript.

    All timestamped records count, including sidechains and records without
    usage.
    """
    return session_duration(iter_records(transcript_path))


def session_duration(records: Iterable[dict[str, Any]]) -> int:
    first: datetime | None = None
    last: datetime | None = None

    for record in records:
        entry_time = parse_timestamp(record.get("timestamp"))
        if entry_time is None:
            continue
        if first is None or entry_time < first:
            first = entry_time
        if last is None or entry_time > last:
            last = entry_time

    if first is None or last is None:
        return 0
    return int((last - first).total_seconds() * 1000)


def context_percentage(tokens: int, max_context_tokens: int) -> int:
    """Share of the context window in use, rounded and capped at 100."""
    if max_context_tokens <= 0:
        return 0
    return round_half_up(min(100.0, tokens / max_context_tokens * 100))


def get_context_data(
    transcript_path: str | Path | None,
    max_context_tokens: int,
    autocompact_buffer_tokens: int = 0,
    use_usable_context_only: bool = False,
    overhead_tokens: int = 0,
) -> ContextResult:
    """Compute context tokens, percentage, and session duration.

    Args:
        transcript_path: Path to the session JSONL file; may not exist.
        max_context_tokens: Size of the context window.
        autocompact_buffer_tokens: Tokens reserved for auto-compaction.
        use_usable_context_only: Count the compaction buffer as used.
        overhead_tokens: Fixed overhead (system prompt, tools) added to usage.

    Returns:
        A ContextResult; all zeros when the transcript is missing or holds
        no valid JSON records.
    """
    if not transcript_path or not Path(transcript_path).is_file():
        return ContextResult()

    records = list(iter_records(transcript_path))
    if not records:
        return ContextResult()

    usage = latest_usage(records)
    total = (usage.context_tokens if usage else 0) + overhead_tokens
    if use_usable_context_only:
        total += autocompact_buffer_tokens

    return ContextResult(
        tokens=total,
        percentage=context_percentage(total, max_context_tokens),
        duration_ms=session_duration(records),
    )


async def get_context_data_async(
    transcript_path: str | Path | None,
    max_context_tokens: int,
    autocompact_buffer_tokens: int = 0,
    use_usable_context_only: bool = False,
    overhead_tokens: int = 0,
) -> ContextResult:
    """Non-blocking ``get_context_data``; the scan runs in a worker thread."""
    return await asyncio.to_thread(
        get_context_data,
        transcript_path,
        max_context_tokens,
        autocompact_buffer_tokens,
        use_usable_context_only,
        overhead_tokens,
    )


def get_cache_percentage(usage: TokenUsage | None) -> float:
    """Cache-hit ratio: cache reads as a share of all non-created input."""
    if usage is None:
        return 0.0
    denominator = usage.input_tokens + usage.cache_read_input_tokens
    if denominator == 0:
        return 0.0
    return usage.cache_read_input_tokens / denominator * 100
