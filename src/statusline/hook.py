"""Assemble render input from the Claude Code status line hook payload."""

import asyncio
import logging
from pathlib import Path
from typing import Any

from statusline.config import DEFAULT_CONFIG, ContextConfig, StatuslineConfig
from statusline.git import get_git_status
from statusline.models import (
    ContextResult,
    GitStatus,
    SessionUsage,
    StatuslineData,
    TokenUsage,
    UsageLimits,
)
from statusline.transcript import (
    context_percentage,
    get_cache_percentage,
    get_context_data_async,
    get_latest_usage,
)

logger = logging.getLogger(__name__)


def _section(payload: dict[str, Any], key: str) -> dict[str, Any]:
    value = payload.get(key)
    return value if isinstance(value, dict) else {}


def _number(value: Any, default: float = 0.0) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def workspace_dir(payload: dict[str, Any]) -> str:
    """Directory the session is working in."""
    current = _section(payload, "workspace").get("current_dir")
    if isinstance(current, str) and current:
        return current
    cwd = payload.get("cwd")
    return cwd if isinstance(cwd, str) else ""


def transcript_path(payload: dict[str, Any]) -> Path | None:
    path = payload.get("transcript_path")
    if not isinstance(path, str) or not path:
        return None
    return Path(path).expanduser()


def payload_usage(payload: dict[str, Any]) -> TokenUsage | None:
    """Current-turn usage reported directly by the host, if any."""
    current = _section(payload, "context_window").get("current_usage")
    if not isinstance(current, dict):
        return None
    return TokenUsage.from_dict(current)


def session_usage(payload: dict[str, Any], usage: TokenUsage | None, duration_ms: int) -> SessionUsage:
    model = _section(payload, "model")
    model_id = model.get("display_name") or model.get("id") or ""
    usage = usage or TokenUsage()
    return SessionUsage(
        input_tokens=usage.input_tokens,
        cache_read_tokens=usage.cache_read_input_tokens,
        cache_creation_tokens=usage.cache_creation_input_tokens,
        output_tokens=usage.output_tokens,
        cost_usd=_number(_section(payload, "cost").get("total_cost_usd")),
        duration_ms=duration_ms,
        model_id=str(model_id),
    )


def _usable_tokens(usage: TokenUsage, config: ContextConfig) -> int:
    tokens = usage.context_tokens + config.overhead_tokens
    if config.use_usable_context_only:
        tokens += config.autocompact_buffer_tokens
    return tokens


def build_statusline_data(
    payload: dict[str, Any],
    config: StatuslineConfig = DEFAULT_CONFIG,
    context: ContextResult | None = None,
    transcript_usage: TokenUsage | None = None,
    git_status: GitStatus | None = None,
    vim_mode: bool = False,
) -> StatuslineData:
    """Combine the hook payload with collaborator results.

    Args:
        payload: Decoded hook JSON.
        config: Effective configuration.
        context: Transcript aggregation result, or None without a transcript.
        transcript_usage: Latest main-chain usage from the transcript.
        git_status: Working tree status, or None outside a repository.
        vim_mode: Whether the editor is in vim mode.
    """
    ctx = config.context
    host_usage = payload_usage(payload) if ctx.use_payload_context_window else None
    usage: TokenUsage | None
    if host_usage is not None:
        usage = host_usage
    elif context is not None:
        usage = transcript_usage
    else:
        usage = None

    duration_ms = int(_number(_section(payload, "cost").get("total_duration_ms")))
    if duration_ms <= 0 and context is not None:
        duration_ms = context.duration_ms

    session = session_usage(payload, usage, duration_ms)
    tokens = session.token_usage
    max_tokens: int | None = None

    if host_usage is not None:
        window = _number(_section(payload, "context_window").get("context_window_size"))
        max_tokens = int(window) if window > 0 else None
        context_tokens: int | None = _usable_tokens(tokens, ctx)
        percentage: int | None = context_percentage(context_tokens, max_tokens or ctx.max_context_tokens)
    elif context is not None:
        context_tokens = context.tokens
        percentage = context.percentage
    else:
        context_tokens = percentage = None

    return StatuslineData(
        path=workspace_dir(payload),
        model_name=session.model_id,
        git=git_status,
        cost=session.cost_usd,
        duration_ms=session.duration_ms,
        context_tokens=context_tokens,
        context_percentage=percentage,
        max_context_tokens=max_tokens,
        cache_percentage=get_cache_percentage(tokens) if usage is not None else None,
        usage_limits=UsageLimits.from_dict(payload.get("usage_limits")),
        period_cost=_number(payload.get("period_cost")),
        today_cost=_number(payload.get("today_cost")),
        vim_mode_active=vim_mode,
    )


async def _no_git_status() -> GitStatus | None:
    return None


async def collect_statusline_data(
    payload: dict[str, Any],
    config: StatuslineConfig = DEFAULT_CONFIG,
    vim_mode: bool = False,
) -> StatuslineData:
    """Gather git and transcript facts concurrently, then build render input."""
    cwd = workspace_dir(payload)
    path = transcript_path(payload)
    ctx = config.context

    git_task = asyncio.to_thread(get_git_status, cwd) if cwd and config.git.enabled else _no_git_status()
    context_task = get_context_data_async(
        path,
        ctx.max_context_tokens,
        ctx.autocompact_buffer_tokens,
        ctx.use_usable_context_only,
        ctx.overhead_tokens,
    )
    usage_task = asyncio.to_thread(get_latest_usage, path)

    git_status, context, usage = await asyncio.gather(git_task, context_task, usage_task)

    if path is None or not path.is_file():
        logger.debug(f"No transcript at {path}")
        context = None

    return build_statusline_data(payload, config, context, usage, git_status, vim_mode)
