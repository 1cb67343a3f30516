"""Widget composers.

Each ``format_*`` function turns raw facts plus its configuration section into
a display fragment. An empty string means the widget is suppressed; widgets
never add the separator between fragments themselves.
"""

from datetime import datetime

from statusline.colors import PLAIN, Palette, StyleName
from statusline.config import (
    CacheColorThresholds,
    CacheConfig,
    DailySpendConfig,
    GitConfig,
    LimitsConfig,
    PercentageConfig,
    SessionConfig,
    VimConfig,
    WeeklyUsageConfig,
)
from statusline.formatters import (
    FIVE_HOUR_WINDOW_MINUTES,
    WEEKLY_WINDOW_HOURS,
    extract_model_version,
    format_cost,
    format_duration,
    format_fixed,
    format_number,
    format_pacing_delta,
    format_reset_time,
    format_tokens,
    pacing_delta,
)
from statusline.models import CacheFormat, CostFormat, GitStatus, UsageLimit, WeeklyVisibility
from statusline.progress import render_progress_bar


def _bar(percentage: float, config: PercentageConfig, palette: Palette) -> str:
    bar = config.progress_bar
    return render_progress_bar(
        percentage,
        length=bar.length,
        style=bar.style,
        color=bar.color,
        background=bar.background,
        palette=palette,
    )


def _dollars(amount: float, fmt: CostFormat, palette: Palette) -> str:
    return f"{palette.gray('$')}{palette.dim_white(format_cost(amount, fmt))}"


def format_git_part(git: GitStatus | None, config: GitConfig, palette: Palette = PLAIN) -> str:
    """Branch name, dirty marker, and line/file change counts."""
    if git is None or not config.enabled:
        return ""

    parts: list[str] = []
    if config.show_branch:
        parts.append(palette.light_gray(git.branch))

    if git.dirty and config.show_dirty_indicator:
        marker = palette.purple("*")
        if parts:
            parts[-1] += marker
        else:
            parts.append(marker)

    changes: list[str] = []

    if config.show_staged and git.staged.any:
        staged: list[str] = []
        if git.staged.added > 0:
            staged.append(palette.cyan(f"+{git.staged.added}"))
        if git.staged.deleted > 0:
            staged.append(palette.cyan(f"-{git.staged.deleted}"))
        if git.staged.files > 0:
            staged.append(palette.cyan(f"[{git.staged.files}]"))
        changes.append(" ".join(staged))

    if config.show_unstaged or config.show_changes:
        unstaged: list[str] = []
        if git.unstaged.added > 0:
            unstaged.append(palette.green(f"+{git.unstaged.added}"))
        if git.unstaged.deleted > 0:
            unstaged.append(palette.red(f"-{git.unstaged.deleted}"))
        if config.show_unstaged and git.unstaged.files > 0:
            unstaged.append(palette.yellow(f"[{git.unstaged.files}]"))
        if unstaged:
            changes.append(" ".join(unstaged))

    # Totals when the detailed view produced nothing
    if not changes and config.show_changes:
        added = git.staged.added + git.unstaged.added
        deleted = git.staged.deleted + git.unstaged.deleted
        files = git.staged.files + git.unstaged.files
        if added > 0:
            changes.append(palette.green(f"+{added}"))
        if deleted > 0:
            changes.append(palette.red(f"-{deleted}"))
        if files > 0:
            changes.append(palette.yellow(f"[{files}]"))

    if changes:
        parts.append(" ".join(changes))

    return " ".join(parts)


def format_model_part(model_name: str, show_sonnet_model: bool, palette: Palette = PLAIN) -> str:
    """Model version number, or the full name when it has none.

    Names without a version that mention "sonnet" are hidden unless
    ``show_sonnet_model`` is set.
    """
    version = extract_model_version(model_name)
    if version:
        return palette.peach(version)
    if model_name and (show_sonnet_model or "sonnet" not in model_name.lower()):
        return palette.peach(model_name)
    return ""


def format_session_cost_part(cost: float, config: SessionConfig, palette: Palette = PLAIN) -> str:
    if not config.cost.enabled or cost <= 0:
        return ""
    return palette.green(format_cost(cost, config.cost.format))


def format_session_part(
    duration_ms: int,
    context_tokens: int | None,
    context_percentage: int | None,
    max_tokens: int,
    config: SessionConfig,
    palette: Palette = PLAIN,
) -> str:
    """Context bar, percentage and token counts, then session duration.

    Renders the ``S: -`` placeholder until context data is available.
    """
    if context_tokens is None or context_percentage is None:
        return f"{palette.gray('S:')} {palette.gray('-')}"

    items: list[str] = []

    if config.percentage.enabled:
        pct_parts: list[str] = []
        if config.percentage.progress_bar.enabled:
            pct_parts.append(_bar(context_percentage, config.percentage, palette))

        if config.percentage.show_value:
            value = f"{palette.bold(palette.light_gray(context_percentage))}{palette.gray('%')}"
            if config.tokens.enabled:
                decimals = config.tokens.show_decimals
                counts = format_tokens(context_tokens, decimals, palette)
                if config.tokens.show_max:
                    counts += f"{palette.gray('/')}{format_tokens(max_tokens, decimals, palette)}"
                value += f" {palette.gray('(')}{counts}{palette.gray(')')}"
            pct_parts.append(value)

        if pct_parts:
            items.append(" ".join(pct_parts))

    if config.duration.enabled and duration_ms > 0:
        items.append(palette.gray(format_duration(duration_ms)))

    if not items:
        return ""

    sep = f" {palette.gray(config.info_separator)} " if config.info_separator else " "
    return sep.join(items)


def _format_window_part(
    label: str,
    limit: UsageLimit,
    period_cost: float,
    window_minutes: float,
    config: LimitsConfig | WeeklyUsageConfig,
    palette: Palette,
    now: datetime | None,
) -> str:
    parts: list[str] = []

    if config.cost.enabled and period_cost > 0:
        parts.append(_dollars(period_cost, config.cost.format, palette))

    if config.percentage.enabled:
        if config.percentage.progress_bar.enabled:
            parts.append(_bar(limit.utilization, config.percentage, palette))
        if config.percentage.show_value:
            parts.append(f"{palette.light_gray(format_number(limit.utilization))}{palette.gray('%')}")

    if config.show_pacing_delta and limit.resets_at is not None:
        delta = pacing_delta(limit.utilization, limit.resets_at, window_minutes, now)
        parts.append(f"{palette.gray('(')}{format_pacing_delta(delta, palette)}{palette.gray(')')}")

    if config.show_time_left and limit.resets_at is not None:
        parts.append(palette.gray(f"({format_reset_time(limit.resets_at, now)})"))

    if not parts:
        return ""
    return f"{palette.gray(label)} {' '.join(parts)}"


def format_limits_part(
    five_hour: UsageLimit | None,
    period_cost: float,
    config: LimitsConfig,
    palette: Palette = PLAIN,
    now: datetime | None = None,
) -> str:
    """The 5-hour rolling usage window."""
    if not config.enabled or five_hour is None:
        return ""
    return _format_window_part("L:", five_hour, period_cost, FIVE_HOUR_WINDOW_MINUTES, config, palette, now)


def should_show_weekly(config: WeeklyUsageConfig, five_hour_utilization: float | None) -> bool:
    if config.enabled == WeeklyVisibility.ALWAYS:
        return True
    if config.enabled == WeeklyVisibility.NEVER:
        return False
    return five_hour_utilization is not None and five_hour_utilization >= 90


def format_weekly_part(
    seven_day: UsageLimit | None,
    five_hour_utilization: float | None,
    period_cost: float,
    config: WeeklyUsageConfig,
    palette: Palette = PLAIN,
    now: datetime | None = None,
) -> str:
    """The 7-day rolling usage window."""
    if seven_day is None or not should_show_weekly(config, five_hour_utilization):
        return ""
    return _format_window_part("W:", seven_day, period_cost, WEEKLY_WINDOW_HOURS * 60, config, palette, now)


def format_daily_part(today_cost: float, config: DailySpendConfig, palette: Palette = PLAIN) -> str:
    if not config.cost.enabled or today_cost <= 0:
        return ""
    return f"{palette.gray('D:')} {_dollars(today_cost, config.cost.format, palette)}"


def format_vim_part(active: bool, config: VimConfig, palette: Palette = PLAIN) -> str:
    """Editor mode indicator.

    With ``show_label`` off only the active state is shown.
    """
    if not config.enabled:
        return ""
    if active:
        return palette.wrap(config.color_when_active, config.active_text)
    if not config.show_label:
        return ""
    return palette.wrap(config.color_when_inactive, config.inactive_text)


def cache_value_style(percentage: float, thresholds: CacheColorThresholds) -> StyleName:
    if percentage >= thresholds.high:
        return StyleName.GREEN
    if percentage >= thresholds.medium:
        return StyleName.LIGHT_GRAY
    if percentage >= thresholds.low:
        return StyleName.YELLOW
    return StyleName.RED


def format_cache_part(cache_percentage: float | None, config: CacheConfig, palette: Palette = PLAIN) -> str:
    """Cache-hit ratio as a bar and/or a percentage."""
    if not config.enabled or cache_percentage is None:
        return ""

    parts: list[str] = []
    if config.show_label:
        parts.append(palette.gray(config.prefix))

    if config.progress_bar.enabled:
        bar = config.progress_bar
        parts.append(
            render_progress_bar(
                cache_percentage,
                length=bar.length,
                style=bar.style,
                color=bar.color,
                background=bar.background,
                palette=palette,
            )
        )

    if config.format == CacheFormat.PERCENTAGE:
        style = cache_value_style(cache_percentage, config.color_thresholds)
        parts.append(f"{palette.wrap(style, format_fixed(cache_percentage, 1))}{palette.gray('%')}")

    return " ".join(parts)
