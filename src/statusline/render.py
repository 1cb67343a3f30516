"""Pure status line renderer: raw data and configuration in, string out."""

from datetime import datetime

from statusline.colors import PLAIN, Palette
from statusline.config import DEFAULT_CONFIG, StatuslineConfig
from statusline.formatters import format_path
from statusline.layout import compose
from statusline.models import StatuslineData
from statusline.widgets import (
    format_cache_part,
    format_daily_part,
    format_git_part,
    format_limits_part,
    format_model_part,
    format_session_cost_part,
    format_session_part,
    format_vim_part,
    format_weekly_part,
)


def render_statusline(
    data: StatuslineData,
    config: StatuslineConfig = DEFAULT_CONFIG,
    palette: Palette = PLAIN,
    now: datetime | None = None,
) -> str:
    """Render the status line for one prompt.

    Line one holds git, path, model and session cost. The session, limits,
    weekly, daily, vim and cache widgets follow, on a second line unless
    ``config.one_line`` is set.

    Args:
        data: Facts gathered for this render.
        config: Effective configuration.
        palette: Styling; ``PLAIN`` produces text without escape sequences.
        now: Reference time for reset countdowns and pacing.
    """
    identity = [
        format_git_part(data.git, config.git, palette),
        palette.gray(format_path(data.path, config.path_display_mode)),
        format_model_part(data.model_name, config.show_sonnet_model, palette),
        format_session_cost_part(data.cost, config.session, palette),
    ]

    spend = config.features.spend_tracking
    period_cost = data.period_cost if spend else 0.0
    fragments = [
        format_session_part(
            data.duration_ms,
            data.context_tokens,
            data.context_percentage,
            data.max_context_tokens or config.context.max_context_tokens,
            config.session,
            palette,
        ),
    ]

    if config.features.usage_limits:
        fragments += [
            format_limits_part(data.usage_limits.five_hour, period_cost, config.limits, palette, now),
            format_weekly_part(
                data.usage_limits.seven_day,
                data.five_hour_utilization,
                period_cost,
                config.weekly_usage,
                palette,
                now,
            ),
        ]

    if spend:
        fragments.append(format_daily_part(data.today_cost, config.daily_spend, palette))

    fragments += [
        format_vim_part(data.vim_mode_active, config.vim, palette),
        format_cache_part(data.cache_percentage, config.cache, palette),
    ]

    return compose(identity, fragments, config.separator, config.one_line, palette)
