"""Pure value formatting for status line fragments."""

import math
import os
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from statusline.colors import PLAIN, Palette
from statusline.models import CostFormat, PathDisplayMode

FIVE_HOUR_WINDOW_MINUTES = 300
WEEKLY_WINDOW_HOURS = 168


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up (2.5 -> 3)."""
    return math.floor(value + 0.5)


def format_fixed(value: float, places: int) -> str:
    """Format with a fixed number of decimals, rounding halves up.

    Examples:
        >>> format_fixed(0.125, 2)
        '0.13'
        >>> format_fixed(3, 1)
        '3.0'
    """
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: float) -> str:
    """Render a number without a trailing ``.0`` for whole values."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_cost(cost: float, fmt: CostFormat = CostFormat.DECIMAL1) -> str:
    """Format a dollar amount at the configured precision."""
    if fmt == CostFormat.INTEGER:
        return str(round_half_up(cost))
    if fmt == CostFormat.DECIMAL1:
        return format_fixed(cost, 1)
    return format_fixed(cost, 2)


def format_tokens(tokens: int, show_decimals: bool = True, palette: Palette = PLAIN) -> str:
    """Format a token count with a k/m suffix.

    Examples:
        >>> format_tokens(500)
        '500'
        >>> format_tokens(84_000)
        '84.0k'
        >>> format_tokens(1_500_000, show_decimals=False)
        '2m'
    """
    for threshold, suffix in ((1_000_000, "m"), (1_000, "k")):
        if tokens >= threshold:
            value = tokens / threshold
            number = format_fixed(value, 1) if show_decimals else str(round_half_up(value))
            return f"{palette.light_gray(number)}{palette.gray(suffix)}"
    return palette.light_gray(str(tokens))


def format_duration(ms: int) -> str:
    """Format milliseconds as ``XhYm``, ``Xh`` or ``Ym``."""
    minutes = max(0, ms) // 60_000
    hours, mins = divmod(minutes, 60)
    if hours > 0:
        return f"{hours}h{mins}m" if mins > 0 else f"{hours}h"
    return f"{mins}m"


def format_reset_time(resets_at: datetime, now: datetime | None = None) -> str:
    """Countdown until a usage window resets."""
    now = now or datetime.now(UTC)
    diff_ms = (resets_at - now).total_seconds() * 1000
    if diff_ms <= 0:
        return "now"

    hours = int(diff_ms // 3_600_000)
    minutes = int((diff_ms % 3_600_000) // 60_000)
    if hours > 0:
        return f"{hours}h{minutes}m"
    return f"{minutes}m"


def format_path(path: str, mode: PathDisplayMode = PathDisplayMode.TRUNCATED) -> str:
    """Shorten a working directory for display.

    The home directory is replaced with ``~``. Truncated mode keeps the last
    two segments behind an ellipsis; basename mode keeps only the last one.
    """
    segments = [s for s in path.replace("\\", "/").split("/") if s]

    if mode == PathDisplayMode.BASENAME:
        return segments[-1] if segments else path

    home = str(Path.home())
    formatted = path
    if home and home != os.sep and (path == home or path.startswith(home + os.sep)):
        formatted = f"~{path[len(home):]}"

    if mode == PathDisplayMode.TRUNCATED:
        segments = [s for s in formatted.replace("\\", "/").split("/") if s]
        if len(segments) > 2:
            return f"…{os.sep}{os.sep.join(segments[-2:])}"

    return formatted


def pacing_delta(
    utilization: float,
    resets_at: datetime | None,
    window_minutes: float,
    now: datetime | None = None,
) -> float:
    """Utilization minus the share of the window that has already elapsed.

    Positive values mean usage is ahead of a linear pace.
    """
    if resets_at is None or window_minutes <= 0:
        return 0.0
    now = now or datetime.now(UTC)
    minutes_remaining = max(0.0, (resets_at - now).total_seconds() / 60)
    elapsed_percent = (window_minutes - minutes_remaining) / window_minutes * 100
    return utilization - elapsed_percent


def format_pacing_delta(delta: float, palette: Palette = PLAIN) -> str:
    sign = "+" if delta >= 0 else ""
    value = f"{sign}{format_fixed(delta, 1)}%"

    if delta > 5:
        return palette.green(value)
    if delta > 0:
        return palette.light_gray(value)
    if delta > -10:
        return palette.yellow(value)
    return palette.red(value)


def extract_model_version(model_name: str) -> str | None:
    """Find the first ``N.N`` or ``N.N.N`` version number in a model name.

    Examples:
        >>> extract_model_version("Claude Opus 4.6")
        '4.6'
        >>> extract_model_version("glm-4.7")
        '4.7'
        >>> extract_model_version("Claude Sonnet") is None
        True
    """
    n = len(model_name)
    i = 0
    while i < n:
        if not _is_digit(model_name[i]):
            i += 1
            continue

        start = i
        end = _scan_digits(model_name, i)
        groups = 1
        while groups < 3 and end + 1 < n and model_name[end] == "." and _is_digit(model_name[end + 1]):
            end = _scan_digits(model_name, end + 1)
            groups += 1

        if groups >= 2:
            return model_name[start:end]
        i = end
    return None


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def _scan_digits(text: str, i: int) -> int:
    while i < len(text) and _is_digit(text[i]):
        i += 1
    return i
