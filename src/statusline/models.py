"""Core data models for statusline."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class CostFormat(str, Enum):
    """Precision used when displaying a dollar amount."""

    INTEGER = "integer"
    DECIMAL1 = "decimal1"
    DECIMAL2 = "decimal2"


class ProgressBarStyle(str, Enum):
    """Glyph alphabet for progress bars."""

    FILLED = "filled"
    RECTANGLE = "rectangle"
    BRAILLE = "braille"


class ProgressBarColor(str, Enum):
    """Foreground rule for progress bars."""

    PROGRESSIVE = "progressive"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    PEACH = "peach"
    BLACK = "black"
    WHITE = "white"


class ProgressBarBackground(str, Enum):
    """Background fill behind progress bars."""

    NONE = "none"
    DARK = "dark"
    GRAY = "gray"
    LIGHT = "light"
    BLUE = "blue"
    PURPLE = "purple"
    CYAN = "cyan"
    PEACH = "peach"


class PathDisplayMode(str, Enum):
    """How the working directory is shortened."""

    FULL = "full"
    TRUNCATED = "truncated"
    BASENAME = "basename"


class CacheFormat(str, Enum):
    """Display format for the cache-hit widget."""

    PERCENTAGE = "percentage"
    BAR = "bar"


class WeeklyVisibility(str, Enum):
    """When the weekly usage widget is shown.

    ALWAYS and NEVER correspond to the JSON booleans; AT_90 is the "90%"
    setting, which shows the widget once the 5-hour window reaches 90%.
    """

    ALWAYS = "always"
    NEVER = "never"
    AT_90 = "90%"


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp, returning None when absent or malformed.

    Naive timestamps are assumed to be UTC.
    """
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        logger.debug(f"Ignoring malformed timestamp: {value!r}")
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def _as_int(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return max(0, int(value))


@dataclass(frozen=True)
class TokenUsage:
    """Token counts reported for a single assistant turn."""

    input_tokens: int = 0
    output_tokens: int = 0
    cache_creation_input_tokens: int = 0
    cache_read_input_tokens: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TokenUsage":
        return cls(
            input_tokens=_as_int(data.get("input_tokens")),
            output_tokens=_as_int(data.get("output_tokens")),
            cache_creation_input_tokens=_as_int(data.get("cache_creation_input_tokens")),
            cache_read_input_tokens=_as_int(data.get("cache_read_input_tokens")),
        )

    @property
    def context_tokens(self) -> int:
        """Tokens that occupy the context window on the next turn.

        Output tokens are excluded.
        """
        return self.input_tokens + self.cache_read_input_tokens + self.cache_creation_input_tokens


@dataclass(frozen=True)
class ContextResult:
    """Context window consumption derived from a transcript."""

    tokens: int = 0
    percentage: int = 0
    duration_ms: int = 0


@dataclass(frozen=True)
class SessionUsage:
    """Per-render snapshot of the session's token, cost, and time usage."""

    input_tokens: int = 0
    cache_read_tokens: int = 0
    cache_creation_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0
    duration_ms: int = 0
    model_id: str = ""

    @property
    def token_usage(self) -> TokenUsage:
        return TokenUsage(
            input_tokens=self.input_tokens,
            output_tokens=self.output_tokens,
            cache_creation_input_tokens=self.cache_creation_tokens,
            cache_read_input_tokens=self.cache_read_tokens,
        )


@dataclass(frozen=True)
class GitChanges:
    """Line and file counts for one side of the index."""

    added: int = 0
    deleted: int = 0
    files: int = 0

    @property
    def any(self) -> bool:
        return self.added > 0 or self.deleted > 0 or self.files > 0


@dataclass(frozen=True)
class GitStatus:
    """Normalized working tree state."""

    branch: str
    dirty: bool = False
    staged: GitChanges = field(default_factory=GitChanges)
    unstaged: GitChanges = field(default_factory=GitChanges)


@dataclass(frozen=True)
class UsageLimit:
    """Utilization of one rolling usage window."""

    utilization: float
    resets_at: datetime | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "UsageLimit | None":
        """Build from a host payload entry; returns None when unusable."""
        if not isinstance(data, dict):
            return None
        utilization = data.get("utilization")
        if isinstance(utilization, bool) or not isinstance(utilization, (int, float)):
            return None
        return cls(
            utilization=float(utilization),
            resets_at=parse_timestamp(data.get("resets_at")),
        )


@dataclass(frozen=True)
class UsageLimits:
    """The 5-hour and 7-day usage windows."""

    five_hour: UsageLimit | None = None
    seven_day: UsageLimit | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "UsageLimits":
        if not isinstance(data, dict):
            return cls()
        return cls(
            five_hour=UsageLimit.from_dict(data.get("five_hour")),
            seven_day=UsageLimit.from_dict(data.get("seven_day")),
        )


@dataclass(frozen=True)
class StatuslineData:
    """Raw facts for one render. No pre-formatting, just values.

    ``context_tokens``/``context_percentage`` are None until usage has been
    observed. ``max_context_tokens`` overrides the configured window size when
    the host reports one.
    """

    path: str
    model_name: str
    git: GitStatus | None = None
    cost: float = 0.0
    duration_ms: int = 0
    context_tokens: int | None = None
    context_percentage: int | None = None
    max_context_tokens: int | None = None
    cache_percentage: float | None = None
    usage_limits: UsageLimits = field(default_factory=UsageLimits)
    period_cost: float = 0.0
    today_cost: float = 0.0
    vim_mode_active: bool = False

    @property
    def five_hour_utilization(self) -> float | None:
        if self.usage_limits.five_hour is None:
            return None
        return self.usage_limits.five_hour.utilization
