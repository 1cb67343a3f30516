"""Configuration for statusline.

The configuration is a tree of frozen dataclasses. ``DEFAULT_CONFIG`` holds the
built-in values; user files are JSON with camelCase keys and are merged over a
base configuration one top-level section at a time (see ``merge_config``).
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any

from statusline.colors import StyleName, style_from_name
from statusline.models import (
    CacheFormat,
    CostFormat,
    PathDisplayMode,
    ProgressBarBackground,
    ProgressBarColor,
    ProgressBarStyle,
    WeeklyVisibility,
)
from statusline.progress import BAR_LENGTHS

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a configuration value is missing or invalid."""


CONFIG_DIR = Path.home() / ".claude" / "scripts" / "statusline"
USER_CONFIG_PATH = CONFIG_DIR / "statusline.config.json"
DEFAULTS_PATH = CONFIG_DIR / "defaults.json"


@dataclass(frozen=True)
class FeaturesConfig:
    usage_limits: bool = True
    spend_tracking: bool = True


@dataclass(frozen=True)
class CostConfig:
    enabled: bool = True
    format: CostFormat = CostFormat.DECIMAL1


@dataclass(frozen=True)
class ProgressBarConfig:
    enabled: bool = True
    length: int = 10
    style: ProgressBarStyle = ProgressBarStyle.FILLED
    color: ProgressBarColor = ProgressBarColor.PROGRESSIVE
    background: ProgressBarBackground = ProgressBarBackground.NONE


@dataclass(frozen=True)
class PercentageConfig:
    enabled: bool = True
    show_value: bool = True
    progress_bar: ProgressBarConfig = field(default_factory=ProgressBarConfig)


def _limit_percentage() -> PercentageConfig:
    return PercentageConfig(
        show_value=False,
        progress_bar=ProgressBarConfig(style=ProgressBarStyle.RECTANGLE),
    )


@dataclass(frozen=True)
class GitConfig:
    enabled: bool = True
    show_branch: bool = True
    show_dirty_indicator: bool = True
    show_changes: bool = True
    show_staged: bool = False
    show_unstaged: bool = False


@dataclass(frozen=True)
class DurationConfig:
    enabled: bool = True


@dataclass(frozen=True)
class TokensConfig:
    enabled: bool = True
    show_max: bool = True
    show_decimals: bool = True


@dataclass(frozen=True)
class SessionConfig:
    info_separator: str | None = "•"
    cost: CostConfig = field(default_factory=CostConfig)
    duration: DurationConfig = field(default_factory=DurationConfig)
    tokens: TokensConfig = field(default_factory=TokensConfig)
    percentage: PercentageConfig = field(default_factory=PercentageConfig)


@dataclass(frozen=True)
class ContextConfig:
    use_payload_context_window: bool = True
    max_context_tokens: int = 200_000
    autocompact_buffer_tokens: int = 0
    use_usable_context_only: bool = False
    overhead_tokens: int = 2_000


@dataclass(frozen=True)
class LimitsConfig:
    enabled: bool = True
    show_time_left: bool = True
    show_pacing_delta: bool = True
    cost: CostConfig = field(default_factory=CostConfig)
    percentage: PercentageConfig = field(default_factory=_limit_percentage)


@dataclass(frozen=True)
class WeeklyUsageConfig:
    enabled: WeeklyVisibility = WeeklyVisibility.AT_90
    show_time_left: bool = True
    show_pacing_delta: bool = True
    cost: CostConfig = field(default_factory=CostConfig)
    percentage: PercentageConfig = field(default_factory=_limit_percentage)


@dataclass(frozen=True)
class DailySpendConfig:
    cost: CostConfig = field(default_factory=CostConfig)


@dataclass(frozen=True)
class VimConfig:
    enabled: bool = True
    show_label: bool = True
    active_text: str = "Vim"
    inactive_text: str = "Normal"
    color_when_active: StyleName = StyleName.GREEN
    color_when_inactive: StyleName = StyleName.GRAY


@dataclass(frozen=True)
class CacheColorThresholds:
    low: int = 30
    medium: int = 60
    high: int = 90


@dataclass(frozen=True)
class CacheConfig:
    enabled: bool = True
    show_label: bool = True
    format: CacheFormat = CacheFormat.PERCENTAGE
    prefix: str = "C:"
    progress_bar: ProgressBarConfig = field(default_factory=ProgressBarConfig)
    color_thresholds: CacheColorThresholds = field(default_factory=CacheColorThresholds)


@dataclass(frozen=True)
class StatuslineConfig:
    features: FeaturesConfig = field(default_factory=FeaturesConfig)
    one_line: bool = False
    show_sonnet_model: bool = False
    path_display_mode: PathDisplayMode = PathDisplayMode.TRUNCATED
    git: GitConfig = field(default_factory=GitConfig)
    separator: str = "|"
    session: SessionConfig = field(default_factory=SessionConfig)
    context: ContextConfig = field(default_factory=ContextConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    weekly_usage: WeeklyUsageConfig = field(default_factory=WeeklyUsageConfig)
    daily_spend: DailySpendConfig = field(default_factory=DailySpendConfig)
    vim: VimConfig = field(default_factory=VimConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)


DEFAULT_CONFIG = StatuslineConfig()


@dataclass(frozen=True)
class PartialConfig:
    """A user-supplied configuration: every top-level section optional."""

    features: FeaturesConfig | None = None
    one_line: bool | None = None
    show_sonnet_model: bool | None = None
    path_display_mode: PathDisplayMode | None = None
    git: GitConfig | None = None
    separator: str | None = None
    session: SessionConfig | None = None
    context: ContextConfig | None = None
    limits: LimitsConfig | None = None
    weekly_usage: WeeklyUsageConfig | None = None
    daily_spend: DailySpendConfig | None = None
    vim: VimConfig | None = None
    cache: CacheConfig | None = None

    @classmethod
    def from_dict(cls, data: Any) -> "PartialConfig":
        """Parse a JSON configuration object.

        Each section present is parsed against the built-in defaults for that
        section, so keys missing inside it take their schema defaults.

        Raises:
            ConfigError: If a value has the wrong type or an unknown choice.
        """
        if not isinstance(data, dict):
            raise ConfigError("configuration must be a JSON object")

        values = {}
        for f in fields(StatuslineConfig):
            key = camel_case(f.name)
            if key in data:
                values[f.name] = _convert(getattr(DEFAULT_CONFIG, f.name), data[key], f.name, key)
        return cls(**values)


def merge_config(base: StatuslineConfig, partial: PartialConfig) -> StatuslineConfig:
    """Overlay ``partial`` on ``base``.

    The merge is shallow: a section present in ``partial`` replaces the whole
    corresponding section of ``base`` (last writer wins per top-level key).
    """
    overrides = {
        f.name: getattr(partial, f.name)
        for f in fields(PartialConfig)
        if getattr(partial, f.name) is not None
    }
    return replace(base, **overrides)


def camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _convert(default: Any, value: Any, name: str, where: str) -> Any:
    """Convert a JSON value to the type of ``default``."""
    if is_dataclass(default):
        if not isinstance(value, dict):
            raise ConfigError(f"{where}: expected an object")
        values = {}
        for f in fields(default):
            key = camel_case(f.name)
            if key in value:
                values[f.name] = _convert(getattr(default, f.name), value[key], f.name, f"{where}.{key}")
        return replace(default, **values)

    if name == "info_separator":
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{where}: expected a string or null")
        return value

    if name == "length":
        if value not in BAR_LENGTHS or isinstance(value, bool):
            raise ConfigError(f"{where}: must be one of {', '.join(map(str, BAR_LENGTHS))}")
        return int(value)

    if isinstance(default, WeeklyVisibility):
        if value is True:
            return WeeklyVisibility.ALWAYS
        if value is False:
            return WeeklyVisibility.NEVER
        if value == WeeklyVisibility.AT_90.value:
            return WeeklyVisibility.AT_90
        raise ConfigError(f"{where}: expected true, false or \"90%\"")

    if isinstance(default, StyleName):
        style = style_from_name(value)
        if style.value != value:
            logger.warning(f"{where}: unknown color {value!r}, using {style.value}")
        return style

    if isinstance(default, Enum):
        try:
            return type(default)(value)
        except ValueError:
            choices = ", ".join(str(m.value) for m in type(default))
            raise ConfigError(f"{where}: {value!r} is not one of {choices}") from None

    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigError(f"{where}: expected a boolean")
        return value

    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{where}: expected a number")
        return int(value)

    if isinstance(default, str):
        if not isinstance(value, str):
            raise ConfigError(f"{where}: expected a string")
        return value

    raise ConfigError(f"{where}: unsupported setting")


def config_to_dict(config: Any) -> Any:
    """Serialize a configuration (or section) to its JSON shape."""
    if is_dataclass(config):
        return {camel_case(f.name): config_to_dict(getattr(config, f.name)) for f in fields(config)}
    if config is WeeklyVisibility.ALWAYS:
        return True
    if config is WeeklyVisibility.NEVER:
        return False
    if isinstance(config, Enum):
        return config.value
    return config


def get_config_path() -> Path | None:
    """Get an explicit config path from STATUSLINE_CONFIG, if set."""
    path = os.environ.get("STATUSLINE_CONFIG")
    if path:
        return Path(path).expanduser()
    return None


def read_config_file(path: Path) -> PartialConfig:
    """Read and parse one JSON configuration file.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON in {path}: {e}") from e
    return PartialConfig.from_dict(raw)


def load_config(path: Path | None = None, base: StatuslineConfig = DEFAULT_CONFIG) -> StatuslineConfig:
    """Load configuration from the first usable source.

    Sources are tried in order: ``path`` (or STATUSLINE_CONFIG), the user
    config file, then the defaults file. A missing or invalid file is skipped;
    if none is usable ``base`` is returned unchanged.
    """
    explicit = path or get_config_path()
    candidates = [explicit] if explicit else []
    candidates += [USER_CONFIG_PATH, DEFAULTS_PATH]

    for candidate in candidates:
        if not candidate.exists():
            logger.debug(f"No config at {candidate}")
            continue
        try:
            partial = read_config_file(candidate)
        except ConfigError as e:
            logger.warning(f"Ignoring config: {e}")
            continue
        logger.debug(f"Loaded config from {candidate}")
        return merge_config(base, partial)

    return base
