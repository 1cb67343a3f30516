"""Tests for configuration parsing, merging and loading."""

import json
import logging
from pathlib import Path

import pytest

from statusline import config as config_module
from statusline.colors import StyleName
from statusline.config import (
    DEFAULT_CONFIG,
    ConfigError,
    PartialConfig,
    camel_case,
    config_to_dict,
    load_config,
    merge_config,
    read_config_file,
)
from statusline.models import (
    CostFormat,
    PathDisplayMode,
    ProgressBarBackground,
    ProgressBarStyle,
    WeeklyVisibility,
)


def write_json(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestDefaults:
    def test_default_values(self) -> None:
        assert DEFAULT_CONFIG.separator == "|"
        assert DEFAULT_CONFIG.one_line is False
        assert DEFAULT_CONFIG.path_display_mode == PathDisplayMode.TRUNCATED
        assert DEFAULT_CONFIG.session.info_separator == "•"
        assert DEFAULT_CONFIG.weekly_usage.enabled == WeeklyVisibility.AT_90
        assert DEFAULT_CONFIG.context.max_context_tokens == 200_000

    def test_limit_bars_use_rectangles_without_value(self) -> None:
        assert DEFAULT_CONFIG.limits.percentage.show_value is False
        assert DEFAULT_CONFIG.limits.percentage.progress_bar.style == ProgressBarStyle.RECTANGLE
        assert DEFAULT_CONFIG.session.percentage.progress_bar.style == ProgressBarStyle.FILLED

    def test_camel_case(self) -> None:
        assert camel_case("path_display_mode") == "pathDisplayMode"
        assert camel_case("separator") == "separator"


class TestPartialConfig:
    def test_missing_sections_are_none(self) -> None:
        partial = PartialConfig.from_dict({"oneLine": True})
        assert partial.one_line is True
        assert partial.git is None
        assert partial.session is None

    def test_section_keys_default_from_schema(self) -> None:
        partial = PartialConfig.from_dict({"session": {"cost": {"format": "integer"}}})
        assert partial.session is not None
        assert partial.session.cost.format == CostFormat.INTEGER
        assert partial.session.cost.enabled is True
        assert partial.session.info_separator == "•"

    def test_nested_section_defaults_are_section_specific(self) -> None:
        partial = PartialConfig.from_dict({"limits": {"showTimeLeft": False}})
        assert partial.limits is not None
        assert partial.limits.percentage.progress_bar.style == ProgressBarStyle.RECTANGLE

    def test_null_info_separator(self) -> None:
        partial = PartialConfig.from_dict({"session": {"infoSeparator": None}})
        assert partial.session is not None
        assert partial.session.info_separator is None

    def test_enum_values(self) -> None:
        partial = PartialConfig.from_dict(
            {
                "pathDisplayMode": "basename",
                "cache": {"progressBar": {"style": "braille", "background": "peach", "length": 15}},
            }
        )
        assert partial.path_display_mode == PathDisplayMode.BASENAME
        assert partial.cache is not None
        assert partial.cache.progress_bar.style == ProgressBarStyle.BRAILLE
        assert partial.cache.progress_bar.background == ProgressBarBackground.PEACH
        assert partial.cache.progress_bar.length == 15

    @pytest.mark.parametrize(
        "value,expected",
        [(True, WeeklyVisibility.ALWAYS), (False, WeeklyVisibility.NEVER), ("90%", WeeklyVisibility.AT_90)],
    )
    def test_weekly_visibility(self, value: object, expected: WeeklyVisibility) -> None:
        partial = PartialConfig.from_dict({"weeklyUsage": {"enabled": value}})
        assert partial.weekly_usage is not None
        assert partial.weekly_usage.enabled == expected

    def test_unknown_vim_color_falls_back(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            partial = PartialConfig.from_dict({"vim": {"colorWhenActive": "chartreuse"}})
        assert partial.vim is not None
        assert partial.vim.color_when_active == StyleName.LIGHT_GRAY
        assert "chartreuse" in caplog.text

    def test_known_vim_color_does_not_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            partial = PartialConfig.from_dict({"vim": {"colorWhenInactive": "cyan", "colorWhenActive": 5}})
        assert partial.vim is not None
        assert partial.vim.color_when_inactive == StyleName.CYAN
        assert partial.vim.color_when_active == StyleName.LIGHT_GRAY
        assert "cyan" not in caplog.text
        assert "colorWhenActive" in caplog.text

    def test_unknown_keys_ignored(self) -> None:
        partial = PartialConfig.from_dict({"somethingElse": 1, "git": {"frobnicate": True}})
        assert partial.git == DEFAULT_CONFIG.git

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"oneLine": "yes"},
            {"separator": 5},
            {"git": True},
            {"session": {"percentage": {"progressBar": {"length": 12}}}},
            {"session": {"percentage": {"progressBar": {"length": True}}}},
            {"pathDisplayMode": "middle"},
            {"weeklyUsage": {"enabled": "50%"}},
            {"context": {"maxContextTokens": "big"}},
            {"session": {"infoSeparator": 3}},
        ],
    )
    def test_invalid_values_raise(self, data: object) -> None:
        with pytest.raises(ConfigError):
            PartialConfig.from_dict(data)


class TestMergeConfig:
    def test_section_replaced_whole(self) -> None:
        base = merge_config(DEFAULT_CONFIG, PartialConfig.from_dict({"git": {"showStaged": True}}))
        merged = merge_config(base, PartialConfig.from_dict({"git": {"showBranch": False}}))
        assert merged.git.show_branch is False
        assert merged.git.show_staged is False

    def test_absent_sections_kept(self) -> None:
        base = merge_config(DEFAULT_CONFIG, PartialConfig.from_dict({"separator": "/"}))
        merged = merge_config(base, PartialConfig.from_dict({"oneLine": True}))
        assert merged.separator == "/"
        assert merged.one_line is True

    def test_empty_partial_is_identity(self) -> None:
        assert merge_config(DEFAULT_CONFIG, PartialConfig()) == DEFAULT_CONFIG


class TestConfigToDict:
    def test_camel_case_keys_and_json_values(self) -> None:
        data = config_to_dict(DEFAULT_CONFIG)
        assert data["pathDisplayMode"] == "truncated"
        assert data["weeklyUsage"]["enabled"] == "90%"
        assert data["session"]["percentage"]["progressBar"]["length"] == 10
        assert data["vim"]["colorWhenActive"] == "green"

    def test_weekly_booleans(self) -> None:
        partial = PartialConfig.from_dict({"weeklyUsage": {"enabled": True}})
        assert config_to_dict(merge_config(DEFAULT_CONFIG, partial))["weeklyUsage"]["enabled"] is True

    def test_round_trips_through_parser(self) -> None:
        partial = PartialConfig.from_dict(config_to_dict(DEFAULT_CONFIG))
        assert merge_config(DEFAULT_CONFIG, partial) == DEFAULT_CONFIG


class TestLoadConfig:
    def test_no_files_gives_defaults(self) -> None:
        assert load_config() == DEFAULT_CONFIG

    def test_explicit_path(self, temp_dir: Path) -> None:
        path = write_json(temp_dir / "custom.json", {"separator": "/"})
        assert load_config(path).separator == "/"

    def test_env_var_path(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = write_json(temp_dir / "env.json", {"oneLine": True})
        monkeypatch.setenv("STATUSLINE_CONFIG", str(path))
        assert load_config().one_line is True

    def test_user_file_wins_over_defaults_file(self) -> None:
        write_json(config_module.USER_CONFIG_PATH, {"separator": "/"})
        write_json(config_module.DEFAULTS_PATH, {"separator": "#", "oneLine": True})
        config = load_config()
        assert config.separator == "/"
        assert config.one_line is False

    def test_defaults_file_used_without_user_file(self) -> None:
        write_json(config_module.DEFAULTS_PATH, {"separator": "#"})
        assert load_config().separator == "#"

    def test_invalid_file_skipped(self, temp_dir: Path, caplog: pytest.LogCaptureFixture) -> None:
        bad = temp_dir / "bad.json"
        bad.write_text("{not json", encoding="utf-8")
        write_json(config_module.DEFAULTS_PATH, {"separator": "#"})
        with caplog.at_level(logging.WARNING):
            config = load_config(bad)
        assert config.separator == "#"
        assert "Ignoring config" in caplog.text

    def test_read_config_file_errors(self, temp_dir: Path) -> None:
        with pytest.raises(ConfigError, match="cannot read"):
            read_config_file(temp_dir / "missing.json")
        bad = temp_dir / "bad.json"
        bad.write_text("{oops", encoding="utf-8")
        with pytest.raises(ConfigError, match="invalid JSON"):
            read_config_file(bad)
        with pytest.raises(ConfigError, match="JSON object"):
            read_config_file(write_json(temp_dir / "list.json", [1, 2]))
