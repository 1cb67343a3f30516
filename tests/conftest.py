"""Shared pytest fixtures."""

import json
import re
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from statusline import config as config_module

ANSI_ESCAPE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE.sub("", text)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for test-local resources."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the user's real configuration files."""
    monkeypatch.setattr(config_module, "USER_CONFIG_PATH", temp_dir / "missing" / "statusline.config.json")
    monkeypatch.setattr(config_module, "DEFAULTS_PATH", temp_dir / "missing" / "defaults.json")
    monkeypatch.delenv("STATUSLINE_CONFIG", raising=False)
    monkeypatch.delenv("STATUSLINE_VIM_MODE", raising=False)
    monkeypatch.delenv("NO_COLOR", raising=False)


@pytest.fixture
def write_transcript(temp_dir: Path) -> Callable[[list[Any]], Path]:
    """Write a JSONL transcript; dict entries are encoded, strings written as-is."""

    def _write(lines: list[Any], name: str = "session.jsonl") -> Path:
        path = temp_dir / name
        encoded = [line if isinstance(line, str) else json.dumps(line) for line in lines]
        path.write_text("\n".join(encoded) + "\n", encoding="utf-8")
        return path

    return _write


def usage_record(
    timestamp: str | None,
    input_tokens: int = 0,
    cache_read: int = 0,
    cache_creation: int = 0,
    output_tokens: int = 0,
    **extra: Any,
) -> dict[str, Any]:
    """Build a transcript record carrying token usage."""
    record: dict[str, Any] = {
        "type": "assistant",
        "message": {
            "usage": {
                "input_tokens": input_tokens,
                "cache_read_input_tokens": cache_read,
                "cache_creation_input_tokens": cache_creation,
                "output_tokens": output_tokens,
            }
        },
        **extra,
    }
    if timestamp is not None:
        record["timestamp"] = timestamp
    return record
