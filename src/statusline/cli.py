"""CLI entry point for statusline."""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler

from statusline import __version__
from statusline.colors import Palette
from statusline.config import config_to_dict, load_config
from statusline.hook import collect_statusline_data
from statusline.render import render_statusline

logger = logging.getLogger(__name__)


def read_payload(stream: Any) -> dict[str, Any]:
    """Decode the hook JSON from ``stream``; an unusable payload becomes empty."""
    try:
        raw = stream.read()
    except OSError as e:
        logger.warning(f"Cannot read hook payload: {e}")
        return {}
    if not raw.strip():
        return {}
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid hook payload: {e}")
        return {}
    if not isinstance(payload, dict):
        logger.warning("Hook payload is not a JSON object")
        return {}
    return payload


def vim_mode_from_env() -> bool:
    """Editor mode from STATUSLINE_VIM_MODE; False when unset or unparseable."""
    value = os.environ.get("STATUSLINE_VIM_MODE")
    if not value:
        return False
    try:
        return click.BOOL.convert(value, None, None)
    except click.BadParameter:
        logger.warning(f"Ignoring STATUSLINE_VIM_MODE={value!r}")
        return False


@click.group(invoke_without_command=True)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="STATUSLINE_CONFIG",
    help="Configuration file (JSON)",
)
@click.option(
    "--color",
    type=click.Choice(["always", "never", "auto"]),
    default="auto",
    help="Control color output",
)
@click.option(
    "--vim/--no-vim",
    "vim_mode",
    default=None,
    help="Whether the editor is in vim mode [env: STATUSLINE_VIM_MODE]",
)
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    config_path: Path | None,
    color: str,
    vim_mode: bool | None,
) -> None:
    """statusline - render a Claude Code status line from the hook payload on stdin."""
    ctx.ensure_object(dict)

    if color == "always":
        stderr_console = Console(stderr=True, force_terminal=True)
        color_enabled = True
    elif color == "never":
        stderr_console = Console(stderr=True, no_color=True, force_terminal=False)
        color_enabled = False
    else:  # auto
        stderr_console = Console(stderr=True)
        # The host pipes stdout, so only NO_COLOR turns color off
        color_enabled = not Console(force_terminal=True).no_color

    handlers = [RichHandler(console=stderr_console, rich_tracebacks=verbose)]
    if verbose:
        logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    elif quiet:
        logging.basicConfig(level=logging.ERROR, handlers=handlers, force=True)
    else:
        logging.basicConfig(level=logging.WARNING, handlers=handlers, force=True)

    ctx.obj["config"] = load_config(config_path)
    ctx.obj["palette"] = Palette(enabled=color_enabled)
    ctx.obj["vim_mode"] = vim_mode if vim_mode is not None else vim_mode_from_env()

    if ctx.invoked_subcommand is None:
        ctx.invoke(render)


@main.command()
@click.pass_context
def render(ctx: click.Context) -> None:
    """Render the status line (default command)."""
    payload = read_payload(click.get_text_stream("stdin"))
    data = asyncio.run(
        collect_statusline_data(payload, ctx.obj["config"], ctx.obj["vim_mode"])
    )
    palette = ctx.obj["palette"]
    # click strips ANSI codes from non-tty output unless color is forced
    click.echo(render_statusline(data, ctx.obj["config"], palette), color=palette.enabled)


@main.command("config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the effective configuration as JSON."""
    click.echo(json.dumps(config_to_dict(ctx.obj["config"]), indent=2, ensure_ascii=False))
