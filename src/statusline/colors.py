"""ANSI styling for status line fragments."""

from enum import Enum

from rich.color import ColorSystem
from rich.style import Style


class StyleName(str, Enum):
    """Semantic style names usable in fragments and configuration."""

    GREEN = "green"
    RED = "red"
    PURPLE = "purple"
    YELLOW = "yellow"
    ORANGE = "orange"
    PEACH = "peach"
    BLACK = "black"
    WHITE = "white"
    GRAY = "gray"
    DIM_WHITE = "dimWhite"
    LIGHT_GRAY = "lightGray"
    CYAN = "cyan"
    BLUE = "blue"
    BOLD = "bold"
    DIM = "dim"
    ITALIC = "italic"
    UNDERLINE = "underline"
    BG_BLACK = "bgBlack"
    BG_BLACK_BRIGHT = "bgBlackBright"
    BG_WHITE = "bgWhite"
    BG_BLUE = "bgBlue"
    BG_MAGENTA = "bgMagenta"
    BG_CYAN = "bgCyan"
    BG_PEACH = "bgPeach"


STYLES: dict[StyleName, Style] = {
    StyleName.GREEN: Style(color="green"),
    StyleName.RED: Style(color="red"),
    StyleName.PURPLE: Style(color="magenta"),
    StyleName.YELLOW: Style(color="yellow"),
    StyleName.ORANGE: Style(color="color(208)"),
    StyleName.PEACH: Style(color="color(216)"),
    StyleName.BLACK: Style(color="black"),
    StyleName.WHITE: Style(color="white"),
    StyleName.GRAY: Style(color="bright_black"),
    StyleName.DIM_WHITE: Style(color="white", dim=True),
    StyleName.LIGHT_GRAY: Style(color="color(250)"),
    StyleName.CYAN: Style(color="cyan"),
    StyleName.BLUE: Style(color="blue"),
    StyleName.BOLD: Style(bold=True),
    StyleName.DIM: Style(dim=True),
    StyleName.ITALIC: Style(italic=True),
    StyleName.UNDERLINE: Style(underline=True),
    StyleName.BG_BLACK: Style(bgcolor="black"),
    StyleName.BG_BLACK_BRIGHT: Style(bgcolor="bright_black"),
    StyleName.BG_WHITE: Style(bgcolor="white"),
    StyleName.BG_BLUE: Style(bgcolor="blue"),
    StyleName.BG_MAGENTA: Style(bgcolor="magenta"),
    StyleName.BG_CYAN: Style(bgcolor="cyan"),
    StyleName.BG_PEACH: Style(bgcolor="color(216)"),
}


def style_from_name(name: str, default: StyleName = StyleName.LIGHT_GRAY) -> StyleName:
    """Resolve a configured style name, falling back to ``default``."""
    try:
        return StyleName(name)
    except ValueError:
        return default


class Palette:
    """Wraps text in ANSI escape sequences, or passes it through when disabled."""

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._color_system = ColorSystem.EIGHT_BIT if enabled else None

    def wrap(self, name: StyleName, text: str | int | float) -> str:
        text = str(text)
        if not self.enabled:
            return text
        return STYLES[name].render(text, color_system=self._color_system)

    def green(self, text: str | int | float) -> str:
        return self.wrap(StyleName.GREEN, text)

    def red(self, text: str | int | float) -> str:
        return self.wrap(StyleName.RED, text)

    def purple(self, text: str | int | float) -> str:
        return self.wrap(StyleName.PURPLE, text)

    def yellow(self, text: str | int | float) -> str:
        return self.wrap(StyleName.YELLOW, text)

    def orange(self, text: str | int | float) -> str:
        return self.wrap(StyleName.ORANGE, text)

    def peach(self, text: str | int | float) -> str:
        return self.wrap(StyleName.PEACH, text)

    def gray(self, text: str | int | float) -> str:
        return self.wrap(StyleName.GRAY, text)

    def dim_white(self, text: str | int | float) -> str:
        return self.wrap(StyleName.DIM_WHITE, text)

    def light_gray(self, text: str | int | float) -> str:
        return self.wrap(StyleName.LIGHT_GRAY, text)

    def cyan(self, text: str | int | float) -> str:
        return self.wrap(StyleName.CYAN, text)

    def bold(self, text: str | int | float) -> str:
        return self.wrap(StyleName.BOLD, text)


PLAIN = Palette(enabled=False)
