"""Progress bar rendering."""

from statusline.colors import PLAIN, Palette, StyleName
from statusline.formatters import round_half_up
from statusline.models import ProgressBarBackground, ProgressBarColor, ProgressBarStyle

BAR_LENGTHS = (5, 10, 15)

# (filled, empty) glyph pairs
BLOCK_GLYPHS = {
    ProgressBarStyle.FILLED: ("█", "░"),
    ProgressBarStyle.RECTANGLE: ("▰", "▱"),
}

# Index 0 doubles as the empty cell; 1..6 are increasing partial fills.
BRAILLE_RAMP = ("⣀", "⣄", "⣤", "⣦", "⣶", "⣷", "⣿")
BRAILLE_LEVELS = len(BRAILLE_RAMP) - 1

_FIXED_COLORS = {
    ProgressBarColor.GREEN: StyleName.GREEN,
    ProgressBarColor.YELLOW: StyleName.YELLOW,
    ProgressBarColor.RED: StyleName.RED,
    ProgressBarColor.PEACH: StyleName.PEACH,
    ProgressBarColor.BLACK: StyleName.BLACK,
    ProgressBarColor.WHITE: StyleName.WHITE,
}

_BACKGROUNDS = {
    ProgressBarBackground.NONE: None,
    ProgressBarBackground.DARK: StyleName.BG_BLACK,
    ProgressBarBackground.GRAY: StyleName.BG_BLACK_BRIGHT,
    ProgressBarBackground.LIGHT: StyleName.BG_WHITE,
    ProgressBarBackground.BLUE: StyleName.BG_BLUE,
    ProgressBarBackground.PURPLE: StyleName.BG_MAGENTA,
    ProgressBarBackground.CYAN: StyleName.BG_CYAN,
    ProgressBarBackground.PEACH: StyleName.BG_PEACH,
}


def clamp_percentage(percentage: float) -> float:
    return max(0.0, min(100.0, float(percentage)))


def bar_color(percentage: float, mode: ProgressBarColor) -> StyleName:
    """Foreground style for a bar at the given fill level."""
    if mode == ProgressBarColor.PROGRESSIVE:
        if percentage < 50:
            return StyleName.GRAY
        if percentage < 70:
            return StyleName.YELLOW
        if percentage < 90:
            return StyleName.ORANGE
        return StyleName.RED
    return _FIXED_COLORS[mode]


def bar_cells(percentage: float, length: int) -> tuple[int, int]:
    """Return (filled, empty) cell counts for a block-style bar."""
    filled = round_half_up(clamp_percentage(percentage) / 100 * length)
    return filled, length - filled


def braille_cells(percentage: float, length: int) -> tuple[int, int, int]:
    """Return (full cells, partial ramp index, empty cells) for a braille bar."""
    total_steps = length * BRAILLE_LEVELS
    current_step = round_half_up(clamp_percentage(percentage) / 100 * total_steps)
    full, partial = divmod(current_step, BRAILLE_LEVELS)
    empty = length - full - (1 if partial > 0 else 0)
    return full, partial, empty


def render_progress_bar(
    percentage: float,
    length: int = 10,
    style: ProgressBarStyle = ProgressBarStyle.FILLED,
    color: ProgressBarColor = ProgressBarColor.PROGRESSIVE,
    background: ProgressBarBackground = ProgressBarBackground.NONE,
    palette: Palette = PLAIN,
) -> str:
    """Render a fixed-width bar for a percentage.

    Args:
        percentage: Fill level; values outside 0-100 are clamped.
        length: Number of cells (one of 5, 10, 15).
        style: Glyph alphabet.
        color: Progressive or fixed foreground.
        background: Optional background behind the glyphs.
        palette: Styling to apply; plain text when disabled.

    Returns:
        The bar, exactly ``length`` glyphs wide once escapes are stripped.
    """
    pct = clamp_percentage(percentage)
    fg = bar_color(pct, color)
    bg = _BACKGROUNDS[background]

    def paint(run: str) -> str:
        if not run:
            return ""
        text = palette.wrap(fg, run)
        return palette.wrap(bg, text) if bg is not None else text

    if style == ProgressBarStyle.BRAILLE:
        full, partial, empty = braille_cells(pct, length)
        runs = [
            BRAILLE_RAMP[-1] * full,
            BRAILLE_RAMP[partial] if partial > 0 else "",
            BRAILLE_RAMP[0] * empty,
        ]
    else:
        filled_glyph, empty_glyph = BLOCK_GLYPHS[style]
        filled, empty = bar_cells(pct, length)
        runs = [filled_glyph * filled, empty_glyph * empty]

    return "".join(paint(run) for run in runs)
