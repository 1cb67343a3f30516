"""Joining widget fragments into the final status line."""

from collections.abc import Iterable

from statusline.colors import PLAIN, Palette


def join_fragments(fragments: Iterable[str], separator: str, palette: Palette = PLAIN) -> str:
    """Join non-empty fragments with a colored separator.

    Empty fragments are dropped first, so a separator only ever sits between
    two fragments that rendered something.
    """
    sep = f" {palette.gray(separator)} "
    return sep.join(f for f in fragments if f)


def compose(
    identity: Iterable[str],
    fragments: Iterable[str],
    separator: str,
    one_line: bool,
    palette: Palette = PLAIN,
) -> str:
    """Lay out the identity group and the remaining widget fragments.

    Args:
        identity: Line-one fragments (git, path, model, cost).
        fragments: All other widget fragments, in display order.
        separator: Glyph placed between fragments.
        one_line: Put everything on a single line.
        palette: Styling for the separator.

    Returns:
        One line, or two lines joined by ``\\n`` when there is anything to
        show after the identity group. Never ends with a newline.
    """
    line1 = join_fragments(identity, separator, palette)
    rest = [f for f in fragments if f]

    if one_line:
        return join_fragments([line1, *rest], separator, palette)

    line2 = join_fragments(rest, separator, palette)
    if not line2:
        return line1
    if not line1:
        return line2
    return f"{line1}\n{line2}"
