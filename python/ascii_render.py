"""
ASCII rendering for Gen Gems boards.

Draws a single bordered board: endpoints as their color digit, path cells as
line glyphs, each color in its own terminal colorizer.
"""

from __future__ import annotations

from typing import Callable

import simple_chalk as chalk  # type: ignore[import-untyped]

from gem_types import Cell, Color, Endpoint, Grid, PathMap
from gengems import incomplete_colors


# Palette indexed by color identifier (1 = red, 2 = green, ...)
PALETTE: dict[Color, Callable[[str], str]] = {
    1: chalk.redBright,
    2: chalk.greenBright,
    3: chalk.blueBright,
    4: chalk.yellowBright,
    5: chalk.magenta,
    6: chalk.cyan,
}

# Glyph for a path cell, keyed by the set of neighbouring directions it joins
_GLYPHS: dict[frozenset[str], str] = {
    frozenset({"N", "S"}): "│",
    frozenset({"E", "W"}): "─",
    frozenset({"S", "E"}): "┌",
    frozenset({"S", "W"}): "┐",
    frozenset({"N", "E"}): "└",
    frozenset({"N", "W"}): "┘",
    frozenset({"N"}): "╵",
    frozenset({"S"}): "╷",
    frozenset({"E"}): "╶",
    frozenset({"W"}): "╴",
}


def color_fn(color: Color) -> Callable[[str], str]:
    """Colorizer for a color identifier; unknown colors render plain."""
    return PALETTE.get(color, lambda s: s)


def _direction(frm: Cell, to: Cell) -> str:
    if to.row < frm.row:
        return "N"
    if to.row > frm.row:
        return "S"
    if to.col > frm.col:
        return "E"
    return "W"


def path_glyphs(paths: PathMap) -> dict[Cell, tuple[Color, str]]:
    """
    Work out which glyph to draw in every cell covered by a path.

    Returns:
        Mapping from cell to (color, glyph)
    """
    glyphs: dict[Cell, tuple[Color, str]] = {}
    for color, path in paths.items():
        for i, cell in enumerate(path):
            links: set[str] = set()
            if i > 0:
                links.add(_direction(cell, path[i - 1]))
            if i < len(path) - 1:
                links.add(_direction(cell, path[i + 1]))
            glyphs[cell] = (color, _GLYPHS.get(frozenset(links), "•"))
    return glyphs


def render_board(
    grid: Grid,
    paths: PathMap,
    cursor: Cell | None = None,
    cell_width: int = 3,
    title: str = "",
) -> str:
    """
    Render a board and its paths as a bordered block of text.

    Args:
        grid: The level's board
        paths: Current paths per color
        cursor: Optional cell to highlight
        cell_width: Characters per cell (default 3)
        title: Optional title centred in the top border

    Returns:
        Rendered string (with ANSI color codes)
    """
    glyphs = path_glyphs(paths)
    inner_width = grid.size * cell_width

    title_text = f" {title} " if title else ""
    if title_text and len(title_text) <= inner_width:
        left = (inner_width - len(title_text)) // 2
        top = "┌" + "─" * left + title_text + "─" * (inner_width - left - len(title_text)) + "┐"
    else:
        top = "┌" + "─" * inner_width + "┐"

    lines: list[str] = [top]

    for r in range(grid.size):
        parts = ["│"]
        for c in range(grid.size):
            cell = Cell(r, c)
            value = grid.at(cell)

            if isinstance(value, Endpoint):
                char = str(value.color)
                colorize = color_fn(value.color)
            elif cell in glyphs:
                color, char = glyphs[cell]
                colorize = color_fn(color)
            else:
                char = "·"
                colorize = chalk.white

            content = char.center(cell_width) if cell_width > 1 else char

            if cursor == cell:
                content = chalk.bgWhite.black(content)
            else:
                content = colorize(content)
            parts.append(content)
        parts.append("│")
        lines.append("".join(parts))

    lines.append("└" + "─" * inner_width + "┘")
    return "\n".join(lines)


def render_status(grid: Grid, paths: PathMap) -> str:
    """One line per required color: connected or not, with path length."""
    missing = set(incomplete_colors(grid, paths))
    lines: list[str] = []
    for color in sorted(grid.required_colors()):
        path = paths.get(color, ())
        mark = "✗" if color in missing else "✓"
        lines.append(color_fn(color)(f"{mark} color {color}: {len(path)} cells"))
    return "\n".join(lines)
