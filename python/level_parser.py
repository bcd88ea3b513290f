"""
Level parsing utilities for Gen Gems.

Provides three ways to author a level:
1. A matrix of color identifiers (0 = empty)
2. A single concise string with one character per cell
3. A multi-line block of named concise levels
"""

from __future__ import annotations

import logging
from collections import Counter

from gem_types import Cell, Color, LevelDefinition, Path

__all__ = ["level_from_matrix", "parse_level", "parse_levels_concise", "parse_path"]

logger = logging.getLogger(__name__)


def _warn_unpaired(matrix: tuple[tuple[int, ...], ...], name: str) -> None:
    counts = Counter(value for row in matrix for value in row if value > 0)
    unpaired = sorted(color for color, count in counts.items() if count != 2)
    if unpaired:
        # Engine behaviour is undefined for these; authoring is not blocked.
        logger.warning(
            "level %r: colors %s do not appear exactly twice (%s)",
            name,
            unpaired,
            ", ".join(f"{color}x{counts[color]}" for color in unpaired),
        )


def level_from_matrix(
    rows: list[list[int]] | tuple[tuple[int, ...], ...],
    name: str = "",
    solutions: dict[Color, Path] | None = None,
) -> LevelDefinition:
    """
    Build a level from a square matrix of color identifiers.

    Args:
        rows: Matrix rows, 0 for empty, positive integers for endpoints
        name: Optional display name
        solutions: Optional reference path per color

    Returns:
        LevelDefinition holding an immutable copy of the matrix

    Raises:
        ValueError: If the matrix is empty, not square, or holds invalid values
    """
    if not rows:
        raise ValueError(f"Level {name!r} has no rows")

    size = len(rows)
    mismatched = [(i, len(row)) for i, row in enumerate(rows) if len(row) != size]
    if mismatched:
        error_msg = (
            f"Level {name!r} is not square\n"
            f"  Expected: {size} columns in every row ({size} rows)\n"
            f"  Mismatched rows:\n"
        )
        for row_idx, actual_cols in mismatched:
            error_msg += f"    Row {row_idx}: {actual_cols} columns\n"
        raise ValueError(error_msg.rstrip("\n"))

    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(
                    f"Invalid cell value {value!r} in level {name!r}\n"
                    f"  Row {r}, column {c}\n"
                    f"  Expected 0 for empty or a positive color identifier"
                )

    matrix = tuple(tuple(row) for row in rows)
    _warn_unpaired(matrix, name)
    return LevelDefinition(size, matrix, name, dict(solutions or {}))


def parse_level(definition: str, name: str = "") -> LevelDefinition:
    """
    Parse a level from a concise string.

    Format:
    - Rows separated by |
    - One character per cell:
      * Digit 1-9: endpoint of that color
      * Underscore (_) or 0: empty cell
    - Whitespace around rows is ignored

    Example:
        "1___2|_____|3_14_|3___2|4____"

    Args:
        definition: Concise level string
        name: Optional display name

    Returns:
        LevelDefinition

    Raises:
        ValueError: If a character is invalid or the board is not square
    """
    row_strings = [row.strip() for row in definition.strip().split("|")]
    rows: list[list[int]] = []

    for row_idx, row_str in enumerate(row_strings):
        values: list[int] = []
        for col_idx, char in enumerate(row_str):
            if char == "_":
                values.append(0)
            elif char.isdigit():
                values.append(int(char))
            else:
                raise ValueError(
                    f"Invalid character '{char}' in level {name!r}\n"
                    f"  Row {row_idx}: \"{row_str}\"\n"
                    f"  Position: column {col_idx}\n"
                    f"  Valid characters: digits (1-9) for endpoints, '_' or '0' for empty"
                )
        rows.append(values)

    return level_from_matrix(rows, name)


def parse_levels_concise(text: str) -> list[LevelDefinition]:
    """
    Parse an ordered block of named levels, one per line.

    Format:
        name: definition

    Example:
        \"\"\"
        corner: 1_|_1
        pairs: 12|12
        \"\"\"

    Raises:
        ValueError: On a missing separator, empty name, empty definition or
            duplicate name
    """
    levels: list[LevelDefinition] = []
    seen: set[str] = set()
    lines = [line.strip() for line in text.strip().split("\n") if line.strip()]

    for line_idx, line in enumerate(lines):
        if ":" not in line:
            raise ValueError(
                f"Invalid level definition on line {line_idx + 1}: '{line}'\n"
                f"  Expected format: 'name: definition'"
            )

        level_name, level_def = (part.strip() for part in line.split(":", 1))

        if not level_name:
            raise ValueError(f"Empty level name on line {line_idx + 1}: '{line}'")
        if not level_def:
            raise ValueError(f"Empty definition for '{level_name}' on line {line_idx + 1}")
        if level_name in seen:
            raise ValueError(f"Duplicate level name '{level_name}' on line {line_idx + 1}")

        seen.add(level_name)
        levels.append(parse_level(level_def, level_name))

    return levels


def parse_path(definition: str) -> Path:
    """
    Parse a path written as row,col pairs separated by '>'.

    Example:
        "0,0 > 0,1 > 1,1" -> (Cell(0, 0), Cell(0, 1), Cell(1, 1))
    """
    cells: list[Cell] = []
    for idx, part in enumerate(definition.split(">")):
        coords = part.strip().split(",")
        if len(coords) != 2:
            raise ValueError(
                f"Invalid path step '{part.strip()}' at position {idx}\n"
                f"  Expected 'row,col'"
            )
        try:
            cells.append(Cell(int(coords[0]), int(coords[1])))
        except ValueError as e:
            raise ValueError(
                f"Invalid path step '{part.strip()}' at position {idx}: {e}"
            ) from e
    return tuple(cells)
