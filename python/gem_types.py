"""
Shared type definitions for the Gen Gems puzzle.
"""

from __future__ import annotations

from dataclasses import dataclass, field

Color = int


# =============================================================================
# Coordinates
# =============================================================================


@dataclass(frozen=True)
class Cell:
    """A (row, col) coordinate on the board."""

    row: int
    col: int

    def step(self, drow: int, dcol: int) -> Cell:
        return Cell(self.row + drow, self.col + dcol)

    def is_adjacent(self, other: Cell) -> bool:
        """True when other is exactly one orthogonal step away."""
        return abs(self.row - other.row) + abs(self.col - other.col) == 1


# =============================================================================
# Grid Definition Types
# =============================================================================


@dataclass(frozen=True)
class Empty:
    """A cell with no endpoint."""

    pass


@dataclass(frozen=True)
class Endpoint:
    """A cell holding one of a color's two fixed dots."""

    color: Color


CellValue = Empty | Endpoint


@dataclass(frozen=True)
class Grid:
    """A square board of endpoint markers. Never mutated once built."""

    size: int
    cells: tuple[tuple[CellValue, ...], ...]

    def __post_init__(self) -> None:
        if len(self.cells) != self.size or any(len(row) != self.size for row in self.cells):
            raise ValueError(
                f"Grid must be {self.size}x{self.size}\n"
                f"  Got {len(self.cells)} rows with lengths "
                f"{[len(row) for row in self.cells]}"
            )

    @classmethod
    def from_matrix(cls, rows: list[list[int]] | tuple[tuple[int, ...], ...]) -> Grid:
        """
        Build a grid from a matrix of color identifiers (0 = empty).

        The matrix is copied, so the caller's data is never shared with play.
        """
        cells: list[tuple[CellValue, ...]] = []
        for r, row in enumerate(rows):
            values: list[CellValue] = []
            for c, value in enumerate(row):
                if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                    raise ValueError(
                        f"Invalid cell value {value!r} at row {r}, column {c}\n"
                        f"  Expected 0 for empty or a positive color identifier"
                    )
                values.append(Endpoint(value) if value > 0 else Empty())
            cells.append(tuple(values))
        return cls(len(cells), tuple(cells))

    def in_bounds(self, cell: Cell) -> bool:
        return 0 <= cell.row < self.size and 0 <= cell.col < self.size

    def at(self, cell: Cell) -> CellValue:
        return self.cells[cell.row][cell.col]

    def color_at(self, cell: Cell) -> Color | None:
        """Endpoint color at cell, or None for an empty cell."""
        value = self.at(cell)
        return value.color if isinstance(value, Endpoint) else None

    def required_colors(self) -> frozenset[Color]:
        return frozenset(
            value.color
            for row in self.cells
            for value in row
            if isinstance(value, Endpoint)
        )

    def endpoints(self, color: Color) -> tuple[Cell, ...]:
        """Cells holding the given color's endpoints, in row-major order."""
        return tuple(
            Cell(r, c)
            for r, row in enumerate(self.cells)
            for c, value in enumerate(row)
            if value == Endpoint(color)
        )

    def to_matrix(self) -> list[list[int]]:
        return [
            [value.color if isinstance(value, Endpoint) else 0 for value in row]
            for row in self.cells
        ]


Path = tuple[Cell, ...]
PathMap = dict[Color, Path]


@dataclass(frozen=True)
class LevelDefinition:
    """Static authored level: a board plus optional reference solutions."""

    size: int
    grid: tuple[tuple[int, ...], ...]
    name: str = ""
    solutions: dict[Color, Path] = field(default_factory=dict, compare=False)
