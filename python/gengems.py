"""
Connection puzzle engine.
Drag events (press, move, release) grow per-color paths across a grid of
endpoints; a path that reaches its matching endpoint completes a connection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from gem_types import Cell, Color, Endpoint, Grid, Path, PathMap

logger = logging.getLogger(__name__)


class Outcome(Enum):
    """What a single engine call did to the board."""

    STARTED = "started"  # New path begun from an endpoint
    RESUMED = "resumed"  # Drag picked up the head of an existing path
    EXTENDED = "extended"  # Path grew
    BACKTRACKED = "backtracked"  # Path shrank by retracing its trail
    COMPLETED = "completed"  # Path reached its matching endpoint
    RELEASED = "released"  # Drag ended, paths untouched
    REJECTED = "rejected"  # A rule refused the move, nothing changed
    IGNORED = "ignored"  # Nothing to do


class StopReason(Enum):
    """Why a walk toward the pointer stopped."""

    OUT_OF_BOUNDS = "out_of_bounds"
    SELF_COLLISION = "self_collision"  # Candidate already in own path
    PATH_COLLISION = "path_collision"  # Candidate owned by another color
    FOREIGN_ENDPOINT = "foreign_endpoint"  # Candidate is another color's dot
    TARGET_REACHED = "target_reached"  # Walked as far as the pointer
    CONNECTED = "connected"  # Reached the matching endpoint


@dataclass(frozen=True)
class RuleSet:
    """Rules governing the win check."""

    require_full_coverage: bool = False  # Every cell must be on some path


@dataclass(frozen=True)
class Connection:
    """A color whose path just landed on its matching endpoint."""

    color: Color
    cell: Cell


@dataclass(frozen=True)
class MoveResult:
    """Result of begin_drag / extend_to / end_drag."""

    outcome: Outcome
    color: Color | None = None
    stop_reason: StopReason | None = None
    connection: Connection | None = None
    solved: bool = False


IGNORED = MoveResult(Outcome.IGNORED)


# =============================================================================
# Path Store
# =============================================================================


class PathStore:
    """
    Mapping from color to that color's current path.

    A color with no entry has no drawn path. Paths are kept as lists so the
    engine can grow and shrink them in place; readers get tuples.
    """

    def __init__(self) -> None:
        self._paths: dict[Color, list[Cell]] = {}

    def __contains__(self, color: object) -> bool:
        return color in self._paths

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[Color]:
        return iter(self._paths)

    def start(self, color: Color, cell: Cell) -> None:
        """Replace any existing path for color with a one-cell path."""
        self._paths[color] = [cell]

    def get(self, color: Color) -> Path | None:
        path = self._paths.get(color)
        return tuple(path) if path is not None else None

    def head(self, color: Color) -> Cell | None:
        path = self._paths.get(color)
        return path[-1] if path else None

    def behind_head(self, color: Color) -> Cell | None:
        """The cell immediately behind the head, if the path has one."""
        path = self._paths.get(color)
        return path[-2] if path and len(path) > 1 else None

    def length(self, color: Color) -> int:
        return len(self._paths.get(color, ()))

    def append(self, color: Color, cell: Cell) -> None:
        self._paths[color].append(cell)

    def pop(self, color: Color) -> Cell:
        return self._paths[color].pop()

    def contains(self, color: Color, cell: Cell) -> bool:
        return cell in self._paths.get(color, ())

    def occupant(self, cell: Cell, exclude: Color | None = None) -> Color | None:
        """Color whose path covers cell, skipping exclude."""
        for color, path in self._paths.items():
            if color != exclude and cell in path:
                return color
        return None

    def color_with_head(self, cell: Cell) -> Color | None:
        for color, path in self._paths.items():
            if path and path[-1] == cell:
                return color
        return None

    def clear(self) -> None:
        self._paths.clear()

    def snapshot(self) -> PathMap:
        return {color: tuple(path) for color, path in self._paths.items()}


@dataclass
class DragSession:
    """Transient pointer gesture state."""

    active: bool = False
    color: Color | None = None

    def begin(self, color: Color) -> None:
        self.active = True
        self.color = color

    def end(self) -> None:
        self.active = False
        self.color = None


# =============================================================================
# Win Evaluation
# =============================================================================


def is_connected(grid: Grid, path: Path | None, color: Color) -> bool:
    """True when path runs from one of color's endpoints to the other."""
    if path is None or len(path) < 2:
        return False
    return grid.at(path[0]) == Endpoint(color) and grid.at(path[-1]) == Endpoint(color)


def incomplete_colors(grid: Grid, paths: PathMap) -> list[Color]:
    """Required colors that are not yet connected, in ascending order."""
    return sorted(
        color
        for color in grid.required_colors()
        if not is_connected(grid, paths.get(color), color)
    )


def is_fully_covered(grid: Grid, paths: PathMap) -> bool:
    covered = {cell for path in paths.values() for cell in path}
    return len(covered) == grid.size * grid.size


def check_win(grid: Grid, paths: PathMap, rules: RuleSet | None = None) -> bool:
    """
    Decide whether the puzzle is solved.

    Every color present on the grid must have a path of at least two cells
    whose first and last cells are that color's endpoints. With
    require_full_coverage, every cell must also lie on some path.

    Read-only: calling it again without intervening moves gives the same
    answer.

    Args:
        grid: The level's board
        paths: Snapshot of the current paths
        rules: Optional RuleSet (defaults to RuleSet())

    Returns:
        True if solved
    """
    if rules is None:
        rules = RuleSet()

    if incomplete_colors(grid, paths):
        return False
    if rules.require_full_coverage and not is_fully_covered(grid, paths):
        return False
    return True


# =============================================================================
# Path Extension Engine
# =============================================================================


def _choose_step(head: Cell, target: Cell) -> tuple[int, int]:
    """Unit step along the dominant axis from head toward target (rows win ties)."""
    drow = target.row - head.row
    dcol = target.col - head.col
    if abs(drow) >= abs(dcol):
        return (1 if drow > 0 else -1, 0)
    return (0, 1 if dcol > 0 else -1)


def _overshoots(candidate: Cell, target: Cell, step: tuple[int, int]) -> bool:
    srow, scol = step
    if srow > 0:
        return candidate.row > target.row
    if srow < 0:
        return candidate.row < target.row
    if scol > 0:
        return candidate.col > target.col
    return candidate.col < target.col


class Engine:
    """
    One puzzle instance: a grid, its paths and the current drag session.

    All gameplay edge cases (out of bounds, collisions, wrong endpoints,
    calls with no session) are answered with IGNORED or REJECTED results and
    leave state untouched; nothing here raises during play.
    """

    def __init__(self, grid: Grid, rules: RuleSet | None = None) -> None:
        self._grid = grid
        self.rules = rules if rules is not None else RuleSet()
        self._required = grid.required_colors()
        self.store = PathStore()
        self.session = DragSession()

    @property
    def grid(self) -> Grid:
        return self._grid

    @property
    def required_colors(self) -> frozenset[Color]:
        return self._required

    @property
    def paths(self) -> PathMap:
        return self.store.snapshot()

    @property
    def active_color(self) -> Color | None:
        return self.session.color if self.session.active else None

    def path(self, color: Color) -> Path | None:
        return self.store.get(color)

    def is_complete(self, color: Color) -> bool:
        return is_connected(self._grid, self.store.get(color), color)

    def completed_colors(self) -> list[Color]:
        return sorted(c for c in self._required if self.is_complete(c))

    def check_win(self) -> bool:
        return check_win(self._grid, self.store.snapshot(), self.rules)

    # -------------------------------------------------------------------------
    # Input events
    # -------------------------------------------------------------------------

    def begin_drag(self, cell: Cell) -> MoveResult:
        """
        Press at cell.

        An endpoint always starts a fresh path for its color, discarding any
        previous path (a finished connection is undone this way). Otherwise
        pressing the head of an existing path resumes drawing it.
        """
        if not self._grid.in_bounds(cell):
            return IGNORED

        if self.session.active:
            logger.debug("begin_drag at %s refused: color %s already dragging", cell, self.session.color)
            return MoveResult(Outcome.REJECTED, self.session.color)

        color = self._grid.color_at(cell)
        if color is not None:
            self.store.start(color, cell)
            self.session.begin(color)
            logger.debug("started color %d at %s", color, cell)
            return MoveResult(Outcome.STARTED, color)

        color = self.store.color_with_head(cell)
        if color is not None:
            self.session.begin(color)
            logger.debug("resumed color %d at %s", color, cell)
            return MoveResult(Outcome.RESUMED, color)

        return IGNORED

    def extend_to(self, target: Cell) -> MoveResult:
        """
        Pointer moved over target.

        A single sample may skip several cells, so the engine walks from the
        head toward target one orthogonal step at a time, treating each step
        as its own move: stepping onto the cell behind the head erases the
        head, and the first blocked step ends the walk.

        Args:
            target: Cell under the pointer

        Returns:
            MoveResult describing the net effect of the walk
        """
        if not self.session.active or self.session.color is None:
            return IGNORED

        color = self.session.color
        if not self._grid.in_bounds(target):
            return MoveResult(Outcome.IGNORED, color, StopReason.OUT_OF_BOUNDS)

        head = self.store.head(color)
        if head is None or head == target:
            return MoveResult(Outcome.IGNORED, color)

        step = _choose_step(head, target)
        start_length = self.store.length(color)
        appended = 0
        popped = 0
        reason = StopReason.TARGET_REACHED
        current = head

        while True:
            candidate = current.step(*step)

            if _overshoots(candidate, target, step):
                break
            if not self._grid.in_bounds(candidate):
                reason = StopReason.OUT_OF_BOUNDS
                break

            if self.store.behind_head(color) == candidate:
                self.store.pop(color)
                popped += 1
                current = candidate
                continue

            if self.store.contains(color, candidate):
                reason = StopReason.SELF_COLLISION
                break
            if self.store.occupant(candidate, exclude=color) is not None:
                reason = StopReason.PATH_COLLISION
                break

            value = self._grid.color_at(candidate)
            if value is not None and value != color:
                reason = StopReason.FOREIGN_ENDPOINT
                break

            self.store.append(color, candidate)
            appended += 1
            current = candidate

            if value == color:
                return self._complete(color, candidate)

        logger.debug(
            "extend color %d toward %s: +%d -%d (%s)", color, target, appended, popped, reason.value
        )
        if appended == 0 and popped == 0:
            if reason == StopReason.TARGET_REACHED:
                return MoveResult(Outcome.IGNORED, color, reason)
            return MoveResult(Outcome.REJECTED, color, reason)
        if self.store.length(color) < start_length:
            return MoveResult(Outcome.BACKTRACKED, color, reason)
        return MoveResult(Outcome.EXTENDED, color, reason)

    def end_drag(self) -> MoveResult:
        """Release the pointer. Paths stay exactly as drawn."""
        if not self.session.active:
            return IGNORED
        color = self.session.color
        self.session.end()
        return MoveResult(Outcome.RELEASED, color)

    def _complete(self, color: Color, cell: Cell) -> MoveResult:
        self.session.end()
        connection = Connection(color, cell)
        solved = self.check_win()
        logger.info("color %d connected at (%d, %d)", color, cell.row, cell.col)
        if solved:
            logger.info("puzzle solved")
        return MoveResult(Outcome.COMPLETED, color, StopReason.CONNECTED, connection, solved)
