"""
Interactive terminal game for Gen Gems.
A keyboard cursor stands in for the pointer: move it around, press space to
grab a dot or path head, move to draw, press space again to let go.
"""

import logging
import sys
import time

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from ascii_render import render_board, render_status
from gem_types import Cell
from gengems import Engine, MoveResult, Outcome
from levels import LEVELS, LevelLoader

WIN_DELAY_SECONDS = 1.5

MOVES = {
    "w": (-1, 0),
    "s": (1, 0),
    "a": (0, -1),
    "d": (0, 1),
    readchar.key.UP: (-1, 0),
    readchar.key.DOWN: (1, 0),
    readchar.key.LEFT: (0, -1),
    readchar.key.RIGHT: (0, 1),
}


class InteractiveGame:
    """Keyboard-driven play of the built-in levels."""

    def __init__(self, loader: LevelLoader) -> None:
        self.loader = loader
        self.console = Console()
        self.cursor = Cell(0, 0)
        self.status_message = "Ready"
        self.won = False

    @property
    def engine(self) -> Engine:
        return self.loader.engine

    def generate_display(self) -> Panel:
        """Board, per-color status and key help."""
        engine = self.engine
        level = self.loader.current_level
        board = render_board(engine.grid, engine.paths, cursor=self.cursor, title=level.name)

        status = Text()
        status.append(f"Level {self.loader.current_index + 1}/{self.loader.count}\n\n", style="bold")
        status.append(Text.from_ansi(board))
        status.append("\n\n")
        status.append(Text.from_ansi(render_status(engine.grid, engine.paths)))
        status.append("\n\n")

        if self.won:
            status.append("★ PUZZLE SOLVED ★\n\n", style="bold green")

        dragging = engine.active_color
        status.append("Dragging: ", style="bold")
        status.append(f"color {dragging}\n" if dragging is not None else "-\n")

        status.append("Keys:\n", style="bold cyan")
        status.append("  WASD / arrows - Move cursor\n")
        status.append("  Space - Grab / release\n")
        status.append("  R - Reset level\n")
        status.append("  N - Next level\n")
        status.append("  Q - Quit\n\n")

        status.append("─" * 40 + "\n", style="dim")
        status.append("Status: ", style="bold")
        status.append(self.status_message)

        return Panel(status, title="Gen Gems", border_style="green", width=60)

    def describe(self, result: MoveResult) -> str:
        if result.outcome == Outcome.COMPLETED and result.connection is not None:
            cell = result.connection.cell
            return f"✓ Color {result.color} connected at ({cell.row}, {cell.col})"
        if result.outcome == Outcome.REJECTED and result.stop_reason is not None:
            return f"✗ Blocked: {result.stop_reason.value}"
        if result.color is not None:
            return f"{result.outcome.value.capitalize()} color {result.color}"
        return result.outcome.value.capitalize()

    def toggle_grab(self) -> None:
        engine = self.engine
        if engine.active_color is not None:
            result = engine.end_drag()
        else:
            result = engine.begin_drag(self.cursor)
        self.status_message = self.describe(result)

    def move_cursor(self, drow: int, dcol: int) -> MoveResult | None:
        target = self.cursor.step(drow, dcol)
        if not self.engine.grid.in_bounds(target):
            return None
        self.cursor = target
        if self.engine.active_color is None:
            return None

        result = self.engine.extend_to(target)
        self.status_message = self.describe(result)
        if result.solved:
            self.won = True
        return result

    def reset_level(self) -> None:
        self.loader.reload()
        self.won = False
        self.status_message = "Level reset"

    def next_level(self) -> None:
        self.loader.advance()
        self.won = False
        self.cursor = Cell(0, 0)
        self.status_message = f"Level {self.loader.current_index + 1}"

    def run(self) -> None:
        """Run the game loop until the player quits."""
        with Live(self.generate_display(), console=self.console, refresh_per_second=4) as live:
            try:
                while True:
                    live.update(self.generate_display())

                    if self.won:
                        time.sleep(WIN_DELAY_SECONDS)
                        self.next_level()
                        continue

                    key = readchar.readkey()

                    if key.lower() == "q":
                        self.status_message = "Quitting..."
                        live.update(self.generate_display())
                        break
                    elif key == " ":
                        self.toggle_grab()
                    elif key.lower() == "r":
                        self.reset_level()
                    elif key.lower() == "n":
                        self.next_level()
                    elif key in MOVES or key.lower() in MOVES:
                        self.move_cursor(*MOVES.get(key, MOVES.get(key.lower())))
                    else:
                        self.status_message = f"Unknown key: {repr(key)}"

            except KeyboardInterrupt:
                self.status_message = "Interrupted by user"
                live.update(self.generate_display())


def play_solutions(loader: LevelLoader) -> None:
    """Draw the current level's documented solution and print each step."""
    engine = loader.engine
    level = loader.current_level
    print(render_board(engine.grid, engine.paths, title=level.name))

    for color, path in sorted(level.solutions.items()):
        engine.begin_drag(path[0])
        for cell in path[1:]:
            result = engine.extend_to(cell)
        engine.end_drag()
        print()
        print(f"color {color}: {result.outcome.value}")
        print(render_board(engine.grid, engine.paths, title=level.name))

    print()
    print(render_status(engine.grid, engine.paths))
    print("solved" if engine.check_win() else "not solved")


def main(argv: list[str] | None = None) -> None:
    """Entry point: optional level number, or 'sublime' to print a replay."""
    args = sys.argv[1:] if argv is None else argv

    if args and args[0] == "sublime":
        # Running from IDE - replay the solution instead of reading keys
        logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
        loader = LevelLoader(LEVELS)
        loader.load(int(args[1]) - 1 if len(args) > 1 else 0)
        play_solutions(loader)
        return

    loader = LevelLoader(LEVELS)
    loader.load(int(args[0]) - 1 if args else 0)
    InteractiveGame(loader).run()


if __name__ == "__main__":
    main()
