"""
Built-in levels and the loader that turns them into playable engines.
"""

from __future__ import annotations

import logging
from typing import Sequence

from gem_types import Grid, LevelDefinition
from gengems import Engine, RuleSet
from level_parser import level_from_matrix, parse_path

logger = logging.getLogger(__name__)


LEVELS: tuple[LevelDefinition, ...] = (
    level_from_matrix(
        [
            [1, 0, 0, 0, 2],
            [0, 0, 0, 0, 0],
            [3, 0, 1, 4, 0],
            [3, 0, 0, 0, 2],
            [4, 0, 0, 0, 0],
        ],
        name="Level 1",
        solutions={
            1: parse_path("0,0 > 0,1 > 0,2 > 1,2 > 2,2"),
            2: parse_path("0,4 > 0,3 > 1,3 > 1,4 > 2,4 > 3,4"),
            3: parse_path("2,0 > 1,0 > 1,1 > 2,1 > 3,1 > 3,0"),
            4: parse_path("2,3 > 3,3 > 3,2 > 4,2 > 4,1 > 4,0"),
        },
    ),
    level_from_matrix(
        [
            [1, 0, 0, 0, 2],
            [3, 0, 4, 1, 0],
            [0, 4, 2, 0, 0],
            [0, 0, 0, 0, 0],
            [5, 0, 0, 5, 3],
        ],
        name="Level 2",
        solutions={
            1: parse_path("0,0 > 0,1 > 0,2 > 0,3 > 1,3"),
            2: parse_path("0,4 > 1,4 > 2,4 > 2,3 > 2,2"),
            3: parse_path("1,0 > 2,0 > 3,0 > 3,1 > 3,2 > 3,3 > 3,4 > 4,4"),
            4: parse_path("1,2 > 1,1 > 2,1"),
            5: parse_path("4,0 > 4,1 > 4,2 > 4,3"),
        },
    ),
    level_from_matrix(
        [
            [1, 0, 1, 0, 2],
            [0, 0, 0, 0, 0],
            [0, 0, 0, 0, 0],
            [0, 3, 0, 0, 0],
            [3, 4, 0, 4, 2],
        ],
        name="Level 3",
        solutions={
            1: parse_path("0,0 > 1,0 > 1,1 > 1,2 > 0,2"),
            2: parse_path("0,4 > 0,3 > 1,3 > 1,4 > 2,4 > 3,4 > 4,4"),
            3: parse_path("4,0 > 3,0 > 2,0 > 2,1 > 2,2 > 2,3 > 3,3 > 3,2 > 3,1"),
            4: parse_path("4,1 > 4,2 > 4,3"),
        },
    ),
)


class LevelLoader:
    """
    Cycles through an ordered catalogue of levels.

    Each load builds a fresh Grid from the authored matrix and a fresh
    Engine, so no paths survive a (re)load.
    """

    def __init__(
        self,
        levels: Sequence[LevelDefinition] = LEVELS,
        rules: RuleSet | None = None,
    ) -> None:
        if not levels:
            raise ValueError("LevelLoader needs at least one level")
        self.levels = tuple(levels)
        self.rules = rules
        self._index = 0
        self._engine: Engine | None = None

    @property
    def count(self) -> int:
        return len(self.levels)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_level(self) -> LevelDefinition:
        return self.levels[self._index]

    @property
    def engine(self) -> Engine:
        """Engine for the current level, loading it on first access."""
        if self._engine is None:
            return self.load(self._index)
        return self._engine

    def load(self, index: int) -> Engine:
        """
        Load the level at index with an empty path store.

        Raises:
            IndexError: If index is outside the catalogue
        """
        if not 0 <= index < len(self.levels):
            raise IndexError(
                f"Level index {index} out of range\n"
                f"  Available levels: 0..{len(self.levels) - 1}"
            )

        level = self.levels[index]
        grid = Grid.from_matrix(level.grid)
        self._index = index
        self._engine = Engine(grid, self.rules)
        logger.info(
            "loaded level %d/%d %r (%dx%d, colors %s)",
            index + 1,
            len(self.levels),
            level.name,
            grid.size,
            grid.size,
            sorted(grid.required_colors()),
        )
        return self._engine

    def reload(self) -> Engine:
        return self.load(self._index)

    def advance(self) -> Engine:
        """Load the next level, wrapping to the first after the last."""
        return self.load((self._index + 1) % len(self.levels))
