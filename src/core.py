# core.py
# This file holds the game state for the 2048 rule engine: board, score and best score.

import logging
import random
from typing import List, Optional, Tuple

from grid import Grid, Side, Tile
from terminality import MAX_PIECE, GameProgressState, TerminalityChecker
from tilt_engine import TiltEngine

logger = logging.getLogger(__name__)

DEFAULT_BOARD_SIZE = 4
FOUR_TILE_PROBABILITY = 0.1

class GameState:
    """
    The state of a game of 2048.

    Column C, row R of the board (where row 0, column 0 is the lower-left
    corner) is read with `tile(C, R)`, like (x, y) coordinates. The best score
    (`max_score`) only changes when the game reaches a terminal state.
    """

    def __init__(self, size: int = DEFAULT_BOARD_SIZE, win_tile: int = MAX_PIECE):
        self._grid = Grid(size)
        self._checker = TerminalityChecker(win_tile)
        self._engine = TiltEngine()
        self._score = 0
        self._max_score = 0

    @classmethod
    def from_values(cls, raw_values: List[List[int]], score: int = 0, max_score: int = 0,
                    win_tile: int = MAX_PIECE) -> "GameState":
        """
        Builds a game from an explicit board, mostly for deterministic setups.
        Args:
            raw_values (List[List[int]]): Square matrix of tile values, 0 for empty,
                                          top row first.
            score (int): Current score.
            max_score (int): Best score so far.
            win_tile (int): The tile value that ends the game as a win.
        Returns:
            GameState: The game in the described state.
        Raises:
            ValueError: If the board is malformed or a score is negative.
        """
        if score < 0 or max_score < 0:
            raise ValueError("Scores must be non-negative.")
        state = cls(len(raw_values) or DEFAULT_BOARD_SIZE, win_tile)
        state._grid = Grid.from_values(raw_values)
        state._score = score
        state._max_score = max_score
        return state

    # --- Queries ---

    def tile(self, col: int, row: int) -> Optional[Tile]:
        """Return the Tile at (col, row), or None if the cell is empty."""
        return self._grid.tile(col, row)

    @property
    def size(self) -> int:
        return self._grid.size

    @property
    def score(self) -> int:
        return self._score

    @property
    def max_score(self) -> int:
        """Best score so far, updated when a game ends."""
        return self._max_score

    @property
    def win_tile(self) -> int:
        return self._checker.win_tile

    def values(self) -> List[List[int]]:
        return self._grid.values()

    def empty_cells(self) -> List[Tuple[int, int]]:
        return self._grid.empty_cells()

    def game_over(self) -> bool:
        """True iff there are no moves left, or the win tile is on the board."""
        return self._checker.game_over(self._grid)

    def progress(self) -> GameProgressState:
        return self._checker.progress(self._grid)

    def can_tilt(self, side: Side) -> bool:
        return self._checker.can_tilt(self._grid, side)

    def available_moves(self) -> List[Side]:
        """Sides toward which a tilt would change the board."""
        return [side for side in Side if self.can_tilt(side)]

    # --- Mutations ---

    def clear(self) -> None:
        """Clear the board to empty and reset the score. The best score is kept."""
        self._score = 0
        self._grid.clear()

    def add_tile(self, col: int, row: int, tile: Tile) -> None:
        """
        Adds a tile to an empty cell.
        Raises:
            IndexError: If (col, row) is outside the board.
            ValueError: If the cell is already occupied.
        """
        self._grid.add_tile(col, row, tile)
        self._check_game_over()

    def add_random_tile(self, rng: Optional[random.Random] = None) -> bool:
        """
        Adds a new tile (90% chance of 2, 10% chance of 4) to a random empty cell.
        Args:
            rng (Optional[random.Random]): Source of randomness; the module-level
                                           generator is used when omitted.
        Returns:
            bool: True if a tile was added, False if the board is full.
        """
        rng = rng or random
        empty_cells = self.empty_cells()
        if not empty_cells:
            return False
        col, row = rng.choice(empty_cells)
        value = 4 if rng.random() < FOUR_TILE_PROBABILITY else 2
        self.add_tile(col, row, Tile(value))
        return True

    def new_game(self, rng: Optional[random.Random] = None) -> None:
        """Clears the board and places the two starting tiles."""
        self.clear()
        self.add_random_tile(rng)
        self.add_random_tile(rng)

    def tilt(self, side: Side) -> bool:
        """
        Tilts the board toward `side`.

        Equal tiles adjacent in the direction of motion merge into one tile of
        twice the value, which is added to the score. A tile produced by a
        merge does not merge again during the same tilt, and of three equal
        tiles in a row only the two leading ones merge.
        Returns:
            bool: True if the board changed.
        """
        score_gained, changed = self._engine.tilt(self._grid, side)
        self._score += score_gained
        self._check_game_over()
        return changed

    def _check_game_over(self) -> None:
        if self.game_over():
            if self._score > self._max_score:
                logger.debug("Game over with new best score %d", self._score)
            self._max_score = max(self._score, self._max_score)

    def copy(self) -> "GameState":
        clone = GameState(self.size, self.win_tile)
        clone._grid = self._grid.copy()
        clone._score = self._score
        clone._max_score = self._max_score
        return clone

    # --- Display ---

    def __str__(self):
        lines = ["", "["]
        for row in range(self.size - 1, -1, -1):
            cells = []
            for col in range(self.size):
                tile = self.tile(col, row)
                cells.append("|    " if tile is None else "|%4d" % tile.value)
            lines.append("".join(cells) + "|")
        over = "over" if self.game_over() else "not over"
        lines.append(f"] {self._score} (max: {self._max_score}) (game is {over}) ")
        return "\n".join(lines) + "\n"

    def __eq__(self, other):
        if not isinstance(other, GameState):
            return NotImplemented
        return (self._grid == other._grid
                and self._score == other._score
                and self._max_score == other._max_score)

    __hash__ = None

    def __repr__(self):
        return (f"GameState(values={self.values()!r}, score={self._score}, "
                f"max_score={self._max_score})")
