# terminality.py
# Terminal-state checks: win tile reached, or no move left on the board.

from enum import Enum
from typing import Tuple

from grid import Grid, Side
from tilt_engine import TiltEngine

MAX_PIECE = 2048

# (dcol, drow) for the up, right, down and left neighbours of a cell.
NEIGHBOR_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))

class GameProgressState(Enum):
    """Represents the current progress state of the game."""
    IN_PROGRESS = 1
    GAME_OVER = 2  # Lost
    GAME_WON = 3

class TerminalityChecker:
    """Decides whether a grid is in a terminal state for a given win tile."""

    def __init__(self, win_tile: int = MAX_PIECE):
        if not isinstance(win_tile, int) or win_tile < 4 or win_tile & (win_tile - 1):
            raise ValueError("Win tile must be a power of two >= 4.")
        self.win_tile = win_tile

    @staticmethod
    def empty_space_exists(grid: Grid) -> bool:
        for col in range(grid.size):
            for row in range(grid.size):
                if grid.tile(col, row) is None:
                    return True
        return False

    def max_tile_exists(self, grid: Grid) -> bool:
        """
        Check if any tile holds the win tile value.
        Args:
            grid (Grid): The grid to check.
        Returns:
            bool: True if the win tile is on the board, False otherwise.
        """
        for col in range(grid.size):
            for row in range(grid.size):
                tile = grid.tile(col, row)
                if tile is not None and tile.value == self.win_tile:
                    return True
        return False

    @staticmethod
    def has_equal_neighbor(grid: Grid, col: int, row: int) -> bool:
        """True if the tile at (col, row) equals any in-bounds adjacent tile."""
        tile = grid.tile(col, row)
        if tile is None:
            return False
        for dcol, drow in NEIGHBOR_OFFSETS:
            n_col, n_row = col + dcol, row + drow
            if not grid.in_bounds(n_col, n_row):
                continue
            neighbor = grid.tile(n_col, n_row)
            if neighbor is not None and neighbor.value == tile.value:
                return True
        return False

    def at_least_one_move_exists(self, grid: Grid) -> bool:
        """
        Checks if any move is possible on the board: either a cell is empty
        or two adjacent tiles share a value.
        Args:
            grid (Grid): The grid to check.
        Returns:
            bool: True if any move can be made, False otherwise.
        """
        for col in range(grid.size):
            for row in range(grid.size):
                if grid.tile(col, row) is None or self.has_equal_neighbor(grid, col, row):
                    return True
        return False

    @staticmethod
    def can_tilt(grid: Grid, side: Side) -> bool:
        """Check if tilting toward `side` would change the grid. The grid itself is not modified."""
        _, changed = TiltEngine().tilt(grid.copy(), side)
        return changed

    def game_over(self, grid: Grid) -> bool:
        return self.max_tile_exists(grid) or not self.at_least_one_move_exists(grid)

    def progress(self, grid: Grid) -> GameProgressState:
        """
        Determines the current progress state of the game based on the grid.
        Returns:
            GameProgressState: The current state (IN_PROGRESS, GAME_WON, GAME_OVER).
        """
        if self.max_tile_exists(grid):
            return GameProgressState.GAME_WON
        if not self.at_least_one_move_exists(grid):
            return GameProgressState.GAME_OVER
        return GameProgressState.IN_PROGRESS
