# grid.py
# Board storage for the 2048 rule engine: tiles, sides and the viewing perspective.

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

class Side(Enum):
    """
    The four sides of the board, in clockwise order.

    NORTH is the canonical perspective. EAST, SOUTH and WEST are the board
    rotated by 90, 180 and 270 degrees, so that "toward increasing row index"
    seen from a side means "toward that side" on the real board.
    """
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    def rotated(self, quarter_turns: int) -> "Side":
        """Returns the side reached after the given number of clockwise quarter turns."""
        return Side((self.value + quarter_turns) % 4)

    def col(self, col: int, row: int, size: int) -> int:
        """Storage column of the viewed cell (col, row) on a board of the given size."""
        if self is Side.NORTH:
            return col
        if self is Side.EAST:
            return row
        if self is Side.SOUTH:
            return size - 1 - col
        return size - 1 - row

    def row(self, col: int, row: int, size: int) -> int:
        """Storage row of the viewed cell (col, row) on a board of the given size."""
        if self is Side.NORTH:
            return row
        if self is Side.EAST:
            return size - 1 - col
        if self is Side.SOUTH:
            return size - 1 - row
        return col


@dataclass(frozen=True)
class Tile:
    """An immutable tile holding a power-of-two value (>= 2)."""
    value: int

    def __post_init__(self):
        if not isinstance(self.value, int) or self.value < 2 or self.value & (self.value - 1):
            raise ValueError(f"Tile value must be a power of two >= 2, got {self.value!r}.")

    def merge(self, other: "Tile") -> "Tile":
        """
        Merges two equal tiles into one tile of twice the value.
        Args:
            other (Tile): The tile being merged into this one.
        Returns:
            Tile: A new tile with double the value.
        Raises:
            ValueError: If the tiles do not hold the same value.
        """
        if other.value != self.value:
            raise ValueError(f"Cannot merge tiles {self.value} and {other.value}.")
        return Tile(self.value * 2)


class Grid:
    """
    Fixed-size N x N cell store addressed by (col, row), (0, 0) being the
    bottom-left corner.

    All reads and writes go through the current viewing perspective. Changing
    the perspective only changes how coordinates are mapped to storage; it
    never moves a tile.
    """

    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("Board size must be a positive integer.")
        self._size = size
        # Indexed [col][row] in NORTH coordinates.
        self._cells: List[List[Optional[Tile]]] = [[None] * size for _ in range(size)]
        self._perspective = Side.NORTH

    @classmethod
    def from_values(cls, raw_values: List[List[int]]) -> "Grid":
        """
        Builds a grid from a matrix of tile values.
        Args:
            raw_values (List[List[int]]): A square matrix, 0 for an empty cell. Row 0
                                          of the matrix is the top row of the board.
        Returns:
            Grid: The populated grid, viewed from NORTH.
        Raises:
            ValueError: If the matrix is not a non-empty square, or holds a
                        value that is not a valid tile.
        """
        if not raw_values or not all(len(line) == len(raw_values) for line in raw_values):
            raise ValueError("Board must be a non-empty square matrix.")
        size = len(raw_values)
        grid = cls(size)
        for row in range(size):
            for col in range(size):
                value = raw_values[size - 1 - row][col]
                if value != 0:
                    grid._cells[col][row] = Tile(value)
        return grid

    @property
    def size(self) -> int:
        return self._size

    @property
    def perspective(self) -> Side:
        return self._perspective

    def _storage_coords(self, col: int, row: int) -> Tuple[int, int]:
        if not (0 <= col < self._size and 0 <= row < self._size):
            raise IndexError(f"Cell ({col}, {row}) is outside a {self._size}x{self._size} board.")
        side = self._perspective
        return side.col(col, row, self._size), side.row(col, row, self._size)

    def in_bounds(self, col: int, row: int) -> bool:
        return 0 <= col < self._size and 0 <= row < self._size

    def tile(self, col: int, row: int) -> Optional[Tile]:
        """
        Reads the cell at (col, row) through the current perspective.
        Raises:
            IndexError: If the coordinates are outside the board.
        """
        c, r = self._storage_coords(col, row)
        return self._cells[c][r]

    def move(self, col: int, row: int, tile: Tile) -> None:
        """
        Writes `tile` at (col, row) through the current perspective, replacing
        whatever was there. The cell the tile came from is left untouched; the
        caller vacates it.
        """
        c, r = self._storage_coords(col, row)
        self._cells[c][r] = tile

    def vacate(self, col: int, row: int) -> Optional[Tile]:
        """Empties the cell at (col, row) and returns the tile that was there, if any."""
        c, r = self._storage_coords(col, row)
        removed = self._cells[c][r]
        self._cells[c][r] = None
        return removed

    def add_tile(self, col: int, row: int, tile: Tile) -> None:
        """
        Places a tile on an empty cell.
        Raises:
            IndexError: If the coordinates are outside the board.
            ValueError: If the cell is already occupied.
        """
        c, r = self._storage_coords(col, row)
        if self._cells[c][r] is not None:
            raise ValueError(f"Cell ({col}, {row}) is already occupied.")
        self._cells[c][r] = tile

    def set_viewing_perspective(self, side: Side) -> None:
        if not isinstance(side, Side):
            raise TypeError(f"Expected a Side, got {side!r}.")
        self._perspective = side

    def clear(self) -> None:
        for column in self._cells:
            for row in range(self._size):
                column[row] = None
        self._perspective = Side.NORTH

    def empty_cells(self) -> List[Tuple[int, int]]:
        """
        Get coordinates of empty cells, in NORTH coordinates.
        Returns:
            List[Tuple[int, int]]: List of (col, row) tuples for empty cells.
        """
        return [(col, row)
                for col in range(self._size)
                for row in range(self._size)
                if self._cells[col][row] is None]

    def values(self) -> List[List[int]]:
        """Returns the board as a value matrix (top row first, 0 for empty), ignoring the perspective."""
        n = self._size
        matrix = []
        for row in range(n - 1, -1, -1):
            line = []
            for col in range(n):
                tile = self._cells[col][row]
                line.append(tile.value if tile is not None else 0)
            matrix.append(line)
        return matrix

    def copy(self) -> "Grid":
        new_grid = Grid(self._size)
        new_grid._cells = [list(column) for column in self._cells]
        new_grid._perspective = self._perspective
        return new_grid

    def __eq__(self, other):
        if not isinstance(other, Grid):
            return NotImplemented
        return self._cells == other._cells

    __hash__ = None

    def __repr__(self):
        return f"Grid(size={self._size}, values={self.values()!r})"
