# tilt_engine.py
# Slide-and-merge resolution for a single tilt of the board.

import logging
from typing import Tuple

from grid import Grid, Side

logger = logging.getLogger(__name__)

class TiltEngine:
    """
    Resolves a tilt toward one side of the board.

    The column logic is written once, for tiles moving toward increasing row
    index. Every other side is handled by viewing the grid from that side
    while the same logic runs.
    """

    def tilt(self, grid: Grid, side: Side) -> Tuple[int, bool]:
        """
        Tilts every tile on the grid toward `side`, merging equal neighbours.
        Args:
            grid (Grid): The grid to mutate. Its perspective is NORTH again on return.
            side (Side): The side to tilt toward.
        Returns:
            Tuple[int, bool]: The score gained from merges and a boolean
                             indicating if any cell changed.
        Raises:
            TypeError: If `side` is not a Side.
        """
        before = grid.values()
        score_gained = 0
        grid.set_viewing_perspective(side)
        try:
            for col in range(grid.size):
                score_gained += self._process_column(grid, col)
        finally:
            grid.set_viewing_perspective(Side.NORTH)

        changed = grid.values() != before
        logger.debug("Tilt %s: score +%d, changed=%s", side.name, score_gained, changed)
        return score_gained, changed

    def _process_column(self, grid: Grid, col: int) -> int:
        # Step 1: Compact
        self._compact_column(grid, col)
        # Step 2: Merge
        score_delta = self._merge_column(grid, col)
        # Step 3: Compact again (after merge)
        self._compact_column(grid, col)
        return score_delta

    @staticmethod
    def _compact_column(grid: Grid, col: int) -> None:
        """
        Slides the tiles of a column toward the top edge, keeping their order.
        Scanning from the top means every destination cell is already empty
        or already vacated when a tile is moved into it.
        """
        empty_count = 0
        for row in range(grid.size - 1, -1, -1):
            tile = grid.tile(col, row)
            if tile is None:
                empty_count += 1
            elif empty_count:
                grid.move(col, row + empty_count, tile)
                grid.vacate(col, row)

    @staticmethod
    def _merge_column(grid: Grid, col: int) -> int:
        """
        Merges each tile with the equal tile directly below it, top down.
        The lower cell is vacated, so a merged tile is never compared again
        in this pass and a run of three merges only the top two.
        Returns:
            int: The score gained, twice the pre-merge value per merge.
        """
        score_delta = 0
        for row in range(grid.size - 1, 0, -1):
            current = grid.tile(col, row)
            below = grid.tile(col, row - 1)
            if current is None or below is None:
                continue
            if current.value == below.value:
                grid.move(col, row, current.merge(below))
                grid.vacate(col, row - 1)
                score_delta += below.value * 2
        return score_delta
