import pytest

from grid import Grid, Side
from tilt_engine import TiltEngine


def rotate_clockwise(values):
    return [list(line) for line in zip(*values[::-1])]


def column(values, col=0):
    return [line[col] for line in values]


def tilt(values, side):
    grid = Grid.from_values(values)
    score, changed = TiltEngine().tilt(grid, side)
    return grid, score, changed


def column_board(top_first):
    return [[value, 0, 0, 0] for value in top_first]


def test_merge_once():
    grid, score, changed = tilt(column_board([2, 2, 2, 2]), Side.NORTH)
    assert column(grid.values()) == [4, 4, 0, 0]
    assert score == 8
    assert changed


def test_trailing_tile_is_not_merged():
    grid, score, _ = tilt(column_board([2, 2, 2, 0]), Side.NORTH)
    assert column(grid.values()) == [4, 2, 0, 0]
    assert score == 4


def test_merged_tile_does_not_merge_again():
    grid, score, _ = tilt(column_board([2, 0, 2, 4]), Side.NORTH)
    assert column(grid.values()) == [4, 4, 0, 0]
    assert score == 4


def test_two_pairs_merge():
    grid, score, _ = tilt(column_board([4, 4, 8, 8]), Side.NORTH)
    assert column(grid.values()) == [8, 16, 0, 0]
    assert score == 24


def test_compaction_keeps_order():
    grid, score, changed = tilt(column_board([0, 2, 0, 4]), Side.NORTH)
    assert column(grid.values()) == [2, 4, 0, 0]
    assert score == 0
    assert changed


def test_empty_board_is_noop():
    grid, score, changed = tilt([[0] * 4 for _ in range(4)], Side.WEST)
    assert grid.values() == [[0] * 4 for _ in range(4)]
    assert score == 0
    assert not changed


def test_columns_are_independent():
    values = [
        [2, 0, 0, 0],
        [0, 2, 0, 0],
        [0, 0, 2, 0],
        [0, 0, 0, 2],
    ]
    grid, score, _ = tilt(values, Side.NORTH)
    assert grid.values() == [[2, 2, 2, 2], [0] * 4, [0] * 4, [0] * 4]
    assert score == 0


@pytest.mark.parametrize("side,expected_row,expected_score", [
    (Side.WEST, [4, 4, 0, 0], 4),
    (Side.EAST, [0, 0, 4, 4], 4),
])
def test_horizontal_tilts(side, expected_row, expected_score):
    values = [[2, 2, 0, 4], [0] * 4, [0] * 4, [0] * 4]
    grid, score, _ = tilt(values, side)
    assert grid.values()[0] == expected_row
    assert score == expected_score


def test_south_tilt_merges_leading_pair():
    grid, score, _ = tilt(column_board([2, 2, 2, 0]), Side.SOUTH)
    assert column(grid.values()) == [0, 0, 2, 4]
    assert score == 4


def test_perspective_is_restored():
    grid, _, _ = tilt(column_board([2, 0, 0, 0]), Side.EAST)
    assert grid.perspective is Side.NORTH


@pytest.mark.parametrize("side", list(Side))
def test_settled_board_is_idempotent(side):
    # Compacted and merged toward NORTH; rotating it settles it toward `side`.
    values = [
        [2, 4, 8, 16],
        [4, 8, 16, 32],
        [0, 2, 0, 4],
        [0, 0, 0, 0],
    ]
    for _ in range(side.value):
        values = rotate_clockwise(values)
    grid = Grid.from_values(values)
    engine = TiltEngine()
    for _ in range(2):
        score, changed = engine.tilt(grid, side)
        assert score == 0
        assert not changed
        assert grid.values() == values


@pytest.mark.parametrize("side", list(Side))
def test_tilt_reaches_fixed_point(side):
    values = [
        [2, 4, 2, 0],
        [2, 2, 8, 16],
        [0, 4, 8, 2],
        [4, 0, 2, 2],
    ]
    grid = Grid.from_values(values)
    engine = TiltEngine()
    for _ in range(2 * grid.size):
        _, changed = engine.tilt(grid, side)
        if not changed:
            break
    settled = grid.values()
    score, changed = engine.tilt(grid, side)
    assert (score, changed) == (0, False)
    assert grid.values() == settled


@pytest.mark.parametrize("side", list(Side))
def test_rotation_symmetry(side):
    values = [
        [2, 2, 4, 0],
        [0, 4, 4, 8],
        [8, 0, 2, 2],
        [2, 4, 0, 4],
    ]
    grid, score, _ = tilt(values, side)
    rotated_grid, rotated_score, _ = tilt(rotate_clockwise(values), side.rotated(1))
    assert rotated_grid.values() == rotate_clockwise(grid.values())
    assert rotated_score == score


def test_tilt_rejects_non_side():
    grid = Grid(4)
    with pytest.raises(TypeError):
        TiltEngine().tilt(grid, "NORTH")
    assert grid.perspective is Side.NORTH
