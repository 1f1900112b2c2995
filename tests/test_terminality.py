import pytest

from grid import Grid, Side
from terminality import GameProgressState, TerminalityChecker

STUCK = [
    [2, 4, 2, 4],
    [4, 2, 4, 2],
    [2, 4, 2, 4],
    [4, 2, 4, 2],
]


@pytest.fixture
def checker():
    return TerminalityChecker()


def test_no_move_detection(checker):
    grid = Grid.from_values(STUCK)
    assert not checker.empty_space_exists(grid)
    assert not checker.at_least_one_move_exists(grid)
    assert checker.game_over(grid)
    assert checker.progress(grid) == GameProgressState.GAME_OVER


def test_empty_cell_means_move_exists(checker):
    values = [list(line) for line in STUCK]
    values[2][1] = 0
    grid = Grid.from_values(values)
    assert checker.empty_space_exists(grid)
    assert checker.at_least_one_move_exists(grid)
    assert not checker.game_over(grid)


@pytest.mark.parametrize("first,second", [
    # corners
    ((0, 0), (0, 1)),
    ((3, 3), (2, 3)),
    ((3, 0), (3, 1)),
    ((0, 3), (1, 3)),
    # edges
    ((0, 1), (0, 2)),
    ((2, 3), (1, 3)),
    # interior
    ((1, 1), (2, 1)),
    ((2, 2), (2, 1)),
])
def test_equal_neighbors_anywhere_allow_a_move(checker, first, second):
    values = [list(line) for line in STUCK]
    for col, row in (first, second):
        values[3 - row][col] = 64
    grid = Grid.from_values(values)
    assert checker.at_least_one_move_exists(grid)
    assert checker.has_equal_neighbor(grid, *first)


def test_diagonal_equal_values_are_not_neighbors(checker):
    values = [list(line) for line in STUCK]
    values[0][0] = 64
    values[1][1] = 64
    grid = Grid.from_values(values)
    assert not checker.at_least_one_move_exists(grid)


def test_max_tile_ends_game_even_with_moves(checker):
    grid = Grid.from_values([[2048, 0], [0, 0]])
    assert checker.at_least_one_move_exists(grid)
    assert checker.max_tile_exists(grid)
    assert checker.game_over(grid)
    assert checker.progress(grid) == GameProgressState.GAME_WON


def test_custom_win_tile():
    checker = TerminalityChecker(win_tile=32)
    grid = Grid.from_values([[32, 0], [0, 0]])
    assert checker.game_over(grid)
    assert not TerminalityChecker().game_over(grid)


@pytest.mark.parametrize("win_tile", [0, 2, 3, 100])
def test_invalid_win_tile(win_tile):
    with pytest.raises(ValueError):
        TerminalityChecker(win_tile)


def test_can_tilt_does_not_modify_grid(checker):
    values = [[2, 0], [0, 0]]
    grid = Grid.from_values(values)
    assert not checker.can_tilt(grid, Side.NORTH)
    assert not checker.can_tilt(grid, Side.WEST)
    assert checker.can_tilt(grid, Side.SOUTH)
    assert checker.can_tilt(grid, Side.EAST)
    assert grid.values() == values
