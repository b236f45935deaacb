"""Tests for pathfinding and grid snapshot helpers."""

from itertools import product

import pytest

from deckwalk.environment import (
    EnvironmentGrid,
    NoPathFoundError,
    OutOfBoundsError,
    PathStatus,
    TileType,
    find_path,
    manhattan,
)


def _open_grid(size: int = 5) -> EnvironmentGrid:
    return EnvironmentGrid(width=size, height=size)


def _assert_contiguous(grid: EnvironmentGrid, path, occupant_id=None):
    for a, b in zip(path, path[1:]):
        assert manhattan(a, b) == 1
    for step in path[1:]:
        assert grid.is_walkable(*step, ignore=occupant_id)


def _grid_from_rows(rows) -> EnvironmentGrid:
    grid = EnvironmentGrid(width=len(rows[0]), height=len(rows))
    for y, row in enumerate(rows):
        for x, symbol in enumerate(row):
            if symbol == "#":
                grid.set_tile_type(x, y, TileType.WALL)
    return grid


WALLED_LAYOUTS = [
    ["..#..", ".##..", "...#.", "#.#..", "....."],
    [".....", ".###.", ".#.#.", ".###.", "....."],
    ["..#", "..#", "##."],
]


def test_shortest_path_uses_fixed_neighbour_order():
    grid = _open_grid()

    result = find_path(grid, (0, 0), (2, 2))

    assert result.status is PathStatus.FOUND
    assert result.path == [(0, 0), (1, 0), (2, 0), (2, 1), (2, 2)]
    assert result.steps == 4
    # Same inputs, same answer
    assert find_path(grid, (0, 0), (2, 2)).path == result.path


def test_straight_line_paths_match_manhattan_distance():
    grid = _open_grid()

    assert find_path(grid, (0, 0), (2, 0)).path == [(0, 0), (1, 0), (2, 0)]
    assert find_path(grid, (2, 0), (2, 4)).path == [(2, 0), (2, 1), (2, 2), (2, 3), (2, 4)]


def test_detour_around_wall_is_longer_than_manhattan():
    grid = _open_grid()
    grid.set_tile_type(2, 2, TileType.WALL)

    result = find_path(grid, (2, 0), (2, 4))

    assert result.status is PathStatus.FOUND
    assert result.path[0] == (2, 0)
    assert result.end == (2, 4)
    assert (2, 2) not in result.path
    assert result.steps == 6
    assert result.steps > manhattan((2, 0), (2, 4))
    _assert_contiguous(grid, result.path)


def test_start_equals_goal_is_already_at_target():
    grid = _open_grid()

    result = find_path(grid, (3, 3), (3, 3))

    assert result.status is PathStatus.ALREADY_AT_TARGET
    assert result.path == [(3, 3)]
    assert result.steps == 0
    assert result.found is False


def test_blocked_goal_is_approached_from_an_adjacent_tile():
    grid = _open_grid()
    grid.place_occupant("crate", 2, 2)

    result = find_path(grid, (0, 0), (2, 2))

    assert result.status is PathStatus.APPROACH
    assert result.path == [(0, 0), (1, 0), (2, 0), (2, 1)]
    assert manhattan(result.end, (2, 2)) == 1
    assert result.found is True


def test_wall_goal_next_to_start_needs_no_walk():
    grid = _open_grid()
    grid.set_tile_type(1, 0, TileType.WALL)

    result = find_path(grid, (0, 0), (1, 0))

    assert result.status is PathStatus.ALREADY_AT_TARGET
    assert result.path == [(0, 0)]


def test_own_tile_does_not_block_the_searching_occupant():
    grid = _open_grid()
    grid.place_occupant("deckhand", 0, 0)
    grid.place_occupant("bosun", 4, 0)

    mine = find_path(grid, (0, 0), (3, 0), occupant_id="deckhand")
    assert mine.status is PathStatus.FOUND
    assert mine.path == [(0, 0), (1, 0), (2, 0), (3, 0)]

    # The other agent's tile is treated as blocked
    theirs = find_path(grid, (0, 0), (4, 0), occupant_id="deckhand")
    assert theirs.status is PathStatus.APPROACH
    assert theirs.end == (3, 0)


def test_isolated_goal_is_not_found_without_fallback():
    grid = _open_grid()
    grid.set_tile_type(3, 4, TileType.WALL)
    grid.set_tile_type(4, 3, TileType.WALL)

    result = find_path(grid, (0, 0), (4, 4))

    assert result.status is PathStatus.NOT_FOUND
    assert result.path == []
    assert result.end is None
    assert result.found is False
    with pytest.raises(NoPathFoundError) as excinfo:
        result.unwrap()
    assert excinfo.value.goal == (4, 4)
    assert excinfo.value.start == (0, 0)


def test_isolated_goal_uses_nearest_reachable_tile_with_fallback():
    grid = _open_grid()
    grid.set_tile_type(3, 4, TileType.WALL)
    grid.set_tile_type(4, 3, TileType.WALL)

    result = find_path(grid, (0, 0), (4, 4), nearest_fallback=True)

    assert result.status is PathStatus.NEAREST
    assert result.path[0] == (0, 0)
    assert manhattan(result.end, (4, 4)) == 2
    assert result.steps == manhattan((0, 0), result.end)
    _assert_contiguous(grid, result.path)
    assert result.unwrap() == result.path


def test_fallback_never_walks_away_from_the_goal():
    grid = EnvironmentGrid(width=3, height=1)
    grid.set_tile_type(1, 0, TileType.WALL)

    # Start is already as close as anything reachable
    result = find_path(grid, (0, 0), (2, 0), nearest_fallback=True)

    assert result.status is PathStatus.NOT_FOUND


def test_out_of_bounds_endpoints_raise():
    grid = _open_grid()

    with pytest.raises(OutOfBoundsError):
        find_path(grid, (0, 0), (5, 0))
    with pytest.raises(OutOfBoundsError):
        find_path(grid, (-1, 0), (1, 1))


def test_every_open_grid_pair_walks_exactly_manhattan_steps():
    grid = _open_grid()
    cells = [(x, y) for y in range(grid.height) for x in range(grid.width)]

    for start, goal in product(cells, repeat=2):
        result = find_path(grid, start, goal)
        if start == goal:
            assert result.status is PathStatus.ALREADY_AT_TARGET
            continue
        assert result.status is PathStatus.FOUND, (start, goal)
        assert result.path[0] == start
        assert result.end == goal
        assert result.steps == manhattan(start, goal), (start, goal)
        _assert_contiguous(grid, result.path)


@pytest.mark.parametrize("rows", WALLED_LAYOUTS)
@pytest.mark.parametrize("nearest_fallback", [False, True])
def test_walled_layout_paths_only_cross_walkable_tiles(rows, nearest_fallback):
    grid = _grid_from_rows(rows)
    cells = [(x, y) for y in range(grid.height) for x in range(grid.width)]
    open_cells = [cell for cell in cells if grid.is_walkable(*cell)]

    for start, goal in product(open_cells, cells):
        result = find_path(grid, start, goal, nearest_fallback=nearest_fallback)
        if result.status is PathStatus.NOT_FOUND:
            assert result.path == []
            continue
        assert result.path[0] == start
        _assert_contiguous(grid, result.path)
        if result.status is PathStatus.FOUND:
            assert result.end == goal
            assert result.steps >= manhattan(start, goal)
        elif result.status is PathStatus.APPROACH:
            assert manhattan(result.end, goal) == 1
        elif result.status is PathStatus.NEAREST:
            assert nearest_fallback
            assert manhattan(result.end, goal) < manhattan(start, goal)
