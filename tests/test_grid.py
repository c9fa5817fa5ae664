"""Tests for grid geometry: wrapping, occupancy and free-tile search."""

import random
from collections import Counter

from obstacle_snake.config import EdgePolicy, UP, DOWN, LEFT, RIGHT
from obstacle_snake.grid import (
    direction_between, free_tiles, in_bounds, is_opposite,
    next_cell, occupied, random_free_tile, wrap,
)


class TestWrap:

    def test_wrap_reduces_into_range(self):
        assert wrap(20, 20) == 0
        assert wrap(-1, 20) == 19
        assert wrap(7, 20) == 7

    def test_next_cell_wraps_right_edge(self):
        """Leaving the right edge re-enters on the left."""
        assert next_cell((19, 5), RIGHT, 20, EdgePolicy.WRAP) == (0, 5)

    def test_next_cell_wraps_top_edge(self):
        assert next_cell((3, 0), UP, 20, EdgePolicy.WRAP) == (3, 19)

    def test_next_cell_wall_leaves_coordinate_raw(self):
        """Under the wall policy the caller sees the out-of-range cell."""
        cell = next_cell((19, 5), RIGHT, 20, EdgePolicy.WALL)
        assert cell == (20, 5)
        assert not in_bounds(cell, 20)

    def test_is_opposite(self):
        assert is_opposite(LEFT, RIGHT)
        assert is_opposite(UP, DOWN)
        assert not is_opposite(UP, LEFT)
        assert not is_opposite(RIGHT, RIGHT)


class TestOccupancy:

    def test_occupied_is_union_and_skips_none(self):
        taken = occupied([(0, 0), (1, 0)], [(3, 3)], [None, (2, 2)])
        assert taken == {(0, 0), (1, 0), (3, 3), (2, 2)}

    def test_free_tiles_row_major(self):
        assert free_tiles(2, {(0, 0)}) == [(1, 0), (0, 1), (1, 1)]

    def test_random_free_tile_none_when_full(self):
        full = {(x, y) for x in range(3) for y in range(3)}
        assert random_free_tile(3, full, random.Random(0)) is None

    def test_random_free_tile_picks_only_free_cell(self):
        taken = {(x, y) for x in range(3) for y in range(3)} - {(2, 1)}
        assert random_free_tile(3, taken, random.Random(0)) == (2, 1)

    def test_random_free_tile_is_uniform(self):
        """Every free cell is drawn, with roughly equal frequency."""
        rng = random.Random(1234)
        taken = {(x, y) for x in range(4) for y in range(4)} - {(0, 0), (3, 0), (3, 3)}
        counts = Counter(random_free_tile(4, taken, rng) for _ in range(3000))
        assert set(counts) == {(0, 0), (3, 0), (3, 3)}
        for n in counts.values():
            assert 850 < n < 1150


class TestDirectionBetween:

    def test_plain_displacement(self):
        assert direction_between((5, 5), (6, 5), 20) == RIGHT
        assert direction_between((5, 5), (5, 4), 20) == UP

    def test_shortest_path_crosses_edge(self):
        """(19,5) -> (0,5) is one step right on a torus, not 19 steps left."""
        assert direction_between((19, 5), (0, 5), 20) == RIGHT
        assert direction_between((0, 5), (19, 5), 20) == LEFT
        assert direction_between((4, 0), (4, 19), 20) == UP

    def test_tie_prefers_horizontal(self):
        assert direction_between((5, 5), (6, 6), 20) == RIGHT
        assert direction_between((5, 5), (4, 4), 20) == LEFT

    def test_identical_cells(self):
        assert direction_between((5, 5), (5, 5), 20) == (0, 0)
