"""
Unit tests for the PathFinder.

Covers path validity, optimality against an independent brute-force
distance computation, obstacle avoidance, determinism, unreachable goals and
agreement between plain and bidirectional search.
"""

import random

import numpy as np
import pytest

from skirmish.core.data import Cell, SearchAlgorithm
from skirmish.core.engine import GridModel, PathFinder
from skirmish.core.events import EventType, PathUnreachable

ALGORITHMS = [SearchAlgorithm.BFS, SearchAlgorithm.BIDIRECTIONAL]


def brute_force_distance(grid, blocked, start, goal):
    """King-move distance by repeated relaxation over every cell.

    Returns None when the goal cannot be reached.
    """
    infinity = grid.size + 1
    distance = {Cell(x, y): infinity for x in range(grid.width) for y in range(grid.height)}
    distance[start] = 0

    changed = True
    while changed:
        changed = False
        for cell, current in distance.items():
            if current == infinity:
                continue
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    other = Cell(cell.x + dx, cell.y + dy)
                    if other not in distance or other == cell:
                        continue
                    if other in blocked and other != goal:
                        continue
                    if distance[other] > current + 1:
                        distance[other] = current + 1
                        changed = True

    return None if distance[goal] == infinity else distance[goal]


def assert_valid_path(path, start, goal, blocked=()):
    assert path[0] == start
    assert path[-1] == goal
    for previous, current in zip(path, path[1:]):
        assert max(abs(previous.x - current.x), abs(previous.y - current.y)) == 1
    for cell in path[:-1]:
        assert cell == start or cell not in blocked


def random_obstacles(grid, rng, density):
    return {
        Cell(x, y)
        for x in range(grid.width)
        for y in range(grid.height)
        if rng.random() < density
    }


class TestFindPath:
    """Test basic path queries."""

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_trivial_path(self, grid, algorithm):
        """start == goal yields a single-cell path."""
        finder = PathFinder(grid, algorithm=algorithm)
        assert finder.find_path(Cell(3, 3), Cell(3, 3)) == [Cell(3, 3)]

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_open_grid_diagonal(self, grid, algorithm):
        finder = PathFinder(grid, algorithm=algorithm)
        path = finder.find_path(Cell(0, 0), Cell(5, 5))

        assert len(path) == 6
        assert_valid_path(path, Cell(0, 0), Cell(5, 5))

    def test_out_of_bounds_is_empty(self, path_finder, events):
        assert path_finder.find_path(Cell(-1, 0), Cell(3, 3)) == []
        assert path_finder.find_path(Cell(0, 0), Cell(27, 3)) == []
        assert events == []

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_worked_example(self, grid, algorithm):
        """Attacker at (1,1), target at (1,4), obstacle at (1,2)."""
        finder = PathFinder(grid, algorithm=algorithm)
        path = finder.find_path(Cell(1, 1), Cell(1, 4), blocked=[Cell(1, 2)])

        assert len(path) == 4
        assert Cell(1, 2) not in path
        assert_valid_path(path, Cell(1, 1), Cell(1, 4), {Cell(1, 2)})

    def test_goal_is_enterable_when_blocked(self, path_finder):
        """The goal's occupant is the target, so the goal never blocks."""
        path = path_finder.find_path(Cell(0, 0), Cell(2, 0), blocked=[Cell(2, 0)])
        assert path == [Cell(0, 0), Cell(1, 0), Cell(2, 0)]

    def test_start_is_never_blocked(self, path_finder):
        path = path_finder.find_path(Cell(0, 0), Cell(1, 0), blocked=[Cell(0, 0)])
        assert path == [Cell(0, 0), Cell(1, 0)]

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_diagonal_between_blocked_orthogonals(self, small_grid, algorithm):
        """A diagonal step is allowed even when both cells beside it are blocked."""
        finder = PathFinder(small_grid, algorithm=algorithm)
        blocked = {Cell(1, 0), Cell(0, 1), Cell(2, 1), Cell(1, 2)}

        path = finder.find_path(Cell(0, 0), Cell(2, 2), blocked)

        assert path == [Cell(0, 0), Cell(1, 1), Cell(2, 2)]

    def test_accepts_mask(self, small_grid):
        finder = PathFinder(small_grid)
        mask = small_grid.empty_mask()
        mask[:, 2] = True
        mask[4, 2] = False

        path = finder.find_path(Cell(0, 0), Cell(4, 0), blocked=mask)

        assert Cell(2, 4) in path
        assert_valid_path(path, Cell(0, 0), Cell(4, 0), {Cell(2, y) for y in range(4)})
        # caller's mask is left untouched
        assert mask[:4, 2].all()

    def test_rejects_mismatched_mask(self, small_grid):
        finder = PathFinder(small_grid)
        with pytest.raises(ValueError):
            finder.find_path(Cell(0, 0), Cell(1, 1), blocked=np.zeros((3, 3), dtype=np.bool_))

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_deterministic(self, grid, algorithm):
        """Identical queries give identical paths."""
        finder = PathFinder(grid, algorithm=algorithm)
        blocked = {Cell(5, y) for y in range(1, 21)}
        first = finder.find_path(Cell(0, 10), Cell(10, 10), blocked)
        for _ in range(5):
            assert finder.find_path(Cell(0, 10), Cell(10, 10), blocked) == first


class TestUnreachable:
    """Test unreachable goals."""

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    def test_full_width_wall(self, grid, algorithm):
        """A complete wall across the grid separates start and goal."""
        emitted = []
        finder = PathFinder(grid, event_emitter=emitted.append, algorithm=algorithm)
        wall = [Cell(x, 10) for x in range(grid.width)]

        path = finder.find_path(Cell(3, 2), Cell(3, 18), blocked=wall)

        assert path == []
        assert len(emitted) == 1
        assert isinstance(emitted[0], PathUnreachable)
        assert emitted[0].event_type == EventType.PATH_UNREACHABLE
        assert emitted[0].start == Cell(3, 2)
        assert emitted[0].goal == Cell(3, 18)

    def test_surrounded_start(self, small_grid, events):
        finder = PathFinder(small_grid, event_emitter=events.append)
        ring = [Cell(1, 0), Cell(0, 1), Cell(1, 1)]

        assert finder.find_path(Cell(0, 0), Cell(4, 4), blocked=ring) == []
        assert len(events) == 1


class TestOptimality:
    """Compare path lengths with an independent distance computation."""

    @pytest.mark.parametrize("algorithm", ALGORITHMS)
    @pytest.mark.parametrize("seed", range(12))
    def test_matches_brute_force(self, algorithm, seed):
        rng = random.Random(seed)
        grid = GridModel(width=7, height=6)
        finder = PathFinder(grid, algorithm=algorithm)
        blocked = random_obstacles(grid, rng, density=0.3)
        start = Cell(rng.randrange(grid.width), rng.randrange(grid.height))
        goal = Cell(rng.randrange(grid.width), rng.randrange(grid.height))
        blocked.discard(start)

        expected = brute_force_distance(grid, blocked, start, goal)
        path = finder.find_path(start, goal, blocked)

        if expected is None:
            assert path == []
        else:
            assert len(path) == expected + 1
            assert_valid_path(path, start, goal, blocked)

    @pytest.mark.parametrize("seed", range(20))
    def test_bidirectional_agrees_with_bfs(self, grid, seed):
        rng = random.Random(100 + seed)
        blocked = random_obstacles(grid, rng, density=0.35)
        start = Cell(rng.randrange(grid.width), rng.randrange(grid.height))
        goal = Cell(rng.randrange(grid.width), rng.randrange(grid.height))

        bfs_path = PathFinder(grid).find_path(start, goal, blocked)
        bidirectional_path = PathFinder(grid, algorithm=SearchAlgorithm.BIDIRECTIONAL).find_path(
            start, goal, blocked
        )

        assert len(bfs_path) == len(bidirectional_path)
        if bidirectional_path:
            assert_valid_path(bidirectional_path, start, goal, blocked - {start})


class TestFindTargetPath:
    """Test paths between combatants."""

    def test_other_living_units_block(self, path_finder, make_unit):
        attacker = make_unit(name="attacker", x=1, y=1)
        target = make_unit(name="target", x=1, y=4)
        obstacle = make_unit(name="obstacle", x=1, y=2)

        path = path_finder.find_target_path(attacker, target, [attacker, target, obstacle])

        assert len(path) == 4
        assert Cell(1, 2) not in path

    def test_dead_units_do_not_block(self, path_finder, make_unit):
        attacker = make_unit(name="attacker", x=1, y=1)
        target = make_unit(name="target", x=1, y=4)
        corpse = make_unit(name="corpse", x=1, y=2)
        corpse.alive = False

        path = path_finder.find_target_path(attacker, target, [attacker, target, corpse])

        assert path == [Cell(1, 1), Cell(1, 2), Cell(1, 3), Cell(1, 4)]

    def test_missing_combatant(self, path_finder, make_unit):
        unit = make_unit()
        assert path_finder.find_target_path(None, unit, [unit]) == []
        assert path_finder.find_target_path(unit, None, [unit]) == []

    def test_unreachable_reports_units(self, small_grid, make_unit):
        emitted = []
        finder = PathFinder(small_grid, event_emitter=emitted.append)
        attacker = make_unit(name="attacker", x=0, y=0)
        target = make_unit(name="target", x=4, y=4)
        wall = [make_unit(name=f"wall {y}", x=2, y=y) for y in range(5)]

        assert finder.find_target_path(attacker, target, [attacker, target, *wall]) == []
        assert emitted[0].attacker is attacker
        assert emitted[0].target is target
