"""Shortest path search on the battlefield grid.

Movement is 8-directional with unit cost, so breadth-first search yields
shortest paths. Two strategies are available:

- BFS: single frontier from the start, early exit on reaching the goal.
- Bidirectional: frontiers from both ends expanded one full layer at a time,
  alternating sides, spliced at the best meeting cell of the first layer in
  which they touch.

Both reuse the same bookkeeping: numpy int32 arrays of shape (height, width)
holding distances and predecessor flat indices, -1 meaning unset.

The goal cell is always enterable (its occupant is the attack target) and the
start cell is never blocked. No corner-cutting rule applies to diagonals.
"""

from collections import deque
from typing import TYPE_CHECKING, Callable, Iterable, Optional, Union

import numpy as np
from numpy.typing import NDArray

from ..data import Cell, SearchAlgorithm
from ..events import BattleEvent, PathUnreachable
from .grid import GridModel

if TYPE_CHECKING:
    from ...game.entities.combatant import Combatant


BlockedCells = Union[Iterable[Cell], NDArray[np.bool_], None]


class PathFinder:
    """Computes shortest king-move paths between two cells."""

    def __init__(
        self,
        grid: GridModel,
        event_emitter: Optional[Callable[[BattleEvent], None]] = None,
        algorithm: SearchAlgorithm = SearchAlgorithm.BFS,
    ):
        self.grid = grid
        self.emit_event = event_emitter or (lambda e: None)
        self.algorithm = algorithm

    def find_path(self, start: Cell, goal: Cell, blocked: BlockedCells = None) -> list[Cell]:
        """Return a shortest path from start to goal, both included.

        Args:
            start: First cell of the path
            goal: Last cell of the path, enterable even if listed as blocked
            blocked: Blocked cells, either as cells or as a (height, width) mask

        Returns:
            The path, [start] when start == goal, or an empty list when either
            endpoint is out of bounds or the goal is unreachable
        """
        return self._find(start, goal, blocked)

    def find_target_path(
        self,
        attacker: Optional["Combatant"],
        target: Optional["Combatant"],
        existing_units: Optional[Iterable["Combatant"]],
    ) -> list[Cell]:
        """Path from attacker to target around living units.

        Every living unit in existing_units except the attacker and the target
        is an obstacle.
        """
        if attacker is None or target is None:
            return []

        mask = self.grid.occupancy_mask(existing_units, exclude=(attacker, target))
        return self._find(attacker.position, target.position, mask, attacker, target)

    def _find(
        self,
        start: Cell,
        goal: Cell,
        blocked: BlockedCells,
        attacker: Optional["Combatant"] = None,
        target: Optional["Combatant"] = None,
    ) -> list[Cell]:
        if not self.grid.in_bounds(start) or not self.grid.in_bounds(goal):
            return []

        if start == goal:
            return [start]

        mask = self._prepare_mask(blocked, start, goal)

        if self.algorithm is SearchAlgorithm.BIDIRECTIONAL:
            path = self._search_bidirectional(start, goal, mask)
        else:
            path = self._search_bfs(start, goal, mask)

        if not path:
            self.emit_event(PathUnreachable(start=start, goal=goal, attacker=attacker, target=target))
            return []
        return path

    def _prepare_mask(self, blocked: BlockedCells, start: Cell, goal: Cell) -> NDArray[np.bool_]:
        """Fresh mask for one query with both endpoints cleared."""
        if isinstance(blocked, np.ndarray):
            if blocked.shape != self.grid.shape:
                raise ValueError(
                    f"Blocked mask shape {blocked.shape} does not match grid {self.grid.shape}"
                )
            mask = blocked.astype(np.bool_, copy=True)
        else:
            mask = self.grid.obstacle_mask(blocked)

        mask[start.y, start.x] = False
        mask[goal.y, goal.x] = False
        return mask

    def _new_bookkeeping(self) -> tuple[NDArray[np.int32], NDArray[np.int32]]:
        distances = np.full(self.grid.shape, -1, dtype=np.int32)
        predecessors = np.full(self.grid.shape, -1, dtype=np.int32)
        return distances, predecessors

    def _search_bfs(self, start: Cell, goal: Cell, blocked: NDArray[np.bool_]) -> Optional[list[Cell]]:
        distances, predecessors = self._new_bookkeeping()
        distances[start.y, start.x] = 0

        queue = deque([start])
        while queue:
            current = queue.popleft()
            if current == goal:
                break

            current_distance = distances[current.y, current.x]
            current_index = self.grid.to_index(current)
            for neighbor in self.grid.neighbors(current):
                if blocked[neighbor.y, neighbor.x] or distances[neighbor.y, neighbor.x] != -1:
                    continue
                distances[neighbor.y, neighbor.x] = current_distance + 1
                predecessors[neighbor.y, neighbor.x] = current_index
                queue.append(neighbor)

        if distances[goal.y, goal.x] == -1:
            return None

        chain = self._trace(predecessors, start, goal)
        if chain is None:
            return None
        chain.reverse()
        return chain

    def _search_bidirectional(
        self, start: Cell, goal: Cell, blocked: NDArray[np.bool_]
    ) -> Optional[list[Cell]]:
        forward_dist, forward_pred = self._new_bookkeeping()
        backward_dist, backward_pred = self._new_bookkeeping()
        forward_dist[start.y, start.x] = 0
        backward_dist[goal.y, goal.x] = 0

        forward_frontier = [start]
        backward_frontier = [goal]
        meeting: Optional[Cell] = None
        expand_forward = True

        while forward_frontier and backward_frontier:
            if expand_forward:
                forward_frontier, meeting = self._expand_layer(
                    forward_frontier, forward_dist, forward_pred, backward_dist, blocked
                )
            else:
                backward_frontier, meeting = self._expand_layer(
                    backward_frontier, backward_dist, backward_pred, forward_dist, blocked
                )
            if meeting is not None:
                break
            expand_forward = not expand_forward

        if meeting is None:
            return None

        head = self._trace(forward_pred, start, meeting)
        tail = self._trace(backward_pred, goal, meeting)
        if head is None or tail is None:
            return None

        head.reverse()
        # tail runs meeting -> goal; drop its first cell to avoid duplicating the meeting cell
        return head + tail[1:]

    def _expand_layer(
        self,
        frontier: list[Cell],
        distances: NDArray[np.int32],
        predecessors: NDArray[np.int32],
        other_distances: NDArray[np.int32],
        blocked: NDArray[np.bool_],
    ) -> tuple[list[Cell], Optional[Cell]]:
        """Expand one complete BFS layer.

        Returns the next frontier and the meeting cell with the smallest
        combined distance discovered in this layer (first found on ties).
        """
        next_frontier: list[Cell] = []
        meeting: Optional[Cell] = None
        best_total = -1

        for current in frontier:
            current_distance = distances[current.y, current.x]
            current_index = self.grid.to_index(current)
            for neighbor in self.grid.neighbors(current):
                if blocked[neighbor.y, neighbor.x] or distances[neighbor.y, neighbor.x] != -1:
                    continue
                distances[neighbor.y, neighbor.x] = current_distance + 1
                predecessors[neighbor.y, neighbor.x] = current_index
                next_frontier.append(neighbor)

                other = other_distances[neighbor.y, neighbor.x]
                if other != -1:
                    total = int(current_distance) + 1 + int(other)
                    if meeting is None or total < best_total:
                        meeting = neighbor
                        best_total = total

        return next_frontier, meeting

    def _trace(self, predecessors: NDArray[np.int32], origin: Cell, cell: Cell) -> Optional[list[Cell]]:
        """Follow predecessor links from cell back to origin.

        Returns [cell, ..., origin], or None if a link is missing or the chain
        is longer than the grid (which would mean corrupted bookkeeping).
        """
        chain = [cell]
        while cell != origin:
            index = int(predecessors[cell.y, cell.x])
            if index < 0 or len(chain) > self.grid.size:
                return None
            cell = self.grid.from_index(index)
            chain.append(cell)
        return chain
