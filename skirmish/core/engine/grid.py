"""Fixed-size battlefield grid.

GridModel answers bounds and adjacency queries and builds numpy obstacle
masks for the path finder. It holds no unit state: masks are derived fresh
for every query from whatever positions the caller passes in.
"""

from typing import TYPE_CHECKING, Iterable, Optional

import numpy as np
from numpy.typing import NDArray

from ..data import Cell

if TYPE_CHECKING:
    from ...game.entities.combatant import Combatant


DEFAULT_WIDTH = 27
DEFAULT_HEIGHT = 21

# King moves as (dx, dy): left, right, up, down, then the four diagonals.
# Expansion order decides which of several shortest paths is returned.
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (1, 1), (-1, 1), (1, -1),
)


class GridModel:
    """Fixed-size 2D coordinate space with bounds checking.

    Arrays produced by the grid have shape (height, width) and are indexed
    [y, x].
    """

    def __init__(self, width: int = DEFAULT_WIDTH, height: int = DEFAULT_HEIGHT):
        if width <= 0 or height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {width}x{height}")
        self.width = width
        self.height = height

    @property
    def size(self) -> int:
        """Total number of cells."""
        return self.width * self.height

    @property
    def shape(self) -> tuple[int, int]:
        """Numpy shape of grid-aligned arrays."""
        return (self.height, self.width)

    def in_bounds(self, cell: Optional[Cell]) -> bool:
        """True iff 0 <= x < width and 0 <= y < height."""
        if cell is None:
            return False
        return 0 <= cell.x < self.width and 0 <= cell.y < self.height

    def neighbors(self, cell: Cell) -> list[Cell]:
        """Return the in-bounds king-move neighbors in DIRECTIONS order."""
        result = []
        for dx, dy in DIRECTIONS:
            nx, ny = cell.x + dx, cell.y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                result.append(Cell(nx, ny))
        return result

    def to_index(self, cell: Cell) -> int:
        """Flat row-major index of an in-bounds cell."""
        return cell.y * self.width + cell.x

    def from_index(self, index: int) -> Cell:
        """Inverse of to_index."""
        y, x = divmod(int(index), self.width)
        return Cell(x, y)

    def empty_mask(self) -> NDArray[np.bool_]:
        """Boolean mask with no blocked cells."""
        return np.zeros(self.shape, dtype=np.bool_)

    def obstacle_mask(self, cells: Optional[Iterable[Cell]]) -> NDArray[np.bool_]:
        """Build a blocked-cell mask from an iterable of cells.

        Out-of-bounds cells are ignored.
        """
        mask = self.empty_mask()
        if cells is None:
            return mask
        for cell in cells:
            if self.in_bounds(cell):
                mask[cell.y, cell.x] = True
        return mask

    def occupancy_mask(
        self,
        combatants: Optional[Iterable["Combatant"]],
        exclude: Iterable["Combatant"] = (),
    ) -> NDArray[np.bool_]:
        """Mask of cells occupied by living combatants.

        Combatants in exclude (compared by identity) never block, nor do dead
        ones.
        """
        mask = self.empty_mask()
        if combatants is None:
            return mask

        excluded_ids = {id(unit) for unit in exclude if unit is not None}
        for unit in combatants:
            if unit is None or not unit.alive or id(unit) in excluded_ids:
                continue
            if self.in_bounds(unit.position):
                mask[unit.position.y, unit.position.x] = True
        return mask

    def __repr__(self) -> str:
        return f"GridModel({self.width}x{self.height})"
