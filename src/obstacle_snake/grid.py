# grid.py
from typing import Iterable, List, Optional, Set, Tuple
import random

from .config import EdgePolicy

Cell = Tuple[int, int]
Vector = Tuple[int, int]


def wrap(coord: int, size: int) -> int:
    """Reduce a coordinate into [0, size)."""
    return coord % size

def in_bounds(cell: Cell, size: int) -> bool:
    x, y = cell
    return 0 <= x < size and 0 <= y < size

def is_opposite(a: Vector, b: Vector) -> bool:
    return a[0] == -b[0] and a[1] == -b[1]

def next_cell(head: Cell, heading: Vector, size: int, edge_policy: EdgePolicy) -> Cell:
    """
    One step from head along heading. Under WRAP the result is folded back
    onto the torus; under WALL it is returned raw and may lie outside the grid.
    """
    nx, ny = head[0] + heading[0], head[1] + heading[1]
    if edge_policy is EdgePolicy.WRAP:
        return (wrap(nx, size), wrap(ny, size))
    return (nx, ny)

def occupied(snake: Iterable[Cell], obstacles: Iterable[Cell],
             extra: Iterable[Optional[Cell]] = ()) -> Set[Cell]:
    """All cells where nothing new may spawn. None entries in extra are skipped."""
    taken = set(snake)
    taken.update(obstacles)
    taken.update(cell for cell in extra if cell is not None)
    return taken

def free_tiles(size: int, excluding: Set[Cell]) -> List[Cell]:
    # Row-major so the candidate order never depends on set iteration order
    return [
        (x, y)
        for y in range(size)
        for x in range(size)
        if (x, y) not in excluding
    ]

def random_free_tile(size: int, excluding: Set[Cell], rng: random.Random) -> Optional[Cell]:
    """
    Pick a free cell uniformly at random. Candidates are enumerated first and
    then indexed, so every free cell has the same probability regardless of
    where it sits in scan order. Returns None when the grid is full.
    """
    candidates = free_tiles(size, excluding)
    if not candidates:
        return None
    return candidates[rng.randrange(len(candidates))]

def _shortest_delta(d: int, size: int) -> int:
    if d > size / 2:
        return d - size
    if d < -size / 2:
        return d + size
    return d

def direction_between(a: Cell, b: Cell, size: int) -> Vector:
    """
    Unit vector along the dominant axis of the shortest wrap-aware
    displacement from a to b. Horizontal wins ties; identical cells give (0, 0).
    """
    dx = _shortest_delta(b[0] - a[0], size)
    dy = _shortest_delta(b[1] - a[1], size)
    if dx == 0 and dy == 0:
        return (0, 0)
    if abs(dx) >= abs(dy):
        return (1 if dx > 0 else -1, 0)
    return (0, 1 if dy > 0 else -1)
