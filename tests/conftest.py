"""
Mapforge - Test Configuration and Fixtures
Shared test utilities and fixtures for pytest.
"""
import random
from collections import deque
from typing import Iterable, List, Set, Tuple

import pytest

from mapforge.core.map_generation.grid import Tile, TileGrid


# ==================== RNG Fixtures ====================

@pytest.fixture
def rng() -> random.Random:
    """A seeded random source so generator tests are reproducible."""
    return random.Random(1234)


@pytest.fixture(params=[1, 7, 42, 2024, 99991])
def seeded_rng(request) -> random.Random:
    """A handful of seeds to exercise generators across layouts."""
    return random.Random(request.param)


# ==================== Grid Fixtures ====================

@pytest.fixture
def small_room_grid() -> TileGrid:
    """A 6x5 grid with a 4x3 floor room in the middle and solid walls around."""
    grid = TileGrid(6, 5, Tile.WALL)
    grid.fill_rect(1, 1, 4, 3, Tile.FLOOR)
    return grid


@pytest.fixture
def open_grid() -> TileGrid:
    """A 3x2 grid that is all floor, bounded only by the map edge."""
    return TileGrid(3, 2, Tile.FLOOR)


# ==================== Helpers ====================

def passable_cells(grid: TileGrid) -> Set[Tuple[int, int]]:
    """All floor-like cells of a grid."""
    return {(x, y) for x, y, code in grid.cells() if code != Tile.WALL}


def reachable_from(grid: TileGrid, start: Tuple[int, int]) -> Set[Tuple[int, int]]:
    """4-connected passable cells reachable from ``start``."""
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nxt = (x + dx, y + dy)
            if nxt not in seen and grid.is_passable(*nxt):
                seen.add(nxt)
                queue.append(nxt)
    return seen


def room_cells(rooms: Iterable) -> List[Tuple[int, int]]:
    """Every cell covered by the given rooms."""
    return [
        (x, y)
        for room in rooms
        for y in range(room.y, room.y + room.height)
        for x in range(room.x, room.x + room.width)
    ]
