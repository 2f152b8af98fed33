"""
Cellular-automaton cave grower.

Cells start as floor with probability ``fill_chance`` and are then
smoothed with a birth/survival rule over the 8-neighbourhood, counting
floor neighbours. The outer ring is forced to wall at the end so every
cave is closed.
"""
import logging
import random
from dataclasses import dataclass
from typing import FrozenSet, List

from .grid import Layout, Tile, TileGrid
from .room_extractor import extract_rooms

logger = logging.getLogger("mapforge.generation.cave")


@dataclass(frozen=True)
class CaveRules:
    """Automaton parameters."""
    fill_chance: float = 0.48
    born: FrozenSet[int] = frozenset({5, 6, 7, 8})
    survive: FrozenSet[int] = frozenset({4, 5, 6, 7, 8})
    generations: int = 4


def _floor_neighbours(cells: List[List[int]], x: int, y: int, width: int, height: int) -> int:
    """Count floor cells around (x, y). Cells off the map are not counted."""
    count = 0
    for dy in (-1, 0, 1):
        ny = y + dy
        if ny < 0 or ny >= height:
            continue
        row = cells[ny]
        for dx in (-1, 0, 1):
            if dx == 0 and dy == 0:
                continue
            nx = x + dx
            if 0 <= nx < width and row[nx] == Tile.FLOOR:
                count += 1
    return count


def _step(cells: List[List[int]], width: int, height: int, rules: CaveRules) -> List[List[int]]:
    """Run one generation and return the new rows."""
    next_cells = []
    for y in range(height):
        row = []
        for x in range(width):
            alive = _floor_neighbours(cells, x, y, width, height)
            if cells[y][x] == Tile.FLOOR:
                row.append(Tile.FLOOR if alive in rules.survive else Tile.WALL)
            else:
                row.append(Tile.FLOOR if alive in rules.born else Tile.WALL)
        next_cells.append(row)
    return next_cells


def grow_cave(width: int, height: int, rng: random.Random, rules: CaveRules = CaveRules()) -> TileGrid:
    """
    Grow a cave grid.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        rng: Random source
        rules: Automaton parameters

    Returns:
        TileGrid of WALL/FLOOR with a solid wall border
    """
    cells = [
        [Tile.FLOOR if rng.random() < rules.fill_chance else Tile.WALL for _ in range(width)]
        for _ in range(height)
    ]

    for _ in range(rules.generations):
        cells = _step(cells, width, height, rules)

    grid = TileGrid(width, height, Tile.WALL)
    for y in range(1, height - 1):
        for x in range(1, width - 1):
            grid[x, y] = cells[y][x]

    logger.debug(
        f"Grew {width}x{height} cave over {rules.generations} generations: "
        f"{grid.count(Tile.FLOOR)} floor cells"
    )
    return grid


def generate_cave(width: int, height: int, rng: random.Random) -> Layout:
    """Generate a cave layout with its chambers labelled as rooms."""
    grid = grow_cave(width, height, rng)
    return Layout(grid, extract_rooms(grid), [])
