"""
Settlement (town/city) layout.

The map starts as open street. Blocks of 5-9 cells are laid out along each
axis with 2-cell streets between them, and each block is rolled into a
plaza, a park, a market or a row of walled buildings. Every building gets
exactly one door.
"""
import logging
import random
from typing import List, Tuple

from mapforge.core.errors import GenerationInvariantError
from .grid import Door, Layout, Room, Tile, TileGrid

logger = logging.getLogger("mapforge.generation.settlement")

STREET_WIDTH = 2
MIN_BLOCK = 5
MAX_BLOCK = 9
MIN_BUILDING = 3

# Cumulative roll thresholds for block use
PLAZA_CHANCE = 0.10
PARK_CHANCE = 0.18
MARKET_CHANCE = 0.28
FOUNTAIN_CHANCE = 0.6


def block_spans(size: int, rng: random.Random) -> List[Tuple[int, int]]:
    """
    Lay out block spans along one axis.

    Spans start after the edge street and are separated by streets. A
    trailing span is trimmed so a street still runs along the far edge,
    and dropped if it ends up below the minimum block size.

    Returns:
        List of (start, length) pairs
    """
    spans = []
    start = STREET_WIDTH
    while start < size - STREET_WIDTH:
        length = min(rng.randint(MIN_BLOCK, MAX_BLOCK), size - STREET_WIDTH - start)
        if length < MIN_BLOCK:
            break
        spans.append((start, length))
        start += length + STREET_WIDTH
    return spans


def _building_count(bw: int, bh: int, rng: random.Random) -> int:
    # A block is at most 9 cells, too short for three 3-cell buildings and two alleys
    if bw >= 8 and bh >= 8:
        return 2
    if bw >= 6:
        return rng.randint(1, 2)
    return 1


def split_block(
    bx: int, by: int, bw: int, bh: int, count: int, rng: random.Random,
) -> List[Tuple[int, int, int, int]]:
    """
    Split a block into buildings separated by 1-cell alleys.

    The block is cut along its longer axis. The count is reduced until
    every building is at least 3x3.

    Returns:
        List of (x, y, width, height) building rectangles
    """
    side_by_side = bw > bh
    length = bw if side_by_side else bh
    if min(bw, bh) < MIN_BUILDING:
        return []

    while count > 1 and (length - (count - 1)) // count < MIN_BUILDING:
        count -= 1

    available = length - (count - 1)
    sizes = [available // count] * count
    for _ in range(available % count):
        sizes[rng.randrange(count)] += 1

    rects = []
    offset = 0
    for size in sizes:
        if side_by_side:
            rects.append((bx + offset, by, size, bh))
        else:
            rects.append((bx, by + offset, bw, size))
        offset += size + 1
    return rects


def place_building(grid: TileGrid, x: int, y: int, width: int, height: int, rng: random.Random) -> Door:
    """
    Draw a walled building and punch its door.

    The door lands on a random side at a random non-corner position.

    Returns:
        The building's door
    """
    for yy in range(y, y + height):
        for xx in range(x, x + width):
            edge = xx in (x, x + width - 1) or yy in (y, y + height - 1)
            grid[xx, yy] = Tile.WALL if edge else Tile.FLOOR

    side = rng.randrange(4)
    if side == 0:
        door = Door(rng.randint(x + 1, x + width - 2), y)
    elif side == 1:
        door = Door(rng.randint(x + 1, x + width - 2), y + height - 1)
    elif side == 2:
        door = Door(x, rng.randint(y + 1, y + height - 2))
    else:
        door = Door(x + width - 1, rng.randint(y + 1, y + height - 2))

    grid[door.x, door.y] = Tile.FLOOR

    openings = [
        (xx, yy)
        for yy in range(y, y + height)
        for xx in range(x, x + width)
        if (xx in (x, x + width - 1) or yy in (y, y + height - 1)) and grid[xx, yy] != Tile.WALL
    ]
    if openings != [(door.x, door.y)]:
        raise GenerationInvariantError(
            "every building has exactly one door",
            {"building": [x, y, width, height], "openings": len(openings)},
        )
    return door


def _fill_open_block(grid: TileGrid, bx: int, by: int, bw: int, bh: int, roll: float, rng: random.Random) -> bool:
    """Paint plaza/park/market blocks. Returns False for building stock."""
    if roll < PLAZA_CHANCE and bw >= 4 and bh >= 4:
        grid.fill_rect(bx, by, bw, bh, Tile.PLAZA)
        if bw >= 5 and bh >= 5 and rng.random() < FOUNTAIN_CHANCE:
            grid.fill_rect(bx + bw // 2, by + bh // 2, 2, 2, Tile.WATER)
        return True
    if roll < PARK_CHANCE:
        grid.fill_rect(bx, by, bw, bh, Tile.GRASS)
        return True
    if roll < MARKET_CHANCE:
        grid.fill_rect(bx, by, bw, bh, Tile.MARKET)
        return True
    return False


def generate_settlement(width: int, height: int, rng: random.Random) -> Layout:
    """
    Generate a town layout.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        rng: Random source

    Returns:
        Layout whose rooms are every block and every building
    """
    grid = TileGrid(width, height, Tile.STREET)
    rooms: List[Room] = []
    doors: List[Door] = []
    buildings = 0

    columns = block_spans(width, rng)
    rows = block_spans(height, rng)

    for bx, bw in columns:
        for by, bh in rows:
            if bw < MIN_BUILDING or bh < MIN_BUILDING:
                continue

            roll = rng.random()
            if _fill_open_block(grid, bx, by, bw, bh, roll, rng):
                rooms.append(Room.from_rect(len(rooms), bx, by, bw, bh))
                continue

            rects = split_block(bx, by, bw, bh, _building_count(bw, bh, rng), rng)
            for x, y, w, h in rects:
                doors.append(place_building(grid, x, y, w, h, rng))
                rooms.append(Room.from_rect(len(rooms), x, y, w, h))
                buildings += 1

    logger.debug(f"Laid out {width}x{height} settlement: {len(rooms)} areas, {buildings} buildings")
    return Layout(grid, rooms, doors)
