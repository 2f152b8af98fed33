"""
Flood-fill chamber extraction for organic maps.

Caves have no designed rooms, so chambers are found after the fact: every
4-connected floor component large enough to matter is labelled with its
bounding box.
"""
from collections import deque
from typing import List, Tuple

from .grid import Room, TileGrid

MIN_CHAMBER_CELLS = 6

NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _flood(grid: TileGrid, start: Tuple[int, int], visited: List[List[bool]]) -> List[Tuple[int, int]]:
    """Collect the 4-connected passable component containing ``start``."""
    sx, sy = start
    visited[sy][sx] = True
    queue = deque([start])
    cells = []

    while queue:
        x, y = queue.popleft()
        cells.append((x, y))
        for dx, dy in NEIGHBOURS:
            nx, ny = x + dx, y + dy
            if grid.is_passable(nx, ny) and not visited[ny][nx]:
                visited[ny][nx] = True
                queue.append((nx, ny))

    return cells


def extract_rooms(grid: TileGrid, min_cells: int = MIN_CHAMBER_CELLS) -> List[Room]:
    """
    Label connected floor regions as rooms.

    Interior cells are scanned row by row, so room ids follow the position
    of each region's first cell. Regions smaller than ``min_cells`` are
    left as unlabelled floor.

    Args:
        grid: Tile grid to scan
        min_cells: Smallest component that counts as a room

    Returns:
        Rooms spanning each component's bounding box
    """
    visited = [[False] * grid.width for _ in range(grid.height)]
    rooms: List[Room] = []

    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if visited[y][x] or not grid.is_passable(x, y):
                continue

            cells = _flood(grid, (x, y), visited)
            if len(cells) < min_cells:
                continue

            xs = [cx for cx, _ in cells]
            ys = [cy for _, cy in cells]
            rooms.append(Room.from_bounds(len(rooms), min(xs), min(ys), max(xs), max(ys)))

    return rooms
