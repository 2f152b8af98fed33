"""
Building interior layout using Binary Space Partitioning (BSP).

Generates a single walled building standing in a strip of open ground,
partitioned into rooms by 1-cell interior walls. Each dividing wall gets
one door, so every room is reachable from the main entrance.
"""
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from mapforge.core.errors import GenerationInvariantError
from .grid import Door, Layout, Room, Tile, TileGrid

logger = logging.getLogger("mapforge.generation.building")

MARGIN = 2
MIN_NODE_SIZE = 6
MIN_SPLIT_LENGTH = 8
MIN_CHILD = 3
DEEP_BUILDING_SIZE = 20
FURNITURE_CHANCE = 0.7


@dataclass
class BSPNode:
    """A floor rectangle in the BSP tree. Dividing walls are not part of either child."""
    x: int
    y: int
    width: int
    height: int
    left: Optional["BSPNode"] = None
    right: Optional["BSPNode"] = None

    def is_leaf(self) -> bool:
        """Check if this is a leaf node."""
        return self.left is None and self.right is None

    def wall_positions(self, vertical: bool, doors: Set[Tuple[int, int]]) -> List[int]:
        """
        Candidate coordinates for a dividing wall.

        A vertical wall at column ``s`` would touch the node's top and
        bottom boundaries at (s, y-1) and (s, y+height); positions where a
        door sits there are excluded so the door is never sealed.
        """
        if vertical:
            return [
                s for s in range(self.x + MIN_CHILD, self.x + self.width - MIN_CHILD)
                if (s, self.y - 1) not in doors and (s, self.y + self.height) not in doors
            ]
        return [
            s for s in range(self.y + MIN_CHILD, self.y + self.height - MIN_CHILD)
            if (self.x - 1, s) not in doors and (self.x + self.width, s) not in doors
        ]

    def split(self, grid: TileGrid, doors: List[Door], rng: random.Random) -> bool:
        """
        Split this node with a dividing wall and punch one door in it.

        Args:
            grid: Grid to draw the wall into
            doors: Door list; the new door is appended
            rng: Random source

        Returns:
            True if split was successful
        """
        if not self.is_leaf():
            return False
        if self.width < MIN_NODE_SIZE or self.height < MIN_NODE_SIZE:
            return False

        occupied = {(d.x, d.y) for d in doors}
        options = []
        if self.width >= MIN_SPLIT_LENGTH:
            positions = self.wall_positions(True, occupied)
            if positions:
                options.append((True, positions))
        if self.height >= MIN_SPLIT_LENGTH:
            positions = self.wall_positions(False, occupied)
            if positions:
                options.append((False, positions))
        if not options:
            return False

        vertical, positions = options[0] if len(options) == 1 else rng.choice(options)
        at = rng.choice(positions)

        if vertical:
            for yy in range(self.y, self.y + self.height):
                grid[at, yy] = Tile.WALL
            door = Door(at, rng.randint(self.y + 1, self.y + self.height - 2))
            self.left = BSPNode(self.x, self.y, at - self.x, self.height)
            self.right = BSPNode(at + 1, self.y, self.x + self.width - at - 1, self.height)
        else:
            for xx in range(self.x, self.x + self.width):
                grid[xx, at] = Tile.WALL
            door = Door(rng.randint(self.x + 1, self.x + self.width - 2), at)
            self.left = BSPNode(self.x, self.y, self.width, at - self.y)
            self.right = BSPNode(self.x, at + 1, self.width, self.y + self.height - at - 1)

        grid[door.x, door.y] = Tile.FLOOR
        doors.append(door)
        return True

    def leaves(self) -> List["BSPNode"]:
        """Collect leaf nodes, left to right."""
        if self.is_leaf():
            return [self]
        return self.left.leaves() + self.right.leaves()


def _partition(node: BSPNode, depth: int, grid: TileGrid, doors: List[Door], rng: random.Random) -> int:
    """Recursively split ``node``. Returns the number of splits made."""
    if depth <= 0 or not node.split(grid, doors, rng):
        return 0
    return 1 + _partition(node.left, depth - 1, grid, doors, rng) + \
        _partition(node.right, depth - 1, grid, doors, rng)


def _decorate(grid: TileGrid, rooms: List[Room], rng: random.Random) -> None:
    """Place a hearth in the first room and furniture in larger rooms."""
    if rooms:
        first = rooms[0]
        if first.width >= 4 and first.height >= 4:
            hx = first.x + first.width // 2
            if grid[hx, first.y] == Tile.FLOOR:
                grid[hx, first.y] = Tile.HEARTH

    for room in rooms:
        if room.width < 5 or room.height < 5 or rng.random() >= FURNITURE_CHANCE:
            continue
        fx, fy = room.x + room.width // 2, room.y + room.height // 2
        if grid[fx, fy] == Tile.FLOOR:
            grid[fx, fy] = Tile.FURNITURE
        if grid[fx + 1, fy] == Tile.FLOOR:
            grid[fx + 1, fy] = Tile.FURNITURE


def generate_building(width: int, height: int, rng: random.Random) -> Layout:
    """
    Generate a building interior.

    Args:
        width: Grid width in cells
        height: Grid height in cells
        rng: Random source

    Returns:
        Layout with one room per BSP leaf and one door per dividing wall
        plus the main entrance
    """
    grid = TileGrid(width, height, Tile.EXTERIOR)
    build_w = width - MARGIN * 2
    build_h = height - MARGIN * 2

    for yy in range(MARGIN, MARGIN + build_h):
        for xx in range(MARGIN, MARGIN + build_w):
            shell = xx in (MARGIN, MARGIN + build_w - 1) or yy in (MARGIN, MARGIN + build_h - 1)
            grid[xx, yy] = Tile.WALL if shell else Tile.FLOOR

    entrance = Door(MARGIN + build_w // 2, MARGIN + build_h - 1)
    grid[entrance.x, entrance.y] = Tile.FLOOR
    doors = [entrance]

    root = BSPNode(MARGIN + 1, MARGIN + 1, build_w - 2, build_h - 2)
    depth = 2 if build_w < DEEP_BUILDING_SIZE or build_h < DEEP_BUILDING_SIZE else 3
    splits = _partition(root, depth, grid, doors, rng)

    if len(doors) != splits + 1:
        raise GenerationInvariantError(
            "building doors equal splits plus the entrance",
            {"splits": splits, "doors": len(doors)},
        )

    rooms = [
        Room.from_rect(i, leaf.x, leaf.y, leaf.width, leaf.height)
        for i, leaf in enumerate(root.leaves())
    ]
    _decorate(grid, rooms, rng)

    logger.debug(f"Partitioned {width}x{height} building at depth {depth}: {splits} splits, {len(rooms)} rooms")
    return Layout(grid, rooms, doors)
