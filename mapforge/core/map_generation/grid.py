"""
Tile grid and the room/door records every generator produces.

The grid is the single structure shared by all stages: a generator builds
and owns it, the assembler freezes it, and wall derivation, lighting and
rasterization only read it.
"""
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Any, Iterator, List, NamedTuple, Tuple

from mapforge.core.errors import GenerationInvariantError


class Tile(IntEnum):
    """Cell codes. Only WALL is impassable and opaque."""
    WALL = 0
    FLOOR = 1
    STREET = 2
    PLAZA = 3
    GRASS = 4
    WATER = 5
    MARKET = 6
    EXTERIOR = 7
    FURNITURE = 8
    HEARTH = 9


def is_passable(code: int) -> bool:
    """Check if a tile code is floor-like."""
    return code != Tile.WALL


@dataclass(frozen=True)
class Door:
    """A single passable cell interrupting a wall."""
    x: int
    y: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Room:
    """A room in grid-cell units."""
    id: int
    x: int
    y: int
    width: int
    height: int
    center_x: int
    center_y: int

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise GenerationInvariantError(
                "room dimensions must be positive",
                {"room_id": self.id, "width": self.width, "height": self.height},
            )

    @classmethod
    def from_rect(cls, room_id: int, x: int, y: int, width: int, height: int) -> "Room":
        """Create a room centred on the middle cell of its rectangle."""
        return cls(room_id, x, y, width, height, x + width // 2, y + height // 2)

    @classmethod
    def from_bounds(cls, room_id: int, left: int, top: int, right: int, bottom: int) -> "Room":
        """Create a room from inclusive bounds, centred on the bounds midpoint."""
        return cls(
            room_id,
            left,
            top,
            right - left + 1,
            bottom - top + 1,
            (left + right) // 2,
            (top + bottom) // 2,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "centerX": self.center_x,
            "centerY": self.center_y,
        }


class TileGrid:
    """
    Rectangular grid of tile codes, indexed ``grid[x, y]``.

    Rows are stored row-major (``cells[y][x]``) like every other grid in
    the engine. After :meth:`freeze` any write raises
    :class:`GenerationInvariantError`.
    """

    def __init__(self, width: int, height: int, fill: int = Tile.WALL):
        self.width = width
        self.height = height
        self._cells: List[List[int]] = [[int(fill)] * width for _ in range(height)]
        self._frozen = False

    def __getitem__(self, pos: Tuple[int, int]) -> int:
        x, y = pos
        return self._cells[y][x]

    def __setitem__(self, pos: Tuple[int, int], code: int) -> None:
        if self._frozen:
            raise GenerationInvariantError("tile grid is frozen", {"x": pos[0], "y": pos[1]})
        x, y = pos
        self._cells[y][x] = int(code)

    def freeze(self) -> "TileGrid":
        """Make the grid read-only. Returns self for chaining."""
        self._frozen = True
        return self

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, x: int, y: int) -> bool:
        """Out-of-bounds cells count as wall."""
        return not self.in_bounds(x, y) or self._cells[y][x] == Tile.WALL

    def is_passable(self, x: int, y: int) -> bool:
        return self.in_bounds(x, y) and self._cells[y][x] != Tile.WALL

    def fill_rect(self, x: int, y: int, width: int, height: int, code: int) -> None:
        """Fill a rectangle, silently clipping it to the grid."""
        for yy in range(max(0, y), min(self.height, y + height)):
            for xx in range(max(0, x), min(self.width, x + width)):
                self[xx, yy] = code

    def cells(self) -> Iterator[Tuple[int, int, int]]:
        """Iterate ``(x, y, code)`` row by row."""
        for y, row in enumerate(self._cells):
            for x, code in enumerate(row):
                yield x, y, code

    def rows(self) -> List[List[int]]:
        """Return a copy of the grid as a list of rows."""
        return [list(row) for row in self._cells]

    def count(self, code: int) -> int:
        return sum(row.count(code) for row in self._cells)


class Layout(NamedTuple):
    """What every archetype generator returns."""
    grid: TileGrid
    rooms: List[Room]
    doors: List[Door]
