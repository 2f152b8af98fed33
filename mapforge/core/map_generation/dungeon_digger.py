"""
Room-and-corridor dungeon digger.

Grows a dungeon outward from a central room. Every step picks a wall cell
that borders exactly one floor cell and tries to attach a new room or
corridor on the far side of it. Features are only dug into solid rock, so
rooms never overlap and every room keeps a one-cell wall ring. Doors are
the passable cells that end up on a room's ring.
"""
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .grid import Door, Layout, Room, Tile, TileGrid

logger = logging.getLogger("mapforge.generation.dungeon")

DIRECTIONS = ((0, -1), (1, 0), (0, 1), (-1, 0))

CANDIDATE_WALL = 1
PRIORITY_WALL = 2  # corridor dead ends; always extended first


@dataclass
class DiggerOptions:
    """Tuning knobs for the digger (ranges are inclusive)."""
    room_width: Tuple[int, int] = (4, 9)
    room_height: Tuple[int, int] = (3, 6)
    corridor_length: Tuple[int, int] = (2, 6)
    dug_fraction: float = 0.4
    feature_attempts: int = 20
    max_iterations: int = 10000


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class _RoomFeature:
    """A rectangular room with inclusive bounds."""

    def __init__(self, left: int, top: int, right: int, bottom: int,
                 entry: Optional[Tuple[int, int]] = None):
        self.left = left
        self.top = top
        self.right = right
        self.bottom = bottom
        self.entry = entry

    @classmethod
    def random_at(cls, x: int, y: int, dx: int, dy: int,
                  options: DiggerOptions, rng: random.Random) -> "_RoomFeature":
        """Create a room on the far side of wall cell (x, y), facing (dx, dy)."""
        width = rng.randint(*options.room_width)
        height = rng.randint(*options.room_height)

        if dx == 1:
            top = y - rng.randrange(height)
            return cls(x + 1, top, x + width, top + height - 1, (x, y))
        if dx == -1:
            top = y - rng.randrange(height)
            return cls(x - width, top, x - 1, top + height - 1, (x, y))
        if dy == 1:
            left = x - rng.randrange(width)
            return cls(left, y + 1, left + width - 1, y + height, (x, y))
        left = x - rng.randrange(width)
        return cls(left, y - height, left + width - 1, y - 1, (x, y))

    @classmethod
    def random_center(cls, cx: int, cy: int,
                      options: DiggerOptions, rng: random.Random) -> "_RoomFeature":
        """Create a room covering (cx, cy)."""
        width = rng.randint(*options.room_width)
        height = rng.randint(*options.room_height)
        left = cx - rng.randrange(width)
        top = cy - rng.randrange(height)
        return cls(left, top, left + width - 1, top + height - 1)

    def _ring(self, x: int, y: int) -> bool:
        return (x == self.left - 1 or x == self.right + 1 or
                y == self.top - 1 or y == self.bottom + 1)

    def fits(self, digger: "DungeonDigger") -> bool:
        """Interior must be diggable rock and the surrounding ring solid wall."""
        for x in range(self.left - 1, self.right + 2):
            for y in range(self.top - 1, self.bottom + 2):
                if self._ring(x, y):
                    if not digger.is_wall(x, y):
                        return False
                elif not digger.can_dig(x, y):
                    return False
        return True

    def dig(self, digger: "DungeonDigger") -> None:
        for x in range(self.left - 1, self.right + 2):
            for y in range(self.top - 1, self.bottom + 2):
                if (x, y) == self.entry:
                    digger.dig(x, y)
                elif self._ring(x, y):
                    digger.add_wall(x, y)
                else:
                    digger.dig(x, y)

    def doors(self, grid: TileGrid) -> List[Tuple[int, int]]:
        """Passable cells on the ring, corners excluded."""
        found = []
        for x in range(self.left, self.right + 1):
            for y in (self.top - 1, self.bottom + 1):
                if grid.is_passable(x, y):
                    found.append((x, y))
        for y in range(self.top, self.bottom + 1):
            for x in (self.left - 1, self.right + 1):
                if grid.is_passable(x, y):
                    found.append((x, y))
        return found

    def to_room(self, room_id: int) -> Room:
        return Room.from_bounds(room_id, self.left, self.top, self.right, self.bottom)


class _CorridorFeature:
    """A straight one-cell-wide corridor starting at a wall cell."""

    def __init__(self, start_x: int, start_y: int, end_x: int, end_y: int):
        self.start = (start_x, start_y)
        self.end = (end_x, end_y)
        self.dx = _sign(end_x - start_x)
        self.dy = _sign(end_y - start_y)
        self.ends_with_wall = False

    @classmethod
    def random_at(cls, x: int, y: int, dx: int, dy: int,
                  options: DiggerOptions, rng: random.Random) -> "_CorridorFeature":
        length = rng.randint(*options.corridor_length)
        return cls(x, y, x + dx * length, y + dy * length)

    def _length(self) -> int:
        return 1 + max(abs(self.end[0] - self.start[0]), abs(self.end[1] - self.start[1]))

    def fits(self, digger: "DungeonDigger") -> bool:
        """
        Check the corridor can be dug with solid walls on both sides.

        The corridor is shortened to the last valid cell. It is rejected if
        nothing is left, or if it would stop one cell short of open space
        with a broken corner (which would leave a diagonal leak).
        """
        sx, sy = self.start
        dx, dy = self.dx, self.dy
        nx, ny = dy, -dx
        length = self._length()

        for i in range(length):
            x = sx + i * dx
            y = sy + i * dy
            if not (digger.can_dig(x, y)
                    and digger.is_wall(x + nx, y + ny)
                    and digger.is_wall(x - nx, y - ny)):
                length = i
                self.end = (x - dx, y - dy)
                break

        if length == 0:
            return False

        ex, ey = self.end
        # a single cell is only worth digging if it breaks into open space
        if length == 1 and digger.is_wall(ex + dx, ey + dy):
            return False

        first_corner_bad = not digger.is_wall(ex + dx + nx, ey + dy + ny)
        second_corner_bad = not digger.is_wall(ex + dx - nx, ey + dy - ny)
        self.ends_with_wall = digger.is_wall(ex + dx, ey + dy)
        if (first_corner_bad or second_corner_bad) and self.ends_with_wall:
            return False

        return True

    def dig(self, digger: "DungeonDigger") -> None:
        sx, sy = self.start
        for i in range(self._length()):
            digger.dig(sx + i * self.dx, sy + i * self.dy)

    def mark_priority_walls(self, digger: "DungeonDigger") -> None:
        """Dead ends get priority so corridors lead somewhere."""
        if not self.ends_with_wall:
            return
        ex, ey = self.end
        nx, ny = self.dy, -self.dx
        digger.add_wall(ex + self.dx, ey + self.dy, PRIORITY_WALL)
        digger.add_wall(ex + nx, ey + ny, PRIORITY_WALL)
        digger.add_wall(ex - nx, ey - ny, PRIORITY_WALL)


class DungeonDigger:
    """
    Digs a room-and-corridor dungeon into solid rock.

    The grid starts as all WALL; rooms and corridors are dug to FLOOR until
    roughly ``dug_fraction`` of the interior is open and no corridor is
    left dangling.
    """

    def __init__(
        self,
        width: int,
        height: int,
        rng: Optional[random.Random] = None,
        options: Optional[DiggerOptions] = None,
    ):
        self.width = width
        self.height = height
        self.rng = rng or random.Random()
        self.options = options or DiggerOptions()

        self.grid = TileGrid(width, height, Tile.WALL)
        self._walls: Dict[Tuple[int, int], int] = {}
        self._dug = 0
        self._rooms: List[_RoomFeature] = []
        self._corridors: List[_CorridorFeature] = []

    # ------------------------------------------------------------------
    # Cell predicates and mutators used by the features
    # ------------------------------------------------------------------

    def is_wall(self, x: int, y: int) -> bool:
        """Solid rock inside the map. Out of bounds is *not* wall here."""
        return self.grid.in_bounds(x, y) and self.grid[x, y] == Tile.WALL

    def can_dig(self, x: int, y: int) -> bool:
        """Rock that is not on the outer border."""
        if x < 1 or y < 1 or x + 1 >= self.width or y + 1 >= self.height:
            return False
        return self.grid[x, y] == Tile.WALL

    def dig(self, x: int, y: int) -> None:
        self.grid[x, y] = Tile.FLOOR
        self._dug += 1

    def add_wall(self, x: int, y: int, priority: int = CANDIDATE_WALL) -> None:
        if self.is_wall(x, y):
            self._walls[(x, y)] = priority

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(self) -> Layout:
        """
        Dig the dungeon.

        Returns:
            Layout with the grid, one Room per dug room, and the doors
        """
        area = max(1, (self.width - 2) * (self.height - 2))
        self._first_room()

        iterations = 0
        while iterations < self.options.max_iterations:
            iterations += 1

            wall = self._pick_wall()
            if wall is None:
                break

            x, y = wall
            direction = self._digging_direction(x, y)
            if direction is not None:
                dx, dy = direction
                for _ in range(self.options.feature_attempts):
                    if self._try_feature(x, y, dx, dy):
                        self._remove_surrounding_walls(x, y)
                        self._remove_surrounding_walls(x - dx, y - dy)
                        break

            has_priority = any(p == PRIORITY_WALL for p in self._walls.values())
            if self._dug / area >= self.options.dug_fraction and not has_priority:
                break
        else:
            logger.debug(f"Digger stopped at iteration budget ({self.options.max_iterations})")

        rooms = [feature.to_room(i) for i, feature in enumerate(self._rooms)]
        doors = self._collect_doors()

        logger.debug(
            f"Dug {self.width}x{self.height} dungeon in {iterations} iterations: "
            f"{len(rooms)} rooms, {len(self._corridors)} corridors, {len(doors)} doors, "
            f"{self._dug / area:.2f} dug"
        )
        return Layout(self.grid, rooms, doors)

    def _first_room(self) -> None:
        room = _RoomFeature.random_center(self.width // 2, self.height // 2, self.options, self.rng)
        if room.fits(self):
            room.dig(self)
            self._rooms.append(room)

    def _pick_wall(self) -> Optional[Tuple[int, int]]:
        priority = [pos for pos, p in self._walls.items() if p == PRIORITY_WALL]
        pool = priority or list(self._walls)
        if not pool:
            return None
        wall = self.rng.choice(pool)
        del self._walls[wall]
        return wall

    def _digging_direction(self, x: int, y: int) -> Optional[Tuple[int, int]]:
        """Direction pointing away from the single floor neighbour, if any."""
        if x <= 0 or y <= 0 or x >= self.width - 1 or y >= self.height - 1:
            return None

        found = None
        for dx, dy in DIRECTIONS:
            if self.grid[x + dx, y + dy] != Tile.WALL:
                if found is not None:
                    return None
                found = (dx, dy)

        if found is None:
            return None
        return -found[0], -found[1]

    def _try_feature(self, x: int, y: int, dx: int, dy: int) -> bool:
        if self.rng.random() < 0.5:
            room = _RoomFeature.random_at(x, y, dx, dy, self.options, self.rng)
            if not room.fits(self):
                return False
            room.dig(self)
            self._rooms.append(room)
            return True

        corridor = _CorridorFeature.random_at(x, y, dx, dy, self.options, self.rng)
        if not corridor.fits(self):
            return False
        corridor.dig(self)
        corridor.mark_priority_walls(self)
        self._corridors.append(corridor)
        return True

    def _remove_surrounding_walls(self, cx: int, cy: int) -> None:
        for dx, dy in DIRECTIONS:
            self._walls.pop((cx + dx, cy + dy), None)
            self._walls.pop((cx + 2 * dx, cy + 2 * dy), None)

    def _collect_doors(self) -> List[Door]:
        seen: Dict[Tuple[int, int], Door] = {}
        for room in self._rooms:
            for pos in room.doors(self.grid):
                if pos not in seen:
                    seen[pos] = Door(*pos)
        return list(seen.values())


def generate_dungeon(width: int, height: int, rng: random.Random) -> Layout:
    """Generate a dungeon layout."""
    return DungeonDigger(width, height, rng).generate()
