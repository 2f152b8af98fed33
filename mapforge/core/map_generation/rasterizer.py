"""
Software rasterizer for battlemap images.

Each cell is painted as a ``cell_size`` square in its palette colour, with
a per-cell brightness jitter and optional procedural textures (cobbles on
streets, planks on wooden floors). Floor-like cells get a 1-pixel grid
line along their bottom and right edges.

The image is built one band of cells at a time so that temporaries stay
small even for 80x80 maps at large cell sizes.
"""
import random
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Tuple

import numpy as np

from .archetypes import Archetype
from .grid import Door, Room, Tile, TileGrid

RGB = Tuple[int, int, int]

DOOR_COLOR: RGB = (139, 90, 43)


@dataclass(frozen=True)
class Palette:
    """Colours and surface treatment for one family of maps."""
    name: str
    tiles: Mapping[int, RGB]
    floor: RGB
    grid: RGB
    noise: Tuple[int, int]
    room_floor: Optional[RGB] = None
    door: RGB = DOOR_COLOR
    cobbled: FrozenSet[int] = field(default_factory=frozenset)
    planked: FrozenSet[int] = field(default_factory=frozenset)

    def color_for(self, code: int, in_room: bool = False) -> RGB:
        """Base colour of a cell (doors are handled by the caller)."""
        if code in self.tiles:
            return self.tiles[code]
        if self.room_floor is not None and in_room:
            return self.room_floor
        return self.floor


STONE = Palette(
    name="stone",
    tiles={Tile.WALL: (40, 36, 32)},
    floor=(160, 140, 110),
    room_floor=(180, 160, 130),
    grid=(100, 90, 80),
    noise=(-6, 5),
)

STREET_COLOR: RGB = (160, 155, 140)

SETTLEMENT = Palette(
    name="settlement",
    tiles={
        Tile.WALL: (90, 70, 55),
        Tile.FLOOR: (190, 170, 140),
        Tile.STREET: STREET_COLOR,
        Tile.PLAZA: (195, 185, 160),
        Tile.GRASS: (90, 130, 65),
        Tile.WATER: (70, 120, 160),
        Tile.MARKET: (175, 145, 100),
    },
    floor=STREET_COLOR,
    grid=(120, 115, 105),
    noise=(-5, 4),
    cobbled=frozenset({Tile.STREET}),
)

TIMBER = Palette(
    name="building",
    tiles={
        Tile.WALL: (70, 55, 42),
        Tile.FLOOR: (200, 180, 145),
        Tile.EXTERIOR: STREET_COLOR,
        Tile.FURNITURE: (120, 85, 55),
        Tile.HEARTH: (180, 80, 30),
    },
    floor=(200, 180, 145),
    grid=(110, 100, 85),
    noise=(-4, 3),
    planked=frozenset({Tile.FLOOR}),
)

PALETTES: Dict[Archetype, Palette] = {
    Archetype.DUNGEON: STONE,
    Archetype.CAVE: STONE,
    Archetype.TOWN: SETTLEMENT,
    Archetype.BUILDING: TIMBER,
}


def _room_mask(grid: TileGrid, rooms: Iterable[Room]) -> np.ndarray:
    mask = np.zeros((grid.height, grid.width), dtype=bool)
    for room in rooms:
        mask[max(0, room.y):room.y + room.height, max(0, room.x):room.x + room.width] = True
    return mask


def _cobble_pattern(px: np.ndarray, py: np.ndarray) -> np.ndarray:
    """Cobblestone offsets for a band; ``px``/``py`` are in-cell pixel offsets."""
    diagonal = (px[None, :] + py[:, None]) % 8 < 1
    speckle = (px[None, :] * 3 + py[:, None] * 7) % 13 < 1
    return np.where(diagonal, -15, np.where(speckle, 8, 0))


def _plank_pattern(px: np.ndarray, py: np.ndarray, gx: np.ndarray) -> np.ndarray:
    """Plank offsets: dark board edges every 12 rows, staggered seams."""
    rows = np.repeat(np.where(py % 12 < 1, -20, 0)[:, None], px.size, axis=1)
    seams = (px % 20 < 1)[None, :] & (((py // 12)[:, None] + gx[None, :]) % 2 == 0)
    return np.where(seams, -15, rows)


def rasterize(
    grid: TileGrid,
    doors: Iterable[Door],
    rooms: Iterable[Room],
    cell_size: int,
    archetype: Archetype,
    rng: random.Random,
) -> np.ndarray:
    """
    Render the grid to an RGBA image.

    Args:
        grid: Tile grid to render
        doors: Door cells, painted in the door colour
        rooms: Rooms; stone maps shade room floor apart from corridors
        cell_size: Pixels per cell
        archetype: Selects the palette
        rng: Random source for per-cell noise

    Returns:
        uint8 array of shape (height * cell_size, width * cell_size, 4)
    """
    palette = PALETTES[archetype]
    width, height, cs = grid.width, grid.height, cell_size
    door_cells = {(d.x, d.y) for d in doors}
    in_room = _room_mask(grid, rooms)

    base = np.empty((height, width, 3), dtype=np.int16)
    passable = np.zeros((height, width), dtype=bool)
    cobbled = np.zeros((height, width), dtype=bool)
    planked = np.zeros((height, width), dtype=bool)
    lo, hi = palette.noise

    for x, y, code in grid.cells():
        is_door = (x, y) in door_cells
        color = palette.door if is_door else palette.color_for(code, bool(in_room[y, x]))
        base[y, x] = color
        base[y, x] += rng.randint(lo, hi)
        passable[y, x] = code != Tile.WALL
        cobbled[y, x] = code in palette.cobbled and not is_door
        planked[y, x] = code in palette.planked and not is_door

    columns = np.arange(width * cs)
    px = columns % cs
    gx = columns // cs
    py = np.arange(cs)

    cobble = _cobble_pattern(px, py) if palette.cobbled else None
    plank = _plank_pattern(px, py, gx) if palette.planked else None
    line = (px == cs - 1)[None, :] | (py == cs - 1)[:, None]
    grid_color = np.array(palette.grid, dtype=np.int16)

    image = np.empty((height * cs, width * cs, 4), dtype=np.uint8)
    image[..., 3] = 255

    for gy in range(height):
        band = np.repeat(base[gy], cs, axis=0)[None, :, :].repeat(cs, axis=0)
        if cobble is not None:
            band += np.where(np.repeat(cobbled[gy], cs)[None, :], cobble, 0)[..., None].astype(np.int16)
        if plank is not None:
            band += np.where(np.repeat(planked[gy], cs)[None, :], plank, 0)[..., None].astype(np.int16)

        on_line = line & np.repeat(passable[gy], cs)[None, :]
        band[on_line] = grid_color

        image[gy * cs:(gy + 1) * cs, :, :3] = np.clip(band, 0, 255).astype(np.uint8)

    return image
