"""Tests for the software rasterizer."""
import random

import numpy as np

from mapforge.core.map_generation.archetypes import Archetype
from mapforge.core.map_generation.grid import Door, Room, Tile, TileGrid
from mapforge.core.map_generation.rasterizer import PALETTES, rasterize

CS = 24


def _pixel(image, row, col):
    return [int(v) for v in image[row, col, :3]]


def _single_floor_grid():
    grid = TileGrid(3, 3, Tile.WALL)
    grid[1, 1] = Tile.FLOOR
    return grid


class TestImageBuffer:
    """Tests for buffer shape and channels."""

    def test_shape_and_alpha(self, rng):
        """The image is (H*cell, W*cell, 4) uint8, fully opaque."""
        grid = TileGrid(4, 3, Tile.FLOOR)
        image = rasterize(grid, [], [], 10, Archetype.DUNGEON, rng)
        assert image.shape == (30, 40, 4)
        assert image.dtype == np.uint8
        assert (image[..., 3] == 255).all()

    def test_deterministic_for_seed(self):
        """The same seed renders the same pixels."""
        grid = _single_floor_grid()
        a = rasterize(grid, [], [], CS, Archetype.DUNGEON, random.Random(3))
        b = rasterize(grid, [], [], CS, Archetype.DUNGEON, random.Random(3))
        assert np.array_equal(a, b)

    def test_every_archetype_has_a_palette(self):
        """Palettes are a closed mapping over archetypes."""
        assert set(PALETTES) == set(Archetype)


class TestStonePalette:
    """Tests for dungeon and cave rendering."""

    def test_noise_stays_in_range(self, rng):
        """Per-cell noise for stone maps is within [-6, 5] and actually varies."""
        grid = TileGrid(20, 20, Tile.WALL)
        image = rasterize(grid, [], [], 2, Archetype.CAVE, rng)
        offsets = {int(image[y * 2, x * 2, 0]) - 40 for y in range(20) for x in range(20)}
        assert offsets <= set(range(-6, 6))
        assert len(offsets) > 1

    def test_room_floor_and_corridor_differ(self, rng):
        """Floor inside a room uses the room colour, elsewhere the corridor colour."""
        grid = _single_floor_grid()
        in_room = rasterize(grid, [], [Room.from_rect(0, 1, 1, 1, 1)], CS, Archetype.DUNGEON, rng)
        corridor = rasterize(grid, [], [], CS, Archetype.DUNGEON, rng)
        r, g, b = _pixel(in_room, CS + 5, CS + 5)
        assert 174 <= r <= 185
        assert (r - g, g - b) == (20, 30)
        r, g, b = _pixel(corridor, CS + 5, CS + 5)
        assert 154 <= r <= 165

    def test_grid_line_on_floor_only(self, rng):
        """Floor cells get a grid line on their last row and column; walls do not."""
        image = rasterize(_single_floor_grid(), [], [], CS, Archetype.DUNGEON, rng)
        assert _pixel(image, CS + CS - 1, CS + 5) == [100, 90, 80]
        assert _pixel(image, CS + 5, CS + CS - 1) == [100, 90, 80]
        r, g, b = _pixel(image, CS - 1, 5)
        assert (r - g, g - b) == (4, 4)

    def test_door_colour(self, rng):
        """Door cells are painted wood brown."""
        image = rasterize(_single_floor_grid(), [Door(1, 1)], [], CS, Archetype.DUNGEON, rng)
        r, g, b = _pixel(image, CS + 5, CS + 5)
        assert (r - g, g - b) == (49, 47)


class TestTextures:
    """Tests for procedural surface textures."""

    def test_cobblestones_on_streets(self, rng):
        """Street pixels on the cobble diagonal are darkened by 15."""
        grid = TileGrid(2, 1, Tile.STREET)
        image = rasterize(grid, [], [], CS, Archetype.TOWN, rng)
        assert int(image[0, 0, 0]) - int(image[0, 1, 0]) == -15

    def test_no_cobbles_on_plaza(self, rng):
        """Only streets are cobbled."""
        grid = TileGrid(2, 1, Tile.PLAZA)
        image = rasterize(grid, [], [], CS, Archetype.TOWN, rng)
        assert int(image[0, 0, 0]) == int(image[0, 1, 0])

    def test_planks_on_building_floor(self, rng):
        """Board edges every 12 rows darken by 20; staggered seams by 15."""
        grid = TileGrid(2, 1, Tile.FLOOR)
        image = rasterize(grid, [], [], CS, Archetype.BUILDING, rng)
        plain = int(image[1, 1, 0])
        assert plain - int(image[0, 1, 0]) == 20
        assert plain - int(image[0, 0, 0]) == 15
        # odd columns of cells have no seam on the first board
        assert int(image[1, CS + 1, 0]) - int(image[0, CS, 0]) == 20

    def test_exterior_uses_street_colour(self, rng):
        """The exterior strip around a building is painted like a street, without cobbles."""
        grid = TileGrid(1, 1, Tile.EXTERIOR)
        image = rasterize(grid, [], [], CS, Archetype.BUILDING, rng)
        r, g, b = _pixel(image, 3, 3)
        assert (r - g, g - b) == (5, 15)
        assert 156 <= r <= 163
