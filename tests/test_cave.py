"""Tests for the cave grower and chamber extraction."""
import random

from mapforge.core.map_generation.cave_grower import CaveRules, generate_cave, grow_cave
from mapforge.core.map_generation.grid import Tile, TileGrid
from mapforge.core.map_generation.room_extractor import extract_rooms


class TestCaveGrower:
    """Tests for cellular-automaton growth."""

    def test_border_forced_to_wall(self, seeded_rng):
        """The outer ring of a cave is always wall."""
        grid = grow_cave(40, 30, seeded_rng)
        for x in range(40):
            assert grid[x, 0] == Tile.WALL
            assert grid[x, 29] == Tile.WALL
        for y in range(30):
            assert grid[0, y] == Tile.WALL
            assert grid[39, y] == Tile.WALL

    def test_only_wall_and_floor(self, seeded_rng):
        """Caves use only WALL and FLOOR codes."""
        grid = grow_cave(30, 25, seeded_rng)
        assert {code for _, _, code in grid.cells()} <= {Tile.WALL, Tile.FLOOR}

    def test_empty_fill_stays_solid(self, rng):
        """With no starting floor nothing can be born."""
        grid = grow_cave(20, 20, rng, CaveRules(fill_chance=0.0))
        assert grid.count(Tile.FLOOR) == 0

    def test_full_fill_keeps_interior_open(self, rng):
        """An all-floor start erodes only its corners, so the interior stays open."""
        grid = grow_cave(20, 20, rng, CaveRules(fill_chance=1.0))
        assert grid.count(Tile.FLOOR) == 18 * 18

    def test_same_seed_same_cave(self):
        """A seed fully determines the cave."""
        a = grow_cave(40, 30, random.Random(5))
        b = grow_cave(40, 30, random.Random(5))
        assert a.rows() == b.rows()

    def test_generate_cave_has_no_doors(self, seeded_rng):
        """Caves are open, so there are no doors."""
        layout = generate_cave(40, 30, seeded_rng)
        assert layout.doors == []


class TestRoomExtractor:
    """Tests for flood-fill chamber labelling."""

    def _grid(self, cells):
        grid = TileGrid(10, 6, Tile.WALL)
        for x, y in cells:
            grid[x, y] = Tile.FLOOR
        return grid

    def test_component_becomes_room(self):
        """A 6-cell component is a room spanning its bounding box."""
        grid = self._grid([(x, y) for x in range(1, 4) for y in range(1, 3)])
        rooms = extract_rooms(grid)
        assert len(rooms) == 1
        room = rooms[0]
        assert (room.x, room.y, room.width, room.height) == (1, 1, 3, 2)
        assert (room.center_x, room.center_y) == (2, 1)

    def test_small_pocket_ignored(self):
        """Components under 6 cells stay unlabelled."""
        grid = self._grid([(6, 1), (7, 1), (8, 1), (6, 2), (7, 2)])
        assert extract_rooms(grid) == []

    def test_diagonal_cells_not_connected(self):
        """Connectivity is 4-way: a diagonal chain is separate cells."""
        grid = self._grid([(1, 1), (2, 2), (3, 3), (4, 4), (5, 3), (6, 2)])
        assert extract_rooms(grid) == []

    def test_l_shape_bounding_box(self):
        """Irregular chambers are labelled by their bounding box."""
        cells = [(1, 1), (1, 2), (1, 3), (1, 4), (2, 4), (3, 4), (4, 4)]
        rooms = extract_rooms(self._grid(cells))
        assert len(rooms) == 1
        room = rooms[0]
        assert (room.x, room.y, room.width, room.height) == (1, 1, 4, 4)
        assert (room.center_x, room.center_y) == (2, 2)

    def test_ids_follow_scan_order(self):
        """Rooms are numbered in row-major order of their first cell."""
        left = [(1, y) for y in range(1, 5)] + [(2, 1), (2, 2)]
        right = [(7, y) for y in range(1, 5)] + [(8, 1), (8, 2)]
        rooms = extract_rooms(self._grid(right + left))
        assert [r.id for r in rooms] == [0, 1]
        assert rooms[0].x == 1
        assert rooms[1].x == 7

    def test_cave_rooms_cover_floor(self, seeded_rng):
        """Every cave room's box holds at least six floor cells."""
        layout = generate_cave(40, 30, seeded_rng)
        for room in layout.rooms:
            floor = sum(
                1
                for y in range(room.y, room.y + room.height)
                for x in range(room.x, room.x + room.width)
                if layout.grid[x, y] == Tile.FLOOR
            )
            assert floor >= 6
            assert room.x <= room.center_x < room.x + room.width
            assert room.y <= room.center_y < room.y + room.height
