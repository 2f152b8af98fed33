"""Tests for the map assembler."""
import json
import logging
import re

import numpy as np
import pytest

from mapforge.core.errors import ErrorCode, GenerationInvariantError, MapValidationError
from mapforge.core.map_generation import Archetype, Tile, generate_from_request, generate_map
from mapforge.core.map_generation.generator import MAX_DIMENSION, MIN_DIMENSION, clamp_dimension
from mapforge.models import MapRequest


class TestScenarios:
    """End-to-end generation scenarios."""

    def test_crypt_dungeon(self):
        """A 40x30 dungeon at 100px yields a 4000x3000 scene and image."""
        result = generate_map("dungeon", 40, 30, 100, "Crypt", seed=101)
        assert result.archetype == Archetype.DUNGEON
        assert (result.scene.width, result.scene.height) == (4000, 3000)
        assert result.image.shape == (3000, 4000, 4)
        assert result.scene.name == "Crypt"
        assert result.scene.token_vision is True
        assert result.scene.fog_exploration is True
        assert result.scene.background_color == "#222222"
        assert len(result.rooms) > 0
        assert result.scene.walls
        for wall in result.scene.walls:
            for value in (wall.x0, wall.y0, wall.x1, wall.y1):
                assert value % 100 == 0

    def test_grotto_cave(self):
        """Caves have a solid border and no doors."""
        result = generate_map("cave", 40, 30, 100, "Grotto", seed=202)
        grid = result.grid
        assert result.doors == []
        for x in range(grid.width):
            assert grid[x, 0] == Tile.WALL
            assert grid[x, grid.height - 1] == Tile.WALL
        for y in range(grid.height):
            assert grid[0, y] == Tile.WALL
            assert grid[grid.width - 1, y] == Tile.WALL
        assert not any(w.is_door for w in result.scene.walls)

    def test_market_square_town(self):
        """Towns switch off token vision and fog and use an earthy background."""
        result = generate_map("town", 50, 40, 100, "Market Square", seed=303)
        assert (result.scene.width, result.scene.height) == (5000, 4000)
        assert result.archetype == Archetype.TOWN
        assert result.scene.token_vision is False
        assert result.scene.fog_exploration is False
        assert result.scene.background_color == "#8B9467"

    def test_tavern_building(self):
        """The tavern alias produces a building interior."""
        result = generate_map("tavern", 30, 25, 20, seed=404)
        assert result.archetype == Archetype.BUILDING
        assert result.grid[0, 0] == Tile.EXTERIOR
        assert len(result.doors) == len(result.rooms)

    def test_width_clamped_up(self):
        """Dimensions below 20 are raised to 20; above 80 lowered to 80."""
        result = generate_map("building", 5, 200, 10, "Tiny", seed=1)
        assert (result.grid_width, result.grid_height) == (20, 80)
        assert result.image.shape == (800, 200, 4)

    def test_unknown_archetype_makes_dungeon(self):
        """Unrecognised tags fall back to a dungeon."""
        result = generate_map("spaceship", 20, 20, 10, seed=5)
        assert result.archetype == Archetype.DUNGEON


class TestAssemblerContract:
    """Tests for assembler-level guarantees."""

    def test_seed_recorded_and_reproducible(self):
        """A recorded seed regenerates the identical map."""
        first = generate_map("dungeon", 30, 30, 10)
        again = generate_map("dungeon", 30, 30, 10, seed=first.seed)
        assert first.grid.rows() == again.grid.rows()
        assert first.rooms == again.rooms
        assert first.scene.walls == again.scene.walls
        assert np.array_equal(first.image, again.image)

    def test_grid_is_frozen(self):
        """The returned grid cannot be modified."""
        result = generate_map("cave", 20, 20, 10, seed=2)
        with pytest.raises(GenerationInvariantError):
            result.grid[1, 1] = Tile.WALL

    @pytest.mark.parametrize("size", [0, -5])
    def test_non_positive_grid_size_rejected(self, size):
        """No image can be produced without pixels per cell."""
        with pytest.raises(MapValidationError) as exc:
            generate_map("dungeon", 20, 20, size)
        assert exc.value.code == ErrorCode.VALIDATION_ERROR
        assert exc.value.details["field"] == "grid_size"

    def test_file_name(self):
        """Image file names are '<epoch ms>-<archetype>.png'."""
        result = generate_map("town", 20, 20, 10, seed=3)
        assert re.fullmatch(r"\d{13}-town\.png", result.file_name)

    def test_default_name(self):
        """Unnamed maps get a name from their archetype."""
        assert generate_map("cave", 20, 20, 10, seed=4).name == "Generated Cave"

    def test_walls_axis_aligned_on_grid(self):
        """Every wall runs along cell edges."""
        result = generate_map("building", 30, 30, 50, seed=6)
        for wall in result.scene.walls:
            assert wall.x0 == wall.x1 or wall.y0 == wall.y1
            for value in (wall.x0, wall.y0, wall.x1, wall.y1):
                assert value % 50 == 0

    def test_lights_follow_rooms(self):
        """Each room contributes one or five lights."""
        result = generate_map("dungeon", 40, 30, 10, seed=7)
        expected = sum(5 if r.width >= 6 and r.height >= 5 else 1 for r in result.rooms)
        assert len(result.scene.lights) == expected

    def test_to_dict_is_json_safe(self):
        """Summaries serialise to JSON and carry no pixels."""
        result = generate_map("town", 20, 20, 10, seed=8)
        data = result.to_dict()
        json.dumps(data)
        assert "image" not in data
        assert data["archetype"] == "town"
        assert data["scene"]["tokenVision"] is False
        assert set(data["scene"]["grid"]) == {"type", "size", "color", "alpha"}

    def test_logs_summary(self, caplog):
        """Each generated map is logged at INFO."""
        with caplog.at_level(logging.INFO, logger="mapforge.generator"):
            generate_map("dungeon", 20, 20, 10, "Logged", seed=9)
        assert any("Logged" in r.getMessage() for r in caplog.records)


class TestClampDimension:
    """Tests for dimension clamping."""

    def test_bounds(self):
        """Values are clamped into [20, 80]."""
        assert clamp_dimension(1) == MIN_DIMENSION
        assert clamp_dimension(50) == 50
        assert clamp_dimension(500) == MAX_DIMENSION


class TestGenerateFromRequest:
    """Tests for the request entry point."""

    def test_runs_request(self):
        """A request model drives generation."""
        request = MapRequest(archetype="wilderness", width=10, height=25, grid_size=8, name="Wilds", seed=12)
        result = generate_from_request(request)
        assert result.archetype == Archetype.CAVE
        assert (result.grid_width, result.grid_height) == (20, 25)
        assert result.seed == 12
        assert result.name == "Wilds"
