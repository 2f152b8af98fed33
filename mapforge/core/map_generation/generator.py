"""
Map assembler.

Ties the pipeline together: resolve the archetype, run its generator,
freeze the grid, derive and merge walls, place lights and rasterize the
image. Everything random flows from one seeded ``random.Random`` so any
map can be regenerated from its recorded seed.
"""
import logging
import random
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING, Union

import numpy as np

from mapforge.config import get_settings
from mapforge.core.errors import MapValidationError
from .archetypes import Archetype, resolve_archetype
from .building_layout import generate_building
from .cave_grower import generate_cave
from .dungeon_digger import generate_dungeon
from .grid import Door, Layout, Room, TileGrid
from .lighting import LightSource, place_lights
from .rasterizer import rasterize
from .settlement_layout import generate_settlement
from .walls import WallSegment, derive_walls, merge_walls

if TYPE_CHECKING:
    from mapforge.models.map_request import MapRequest

logger = logging.getLogger("mapforge.generator")

MIN_DIMENSION = 20
MAX_DIMENSION = 80

GENERATORS: Dict[Archetype, Callable[[int, int, random.Random], Layout]] = {
    Archetype.DUNGEON: generate_dungeon,
    Archetype.CAVE: generate_cave,
    Archetype.TOWN: generate_settlement,
    Archetype.BUILDING: generate_building,
}


@dataclass(frozen=True)
class SceneStyle:
    """Scene-level presentation for an archetype."""
    background_color: str = "#222222"
    token_vision: bool = True
    fog_exploration: bool = True


# Towns are open ground: no vision blocking, no fog, earthy surroundings.
SCENE_STYLES: Dict[Archetype, SceneStyle] = {
    Archetype.DUNGEON: SceneStyle(),
    Archetype.CAVE: SceneStyle(),
    Archetype.TOWN: SceneStyle(background_color="#8B9467", token_vision=False, fog_exploration=False),
    Archetype.BUILDING: SceneStyle(),
}


@dataclass(frozen=True)
class GridConfig:
    """Square grid overlay settings."""
    size: int
    type: int = 1
    color: str = "#000000"
    alpha: float = 0.2

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "size": self.size, "color": self.color, "alpha": self.alpha}


@dataclass
class SceneDescriptor:
    """A VTT scene: dimensions, grid, walls and lights."""
    name: str
    width: int
    height: int
    grid: GridConfig
    background_color: str = "#222222"
    token_vision: bool = True
    fog_exploration: bool = True
    walls: List[WallSegment] = field(default_factory=list)
    lights: List[LightSource] = field(default_factory=list)
    padding: int = 0

    def to_foundry(self) -> Dict[str, Any]:
        """Convert to Foundry VTT scene data."""
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "grid": self.grid.to_dict(),
            "backgroundColor": self.background_color,
            "tokenVision": self.token_vision,
            "fog": {"exploration": self.fog_exploration},
            "walls": [w.to_foundry() for w in self.walls],
            "lights": [light.to_foundry() for light in self.lights],
            "padding": self.padding,
        }


@dataclass
class GeneratedMap:
    """A complete generated battlemap."""
    id: str
    name: str
    archetype: Archetype
    image: np.ndarray
    scene: SceneDescriptor
    rooms: List[Room]
    doors: List[Door]
    grid: TileGrid
    grid_width: int
    grid_height: int
    cell_size: int
    file_name: str
    seed: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response (pixels excluded)."""
        return {
            "id": self.id,
            "name": self.name,
            "archetype": self.archetype.value,
            "grid_width": self.grid_width,
            "grid_height": self.grid_height,
            "cell_size": self.cell_size,
            "seed": self.seed,
            "file_name": self.file_name,
            "rooms": [r.to_dict() for r in self.rooms],
            "doors": [d.to_dict() for d in self.doors],
            "scene": self.scene.to_foundry(),
        }


def clamp_dimension(value: Union[int, float, str]) -> int:
    """Clamp a grid dimension to the supported range."""
    return max(MIN_DIMENSION, min(MAX_DIMENSION, int(value)))


def _validate_grid_size(grid_size: Any) -> int:
    try:
        size = int(grid_size)
    except (TypeError, ValueError):
        raise MapValidationError("grid_size", "Cell size must be an integer", grid_size)
    if size < 1:
        raise MapValidationError("grid_size", "Cell size must be at least 1 pixel", grid_size)
    return size


def generate_map(
    archetype: Union[str, Archetype, None] = None,
    width: Optional[int] = None,
    height: Optional[int] = None,
    grid_size: Optional[int] = None,
    name: Optional[str] = None,
    seed: Optional[int] = None,
) -> GeneratedMap:
    """
    Generate a battlemap.

    Args:
        archetype: Archetype or tag ("dungeon", "cave", "town", ...); unknown tags make a dungeon
        width: Grid width in cells, clamped to [20, 80]
        height: Grid height in cells, clamped to [20, 80]
        grid_size: Pixels per cell
        name: Scene display name
        seed: Random seed for reproducibility; drawn and recorded if omitted

    Returns:
        GeneratedMap with image, scene, rooms and doors

    Raises:
        MapValidationError: If grid_size is not a positive integer
    """
    settings = get_settings()
    kind = resolve_archetype(archetype)
    grid_w = clamp_dimension(settings.DEFAULT_WIDTH if width is None else width)
    grid_h = clamp_dimension(settings.DEFAULT_HEIGHT if height is None else height)
    cell = _validate_grid_size(settings.DEFAULT_GRID_SIZE if grid_size is None else grid_size)
    name = name or f"Generated {kind.value.title()}"
    if seed is None:
        seed = random.SystemRandom().randrange(2 ** 32)

    rng = random.Random(seed)
    started = time.perf_counter()

    grid, rooms, doors = GENERATORS[kind](grid_w, grid_h, rng)
    grid.freeze()

    walls = merge_walls(derive_walls(grid, doors, cell))
    lights = place_lights(rooms, cell)
    image = rasterize(grid, doors, rooms, cell, kind, rng)

    style = SCENE_STYLES[kind]
    scene = SceneDescriptor(
        name=name,
        width=grid_w * cell,
        height=grid_h * cell,
        grid=GridConfig(size=cell),
        background_color=style.background_color,
        token_vision=style.token_vision,
        fog_exploration=style.fog_exploration,
        walls=walls,
        lights=lights,
    )

    logger.info(
        f"Generated {kind.value} map '{name}' ({grid_w}x{grid_h} @ {cell}px, seed={seed}): "
        f"{len(rooms)} rooms, {len(doors)} doors, {len(walls)} walls, {len(lights)} lights "
        f"in {time.perf_counter() - started:.2f}s"
    )

    return GeneratedMap(
        id=str(uuid.uuid4()),
        name=name,
        archetype=kind,
        image=image,
        scene=scene,
        rooms=rooms,
        doors=doors,
        grid=grid,
        grid_width=grid_w,
        grid_height=grid_h,
        cell_size=cell,
        file_name=f"{int(time.time() * 1000)}-{kind.value}.png",
        seed=seed,
    )


def generate_from_request(request: "MapRequest") -> GeneratedMap:
    """Generate a map from a validated request model."""
    return generate_map(
        archetype=request.archetype,
        width=request.width,
        height=request.height,
        grid_size=request.grid_size,
        name=request.name,
        seed=request.seed,
    )
