"""
Procedural Battlemap Generation System.

Generates VTT-ready battlemaps using:
- Feature digging for room-and-corridor dungeons
- Cellular automata for caves
- Block subdivision for towns
- Binary Space Partitioning (BSP) for building interiors
"""

from .archetypes import Archetype, resolve_archetype
from .grid import Door, Layout, Room, Tile, TileGrid
from .walls import DoorState, WallSegment, derive_walls, merge_walls
from .lighting import LightSource, place_lights
from .rasterizer import PALETTES, Palette, rasterize
from .generator import (
    GeneratedMap,
    GridConfig,
    SceneDescriptor,
    clamp_dimension,
    generate_from_request,
    generate_map,
)

__all__ = [
    "Archetype",
    "resolve_archetype",
    "Door",
    "Layout",
    "Room",
    "Tile",
    "TileGrid",
    "DoorState",
    "WallSegment",
    "derive_walls",
    "merge_walls",
    "LightSource",
    "place_lights",
    "PALETTES",
    "Palette",
    "rasterize",
    "GeneratedMap",
    "GridConfig",
    "SceneDescriptor",
    "clamp_dimension",
    "generate_from_request",
    "generate_map",
]
