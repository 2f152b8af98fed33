"""
Map request model.

The inbound boundary for map generation: loose caller input is coerced
into parameters the generator accepts without further checks.
"""
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from mapforge.config import get_settings
from mapforge.core.map_generation.archetypes import Archetype, resolve_archetype
from mapforge.core.map_generation.generator import clamp_dimension

_settings = get_settings()


class MapRequest(BaseModel):
    """Request to generate a battlemap."""
    archetype: Archetype = Field(default=Archetype.DUNGEON, description="Map type or alias (e.g. 'tavern', 'city')")
    width: int = Field(default=_settings.DEFAULT_WIDTH, description="Grid width in cells (clamped to 20-80)")
    height: int = Field(default=_settings.DEFAULT_HEIGHT, description="Grid height in cells (clamped to 20-80)")
    grid_size: int = Field(default=_settings.DEFAULT_GRID_SIZE, ge=1, description="Pixels per grid cell")
    name: Optional[str] = Field(default=None, max_length=200, description="Scene name")
    seed: Optional[int] = Field(default=None, description="Random seed")

    @field_validator("archetype", mode="before")
    @classmethod
    def normalize_archetype(cls, value):
        return resolve_archetype(value)

    @field_validator("width", "height", mode="after")
    @classmethod
    def clamp_dimensions(cls, value: int) -> int:
        return clamp_dimension(value)
