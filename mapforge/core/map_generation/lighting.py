"""
Heuristic torch placement.

Every room gets a warm torch at its centre, sized to the room. Rooms large
enough to have dark corners get four dimmer torches inset one cell from
each corner.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, Iterable, List, Tuple

from .grid import Room

TORCH_COLOR = "#ff9329"
MAX_DIM_RADIUS = 8


@dataclass(frozen=True)
class LightAnimation:
    """Foundry light animation settings."""
    type: str = "torch"
    speed: int = 5
    intensity: int = 5

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "speed": self.speed, "intensity": self.intensity}


@dataclass(frozen=True)
class LightSource:
    """A light at a pixel position. Radii are in grid units."""
    x: float
    y: float
    dim: int
    bright: int
    color: str = TORCH_COLOR
    alpha: float = 0.4
    angle: int = 360
    animation: LightAnimation = field(default_factory=LightAnimation)
    rotation: int = 0
    hidden: bool = False

    def to_foundry(self) -> Dict[str, Any]:
        """Convert to a Foundry VTT ambient light document."""
        return {
            "x": self.x,
            "y": self.y,
            "config": {
                "dim": self.dim,
                "bright": self.bright,
                "angle": self.angle,
                "color": self.color,
                "alpha": self.alpha,
                "animation": self.animation.to_dict(),
            },
            "rotation": self.rotation,
            "hidden": self.hidden,
        }


def _cell_center(cx: int, cy: int, cell_size: int) -> Tuple[float, float]:
    return (cx + 0.5) * cell_size, (cy + 0.5) * cell_size


def room_lights(room: Room, cell_size: int) -> List[LightSource]:
    """
    Lights for a single room.

    Args:
        room: Room to light
        cell_size: Pixels per cell

    Returns:
        One centre torch, plus four corner torches for rooms at least 6x5
    """
    dim = min(max(room.width, room.height), MAX_DIM_RADIUS)
    x, y = _cell_center(room.center_x, room.center_y, cell_size)
    lights = [LightSource(x, y, dim=dim, bright=max(dim // 2, 2))]

    if room.width >= 6 and room.height >= 5:
        corners = (
            (room.x + 1, room.y + 1),
            (room.x + room.width - 2, room.y + 1),
            (room.x + 1, room.y + room.height - 2),
            (room.x + room.width - 2, room.y + room.height - 2),
        )
        for cx, cy in corners:
            x, y = _cell_center(cx, cy, cell_size)
            lights.append(LightSource(
                x, y, dim=4, bright=2, alpha=0.3,
                animation=LightAnimation(speed=4, intensity=4),
            ))

    return lights


def place_lights(rooms: Iterable[Room], cell_size: int) -> List[LightSource]:
    """Place lights for every room, in room order."""
    lights: List[LightSource] = []
    for room in rooms:
        lights.extend(room_lights(room, cell_size))
    return lights
