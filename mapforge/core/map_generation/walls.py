"""
Wall derivation for VTT scenes.

Walls are derived from tile adjacency: every edge between a floor-like
cell and a wall (or the map edge) becomes a 1-cell segment in pixel
coordinates. Segments are then merged along shared lines so a long
straight wall is one record instead of dozens.
"""
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, Any, Iterable, List, Set, Tuple

from .grid import Door, TileGrid


class DoorState(IntEnum):
    """Foundry door states."""
    CLOSED = 0
    OPEN = 1
    LOCKED = 2


@dataclass(frozen=True)
class WallSegment:
    """A wall segment in pixel coordinates."""
    x0: int
    y0: int
    x1: int
    y1: int
    blocks_movement: bool = True
    blocks_vision: bool = True
    blocks_sound: bool = True
    blocks_light: bool = True
    is_door: bool = False
    door_state: DoorState = DoorState.CLOSED

    @property
    def is_horizontal(self) -> bool:
        return self.y0 == self.y1 and self.x0 != self.x1

    @property
    def is_vertical(self) -> bool:
        return self.x0 == self.x1 and self.y0 != self.y1

    def flags(self) -> Tuple[bool, bool, bool, bool, bool, DoorState]:
        """Everything except geometry; segments only merge when these match."""
        return (self.blocks_movement, self.blocks_vision, self.blocks_sound,
                self.blocks_light, self.is_door, self.door_state)

    def to_foundry(self) -> Dict[str, Any]:
        """Convert to a Foundry VTT wall document."""
        return {
            "c": [self.x0, self.y0, self.x1, self.y1],
            "move": int(self.blocks_movement),
            "sense": int(self.blocks_vision),
            "sound": int(self.blocks_sound),
            "door": int(self.is_door),
            "ds": int(self.door_state),
            "dir": 0,
            "light": int(self.blocks_light),
        }


def derive_walls(grid: TileGrid, doors: Iterable[Door], cell_size: int) -> List[WallSegment]:
    """
    Emit one segment for every floor/wall boundary edge.

    Args:
        grid: Tile grid
        doors: Door cells; edges touching one become door segments
        cell_size: Pixels per cell

    Returns:
        Unmerged 1-cell segments, each edge at most once
    """
    door_cells: Set[Tuple[int, int]] = {(d.x, d.y) for d in doors}
    seen: Set[Tuple[int, int, int, int]] = set()
    segments: List[WallSegment] = []

    for x, y, _ in grid.cells():
        if not grid.is_passable(x, y):
            continue

        edges = (
            (x, y, x + 1, y, x, y - 1),          # top
            (x, y + 1, x + 1, y + 1, x, y + 1),  # bottom
            (x, y, x, y + 1, x - 1, y),          # left
            (x + 1, y, x + 1, y + 1, x + 1, y),  # right
        )
        for ex0, ey0, ex1, ey1, nx, ny in edges:
            if not grid.is_wall(nx, ny):
                continue

            key = (min(ex0, ex1), min(ey0, ey1), max(ex0, ex1), max(ey0, ey1))
            if key in seen:
                continue
            seen.add(key)

            is_door = (x, y) in door_cells or (nx, ny) in door_cells
            segments.append(WallSegment(
                ex0 * cell_size,
                ey0 * cell_size,
                ex1 * cell_size,
                ey1 * cell_size,
                blocks_movement=True,
                blocks_vision=not is_door,
                blocks_sound=True,
                blocks_light=not is_door,
                is_door=is_door,
                door_state=DoorState.CLOSED,
            ))

    return segments


def _merge_aligned(segments: List[WallSegment], horizontal: bool) -> List[WallSegment]:
    groups: Dict[int, List[WallSegment]] = {}
    for seg in segments:
        groups.setdefault(seg.y0 if horizontal else seg.x0, []).append(seg)

    merged = []
    for key in sorted(groups):
        ordered = sorted(groups[key], key=lambda s: (s.x0, s.x1) if horizontal else (s.y0, s.y1))
        current = ordered[0]
        for seg in ordered[1:]:
            touching = (current.x1, current.y1) == (seg.x0, seg.y0)
            if touching and current.flags() == seg.flags():
                current = replace(current, x1=seg.x1, y1=seg.y1)
            else:
                merged.append(current)
                current = seg
        merged.append(current)
    return merged


def merge_walls(segments: Iterable[WallSegment]) -> List[WallSegment]:
    """
    Fuse contiguous collinear segments with identical flags.

    Door segments are never merged. Segments that are neither horizontal
    nor vertical pass through unchanged. Merging an already merged list
    returns it unchanged.

    Returns:
        Horizontal runs, then vertical runs, then everything passed through
    """
    horizontal, vertical, passthrough = [], [], []
    for seg in segments:
        if seg.is_door:
            passthrough.append(seg)
        elif seg.is_horizontal:
            horizontal.append(seg)
        elif seg.is_vertical:
            vertical.append(seg)
        else:
            passthrough.append(seg)

    return _merge_aligned(horizontal, True) + _merge_aligned(vertical, False) + passthrough
