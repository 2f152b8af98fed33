"""
Map archetypes and the tags callers may use for them.
"""
from enum import Enum
from typing import Dict, Union


class Archetype(str, Enum):
    """Map families, one generation strategy each."""
    DUNGEON = "dungeon"
    CAVE = "cave"
    TOWN = "town"
    BUILDING = "building"


# Caller-facing tags. Anything not listed (including "other") is a dungeon.
ARCHETYPE_ALIASES: Dict[str, Archetype] = {
    "dungeon": Archetype.DUNGEON,
    "castle": Archetype.DUNGEON,
    "other": Archetype.DUNGEON,
    "cave": Archetype.CAVE,
    "wilderness": Archetype.CAVE,
    "town": Archetype.TOWN,
    "city": Archetype.TOWN,
    "building": Archetype.BUILDING,
    "tavern": Archetype.BUILDING,
}


def resolve_archetype(tag: Union[str, Archetype, None]) -> Archetype:
    """
    Resolve a caller-supplied tag to an archetype.

    Args:
        tag: Archetype, alias string (case-insensitive) or None

    Returns:
        The matching Archetype; unknown or empty tags fall back to DUNGEON
    """
    if isinstance(tag, Archetype):
        return tag
    if not tag:
        return Archetype.DUNGEON
    return ARCHETYPE_ALIASES.get(str(tag).strip().lower(), Archetype.DUNGEON)
