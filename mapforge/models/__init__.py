# Boundary models

from .map_request import MapRequest

__all__ = [
    "MapRequest",
]
