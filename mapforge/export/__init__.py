"""
Foundry VTT Export Module.

Exports generated battlemaps to Foundry VTT compatible format:
PNG backgrounds, scene documents and packaged scene bundles.
"""

from .scene_exporter import build_foundry_scene, encode_png, scene_export_filename
from .module_builder import build_scene_package
from .utils import generate_foundry_id, safe_file_stem

__all__ = [
    'build_foundry_scene',
    'encode_png',
    'scene_export_filename',
    'build_scene_package',
    'generate_foundry_id',
    'safe_file_stem',
]
