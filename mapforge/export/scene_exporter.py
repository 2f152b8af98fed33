"""
Foundry VTT Scene Exporter.

Turns a generated map into the artifacts a VTT needs: the PNG background
image and the scene document referencing it. Everything happens in
memory; callers decide where bytes end up.
"""

import io
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from PIL import Image

from mapforge.config import get_settings
from mapforge.core.errors import ExportError
from mapforge.core.map_generation.generator import GeneratedMap
from .utils import generate_foundry_id, safe_file_stem

logger = logging.getLogger("mapforge.export")

SCENE_FILE_SUFFIX = "-foundry-scene.json"


def encode_png(generated_map: GeneratedMap, compress_level: Optional[int] = None) -> bytes:
    """
    Encode the map image as a lossless PNG.

    Args:
        generated_map: Map whose RGBA buffer to encode
        compress_level: zlib level 0-9; defaults to the configured level

    Returns:
        PNG file bytes

    Raises:
        ExportError: If the buffer cannot be encoded
    """
    level = get_settings().PNG_COMPRESSION if compress_level is None else compress_level
    buffer = io.BytesIO()
    try:
        Image.fromarray(generated_map.image).save(buffer, format="PNG", compress_level=level)
    except (ValueError, TypeError, OSError) as e:
        raise ExportError(f"Failed to encode map image: {e}") from e

    data = buffer.getvalue()
    logger.debug(f"Encoded {generated_map.file_name}: {len(data)} bytes (level {level})")
    return data


def resolve_asset_url(url: str) -> str:
    """Prefix a relative URL with the configured asset base URL."""
    base = get_settings().ASSET_BASE_URL
    if not base or urlparse(url).scheme:
        return url
    return f"{base.rstrip('/')}/{url.lstrip('/')}"


def build_foundry_scene(generated_map: GeneratedMap, image_url: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the Foundry VTT scene document for a map.

    Args:
        generated_map: Map to export
        image_url: Where the background image is served from, if anywhere

    Returns:
        Scene dictionary ready for JSON serialization
    """
    scene = generated_map.scene.to_foundry()
    scene["_id"] = generate_foundry_id(generated_map.id, prefix="scene_")
    scene["name"] = generated_map.name
    if image_url:
        scene["background"] = {"src": resolve_asset_url(image_url)}
    return scene


def scene_export_filename(name: str) -> str:
    """Download file name for a scene export, e.g. ``Old_Crypt-foundry-scene.json``."""
    return f"{safe_file_stem(name)}{SCENE_FILE_SUFFIX}"
