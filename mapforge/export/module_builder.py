"""
Foundry VTT Scene Package Builder.

Packages a generated map into a ZIP holding the scene document, its
background image and a short README.
"""

import io
import json
import logging
import zipfile

from mapforge.core.errors import ExportError
from mapforge.core.map_generation.generator import GeneratedMap
from .scene_exporter import build_foundry_scene, encode_png
from .utils import safe_file_stem

logger = logging.getLogger("mapforge.export")

SCENE_FILE = "scene.json"
README_FILE = "README.md"


def build_readme(generated_map: GeneratedMap) -> str:
    """Build the README shipped alongside the scene."""
    scene = generated_map.scene
    return f"""# {generated_map.name}

Procedurally generated {generated_map.archetype.value} battlemap.

- Grid: {generated_map.grid_width} x {generated_map.grid_height} cells at {generated_map.cell_size}px
- Rooms: {len(generated_map.rooms)}
- Walls: {len(scene.walls)}
- Lights: {len(scene.lights)}
- Seed: {generated_map.seed}

## Importing

1. Upload `{generated_map.file_name}` to your Foundry VTT data folder
2. Create a scene and use "Import Data" with `{SCENE_FILE}`
3. Point the scene background at the uploaded image if the path differs
"""


def build_scene_package(generated_map: GeneratedMap) -> io.BytesIO:
    """
    Build a scene package as a ZIP file.

    Args:
        generated_map: Map to package

    Returns:
        BytesIO buffer containing the ZIP file

    Raises:
        ExportError: If the image cannot be encoded
    """
    root = safe_file_stem(generated_map.name) or "scene"
    scene = build_foundry_scene(generated_map)
    scene["background"] = {"src": generated_map.file_name}
    image = encode_png(generated_map)

    buffer = io.BytesIO()
    try:
        with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
            zf.writestr(f"{root}/{SCENE_FILE}", json.dumps(scene, indent=2))
            # PNG is already deflated
            zf.writestr(f"{root}/{generated_map.file_name}", image, compress_type=zipfile.ZIP_STORED)
            zf.writestr(f"{root}/{README_FILE}", build_readme(generated_map))
    except (OSError, zipfile.BadZipFile) as e:
        raise ExportError(f"Failed to package scene: {e}") from e

    buffer.seek(0)
    logger.info(f"Packaged scene '{generated_map.name}' ({buffer.getbuffer().nbytes} bytes)")
    return buffer
