"""
Utility functions for Foundry VTT export.

Provides ID generation and file name helpers.
"""

import hashlib
import re


def generate_foundry_id(source_id: str, prefix: str = "") -> str:
    """
    Generate a deterministic 16-character ID for Foundry from our source ID.

    Foundry VTT uses 16-character alphanumeric IDs for documents.
    Re-exporting the same map produces the same scene ID.

    Args:
        source_id: Our internal ID (e.g., a map id)
        prefix: Optional prefix for namespacing (e.g., "scene_")

    Returns:
        16-character hexadecimal ID
    """
    combined = f"{prefix}{source_id}"
    return hashlib.md5(combined.encode()).hexdigest()[:16]


def safe_file_stem(name: str) -> str:
    """Replace every non-alphanumeric character with an underscore."""
    return re.sub(r"[^a-zA-Z0-9]", "_", name or "")
