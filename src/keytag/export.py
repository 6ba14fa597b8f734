"""Writing generated parts to mesh files and a JSON summary."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from keytag.contracts import GenerationResult

logger = logging.getLogger(__name__)

FILE_TYPES = ("stl", "obj", "ply", "glb")


def export_parts(
    result: GenerationResult,
    output_dir,
    name: str = "tag",
    file_type: str = "stl",
    part_names: Optional[Iterable[str]] = None,
) -> Dict[str, Path]:
    """Write one mesh file per part, named ``<name>_<part>.<file_type>``.

    Returns mapping of part name -> written path.
    """
    if file_type not in FILE_TYPES:
        raise ValueError(f"Unsupported file type {file_type!r}, use one of {FILE_TYPES}")
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    wanted = set(part_names) if part_names is not None else None
    colors = result.config.material_colors
    written: Dict[str, Path] = {}
    for part, solid in result.parts.items():
        if wanted is not None and part not in wanted:
            continue
        if solid.is_empty:
            logger.warning("Skipping empty part %s", part)
            continue
        mesh = solid.world_mesh()
        if file_type != "stl" and part != "combined":
            # combined already carries per-face colours of its constituents
            mesh.visual.face_colors = colors[solid.material]
        path = output_dir / f"{name}_{part}.{file_type}"
        mesh.export(str(path))
        logger.info("Wrote %s (%d faces)", path, len(mesh.faces))
        written[part] = path
    return written


def summarize(result: GenerationResult) -> Dict[str, Any]:
    """Machine-readable overview of a generation result."""
    parts = {}
    for part, solid in result.parts.items():
        lo, hi = solid.bounds()
        parts[part] = {
            "material": solid.material.value,
            "faces": int(len(solid.mesh.faces)),
            "extents_mm": [round(float(v), 3) for v in (hi - lo)],
            "bounds_min_mm": [round(float(v), 3) for v in lo],
        }
    return {
        "parts": parts,
        "lines": list(result.lines),
        "message": result.message,
        "config": result.config.to_dict(),
        "colors": {m.value: list(rgba) for m, rgba in result.config.material_colors.items()},
    }


def write_json(path: Path, payload: Dict[str, Any]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

