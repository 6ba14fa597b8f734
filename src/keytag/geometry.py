"""
Solid construction and boolean helpers.

Thin wrappers over trimesh so that the layout code only ever sees
``Solid``s. Booleans run on world-space copies of both operands and return
a solid with an identity transform; any failure of the boolean engine is
raised as ``GenerationError``.
"""

import logging
from typing import Iterable, List, Optional, Union

import numpy as np
import trimesh
from shapely.geometry import MultiPolygon, Polygon

from keytag.contracts import Material, Profile, Solid

logger = logging.getLogger(__name__)

CYLINDER_SECTIONS = 32


class GenerationError(RuntimeError):
    """A geometry step failed; no partial result is returned."""


def extrude_profile(
    profile: Union[Profile, Polygon, MultiPolygon],
    depth: float,
    material: Material = Material.BASE,
) -> Solid:
    """Extrude a profile (or shapely polygon) from z=0 up to ``depth``."""
    shape = profile.polygon() if isinstance(profile, Profile) else profile
    return Solid(mesh=extrude_shape(shape, depth), material=material)


def extrude_shape(shape: Union[Polygon, MultiPolygon], depth: float) -> trimesh.Trimesh:
    if shape.is_empty or depth <= 0:
        return trimesh.Trimesh()
    if isinstance(shape, MultiPolygon):
        meshes = [trimesh.creation.extrude_polygon(p, height=depth) for p in shape.geoms if not p.is_empty]
        return trimesh.util.concatenate(meshes) if meshes else trimesh.Trimesh()
    return trimesh.creation.extrude_polygon(shape, height=depth)


def cylinder(radius: float, height: float, material: Material = Material.BASE) -> Solid:
    """Z-axis cylinder centred on the origin."""
    mesh = trimesh.creation.cylinder(radius=radius, height=height, sections=CYLINDER_SECTIONS)
    return Solid(mesh=mesh, material=material)


def box(size_x: float, size_y: float, size_z: float, material: Material = Material.BASE) -> Solid:
    """Axis-aligned box centred on the origin."""
    return Solid(mesh=trimesh.creation.box(extents=[size_x, size_y, size_z]), material=material)


def bounding_box(solid: Solid) -> np.ndarray:
    """World-space (x, y, z) size of a solid."""
    lo, hi = solid.bounds()
    return hi - lo


def subtract(a: Solid, b: Solid) -> Solid:
    """Boolean difference ``a - b``, keeping the material of ``a``."""
    return Solid(mesh=_boolean("difference", a, b), material=a.material)


def union(a: Solid, b: Solid) -> Solid:
    """Boolean union of two solids, keeping the material of ``a``."""
    return Solid(mesh=_boolean("union", a, b), material=a.material)


def flatten(
    solids: Iterable[Solid],
    material: Material = Material.BASE,
    colors: Optional[dict] = None,
) -> Solid:
    """Concatenate solids (no boolean) with their transforms baked in.

    With ``colors`` (material -> RGBA) each constituent's faces are painted
    with the colour of its own material before merging.
    """
    meshes: List[trimesh.Trimesh] = []
    for solid in solids:
        if solid.is_empty:
            continue
        mesh = solid.world_mesh()
        if colors is not None:
            mesh.visual.face_colors = colors[solid.material]
        meshes.append(mesh)
    if not meshes:
        return Solid(mesh=trimesh.Trimesh(), material=material)
    return Solid(mesh=trimesh.util.concatenate(meshes), material=material)


def _boolean(operation: str, a: Solid, b: Solid) -> trimesh.Trimesh:
    meshes = [a.world_mesh(), b.world_mesh()]
    try:
        if operation == "difference":
            result = trimesh.boolean.difference(meshes)
        else:
            result = trimesh.boolean.union(meshes)
    except Exception as e:
        raise GenerationError(f"Boolean {operation} failed: {e}") from e
    if result is None or len(result.faces) == 0:
        raise GenerationError(f"Boolean {operation} produced an empty mesh")
    logger.debug(
        "Boolean %s: %d + %d faces -> %d faces",
        operation, len(meshes[0].faces), len(meshes[1].faces), len(result.faces),
    )
    return result
