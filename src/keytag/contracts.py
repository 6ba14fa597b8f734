"""Value types shared by the tag generation engine."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

import numpy as np
import trimesh
from shapely.geometry import Polygon
from shapely.geometry.polygon import orient

if TYPE_CHECKING:
    from keytag.config import TagConfig

Vec3 = Tuple[float, float, float]

# Segments per quarter circle when tracing rounded corners.
ARC_SEGMENTS = 12
# outline points closer than this are merged
POINT_TOLERANCE = 1e-9

PART_BASE = "base"
PART_BORDER = "border"
PART_SUBTITLE = "subtitle"
PART_KEYCHAIN = "keychainAttachment"
PART_COMBINED = "combined"

PART_NAMES = (PART_SUBTITLE, PART_BASE, PART_BORDER, PART_KEYCHAIN, PART_COMBINED)


class Material(Enum):
    """Two-material split used when exporting colored meshes."""
    BASE = "base"
    DETAIL = "detail"


@dataclass(frozen=True)
class Profile:
    """Closed 2D rectangle with independently rounded corners.

    ``width`` runs along x and ``height`` along y. Radii are ordered
    (top_left, top_right, bottom_right, bottom_left) where "top" is +y.
    """
    x: float
    y: float
    width: float
    height: float
    radii: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def polygon(self) -> Polygon:
        """Trace the outline counter-clockwise starting at the bottom edge."""
        x0, y0, x1, y1 = self.bounds
        r_tl, r_tr, r_br, r_bl = self.radii
        points: List[Tuple[float, float]] = []
        # (corner centre, radius, start angle) walking CCW
        corners = [
            ((x1 - r_br, y0 + r_br), r_br, -math.pi / 2),
            ((x1 - r_tr, y1 - r_tr), r_tr, 0.0),
            ((x0 + r_tl, y1 - r_tl), r_tl, math.pi / 2),
            ((x0 + r_bl, y0 + r_bl), r_bl, math.pi),
        ]
        for (cx, cy), radius, start in corners:
            if radius <= 0:
                _append_point(points, (cx, cy))
                continue
            for k in range(ARC_SEGMENTS + 1):
                angle = start + (math.pi / 2) * k / ARC_SEGMENTS
                _append_point(points, (cx + radius * math.cos(angle), cy + radius * math.sin(angle)))
        # arcs of a fully rounded side meet; the closing point may repeat the first
        if len(points) > 1 and _same_point(points[-1], points[0]):
            points.pop()
        return orient(Polygon(points).buffer(0), sign=1.0)


@dataclass
class Solid:
    """A mesh with a local transform and a material tag.

    The transform is applied as rotation (Euler xyz, radians) followed by
    translation, matching how parts are positioned on the tag.
    """
    mesh: trimesh.Trimesh
    material: Material = Material.BASE
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self):
        self.position = np.asarray(self.position, dtype=float)
        self.rotation = np.asarray(self.rotation, dtype=float)

    @property
    def matrix(self) -> np.ndarray:
        rx, ry, rz = self.rotation
        matrix = trimesh.transformations.euler_matrix(rx, ry, rz, axes="rxyz")
        matrix[:3, 3] = self.position
        return matrix

    @property
    def is_empty(self) -> bool:
        return len(self.mesh.faces) == 0

    def world_mesh(self) -> trimesh.Trimesh:
        """Copy of the mesh with the transform baked in."""
        baked = self.mesh.copy()
        if not self.is_empty:
            baked.apply_transform(self.matrix)
        return baked

    def bounds(self) -> np.ndarray:
        """World-space (2, 3) bounds; zeros for an empty solid."""
        if self.is_empty:
            return np.zeros((2, 3))
        return np.asarray(self.world_mesh().bounds, dtype=float)


PartSet = Dict[str, Solid]


@dataclass
class GenerationResult:
    """Everything produced by one generation call."""
    parts: PartSet
    lines: List[str]
    config: "TagConfig"
    label: Optional[Solid] = None

    @property
    def message(self) -> str:
        return "\n".join(self.lines)


def _same_point(a: Tuple[float, float], b: Tuple[float, float]) -> bool:
    return abs(a[0] - b[0]) <= POINT_TOLERANCE and abs(a[1] - b[1]) <= POINT_TOLERANCE


def _append_point(points: List[Tuple[float, float]], point: Tuple[float, float]) -> None:
    if points and _same_point(points[-1], point):
        return
    points.append(point)
