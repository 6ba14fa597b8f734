"""
Glyph outlines for label text.

Text runs are turned into shapely polygons with matplotlib's ``TextPath``
(one em == ``size`` model units) and extruded with trimesh. Outline loops
are classified by containment depth so counters (the holes of "o", "A",
...) come out as holes.
"""

import logging
from enum import Enum
from typing import List

from matplotlib.font_manager import FontProperties
from matplotlib.textpath import TextPath
from shapely.geometry import MultiPolygon, Polygon
from shapely.ops import unary_union

from keytag.contracts import Material, Solid
from keytag.geometry import extrude_shape

logger = logging.getLogger(__name__)

DEFAULT_FONT_FAMILY = "DejaVu Sans"


class FontStyle(Enum):
    """Font style by emphasis level (number of ``*`` pairs)."""
    PLAIN = 0
    ITALIC = 1
    BOLD = 2
    BOLD_ITALIC = 3

    @classmethod
    def from_level(cls, level: int) -> "FontStyle":
        return cls(min(max(level, 0), 3))

    def font_properties(self, family: str = DEFAULT_FONT_FAMILY) -> FontProperties:
        bold = self in (FontStyle.BOLD, FontStyle.BOLD_ITALIC)
        italic = self in (FontStyle.ITALIC, FontStyle.BOLD_ITALIC)
        return FontProperties(
            family=family,
            weight="bold" if bold else "normal",
            style="italic" if italic else "normal",
        )


MAX_EMPHASIS = 3


def strip_emphasis(line: str):
    """Remove balanced leading/trailing ``*`` pairs, at most three.

    Returns (text, level).
    """
    text = line
    level = 0
    while len(text) >= 2 and text[0] == "*" and text[-1] == "*":
        text = text[1:-1]
        level += 1
        if level == MAX_EMPHASIS:
            break
    return text, level


def apply_emphasis(text: str, level: int) -> str:
    return "*" * level + text + "*" * level


def text_outline(
    text: str,
    style: FontStyle = FontStyle.PLAIN,
    size: float = 1.0,
    family: str = DEFAULT_FONT_FAMILY,
):
    """2D outline of a single line of text, baseline at y=0."""
    if not text.strip():
        return MultiPolygon()
    path = TextPath((0, 0), text, size=size, prop=style.font_properties(family), usetex=False)
    return _polygons_from_loops(path.to_polygons())


def measure_text(
    text: str,
    style: FontStyle = FontStyle.PLAIN,
    size: float = 1.0,
    depth: float = 1.0,
    family: str = DEFAULT_FONT_FAMILY,
) -> Solid:
    """Extrude one line of text into a detail-material solid."""
    outline = text_outline(text, style, size, family)
    return Solid(mesh=extrude_shape(outline, depth), material=Material.DETAIL)


def _polygons_from_loops(loops) -> MultiPolygon:
    polys: List[Polygon] = []
    for loop in loops:
        if len(loop) < 3:
            continue
        poly = Polygon([(float(x), float(y)) for x, y in loop])
        if not poly.is_valid:
            poly = poly.buffer(0)
        if not poly.is_empty and poly.area > 1e-9:
            polys.append(poly)
    if not polys:
        return MultiPolygon()

    # even depth = filled outline, odd depth = counter
    filled, holes = [], []
    for i, poly in enumerate(polys):
        point = poly.representative_point()
        depth = sum(
            1 for j, other in enumerate(polys)
            if j != i and other.area > poly.area and other.contains(point)
        )
        (holes if depth % 2 else filled).append(poly)

    shape = unary_union(filled)
    if holes:
        shape = shape.difference(unary_union(holes))
    if isinstance(shape, Polygon):
        return MultiPolygon([shape])
    if isinstance(shape, MultiPolygon):
        return shape
    return MultiPolygon([g for g in getattr(shape, "geoms", []) if isinstance(g, Polygon)])
