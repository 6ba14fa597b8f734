"""
Shared layout math.

Every quantity that base plate, border and label must agree on is derived
here, from the config alone, so the three parts stay aligned.

Coordinates: the plate's ``height`` runs along x (the "top" edge of the tag
is at -x) and its ``width`` along y (the "left" edge is at -y). Label lines
are laid out in text space and rotated 90 degrees about z, so a line's
reading direction runs along +y and its glyph height along -x.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Tuple

from keytag.config import (
    BaseShape,
    TagConfig,
    TextAlign,
    TextPlacement,
    available_width,
)
from keytag.contracts import Solid
from keytag.geometry import bounding_box
from keytag.glyphs import FontStyle, measure_text, strip_emphasis

LINE_HEIGHT = 1.5

# The border's outer profile for top placement is pulled in by this much;
# without it the frame and plate disagree along the top edge. Unverified
# against a reference render, kept as-is.
BORDER_TOP_CORRECTION = 0.1

TextMeasure = Callable[[str, FontStyle, float, float, str], Solid]

__all__ = [
    "LINE_HEIGHT",
    "BORDER_TOP_CORRECTION",
    "LineSlot",
    "available_width",
    "corner_radius",
    "text_lines",
    "text_render_width",
    "text_base_offset",
    "text_top_offset",
    "text_left_offset",
    "plate_shift",
    "line_position",
]


def corner_radius(config: TagConfig) -> float:
    if config.base.shape is BaseShape.ROUNDED_RECTANGLE:
        return config.base.corner_radius
    return 0.0


def text_lines(message: str) -> List[str]:
    return message.strip().split("\n")


def text_render_width(config: TagConfig, measure: TextMeasure = measure_text) -> float:
    """Widest line of the unwrapped message, measured in the plain style.

    Emphasis markers are stripped; the style they select is not used here.
    """
    base = config.base
    if not base.has_text:
        return 0.0
    widest = 0.0
    for line in text_lines(base.text_message):
        text, _ = strip_emphasis(line)
        solid = measure(text, FontStyle.PLAIN, base.text_size, base.text_depth, base.font_family)
        widest = max(widest, float(bounding_box(solid)[0]))
    return widest


def text_base_offset(config: TagConfig, measure: TextMeasure = measure_text) -> float:
    """Extra plate length reserved for the label."""
    base = config.base
    if not base.has_text:
        return 0.0
    placement = base.text_placement
    if placement in (TextPlacement.TOP, TextPlacement.BOTTOM):
        num_lines = len(text_lines(base.text_message))
        return base.text_size * num_lines * LINE_HEIGHT + 2 * base.text_margin
    if placement.is_edge:
        return text_render_width(config, measure) + 2 * base.text_margin
    return 0.0


def text_top_offset(config: TagConfig, measure: TextMeasure = measure_text) -> float:
    """Border-only compensation for top placement."""
    if config.base.text_placement is TextPlacement.TOP:
        return 2 * text_base_offset(config, measure) - BORDER_TOP_CORRECTION
    return 0.0


def text_left_offset(config: TagConfig, measure: TextMeasure = measure_text) -> float:
    """Border-only compensation for left placement."""
    if config.base.text_placement is TextPlacement.LEFT:
        return 2 * text_base_offset(config, measure)
    return 0.0


def plate_shift(config: TagConfig, offset: float) -> Tuple[float, float]:
    """(dx, dy) moving the plate so the label area sits beside the content."""
    if offset <= 0:
        return (0.0, 0.0)
    return {
        TextPlacement.BOTTOM: (offset / 2, 0.0),
        TextPlacement.TOP: (-offset / 2, 0.0),
        TextPlacement.CENTER: (0.0, 0.0),
        TextPlacement.LEFT: (0.0, -offset / 2),
        TextPlacement.RIGHT: (0.0, offset / 2),
    }[config.base.text_placement]


# ─── Per-line placement ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class LineSlot:
    """One label line being placed."""
    index: int
    count: int
    width: float  # measured width of this line
    max_width: float = 0.0  # widest line + margins, edge placements only


def _border(config: TagConfig) -> float:
    return config.base.border_width if config.base.has_border else 0.0


# Position across the plate (x) for top/bottom/center placements.
LINE_OFFSETS: Dict[TextPlacement, Callable[[TagConfig, LineSlot], float]] = {
    TextPlacement.TOP: lambda c, s: (
        -c.base.height / 2 - c.base.text_margin - c.base.text_size * s.index * LINE_HEIGHT
    ),
    TextPlacement.BOTTOM: lambda c, s: (
        c.base.height / 2 + c.base.text_margin
        + c.base.text_size * (s.index + 1) * LINE_HEIGHT - _border(c)
    ),
    TextPlacement.CENTER: lambda c, s: (
        (-s.count * c.base.text_size / 2 if s.count > 1 else 0.0)
        + c.base.text_size / 2 + c.base.text_size * s.index * LINE_HEIGHT
    ),
}

# Position along the line (y) for top/bottom/center placements.
LINE_ALIGNMENTS: Dict[TextAlign, Callable[[TagConfig, LineSlot], float]] = {
    TextAlign.LEFT: lambda c, s: -available_width(c) / 2 + c.base.text_margin,
    TextAlign.CENTER: lambda c, s: -s.width / 2,
    TextAlign.RIGHT: lambda c, s: -s.width + available_width(c) / 2 - c.base.text_margin,
}

# Position beside the plate (y) for left/right placements; lines are centred
# inside the reserved strip.
SIDE_OFFSETS: Dict[TextPlacement, Callable[[TagConfig, LineSlot], float]] = {
    TextPlacement.LEFT: lambda c, s: (
        -c.base.width / 2 - s.width - (s.max_width - s.width) / 2 + _border(c)
    ),
    TextPlacement.RIGHT: lambda c, s: (
        c.base.width / 2 + (s.max_width - s.width) / 2 - _border(c)
    ),
}

# Stacking of lines (x) for left/right placements: left reads as top,
# right as bottom.
SIDE_ALIGNMENTS: Dict[TextAlign, Callable[[TagConfig, LineSlot], float]] = {
    TextAlign.LEFT: lambda c, s: (
        -c.base.height / 2 + c.base.text_margin + c.base.text_size * (s.index + 1) * LINE_HEIGHT
    ),
    TextAlign.CENTER: lambda c, s: (
        c.base.text_size / 2 if s.count == 1
        else c.base.text_size * (s.index + 1) * LINE_HEIGHT
        - s.count * c.base.text_size * LINE_HEIGHT / 2
    ),
    TextAlign.RIGHT: lambda c, s: (
        c.base.height / 2 - c.base.text_margin
        - c.base.text_size * (s.count - s.index) * LINE_HEIGHT + c.base.text_size
    ),
}


def line_position(config: TagConfig, slot: LineSlot) -> Tuple[float, float]:
    """(x, y) origin of a label line before the 90 degree rotation is applied."""
    placement = config.base.text_placement
    align = config.base.text_align
    if placement.is_edge:
        return (SIDE_ALIGNMENTS[align](config, slot), SIDE_OFFSETS[placement](config, slot))
    return (LINE_OFFSETS[placement](config, slot), LINE_ALIGNMENTS[align](config, slot))
