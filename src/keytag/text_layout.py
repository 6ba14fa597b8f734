"""
Label text layout.

Turns the (multi-line, ``*``-emphasised) message into one flattened label
solid. Lines under top/bottom/center placement are wrapped character by
character so that each fits ``available_width``; characters that do not fit
move to a new line inserted directly below, which keeps the emphasis of the
line it came from. Left/right placements never reflow: the plate is widened
to the widest line instead (see ``layout.text_base_offset``).

Wrapping an already wrapped message changes nothing, so the returned lines
can be fed back in as the message.
"""

import logging
import math
from dataclasses import dataclass
from typing import List

from keytag.config import TagConfig, available_width
from keytag.contracts import Material, Solid
from keytag.geometry import bounding_box, flatten
from keytag.glyphs import FontStyle, apply_emphasis, measure_text, strip_emphasis
from keytag.layout import (
    LineSlot,
    TextMeasure,
    line_position,
    text_lines,
    text_render_width,
)

logger = logging.getLogger(__name__)


@dataclass
class MeasuredLine:
    """A final label line with its measured solid."""
    raw: str  # line as written back, emphasis markers included
    text: str
    level: int
    solid: Solid
    width: float

    @property
    def style(self) -> FontStyle:
        return FontStyle.from_level(self.level)


@dataclass
class LabelLayout:
    solid: Solid
    lines: List[str]


def wrap_lines(config: TagConfig, measure: TextMeasure = measure_text) -> List[MeasuredLine]:
    """Measure every line, wrapping those wider than the available width."""
    base = config.base
    limit = available_width(config)
    reflow = not base.text_placement.is_edge
    lines = text_lines(base.text_message)
    measured: List[MeasuredLine] = []

    i = 0
    while i < len(lines):
        text, level = strip_emphasis(lines[i])
        style = FontStyle.from_level(level)
        solid = measure(text, style, base.text_size, base.text_depth, base.font_family)
        width = float(bounding_box(solid)[0])

        overflowed = False
        # a lone glyph that still does not fit stays, so every line makes progress
        while reflow and width > limit and len(text) > 1:
            # move the last character to the front of the next line
            last_char = text[-1]
            text = text[:-1]
            if not overflowed:
                lines.insert(i + 1, last_char)
                overflowed = True
            else:
                lines[i + 1] = last_char + lines[i + 1]
            solid = measure(text, style, base.text_size, base.text_depth, base.font_family)
            width = float(bounding_box(solid)[0])

        if overflowed:
            logger.debug("Line %d overflowed, carried %r to a new line", i, lines[i + 1])
            lines[i] = apply_emphasis(text, level)
            lines[i + 1] = apply_emphasis(lines[i + 1], level)

        measured.append(MeasuredLine(raw=lines[i], text=text, level=level, solid=solid, width=width))
        i += 1

    return measured


def build_label(config: TagConfig, measure: TextMeasure = measure_text) -> LabelLayout:
    """Lay out and merge all label lines into one detail solid.

    Lines are placed after wrapping finishes, so center placement sees the
    final line count.
    """
    base = config.base
    measured = wrap_lines(config, measure)
    count = len(measured)
    max_width = 0.0
    if base.text_placement.is_edge:
        max_width = text_render_width(config, measure) + 2 * base.text_margin

    placed: List[Solid] = []
    for index, line in enumerate(measured):
        slot = LineSlot(index=index, count=count, width=line.width, max_width=max_width)
        x, y = line_position(config, slot)
        solid = line.solid
        solid.position = [x, y, base.depth]
        solid.rotation = [0.0, 0.0, math.pi / 2]
        placed.append(solid)

    lines = [line.raw for line in measured]
    if len(lines) != len(text_lines(base.text_message)):
        logger.info("Label wrapped from %d to %d lines", len(text_lines(base.text_message)), len(lines))
    return LabelLayout(solid=flatten(placed, material=Material.DETAIL), lines=lines)
