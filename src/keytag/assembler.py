"""
Tag assembly: runs the generation steps in order and merges the parts.

Order is fixed: label -> base -> border -> keychain attachment -> combined.
The label runs first because wrapping can add lines, and the number of
lines decides how much plate the label needs. The caller's config is never
modified; the wrapped message comes back in ``GenerationResult``.
"""

import asyncio
import logging
import time
from typing import Dict, Optional, Tuple

from keytag.config import TagConfig
from keytag.contracts import (
    PART_BASE,
    PART_BORDER,
    PART_COMBINED,
    PART_KEYCHAIN,
    PART_SUBTITLE,
    GenerationResult,
    Material,
    PartSet,
    Solid,
)
from keytag.composer import build_base, build_border, build_keychain_attachment
from keytag.geometry import flatten
from keytag.glyphs import measure_text
from keytag.layout import TextMeasure
from keytag.text_layout import build_label

logger = logging.getLogger(__name__)


def generate(config: TagConfig, measure: Optional[TextMeasure] = None) -> GenerationResult:
    """Generate every part of a tag.

    Args:
        config: a validated tag configuration (see ``config.check_config``).
        measure: text extrusion function, defaults to ``glyphs.measure_text``.

    Returns:
        GenerationResult with the part set, the wrapped label lines and the
        effective config (message replaced by the wrapped lines).
    """
    if measure is None:
        measure = measure_text
    started = time.perf_counter()
    parts: PartSet = {}
    label: Optional[Solid] = None
    lines = []
    effective = config

    if config.base.has_text:
        layout = build_label(config, measure)
        label = layout.solid
        lines = layout.lines
        effective = config.with_text_message("\n".join(lines))
        if not config.code.invert:
            parts[PART_SUBTITLE] = label

    base = build_base(effective, measure)
    parts[PART_BASE] = base

    if config.base.has_border:
        parts[PART_BORDER] = build_border(effective, measure)

    if config.base.has_keychain_attachment:
        parts[PART_KEYCHAIN] = build_keychain_attachment(effective, base)

    parts[PART_COMBINED] = merge_parts(parts, config.material_colors)

    logger.info(
        "Generated %s in %.2fs",
        ", ".join(name for name in parts if name != PART_COMBINED),
        time.perf_counter() - started,
    )
    return GenerationResult(parts=parts, lines=lines, config=effective, label=label)


async def generate_async(
    config: TagConfig, measure: Optional[TextMeasure] = None,
) -> GenerationResult:
    """Awaitable ``generate``; runs in a worker thread."""
    return await asyncio.to_thread(generate, config, measure)


def merge_parts(
    parts: PartSet,
    colors: Optional[Dict[Material, Tuple[int, int, int, int]]] = None,
) -> Solid:
    """Concatenate all parts except ``combined`` into one base-material solid."""
    return flatten(
        (solid for name, solid in parts.items() if name != PART_COMBINED),
        material=Material.BASE,
        colors=colors,
    )
