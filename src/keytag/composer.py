"""
Solid composition for the structural parts of a tag.

Builds the base plate (with optional NFC cavity), the border frame and the
keychain attachment. All offsets come from ``keytag.layout`` so the parts
agree with the label; dimensions are expected to be validated already
(see ``config.check_config``).
"""

import logging
import math
from typing import Tuple

from keytag.config import KeychainPlacement, NfcShape, TagConfig
from keytag.contracts import Material, Profile, Solid
from keytag.geometry import box, cylinder, extrude_profile, subtract, union
from keytag.glyphs import measure_text
from keytag.layout import (
    TextMeasure,
    corner_radius,
    plate_shift,
    text_base_offset,
    text_left_offset,
    text_top_offset,
)
from keytag.profiles import custom_rounded_rect, rounded_rect

logger = logging.getLogger(__name__)

# A hidden NFC cavity starts this far above the underside of the plate.
NFC_HIDDEN_LIFT = 1.0

# Material added around the keychain hole on each side of the tab.
KEYCHAIN_TAB_WALL = 3.0


def plate_profile(config: TagConfig, offset: float) -> Profile:
    """Footprint of the plate, centred on its own origin."""
    base = config.base
    r = corner_radius(config)
    if base.text_placement.is_edge:
        return rounded_rect(
            -base.height / 2, -(base.width + offset) / 2,
            base.height, base.width + offset, r,
        )
    return rounded_rect(
        -(base.height + offset) / 2, -base.width / 2,
        base.height + offset, base.width, r,
    )


def build_base(config: TagConfig, measure: TextMeasure = measure_text) -> Solid:
    """Extruded plate, shifted to make room for the label."""
    base = config.base
    offset = text_base_offset(config, measure)
    plate = extrude_profile(plate_profile(config, offset), base.depth, Material.BASE)
    dx, dy = plate_shift(config, offset)
    plate.position = [dx, dy, 0.0]
    logger.debug(
        "Base plate %.2f x %.2f (label offset %.2f) at (%.2f, %.2f)",
        base.height + (0 if base.text_placement.is_edge else offset),
        base.width + (offset if base.text_placement.is_edge else 0),
        offset, dx, dy,
    )

    if not base.has_nfc_indentation:
        return plate

    size = base.nfc_indentation_size
    if base.nfc_indentation_shape is NfcShape.ROUND:
        cavity = cylinder(size / 2, base.nfc_indentation_depth)
    else:
        cavity = box(size, size, base.nfc_indentation_depth)
    z = base.nfc_indentation_depth / 2
    if base.nfc_indentation_hidden:
        z += NFC_HIDDEN_LIFT
    cavity.position = [dx, 0.0, z]
    return subtract(plate, cavity)


def build_border(config: TagConfig, measure: TextMeasure = measure_text) -> Solid:
    """Frame around the plate edge, sitting on top of the base."""
    base = config.base
    r = corner_radius(config)
    offset = text_base_offset(config, measure)
    top = text_top_offset(config, measure)
    left = text_left_offset(config, measure)
    bw = base.border_width
    inner_r = max(0.0, r - bw)

    if base.text_placement.is_edge:
        outer = rounded_rect(
            -base.height / 2, -(base.width + left) / 2,
            base.height, base.width + offset, r,
        )
        inner = rounded_rect(
            -(base.height - 2 * bw) / 2, -(base.width + left - 2 * bw) / 2,
            base.height - 2 * bw, base.width + offset - 2 * bw, inner_r,
        )
    else:
        outer = rounded_rect(
            -(base.height + top) / 2, -base.width / 2,
            base.height + offset, base.width, r,
        )
        inner = rounded_rect(
            -(base.height + top - 2 * bw) / 2, -(base.width - 2 * bw) / 2,
            base.height + offset - 2 * bw, base.width - 2 * bw, inner_r,
        )

    frame = subtract(
        extrude_profile(outer, base.border_depth, Material.DETAIL),
        extrude_profile(inner, base.border_depth, Material.DETAIL),
    )
    frame.position = [0.0, 0.0, base.depth]
    return frame


def _keychain_tab(config: TagConfig) -> Tuple[Solid, float, float]:
    """Tab with a through hole, rounded end towards -y.

    Returns (tab, tab height, hole offset).
    """
    base = config.base
    hole_radius = base.keychain_hole_diameter / 2
    hole_offset = hole_radius * 2
    height = base.keychain_hole_diameter + KEYCHAIN_TAB_WALL
    width = height + hole_offset

    outline = custom_rounded_rect(
        -height / 2, -width / 2, height, width,
        0.0, 0.0, height / 2, height / 2,
    )
    tab = extrude_profile(outline, base.depth, Material.BASE)
    hole = cylinder(hole_radius, base.depth)
    hole.position = [0.0, -hole_offset / 2, base.depth / 2]
    return subtract(tab, hole), height, hole_offset


def build_keychain_attachment(config: TagConfig, base_solid: Solid) -> Solid:
    """Keychain tab(s) positioned against the measured base plate."""
    base = config.base
    tab, height, hole_offset = _keychain_tab(config)
    lo, hi = base_solid.bounds()
    cx, cy = (lo[:2] + hi[:2]) / 2
    size_x, size_y = hi[:2] - lo[:2]
    reach = height - hole_offset

    placement = base.keychain_placement
    if placement is KeychainPlacement.LEFT:
        tab.position = [cx, cy - size_y / 2 - reach, 0.0]
    elif placement is KeychainPlacement.TOP:
        tab.position = [cx - size_x / 2 - reach, cy, 0.0]
        tab.rotation = [0.0, 0.0, -math.pi / 2]
    else:
        tab.position = [cx - size_x / 2, cy - size_y / 2, 0.0]
        tab.rotation = [0.0, 0.0, -math.pi / 4]

    if not base.mirror_holes:
        return tab

    mirror, _, _ = _keychain_tab(config)
    if placement is KeychainPlacement.LEFT:
        mirror.position = [cx, cy + size_y / 2 + reach, 0.0]
        mirror.rotation = [0.0, 0.0, math.pi]
    elif placement is KeychainPlacement.TOP:
        mirror.position = [cx + size_x / 2 + reach, cy, 0.0]
        mirror.rotation = [0.0, 0.0, math.pi / 2]
    else:
        mirror.position = [cx + size_x / 2, cy + size_y / 2, 0.0]
        mirror.rotation = [0.0, 0.0, 3 * math.pi / 4]
    return union(tab, mirror)
