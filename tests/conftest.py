"""
Shared test fixtures for tag generation tests.
"""
import sys
from dataclasses import replace
from pathlib import Path

import pytest
import trimesh

# Add src/ to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from keytag.config import BaseOptions, BaseShape, CodeOptions, TagConfig, TextAlign, TextPlacement
from keytag.contracts import Material, Solid

# Glyph advance of the monospace stand-in, as a fraction of the text size.
MONO_ADVANCE = 0.6


def mono_measure(text, style, size, depth, family="mono"):
    """Monospace stand-in for glyph extrusion: one box per line of text.

    Every character is MONO_ADVANCE * size wide regardless of style, so wrap
    points are exact and predictable.
    """
    if not text:
        return Solid(mesh=trimesh.Trimesh(), material=Material.DETAIL)
    width = len(text) * MONO_ADVANCE * size
    mesh = trimesh.creation.box(extents=[width, size, depth])
    mesh.apply_translation([width / 2, size / 2, depth / 2])
    return Solid(mesh=mesh, material=Material.DETAIL)


@pytest.fixture
def measure():
    return mono_measure


@pytest.fixture
def hello_config():
    """The 60x40 rounded plate with a bold bottom label."""
    return TagConfig(
        base=BaseOptions(
            width=60,
            height=40,
            depth=3,
            shape=BaseShape.ROUNDED_RECTANGLE,
            corner_radius=4,
            has_border=True,
            border_width=1.5,
            border_depth=1,
            has_text=True,
            text_message="**Hello World**",
            text_placement=TextPlacement.BOTTOM,
            text_align=TextAlign.CENTER,
            text_size=4,
            text_margin=2,
        ),
        code=CodeOptions(margin=2),
    )


@pytest.fixture
def plain_config():
    """Sharp-cornered plate with no optional features."""
    return TagConfig(
        base=BaseOptions(
            width=50,
            height=30,
            depth=2,
            shape=BaseShape.RECTANGLE,
            has_border=False,
            has_text=False,
        ),
        code=CodeOptions(margin=3),
    )


@pytest.fixture
def full_config(hello_config):
    """Every optional part enabled."""
    return replace(
        hello_config,
        base=replace(
            hello_config.base,
            has_keychain_attachment=True,
            keychain_hole_diameter=5,
        ),
    )


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "tag.json"
    path.write_text(
        """{
  "base": {
    "width": 60, "height": 40, "depth": 3,
    "shape": "roundedRectangle", "cornerRadius": 4,
    "hasBorder": true, "borderWidth": 1.5, "borderDepth": 1,
    "hasText": true, "textMessage": "**Hello World**",
    "textPlacement": "bottom", "textAlign": "center",
    "textSize": 4, "textMargin": 2,
    "hasKeychainAttachment": true, "keychainHoleDiameter": 5,
    "keychainPlacement": "left"
  },
  "code": {"margin": 2, "invert": false},
  "baseColor": "#ffffff",
  "qrcodeColor": "#000000"
}
""",
        encoding="utf-8",
    )
    return path
