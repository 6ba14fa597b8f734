"""Rounded-rectangle profiles used as extrusion cross-sections."""

from keytag.contracts import Profile


def rounded_rect(x: float, y: float, width: float, height: float, radius: float) -> Profile:
    """Rectangle with the same radius on all four corners."""
    return custom_rounded_rect(x, y, width, height, radius, radius, radius, radius)


def custom_rounded_rect(
    x: float,
    y: float,
    width: float,
    height: float,
    r_top_left: float,
    r_top_right: float,
    r_bottom_right: float,
    r_bottom_left: float,
) -> Profile:
    """Rectangle with independent corner radii ("top" is +y).

    Radii are clamped to [0, min(width, height) / 2] so slider values that
    overshoot degrade to a stadium instead of a self-intersecting outline.
    """
    width = max(0.0, float(width))
    height = max(0.0, float(height))
    limit = min(width, height) / 2
    radii = tuple(
        min(max(0.0, float(r)), limit)
        for r in (r_top_left, r_top_right, r_bottom_right, r_bottom_left)
    )
    return Profile(x=float(x), y=float(y), width=width, height=height, radii=radii)
