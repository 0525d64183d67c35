"""
Contrast, similarity and shading helpers.

Contrast follows the WCAG 2.x definition of relative luminance.
"""

import math
from typing import Literal

from .conversions import hex_to_rgba, rgba_to_hex
from .models import RGBAColor
from .parsing import ColorInput, to_rgba


ContrastLevel = Literal["AA", "AAA"]

CONTRAST_THRESHOLDS = {
    "AA": 4.5,
    "AAA": 7.0,
}

# Euclidean distance between black and white in 8-bit RGB, rounded down
MAX_RGB_DISTANCE = 441


def _linear_channel(value: float) -> float:
    c = value / 255
    if c <= 0.03928:
        return c / 12.92
    return ((c + 0.055) / 1.055) ** 2.4


def relative_luminance(color: ColorInput) -> float:
    rgba = to_rgba(color)
    return (
        0.2126 * _linear_channel(rgba.r)
        + 0.7152 * _linear_channel(rgba.g)
        + 0.0722 * _linear_channel(rgba.b)
    )


def contrast_ratio(color1: ColorInput, color2: ColorInput) -> float:
    """(L_lighter + 0.05) / (L_darker + 0.05), between 1 and 21."""
    lum1 = relative_luminance(color1)
    lum2 = relative_luminance(color2)
    return (max(lum1, lum2) + 0.05) / (min(lum1, lum2) + 0.05)


def meets_contrast_requirements(
    foreground: ColorInput,
    background: ColorInput,
    level: ContrastLevel = "AA",
) -> bool:
    threshold = CONTRAST_THRESHOLDS.get(level, CONTRAST_THRESHOLDS["AA"])
    return contrast_ratio(foreground, background) >= threshold


def color_similarity(color1: ColorInput, color2: ColorInput) -> float:
    """1.0 for identical colors, falling linearly with RGB distance, floored at 0."""
    a = to_rgba(color1)
    b = to_rgba(color2)
    distance = math.sqrt((a.r - b.r) ** 2 + (a.g - b.g) ** 2 + (a.b - b.b) ** 2)
    return max(0.0, 1 - distance / MAX_RGB_DISTANCE)


def darken_color(color: str, amount: float) -> str:
    """
    Scale each channel of a hex color by (1 - amount), clamped at 0.

    Non-hex input is returned unchanged.
    """
    if not isinstance(color, str) or not color.startswith("#"):
        return color
    try:
        rgba = hex_to_rgba(color)
    except ValueError:
        return color

    factor = 1 - amount
    darkened = RGBAColor(
        r=max(0, round(rgba.r * factor)),
        g=max(0, round(rgba.g * factor)),
        b=max(0, round(rgba.b * factor)),
        a=1.0,
    )
    return rgba_to_hex(darkened)
