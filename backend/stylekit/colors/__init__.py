"""
Color math for the preset system.

Pure functions only: conversions between RGBA, HSLA and HSVA, hex encoding,
literal parsing, WCAG contrast, similarity and shading. No I/O, no state.
"""

from .models import RGBAColor, HSLAColor, HSVAColor, BLACK, WHITE
from .conversions import (
    rgba_to_hsla,
    hsla_to_rgba,
    rgba_to_hsva,
    hsva_to_rgba,
    hex_to_rgba,
    rgba_to_hex,
    hex_to_hsl,
    hsl_to_hex,
)
from .parsing import (
    ColorLiteral,
    HexLiteral,
    RgbLiteral,
    RgbaLiteral,
    HslLiteral,
    HslaLiteral,
    NamedLiteral,
    parse_color_literal,
    parse_color,
    is_valid_color,
    format_color,
    get_all_formats,
)
from .accessibility import (
    contrast_ratio,
    relative_luminance,
    meets_contrast_requirements,
    color_similarity,
    darken_color,
)
from .palettes import COLOR_PALETTES, get_palette

__all__ = [
    "RGBAColor",
    "HSLAColor",
    "HSVAColor",
    "BLACK",
    "WHITE",
    "rgba_to_hsla",
    "hsla_to_rgba",
    "rgba_to_hsva",
    "hsva_to_rgba",
    "hex_to_rgba",
    "rgba_to_hex",
    "hex_to_hsl",
    "hsl_to_hex",
    "ColorLiteral",
    "HexLiteral",
    "RgbLiteral",
    "RgbaLiteral",
    "HslLiteral",
    "HslaLiteral",
    "NamedLiteral",
    "parse_color_literal",
    "parse_color",
    "is_valid_color",
    "format_color",
    "get_all_formats",
    "contrast_ratio",
    "relative_luminance",
    "meets_contrast_requirements",
    "color_similarity",
    "darken_color",
    "COLOR_PALETTES",
    "get_palette",
]
