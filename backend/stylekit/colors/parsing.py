"""
Color literal parsing and formatting.

Textual colors are parsed exactly once, at the boundary, into one of a
closed set of literal variants. Each variant knows how to produce the
canonical RGBAColor. Nothing downstream matches on strings.
"""

import re
from dataclasses import dataclass
from typing import Dict, Literal, Optional, Union

from .conversions import hex_to_rgba, hsla_to_rgba, rgba_to_hex, rgba_to_hsla, rgba_to_hsva
from .models import BLACK, HSLAColor, RGBAColor


ColorFormat = Literal["hex", "rgb", "hsl", "hsv"]

_NUMBER = r"\s*(-?\d+(?:\.\d+)?)\s*"
_PERCENT = r"\s*(-?\d+(?:\.\d+)?)%?\s*"

_HEX_RE = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_RGB_RE = re.compile(rf"^rgb\({_NUMBER},{_NUMBER},{_NUMBER}\)$", re.IGNORECASE)
_RGBA_RE = re.compile(rf"^rgba\({_NUMBER},{_NUMBER},{_NUMBER},{_NUMBER}\)$", re.IGNORECASE)
_HSL_RE = re.compile(rf"^hsl\({_NUMBER},{_PERCENT},{_PERCENT}\)$", re.IGNORECASE)
_HSLA_RE = re.compile(rf"^hsla\({_NUMBER},{_PERCENT},{_PERCENT},{_NUMBER}\)$", re.IGNORECASE)

# CSS keywords used by the editor's built-in styles and color swatches
NAMED_COLORS: Dict[str, RGBAColor] = {
    "transparent": RGBAColor(0, 0, 0, 0.0),
    "black": RGBAColor(0, 0, 0),
    "white": RGBAColor(255, 255, 255),
    "red": RGBAColor(255, 0, 0),
    "green": RGBAColor(0, 128, 0),
    "blue": RGBAColor(0, 0, 255),
    "yellow": RGBAColor(255, 255, 0),
    "orange": RGBAColor(255, 165, 0),
    "purple": RGBAColor(128, 0, 128),
    "pink": RGBAColor(255, 192, 203),
    "brown": RGBAColor(165, 42, 42),
    "gray": RGBAColor(128, 128, 128),
    "grey": RGBAColor(128, 128, 128),
}


@dataclass(frozen=True)
class HexLiteral:
    digits: str

    def to_rgba(self) -> RGBAColor:
        return hex_to_rgba(self.digits)


@dataclass(frozen=True)
class RgbLiteral:
    r: float
    g: float
    b: float

    def to_rgba(self) -> RGBAColor:
        return RGBAColor(self.r, self.g, self.b, 1.0)


@dataclass(frozen=True)
class RgbaLiteral:
    r: float
    g: float
    b: float
    a: float

    def to_rgba(self) -> RGBAColor:
        return RGBAColor(self.r, self.g, self.b, self.a)


@dataclass(frozen=True)
class HslLiteral:
    h: float
    s: float
    l: float

    def to_rgba(self) -> RGBAColor:
        return hsla_to_rgba(HSLAColor(self.h, self.s, self.l, 1.0))


@dataclass(frozen=True)
class HslaLiteral:
    h: float
    s: float
    l: float
    a: float

    def to_rgba(self) -> RGBAColor:
        return hsla_to_rgba(HSLAColor(self.h, self.s, self.l, self.a))


@dataclass(frozen=True)
class NamedLiteral:
    name: str

    def to_rgba(self) -> RGBAColor:
        return NAMED_COLORS[self.name]


ColorLiteral = Union[HexLiteral, RgbLiteral, RgbaLiteral, HslLiteral, HslaLiteral, NamedLiteral]

ColorInput = Union[str, RGBAColor]


def parse_color_literal(text: str) -> Optional[ColorLiteral]:
    """
    Classify a color string into its literal variant.

    Returns None for anything that is not a recognized color.
    """
    if not isinstance(text, str):
        return None
    value = text.strip()

    if _HEX_RE.match(value):
        return HexLiteral(value)

    match = _RGB_RE.match(value)
    if match:
        r, g, b = (float(v) for v in match.groups())
        return RgbLiteral(r, g, b)

    match = _RGBA_RE.match(value)
    if match:
        r, g, b, a = (float(v) for v in match.groups())
        return RgbaLiteral(r, g, b, a)

    match = _HSL_RE.match(value)
    if match:
        h, s, l = (float(v) for v in match.groups())
        return HslLiteral(h, s, l)

    match = _HSLA_RE.match(value)
    if match:
        h, s, l, a = (float(v) for v in match.groups())
        return HslaLiteral(h, s, l, a)

    if value.lower() in NAMED_COLORS:
        return NamedLiteral(value.lower())

    return None


def is_valid_color(text: str) -> bool:
    return parse_color_literal(text) is not None


def parse_color(text: str) -> RGBAColor:
    """
    Parse any supported color string into RGBA.

    Unrecognized input yields opaque black; this never raises.
    """
    literal = parse_color_literal(text)
    if literal is None:
        return BLACK
    return literal.to_rgba()


def to_rgba(color: ColorInput) -> RGBAColor:
    """Accept either a color string or an already-parsed RGBAColor."""
    if isinstance(color, RGBAColor):
        return color
    return parse_color(color)


def _fmt_number(value: float) -> str:
    rounded = round(value, 3)
    if rounded == int(rounded):
        return str(int(rounded))
    return str(rounded)


def format_color(rgba: RGBAColor, color_format: ColorFormat = "hex") -> str:
    """
    Render RGBA in the requested textual form.

    The alpha channel is omitted whenever it equals 1.
    """
    if color_format == "rgb":
        c = rgba.rounded()
        if rgba.a != 1:
            return f"rgba({c.r}, {c.g}, {c.b}, {_fmt_number(rgba.a)})"
        return f"rgb({c.r}, {c.g}, {c.b})"

    if color_format == "hsl":
        hsla = rgba_to_hsla(rgba)
        h, s, l = round(hsla.h), round(hsla.s), round(hsla.l)
        if rgba.a != 1:
            return f"hsla({h}, {s}%, {l}%, {_fmt_number(rgba.a)})"
        return f"hsl({h}, {s}%, {l}%)"

    if color_format == "hsv":
        hsva = rgba_to_hsva(rgba)
        h, s, v = round(hsva.h), round(hsva.s), round(hsva.v)
        if rgba.a != 1:
            return f"hsva({h}, {s}%, {v}%, {_fmt_number(rgba.a)})"
        return f"hsv({h}, {s}%, {v}%)"

    return rgba_to_hex(rgba)


def get_all_formats(rgba: RGBAColor) -> Dict[str, object]:
    """Every representation the color picker shows for one color."""
    return {
        "hex": format_color(rgba, "hex"),
        "rgb": format_color(rgba, "rgb"),
        "rgba": rgba,
        "hsl": format_color(rgba, "hsl"),
        "hsla": rgba_to_hsla(rgba),
        "hsv": format_color(rgba, "hsv"),
        "hsva": rgba_to_hsva(rgba),
    }
