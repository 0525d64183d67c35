"""
Color space conversions: RGBA <-> HSLA <-> HSVA, and hex encoding.

Forward conversions derive hue/saturation from the max, min and spread of the
normalized R, G, B channels. Inverse conversions interpolate within the hue
sector. Conversions do not round; formatting does.
"""

from typing import Tuple

from .models import HSLAColor, HSVAColor, RGBAColor


HEX_DIGITS = set("0123456789abcdefABCDEF")


def _hue_from_rgb(r: float, g: float, b: float, max_c: float, diff: float) -> float:
    """Hue in degrees for normalized channels. Caller guarantees diff != 0."""
    if max_c == r:
        h = (g - b) / diff + (6 if g < b else 0)
    elif max_c == g:
        h = (b - r) / diff + 2
    else:
        h = (r - g) / diff + 4
    return (h / 6) * 360


def rgba_to_hsla(rgba: RGBAColor) -> HSLAColor:
    r = rgba.r / 255
    g = rgba.g / 255
    b = rgba.b / 255

    max_c = max(r, g, b)
    min_c = min(r, g, b)
    diff = max_c - min_c

    h = 0.0
    s = 0.0
    l = (max_c + min_c) / 2

    if diff != 0:
        s = diff / (2 - max_c - min_c) if l > 0.5 else diff / (max_c + min_c)
        h = _hue_from_rgb(r, g, b, max_c, diff)

    return HSLAColor(h=h, s=s * 100, l=l * 100, a=rgba.a)


def _hue_to_channel(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsla_to_rgba(hsla: HSLAColor) -> RGBAColor:
    h = (hsla.h % 360) / 360
    s = hsla.s / 100
    l = hsla.l / 100

    if s == 0:
        gray = round(l * 255)
        return RGBAColor(gray, gray, gray, hsla.a)

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q

    return RGBAColor(
        r=round(_hue_to_channel(p, q, h + 1 / 3) * 255),
        g=round(_hue_to_channel(p, q, h) * 255),
        b=round(_hue_to_channel(p, q, h - 1 / 3) * 255),
        a=hsla.a,
    )


def rgba_to_hsva(rgba: RGBAColor) -> HSVAColor:
    r = rgba.r / 255
    g = rgba.g / 255
    b = rgba.b / 255

    max_c = max(r, g, b)
    min_c = min(r, g, b)
    diff = max_c - min_c

    h = _hue_from_rgb(r, g, b, max_c, diff) if diff != 0 else 0.0
    s = 0.0 if max_c == 0 else diff / max_c

    return HSVAColor(h=h, s=s * 100, v=max_c * 100, a=rgba.a)


def hsva_to_rgba(hsva: HSVAColor) -> RGBAColor:
    h = (hsva.h % 360) / 360
    s = hsva.s / 100
    v = hsva.v / 100

    i = int(h * 6)
    f = h * 6 - i
    p = v * (1 - s)
    q = v * (1 - f * s)
    t = v * (1 - (1 - f) * s)

    sector = i % 6
    if sector == 0:
        r, g, b = v, t, p
    elif sector == 1:
        r, g, b = q, v, p
    elif sector == 2:
        r, g, b = p, v, t
    elif sector == 3:
        r, g, b = p, q, v
    elif sector == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return RGBAColor(
        r=round(r * 255),
        g=round(g * 255),
        b=round(b * 255),
        a=hsva.a,
    )


def hex_to_rgba(hex_value: str) -> RGBAColor:
    """
    Decode a 3-, 6- or 8-digit hex color (leading '#' optional).

    3-digit values double each nibble. 6-digit values are fully opaque.
    The last byte of an 8-digit value is alpha, stored as a fraction of 255.

    Raises:
        ValueError: If the value is not a valid hex color
    """
    digits = hex_value.strip()
    if digits.startswith("#"):
        digits = digits[1:]

    if not digits or any(ch not in HEX_DIGITS for ch in digits):
        raise ValueError(f"Invalid hex color: {hex_value}")

    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    if len(digits) == 6:
        digits += "ff"
    if len(digits) != 8:
        raise ValueError(f"Invalid hex color: {hex_value}")

    return RGBAColor(
        r=int(digits[0:2], 16),
        g=int(digits[2:4], 16),
        b=int(digits[4:6], 16),
        a=int(digits[6:8], 16) / 255,
    )


def _byte(value: float) -> int:
    return max(0, min(255, round(value)))


def rgba_to_hex(rgba: RGBAColor) -> str:
    """Encode as #rrggbb, or #rrggbbaa when not fully opaque."""
    rgb = f"#{_byte(rgba.r):02x}{_byte(rgba.g):02x}{_byte(rgba.b):02x}"
    if rgba.a == 1:
        return rgb
    return f"{rgb}{_byte(rgba.a * 255):02x}"


def hex_to_hsl(hex_value: str) -> Tuple[float, float, float]:
    """
    Hue (degrees), saturation and lightness (0-1 fractions) of a hex color.

    Used by palette derivation, which works in fractional HSL.
    """
    hsla = rgba_to_hsla(hex_to_rgba(hex_value))
    return hsla.h, hsla.s / 100, hsla.l / 100


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Inverse of hex_to_hsl. Saturation and lightness are 0-1 fractions."""
    return rgba_to_hex(hsla_to_rgba(HSLAColor(h=h, s=s * 100, l=l * 100)))
