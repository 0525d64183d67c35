"""
Canonical color value types.

Every color string that enters the core is parsed once into an RGBAColor.
All color math operates on these values, never on raw strings.

Conventions:
- r, g, b: 0-255 (may be fractional until formatted)
- h: degrees, 0-360
- s, l, v: percent, 0-100
- a: alpha fraction, 0-1
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RGBAColor:
    """A color in the sRGB space with an alpha channel."""

    r: float
    g: float
    b: float
    a: float = 1.0

    @property
    def is_opaque(self) -> bool:
        return self.a == 1

    def rounded(self) -> "RGBAColor":
        """Channels rounded to whole byte values."""
        return RGBAColor(
            r=round(self.r),
            g=round(self.g),
            b=round(self.b),
            a=self.a,
        )


@dataclass(frozen=True)
class HSLAColor:
    """Hue / saturation / lightness with alpha."""

    h: float
    s: float
    l: float
    a: float = 1.0


@dataclass(frozen=True)
class HSVAColor:
    """Hue / saturation / value with alpha."""

    h: float
    s: float
    v: float
    a: float = 1.0


BLACK = RGBAColor(0, 0, 0, 1.0)
WHITE = RGBAColor(255, 255, 255, 1.0)
