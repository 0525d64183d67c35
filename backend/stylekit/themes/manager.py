"""
Theme manager.

Derives theme palettes from presets or a seed color, checks theme colors
for syntax and contrast, and turns themes back into presets.

Palette math works in fractional HSL (saturation and lightness in 0-1).
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..colors import (
    contrast_ratio,
    hsl_to_hex,
    is_valid_color,
    meets_contrast_requirements,
    parse_color_literal,
    rgba_to_hsla,
)
from ..colors.accessibility import CONTRAST_THRESHOLDS
from ..presets.catalog import PresetCatalog
from ..presets.errors import ValidationError
from ..presets.models import (
    ElementStyle,
    PresetCategory,
    PresetDraft,
    StylePreset,
    StyleTheme,
    ThemeColors,
    ThemeTypography,
)
from ..presets.validation import validate_theme_colors_syntax

logger = logging.getLogger(__name__)


DEFAULT_PRIMARY = "#3b82f6"
DEFAULT_SECONDARY = "#64748b"
DEFAULT_TEXT = "#1f2937"
LIGHT_TEXT = "#f9fafb"
DEFAULT_BACKGROUND = "#ffffff"

STATUS_COLORS = {
    "success": "#10b981",
    "warning": "#f59e0b",
    "error": "#ef4444",
}

DEFAULT_TYPOGRAPHY = ThemeTypography(
    heading_font="Arial, sans-serif",
    body_font="Arial, sans-serif",
    mono_font="Monaco, monospace",
)

# Presets sampled when deriving a theme from the catalog
EXTRACTION_SAMPLE_SIZE = 10

MIN_TEXT_CONTRAST = CONTRAST_THRESHOLDS["AA"]

THEME_PRESET_TAG = "theme-generated"


def _hsl_fractions(color: str) -> Tuple[float, float, float]:
    literal = parse_color_literal(color)
    if literal is None:
        raise ValidationError([f"Invalid color: {color}"])
    hsla = rgba_to_hsla(literal.to_rgba())
    return hsla.h, hsla.s / 100, hsla.l / 100


def _most_common(values: Iterable[Optional[str]], fallback: str) -> str:
    # Counter.most_common keeps first-seen order for equal counts
    counts = Counter(value for value in values if value)
    if not counts:
        return fallback
    return counts.most_common(1)[0][0]


def generate_accent_color(primary: str) -> str:
    h, s, l = _hsl_fractions(primary)
    return hsl_to_hex((h + 60) % 360, s, min(l * 1.2, 1))


def extract_colors_from_presets(presets: Iterable[StylePreset]) -> ThemeColors:
    """
    Most frequent fill, stroke and text colors of the given presets.

    Ties go to the color seen first. Missing roles fall back to a neutral
    blue/slate/charcoal palette.
    """
    presets = list(presets)
    primary = _most_common((p.style.fill for p in presets), DEFAULT_PRIMARY)
    secondary = _most_common((p.style.stroke for p in presets), DEFAULT_SECONDARY)
    text = _most_common((p.style.color for p in presets), DEFAULT_TEXT)

    if is_valid_color(primary):
        accent = generate_accent_color(primary)
    else:
        accent = generate_accent_color(DEFAULT_PRIMARY)

    return ThemeColors(
        primary=primary,
        secondary=secondary,
        accent=accent,
        background=DEFAULT_BACKGROUND,
        text=text,
        **STATUS_COLORS,
    )


def generate_color_palette(seed: str) -> ThemeColors:
    """
    Build a full theme palette around one seed color.

    Raises:
        ValidationError: If the seed is not a color
    """
    h, s, l = _hsl_fractions(seed)
    return ThemeColors(
        primary=seed,
        secondary=hsl_to_hex((h + 180) % 360, s * 0.7, l * 0.8),
        accent=hsl_to_hex((h + 120) % 360, s, min(l * 0.9, 1)),
        background=DEFAULT_BACKGROUND,
        text=DEFAULT_TEXT if l > 0.5 else LIGHT_TEXT,
        **STATUS_COLORS,
    )


def validate_theme_colors(colors: ThemeColors) -> List[str]:
    """Syntax errors per role, plus one message if text on background is unreadable."""
    errors = validate_theme_colors_syntax(colors)
    if is_valid_color(colors.text) and is_valid_color(colors.background):
        if contrast_ratio(colors.text, colors.background) < MIN_TEXT_CONTRAST:
            errors.append("Text color does not meet accessibility contrast requirements")
    return errors


def generate_preset_from_theme(theme: StyleTheme, name: str) -> PresetDraft:
    return PresetDraft(
        name=name,
        description=f"Generated from {theme.name} theme",
        style=ElementStyle(
            fill=theme.colors.primary,
            stroke=theme.colors.secondary,
            stroke_width=2,
            color=theme.colors.text,
            font_family=theme.typography.body_font,
            font_size=14,
            opacity=1,
        ),
        category=PresetCategory.CUSTOM,
        tags=[THEME_PRESET_TAG, theme.name.lower()],
    )


class ThemeManager:
    """Theme operations that need the catalog's presets and themes."""

    def __init__(self, catalog: PresetCatalog):
        self.catalog = catalog

    def get_theme_colors(self, theme_id: str) -> Optional[ThemeColors]:
        theme = self.catalog.get_theme(theme_id)
        if theme is None:
            return None
        return theme.colors

    def apply_theme(self, theme_id: str) -> StyleTheme:
        """
        Make a theme current.

        Raises:
            NotFoundError: If the theme does not exist
        """
        theme = self.catalog.set_current_theme(theme_id)
        logger.info(f"Applied theme {theme.name} ({theme_id})")
        return theme

    def create_theme_from_current(
        self,
        name: str,
        description: Optional[str] = None,
        base_theme_id: Optional[str] = None,
        save: bool = False,
    ) -> Dict[str, Any]:
        """
        Theme data derived from a base theme or, without one, from the
        first presets of the catalog.

        Returns the unsaved theme fields unless save is set, in which case
        the theme is created and its wire form returned.
        """
        if base_theme_id is not None:
            base = self.catalog.get_theme_or_raise(base_theme_id)
            colors = base.colors
            typography = base.typography
        else:
            sample = self.catalog.list_presets()[:EXTRACTION_SAMPLE_SIZE]
            colors = extract_colors_from_presets(sample)
            typography = DEFAULT_TYPOGRAPHY

        data = {
            "name": name,
            "description": description,
            "presets": [],
            "colors": colors,
            "typography": typography,
        }
        if save:
            return self.catalog.create_theme(data).to_wire()
        return data

    def generate_preset_from_theme(self, theme_id: str, name: str, save: bool = False):
        """
        Draft (or, with save, a created custom preset) styled from a theme.

        Raises:
            NotFoundError: If the theme does not exist
        """
        theme = self.catalog.get_theme_or_raise(theme_id)
        draft = generate_preset_from_theme(theme, name)
        if save:
            return self.catalog.create_preset(draft)
        return draft

    def analyze_theme_usage(self, theme_id: str) -> Dict[str, Any]:
        """
        How much of the catalog follows a theme.

        usage_count counts presets tagged with the theme name. color_usage
        counts, per color role, the presets using that color as fill, stroke
        or text.
        """
        theme = self.catalog.get_theme_or_raise(theme_id)
        presets = self.catalog.list_presets()
        theme_tag = theme.name.lower()

        related = [p for p in presets if theme_tag in p.tags]
        color_usage = []
        for role, value in theme.colors.model_dump().items():
            wanted = value.lower()
            count = 0
            for preset in presets:
                used = {c.lower() for c in (preset.style.fill, preset.style.stroke, preset.style.color) if c}
                if wanted in used:
                    count += 1
            color_usage.append({"role": role, "color": value, "usage": count})

        return {
            "theme_id": theme.id,
            "usage_count": len(related),
            "related_presets": [p.id for p in related],
            "color_usage": color_usage,
        }

    @staticmethod
    def check_accessibility(colors: ThemeColors, level: str = "AA") -> Dict[str, Dict[str, Any]]:
        """
        Contrast of every role against the theme background.

        Raises:
            ValidationError: If a color or the level is invalid
        """
        if level not in CONTRAST_THRESHOLDS:
            raise ValidationError([f"Unknown contrast level: {level}"])
        syntax_errors = validate_theme_colors_syntax(colors)
        if syntax_errors:
            raise ValidationError(syntax_errors)

        result = {}
        for role, value in colors.model_dump().items():
            if role == "background":
                continue
            result[role] = {
                "ratio": round(contrast_ratio(value, colors.background), 2),
                "passes": meets_contrast_requirements(value, colors.background, level),
            }
        return result
