"""
Theme palette derivation and accessibility checks.
"""

from .manager import ThemeManager, extract_colors_from_presets, generate_color_palette, validate_theme_colors

__all__ = [
    "ThemeManager",
    "extract_colors_from_presets",
    "generate_color_palette",
    "validate_theme_colors",
]
