"""
Preset system for StyleKit.

This package defines the preset data model, the merge algorithm used to
apply a preset to an element, search, validation and the built-in presets
and themes. PresetCatalog (in .catalog) ties these to a PresetStore and is
imported from there directly.
"""

from .errors import (
    PresetError,
    ValidationError,
    NotFoundError,
    ImmutableResourceError,
    ImportBatchError,
)
from .models import (
    PresetCategory,
    ApplicationMode,
    ElementStyle,
    StylePreset,
    PresetCollection,
    ThemeColors,
    ThemeTypography,
    StyleTheme,
    QuickStyle,
    PresetSearchFilters,
    PresetSettings,
    PresetDraft,
)
from .defaults import DEFAULT_STYLE_VALUES, PRESET_CATEGORIES, DEFAULT_QUICK_STYLES
from .merge import merge_style
from .search import search_presets, sort_presets
from .validation import ValidationReport, validate_preset

__all__ = [
    "PresetError",
    "ValidationError",
    "NotFoundError",
    "ImmutableResourceError",
    "ImportBatchError",
    "PresetCategory",
    "ApplicationMode",
    "ElementStyle",
    "StylePreset",
    "PresetCollection",
    "ThemeColors",
    "ThemeTypography",
    "StyleTheme",
    "QuickStyle",
    "PresetSearchFilters",
    "PresetSettings",
    "PresetDraft",
    "DEFAULT_STYLE_VALUES",
    "PRESET_CATEGORIES",
    "DEFAULT_QUICK_STYLES",
    "merge_style",
    "search_presets",
    "sort_presets",
    "ValidationReport",
    "validate_preset",
]
