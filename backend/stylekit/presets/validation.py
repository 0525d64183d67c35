"""
Validation for presets, collections and themes.

Rules:
- Every problem is collected; nothing stops at the first failure
- Errors block persistence, warnings never do
- Raw input is parsed into models here so that structural problems
  surface as the same ValidationError as rule violations
"""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Type, TypeVar, Union

import pydantic

from ..colors import is_valid_color
from .errors import ValidationError
from .models import (
    ElementStyle,
    PresetCategory,
    PresetCollection,
    PresetDraft,
    StyleKitModel,
    StylePreset,
    StyleTheme,
    ThemeColors,
    enum_value,
)


MAX_NAME_LENGTH = 50
MAX_RECOMMENDED_TAGS = 10

STROKE_WIDTH_RANGE = (0, 50)
FONT_SIZE_RANGE = (6, 72)
CORNER_RADIUS_RANGE = (0, 50)
OPACITY_RANGE = (0, 1)
RATING_RANGE = (0, 5)

ModelT = TypeVar("ModelT", bound=StyleKitModel)


@dataclass
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_if_invalid(self) -> None:
        if self.errors:
            raise ValidationError(self.errors, self.warnings)


def _describe_pydantic_error(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    if location:
        return f"{location}: {message}"
    return message


def parse_model(model_cls: Type[ModelT], data: Union[ModelT, Mapping[str, Any]]) -> ModelT:
    """
    Build a model from a dict (camelCase or snake_case keys).

    Raises:
        ValidationError: With one message per structural problem
    """
    if isinstance(data, model_cls):
        return data
    if not isinstance(data, Mapping):
        raise ValidationError([f"Expected an object for {model_cls.__name__}"])
    try:
        return model_cls.model_validate(dict(data))
    except pydantic.ValidationError as e:
        raise ValidationError([_describe_pydantic_error(err) for err in e.errors()]) from e


def _check_range(
    report_list: List[str],
    value: Optional[float],
    bounds: tuple,
    message: str,
) -> None:
    if value is None:
        return
    low, high = bounds
    if value < low or value > high:
        report_list.append(message)


def validate_style(style: ElementStyle, report: ValidationReport) -> None:
    """Color syntax and numeric ranges of a single style."""
    if style.fill and not is_valid_color(style.fill):
        report.errors.append("Invalid fill color")
    if style.stroke and not is_valid_color(style.stroke):
        report.errors.append("Invalid stroke color")
    if style.color and not is_valid_color(style.color):
        report.errors.append("Invalid text color")

    _check_range(report.warnings, style.stroke_width, STROKE_WIDTH_RANGE, "Stroke width should be between 0 and 50")
    _check_range(report.errors, style.opacity, OPACITY_RANGE, "Opacity must be between 0 and 1")
    _check_range(report.warnings, style.font_size, FONT_SIZE_RANGE, "Font size should be between 6 and 72")
    _check_range(report.warnings, style.corner_radius, CORNER_RADIUS_RANGE, "Corner radius should be between 0 and 50")


def validate_preset(preset: Union[StylePreset, PresetDraft]) -> ValidationReport:
    """
    Check a preset or draft against the preset rules.

    Hard errors: missing name, style or category; malformed colors;
    opacity or rating out of range.
    Warnings: long names, too many tags, unusual numeric values.
    """
    report = ValidationReport()

    name = (preset.name or "").strip()
    if not name:
        report.errors.append("Name is required")
    elif len(preset.name) > MAX_NAME_LENGTH:
        report.warnings.append("Name is quite long")

    if preset.style is None or preset.style.is_empty():
        report.errors.append("Style is required")

    if not preset.category:
        report.errors.append("Category is required")
    elif enum_value(preset.category) not in {c.value for c in PresetCategory}:
        report.errors.append("Invalid category")

    if preset.style is not None:
        validate_style(preset.style, report)

    _check_range(report.errors, preset.rating, RATING_RANGE, "Rating must be between 0 and 5")

    if len(preset.tags) > MAX_RECOMMENDED_TAGS:
        report.warnings.append("Too many tags (max 10 recommended)")

    return report


def validate_collection(collection: PresetCollection) -> ValidationReport:
    report = ValidationReport()
    if not collection.name.strip():
        report.errors.append("Name is required")
    seen = set()
    for preset in collection.presets:
        if preset.id in seen:
            report.errors.append(f"Duplicate preset in collection: {preset.id}")
        seen.add(preset.id)
    return report


def validate_theme(theme: StyleTheme) -> ValidationReport:
    """Structural theme checks. Contrast is judged separately by the theme manager."""
    report = ValidationReport()
    if not theme.name.strip():
        report.errors.append("Name is required")
    report.errors.extend(validate_theme_colors_syntax(theme.colors))
    typography = theme.typography
    if not (typography.heading_font.strip() and typography.body_font.strip() and typography.mono_font.strip()):
        report.errors.append("Typography configuration is required")
    return report


def validate_theme_colors_syntax(colors: ThemeColors) -> List[str]:
    return [
        f"Invalid {role} color: {value}"
        for role, value in colors.model_dump().items()
        if not is_valid_color(value)
    ]
