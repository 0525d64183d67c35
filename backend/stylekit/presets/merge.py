"""
Style merging.

merge_style combines an element's current style with a preset style under
one of four application modes. It is pure and total: any input produces a
style, and unknown mode strings fall back to smart.
"""

import logging
from typing import Any, Dict, Union

from .defaults import DEFAULT_STYLE_VALUES
from .models import ApplicationMode, ElementStyle

logger = logging.getLogger(__name__)


# Applied whenever the preset defines them
SHAPE_FIELDS = ("fill", "stroke", "stroke_width", "opacity", "corner_radius")

# Applied only when the element already takes part in text styling
TEXT_FIELDS = ("font_size", "font_family", "font_weight", "font_style", "text_align", "color")


def is_default_value(field_name: str, value: Any) -> bool:
    """True when value equals the canonical default for field_name."""
    if field_name not in DEFAULT_STYLE_VALUES:
        return False
    return DEFAULT_STYLE_VALUES[field_name] == value


def _resolve_mode(mode: Union[ApplicationMode, str, None]) -> ApplicationMode:
    if isinstance(mode, ApplicationMode):
        return mode
    try:
        return ApplicationMode(mode)
    except ValueError:
        logger.debug(f"Unknown application mode {mode!r}, using smart merge")
        return ApplicationMode.SMART


def _overlay(current: ElementStyle, preset: ElementStyle) -> Dict[str, Any]:
    result = current.defined_fields()
    for key, value in preset.defined_fields().items():
        if not is_default_value(key, value):
            result[key] = value
    return result


def _smart(current: ElementStyle, preset: ElementStyle) -> Dict[str, Any]:
    result = current.defined_fields()
    incoming = preset.defined_fields()

    for key in SHAPE_FIELDS:
        if key in incoming:
            result[key] = incoming[key]

    if current.font_size is not None or preset.font_size is not None:
        for key in TEXT_FIELDS:
            if key in incoming:
                result[key] = incoming[key]

    return result


def merge_style(
    current: ElementStyle,
    preset: ElementStyle,
    mode: Union[ApplicationMode, str] = ApplicationMode.SMART,
) -> ElementStyle:
    """
    Compute the style to hand back to the renderer.

    Modes:
    - replace: exactly the preset style
    - merge: every field the preset defines overwrites current
    - overlay: like merge, but preset fields equal to the default table
      are treated as unspecified
    - smart: shape fields always, text fields only when current has a
      font size or the preset defines one
    """
    resolved = _resolve_mode(mode)

    if resolved == ApplicationMode.REPLACE:
        return preset

    if resolved == ApplicationMode.MERGE:
        result = current.defined_fields()
        result.update(preset.defined_fields())
        return ElementStyle(**result)

    if resolved == ApplicationMode.OVERLAY:
        return ElementStyle(**_overlay(current, preset))

    return ElementStyle(**_smart(current, preset))
