"""
CSS export and import of preset styles.

Each preset becomes one rule block on the class `.preset-<slug>`.
Import reads the first rule block back into a preset draft.
"""

import re
from typing import Dict, List, Optional, Sequence

from ..presets.models import ElementStyle, PresetCategory, PresetDraft, StylePreset
from ..presets.validation import parse_model


CSS_HEADER = "/* OpenChart Style Presets */"

_RULE_RE = re.compile(r"([^{]+)\{([^}]+)\}")
_NUMBER_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?|-?\.\d+)")

# (style field, css property, unit) in declaration order
CSS_PROPERTIES = (
    ("fill", "background-color", ""),
    ("stroke", "border-color", ""),
    ("stroke_width", "border-width", "px"),
    ("opacity", "opacity", ""),
    ("font_size", "font-size", "px"),
    ("font_family", "font-family", ""),
    ("font_weight", "font-weight", ""),
    ("color", "color", ""),
    ("corner_radius", "border-radius", "px"),
)

NUMERIC_FIELDS = {"stroke_width", "opacity", "font_size", "corner_radius"}

_FIELD_BY_PROPERTY = {prop: field for field, prop, _ in CSS_PROPERTIES}


def preset_slug(name: str) -> str:
    """Lower-cased name with whitespace runs collapsed to '-'."""
    return re.sub(r"\s+", "-", name.lower())


def export_preset_to_css(preset: StylePreset) -> str:
    style = preset.style
    lines = [f".preset-{preset_slug(preset.name)} {{"]
    for field, prop, unit in CSS_PROPERTIES:
        value = getattr(style, field)
        if value is None:
            continue
        lines.append(f"  {prop}: {value}{unit};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def export_presets_as_css(presets: Sequence[StylePreset]) -> str:
    blocks = [CSS_HEADER + "\n"]
    blocks.extend(export_preset_to_css(preset) for preset in presets)
    return "\n".join(blocks)


def _parse_number(value: str) -> Optional[float]:
    match = _NUMBER_RE.match(value)
    if not match:
        return None
    number = float(match.group(1))
    if number.is_integer():
        return int(number)
    return number


def parse_css_declarations(css: str) -> Dict[str, object]:
    """Style fields found in the first rule block. Unknown properties are ignored."""
    match = _RULE_RE.search(css)
    if not match:
        return {}

    values: Dict[str, object] = {}
    for declaration in match.group(2).split(";"):
        prop, sep, value = declaration.partition(":")
        prop, value = prop.strip().lower(), value.strip()
        if not sep or not prop or not value:
            continue
        field = _FIELD_BY_PROPERTY.get(prop)
        if field is None:
            continue
        if field in NUMERIC_FIELDS:
            number = _parse_number(value)
            if number is not None:
                values[field] = number
        elif field == "font_family":
            values[field] = value.replace('"', "").replace("'", "")
        else:
            values[field] = value
    return values


def import_preset_from_css(
    css: str,
    name: str,
    category: PresetCategory = PresetCategory.CUSTOM,
) -> PresetDraft:
    """
    Draft preset from a CSS rule block.

    Raises:
        ValidationError: If a declaration has a value the style model rejects
    """
    style = parse_model(ElementStyle, parse_css_declarations(css))
    tags: List[str] = ["imported", "css"]
    return PresetDraft(
        name=name,
        description="Imported from CSS",
        style=style,
        category=category,
        tags=tags,
    )
