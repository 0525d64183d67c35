"""
Design-token export.

Fill and stroke become color tokens named `<slug>-fill` / `<slug>-stroke`.
A typography token is emitted only when both font size and family are set.
"""

from typing import Any, Dict, Sequence

from ..presets.models import StylePreset
from .css import preset_slug


def export_design_tokens(presets: Sequence[StylePreset], include_effects: bool = False) -> Dict[str, Any]:
    tokens: Dict[str, Any] = {"colors": {}, "typography": {}}
    if include_effects:
        tokens["effects"] = {}

    for preset in presets:
        name = preset_slug(preset.name)
        style = preset.style

        if style.fill:
            tokens["colors"][f"{name}-fill"] = {"value": style.fill, "type": "color"}
        if style.stroke:
            tokens["colors"][f"{name}-stroke"] = {"value": style.stroke, "type": "color"}

        if style.font_size and style.font_family:
            tokens["typography"][name] = {
                "value": {
                    "fontSize": style.font_size,
                    "fontFamily": style.font_family,
                    "fontWeight": style.font_weight or "normal",
                },
                "type": "typography",
            }

    return tokens
