"""
Usage-driven helpers: suggestions for the current selection and catalog
usage statistics.
"""

from collections import Counter
from typing import Any, Dict, List, Sequence

from ..colors import color_similarity, is_valid_color
from .models import ElementStyle, StylePreset, enum_value


FILL_WEIGHT = 0.3
FONT_SIZE_WEIGHT = 0.2
STROKE_WIDTH_WEIGHT = 0.1
CORNER_RADIUS_WEIGHT = 0.1
USAGE_WEIGHT = 0.01


def _closeness(a: float, b: float, scale: float) -> float:
    return max(0.0, 1 - abs(a - b) / scale)


def _fill_similarity(a: str, b: str) -> float:
    if not (is_valid_color(a) and is_valid_color(b)):
        return 0.0
    return color_similarity(a, b)


def score_preset(preset: StylePreset, current_styles: Sequence[ElementStyle]) -> float:
    """Similarity of a preset to the selected styles, plus a popularity boost."""
    style = preset.style
    score = 0.0
    for current in current_styles:
        if style.fill and current.fill:
            score += _fill_similarity(style.fill, current.fill) * FILL_WEIGHT
        if style.font_size and current.font_size:
            score += _closeness(style.font_size, current.font_size, 20) * FONT_SIZE_WEIGHT
        if style.stroke_width is not None and current.stroke_width is not None:
            score += _closeness(style.stroke_width, current.stroke_width, 5) * STROKE_WIDTH_WEIGHT
        if style.corner_radius is not None and current.corner_radius is not None:
            score += _closeness(style.corner_radius, current.corner_radius, 20) * CORNER_RADIUS_WEIGHT
    score += (preset.usage_count or 0) * USAGE_WEIGHT
    return score


def generate_preset_suggestions(
    current_styles: Sequence[ElementStyle],
    presets: Sequence[StylePreset],
    max_suggestions: int = 5,
) -> List[StylePreset]:
    """
    Presets most similar to the current selection.

    With nothing selected, the most used presets are returned instead.
    Ties keep catalog order.
    """
    if not current_styles:
        ranked = sorted(presets, key=lambda p: p.usage_count or 0, reverse=True)
        return ranked[:max_suggestions]

    scored = [(score_preset(preset, current_styles), preset) for preset in presets]
    scored.sort(key=lambda item: item[0], reverse=True)
    return [preset for _, preset in scored[:max_suggestions]]


def analyze_preset_usage(presets: Sequence[StylePreset]) -> Dict[str, Any]:
    """
    Aggregate statistics over a set of presets.

    Returns:
        most_used: up to ten presets with a positive usage count
        popular_categories: category counts, most common first
        popular_colors: fill and stroke counts, top ten
        average_complexity: mean number of defined style fields
    """
    most_used = sorted(
        (p for p in presets if p.usage_count and p.usage_count > 0),
        key=lambda p: p.usage_count,
        reverse=True,
    )[:10]

    categories = Counter(enum_value(p.category) for p in presets)
    colors: Counter = Counter()
    for preset in presets:
        if preset.style.fill:
            colors[preset.style.fill] += 1
        if preset.style.stroke:
            colors[preset.style.stroke] += 1

    total_fields = sum(len(p.style.defined_fields()) for p in presets)
    average = total_fields / len(presets) if presets else 0

    return {
        "most_used": most_used,
        "popular_categories": [
            {"category": category, "count": count}
            for category, count in categories.most_common()
        ],
        "popular_colors": [
            {"color": color, "count": count}
            for color, count in colors.most_common(10)
        ],
        "average_complexity": average,
    }
