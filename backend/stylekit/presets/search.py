"""
Preset search and ordering.

search_presets is a pure filter: every provided criterion must hold, input
order is preserved, and nothing is sorted. Sorting is a separate step.
"""

from typing import Iterable, List, Literal, Optional

from .models import PresetSearchFilters, StylePreset, enum_value


SortField = Literal["name", "created", "modified", "usage", "rating"]
SortOrder = Literal["asc", "desc"]


def _matches_term(preset: StylePreset, term: str) -> bool:
    if term in preset.name.lower():
        return True
    if preset.description and term in preset.description.lower():
        return True
    if any(term in tag.lower() for tag in preset.tags):
        return True
    return term in enum_value(preset.category).lower()


def _matches_tags(preset: StylePreset, wanted: List[str]) -> bool:
    preset_tags = [tag.lower() for tag in preset.tags]
    return all(
        any(tag.lower() in preset_tag for preset_tag in preset_tags)
        for tag in wanted
    )


def matches_filters(preset: StylePreset, filters: PresetSearchFilters) -> bool:
    if filters.search_term and not _matches_term(preset, filters.search_term.lower()):
        return False

    if filters.category and preset.category != filters.category:
        return False

    if filters.tags and not _matches_tags(preset, filters.tags):
        return False

    if filters.author:
        if not preset.author or filters.author.lower() not in preset.author.lower():
            return False

    if filters.is_custom is not None and preset.is_custom != filters.is_custom:
        return False

    if filters.is_shared is not None and preset.is_shared != filters.is_shared:
        return False

    if filters.min_rating is not None and (preset.rating or 0) < filters.min_rating:
        return False

    return True


def search_presets(
    presets: Iterable[StylePreset],
    filters: Optional[PresetSearchFilters] = None,
) -> List[StylePreset]:
    """Presets satisfying every provided filter, in input order."""
    if filters is None:
        return list(presets)
    return [preset for preset in presets if matches_filters(preset, filters)]


def sort_presets(
    presets: Iterable[StylePreset],
    sort_by: SortField = "name",
    order: SortOrder = "asc",
) -> List[StylePreset]:
    """
    Order presets for display.

    Raises:
        ValueError: If sort_by is not a supported field
    """
    keys = {
        "name": lambda p: p.name.lower(),
        "created": lambda p: p.created,
        "modified": lambda p: p.modified,
        "usage": lambda p: p.usage_count or 0,
        "rating": lambda p: p.rating or 0,
    }
    if sort_by not in keys:
        raise ValueError(f"Unsupported sort field: {sort_by}")
    return sorted(presets, key=keys[sort_by], reverse=(order == "desc"))
