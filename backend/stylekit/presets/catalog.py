"""
Preset catalog.

Combines the immutable built-in presets and themes with the user's data in
a PresetStore, and enforces the business rules that span both:

Rules:
- Built-in presets and themes can never be updated or deleted
- Custom preset names are unique among custom presets (case-insensitive)
- Deleting a preset removes it from favorites, recently-used and collections
- Bulk operations check every id before changing anything
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from ..persistence.store import PresetStore
from .builtins import get_builtin_presets, get_builtin_themes
from .defaults import DEFAULT_QUICK_STYLES, PRESET_CATEGORIES, get_quick_style
from .errors import ImmutableResourceError, NotFoundError, ValidationError
from .insights import analyze_preset_usage, generate_preset_suggestions
from .merge import merge_style
from .models import (
    ApplicationMode,
    ElementStyle,
    PresetCollection,
    PresetDraft,
    PresetSearchFilters,
    PresetSettings,
    QuickStyle,
    StylePreset,
    StyleTheme,
    enum_value,
)
from .search import search_presets
from .validation import parse_model

logger = logging.getLogger(__name__)


# Fields copied from a source preset when duplicating it
_DUPLICATE_FIELDS = ("description", "style", "category", "tags", "thumbnail", "author", "rating")


class PresetCatalog:
    """
    Built-in plus custom presets, collections and themes.

    Built-ins are seeded once at construction. Custom data is read from
    the store on every call, so several catalogs over one store agree.
    """

    def __init__(self, store: PresetStore):
        self.store = store
        self._builtin_presets: Tuple[StylePreset, ...] = tuple(get_builtin_presets())
        self._builtin_themes: Tuple[StyleTheme, ...] = tuple(get_builtin_themes())
        self._builtin_preset_ids = {p.id for p in self._builtin_presets}
        self._builtin_theme_ids = {t.id for t in self._builtin_themes}
        store.external_preset_ids = set(self._builtin_preset_ids)
        store.external_theme_ids = set(self._builtin_theme_ids)
        logger.debug(
            f"Catalog seeded with {len(self._builtin_presets)} built-in presets "
            f"and {len(self._builtin_themes)} built-in themes"
        )

    @property
    def builtin_presets(self) -> Tuple[StylePreset, ...]:
        return self._builtin_presets

    @property
    def builtin_themes(self) -> Tuple[StyleTheme, ...]:
        return self._builtin_themes

    @property
    def storage_warnings(self):
        return self.store.storage_warnings

    def is_builtin_preset(self, preset_id: str) -> bool:
        return preset_id in self._builtin_preset_ids

    def is_builtin_theme(self, theme_id: str) -> bool:
        return theme_id in self._builtin_theme_ids

    # Presets

    def list_presets(self) -> List[StylePreset]:
        """Built-ins first, then custom presets in creation order."""
        return list(self._builtin_presets) + self.store.get_presets()

    def list_custom_presets(self) -> List[StylePreset]:
        return self.store.get_presets()

    def get_preset(self, preset_id: str) -> Optional[StylePreset]:
        for preset in self._builtin_presets:
            if preset.id == preset_id:
                return preset
        return self.store.get_preset_by_id(preset_id)

    def get_preset_or_raise(self, preset_id: str) -> StylePreset:
        """
        Raises:
            NotFoundError: If the preset does not exist
        """
        preset = self.get_preset(preset_id)
        if preset is None:
            raise NotFoundError("preset", preset_id)
        return preset

    def _check_name_available(self, name: str, exclude_id: Optional[str] = None) -> None:
        wanted = name.strip().lower()
        for preset in self.store.get_presets():
            if preset.id != exclude_id and preset.name.strip().lower() == wanted:
                raise ValidationError([f"A preset with this name already exists: {name.strip()}"])

    def _check_mutable_preset(self, preset_id: str) -> None:
        if self.is_builtin_preset(preset_id):
            raise ImmutableResourceError("preset", preset_id)

    def create_preset(
        self,
        draft: Union[PresetDraft, Mapping[str, Any]],
        preset_id: Optional[str] = None,
    ) -> StylePreset:
        """
        Create a custom preset.

        Raises:
            ValidationError: If the draft is invalid or its name is taken
        """
        if isinstance(draft, Mapping):
            name = draft.get("name")
        else:
            name = draft.name
        if isinstance(name, str) and name.strip():
            self._check_name_available(name)
        if preset_id is not None and self.is_builtin_preset(preset_id):
            raise ValidationError([f"Preset id already exists: {preset_id}"])
        return self.store.create_preset(draft, preset_id=preset_id)

    def update_preset(self, preset_id: str, updates: Mapping[str, Any]) -> StylePreset:
        """
        Raises:
            ImmutableResourceError: If the preset is built in
            NotFoundError: If the preset does not exist
            ValidationError: If the result is invalid or the new name is taken
        """
        self._check_mutable_preset(preset_id)
        name = updates.get("name")
        if isinstance(name, str) and name.strip():
            self._check_name_available(name, exclude_id=preset_id)
        return self.store.update_preset(preset_id, updates)

    def delete_preset(self, preset_id: str) -> None:
        """
        Raises:
            ImmutableResourceError: If the preset is built in
            NotFoundError: If the preset does not exist
        """
        self._check_mutable_preset(preset_id)
        self.store.delete_preset(preset_id)

    def _unique_copy_name(self, base_name: str) -> str:
        taken = {p.name.lower() for p in self.list_presets()}
        candidate = f"{base_name} (Copy)"
        counter = 1
        while candidate.lower() in taken:
            candidate = f"{base_name} (Copy {counter})"
            counter += 1
        return candidate

    def duplicate_preset(self, preset_id: str, new_name: Optional[str] = None) -> StylePreset:
        """
        Copy any preset, built-in or custom, into a new custom preset.

        Without a name the copy is called "<name> (Copy)", then
        "<name> (Copy 1)", "<name> (Copy 2)" and so on.
        """
        source = self.get_preset_or_raise(preset_id)
        draft = {field: getattr(source, field) for field in _DUPLICATE_FIELDS}
        draft["name"] = new_name or self._unique_copy_name(source.name)
        draft["is_shared"] = False
        return self.create_preset(draft)

    def bulk_update_presets(self, preset_ids: Sequence[str], updates: Mapping[str, Any]) -> List[StylePreset]:
        """
        Apply the same updates to several presets.

        Every id is checked and every result validated before anything is
        written.
        """
        for preset_id in preset_ids:
            self._check_mutable_preset(preset_id)
        if "name" in updates and len(preset_ids) > 1:
            raise ValidationError(["Cannot give several presets the same name"])
        name = updates.get("name")
        if isinstance(name, str) and name.strip() and preset_ids:
            self._check_name_available(name, exclude_id=preset_ids[0])
        for preset_id in preset_ids:
            self.store.preview_preset_update(preset_id, updates)
        return [self.store.update_preset(preset_id, updates) for preset_id in preset_ids]

    def bulk_delete_presets(self, preset_ids: Sequence[str]) -> None:
        for preset_id in preset_ids:
            self._check_mutable_preset(preset_id)
            if self.store.get_preset_by_id(preset_id) is None:
                raise NotFoundError("preset", preset_id)
        for preset_id in preset_ids:
            self.store.delete_preset(preset_id)

    def search(
        self,
        filters: Union[PresetSearchFilters, Mapping[str, Any], None] = None,
    ) -> List[StylePreset]:
        if filters is not None:
            filters = parse_model(PresetSearchFilters, filters)
        return search_presets(self.list_presets(), filters)

    # Favorites and recently used

    def toggle_favorite(self, preset_id: str) -> bool:
        """
        Flip the favorite flag of a preset.

        Returns:
            True if the preset is now a favorite
        """
        self.get_preset_or_raise(preset_id)
        if preset_id in self.store.get_favorites():
            self.store.remove_from_favorites(preset_id)
            return False
        self.store.add_to_favorites(preset_id)
        return True

    def _resolve(self, preset_ids: Sequence[str]) -> List[StylePreset]:
        resolved = []
        for preset_id in preset_ids:
            preset = self.get_preset(preset_id)
            if preset is not None:
                resolved.append(preset)
        return resolved

    def get_favorites(self) -> List[StylePreset]:
        return self._resolve(self.store.get_favorites())

    def get_recently_used(self) -> List[StylePreset]:
        return self._resolve(self.store.get_recently_used())

    # Application

    def _record_use(self, preset: StylePreset) -> None:
        if preset.is_custom:
            self.store.update_preset(preset.id, {"usage_count": (preset.usage_count or 0) + 1})
        self.store.add_to_recently_used(preset.id)

    def _resolve_mode(self, mode: Union[ApplicationMode, str, None]) -> Union[ApplicationMode, str]:
        if mode is None:
            return self.store.get_settings().default_application_mode
        return mode

    def apply_preset(
        self,
        preset_id: str,
        current_style: ElementStyle,
        mode: Union[ApplicationMode, str, None] = None,
    ) -> ElementStyle:
        """
        Merge a preset onto one element's style.

        The merged style is returned to the caller, which owns writing it
        back to the element. Usage is tracked on the preset.
        """
        preset = self.get_preset_or_raise(preset_id)
        merged = merge_style(current_style, preset.style, self._resolve_mode(mode))
        self._record_use(preset)
        return merged

    def apply_preset_to_elements(
        self,
        preset_id: str,
        styles_by_element: Mapping[str, ElementStyle],
        mode: Union[ApplicationMode, str, None] = None,
    ) -> Dict[str, ElementStyle]:
        """Merge a preset onto several elements; counts as a single use."""
        preset = self.get_preset_or_raise(preset_id)
        resolved = self._resolve_mode(mode)
        merged = {
            element_id: merge_style(style, preset.style, resolved)
            for element_id, style in styles_by_element.items()
        }
        self._record_use(preset)
        logger.info(f"Applied preset {preset_id} to {len(merged)} element(s)")
        return merged

    def list_quick_styles(self) -> List[QuickStyle]:
        return list(DEFAULT_QUICK_STYLES)

    def apply_quick_style(self, quick_style_id: str, current_style: ElementStyle) -> ElementStyle:
        quick_style = get_quick_style(quick_style_id)
        if quick_style is None:
            raise NotFoundError("quick style", quick_style_id)
        return merge_style(current_style, quick_style.style_updates, ApplicationMode.MERGE)

    # Collections

    def list_collections(self) -> List[PresetCollection]:
        return self.store.get_collections()

    def get_collection(self, collection_id: str) -> Optional[PresetCollection]:
        return self.store.get_collection_by_id(collection_id)

    def get_collection_or_raise(self, collection_id: str) -> PresetCollection:
        collection = self.get_collection(collection_id)
        if collection is None:
            raise NotFoundError("collection", collection_id)
        return collection

    def create_collection(
        self,
        data: Mapping[str, Any],
        preset_ids: Optional[Sequence[str]] = None,
    ) -> PresetCollection:
        """
        Create a collection, optionally embedding catalog presets by id.

        Raises:
            NotFoundError: If a referenced preset does not exist
            ValidationError: If the collection is invalid
        """
        fields = dict(data)
        if preset_ids:
            embedded = list(fields.get("presets") or [])
            embedded.extend(self.get_preset_or_raise(pid) for pid in preset_ids)
            fields["presets"] = embedded
        return self.store.create_collection(fields)

    def update_collection(self, collection_id: str, updates: Mapping[str, Any]) -> PresetCollection:
        return self.store.update_collection(collection_id, updates)

    def delete_collection(self, collection_id: str) -> None:
        self.store.delete_collection(collection_id)

    def add_preset_to_collection(self, collection_id: str, preset_id: str) -> PresetCollection:
        collection = self.get_collection_or_raise(collection_id)
        preset = self.get_preset_or_raise(preset_id)
        if preset_id in collection.preset_ids():
            return collection
        return self.store.update_collection(collection_id, {"presets": collection.presets + [preset]})

    def remove_preset_from_collection(self, collection_id: str, preset_id: str) -> PresetCollection:
        collection = self.get_collection_or_raise(collection_id)
        if preset_id not in collection.preset_ids():
            raise NotFoundError("preset", preset_id)
        remaining = [p for p in collection.presets if p.id != preset_id]
        return self.store.update_collection(collection_id, {"presets": remaining})

    # Themes

    def list_themes(self) -> List[StyleTheme]:
        return list(self._builtin_themes) + self.store.get_themes()

    def get_theme(self, theme_id: str) -> Optional[StyleTheme]:
        for theme in self._builtin_themes:
            if theme.id == theme_id:
                return theme
        return self.store.get_theme_by_id(theme_id)

    def get_theme_or_raise(self, theme_id: str) -> StyleTheme:
        theme = self.get_theme(theme_id)
        if theme is None:
            raise NotFoundError("theme", theme_id)
        return theme

    def _check_mutable_theme(self, theme_id: str) -> None:
        if self.is_builtin_theme(theme_id):
            raise ImmutableResourceError("theme", theme_id)

    def create_theme(self, data: Mapping[str, Any]) -> StyleTheme:
        return self.store.create_theme(data)

    def update_theme(self, theme_id: str, updates: Mapping[str, Any]) -> StyleTheme:
        self._check_mutable_theme(theme_id)
        return self.store.update_theme(theme_id, updates)

    def delete_theme(self, theme_id: str) -> None:
        self._check_mutable_theme(theme_id)
        self.store.delete_theme(theme_id)

    def duplicate_theme(self, theme_id: str, new_name: Optional[str] = None) -> StyleTheme:
        source = self.get_theme_or_raise(theme_id)
        if not new_name:
            taken = {t.name.lower() for t in self.list_themes()}
            new_name = f"{source.name} (Copy)"
            counter = 1
            while new_name.lower() in taken:
                new_name = f"{source.name} (Copy {counter})"
                counter += 1
        return self.store.create_theme({
            "name": new_name,
            "description": source.description,
            "presets": source.presets,
            "colors": source.colors,
            "typography": source.typography,
        })

    def set_current_theme(self, theme_id: str) -> StyleTheme:
        theme = self.get_theme_or_raise(theme_id)
        self.store.set_current_theme(theme_id)
        return theme

    def get_current_theme(self) -> Optional[StyleTheme]:
        theme_id = self.store.get_current_theme()
        if theme_id is None:
            return None
        return self.get_theme(theme_id)

    def clear_current_theme(self) -> None:
        self.store.clear_current_theme()

    # Settings and maintenance

    def get_settings(self) -> PresetSettings:
        return self.store.get_settings()

    def update_settings(self, updates: Mapping[str, Any]) -> PresetSettings:
        return self.store.update_settings(updates)

    def garbage_collect(self) -> Dict[str, int]:
        """Drop dangling favorite and recently-used ids and stale backups."""
        result = self.store.cleanup()
        logger.info(f"Garbage collection finished: {result}")
        return result

    def suggest_presets(
        self,
        current_styles: Sequence[ElementStyle],
        max_suggestions: int = 5,
    ) -> List[StylePreset]:
        """Presets resembling the current selection; empty when suggestions are disabled."""
        if not self.store.get_settings().enable_suggestions:
            return []
        return generate_preset_suggestions(current_styles, self.list_presets(), max_suggestions)

    def analyze_usage(self) -> Dict[str, Any]:
        return analyze_preset_usage(self.list_presets())

    def list_categories(self) -> List[Dict[str, Any]]:
        """Display metadata for every category, with its preset count."""
        counts = Counter(enum_value(p.category) for p in self.list_presets())
        return [
            dict(metadata, id=category, count=counts.get(category, 0))
            for category, metadata in PRESET_CATEGORIES.items()
        ]
