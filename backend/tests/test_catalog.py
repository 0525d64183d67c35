"""
Tests for PresetCatalog: built-ins layered over the store.

Covers:
- Built-in immutability
- Custom name uniqueness and duplication naming
- All-or-nothing bulk operations
- Application, usage tracking and quick styles
- Collections and themes
- Suggestions and usage insights
"""

import pytest

from stylekit.presets import (
    ElementStyle,
    ImmutableResourceError,
    NotFoundError,
    ValidationError,
)
from stylekit.presets.builtins import get_builtin_preset_by_id


THEME_COLORS = {
    "primary": "#3b82f6",
    "secondary": "#64748b",
    "accent": "#f59e0b",
    "background": "#ffffff",
    "text": "#1f2937",
    "success": "#10b981",
    "warning": "#f59e0b",
    "error": "#ef4444",
}

THEME_TYPOGRAPHY = {
    "headingFont": "Arial, sans-serif",
    "bodyFont": "Arial, sans-serif",
    "monoFont": "Monaco, monospace",
}


@pytest.fixture
def catalog(catalog):
    catalog.update_settings({"autoBackup": False})
    return catalog


class TestBuiltins:

    def test_builtins_listed_first(self, catalog, draft):
        custom = catalog.create_preset(draft)
        presets = catalog.list_presets()
        assert presets[0].id == "business-professional"
        assert presets[-1].id == custom.id
        assert len(presets) == len(catalog.builtin_presets) + 1

    def test_builtin_lookup_is_stable(self, catalog):
        assert catalog.get_preset("business-executive") == get_builtin_preset_by_id("business-executive")
        assert catalog.get_preset("business-executive").is_built_in

    @pytest.mark.parametrize("preset_id", ["business-professional", "mindmap-branch"])
    def test_builtin_presets_cannot_change(self, catalog, preset_id):
        before = catalog.get_preset(preset_id)
        with pytest.raises(ImmutableResourceError):
            catalog.update_preset(preset_id, {"name": "Mine"})
        with pytest.raises(ImmutableResourceError):
            catalog.delete_preset(preset_id)
        assert catalog.get_preset(preset_id) == before

    def test_builtin_themes_cannot_change(self, catalog):
        with pytest.raises(ImmutableResourceError):
            catalog.update_theme("theme-dark", {"name": "Darker"})
        with pytest.raises(ImmutableResourceError):
            catalog.delete_theme("theme-dark")

    def test_builtin_id_cannot_be_reused(self, catalog, draft):
        with pytest.raises(ValidationError):
            catalog.create_preset(draft, preset_id="business-professional")


class TestCustomPresets:

    def test_names_are_unique_ignoring_case(self, catalog, draft):
        catalog.create_preset(draft)
        with pytest.raises(ValidationError) as exc_info:
            catalog.create_preset(dict(draft, name=" ocean "))
        assert "already exists" in exc_info.value.errors[0]

    def test_builtin_names_may_be_reused(self, catalog, draft):
        preset = catalog.create_preset(dict(draft, name="Professional"))
        assert preset.is_custom

    def test_rename_to_taken_name_rejected(self, catalog, draft):
        catalog.create_preset(draft)
        other = catalog.create_preset(dict(draft, name="Forest"))
        with pytest.raises(ValidationError):
            catalog.update_preset(other.id, {"name": "OCEAN"})
        assert catalog.update_preset(other.id, {"name": "Forest"}).name == "Forest"

    def test_update_missing_preset(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.update_preset("nope", {"name": "x"})

    def test_duplicate_naming_sequence(self, catalog):
        first = catalog.duplicate_preset("business-professional")
        second = catalog.duplicate_preset("business-professional")
        third = catalog.duplicate_preset("business-professional")
        assert [first.name, second.name, third.name] == [
            "Professional (Copy)",
            "Professional (Copy 1)",
            "Professional (Copy 2)",
        ]
        assert first.is_custom
        assert first.style == catalog.get_preset("business-professional").style

    def test_duplicate_with_explicit_name(self, catalog, draft):
        source = catalog.create_preset(draft)
        copy = catalog.duplicate_preset(source.id, "Ocean Two")
        assert copy.id != source.id
        assert copy.tags == source.tags

    def test_search_spans_builtins_and_custom(self, catalog, draft):
        custom = catalog.create_preset(draft)
        results = catalog.search({"category": "business"})
        ids = [p.id for p in results]
        assert custom.id in ids
        assert "business-executive" in ids
        assert [p.id for p in catalog.search({"isCustom": True})] == [custom.id]


class TestBulkOperations:

    def test_bulk_update(self, catalog, draft):
        a = catalog.create_preset(draft)
        b = catalog.create_preset(dict(draft, name="Forest"))
        updated = catalog.bulk_update_presets([a.id, b.id], {"rating": 4})
        assert [p.rating for p in updated] == [4, 4]

    def test_bulk_update_is_all_or_nothing(self, catalog, draft):
        a = catalog.create_preset(draft)
        with pytest.raises(ImmutableResourceError):
            catalog.bulk_update_presets([a.id, "business-professional"], {"rating": 4})
        assert catalog.get_preset(a.id).rating is None

    def test_bulk_update_checks_every_id_before_writing(self, catalog, draft):
        a = catalog.create_preset(draft)
        b = catalog.create_preset(dict(draft, name="Forest"))
        with pytest.raises(NotFoundError):
            catalog.bulk_update_presets([a.id, b.id, "ghost"], {"rating": 2})
        assert catalog.get_preset(a.id).rating is None

    def test_bulk_rename_of_several_rejected(self, catalog, draft):
        a = catalog.create_preset(draft)
        b = catalog.create_preset(dict(draft, name="Forest"))
        with pytest.raises(ValidationError):
            catalog.bulk_update_presets([a.id, b.id], {"name": "Same"})

    def test_bulk_delete(self, catalog, draft):
        a = catalog.create_preset(draft)
        b = catalog.create_preset(dict(draft, name="Forest"))
        catalog.bulk_delete_presets([a.id, b.id])
        assert catalog.list_custom_presets() == []

    def test_bulk_delete_checks_every_id_first(self, catalog, draft):
        a = catalog.create_preset(draft)
        with pytest.raises(NotFoundError):
            catalog.bulk_delete_presets([a.id, "ghost"])
        assert catalog.get_preset(a.id) is not None


class TestApplication:

    def test_apply_tracks_usage_on_custom_presets(self, catalog, draft, plain_style):
        preset = catalog.create_preset(draft)
        catalog.apply_preset(preset.id, plain_style)
        catalog.apply_preset(preset.id, plain_style)
        assert catalog.get_preset(preset.id).usage_count == 2
        assert [p.id for p in catalog.get_recently_used()] == [preset.id]

    def test_apply_builtin_records_recent_only(self, catalog, plain_style):
        merged = catalog.apply_preset("business-executive", plain_style, "replace")
        assert merged == catalog.get_preset("business-executive").style
        assert catalog.get_preset("business-executive").usage_count is None
        assert [p.id for p in catalog.get_recently_used()] == ["business-executive"]

    def test_default_mode_comes_from_settings(self, catalog, plain_style):
        catalog.update_settings({"defaultApplicationMode": "replace"})
        merged = catalog.apply_preset("wireframe-box", plain_style)
        assert merged == catalog.get_preset("wireframe-box").style

    def test_apply_to_elements_counts_once(self, catalog, draft, plain_style):
        preset = catalog.create_preset(draft)
        result = catalog.apply_preset_to_elements(
            preset.id, {"a": plain_style, "b": ElementStyle(font_size=12)}, "merge"
        )
        assert set(result) == {"a", "b"}
        assert result["b"].font_size == 12
        assert result["b"].fill == "#0ea5e9"
        assert catalog.get_preset(preset.id).usage_count == 1

    def test_apply_missing_preset(self, catalog, plain_style):
        with pytest.raises(NotFoundError):
            catalog.apply_preset("ghost", plain_style)

    def test_quick_styles_merge(self, catalog, plain_style):
        assert len(catalog.list_quick_styles()) == 5
        result = catalog.apply_quick_style("remove-border", plain_style)
        assert result.stroke == "transparent"
        assert result.stroke_width == 0
        assert result.fill == plain_style.fill
        with pytest.raises(NotFoundError):
            catalog.apply_quick_style("sparkles", plain_style)

    def test_toggle_favorite(self, catalog):
        assert catalog.toggle_favorite("creative-vibrant") is True
        assert [p.id for p in catalog.get_favorites()] == ["creative-vibrant"]
        assert catalog.toggle_favorite("creative-vibrant") is False
        assert catalog.get_favorites() == []
        with pytest.raises(NotFoundError):
            catalog.toggle_favorite("ghost")

    def test_garbage_collect_keeps_builtin_favorites(self, catalog):
        catalog.toggle_favorite("creative-vibrant")
        catalog.store.add_to_favorites("ghost")
        result = catalog.garbage_collect()
        assert result["favorites_removed"] == 1
        assert [p.id for p in catalog.get_favorites()] == ["creative-vibrant"]


class TestCollections:

    def test_create_with_preset_ids(self, catalog, draft):
        custom = catalog.create_preset(draft)
        collection = catalog.create_collection({"name": "Mixed"}, preset_ids=["wireframe-box", custom.id])
        assert collection.preset_ids() == ["wireframe-box", custom.id]

    def test_create_requires_name(self, catalog):
        with pytest.raises(ValidationError):
            catalog.create_collection({"name": " "})

    def test_unknown_preset_id_rejected(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.create_collection({"name": "Set"}, preset_ids=["ghost"])

    def test_add_and_remove(self, catalog):
        collection = catalog.create_collection({"name": "Set"})
        collection = catalog.add_preset_to_collection(collection.id, "mindmap-central")
        collection = catalog.add_preset_to_collection(collection.id, "mindmap-central")
        assert collection.preset_ids() == ["mindmap-central"]
        collection = catalog.remove_preset_from_collection(collection.id, "mindmap-central")
        assert collection.presets == []
        with pytest.raises(NotFoundError):
            catalog.remove_preset_from_collection(collection.id, "mindmap-central")

    def test_delete(self, catalog):
        collection = catalog.create_collection({"name": "Set"})
        catalog.delete_collection(collection.id)
        assert catalog.get_collection(collection.id) is None
        with pytest.raises(NotFoundError):
            catalog.delete_collection(collection.id)


class TestThemes:

    def test_create_and_update_custom_theme(self, catalog):
        theme = catalog.create_theme({
            "name": "Ocean",
            "colors": THEME_COLORS,
            "typography": THEME_TYPOGRAPHY,
        })
        assert theme.is_built_in is False
        assert catalog.list_themes()[-1].id == theme.id
        renamed = catalog.update_theme(theme.id, {"name": "Deep Ocean"})
        assert renamed.name == "Deep Ocean"
        assert renamed.created == theme.created

    def test_invalid_theme_color_rejected(self, catalog):
        with pytest.raises(ValidationError) as exc_info:
            catalog.create_theme({
                "name": "Broken",
                "colors": dict(THEME_COLORS, accent="blurple"),
                "typography": THEME_TYPOGRAPHY,
            })
        assert any("accent" in err for err in exc_info.value.errors)

    def test_duplicate_builtin_theme(self, catalog):
        copy = catalog.duplicate_theme("theme-dark")
        assert copy.name == "Dark (Copy)"
        assert copy.colors == catalog.get_theme("theme-dark").colors
        assert copy.is_built_in is False

    def test_current_theme(self, catalog):
        assert catalog.get_current_theme() is None
        catalog.set_current_theme("theme-minimal")
        assert catalog.get_current_theme().id == "theme-minimal"
        catalog.clear_current_theme()
        assert catalog.get_current_theme() is None

    def test_unknown_current_theme_rejected(self, catalog):
        with pytest.raises(NotFoundError):
            catalog.set_current_theme("theme-neon")
        assert catalog.get_current_theme() is None

    def test_deleting_current_theme_clears_pointer(self, catalog):
        theme = catalog.create_theme({"name": "Temp", "colors": THEME_COLORS, "typography": THEME_TYPOGRAPHY})
        catalog.set_current_theme(theme.id)
        catalog.delete_theme(theme.id)
        assert catalog.get_current_theme() is None


class TestInsights:

    def test_suggestions_prefer_similar_fill(self, catalog):
        suggestions = catalog.suggest_presets([ElementStyle(fill="#1e40af")], max_suggestions=1)
        assert [p.id for p in suggestions] == ["business-executive"]

    def test_suggestions_without_selection_use_popularity(self, catalog, draft, plain_style):
        preset = catalog.create_preset(draft)
        catalog.apply_preset(preset.id, plain_style)
        assert catalog.suggest_presets([], max_suggestions=1)[0].id == preset.id

    def test_suggestions_can_be_disabled(self, catalog):
        catalog.update_settings({"enableSuggestions": False})
        assert catalog.suggest_presets([ElementStyle(fill="#1e40af")]) == []

    def test_usage_analysis(self, catalog, draft, plain_style):
        preset = catalog.create_preset(draft)
        catalog.apply_preset(preset.id, plain_style)
        insights = catalog.analyze_usage()
        assert [p.id for p in insights["most_used"]] == [preset.id]
        categories = {entry["category"]: entry["count"] for entry in insights["popular_categories"]}
        assert categories["business"] == 4
        assert insights["average_complexity"] > 0
