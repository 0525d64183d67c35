"""
HTTP API tests.

Uses TestClient over an in-memory catalog - no running server or
database file required.
"""

import pytest
from fastapi.testclient import TestClient

from stylekit.config import StyleKitConfig
from stylekit.main import create_app
from stylekit.persistence import MemoryKeyValueStore, PresetStore
from stylekit.persistence.errors import StorageWriteError
from stylekit.presets import PRESET_CATEGORIES
from stylekit.presets.catalog import PresetCatalog


THEME_BODY = {
    "name": "Ocean",
    "colors": {
        "primary": "#0ea5e9",
        "secondary": "#0369a1",
        "accent": "#f59e0b",
        "background": "#ffffff",
        "text": "#1f2937",
        "success": "#10b981",
        "warning": "#f59e0b",
        "error": "#ef4444",
    },
    "typography": {
        "headingFont": "Arial, sans-serif",
        "bodyFont": "Arial, sans-serif",
        "monoFont": "Monaco, monospace",
    },
}


@pytest.fixture
def client(catalog, tmp_path):
    catalog.update_settings({"autoBackup": False})
    config = StyleKitConfig(db_path=str(tmp_path / "unused.db"), app_name="StyleKit Test")
    return TestClient(create_app(config, catalog))


@pytest.fixture
def created(client, draft):
    response = client.post("/api/presets", json=draft)
    assert response.status_code == 201, response.text
    return response.json()


class TestService:

    def test_root(self, client):
        assert client.get("/").json() == {"service": "stylekit", "status": "running"}

    def test_health(self, client):
        data = client.get("/health").json()
        assert data == {"status": "ok", "service": "StyleKit Test", "storageWarnings": 0}

    def test_health_reports_storage_warnings(self, client, catalog):
        catalog.store.kv.set("stylekit_style_presets", b"garbage")
        client.get("/api/presets")
        data = client.get("/health").json()
        assert data["status"] == "degraded"
        assert data["storageWarnings"] == 1

    def test_storage_failure_is_retryable(self, draft, tmp_path):
        class ReadOnlyKeyValueStore(MemoryKeyValueStore):
            def set(self, key, value):
                raise StorageWriteError(f"disk full: {key}")

        catalog = PresetCatalog(PresetStore(ReadOnlyKeyValueStore()))
        config = StyleKitConfig(db_path=str(tmp_path / "unused.db"))
        client = TestClient(create_app(config, catalog))

        response = client.post("/api/presets", json=draft)

        assert response.status_code == 503
        assert response.headers["retry-after"] == "1"
        assert response.json()["retryable"] is True
        assert client.get("/api/presets").status_code == 200


class TestPresetEndpoints:

    def test_list_includes_builtins(self, client):
        presets = client.get("/api/presets").json()["presets"]
        assert presets[0]["id"] == "business-professional"
        assert presets[0]["isCustom"] is False

    def test_filter_and_sort(self, client, created):
        response = client.get("/api/presets", params={"category": "business", "sort_by": "name", "order": "desc"})
        names = [p["name"] for p in response.json()["presets"]]
        assert names == ["Professional", "Ocean", "Executive", "Corporate"]

    def test_categories_with_counts(self, client, created):
        categories = client.get("/api/presets/categories").json()["categories"]
        assert len(categories) == len(PRESET_CATEGORIES)
        by_id = {c["id"]: c for c in categories}
        assert by_id["business"]["label"] == "Business"
        assert by_id["business"]["count"] == 4
        assert by_id["custom"]["count"] == 0

    def test_filter_by_tags(self, client):
        response = client.get("/api/presets", params=[("tag", "flowchart"), ("tag", "decision")])
        assert [p["id"] for p in response.json()["presets"]] == ["flowchart-decision"]

    def test_bad_sort_field(self, client):
        assert client.get("/api/presets", params={"sort_by": "colour"}).status_code == 400

    def test_bad_category(self, client):
        assert client.get("/api/presets", params={"category": "nope"}).status_code == 400

    def test_create_returns_camel_case(self, created):
        assert created["name"] == "Ocean"
        assert created["style"]["strokeWidth"] == 2
        assert created["isCustom"] is True
        assert "id" in created

    def test_create_invalid(self, client):
        response = client.post("/api/presets", json={"name": "Broken", "style": {"fill": "zzz"}, "category": "custom"})
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ["Invalid fill color"]

    def test_get_update_delete(self, client, created):
        preset_id = created["id"]
        assert client.get(f"/api/presets/{preset_id}").json()["name"] == "Ocean"

        response = client.patch(f"/api/presets/{preset_id}", json={"rating": 5})
        assert response.status_code == 200
        assert response.json()["rating"] == 5

        assert client.delete(f"/api/presets/{preset_id}").json()["success"] is True
        assert client.get(f"/api/presets/{preset_id}").status_code == 404

    def test_builtin_is_immutable(self, client):
        assert client.patch("/api/presets/business-professional", json={"name": "x"}).status_code == 409
        assert client.delete("/api/presets/business-professional").status_code == 409

    def test_missing_preset(self, client):
        assert client.get("/api/presets/ghost").status_code == 404
        assert client.patch("/api/presets/ghost", json={"name": "x"}).status_code == 404

    def test_duplicate(self, client):
        response = client.post("/api/presets/creative-playful/duplicate")
        assert response.status_code == 201
        assert response.json()["name"] == "Playful (Copy)"

        named = client.post("/api/presets/creative-playful/duplicate", json={"newName": "Fun"})
        assert named.json()["name"] == "Fun"

    def test_apply(self, client, created):
        response = client.post(
            f"/api/presets/{created['id']}/apply",
            json={"style": {"fill": "#000000", "fontSize": 12}, "mode": "merge"},
        )
        assert response.status_code == 200
        style = response.json()["style"]
        assert style["fill"] == "#0ea5e9"
        assert style["fontSize"] == 12

        recent = client.get("/api/presets/recent").json()["presets"]
        assert [p["id"] for p in recent] == [created["id"]]

    def test_apply_to_elements(self, client):
        response = client.post(
            "/api/presets/wireframe-box/apply-elements",
            json={"styles": {"a": {}, "b": {"fill": "#000000"}}, "mode": "replace"},
        )
        styles = response.json()["styles"]
        assert styles["a"] == styles["b"]

    def test_apply_rejects_bad_style(self, client):
        response = client.post("/api/presets/wireframe-box/apply", json={"style": {"fontWeight": "heavy"}})
        assert response.status_code == 400

    def test_quick_styles(self, client):
        assert len(client.get("/api/presets/quick-styles").json()["quickStyles"]) == 5
        response = client.post("/api/presets/quick-styles/bold-text/apply", json={"style": {"fill": "#ffffff"}})
        assert response.json()["style"] == {"fill": "#ffffff", "fontWeight": "bold"}
        assert client.post("/api/presets/quick-styles/nope/apply", json={}).status_code == 404

    def test_favorites(self, client):
        assert client.post("/api/presets/mindmap-central/favorite").json()["favorite"] is True
        favorites = client.get("/api/presets/favorites").json()["presets"]
        assert [p["id"] for p in favorites] == ["mindmap-central"]

    def test_settings(self, client):
        assert client.get("/api/presets/settings").json()["maxRecentlyUsed"] == 10
        assert client.patch("/api/presets/settings", json={"maxRecentlyUsed": 3}).json()["maxRecentlyUsed"] == 3
        assert client.patch("/api/presets/settings", json={"volume": 11}).status_code == 400

    def test_bulk_operations(self, client, created, draft):
        other = client.post("/api/presets", json=dict(draft, name="Forest")).json()
        ids = [created["id"], other["id"]]

        response = client.post("/api/presets/bulk-update", json={"presetIds": ids, "updates": {"rating": 3}})
        assert [p["rating"] for p in response.json()["presets"]] == [3, 3]

        blocked = client.post("/api/presets/bulk-delete", json={"presetIds": ids + ["business-professional"]})
        assert blocked.status_code == 409

        assert client.post("/api/presets/bulk-delete", json={"presetIds": ids}).json()["deleted"] == 2

    def test_suggestions_and_insights(self, client):
        response = client.post("/api/presets/suggestions", json={"styles": [{"fill": "#1e40af"}], "maxSuggestions": 1})
        assert [p["id"] for p in response.json()["presets"]] == ["business-executive"]
        insights = client.get("/api/presets/insights").json()
        assert insights["most_used"] == []
        assert insights["popular_categories"]


class TestCollectionEndpoints:

    def test_crud(self, client, created):
        response = client.post("/api/collections", json={"name": "Mine", "presetIds": [created["id"]]})
        assert response.status_code == 201
        collection = response.json()
        assert [p["id"] for p in collection["presets"]] == [created["id"]]

        added = client.post(f"/api/collections/{collection['id']}/presets/wireframe-box").json()
        assert len(added["presets"]) == 2

        removed = client.delete(f"/api/collections/{collection['id']}/presets/{created['id']}").json()
        assert [p["id"] for p in removed["presets"]] == ["wireframe-box"]

        renamed = client.patch(f"/api/collections/{collection['id']}", json={"name": "Renamed"}).json()
        assert renamed["name"] == "Renamed"

        assert len(client.get("/api/collections").json()["collections"]) == 1
        assert client.delete(f"/api/collections/{collection['id']}").status_code == 200
        assert client.get(f"/api/collections/{collection['id']}").status_code == 404

    def test_unknown_preset_reference(self, client):
        response = client.post("/api/collections", json={"name": "Mine", "presetIds": ["ghost"]})
        assert response.status_code == 404

    def test_missing_name(self, client):
        assert client.post("/api/collections", json={"name": ""}).status_code == 400


class TestThemeEndpoints:

    def test_list_and_get(self, client):
        themes = client.get("/api/themes").json()["themes"]
        assert len(themes) == 6
        assert client.get("/api/themes/theme-dark").json()["colors"]["background"] == "#111827"
        assert client.get("/api/themes/theme-neon").status_code == 404

    def test_current_theme(self, client):
        assert client.get("/api/themes/current").json() == {"theme": None}
        assert client.put("/api/themes/current", json={"themeId": "theme-minimal"}).status_code == 200
        assert client.get("/api/themes/current").json()["theme"]["id"] == "theme-minimal"
        assert client.put("/api/themes/current", json={"themeId": "theme-neon"}).status_code == 404
        client.delete("/api/themes/current")
        assert client.get("/api/themes/current").json() == {"theme": None}

    def test_custom_theme_crud(self, client):
        response = client.post("/api/themes", json=THEME_BODY)
        assert response.status_code == 201
        theme_id = response.json()["id"]
        assert client.patch(f"/api/themes/{theme_id}", json={"name": "Sea"}).json()["name"] == "Sea"
        assert client.delete(f"/api/themes/{theme_id}").status_code == 200

    def test_builtin_theme_is_immutable(self, client):
        assert client.patch("/api/themes/theme-default", json={"name": "x"}).status_code == 409
        assert client.delete("/api/themes/theme-default").status_code == 409

    def test_invalid_theme(self, client):
        body = dict(THEME_BODY, colors=dict(THEME_BODY["colors"], primary="zzz"))
        assert client.post("/api/themes", json=body).status_code == 400

    def test_palette_and_validation(self, client):
        colors = client.post("/api/themes/palette", json={"seed": "#3b82f6"}).json()["colors"]
        result = client.post("/api/themes/validate", json={"colors": colors}).json()
        assert result == {"isValid": True, "errors": []}
        assert client.post("/api/themes/palette", json={"seed": "zzz"}).status_code == 400

    def test_accessibility(self, client):
        response = client.post("/api/themes/accessibility", json={"colors": THEME_BODY["colors"], "level": "AA"})
        roles = response.json()["roles"]
        assert roles["text"]["passes"] is True
        assert "background" not in roles

    def test_from_current_without_saving(self, client):
        data = client.post("/api/themes/from-current", json={"name": "Derived", "baseThemeId": "theme-dark"}).json()
        assert data["saved"] is False
        assert data["theme"]["colors"]["background"] == "#111827"
        assert data["theme"]["typography"]["monoFont"] == "Monaco, monospace"

    def test_from_current_saved(self, client):
        data = client.post("/api/themes/from-current", json={"name": "Derived", "save": True}).json()
        assert data["saved"] is True
        assert client.get(f"/api/themes/{data['theme']['id']}").status_code == 200

    def test_duplicate_usage_and_preset(self, client):
        copy = client.post("/api/themes/theme-business/duplicate")
        assert copy.status_code == 201
        assert copy.json()["name"] == "Business (Copy)"

        preset = client.post("/api/themes/theme-business/preset", json={"name": "Biz", "save": True}).json()
        assert preset["saved"] is True
        usage = client.get("/api/themes/theme-business/usage").json()
        assert usage["related_presets"] == [preset["preset"]["id"]]


class TestExchangeEndpoints:

    def test_export_json(self, client):
        response = client.post("/api/exchange/export", json={"presetIds": ["wireframe-box"], "exportedBy": "me"})
        envelope = response.json()
        assert envelope["type"] == "preset"
        assert envelope["metadata"]["exportedBy"] == "me"

    def test_export_css(self, client):
        response = client.post("/api/exchange/export", json={"presetIds": ["wireframe-box"], "format": "css"})
        assert response.headers["content-type"].startswith("text/css")
        assert "/* OpenChart Style Presets */" in response.text

    def test_export_tokens(self, client):
        response = client.post("/api/exchange/export", json={"presetIds": ["business-executive"], "format": "tokens"})
        assert "executive-fill" in response.json()["colors"]

    def test_export_errors(self, client):
        assert client.post("/api/exchange/export", json={"presetIds": []}).status_code == 400
        assert client.post("/api/exchange/export", json={"presetIds": [], "format": "css"}).status_code == 400
        assert client.post("/api/exchange/export", json={"presetIds": ["ghost"]}).status_code == 404

    def test_import_envelope(self, client):
        envelope = client.post("/api/exchange/export", json={"presetIds": ["wireframe-box"]}).json()
        data = client.post("/api/exchange/import", json=envelope).json()
        assert data["type"] == "preset"
        assert len(data["imported"]) == 1
        assert data["errors"] == []

    def test_import_rejected_batch(self, client):
        response = client.post("/api/exchange/import", json=[{"name": "No Style"}])
        assert response.status_code == 400
        assert response.json()["detail"]["errors"] == ['Preset "No Style" is missing style data']

    def test_import_theme_envelope(self, client):
        envelope = client.get("/api/exchange/themes/theme-creative").json()
        data = client.post("/api/exchange/import", json=envelope).json()
        assert data["type"] == "theme"
        assert data["data"]["isBuiltIn"] is False

    def test_import_collection_envelope(self, client):
        collection = client.post("/api/collections", json={"name": "Set", "presetIds": ["wireframe-box"]}).json()
        envelope = client.get(f"/api/exchange/collections/{collection['id']}").json()
        data = client.post("/api/exchange/import", json=envelope).json()
        assert data["type"] == "collection"
        assert data["data"]["id"] != collection["id"]

    def test_import_css(self, client):
        body = {"css": ".x { background-color: #123456; border-width: 3px; }", "name": "From CSS", "save": True}
        data = client.post("/api/exchange/import/css", json=body).json()
        assert data["saved"] is True
        assert data["preset"]["style"] == {"fill": "#123456", "strokeWidth": 3}

    def test_backup_and_restore(self, client, created):
        assert client.post("/api/exchange/backup").json()["presets"] == 1
        key = client.get("/api/exchange/backups").json()["backups"][0]["key"]

        client.delete(f"/api/presets/{created['id']}")
        response = client.post("/api/exchange/restore", json={"key": key})
        assert response.status_code == 200
        assert client.get(f"/api/presets/{created['id']}").status_code == 200

    def test_restore_errors(self, client):
        assert client.post("/api/exchange/restore", json={"key": "missing"}).status_code == 404
        assert client.post("/api/exchange/restore", json={}).status_code == 400
        assert client.post("/api/exchange/restore", json={"backup": {"presets": []}}).status_code == 400

    def test_cleanup_and_stats(self, client, created):
        client.post(f"/api/presets/{created['id']}/favorite")
        assert client.post("/api/exchange/cleanup").json()["favorites_removed"] == 0
        stats = client.get("/api/exchange/stats").json()
        assert stats["presetsCount"] == 1
        assert stats["favoritesCount"] == 1
