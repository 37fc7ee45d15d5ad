from __future__ import annotations

import json

from fastapi.testclient import TestClient

from backend.app import app, get_favorites_store
from backend.catalog.data_store import get_dataframe
from backend.favorites.service import (
    FAVORITES_KEY,
    add_favorite,
    load_favorites,
    remove_favorite,
    save_favorites,
    saved_locations,
    toggle_favorite,
)
from backend.favorites.store import MemoryStore, SessionStore


def _fresh_client() -> TestClient:
    # Each client carries its own session cookie, so favorites don't leak between tests
    return TestClient(app)


# ── Store ────────────────────────────────────────────────────────────────


class TestFavoritesService:
    def test_empty_store_has_no_favorites(self):
        assert load_favorites(MemoryStore()) == []

    def test_invalid_json_is_treated_as_empty(self):
        store = MemoryStore({FAVORITES_KEY: "[1, 2"})
        assert load_favorites(store) == []

    def test_non_list_is_treated_as_empty(self):
        store = MemoryStore({FAVORITES_KEY: json.dumps({"ids": [1, 2]})})
        assert load_favorites(store) == []

    def test_junk_entries_are_skipped(self):
        store = MemoryStore({FAVORITES_KEY: json.dumps([1, "2", True, None, 1, {"id": 3}])})
        assert load_favorites(store) == ["1", "2"]

    def test_save_writes_json_array_under_namespace(self):
        store = MemoryStore()
        save_favorites(store, ["3", "1", "3"])
        assert json.loads(store.data[FAVORITES_KEY]) == ["3", "1"]

    def test_add_and_remove(self):
        store = MemoryStore()
        assert add_favorite(store, "4") == ["4"]
        assert add_favorite(store, "2") == ["4", "2"]
        assert add_favorite(store, "4") == ["4", "2"]
        assert remove_favorite(store, "4") == ["2"]
        assert remove_favorite(store, "99") == ["2"]

    def test_toggle(self):
        store = MemoryStore()
        assert toggle_favorite(store, "5") == (["5"], True)
        assert toggle_favorite(store, "5") == ([], False)

    def test_custom_namespace_is_independent(self):
        store = MemoryStore()
        add_favorite(store, "1", namespace="other")
        assert load_favorites(store) == []
        assert load_favorites(store, namespace="other") == ["1"]

    def test_session_store_ignores_non_string_values(self):
        session = {FAVORITES_KEY: ["1", "2"]}
        store = SessionStore(session)
        assert store.get(FAVORITES_KEY) is None
        store.set(FAVORITES_KEY, '["1"]')
        assert session[FAVORITES_KEY] == '["1"]'

    def test_saved_locations_follow_catalog_order_and_skip_stale_ids(self):
        catalog = get_dataframe()
        saved = saved_locations(catalog, ["9", "gone", "2"])
        assert saved["id"].tolist() == ["2", "9"]


# ── API ──────────────────────────────────────────────────────────────────


def test_save_and_list_favorites():
    client = _fresh_client()

    resp = client.put("/favorites/3")
    assert resp.status_code == 200
    body = resp.json()
    assert body["ids"] == ["3"]
    assert body["saved"] is True
    assert body["locations"][0]["name"] == "Children's Fairyland"
    assert body["locations"][0]["saved"] is True

    listing = client.get("/favorites").json()
    assert listing["ids"] == ["3"]

    detail = client.get("/locations/3").json()
    assert detail["saved"] is True


def test_saved_flag_on_search_results():
    client = _fresh_client()
    client.put("/favorites/1")
    results = client.get("/locations", params={"region": "East Bay"}).json()["locations"]
    saved = {loc["id"]: loc["saved"] for loc in results}
    assert saved["1"] is True
    assert saved["2"] is False


def test_unsave_favorite():
    client = _fresh_client()
    client.put("/favorites/3")
    client.put("/favorites/4")
    resp = client.delete("/favorites/3")
    assert resp.status_code == 200
    assert resp.json()["ids"] == ["4"]
    assert resp.json()["saved"] is False


def test_toggle_favorite_endpoint():
    client = _fresh_client()
    first = client.post("/favorites/6/toggle").json()
    assert first["ids"] == ["6"]
    assert first["saved"] is True

    second = client.post("/favorites/6/toggle").json()
    assert second["ids"] == []
    assert second["saved"] is False


def test_save_unknown_location_is_404():
    client = _fresh_client()
    assert client.put("/favorites/9999").status_code == 404
    assert client.post("/favorites/9999/toggle").status_code == 404
    assert client.get("/favorites").json()["ids"] == []


def test_corrupt_store_reads_as_no_favorites():
    store = MemoryStore({FAVORITES_KEY: "definitely not json"})
    app.dependency_overrides[get_favorites_store] = lambda: store
    try:
        client = _fresh_client()
        resp = client.get("/favorites")
        assert resp.status_code == 200
        assert resp.json() == {"ids": [], "locations": [], "saved": None}

        # Next write replaces the corrupt value
        client.put("/favorites/2")
        assert json.loads(store.data[FAVORITES_KEY]) == ["2"]
    finally:
        app.dependency_overrides.clear()


def test_stale_favorite_can_still_be_removed():
    store = MemoryStore({FAVORITES_KEY: json.dumps(["retired-location", "1"])})
    app.dependency_overrides[get_favorites_store] = lambda: store
    try:
        client = _fresh_client()
        listing = client.get("/favorites").json()
        assert listing["ids"] == ["retired-location", "1"]
        assert [loc["id"] for loc in listing["locations"]] == ["1"]

        resp = client.post("/favorites/retired-location/toggle")
        assert resp.status_code == 200
        assert resp.json()["ids"] == ["1"]
    finally:
        app.dependency_overrides.clear()
