import base64
import inspect

import pytest
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from atelier.api.v1.flow import get_flow_controller
from atelier.core.config import settings
from atelier.main import app
from atelier.wiring import dependencies


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(settings, "AI_PROVIDER", "mock")
    monkeypatch.setattr(settings, "GENERATION_BATCH_SIZE", 4)
    dependencies.get_ai_provider.cache_clear()
    monkeypatch.setattr(dependencies, "_session_store", None)
    yield TestClient(app)
    dependencies.get_ai_provider.cache_clear()


def _new_session(client) -> str:
    resp = client.post("/api/v1/sessions")
    assert resp.status_code == 200
    return resp.json()["session_id"]


def _select(client, sid, dimension, option_id):
    return client.post(f"/api/v1/sessions/{sid}/select", json={"dimension": dimension, "option_id": option_id})


def _generated(client) -> tuple[str, dict]:
    sid = _new_session(client)
    for dimension, option_id in (
        ("target", "womens"),
        ("category", "tops"),
        ("subCategory", "tshirt"),
        ("stylePreset", "minimal"),
    ):
        assert _select(client, sid, dimension, option_id).status_code == 200
    resp = _select(client, sid, "mood", "city")
    assert resp.status_code == 200
    return sid, resp.json()


def test_session_routes_run_on_the_event_loop():
    # every session state write happens on the event loop, never in the threadpool
    session_routes = [r for r in app.routes if isinstance(r, APIRoute) and r.path.startswith("/api/v1/sessions")]

    assert session_routes
    for route in session_routes:
        assert inspect.iscoroutinefunction(route.endpoint), route.path
    assert inspect.iscoroutinefunction(get_flow_controller)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_new_session_starts_at_target(client):
    data = client.post("/api/v1/sessions").json()

    assert data["step"] == "TARGET_SELECT"
    assert data["status"] == "idle"
    assert data["visible_steps"] == ["TARGET_SELECT"]
    assert data["selection"]["target"] is None


def test_catalog_lists_sub_categories(client):
    resp = client.get("/api/v1/catalog/subCategory", params={"category": "tops"})

    assert resp.status_code == 200
    assert [o["id"] for o in resp.json()] == ["tshirt", "shirt", "knit"]
    assert client.get("/api/v1/catalog/subCategory", params={"category": "accessories"}).json() == []


def test_out_of_order_selection_is_conflict(client):
    sid = _new_session(client)

    resp = _select(client, sid, "category", "tops")

    assert resp.status_code == 409
    assert client.get(f"/api/v1/sessions/{sid}").json()["selection"]["category"] is None


def test_unknown_session_and_option_are_not_found(client):
    assert client.get("/api/v1/sessions/missing").status_code == 404
    sid = _new_session(client)
    assert _select(client, sid, "target", "martians").status_code == 404


def test_bad_payload_is_bad_request(client):
    sid = _new_session(client)

    assert _select(client, sid, "colour", "red").status_code == 400


def test_mood_selection_returns_generated_batch(client):
    _, data = _generated(client)

    assert data["step"] == "GENERATION"
    assert data["status"] == "complete"
    assert len(data["candidates"]) == 4
    assert data["visible_steps"][-1] == "GENERATION"
    for item in data["candidates"]:
        assert item["info"]["name"]
        assert item["match_score"] is None


def test_choose_refine_and_order(client):
    sid, data = _generated(client)
    item = data["candidates"][0]

    chosen = client.post(f"/api/v1/sessions/{sid}/choose", json={"item_id": item["id"]}).json()
    assert chosen["step"] == "DETAIL"

    audio = base64.b64encode(b"RIFF....WAVEfmt ").decode("ascii")
    refined = client.post(f"/api/v1/sessions/{sid}/refine", json={"audio_base64": audio}).json()
    assert refined["selected_item"]["id"] == item["id"]
    assert refined["selected_item"]["specs"] == item["specs"]
    assert refined["selected_item"]["info"]["styling_tips"].startswith('Refined: "')
    assert len(refined["selected_item"]["modifications"]) == 1

    ordered = client.post(f"/api/v1/sessions/{sid}/order").json()
    assert ordered["order_placed"] is True

    back = client.post(f"/api/v1/sessions/{sid}/back").json()
    assert back["step"] == "GENERATION"
    assert back["selected_item"] is None


def test_refine_rejects_invalid_audio(client):
    sid, data = _generated(client)
    client.post(f"/api/v1/sessions/{sid}/choose", json={"item_id": data["candidates"][0]["id"]})

    assert client.post(f"/api/v1/sessions/{sid}/refine", json={"audio_base64": "%%%"}).status_code == 400
    assert client.post(f"/api/v1/sessions/{sid}/refine", json={"audio_base64": ""}).status_code == 400


def test_navigate_and_reset(client):
    sid, _ = _generated(client)

    nav = client.post(f"/api/v1/sessions/{sid}/navigate", json={"step": "STYLE_SELECT"}).json()
    assert nav["step"] == "STYLE_SELECT"
    assert nav["selection"]["mood"]["id"] == "city"

    reset = client.post(f"/api/v1/sessions/{sid}/reset").json()
    assert reset["step"] == "TARGET_SELECT"
    assert reset["candidates"] == []


def test_closet_upload_is_analyzed(client):
    sid = _new_session(client)
    photo = base64.b64encode(b"\xff\xd8\xff\xe0jpeg").decode("ascii")

    data = client.post(f"/api/v1/sessions/{sid}/closet", json={"image_base64": photo}).json()

    assert len(data["closet"]) == 1
    assert data["closet"][0]["analysis"]["color"] == "Navy"


def test_visual_search_and_quote(client):
    sid, data = _generated(client)
    item_id = data["candidates"][0]["id"]

    search = client.post("/api/v1/visual-search", json={"image_url": "https://img.test/coat.png"})
    assert search.status_code == 200
    assert search.json()["links"] == [{"title": "Similar item", "uri": "https://example.com/similar"}]

    quote = client.post("/api/v1/bespoke-quote", json={"session_id": sid, "item_id": item_id})
    assert quote.status_code == 200
    assert quote.json()["complexity"] == "High"

    assert client.post("/api/v1/bespoke-quote", json={"session_id": sid, "item_id": "nope"}).status_code == 404
    assert client.post("/api/v1/visual-search", json={}).status_code == 400
