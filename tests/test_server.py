"""Tests for the Flask routes."""

import pytest

from conftest import FakeCatalog, FakeGenerator, suggestion
from deck_service import DeckService
from errors import UpstreamUnavailable
from server import create_app
from suggestion import GenerationResult


@pytest.fixture
def make_client(collection):
    def _make(catalog=None, *results):
        service = DeckService(catalog or FakeCatalog(collection), FakeGenerator(*results))
        app = create_app(service)
        app.config["TESTING"] = True
        return app.test_client(), service
    return _make


def test_home(make_client):
    client, _ = make_client()
    assert client.get("/").status_code == 200


def test_generate_by_tag(make_client, deck_names):
    client, _ = make_client(None, GenerationResult.success(suggestion(deck_names, strategy="Siege")))
    resp = client.get("/api/deck/%23ABC123")
    data = resp.get_json()

    assert resp.status_code == 200
    assert data["valid"] is True
    assert data["strategy"] == "Siege"
    assert data["averageElixir"] == 2.6
    assert len(data["deck"]) == 8
    assert set(data["deck"][0]) == {"id", "name", "type", "elixirCost", "level", "evolved", "isHero"}
    assert data["deepLink"].startswith("https://link.clashroyale.com/en/?clashroyale://copyDeck?deck=")


def test_generate_post(make_client, deck_names):
    client, _ = make_client(None, GenerationResult.success(suggestion(deck_names)))
    resp = client.post("/api/deck/generate", json={"playerTag": "#ABC123"})
    assert resp.get_json()["valid"] is True


def test_generate_post_requires_tag(make_client):
    client, _ = make_client()
    assert client.post("/api/deck/generate", json={}).status_code == 400


def test_exhausted_retries_is_200_invalid(make_client):
    client, _ = make_client()
    data = client.get("/api/deck/%23ABC123").get_json()
    assert data["valid"] is False
    assert data["strategy"] == "N/A"
    assert "attempts" in data["tacticMessage"]
    assert data["failure"] == "no_suggestion"


def test_player_without_cards_is_404(make_client):
    client, _ = make_client(FakeCatalog([]))
    resp = client.get("/api/deck/%23NOPE")
    assert resp.status_code == 404
    assert resp.get_json()["failure"] == "no_cards_found"


def test_upstream_down_is_502(make_client):
    client, _ = make_client(FakeCatalog(error=UpstreamUnavailable("down")))
    assert client.get("/api/deck/%23ABC").status_code == 502


def test_complete(make_client, deck_names):
    client, service = make_client(None, GenerationResult.success(suggestion(deck_names)))
    resp = client.post("/api/deck/complete",
                       json={"playerTag": "#ABC123", "partialDeck": [26000021], "playStyle": "Cycle"})

    assert resp.status_code == 200
    assert resp.get_json()["valid"] is True
    assert service.generator.calls[0]["forced_names"] == ["Hog Rider"]


@pytest.mark.parametrize("body", [
    {"partialDeck": [1]},
    {"playerTag": "#ABC", "partialDeck": "26000000"},
    {"playerTag": "#ABC", "partialDeck": ["abc"]},
    {"playerTag": "#ABC", "partialDeck": [26000000.9]},
    {"playerTag": "#ABC", "partialDeck": [True]},
    {"playerTag": "#ABC", "playStyle": 5},
])
def test_complete_bad_body(make_client, body):
    client, _ = make_client()
    assert client.post("/api/deck/complete", json=body).status_code == 400


def test_health(make_client, monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "gemini")
    client, _ = make_client()
    assert client.get("/api/health").get_json() == {"ok": True, "provider": "gemini"}


def test_missing_api_key_fails_at_startup(monkeypatch):
    monkeypatch.delenv("API_KEY", raising=False)
    with pytest.raises(RuntimeError, match="API_KEY"):
        create_app()


def test_app_built_from_settings(monkeypatch):
    monkeypatch.setenv("API_KEY", "clash-token")
    monkeypatch.setenv("LLM_PROVIDER", "openrouter")
    client = create_app().test_client()
    assert client.get("/api/health").get_json()["provider"] == "openrouter"
