# server.py
import logging

from flask import Flask, request, jsonify

from config import get_settings
from deck_service import DeckService
from errors import FailureKind
from models import DeckRequest

logging.basicConfig(level=logging.INFO)

HOME_HTML = """
<!doctype html>
<title>Clash Deck Proxy</title>
<h1>Clash Deck Proxy</h1>
<ul>
  <li>GET /api/deck/&lt;player_tag&gt; &mdash; gerar deck</li>
  <li>POST /api/deck/generate {"playerTag": "..."}</li>
  <li>POST /api/deck/complete {"playerTag": "...", "partialDeck": [...], "playStyle": "..."}</li>
  <li>GET /api/health</li>
</ul>
"""

STATUS_BY_FAILURE = {
    FailureKind.NO_CARDS_FOUND: 404,
    FailureKind.PLAYER_CARDS_NOT_FOUND: 404,
    FailureKind.UPSTREAM_UNAVAILABLE: 502,
}


def _respond(result):
    status = STATUS_BY_FAILURE.get(result.failure, 200)
    return jsonify(result.to_response()), status


def create_app(service: DeckService = None) -> Flask:
    app = Flask(__name__)
    # sem serviço injetado monta pela config; API_KEY ausente já falha aqui, na subida
    if service is None:
        service = DeckService.from_settings(get_settings())

    @app.route("/")
    def home():
        return HOME_HTML

    @app.route("/api/health")
    def health():
        return jsonify({"ok": True, "provider": get_settings().llm_provider})

    @app.route("/api/deck/<path:player_tag>")
    def deck_for_tag(player_tag):
        return _respond(service.generate_free_deck(player_tag))

    @app.route("/api/deck/generate", methods=["POST"])
    def generate_deck():
        data = request.get_json(silent=True) or {}
        tag = (data.get("playerTag") or "").strip() if isinstance(data, dict) else ""
        if not tag:
            return jsonify({"ok": False, "error": "playerTag is required"}), 400
        return _respond(service.generate_free_deck(tag))

    @app.route("/api/deck/complete", methods=["POST"])
    def complete_deck():
        try:
            deck_request = DeckRequest.from_json(request.get_json(silent=True))
        except ValueError as e:
            return jsonify({"ok": False, "error": str(e)}), 400
        return _respond(service.complete_deck(deck_request))

    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=get_settings().port)
