# cliente da API oficial do Clash Royale (cartas do jogador e catálogo completo)
import logging
import urllib.parse
from typing import Any, Dict, List

import requests

from errors import UpstreamUnavailable
from models import Card

BASE_URL = "https://api.clashroyale.com/v1"
TIMEOUT = 30

# os ids da supercell seguem faixas por tipo: 26xxxxxx tropa, 27xxxxxx construção, 28xxxxxx feitiço
TYPE_BY_ID_PREFIX = {26: "troop", 27: "building", 28: "spell"}


def _headers(api_key: str) -> Dict[str, str]:
    return {"Accept": "application/json", "Authorization": f"Bearer {api_key}"}


def encode_tag(player_tag: str) -> str:
    """
    player_tag pode vir como '#ABCD123' ou 'ABCD123'; a API exige o %23 no lugar do #.
    """
    tag = player_tag.strip().upper()
    if not tag.startswith("#"):
        tag = "#" + tag
    return urllib.parse.quote(tag)


def _get_json(url: str, api_key: str):
    try:
        r = requests.get(url, headers=_headers(api_key), timeout=TIMEOUT)
        r.raise_for_status()
        data = r.json()
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        raise UpstreamUnavailable(f"Clash API returned HTTP {status} for {url}", status) from e
    except ValueError as e:
        raise UpstreamUnavailable(f"Clash API returned invalid JSON: {e}") from e
    except requests.RequestException as e:
        raise UpstreamUnavailable(f"Clash API unreachable: {e}") from e
    if not isinstance(data, dict):
        raise UpstreamUnavailable(f"Clash API returned an unexpected shape for {url}")
    return data


def fetch_cards(api_key: str, base_url: str = BASE_URL) -> List[Dict[str, Any]]:
    data = _get_json(f"{base_url}/cards", api_key)
    return data.get("items", [])


def fetch_player_by_tag(api_key: str, player_tag: str, base_url: str = BASE_URL) -> Dict[str, Any]:
    """
    Busca o perfil do jogador (inclui cartas e níveis).
    """
    return _get_json(f"{base_url}/players/{encode_tag(player_tag)}", api_key)


def card_type_from_id(card_id: int) -> str:
    return TYPE_BY_ID_PREFIX.get(card_id // 1_000_000, "unknown")


def card_from_raw(raw: Dict[str, Any], owned: bool = True) -> Card:
    """
    Transforma um item de carta da API no Card do proxy.
    Jogador: 'evolutionLevel' indica que a evolução foi desbloqueada.
    Catálogo: 'maxEvolutionLevel' indica que a carta tem forma evoluída.
    Herói vem do ícone 'heroMedium'.
    """
    card_id = int(raw["id"])
    icons = raw.get("iconUrls") or {}
    evo_key = "evolutionLevel" if owned else "maxEvolutionLevel"
    return Card(
        id=card_id,
        name=raw["name"],
        type=card_type_from_id(card_id),
        elixir_cost=int(raw.get("elixirCost") or 0),
        level=int(raw.get("level") or 1),
        has_evolution_slot=bool(raw.get(evo_key)),
        is_hero="heroMedium" in icons,
    )


def _cards_from_raw(items, owned: bool) -> List[Card]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise UpstreamUnavailable("Clash API returned an unexpected shape: card list expected")
    cards = []
    for raw in items:
        if not isinstance(raw, dict):
            raise UpstreamUnavailable(f"Clash API returned an unexpected shape: {raw!r}")
        if not raw.get("name") or raw.get("id") is None:
            continue
        try:
            cards.append(card_from_raw(raw, owned=owned))
        except (TypeError, ValueError) as e:
            raise UpstreamUnavailable(f"Clash API returned an unreadable card: {raw!r}") from e
    return cards


class ClashCatalog:
    """Adaptador de catálogo usado pelo DeckService."""

    def __init__(self, api_key: str, base_url: str = BASE_URL):
        if not api_key:
            raise RuntimeError("API_KEY ausente no ambiente.")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")

    def get_player_cards(self, player_tag: str) -> List[Card]:
        # jogador inexistente -> lista vazia, não erro
        try:
            raw = fetch_player_by_tag(self.api_key, player_tag, self.base_url)
        except UpstreamUnavailable as e:
            if e.status_code == 404:
                logging.warning(f"[CLASH] Player {player_tag} not found")
                return []
            raise
        cards = _cards_from_raw(raw.get("cards"), owned=True)
        logging.info(f"[CLASH] Player {player_tag}: {len(cards)} cards")
        return cards

    def get_all_cards(self) -> List[Card]:
        cards = _cards_from_raw(fetch_cards(self.api_key, self.base_url), owned=False)
        logging.info(f"[CLASH] Catalog: {len(cards)} cards")
        return cards
