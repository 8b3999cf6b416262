"""Shared pytest fixtures."""

import pytest

from config import clear_settings_cache
from models import Card, CardPick, DeckSuggestion
from suggestion import GenerationResult


def make_card(card_id, name, type="troop", cost=3, level=11, evo=False, hero=False):
    return Card(id=card_id, name=name, type=type, elixir_cost=cost, level=level,
                has_evolution_slot=evo, is_hero=hero)


def pick(name, evolved=False, hero=False, level=None):
    return CardPick(name=name, requested_evolved=evolved, requested_hero=hero, requested_level=level)


def suggestion(names, strategy="Cycle", tactic="Cycle fast.", evolved=()):
    return DeckSuggestion(cards=tuple(pick(n, evolved=n in evolved) for n in names),
                          strategy=strategy, tactic=tactic)


class FakeCatalog:
    def __init__(self, player_cards=None, all_cards=None, error=None):
        self.player_cards = list(player_cards or [])
        self.all_cards = list(all_cards or [])
        self.error = error
        self.catalog_calls = 0

    def get_player_cards(self, tag):
        if self.error:
            raise self.error
        return list(self.player_cards)

    def get_all_cards(self):
        self.catalog_calls += 1
        return list(self.all_cards)


class FakeGenerator:
    """Devolve os resultados na ordem e guarda os argumentos de cada chamada."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def generate(self, cards, forced_names=None, play_style=None, timeout=None):
        self.calls.append({"cards": list(cards), "forced_names": forced_names,
                           "play_style": play_style, "timeout": timeout})
        result = self.results.pop(0) if self.results else GenerationResult.empty()
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture(autouse=True)
def clear_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def collection():
    """Nove cartas, nenhuma com evolução; custo total das 8 primeiras = 21 (média 2.6)."""
    return [
        make_card(26000000, "Knight", cost=3),
        make_card(26000001, "Archers", cost=3),
        make_card(26000010, "Skeletons", cost=1),
        make_card(26000021, "Hog Rider", cost=4),
        make_card(26000030, "Ice Spirit", cost=1),
        make_card(27000000, "Cannon", type="building", cost=3),
        make_card(28000000, "Fireball", type="spell", cost=4),
        make_card(28000011, "The Log", type="spell", cost=2),
        make_card(26000003, "Giant", cost=5),
    ]


@pytest.fixture
def deck_names():
    return ["Knight", "Archers", "Skeletons", "Hog Rider", "Ice Spirit", "Cannon", "Fireball", "The Log"]
