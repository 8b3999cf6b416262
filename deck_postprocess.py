# checa evos, heróis, tamanho e calcula elixir médio + link de cópia
import logging
from dataclasses import dataclass, replace
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence

from models import Card, CardPick
from prompt_builder import DECK_SIZE, MAX_EVOLUTIONS, MAX_HEROES

SHARE_LINK = "https://link.clashroyale.com/en/?clashroyale://copyDeck?deck={ids}&l=Royals"


class DeckError(str, Enum):
    INVALID_SIZE = "InvalidSize"
    TOO_MANY_HEROES = "TooManyHeroes"
    TOO_MANY_EVOLUTIONS = "TooManyEvolutions"


@dataclass(frozen=True)
class DeckValidation:
    error: Optional[DeckError] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


def validate_deck(deck: Sequence[Card]) -> DeckValidation:
    """Regras na ordem; a primeira que falha decide."""
    if len(deck) != DECK_SIZE:
        return DeckValidation(DeckError.INVALID_SIZE,
                              f"Invalid deck size {len(deck)}. Expected {DECK_SIZE}.")

    heroes = sum(1 for c in deck if c.is_hero)
    if heroes > MAX_HEROES:
        return DeckValidation(DeckError.TOO_MANY_HEROES,
                              f"Too many heroes ({heroes}). Expected max {MAX_HEROES}.")

    evolved = sum(1 for c in deck if c.evolved)
    if evolved > MAX_EVOLUTIONS:
        return DeckValidation(DeckError.TOO_MANY_EVOLUTIONS,
                              f"Too many evolved cards ({evolved}). Expected max {MAX_EVOLUTIONS}.")

    return DeckValidation()


def index_by_name(cards: Iterable[Card]) -> Dict[str, Card]:
    # nomes repetidos: fica o primeiro
    idx = {}
    for c in cards:
        idx.setdefault(c.name, c)
    return idx


def with_evolution(card: Card, requested: bool) -> Card:
    # o LLM não consegue dar evolução a uma carta sem o slot; herói nunca muda
    return replace(card, evolved=card.has_evolution_slot and requested)


def resolve_picks(picks: Iterable[CardPick], owned_by_name: Dict[str, Card]) -> List[Card]:
    deck = []
    for pick in picks:
        card = owned_by_name.get(pick.name)
        if card is None:
            logging.warning(f"[DECK] Suggested card '{pick.name}' not found in player's collection")
            continue
        deck.append(with_evolution(card, pick.requested_evolved))
    return deck


def average_elixir(deck: Sequence[Card]) -> float:
    if not deck:
        return 0.0
    total = Decimal(sum(c.elixir_cost for c in deck))
    avg = (total / Decimal(len(deck))).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(avg)


def share_link(deck: Sequence[Card]) -> str:
    return SHARE_LINK.format(ids=";".join(str(c.id) for c in deck))
