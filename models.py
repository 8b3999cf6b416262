# tipos que circulam entre api, llm e validação
# Card é imutável: a flag de evolução do deck final é sempre uma cópia (dataclasses.replace)
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from errors import FailureKind


@dataclass(frozen=True)
class Card:
    id: int
    name: str
    type: str
    elixir_cost: int
    level: int = 1
    has_evolution_slot: bool = False
    is_hero: bool = False
    evolved: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "elixirCost": self.elixir_cost,
            "level": self.level,
            "evolved": self.evolved,
            "isHero": self.is_hero,
        }


@dataclass(frozen=True)
class SimplifiedCard:
    name: str
    level: int
    elixir_cost: int
    is_evolved: bool
    is_hero: bool

    @classmethod
    def from_card(cls, card: Card) -> "SimplifiedCard":
        return cls(
            name=card.name,
            level=card.level,
            elixir_cost=card.elixir_cost,
            is_evolved=card.has_evolution_slot,
            is_hero=card.is_hero,
        )


@dataclass(frozen=True)
class CardPick:
    name: str
    requested_evolved: bool = False
    requested_hero: bool = False
    requested_level: Optional[int] = None


@dataclass(frozen=True)
class DeckSuggestion:
    cards: Tuple[CardPick, ...]
    strategy: str
    tactic: str


@dataclass(frozen=True)
class DeckRequest:
    player_tag: str
    partial_deck_ids: Tuple[int, ...] = ()
    play_style: str = ""

    @classmethod
    def from_json(cls, data: dict) -> "DeckRequest":
        """
        Monta o pedido a partir do corpo {playerTag, partialDeck, playStyle}.
        Levanta ValueError se o corpo não tiver o formato esperado.
        """
        if not isinstance(data, dict):
            raise ValueError("request body must be a JSON object")
        tag = data.get("playerTag") or ""
        if not isinstance(tag, str) or not tag.strip():
            raise ValueError("playerTag is required")
        partial = data.get("partialDeck") or []
        if not isinstance(partial, list):
            raise ValueError("partialDeck must be a list of card ids")
        # bool é subclasse de int; 1.9 ou true não podem virar outro id
        if any(not isinstance(i, int) or isinstance(i, bool) for i in partial):
            raise ValueError("partialDeck must contain integer card ids")
        ids = tuple(partial)
        play_style = data.get("playStyle") or ""
        if not isinstance(play_style, str):
            raise ValueError("playStyle must be a string")
        return cls(player_tag=tag.strip(), partial_deck_ids=ids, play_style=play_style.strip())


@dataclass
class DeckResult:
    valid: bool
    message: str = ""
    deck: List[Card] = field(default_factory=list)
    strategy: str = "N/A"
    tactic: str = ""
    average_elixir: Optional[float] = None
    share_link: Optional[str] = None
    failure: Optional[FailureKind] = None
    attempts: int = 0
    missing_forced: List[str] = field(default_factory=list)

    @classmethod
    def failed(cls, kind: FailureKind, message: str, attempts: int = 0) -> "DeckResult":
        return cls(valid=False, message=message, failure=kind, attempts=attempts)

    def to_response(self) -> dict:
        # mesmo formato do DeckResponse antigo + campos de diagnóstico
        return {
            "deck": [c.to_dict() for c in self.deck],
            "valid": self.valid,
            "strategy": self.strategy,
            "tacticMessage": self.tactic if self.valid else self.message,
            "averageElixir": self.average_elixir,
            "deepLink": self.share_link,
            "failure": self.failure.value if self.failure else None,
            "attempts": self.attempts,
            "missingForcedCards": list(self.missing_forced),
        }
