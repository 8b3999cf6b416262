# contrato com o gerador de sugestões (LLM): resultado tipado + parse tolerante do JSON
#
# Um gerador é qualquer objeto com:
#   generate(cards, forced_names=None, play_style=None, timeout=None) -> GenerationResult
# Ele nunca levanta exceção por falha do upstream; devolve o outcome correspondente.
import json
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from models import CardPick, DeckSuggestion
from prompt_builder import STRATEGIES

_FENCE_RE = re.compile(r"```(?:json|JSON)?")


class Outcome(str, Enum):
    OK = "ok"
    EMPTY = "empty"
    MALFORMED = "malformed"
    UPSTREAM_ERROR = "upstream_error"


@dataclass(frozen=True)
class GenerationResult:
    outcome: Outcome
    suggestion: Optional[DeckSuggestion] = None
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK

    @classmethod
    def success(cls, suggestion: DeckSuggestion) -> "GenerationResult":
        return cls(Outcome.OK, suggestion)

    @classmethod
    def empty(cls, detail: str = "") -> "GenerationResult":
        return cls(Outcome.EMPTY, detail=detail)

    @classmethod
    def malformed(cls, detail: str = "") -> "GenerationResult":
        return cls(Outcome.MALFORMED, detail=detail)

    @classmethod
    def upstream_error(cls, detail: str = "") -> "GenerationResult":
        return cls(Outcome.UPSTREAM_ERROR, detail=detail)


def strip_fences(text: str) -> str:
    """Remove marcadores ```json ... ``` que alguns modelos insistem em colocar."""
    return _FENCE_RE.sub("", text or "").strip()


def _first_json_object(text: str) -> Optional[dict]:
    try:
        parsed = json.loads(text)
        return parsed if isinstance(parsed, dict) else None
    except ValueError:
        pass
    # texto antes/depois do JSON: pega o maior bloco {...}
    start = text.find("{")
    end = text.rfind("}")
    if start != -1 and end > start:
        try:
            parsed = json.loads(text[start:end + 1])
            return parsed if isinstance(parsed, dict) else None
        except ValueError:
            return None
    return None


def normalize_strategy(raw: Any) -> str:
    if isinstance(raw, str):
        wanted = raw.strip().lower()
        for s in STRATEGIES:
            if s.lower() == wanted:
                return s
        # fora do vocabulário: repassa o rótulo do modelo como veio
        logging.warning(f"[LLM] Unknown strategy {raw!r}, keeping it as given")
        return raw
    logging.warning(f"[LLM] Strategy missing or not a string: {raw!r}")
    return ""


def _pick_from_json(item: Any) -> Optional[CardPick]:
    if not isinstance(item, dict):
        return None
    name = item.get("name")
    if not isinstance(name, str) or not name.strip():
        return None
    level = item.get("level")
    return CardPick(
        name=name.strip(),
        requested_evolved=item.get("isEvolved") is True,
        requested_hero=item.get("isHero") is True,
        requested_level=level if isinstance(level, int) and not isinstance(level, bool) else None,
    )


def parse_suggestion(content: str) -> GenerationResult:
    """
    Converte o texto do modelo em DeckSuggestion.
    Espera {cards: [...], strategy: str, tactic: str}; entradas de carta sem nome são ignoradas.
    """
    text = strip_fences(content)
    if not text:
        return GenerationResult.empty("model returned no content")

    data = _first_json_object(text)
    if data is None:
        return GenerationResult.malformed(f"not a JSON object: {text[:200]}")

    cards = data.get("cards")
    if cards is None or not isinstance(cards, list):
        return GenerationResult.malformed("'cards' missing or not a list")

    picks = tuple(p for p in (_pick_from_json(c) for c in cards) if p is not None)
    if not picks:
        return GenerationResult.empty("suggestion has no cards")

    tactic = data.get("tactic")
    suggestion = DeckSuggestion(
        cards=picks,
        strategy=normalize_strategy(data.get("strategy")),
        tactic=tactic if isinstance(tactic, str) else "",
    )
    return GenerationResult.success(suggestion)


def parse_chat_envelope(body: Dict[str, Any]) -> GenerationResult:
    """
    Lê a resposta de um endpoint chat/completions (OpenRouter / compatível OpenAI).
    'error' no topo ou na primeira choice é falha total da tentativa.
    """
    if not isinstance(body, dict):
        return GenerationResult.malformed("response body is not a JSON object")
    if "error" in body:
        logging.error(f"[LLM] API error: {body['error']}")
        return GenerationResult.upstream_error(f"API error: {body['error']}")

    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        logging.error(f"[LLM] Invalid response structure: {str(body)[:500]}")
        return GenerationResult.malformed("response has no choices")

    choice = choices[0] or {}
    if "error" in choice:
        logging.error(f"[LLM] Provider error in choice: {choice['error']}")
        return GenerationResult.upstream_error(f"provider error: {choice['error']}")

    message = choice.get("message") or {}
    content = message.get("content")
    if not isinstance(content, str) or not content.strip():
        logging.error(f"[LLM] Empty content. Reasoning (if any): {message.get('reasoning')}")
        return GenerationResult.empty("model returned no content")

    return parse_suggestion(content)
