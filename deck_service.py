# orquestra: cartas do jogador -> LLM (até MAX_RETRIES) -> valida -> resposta
import logging
import time
from typing import List, Optional, Sequence

from api import ClashCatalog
from config import Settings
from deck_postprocess import average_elixir, index_by_name, resolve_picks, share_link, validate_deck
from errors import FailureKind, UpstreamUnavailable
from models import Card, DeckRequest, DeckResult, SimplifiedCard
from substitution import find_substitute
from suggestion import GenerationResult

MAX_RETRIES = 3


def build_generator(settings: Settings):
    if settings.llm_provider == "gemini":
        from ai_gemini import GeminiGenerator
        return GeminiGenerator(settings.gemini_api_key, settings.gemini_model, settings.llm_timeout)
    from ai_openrouter import OpenRouterGenerator
    return OpenRouterGenerator(settings.openrouter_api_key, settings.openrouter_model,
                               settings.openrouter_url, settings.llm_timeout)


class DeckService:
    """
    Gera decks de 8 cartas a partir da coleção do jogador.

    catalog: objeto com get_player_cards(tag) e get_all_cards()
    generator: objeto com generate(cards, forced_names, play_style, timeout) -> GenerationResult

    Nunca levanta exceção para falhas esperadas; sempre devolve um DeckResult.
    """

    def __init__(self, catalog, generator, llm_timeout: float = 60.0,
                 deadline: float = 180.0, max_retries: int = MAX_RETRIES, clock=time.monotonic):
        self.catalog = catalog
        self.generator = generator
        self.llm_timeout = llm_timeout
        self.deadline = deadline
        self.max_retries = max_retries
        self.clock = clock

    @classmethod
    def from_settings(cls, settings: Settings) -> "DeckService":
        catalog = ClashCatalog(settings.clash_api_key, settings.clash_api_url)
        return cls(catalog, build_generator(settings),
                   llm_timeout=settings.llm_timeout, deadline=settings.deck_deadline)

    # ===== fluxos públicos =====

    def generate_free_deck(self, player_tag: str) -> DeckResult:
        logging.info(f"[DECK] Generating free deck for player: {player_tag}")
        started = self.clock()
        try:
            owned = self.catalog.get_player_cards(player_tag)
        except UpstreamUnavailable as e:
            logging.error(f"[DECK] Could not fetch cards for {player_tag}: {e}")
            return DeckResult.failed(FailureKind.UPSTREAM_UNAVAILABLE, f"Clash Royale API unavailable: {e}")

        if not owned:
            logging.warning(f"[DECK] No cards found for player: {player_tag}")
            return DeckResult.failed(FailureKind.NO_CARDS_FOUND, "Player not found or no cards available.")
        logging.info(f"[DECK] Found {len(owned)} cards for player")

        return self._run_attempts(owned, started, action="generate")

    def complete_deck(self, request: DeckRequest) -> DeckResult:
        logging.info(f"[DECK] Completing deck for player: {request.player_tag}")
        started = self.clock()
        try:
            owned = self.catalog.get_player_cards(request.player_tag)
            if not owned:
                logging.warning(f"[DECK] No cards found for player: {request.player_tag}")
                return DeckResult.failed(FailureKind.PLAYER_CARDS_NOT_FOUND, "Player cards not found.")
            forced = self._forced_names(request.partial_deck_ids, owned)
        except UpstreamUnavailable as e:
            logging.error(f"[DECK] Clash API failed while completing for {request.player_tag}: {e}")
            return DeckResult.failed(FailureKind.UPSTREAM_UNAVAILABLE, f"Clash Royale API unavailable: {e}")

        result = self._run_attempts(owned, started, action="complete",
                                    forced_names=forced, play_style=request.play_style)
        if result.valid:
            # TODO: decidir se cartas forçadas ausentes devem invalidar a tentativa (hoje só reporta)
            in_deck = {c.name for c in result.deck}
            result.missing_forced = [n for n in forced if n not in in_deck]
            if result.missing_forced:
                logging.warning(f"[DECK] Forced cards missing from final deck: {result.missing_forced}")
        return result

    # ===== internos =====

    def _forced_names(self, partial_ids: Sequence[int], owned: List[Card]) -> List[str]:
        owned_by_id = {}
        for c in owned:
            owned_by_id.setdefault(c.id, c)

        forced = []
        catalog = None
        for card_id in partial_ids:
            card = owned_by_id.get(card_id)
            if card is None:
                if catalog is None:
                    catalog = self.catalog.get_all_cards()
                card = find_substitute(card_id, owned, catalog)
                if card is None:
                    logging.warning(f"[SUBST] Could not find substitute for ID {card_id}")
                    continue
                logging.info(f"[SUBST] Substituting missing card ID {card_id} with {card.name}")
            if card.name not in forced:
                forced.append(card.name)
        return forced

    def _call_generator(self, simplified, forced_names, play_style, timeout) -> GenerationResult:
        try:
            return self.generator.generate(simplified, forced_names=forced_names,
                                           play_style=play_style, timeout=timeout)
        except Exception as e:
            # gerador fora do contrato: conta como falha de upstream desta tentativa
            logging.exception("[LLM] Generator raised")
            return GenerationResult.upstream_error(str(e))

    def _run_attempts(self, owned: List[Card], started: float, action: str,
                      forced_names: Optional[List[str]] = None,
                      play_style: Optional[str] = None) -> DeckResult:
        simplified = [SimplifiedCard.from_card(c) for c in owned]
        by_name = index_by_name(owned)
        produced_any = False
        attempts = 0

        for attempt in range(1, self.max_retries + 1):
            remaining = self.deadline - (self.clock() - started)
            if remaining <= 0:
                logging.error(f"[DECK] Deadline of {self.deadline}s exceeded after {attempts} attempts")
                return DeckResult.failed(
                    FailureKind.DEADLINE_EXCEEDED,
                    f"Failed to {action} a valid deck: {self.deadline:g}s deadline exceeded "
                    f"after {attempts} attempts.",
                    attempts)

            attempts = attempt
            logging.info(f"[DECK] Attempt {attempt}/{self.max_retries} to {action} deck via LLM")
            gen = self._call_generator(simplified, forced_names, play_style,
                                       min(self.llm_timeout, remaining))
            if not gen.ok:
                logging.error(f"[DECK] LLM returned no usable suggestion ({gen.outcome.value}): {gen.detail}")
                continue
            produced_any = True
            suggestion = gen.suggestion
            logging.info(f"[DECK] LLM suggested cards: {[p.name for p in suggestion.cards]}")

            deck = resolve_picks(suggestion.cards, by_name)
            verdict = validate_deck(deck)
            if not verdict.ok:
                logging.warning(f"[DECK] Deck validation failed: {verdict.reason}")
                continue

            logging.info(f"[DECK] Valid deck generated: {suggestion.strategy}")
            return DeckResult(
                valid=True,
                deck=deck,
                strategy=suggestion.strategy,
                tactic=suggestion.tactic,
                average_elixir=average_elixir(deck),
                share_link=share_link(deck),
                attempts=attempts,
            )

        logging.error(f"[DECK] Failed to {action} valid deck after {attempts} attempts")
        if not produced_any:
            return DeckResult.failed(
                FailureKind.NO_SUGGESTION,
                f"Failed to {action} a valid deck after {attempts} attempts: "
                "the model returned no usable suggestion.",
                attempts)
        return DeckResult.failed(
            FailureKind.NEVER_VALID,
            f"Failed to {action} a valid deck after {attempts} attempts.",
            attempts)
