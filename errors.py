# erros e tipos de falha do proxy
from enum import Enum


class UpstreamUnavailable(Exception):
    """Falha de transporte/parse ao falar com a API do Clash (diferente de 'vazio')."""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class FailureKind(str, Enum):
    NO_CARDS_FOUND = "no_cards_found"
    PLAYER_CARDS_NOT_FOUND = "player_cards_not_found"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    NO_SUGGESTION = "no_suggestion"
    NEVER_VALID = "never_valid"
    DEADLINE_EXCEEDED = "deadline_exceeded"
