# acha a carta do jogador mais parecida com uma carta que ele não tem
from typing import Iterable, Optional, Sequence

from models import Card


def find_substitute(target_id: int, owned: Sequence[Card], catalog: Iterable[Card]) -> Optional[Card]:
    """
    Mesmo tipo primeiro (se não houver, qualquer carta do jogador).
    Menor diferença de elixir vence; empate -> maior nível.
    """
    target = next((c for c in catalog if c.id == target_id), None)
    if target is None:
        return None

    candidates = [c for c in owned if c.type == target.type]
    if not candidates:
        candidates = list(owned)
    if not candidates:
        return None

    return min(candidates, key=lambda c: (abs(c.elixir_cost - target.elixir_cost), -c.level))
