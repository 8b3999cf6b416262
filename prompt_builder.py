# monta as mensagens (system + user) enviadas ao LLM
from typing import List, Optional, Sequence

from models import SimplifiedCard

STRATEGIES = ("Beatdown", "Control", "Cycle", "Bait", "Siege", "Bridge Spam", "Split Lane", "Hybrid")
MAX_HEROES = 1
MAX_EVOLUTIONS = 2
DECK_SIZE = 8

_RULES = (
    "ABSOLUTE STRICT RULES THAT CANNOT BE BROKEN:\n"
    f'1. At most {MAX_HEROES} card can have "isHero": true in the ENTIRE DECK. The others MUST have "isHero": false.\n'
    f'2. A MAXIMUM of {MAX_EVOLUTIONS} cards can have "isEvolved": true in the ENTIRE DECK. '
    'The rest MUST have "isEvolved": false.\n'
    '3. Only cards marked "Evo: True" in the collection may be evolved.\n'
)

_FORMAT = (
    "Return ONLY a JSON object with keys: 'cards' (array of objects with keys: 'name', "
    "'isEvolved' (boolean), 'isHero' (boolean), 'level' (integer)), "
    "'strategy' (string, MUST be one of: " + ", ".join(f"'{s}'" for s in STRATEGIES) + "), "
    "and 'tactic' (string, explanation of how to play). No markdown."
)


def system_instruction(play_style: Optional[str] = None) -> str:
    if play_style:
        head = (
            f"You are a Clash Royale expert. Complete the deck to {DECK_SIZE} cards using the player's "
            f"collection. Respect the user's selected playstyle: {play_style}.\n"
        )
    else:
        head = f"You are a Clash Royale expert. Build the best deck ({DECK_SIZE} cards) from the provided list.\n"
    return head + _RULES + _FORMAT


def format_card(card: SimplifiedCard) -> str:
    return f"{card.name} (Lvl: {card.level}, Evo: {card.is_evolved}, Hero: {card.is_hero})"


def user_message(cards: Sequence[SimplifiedCard],
                 forced_names: Optional[List[str]] = None,
                 play_style: Optional[str] = None) -> str:
    card_list = "\n".join(format_card(c) for c in cards)
    msg = "Here is my collection of cards:\n" + card_list
    if forced_names is None and not play_style:
        return msg + (f"\n\nPick {DECK_SIZE} cards for a balanced deck. "
                      "Maximize card levels. Ensure valid deck composition.")
    if play_style:
        msg += f"\n\nI want to build a '{play_style}' deck."
    else:
        msg += "\n"
    msg += "\nI have ALREADY selected these cards: " + ", ".join(forced_names or [])
    msg += (f"\nPlease pick the remaining cards from my collection to form a complete, competitive "
            f"{DECK_SIZE}-card deck. Ensure the final deck includes the cards I selected.")
    return msg


def build_messages(cards: Sequence[SimplifiedCard],
                   forced_names: Optional[List[str]] = None,
                   play_style: Optional[str] = None) -> List[dict]:
    return [
        {"role": "system", "content": system_instruction(play_style)},
        {"role": "user", "content": user_message(cards, forced_names, play_style)},
    ]
