# gerador de decks via OpenRouter (endpoint chat/completions compatível com OpenAI)
import logging
import time
from typing import List, Optional, Sequence

import requests

from models import SimplifiedCard
from prompt_builder import build_messages
from suggestion import GenerationResult, parse_chat_envelope


class OpenRouterGenerator:
    def __init__(self, api_key: Optional[str], model: str, url: str, timeout: float = 60.0):
        self.api_key = api_key
        self.model = model
        self.url = url
        self.timeout = timeout

    def generate(self, cards: Sequence[SimplifiedCard],
                 forced_names: Optional[List[str]] = None,
                 play_style: Optional[str] = None,
                 timeout: Optional[float] = None) -> GenerationResult:
        if not self.api_key:
            logging.error("[LLM] Missing OPENROUTER_API_KEY")
            return GenerationResult.upstream_error("missing OPENROUTER_API_KEY")

        messages = build_messages(cards, forced_names, play_style)
        logging.debug(f"[LLM] Prompt: {messages[1]['content']}")
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        body = {"model": self.model, "messages": messages}

        start = time.monotonic()
        try:
            r = requests.post(self.url, json=body, headers=headers, timeout=timeout or self.timeout)
            r.raise_for_status()
            data = r.json()
        except ValueError as e:
            logging.error(f"[LLM] Invalid JSON from OpenRouter ({self.model}): {e}")
            return GenerationResult.malformed(f"invalid JSON envelope: {e}")
        except requests.RequestException as e:
            logging.error(f"[LLM] Error calling OpenRouter with model {self.model}: {e}")
            return GenerationResult.upstream_error(str(e))

        logging.info(f"[LLM] Response from {self.model} in {int((time.monotonic() - start) * 1000)} ms")
        return parse_chat_envelope(data)
