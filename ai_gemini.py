# ai_gemini.py
# chama o gemini e devolve a sugestão de deck (tolerante a respostas sem Part.text)
import logging
import time
from typing import List, Optional, Sequence

import google.generativeai as genai

from models import SimplifiedCard
from prompt_builder import system_instruction, user_message
from suggestion import GenerationResult, parse_suggestion

GENERATION_CONFIG = dict(temperature=0.4, max_output_tokens=2048, response_mime_type="application/json")

# -------- helpers --------

def _extract_text(resp) -> str:
    """
    Extrai conteúdo textual de diferentes formatos de resposta do Gemini.
    Não depende de resp.text (que quebra quando finish_reason != STOP).
    """
    if not resp:
        return ""
    try:
        if getattr(resp, "text", None):
            return resp.text
    except ValueError:
        # resp.text levanta ValueError quando não há Part.text
        pass

    chunks = []
    for c in getattr(resp, "candidates", None) or []:
        content = getattr(c, "content", None)
        for p in getattr(content, "parts", None) or []:
            if isinstance(getattr(p, "text", None), str):
                chunks.append(p.text)
    return "\n".join(chunks).strip()


def _block_reason(resp) -> Optional[str]:
    # prompt_feedback traz o motivo quando o prompt é bloqueado (equivale ao 'error' do envelope)
    fb = getattr(resp, "prompt_feedback", None)
    reason = getattr(fb, "block_reason", None) if fb else None
    return str(reason) if reason else None


def _safety_settings_block_none():
    # conteúdo é inofensivo (nomes de cartas); evita finish_reason por safety
    from google.generativeai.types import HarmCategory, HarmBlockThreshold
    return {
        HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
        HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
        HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
        HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
    }


# -------- main --------

class GeminiGenerator:
    def __init__(self, api_key: Optional[str], model: str, timeout: float = 60.0):
        self.api_key = api_key
        self.model_name = model
        self.timeout = timeout

    def generate(self, cards: Sequence[SimplifiedCard],
                 forced_names: Optional[List[str]] = None,
                 play_style: Optional[str] = None,
                 timeout: Optional[float] = None) -> GenerationResult:
        if not self.api_key:
            logging.error("[LLM] Missing GEMINI_API_KEY")
            return GenerationResult.upstream_error("missing GEMINI_API_KEY")
        genai.configure(api_key=self.api_key)

        model = genai.GenerativeModel(self.model_name, system_instruction=system_instruction(play_style))
        prompt = user_message(cards, forced_names, play_style)
        logging.debug(f"[LLM] Prompt: {prompt}")

        start = time.monotonic()
        try:
            resp = model.generate_content(
                prompt,
                generation_config=GENERATION_CONFIG,
                safety_settings=_safety_settings_block_none(),
                request_options={"timeout": timeout or self.timeout},
            )
        except Exception as e:
            # o SDK levanta vários tipos (google.api_core, grpc, timeout); todos contam como upstream
            logging.error(f"[LLM] Gemini call failed ({self.model_name}): {e}")
            return GenerationResult.upstream_error(str(e))

        logging.info(f"[LLM] Response from {self.model_name} in {int((time.monotonic() - start) * 1000)} ms")

        blocked = _block_reason(resp)
        if blocked:
            logging.error(f"[LLM] Gemini blocked the prompt: {blocked}")
            return GenerationResult.upstream_error(f"blocked: {blocked}")

        text = _extract_text(resp)
        if not text.strip():
            return GenerationResult.empty("Empty response or no text parts.")
        return parse_suggestion(text)
