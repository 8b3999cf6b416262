# configuração via variáveis de ambiente (.env é carregado se existir)
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

CLASH_API_URL = "https://api.clashroyale.com/v1"
OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_MODEL = "google/gemini-2.5-flash"
GEMINI_MODEL = "gemini-2.5-flash"
PROVIDERS = ("openrouter", "gemini")


@dataclass(frozen=True)
class Settings:
    clash_api_key: Optional[str]
    clash_api_url: str
    llm_provider: str
    openrouter_url: str
    openrouter_api_key: Optional[str]
    openrouter_model: str
    gemini_api_key: Optional[str]
    gemini_model: str
    llm_timeout: float
    deck_deadline: float
    port: int


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    provider = (os.getenv("LLM_PROVIDER") or "openrouter").strip().lower()
    if provider not in PROVIDERS:
        raise RuntimeError(f"LLM_PROVIDER must be one of {PROVIDERS}, got {provider!r}")
    return Settings(
        clash_api_key=os.getenv("API_KEY"),
        clash_api_url=os.getenv("CLASH_API_URL") or CLASH_API_URL,
        llm_provider=provider,
        openrouter_url=os.getenv("OPENROUTER_URL") or OPENROUTER_URL,
        openrouter_api_key=os.getenv("OPENROUTER_API_KEY"),
        openrouter_model=os.getenv("OPENROUTER_MODEL") or OPENROUTER_MODEL,
        gemini_api_key=os.getenv("GEMINI_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL") or GEMINI_MODEL,
        llm_timeout=_float_env("LLM_TIMEOUT_SECONDS", 60.0),
        deck_deadline=_float_env("DECK_DEADLINE_SECONDS", 180.0),
        port=int(os.getenv("PORT", 10000)),
    )


def clear_settings_cache():
    get_settings.cache_clear()
