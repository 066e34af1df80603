"""Configuration for the LexChat assistant."""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional


GEMINI_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.0-flash:generateContent"
)
OPENROUTER_ENDPOINT = "https://openrouter.ai/api/v1/chat/completions"

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass
class ProviderConfig:
    """One remote provider: where it lives and how to authenticate."""
    name: str
    endpoint: str
    model: str
    api_key: Optional[str] = None

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


@dataclass
class GenerationProfile:
    """Sampling parameters for one kind of request (summary or chat)."""
    temperature: float
    max_tokens: int
    top_p: float = 0.95
    top_k: int = 40


SUMMARY_PROFILE = GenerationProfile(temperature=0.2, max_tokens=800)
CHAT_PROFILE = GenerationProfile(temperature=0.3, max_tokens=1000)


@dataclass
class RetrievalConfig:
    """Passage selection knobs."""
    top_k: int = 5
    min_passage_length: int = 30
    fallback_prefix_chars: int = 1000
    dimensions: int = 100


@dataclass
class Settings:
    """Main application settings."""
    app_name: str = "LexChat Legal Assistant"
    app_url: str = "http://localhost:3000"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_document_chars: int = 6000
    max_prompt_chars: int = 12000

    # Ordered by preference; the chain tries them first to last.
    providers: List[ProviderConfig] = field(default_factory=list)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)


def default_providers(
    gemini_api_key: Optional[str] = None,
    openrouter_api_key: Optional[str] = None,
) -> List[ProviderConfig]:
    return [
        ProviderConfig(
            name="gemini",
            endpoint=GEMINI_ENDPOINT,
            model="gemini-2.0-flash",
            api_key=gemini_api_key,
        ),
        ProviderConfig(
            name="openrouter",
            endpoint=OPENROUTER_ENDPOINT,
            model="openai/gpt-4o-mini",
            api_key=openrouter_api_key,
        ),
    ]


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


@lru_cache()
def get_settings() -> Settings:
    """Get application settings from environment."""
    return Settings(
        app_url=os.getenv("LEXCHAT_APP_URL", Settings.app_url),
        timeout_seconds=_float_from_env(
            "LEXCHAT_PROVIDER_TIMEOUT", DEFAULT_TIMEOUT_SECONDS
        ),
        providers=default_providers(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY") or None,
        ),
    )
