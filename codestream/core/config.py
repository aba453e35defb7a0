# centralized configuration loader
# runs load_dotenv() to read .env
# credentials are read once here; a missing key only fails when its provider is selected

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _split_origins(value):
    # "a, b" from env or overrides; lists pass through
    if isinstance(value, str):
        return [o.strip() for o in value.split(",") if o.strip()]
    return list(value)


# Provider credentials
GOOGLE_AI_API_KEY = os.getenv("GOOGLE_AI_API_KEY", "")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY", "")

# Provider endpoints
GOOGLE_API_BASE = os.getenv("GOOGLE_API_BASE", "https://generativelanguage.googleapis.com")
OPENAI_API_BASE = os.getenv("OPENAI_API_BASE", "https://api.openai.com")
ANTHROPIC_API_BASE = os.getenv("ANTHROPIC_API_BASE", "https://api.anthropic.com")
ANTHROPIC_VERSION = os.getenv("ANTHROPIC_VERSION", "2023-06-01")

# Generation caps
ANTHROPIC_MAX_TOKENS = int(os.getenv("ANTHROPIC_MAX_TOKENS", "4096"))

# Upstream timeouts (seconds)
UPSTREAM_TIMEOUT = float(os.getenv("UPSTREAM_TIMEOUT", "120"))
UPSTREAM_CONNECT_TIMEOUT = float(os.getenv("UPSTREAM_CONNECT_TIMEOUT", "10"))

# Server
CORS_ORIGINS = _split_origins(os.getenv("CORS_ORIGINS", "*"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class ProviderCredentials:
    api_key: str
    base_url: str

    @property
    def configured(self) -> bool:
        return bool(self.api_key.strip())


@dataclass(frozen=True)
class Settings:
    gemini: ProviderCredentials
    openai: ProviderCredentials
    anthropic: ProviderCredentials
    anthropic_version: str = "2023-06-01"
    anthropic_max_tokens: int = 4096
    upstream_timeout: float = 120.0
    upstream_connect_timeout: float = 10.0
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"


def get_settings(env: Optional[dict] = None) -> Settings:
    """Freeze the module-level values into one immutable Settings value.

    Passing ``env`` overrides individual keys, which keeps tests from
    having to reload this module.
    """
    env = env or {}

    def pick(key: str, default):
        return env.get(key, default)

    return Settings(
        gemini=ProviderCredentials(
            api_key=pick("GOOGLE_AI_API_KEY", GOOGLE_AI_API_KEY),
            base_url=pick("GOOGLE_API_BASE", GOOGLE_API_BASE).rstrip("/"),
        ),
        openai=ProviderCredentials(
            api_key=pick("OPENAI_API_KEY", OPENAI_API_KEY),
            base_url=pick("OPENAI_API_BASE", OPENAI_API_BASE).rstrip("/"),
        ),
        anthropic=ProviderCredentials(
            api_key=pick("ANTHROPIC_API_KEY", ANTHROPIC_API_KEY),
            base_url=pick("ANTHROPIC_API_BASE", ANTHROPIC_API_BASE).rstrip("/"),
        ),
        anthropic_version=pick("ANTHROPIC_VERSION", ANTHROPIC_VERSION),
        anthropic_max_tokens=int(pick("ANTHROPIC_MAX_TOKENS", ANTHROPIC_MAX_TOKENS)),
        upstream_timeout=float(pick("UPSTREAM_TIMEOUT", UPSTREAM_TIMEOUT)),
        upstream_connect_timeout=float(pick("UPSTREAM_CONNECT_TIMEOUT", UPSTREAM_CONNECT_TIMEOUT)),
        cors_origins=tuple(_split_origins(pick("CORS_ORIGINS", CORS_ORIGINS))),
        log_level=pick("LOG_LEVEL", LOG_LEVEL),
    )
