from enum import Enum
from typing import NamedTuple


class ProviderKind(str, Enum):
    GEMINI = "gemini"
    OPENAI = "openai"
    ANTHROPIC = "anthropic"


class Route(NamedTuple):
    kind: ProviderKind
    native_model: str


# checked in order; anything unprefixed goes to the default provider
PREFIXES = (
    ("openai/", ProviderKind.OPENAI),
    ("anthropic/", ProviderKind.ANTHROPIC),
)
DEFAULT_PROVIDER = ProviderKind.GEMINI

# models offered by the web client
MODEL_CATALOG = [
    "gemini-2.0-flash-exp",
    "gemini-1.5-pro",
    "gemini-1.5-flash",
    "gemini-2.5-pro-exp",
    "openai/gpt-4o",
    "openai/gpt-4-turbo",
    "anthropic/claude-3.5-sonnet",
    "anthropic/claude-3-opus",
]


def route_model(model_id: str) -> Route:
    for prefix, kind in PREFIXES:
        if model_id.startswith(prefix):
            return Route(kind, model_id[len(prefix):])
    return Route(DEFAULT_PROVIDER, model_id)
