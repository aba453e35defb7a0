from typing import Dict, Mapping

from codestream.core.config import Settings
from codestream.providers.anthropic import AnthropicAdapter
from codestream.providers.base import ProviderAdapter
from codestream.providers.gemini import GeminiAdapter
from codestream.providers.openai import OpenAIAdapter
from codestream.providers.router import ProviderKind

AdapterMap = Mapping[ProviderKind, ProviderAdapter]


def build_adapters(settings: Settings) -> Dict[ProviderKind, ProviderAdapter]:
    # adapters only hold credentials; nothing touches the network until stream()
    return {
        ProviderKind.GEMINI: GeminiAdapter(settings.gemini, settings),
        ProviderKind.OPENAI: OpenAIAdapter(settings.openai, settings),
        ProviderKind.ANTHROPIC: AnthropicAdapter(settings.anthropic, settings),
    }


def get_adapter(adapters: AdapterMap, kind: ProviderKind) -> ProviderAdapter:
    return adapters[kind]
