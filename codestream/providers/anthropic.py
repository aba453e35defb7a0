import json
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Sequence, Union

from codestream.core.config import ProviderCredentials, Settings
from codestream.core.errors import classify_status
from codestream.providers.base import HttpProviderAdapter, raise_for_status
from codestream.providers.sse import iter_sse
from codestream.schemas.generate import Message


@dataclass(frozen=True)
class AnthropicTextDelta:
    text: str


@dataclass(frozen=True)
class AnthropicStopReason:
    stop_reason: Optional[str]


@dataclass(frozen=True)
class AnthropicMessageStop:
    pass


@dataclass(frozen=True)
class AnthropicOther:
    # message_start, content_block_start/stop, ping, non-text deltas
    type: str


AnthropicEvent = Union[AnthropicTextDelta, AnthropicStopReason, AnthropicMessageStop, AnthropicOther]


def parse_event(data: dict) -> AnthropicEvent:
    etype = data.get("type", "")
    if etype == "content_block_delta":
        delta = data.get("delta") or {}
        if delta.get("type") == "text_delta":
            return AnthropicTextDelta(delta.get("text", ""))
        return AnthropicOther(f"{etype}:{delta.get('type', '')}")
    if etype == "message_delta":
        return AnthropicStopReason((data.get("delta") or {}).get("stop_reason"))
    if etype == "message_stop":
        return AnthropicMessageStop()
    return AnthropicOther(etype)


class AnthropicAdapter(HttpProviderAdapter):
    """Anthropic messages API: top-level system field, user turns only."""

    name = "anthropic"

    def __init__(self, credentials: ProviderCredentials, settings: Settings) -> None:
        super().__init__(credentials, settings)
        self.version = settings.anthropic_version
        self.max_tokens = settings.anthropic_max_tokens

    async def stream(
        self,
        native_model: str,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[AnthropicEvent]:
        key = self._require_key()
        payload = {
            "model": native_model,
            "system": system_prompt,
            # assistant turns are dropped; the API wants strictly alternating roles
            "messages": [{"role": m.role, "content": m.content} for m in messages if m.role == "user"],
            "max_tokens": self.max_tokens,
            "stream": True,
        }
        headers = {"x-api-key": key, "anthropic-version": self.version}
        async with self._client() as client:
            async with client.stream(
                "POST", f"{self.credentials.base_url}/v1/messages", json=payload, headers=headers
            ) as r:
                await raise_for_status(r)
                async for sse in iter_sse(r):
                    data = json.loads(sse.data)
                    if data.get("type") == "error" or sse.event == "error":
                        err = data.get("error") or {}
                        cls = classify_status(None, err.get("type", ""))
                        raise cls(
                            f"Anthropic Error: {err.get('message', 'stream error')}",
                            provider=self.name,
                        )
                    yield parse_event(data)
