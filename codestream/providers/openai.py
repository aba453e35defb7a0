import json
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Sequence, Union

from codestream.providers.base import HttpProviderAdapter, raise_for_status
from codestream.providers.sse import iter_sse
from codestream.schemas.generate import Message


@dataclass(frozen=True)
class OpenAIDelta:
    content: Optional[str]
    finish_reason: Optional[str] = None


@dataclass(frozen=True)
class OpenAIDone:
    pass


OpenAIEvent = Union[OpenAIDelta, OpenAIDone]


class OpenAIAdapter(HttpProviderAdapter):
    """OpenAI chat completions with a leading system message."""

    name = "openai"

    async def stream(
        self,
        native_model: str,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[OpenAIEvent]:
        key = self._require_key()
        payload = {
            "model": native_model,
            "stream": True,
            "messages": [{"role": "system", "content": system_prompt}]
            + [{"role": m.role, "content": m.content} for m in messages],
        }
        headers = {"Authorization": f"Bearer {key}"}
        async with self._client() as client:
            async with client.stream(
                "POST", f"{self.credentials.base_url}/v1/chat/completions", json=payload, headers=headers
            ) as r:
                await raise_for_status(r)
                async for sse in iter_sse(r):
                    if sse.data.strip() == "[DONE]":
                        yield OpenAIDone()
                        return
                    chunk = json.loads(sse.data)
                    choices = chunk.get("choices") or []
                    if not choices:
                        continue
                    choice = choices[0]
                    delta = choice.get("delta") or {}
                    yield OpenAIDelta(delta.get("content"), choice.get("finish_reason"))
