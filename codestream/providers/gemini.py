import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Sequence

from codestream.core.errors import UnknownProviderError
from codestream.providers.base import HttpProviderAdapter, raise_for_status
from codestream.providers.sse import iter_sse
from codestream.schemas.generate import Message
from codestream.services.prompt import build_combined_prompt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeminiTextDelta:
    text: str


GeminiEvent = GeminiTextDelta


def _chunk_text(chunk: Dict[str, Any]) -> str:
    # candidates[0].content.parts[*].text; raises on any other shape
    parts = chunk["candidates"][0]["content"]["parts"]
    return "".join(p["text"] for p in parts if "text" in p)


class GeminiAdapter(HttpProviderAdapter):
    """Google Gemini: one combined prompt string, no separate system role."""

    name = "gemini"

    def _url(self, model: str) -> str:
        return f"{self.credentials.base_url}/v1beta/models/{model}:streamGenerateContent"

    async def stream(
        self,
        native_model: str,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[GeminiEvent]:
        key = self._require_key()
        payload = {
            "contents": [
                {"role": "user", "parts": [{"text": build_combined_prompt(system_prompt, messages)}]}
            ],
        }
        headers = {"x-goog-api-key": key}
        async with self._client() as client:
            async with client.stream(
                "POST", self._url(native_model), params={"alt": "sse"}, json=payload, headers=headers
            ) as r:
                await raise_for_status(r)
                async for sse in iter_sse(r):
                    try:
                        chunk = json.loads(sse.data)
                    except json.JSONDecodeError:
                        logger.warning("gemini: skipping undecodable chunk: %r", sse.data[:200])
                        continue
                    if isinstance(chunk, dict) and isinstance(chunk.get("error"), dict):
                        err = chunk["error"]
                        raise UnknownProviderError(
                            f"Google Gemini Error ({err.get('code', '?')}): {err.get('message', 'stream error')}",
                            provider=self.name,
                        )
                    try:
                        text = _chunk_text(chunk)
                    except (KeyError, IndexError, TypeError) as e:
                        # e.g. a final chunk that only carries finishReason / usage
                        logger.warning("gemini: chunk without text (%s)", e.__class__.__name__)
                        continue
                    yield GeminiTextDelta(text)
