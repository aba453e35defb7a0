from typing import Any, AsyncIterator, Optional

from codestream.providers.anthropic import (
    AnthropicMessageStop,
    AnthropicOther,
    AnthropicStopReason,
    AnthropicTextDelta,
)
from codestream.providers.gemini import GeminiTextDelta
from codestream.providers.openai import OpenAIDelta, OpenAIDone


def event_text(event: Any) -> Optional[str]:
    """Project one provider event onto its text payload, or None."""
    if isinstance(event, GeminiTextDelta):
        return event.text
    if isinstance(event, OpenAIDelta):
        return event.content
    if isinstance(event, AnthropicTextDelta):
        return event.text
    if isinstance(event, (OpenAIDone, AnthropicStopReason, AnthropicMessageStop, AnthropicOther)):
        return None
    raise TypeError(f"unhandled provider event: {type(event).__name__}")


async def normalize(events: AsyncIterator[Any]) -> AsyncIterator[str]:
    # no lookahead: each fragment is yielded as soon as its event arrives
    async for event in events:
        text = event_text(event)
        if text:
            yield text
