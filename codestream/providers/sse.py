from dataclasses import dataclass
from typing import AsyncIterator, List, Optional

import httpx


@dataclass(frozen=True)
class ServerSentEvent:
    event: Optional[str]
    data: str


async def iter_sse(r: httpx.Response) -> AsyncIterator[ServerSentEvent]:
    """Minimal text/event-stream reader over an httpx streaming response.

    Multi-line ``data:`` fields are joined with newlines; comments and
    ``id``/``retry`` fields are ignored.
    """
    event: Optional[str] = None
    data: List[str] = []
    async for line in r.aiter_lines():
        if not line:
            if data:
                yield ServerSentEvent(event, "\n".join(data))
            event, data = None, []
            continue
        if line.startswith(":"):
            continue
        field, _, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field == "event":
            event = value
        elif field == "data":
            data.append(value)
    if data:
        yield ServerSentEvent(event, "\n".join(data))
