# tests/test_providers.py
import json

import httpx
import pytest
import respx

from codestream.core.errors import ProviderAuthError, ProviderUnavailable, classify_provider_error
from codestream.providers.anthropic import (
    AnthropicAdapter,
    AnthropicMessageStop,
    AnthropicOther,
    AnthropicStopReason,
    AnthropicTextDelta,
)
from codestream.providers.gemini import GeminiAdapter, GeminiTextDelta
from codestream.providers.openai import OpenAIAdapter, OpenAIDelta, OpenAIDone
from codestream.schemas.generate import Message

SYSTEM = "You write code."
MESSAGES = [
    Message(role="user", content="Build me a calculator"),
    Message(role="assistant", content="export default ..."),
    Message(role="user", content="make it blue"),
]


def sse(*payloads, event_names=None) -> bytes:
    out = []
    for i, p in enumerate(payloads):
        data = p if isinstance(p, str) else json.dumps(p)
        if event_names:
            out.append(f"event: {event_names[i]}\n")
        out.append(f"data: {data}\n\n")
    return "".join(out).encode("utf-8")


async def collect(agen):
    return [e async for e in agen]


@pytest.mark.asyncio
@respx.mock
async def test_gemini_stream_ok_and_skips_bad_chunks(settings, caplog):
    # Combined prompt goes out as one user part; bad chunks are logged and skipped.
    route = respx.post("https://gemini.test/v1beta/models/gemini-1.5-flash:streamGenerateContent").mock(
        return_value=httpx.Response(200, content=sse(
            {"candidates": [{"content": {"parts": [{"text": "export"}]}}]},
            "{broken",
            {"candidates": [{"finishReason": "STOP"}]},
            {"candidates": [{"content": {"parts": [{"text": " default"}]}}]},
        ), headers={"Content-Type": "text/event-stream"})
    )
    adapter = GeminiAdapter(settings.gemini, settings)
    events = await collect(adapter.stream("gemini-1.5-flash", SYSTEM, MESSAGES))
    assert events == [GeminiTextDelta("export"), GeminiTextDelta(" default")]

    sent = route.calls.last.request
    assert sent.url.params["alt"] == "sse"
    assert sent.headers["x-goog-api-key"] == "test-google"
    body = json.loads(sent.content)
    text = body["contents"][0]["parts"][0]["text"]
    assert text.startswith(SYSTEM)
    assert "make it blue" in text
    assert "Build me a calculator" not in text
    assert any("gemini" in rec.getMessage() for rec in caplog.records)


@pytest.mark.asyncio
@respx.mock
async def test_openai_stream_ok(settings):
    route = respx.post("https://openai.test/v1/chat/completions").mock(
        return_value=httpx.Response(200, content=sse(
            {"choices": [{"delta": {"role": "assistant"}, "finish_reason": None}]},
            {"choices": [{"delta": {"content": "he"}, "finish_reason": None}]},
            {"choices": [{"delta": {"content": "llo"}, "finish_reason": None}]},
            {"choices": [{"delta": {}, "finish_reason": "stop"}]},
            "[DONE]",
        ), headers={"Content-Type": "text/event-stream"})
    )
    adapter = OpenAIAdapter(settings.openai, settings)
    events = await collect(adapter.stream("gpt-4o", SYSTEM, MESSAGES))
    assert events[-1] == OpenAIDone()
    assert OpenAIDelta("he") in events
    assert "".join(e.content or "" for e in events if isinstance(e, OpenAIDelta)) == "hello"

    body = json.loads(route.calls.last.request.content)
    assert body["model"] == "gpt-4o"
    assert body["stream"] is True
    assert body["messages"][0] == {"role": "system", "content": SYSTEM}
    assert body["messages"][1:] == [m.model_dump() for m in MESSAGES]
    assert route.calls.last.request.headers["authorization"] == "Bearer test-openai"


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_stream_ok(settings):
    route = respx.post("https://anthropic.test/v1/messages").mock(
        return_value=httpx.Response(200, content=sse(
            {"type": "message_start", "message": {}},
            {"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}},
            {"type": "ping"},
            {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "function"}},
            {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": " App"}},
            {"type": "content_block_stop", "index": 0},
            {"type": "message_delta", "delta": {"stop_reason": "end_turn"}},
            {"type": "message_stop"},
            event_names=[
                "message_start", "content_block_start", "ping", "content_block_delta",
                "content_block_delta", "content_block_stop", "message_delta", "message_stop",
            ],
        ), headers={"Content-Type": "text/event-stream"})
    )
    adapter = AnthropicAdapter(settings.anthropic, settings)
    events = await collect(adapter.stream("claude-3.5-sonnet", SYSTEM, MESSAGES))
    assert events[0] == AnthropicOther("message_start")
    assert [e for e in events if isinstance(e, AnthropicTextDelta)] == [
        AnthropicTextDelta("function"), AnthropicTextDelta(" App"),
    ]
    assert events[-2:] == [AnthropicStopReason("end_turn"), AnthropicMessageStop()]

    sent = route.calls.last.request
    body = json.loads(sent.content)
    assert body["system"] == SYSTEM
    assert body["max_tokens"] == 4096
    assert [m["role"] for m in body["messages"]] == ["user", "user"]
    assert sent.headers["x-api-key"] == "test-anthropic"
    assert sent.headers["anthropic-version"] == "2023-06-01"


@pytest.mark.asyncio
@respx.mock
async def test_anthropic_error_event_mid_stream(settings):
    respx.post("https://anthropic.test/v1/messages").mock(
        return_value=httpx.Response(200, content=sse(
            {"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "x"}},
            {"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
        ))
    )
    adapter = AnthropicAdapter(settings.anthropic, settings)
    seen = []
    with pytest.raises(ProviderUnavailable):
        async for e in adapter.stream("claude-3-opus", SYSTEM, MESSAGES):
            seen.append(e)
    assert seen == [AnthropicTextDelta("x")]


@pytest.mark.asyncio
@respx.mock
async def test_http_error_body_is_readable_for_classification(settings):
    respx.post("https://openai.test/v1/chat/completions").mock(
        return_value=httpx.Response(401, json={"error": {"message": "Incorrect API key provided"}})
    )
    adapter = OpenAIAdapter(settings.openai, settings)
    with pytest.raises(httpx.HTTPStatusError) as exc:
        await collect(adapter.stream("gpt-4o", SYSTEM, MESSAGES))
    err = classify_provider_error("openai", exc.value)
    assert isinstance(err, ProviderAuthError)
    assert err.message == "OpenAI Error (401): Incorrect API key provided"


@pytest.mark.asyncio
@respx.mock
async def test_missing_key_fails_only_when_used(settings):
    from codestream.core.config import get_settings
    no_keys = get_settings({"OPENAI_API_KEY": "", "OPENAI_API_BASE": "https://openai.test"})
    route = respx.post("https://openai.test/v1/chat/completions")
    adapter = OpenAIAdapter(no_keys.openai, no_keys)
    with pytest.raises(ProviderAuthError):
        await collect(adapter.stream("gpt-4o", SYSTEM, MESSAGES))
    assert not route.called
