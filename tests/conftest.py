# tests/conftest.py
import os
import logging
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure test-friendly env: fake keys, no real endpoints reachable by accident
os.environ.setdefault("GOOGLE_AI_API_KEY", "test-google")
os.environ.setdefault("OPENAI_API_KEY", "test-openai")
os.environ.setdefault("ANTHROPIC_API_KEY", "test-anthropic")

# IMPORTANT: import the app factory after envs are set
from codestream.core.config import get_settings
from codestream.main import create_app
from codestream.providers.router import ProviderKind
from fakes import FakeAdapter


@pytest.fixture
def settings():
    return get_settings({
        "GOOGLE_AI_API_KEY": "test-google",
        "OPENAI_API_KEY": "test-openai",
        "ANTHROPIC_API_KEY": "test-anthropic",
        "GOOGLE_API_BASE": "https://gemini.test",
        "OPENAI_API_BASE": "https://openai.test",
        "ANTHROPIC_API_BASE": "https://anthropic.test",
    })


@pytest.fixture
def fake_adapters():
    return {
        ProviderKind.GEMINI: FakeAdapter("gemini"),
        ProviderKind.OPENAI: FakeAdapter("openai"),
        ProviderKind.ANTHROPIC: FakeAdapter("anthropic"),
    }


@pytest_asyncio.fixture
async def app(settings, fake_adapters):
    return create_app(settings=settings, adapters=fake_adapters)


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def caplog_info(caplog):
    caplog.set_level(logging.INFO)
    return caplog
