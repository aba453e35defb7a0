# declares the provider contract that every upstream adapter implements
# lets the router, normalizer and endpoint stay the same when a provider is swapped or faked

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Sequence

import httpx

from codestream.core.config import ProviderCredentials, Settings
from codestream.core.errors import ProviderAuthError, PROVIDER_LABELS
from codestream.schemas.generate import Message


class ProviderAdapter(ABC):
    name: str = ""

    @abstractmethod
    def stream(
        self,
        native_model: str,
        system_prompt: str,
        messages: Sequence[Message],
    ) -> AsyncIterator[Any]:
        """Lazily yield this provider's own event type, in upstream order."""
        raise NotImplementedError


class HttpProviderAdapter(ProviderAdapter):
    """Shared plumbing for adapters that talk to an HTTP streaming API."""

    def __init__(self, credentials: ProviderCredentials, settings: Settings) -> None:
        self.credentials = credentials
        self.timeout = httpx.Timeout(settings.upstream_timeout, connect=settings.upstream_connect_timeout)

    def _require_key(self) -> str:
        if not self.credentials.configured:
            label = PROVIDER_LABELS.get(self.name, self.name)
            raise ProviderAuthError(f"{label} Error: API key is not configured", provider=self.name)
        return self.credentials.api_key

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout)


async def raise_for_status(r: httpx.Response) -> None:
    # read the body first so the classifier can see the provider's error payload
    if r.is_error:
        await r.aread()
        r.raise_for_status()
