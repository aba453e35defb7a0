import logging
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Union

from codestream.core.errors import classify_provider_error
from codestream.providers.factory import AdapterMap, get_adapter
from codestream.providers.router import route_model
from codestream.schemas.generate import GenerationRequest
from codestream.services.normalizer import normalize
from codestream.services.prompt import load_system_prompt

logger = logging.getLogger(__name__)


@dataclass
class Dispatched:
    provider: str
    model: str
    fragments: AsyncIterator[str]


@dataclass(frozen=True)
class Failure:
    kind: str
    message: str
    provider: str
    status_hint: Optional[int] = None


GenerationOutcome = Union[Dispatched, Failure]


async def _resume(first: str, rest: AsyncIterator[str]) -> AsyncIterator[str]:
    try:
        yield first
        async for fragment in rest:
            yield fragment
    finally:
        await rest.aclose()


async def _empty() -> AsyncIterator[str]:
    return
    yield


async def dispatch(req: GenerationRequest, adapters: AdapterMap) -> GenerationOutcome:
    """Start the upstream stream and wait for its first fragment.

    Anything that fails before that fragment is a dispatch failure and is
    returned as a classified Failure. Once a fragment exists the response can
    commit to 200, so the rest of the stream is handed back unconsumed.
    """
    route = route_model(req.model_id)
    provider = route.kind.value
    adapter = get_adapter(adapters, route.kind)
    system = load_system_prompt()

    fragments = normalize(adapter.stream(route.native_model, system, req.messages))
    try:
        first = await fragments.__anext__()
    except StopAsyncIteration:
        logger.info("%s/%s finished without producing text", provider, route.native_model)
        return Dispatched(provider, route.native_model, _empty())
    except Exception as e:
        await fragments.aclose()
        err = classify_provider_error(provider, e)
        logger.error(
            "dispatch failed provider=%s model=%s kind=%s status=%s: %s",
            provider, route.native_model, err.kind, err.status_hint, err.message,
        )
        return Failure(err.kind, err.message, err.provider or provider, err.status_hint)

    return Dispatched(provider, route.native_model, _resume(first, fragments))
