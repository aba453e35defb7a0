import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from codestream.api.deps import get_adapters
from codestream.core.errors import MID_STREAM_TRUNCATION
from codestream.providers.factory import AdapterMap
from codestream.schemas.generate import ErrorResponse
from codestream.services.generation import Failure, dispatch
from codestream.services.validator import parse_generation_request

router = APIRouter(tags=["generate"])
logger = logging.getLogger(__name__)


@router.post("/api/generateCode")
@router.post("/generate")
async def generate_code(request: Request, adapters: AdapterMap = Depends(get_adapters)):
    # body is parsed by hand so bad JSON (400) and bad shape (422) stay distinct
    req = parse_generation_request(await request.body())

    outcome = await dispatch(req, adapters)
    if isinstance(outcome, Failure):
        body = ErrorResponse(error=outcome.message, kind=outcome.kind, provider=outcome.provider)
        return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))

    fragments = outcome.fragments

    async def streamer():
        delivered = 0
        try:
            async for chunk in fragments:
                if await request.is_disconnected():
                    logger.info("client disconnected, stopping stream")
                    break
                delivered += 1
                yield chunk.encode("utf-8")
        except Exception as e:
            # headers are already sent; the caller only sees a shorter body
            logger.exception(
                "%s: %s/%s stream failed after %d fragment(s): %s",
                MID_STREAM_TRUNCATION, outcome.provider, outcome.model, delivered, e,
            )
        finally:
            await fragments.aclose()

    headers = {"X-Provider": outcome.provider}
    return StreamingResponse(streamer(), media_type="text/plain; charset=utf-8", headers=headers)
