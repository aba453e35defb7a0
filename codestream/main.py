# codestream/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from codestream.api.routers.generate import router as generate_router
from codestream.api.routers.health import router as health_router
from codestream.api.routers.models import router as models_router
from codestream.core.config import Settings, get_settings
from codestream.core.errors import MalformedInput, SchemaViolation
from codestream.providers.factory import AdapterMap, build_adapters

logger = logging.getLogger(__name__)


async def _malformed_input(request: Request, exc: MalformedInput) -> PlainTextResponse:
    return PlainTextResponse(exc.message, status_code=exc.status_code)


async def _schema_violation(request: Request, exc: SchemaViolation) -> JSONResponse:
    logger.info("rejected request: %s", exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message, "detail": exc.errors},
    )


def create_app(settings: Optional[Settings] = None, adapters: Optional[AdapterMap] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(title="codestream", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # built once, read-only for every request; tests pass fakes via `adapters`
    app.state.settings = settings
    app.state.adapters = adapters if adapters is not None else build_adapters(settings)

    app.add_exception_handler(MalformedInput, _malformed_input)
    app.add_exception_handler(SchemaViolation, _schema_violation)

    # Routers
    app.include_router(health_router)
    app.include_router(models_router)
    app.include_router(generate_router)

    return app


app = create_app()
