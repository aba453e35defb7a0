from fastapi import APIRouter, Request

router = APIRouter(tags=["meta"])


@router.get("/health")
def health(request: Request) -> dict:
    # reports which providers have a key loaded, never the key itself
    settings = request.app.state.settings
    return {
        "status": "ok",
        "providers": {
            "gemini": settings.gemini.configured,
            "openai": settings.openai.configured,
            "anthropic": settings.anthropic.configured,
        },
    }
