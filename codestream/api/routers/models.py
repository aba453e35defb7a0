from fastapi import APIRouter

from codestream.providers.router import MODEL_CATALOG
from codestream.schemas.generate import ModelList

router = APIRouter(tags=["models"])

@router.get("/models", response_model=ModelList)
def list_models() -> ModelList:
    # unlisted ids still work: anything without a known prefix goes to gemini
    return ModelList(models=list(MODEL_CATALOG))
