from typing import List, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class GenerationRequest(BaseModel):
    # older clients post the selector as "model"
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model_id: str = Field(
        validation_alias=AliasChoices("modelId", "model", "model_id"),
        serialization_alias="modelId",
    )
    messages: List[Message] = Field(min_length=1)

    @property
    def prompt(self) -> str:
        return self.messages[-1].content


class ErrorResponse(BaseModel):
    error: str
    kind: str | None = None
    provider: str | None = None


class ModelList(BaseModel):
    models: List[str]
