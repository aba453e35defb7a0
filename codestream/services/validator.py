import json
from typing import Union

from pydantic import ValidationError

from codestream.core.errors import MalformedInput, SchemaViolation
from codestream.schemas.generate import GenerationRequest


def parse_generation_request(raw: Union[bytes, str]) -> GenerationRequest:
    """Turn a raw request body into a GenerationRequest.

    Raises MalformedInput when the body is not JSON at all and
    SchemaViolation when it is JSON of the wrong shape.
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInput() from e

    if not isinstance(data, dict):
        raise SchemaViolation("request body must be a JSON object")

    try:
        return GenerationRequest.model_validate(data)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        raise SchemaViolation(str(e), errors=errors) from e
