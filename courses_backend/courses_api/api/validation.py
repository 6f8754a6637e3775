"""
Request body validation against the pydantic input schemas.

A ValidatedBody instance is used as a FastAPI dependency instead of a plain
body parameter: FastAPI decodes a declared body before any dependency runs,
so a malformed JSON body would be answered with 400 ahead of the auth gate.
Here the body is read and validated inside the dependency, nothing is
raised, and the handler raises the collected messages once authentication
has passed.
"""

import logging
from typing import Any, Dict, List, Optional, Type

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError

from courses_api.api.core import CourseCreate, CourseUpdate, UserCreate
from courses_api.api.errors import ValidationError

logger = logging.getLogger(__name__)


class FieldCheck:
    """Validated body, or the messages explaining why there is none."""

    def __init__(self, payload: Optional[BaseModel], errors: List[str]):
        self.payload = payload
        self.errors = errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationError(self.errors)


# PUBLIC_INTERFACE
async def read_json_object(request: Request) -> Dict[str, Any]:
    """Return the request body as a dict; anything else counts as an empty payload."""
    try:
        payload = await request.json()
    except ValueError:
        logger.debug("Request body is missing or not valid JSON")
        return {}
    return payload if isinstance(payload, dict) else {}


def error_messages(schema: Type[BaseModel], error: SchemaValidationError) -> List[str]:
    """Turn pydantic errors into client messages, in field declaration order."""
    messages = getattr(schema, "missing_messages", {})
    result = []
    for detail in error.errors():
        field = detail["loc"][0] if detail["loc"] else None
        if detail["type"] == "missing" and field in messages:
            result.append(messages[field])
        else:
            result.append(f'Invalid value for "{field}": {detail["msg"]}')
    return result


# PUBLIC_INTERFACE
class ValidatedBody:
    """
    Dependency validating the JSON body against a pydantic input schema.

    Schema fields are typed Any, so only absence is an error; a field
    explicitly set to null still counts as present.
    """

    def __init__(self, schema: Type[BaseModel]):
        self.schema = schema

    def check(self, payload: Dict[str, Any]) -> FieldCheck:
        try:
            return FieldCheck(self.schema.model_validate(payload), [])
        except SchemaValidationError as error:
            return FieldCheck(None, error_messages(self.schema, error))

    async def __call__(self, request: Request) -> FieldCheck:
        return self.check(await read_json_object(request))


USER_BODY = ValidatedBody(UserCreate)
CREATE_COURSE_BODY = ValidatedBody(CourseCreate)
UPDATE_COURSE_BODY = ValidatedBody(CourseUpdate)
