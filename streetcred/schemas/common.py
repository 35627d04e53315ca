"""
Shared pydantic building blocks for GetStreetCred API schemas.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from streetcred.core.casing import snake_to_camel


class CamelModel(BaseModel):
    """
    Base model whose fields are snake_case in Python and camelCase on the wire.

    Accepts either spelling on input and reads ORM objects via attributes.
    FastAPI serializes response models by alias, so every response body
    comes out camelCase.
    """

    model_config = ConfigDict(
        alias_generator=snake_to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class SuccessResponse(BaseModel):
    """Acknowledgement for writes that return no resource."""

    success: bool = True


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    kind: str
    details: Optional[Any] = None
