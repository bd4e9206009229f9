from __future__ import annotations
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Optional, List


class CamelModel(BaseModel):
    """Base for wire schemas: snake_case in Python, camelCase in JSON."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ERROR SCHEMAS

class FieldError(BaseModel):
    field: str
    messages: List[str]


class ErrorResponse(BaseModel):
    """Standard error response"""
    success: bool = False
    message: str
    errors: Optional[List[FieldError]] = None

