"""Pydantic request/response schemas used by the API.

Schemas keep API input/output shapes stable. Field types are strict so a
body such as ``{"age": "30"}`` is rejected as malformed instead of being
coerced; semantic checks live in :mod:`student_api.validation`.
"""

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from typing import Optional


class StudentIn(BaseModel):
    """Candidate student sent by clients on create/update.

    Missing or null fields fall back to their zero value so they surface
    as validation errors rather than decoding errors. A client supplied `id`
    is accepted but never used.
    """
    model_config = ConfigDict(strict=True)

    id: Optional[int] = None
    name: str = ""
    age: int = 0
    email: str = ""

    @field_validator("name", "age", "email", mode="before")
    @classmethod
    def _null_is_zero(cls, value, info: ValidationInfo):
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class Student(BaseModel):
    """A stored student. Instances are frozen once built by the store."""
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    age: int
    email: str


class FieldError(BaseModel):
    """Single field violation returned in a 400 response list."""
    model_config = ConfigDict(frozen=True)

    field: str
    message: str


class SummaryOut(BaseModel):
    """Generated summary relayed from the text-generation service."""
    summary: str
