"""Shared Pydantic base models.

The public and admin APIs speak camelCase JSON; Python code uses snake_case.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """Envelope used by every admin endpoint."""

    success: bool = True
    data: T | None = None
    message: str | None = None
