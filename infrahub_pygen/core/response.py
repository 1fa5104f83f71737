"""Pydantic models for GraphQL response envelopes."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class GraphQLLocation(BaseModel):
    line: int
    column: int


class GraphQLErrorEntry(BaseModel):
    """One entry of the ``errors`` array of a response."""
    message: str
    locations: list[GraphQLLocation] | None = None
    path: list[Any] | None = None
    extensions: dict[str, Any] | None = None


class GraphQLResponse(BaseModel, Generic[T]):
    """A decoded response; ``data`` is typed by the generated response model."""
    data: T | None = None
    errors: list[GraphQLErrorEntry] = Field(default_factory=list)

    def has_errors(self) -> bool:
        return bool(self.errors)
