"""Exception hierarchy shared by the generator and the runtime client."""

from typing import Any


class InfrahubError(Exception):
    """Base class for every error raised by this package."""


class SchemaLoadError(InfrahubError):
    """The schema could not be read, extracted or downloaded."""


class SchemaParseError(InfrahubError):
    """The schema text is not valid GraphQL SDL."""


class ConfigError(InfrahubError):
    """Invalid client or generator configuration."""


class TransportError(InfrahubError):
    """The HTTP request failed before a response was received."""


class GraphQLError(InfrahubError):
    """The server answered with GraphQL errors or a non-success status."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        errors: list[Any] | None = None,
        body: Any = None,
    ):
        self.message = message
        self.status = status
        self.errors = errors or []
        self.body = body
        super().__init__(message)

    def is_auth_error(self) -> bool:
        return self.status in (401, 403)


class ResponseError(InfrahubError):
    """A successful response is missing the data a generated call expects."""
