"""Async client for executing GraphQL documents against an Infrahub instance.

Handles HTTP communication, error handling, and response parsing. Generated
clients call :meth:`Client.execute` with a query string and a response model.
"""

import json
import logging
from typing import Any, ClassVar, Protocol, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .config import ClientConfig
from .errors import GraphQLError, ResponseError, TransportError
from .response import GraphQLResponse

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class Operation(Protocol):
    """A prepared GraphQL document paired with the model of its ``data``.

    Examples:
        class WidgetNames:
            QUERY = "query WidgetNames { widgetList { edges { node { name } } } }"
            Response = WidgetNamesData

        response = await client.execute_operation(WidgetNames)
    """

    QUERY: ClassVar[str]
    Response: ClassVar[type[BaseModel]]


class Client:
    """Executes GraphQL operations against an Infrahub endpoint.

    Examples:
        config = ClientConfig("https://infrahub.example.com", token)
        async with Client(config) as client:
            response = await client.execute(query, {"ids": ["1"]}, branch="main")

        # Bring your own transport (tests, proxies, custom TLS)
        client = Client(ClientConfig(url, "", http_client=httpx.AsyncClient(...)))
    """

    def __init__(self, config: ClientConfig):
        """Validate the configuration; the HTTP client is created lazily."""
        config.validate()
        self.config = config
        self._client: httpx.AsyncClient | None = config.http_client
        self._owns_client = config.http_client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(**self.config.client_kwargs())
        return self._client

    async def close(self):
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info):
        await self.close()

    async def execute_raw(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        branch: str | None = None,
    ) -> GraphQLResponse[Any]:
        """Execute a query and return the response with untyped ``data``."""
        return await self.execute(query, variables, branch)

    async def execute_operation(
        self,
        operation: type[Operation] | Operation,
        variables: dict[str, Any] | None = None,
        branch: str | None = None,
    ) -> GraphQLResponse[Any]:
        """Execute a prepared operation, decoding ``data`` into its ``Response``."""
        return await self.execute(operation.QUERY, variables, branch, response_model=operation.Response)

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        branch: str | None = None,
        response_model: type[ModelT] | None = None,
    ) -> GraphQLResponse[Any]:
        """Execute a GraphQL document.

        Args:
            query: GraphQL query string
            variables: Query variables; pydantic models are dumped by alias
            branch: Branch to run on, defaults to the configured branch
            response_model: Model to decode ``data`` into

        Returns:
            The decoded response, ``data`` typed by ``response_model``

        Raises:
            GraphQLError: If the response contains errors or a failure status
            TransportError: If the request could not be sent
        """
        client = await self._get_client()
        url = self.config.graphql_url(branch)
        payload = {
            "query": query,
            "variables": self._serialize_variables(variables or {}),
        }

        logger.debug("POST %s", url)
        try:
            response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"request to {url} failed: {e}") from e

        return self._parse_response(response, response_model)

    async def fetch_schema(self, branch: str | None = None) -> str:
        """Download the schema SDL text."""
        client = await self._get_client()
        url = self.config.schema_url(branch)

        logger.debug("GET %s", url)
        try:
            response = await client.get(url)
        except httpx.HTTPError as e:
            raise TransportError(f"request to {url} failed: {e}") from e

        if not response.is_success:
            raise GraphQLError(
                f"schema http error: {response.status_code}",
                status=response.status_code,
                body=response.text,
            )
        return response.text

    def _parse_response(
        self,
        response: httpx.Response,
        response_model: type[ModelT] | None,
    ) -> GraphQLResponse[Any]:
        """Decode the envelope; GraphQL errors take precedence over the status."""
        text = response.text
        model = GraphQLResponse[response_model] if response_model else GraphQLResponse[Any]
        try:
            parsed = model.model_validate(json.loads(text))
        except (ValueError, ValidationError) as e:
            if not response.is_success:
                raise GraphQLError(
                    f"graphql http error: {response.status_code}",
                    status=response.status_code,
                    body=text,
                ) from e
            raise ResponseError(f"invalid graphql response: {e}") from e

        if parsed.has_errors():
            raise GraphQLError(
                parsed.errors[0].message,
                status=response.status_code,
                errors=parsed.errors,
                body=text,
            )
        if not response.is_success:
            raise GraphQLError(
                f"graphql http error: {response.status_code}",
                status=response.status_code,
                body=text,
            )
        return parsed

    def _serialize_variables(self, variables: dict[str, Any]) -> dict[str, Any]:
        """Serialize variables for the GraphQL request.

        Handles Pydantic models by converting them to dicts.
        """
        result = {}
        for key, value in variables.items():
            if value is None:
                continue  # Skip None values
            if isinstance(value, BaseModel):
                result[key] = value.model_dump(mode="json", by_alias=True, exclude_none=True)
            elif isinstance(value, list):
                result[key] = [
                    v.model_dump(mode="json", by_alias=True, exclude_none=True)
                    if isinstance(v, BaseModel) else v
                    for v in value
                ]
            else:
                result[key] = value
        return result
