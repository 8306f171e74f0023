"""Executor for posting queries to a subgraph endpoint.

Handles HTTP communication and unwraps the response envelope:

    {"data": {"<accessor>": <object | list>}, "errors": [{"message": ...}, ...]}
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from .auth import Auth, NoAuth

logger = logging.getLogger(__name__)


class QueryError(Exception):
    """Raised when a response carries a non-empty errors list.

    The message is the first error's message; the full list is kept on
    `errors`.
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class ResponseError(BaseModel):
    """One entry of the envelope's errors list."""
    model_config = ConfigDict(extra="allow")

    message: str = ""


class ResponseEnvelope(BaseModel):
    """Response body of a GraphQL POST; `data` stays an opaque document."""
    model_config = ConfigDict(extra="allow")

    data: dict[str, Any] | None = None
    errors: list[ResponseError] | None = None


def first_result(data: dict[str, Any]) -> Any:
    """Return the value under the sole top-level key of a `data` object."""
    if not data:
        raise QueryError("Response contained no data")
    return data[next(iter(data))]


class GraphQLExecutor:
    """Posts queries to one subgraph endpoint.

    One executor owns one `httpx.AsyncClient`; use it as an async context
    manager so the client is closed when the fetch is done.

    Examples:
        async with GraphQLExecutor(url) as executor:
            data = await executor.execute("{ tokens { id } }")

        # Authenticated gateway
        executor = GraphQLExecutor(url, auth=BearerAuth(api_key))

        # Tests: route requests through a mock transport
        executor = GraphQLExecutor(url, transport=httpx.MockTransport(handler))
    """

    def __init__(
        self,
        url: str,
        auth: Auth | None = None,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the executor.

        Args:
            url: Subgraph GraphQL endpoint URL
            auth: Authentication handler (implements Auth protocol)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, e.g. httpx.MockTransport
        """
        self.url = url
        self.timeout = timeout
        self._auth = auth or NoAuth()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            headers.update(self._auth.get_headers())

            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "GraphQLExecutor":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def execute(self, query: str) -> dict[str, Any]:
        """Execute a query.

        Returns:
            The 'data' portion of the response

        Raises:
            QueryError: If the response contains errors
            httpx.HTTPError: On transport failures and error status codes
        """
        client = await self._get_client()

        logger.debug("POST %s\n%s", self.url, query)
        response = await client.post(self.url, json={"query": query})
        response.raise_for_status()

        envelope = ResponseEnvelope.model_validate(response.json())

        if envelope.errors:
            raw_errors = [e.model_dump() for e in envelope.errors]
            raise QueryError(envelope.errors[0].message, raw_errors)

        return envelope.data or {}
