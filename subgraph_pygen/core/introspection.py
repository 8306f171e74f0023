"""Loads a subgraph schema from a live endpoint.

Runs the standard introspection query and prints the result as SDL, so
the schema can go through the same SchemaParser as schema files.
"""

import logging

import httpx
from graphql import build_client_schema, get_introspection_query, print_schema

from .auth import Auth, NoAuth
from .executor import QueryError, ResponseEnvelope

logger = logging.getLogger(__name__)


def fetch_schema_sdl(
    url: str,
    auth: Auth | None = None,
    *,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
) -> str:
    """Introspect an endpoint and return its schema as SDL.

    Raises:
        QueryError: If the introspection response has errors
        httpx.HTTPError: On transport failures and error status codes
    """
    headers = {"Content-Type": "application/json"}
    headers.update((auth or NoAuth()).get_headers())

    logger.debug("Introspecting %s", url)
    with httpx.Client(timeout=timeout, headers=headers, transport=transport) as client:
        response = client.post(url, json={"query": get_introspection_query()})
        response.raise_for_status()
        envelope = ResponseEnvelope.model_validate(response.json())

    if envelope.errors:
        raise QueryError(envelope.errors[0].message, [e.model_dump() for e in envelope.errors])
    if not envelope.data:
        raise QueryError("Introspection response contained no data")

    schema = build_client_schema(envelope.data)
    return print_schema(schema)
