"""Tests for authentication handlers."""

import httpx
import pytest

from subgraph_pygen.core.auth import (
    ApiKeyAuth,
    Auth,
    BearerAuth,
    HeaderAuth,
    NoAuth,
)
from subgraph_pygen.core.executor import GraphQLExecutor

from conftest import SUBGRAPH_URL


class TestApiKeyAuth:
    """Tests for ApiKeyAuth."""

    def test_default_header_name(self):
        """Test default x-api-key header."""
        auth = ApiKeyAuth("subgraph-key")
        assert auth.get_headers() == {"x-api-key": "subgraph-key"}

    def test_custom_header_name(self):
        """Test custom header name."""
        auth = ApiKeyAuth("subgraph-key", header_name="x-gateway-key")
        assert auth.get_headers() == {"x-gateway-key": "subgraph-key"}


class TestBearerAuth:
    """Tests for BearerAuth."""

    def test_bearer_token(self):
        """Test the Authorization header gateways expect."""
        auth = BearerAuth("0123456789abcdef")
        assert auth.get_headers() == {"Authorization": "Bearer 0123456789abcdef"}


class TestHeaderAuth:
    """Tests for HeaderAuth."""

    def test_multiple_headers(self):
        auth = HeaderAuth({"X-Deployment": "Qm123", "X-Request-ID": "req789"})
        assert auth.get_headers() == {"X-Deployment": "Qm123", "X-Request-ID": "req789"}

    def test_returns_copy(self):
        """Changing the returned dict must not leak into later requests."""
        auth = HeaderAuth({"X-Key": "value"})
        headers = auth.get_headers()
        headers["X-New"] = "new"

        assert "X-New" not in auth.get_headers()


class TestNoAuth:
    """Tests for NoAuth."""

    def test_no_auth(self):
        assert NoAuth().get_headers() == {}


class TestAuthProtocol:
    """Tests for Auth protocol compliance."""

    @pytest.mark.parametrize(
        "auth",
        [NoAuth(), BearerAuth("token"), ApiKeyAuth("key"), HeaderAuth({})],
    )
    def test_builtin_handlers_are_auth(self, auth):
        assert isinstance(auth, Auth)

    def test_custom_auth_class(self):
        class StudioAuth:
            def get_headers(self):
                return {"X-Studio": "value"}

        assert isinstance(StudioAuth(), Auth)


class TestAuthHeadersOnRequests:
    """The executor sends the handler's headers with every query."""

    @pytest.mark.asyncio
    async def test_headers_reach_the_endpoint(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers)
            return httpx.Response(200, json={"data": {"tokens": []}})

        executor = GraphQLExecutor(
            SUBGRAPH_URL,
            auth=BearerAuth("secret"),
            transport=httpx.MockTransport(handler),
        )
        async with executor:
            await executor.execute("{ tokens { id } }")

        assert seen[0]["authorization"] == "Bearer secret"
        assert seen[0]["content-type"] == "application/json"
