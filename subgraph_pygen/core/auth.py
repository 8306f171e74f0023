"""Authentication handlers for subgraph endpoints.

Public subgraph endpoints need no credentials; gateways usually expect a
bearer API key. Handlers only contribute request headers.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class Auth(Protocol):
    """Protocol for authentication handlers.

    Example:
        class StudioAuth:
            def __init__(self, key: str, deployment: str):
                self.key = key
                self.deployment = deployment

            def get_headers(self) -> dict[str, str]:
                return {
                    "Authorization": f"Bearer {self.key}",
                    "X-Deployment": self.deployment,
                }
    """

    def get_headers(self) -> dict[str, str]:
        """Return headers to include in requests."""
        ...


class NoAuth:
    """No authentication, the default for public subgraph endpoints."""

    def get_headers(self) -> dict[str, str]:
        return {}


class BearerAuth:
    """Bearer token authentication, as used by hosted gateways.

    Example:
        auth = BearerAuth(os.environ["SUBGRAPH_API_KEY"])
    """

    def __init__(self, token: str):
        self.token = token

    def get_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class ApiKeyAuth:
    """API key sent in a custom header (default: x-api-key)."""

    def __init__(self, api_key: str, header_name: str = "x-api-key"):
        self.api_key = api_key
        self.header_name = header_name

    def get_headers(self) -> dict[str, str]:
        return {self.header_name: self.api_key}


class HeaderAuth:
    """Arbitrary static headers."""

    def __init__(self, headers: dict[str, str]):
        self._headers = headers

    def get_headers(self) -> dict[str, str]:
        return self._headers.copy()
