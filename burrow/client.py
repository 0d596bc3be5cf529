"""HTTP client for the RabbitMQ management API.

Only the user endpoints Burrow needs are implemented. Transport failures are
raised as BrokerConnectionError; PUT and DELETE hand the response back so
callers decide which status codes count as failure.
"""

import logging
import ssl
from pathlib import Path
from urllib.parse import quote

import httpx

from .errors import BrokerAPIError, BrokerConnectionError, ConfigurationError, NotFoundError
from .models import BrokerUser, UserSettings
from .settings import BurrowSettings

logger = logging.getLogger(__name__)


def status_line(response: httpx.Response) -> str:
    """Format a response status the way the broker reports it."""
    return f"{response.status_code} {response.reason_phrase}".strip()


class BrokerAdminClient:
    """Synchronous client for the management API user endpoints.

    The underlying httpx.Client keeps a connection pool, so one instance can be
    shared by every resource operation in a run.

    Example:
        >>> with BrokerAdminClient("http://localhost:15672", "guest", "guest") as client:
        ...     client.get_user("guest")
    """

    def __init__(
        self,
        endpoint: str,
        username: str,
        password: str,
        verify: ssl.SSLContext | bool = True,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            endpoint: Base URL of the management API (e.g. "http://localhost:15672")
            username: Management API user
            password: Management API password
            verify: TLS verification (SSLContext, or False to disable)
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.endpoint = endpoint.rstrip("/")
        self._http = httpx.Client(
            base_url=self.endpoint,
            auth=(username, password),
            verify=verify,
            timeout=timeout,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls, settings: BurrowSettings, transport: httpx.BaseTransport | None = None
    ) -> "BrokerAdminClient":
        """Build a client from BurrowSettings.

        Raises:
            ConfigurationError: If the CA bundle cannot be loaded
        """
        verify: ssl.SSLContext | bool = True
        if settings.insecure:
            verify = False
        elif settings.cacert_file:
            cacert = Path(settings.cacert_file).expanduser()
            try:
                verify = ssl.create_default_context(cafile=str(cacert))
            except (OSError, ssl.SSLError) as e:
                raise ConfigurationError(
                    f"Failed to load CA certificate {cacert}: {e}"
                ) from e

        return cls(
            settings.endpoint,
            settings.username,
            settings.password.get_secret_value(),
            verify=verify,
            timeout=settings.request_timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "BrokerAdminClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @staticmethod
    def _user_path(name: str) -> str:
        return f"/api/users/{quote(name, safe='')}"

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._http.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise BrokerConnectionError(
                f"{method} {self.endpoint}{path} failed: {e}"
            ) from e

    def put_user(self, name: str, settings: UserSettings) -> httpx.Response:
        """Create or fully replace a user.

        Args:
            name: Username
            settings: Password (optional) and comma-joined tags

        Returns:
            The raw response; status codes are not checked here
        """
        logger.debug(f"PUT user {name}: {settings!r}")
        response = self._request("PUT", self._user_path(name), json=settings.to_payload())
        logger.debug(f"PUT user {name} response: {status_line(response)}")
        return response

    def get_user(self, name: str) -> BrokerUser:
        """Fetch a user.

        Raises:
            NotFoundError: If the user does not exist
            BrokerAPIError: For any other failure status
        """
        response = self._request("GET", self._user_path(name))
        logger.debug(f"GET user {name} response: {status_line(response)}")

        if response.status_code == 404:
            raise NotFoundError(
                f"User {name} not found", response.status_code, response.reason_phrase
            )
        if response.status_code >= 400:
            raise BrokerAPIError(
                f"Error reading RabbitMQ user {name}: {status_line(response)}",
                response.status_code,
                response.reason_phrase,
            )
        return BrokerUser.model_validate(response.json())

    def delete_user(self, name: str) -> httpx.Response:
        """Delete a user.

        Returns:
            The raw response; a missing user answers 404
        """
        response = self._request("DELETE", self._user_path(name))
        logger.debug(f"DELETE user {name} response: {status_line(response)}")
        return response
