"""
kintone API Client - Main entry point for all API operations.
"""

import logging
from typing import Optional, Dict, Any, Mapping, Union

from ..auth import (
    Auth,
    RequestTokenProvider,
    build_auth,
    build_headers,
    build_params,
)
from ..config import KintoneConfig, get_config
from ..exceptions import ConfigurationError
from ._http import HTTPClient, RequestsTransport
from .app import AppClient
from .record import RecordClient

logger = logging.getLogger(__name__)


class KintoneAPIClient:
    """
    Client for the kintone REST API.

    Authentication is resolved once, at construction; the resulting headers
    and parameters are attached to every request.

    Usage:
        client = KintoneAPIClient(
            host="https://example.cybozu.com",
            auth={"apiToken": "..."},
        )
        fields = client.app.get_form_fields(app=1)
        records = client.record.get_records(app=1, query="limit 10")
    """

    def __init__(
        self,
        host: str,
        auth: Optional[Mapping[str, Any]] = None,
        guest_space_id: Optional[Union[int, str]] = None,
        transport: Optional[Any] = None,
        request_token_provider: Optional[RequestTokenProvider] = None,
    ):
        """
        Initialize the API client.

        Args:
            host: Base URL of the kintone domain
            auth: Partial credentials: ``{"apiToken": ...}``,
                ``{"username": ..., "password": ...}`` or ``{}`` for session auth
            guest_space_id: Guest space the apps live in, if any
            transport: Object performing HTTP requests (requests session by default)
            request_token_provider: Callable returning the session's request
                token; required for session auth

        Raises:
            ConfigurationError: If session auth is selected without a
                request token provider
        """
        if not host:
            raise ConfigurationError("host is required")

        self.auth: Auth = build_auth(auth)
        params = build_params(self.auth, request_token_provider)
        self._headers = build_headers(self.auth)
        logger.debug(f"Using {self.auth.type} authentication for {host}")

        self._http = HTTPClient(
            host=host,
            headers=self._headers,
            params=params,
            guest_space_id=guest_space_id,
            transport=transport,
        )

        self.record = RecordClient(self._http)
        self.app = AppClient(self._http)

    @classmethod
    def from_config(
        cls,
        config: Optional[KintoneConfig] = None,
        transport: Optional[Any] = None,
    ) -> "KintoneAPIClient":
        """
        Build a client from stored CLI configuration.

        Args:
            config: Configuration. Uses global config if not provided.
            transport: Optional transport override
        """
        config = config or get_config()
        if transport is None:
            transport = RequestsTransport(
                timeout=config.timeout,
                verify_ssl=config.verify_ssl,
                max_retries=config.max_retries,
            )
        return cls(
            host=config.base_url,
            auth=config.get_partial_auth(),
            guest_space_id=config.guest_space_id,
            transport=transport,
        )

    def get_headers(self) -> Dict[str, str]:
        """Get the authentication headers sent with every request."""
        return dict(self._headers)

    @property
    def params(self) -> Dict[str, Any]:
        """Parameters merged into every request."""
        return dict(self._http.params)

    # ========== Context Manager ==========

    def close(self) -> None:
        """Close the HTTP session."""
        self._http.close()

    def __enter__(self) -> "KintoneAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def get_client(config: Optional[KintoneConfig] = None) -> KintoneAPIClient:
    """
    Get an API client instance built from configuration.

    Args:
        config: Optional configuration

    Returns:
        KintoneAPIClient instance
    """
    return KintoneAPIClient.from_config(config)
