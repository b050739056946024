"""
Authentication module for kintone CLI.

Resolves partial credentials into one of three authentication modes and
computes the request decoration each mode needs:

- Password authentication (username/password)
- API token authentication
- Session authentication (logged-in browser session + request token)
"""

import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Union

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PASSWORD_AUTH_HEADER = "X-Cybozu-Authorization"
API_TOKEN_AUTH_HEADER = "X-Cybozu-API-Token"
SESSION_AUTH_HEADER = "X-Requested-With"
REQUEST_TOKEN_PARAM = "__REQUEST_TOKEN__"

RequestTokenProvider = Callable[[], str]


@dataclass(frozen=True)
class ApiTokenAuth:
    api_token: str
    type: str = field(default="apiToken", init=False)


@dataclass(frozen=True)
class PasswordAuth:
    username: str
    password: str
    type: str = field(default="password", init=False)

    def __repr__(self) -> str:
        return f"PasswordAuth(username={self.username!r}, password='***')"


@dataclass(frozen=True)
class SessionAuth:
    type: str = field(default="session", init=False)


Auth = Union[ApiTokenAuth, PasswordAuth, SessionAuth]


def build_auth(partial_auth: Optional[Mapping[str, Any]]) -> Auth:
    """
    Decide the authentication mode from the keys present in partial_auth.

    ``username`` wins over ``apiToken``; with neither, session auth is used.

    Args:
        partial_auth: ``{"apiToken": ...}``, ``{"username": ..., "password": ...}``
            or ``{}``. ``api_token`` is accepted as an alias of ``apiToken``.

    Returns:
        The resolved Auth value

    Raises:
        ConfigurationError: If the API token is None or empty
    """
    partial_auth = partial_auth or {}

    if "username" in partial_auth:
        return PasswordAuth(
            username=partial_auth["username"],
            password=partial_auth.get("password", ""),
        )

    for key in ("apiToken", "api_token"):
        if key in partial_auth:
            token = partial_auth[key]
            if not isinstance(token, str) and isinstance(token, Sequence):
                token = ",".join(token)
            if not token:
                raise ConfigurationError("API token must not be empty")
            return ApiTokenAuth(api_token=token)

    return SessionAuth()


def build_headers(auth: Auth) -> Dict[str, str]:
    """Compute the single authentication header for an Auth value."""
    if isinstance(auth, PasswordAuth):
        credentials = f"{auth.username}:{auth.password}".encode("utf-8")
        return {PASSWORD_AUTH_HEADER: base64.b64encode(credentials).decode("ascii")}
    if isinstance(auth, ApiTokenAuth):
        return {API_TOKEN_AUTH_HEADER: auth.api_token}
    return {SESSION_AUTH_HEADER: "XMLHttpRequest"}


def build_params(
    auth: Auth,
    request_token_provider: Optional[RequestTokenProvider] = None,
) -> Dict[str, str]:
    """
    Compute the parameters sent with every request.

    Only session auth needs any: the request token of the current session.

    Raises:
        ConfigurationError: If session auth is used without a callable
            request token provider
    """
    if not isinstance(auth, SessionAuth):
        return {}

    if request_token_provider is None or not callable(request_token_provider):
        raise ConfigurationError("session authentication must specify a request token")

    request_token = request_token_provider()
    logger.debug("Using session authentication with request token")
    return {REQUEST_TOKEN_PARAM: request_token} if request_token else {}
