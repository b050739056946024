"""
Base HTTP client for the kintone REST API.

Attaches the host, authentication headers and fixed request parameters to
every call and maps error responses onto kintone CLI exceptions. The actual
I/O is done by a transport; the default one is a requests session.
"""

import logging
from typing import Optional, Dict, Any, List, Union
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__
from ..config import DEFAULT_TIMEOUT, DEFAULT_MAX_RETRIES
from ..exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Methods whose parameters travel in the query string
QUERY_METHODS = ("GET",)


class RequestsTransport:
    """
    Default transport backed by a requests session.

    Any object with the same ``request``/``close`` methods can be passed to
    the API client instead.
    """

    def __init__(
        self,
        timeout: int = DEFAULT_TIMEOUT,
        verify_ssl: bool = True,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.max_retries = max_retries
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create HTTP session with retry logic."""
        if self._session is None:
            self._session = requests.Session()

            retry_strategy = Retry(
                total=self.max_retries,
                backoff_factor=1,
                status_forcelist=[502, 503, 504],
                allowed_methods=["HEAD", "GET", "OPTIONS"],
                respect_retry_after_header=True,
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

            self._session.headers.update({
                "User-Agent": f"kintone-cli/{__version__}",
                "Accept": "application/json",
            })

        return self._session

    def request(
        self,
        method: str,
        url: str,
        headers: Dict[str, str],
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> requests.Response:
        try:
            return self.session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json,
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.exceptions.ConnectionError as e:
            raise APIError(f"Connection failed: {e}")
        except requests.exceptions.Timeout as e:
            raise APIError(f"Request timed out: {e}")
        except requests.exceptions.RequestException as e:
            raise APIError(f"Request failed: {e}")

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session:
            self._session.close()
            self._session = None


def flatten_query(params: Dict[str, Any]) -> Dict[str, str]:
    """
    Encode parameters the way the kintone API expects them in a query string.

    Lists become indexed keys (``fields[0]``), nested mappings become dotted
    keys and booleans become ``true``/``false``. ``None`` values are dropped.
    """
    flat: Dict[str, str] = {}

    def _add(key: str, value: Any) -> None:
        if value is None:
            return
        if isinstance(value, bool):
            flat[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            for i, item in enumerate(value):
                _add(f"{key}[{i}]", item)
        elif isinstance(value, dict):
            for sub_key, sub_value in value.items():
                _add(f"{key}.{sub_key}", sub_value)
        else:
            flat[key] = str(value)

    for key, value in params.items():
        _add(key, value)
    return flat


class HTTPClient:
    """
    Base HTTP client for the kintone API.

    Handles:
    - Path building (guest spaces, preview settings)
    - Authentication headers and request-token parameters
    - Error response handling
    """

    API_VERSION = "v1"

    def __init__(
        self,
        host: str,
        headers: Dict[str, str],
        params: Optional[Dict[str, Any]] = None,
        guest_space_id: Optional[Union[int, str]] = None,
        transport: Optional[Any] = None,
    ):
        """
        Initialize the HTTP client.

        Args:
            host: Base URL of the kintone domain (e.g. https://example.cybozu.com)
            headers: Headers attached to every request
            params: Parameters merged into every request
            guest_space_id: Guest space the apps live in, if any
            transport: Object performing the actual requests
        """
        self.host = host.rstrip("/")
        self.headers = dict(headers)
        self.params = dict(params or {})
        self.guest_space_id = guest_space_id
        self.transport = transport or RequestsTransport()

    def build_path(self, endpoint: str, preview: bool = False) -> str:
        """
        Build the API path for an endpoint.

        Args:
            endpoint: Resource name without extension (e.g. "record", "app/form/fields")
            preview: Use the pre-live settings of the app
        """
        guest_path = f"/guest/{self.guest_space_id}" if self.guest_space_id is not None else ""
        preview_path = "/preview" if preview else ""
        return f"/k{guest_path}/{self.API_VERSION}{preview_path}/{endpoint}.json"

    def _handle_response(
        self,
        response: Any,
        expected_status: Union[int, List[int]] = 200
    ) -> Dict[str, Any]:
        """Handle API response and raise appropriate exceptions."""
        if isinstance(expected_status, int):
            expected_status = [expected_status]

        logger.debug(f"Response: {response.status_code}")

        if response.status_code in expected_status:
            try:
                return response.json()
            except ValueError:
                return {}

        try:
            error_data = response.json()
            if not isinstance(error_data, dict):
                error_data = {"message": str(error_data)}
            error_msg = self._extract_error_message(error_data)
        except ValueError:
            error_msg = response.text or f"HTTP {response.status_code}"
            error_data = {}

        if error_data.get("id"):
            logger.error(
                "API error status=%d code=%s id=%s",
                response.status_code,
                error_data.get("code", "-"),
                error_data["id"],
            )

        if response.status_code == 401:
            raise AuthenticationError(
                "Authentication failed: " + (error_msg or "Please check your credentials."),
                status_code=response.status_code,
                response_data=error_data
            )
        elif response.status_code == 403:
            raise PermissionDeniedError(
                "Permission denied: " + (error_msg or "You don't have access to this resource."),
                status_code=response.status_code,
                response_data=error_data
            )
        elif response.status_code == 404:
            raise NotFoundError(
                "Resource not found: " + (error_msg or "The requested resource does not exist."),
                status_code=response.status_code,
                response_data=error_data
            )
        elif response.status_code in (400, 422):
            raise ValidationError(
                f"Invalid request: {error_msg}",
                status_code=response.status_code,
                response_data=error_data
            )
        else:
            raise APIError(
                f"API request failed: {error_msg}",
                status_code=response.status_code,
                response_data=error_data
            )

    def _extract_error_message(self, error_data: Dict[str, Any]) -> str:
        """Extract error message from a kintone error body."""
        messages = []

        code = error_data.get("code")
        message = error_data.get("message", "")
        messages.append(f"[{code}] {message}" if code else message)

        # Field-level errors: {"record.title.value": {"messages": ["..."]}}
        errors = error_data.get("errors")
        if isinstance(errors, dict):
            for field_path, detail in errors.items():
                field_messages = detail.get("messages", []) if isinstance(detail, dict) else [str(detail)]
                for field_message in field_messages:
                    messages.append(f"{field_path}: {field_message}")

        if error_data.get("id"):
            messages.append(f"(Request ID: {error_data['id']})")

        return " ".join(m for m in messages if m)

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        expected_status: Union[int, List[int]] = 200,
    ) -> Dict[str, Any]:
        """
        Make an API request.

        Args:
            method: HTTP method
            path: API path as returned by build_path
            params: Request parameters; sent as query string for GET and as
                JSON body otherwise. The fixed auth params only go in bodies.
            expected_status: Expected status code(s)

        Returns:
            Parsed response data
        """
        method = method.upper()
        url = urljoin(self.host + "/", path.lstrip("/"))
        logger.debug(f"Request: {method} {url}")

        if method in QUERY_METHODS:
            response = self.transport.request(
                method, url, headers=self.headers, params=flatten_query(params or {}), json=None
            )
        else:
            data = {**(params or {}), **self.params}
            response = self.transport.request(
                method, url, headers=self.headers, params=None, json=data
            )

        return self._handle_response(response, expected_status)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("GET", path, params)

    def post(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("POST", path, params)

    def put(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("PUT", path, params)

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self.request("DELETE", path, params)

    def close(self) -> None:
        """Close the underlying transport."""
        close = getattr(self.transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "HTTPClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
