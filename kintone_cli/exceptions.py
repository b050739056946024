"""
Exception hierarchy for kintone CLI.
"""

from typing import Optional, Dict, Any


class KintoneError(Exception):
    """Base exception for all kintone CLI errors."""
    
    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
    
    def __str__(self) -> str:
        return self.message


class ConfigurationError(KintoneError):
    """Raised when the client cannot be configured from the given settings."""
    pass


class APIError(KintoneError):
    """Raised when an API request fails."""
    
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
        details: Optional[str] = None
    ):
        super().__init__(message, details)
        self.status_code = status_code
        self.response_data = response_data or {}
    
    @property
    def request_id(self) -> Optional[str]:
        """Request id reported by the service, if any."""
        return self.response_data.get("id")


class AuthenticationError(APIError):
    """Raised when the service rejects the credentials (HTTP 401)."""
    pass


class PermissionDeniedError(APIError):
    """Raised when the user lacks permission for a resource (HTTP 403)."""
    pass


class NotFoundError(APIError):
    """Raised when the requested app or record does not exist (HTTP 404)."""
    pass


class ValidationError(APIError):
    """Raised for invalid request arguments or a 400/422 response."""
    pass


class CsvFormatError(KintoneError):
    """Raised when CSV input cannot be mapped back onto records."""
    pass
