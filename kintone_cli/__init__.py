"""
kintone CLI - REST API client and CSV import/export tools for kintone apps.
"""

__version__ = "0.1.0"
__prog_name__ = "kintone"
__author__ = "kintone-cli contributors"

from .exceptions import (
    KintoneError,
    ConfigurationError,
    APIError,
    AuthenticationError,
    PermissionDeniedError,
    NotFoundError,
    ValidationError,
    CsvFormatError,
)

__all__ = [
    "__version__",
    "__prog_name__",
    "KintoneError",
    "ConfigurationError",
    "APIError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ValidationError",
    "CsvFormatError",
]
