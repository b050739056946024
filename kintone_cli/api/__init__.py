"""
kintone API Client Package.

Structure:
    - client.py: KintoneAPIClient, resolves auth and wires the resource clients
    - _http.py: Base HTTP client, default requests transport and error handling
    - record.py: Record operations
    - app.py: App information and settings

Usage:
    from kintone_cli.api import KintoneAPIClient

    client = KintoneAPIClient(host="https://example.cybozu.com", auth={"apiToken": "..."})
    records = client.record.get_records(app=1)
"""

from .client import KintoneAPIClient, get_client
from ._http import HTTPClient, RequestsTransport
from .record import RecordClient
from .app import AppClient

__all__ = [
    # Main client
    "KintoneAPIClient",
    "get_client",
    # HTTP layer
    "HTTPClient",
    "RequestsTransport",
    # Resource clients
    "RecordClient",
    "AppClient",
]
