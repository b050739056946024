"""
App API - App information and settings.
"""

from typing import Optional, Dict, Any, List, Union

from ._http import HTTPClient

AppID = Union[int, str]


class AppClient:
    """
    API for app information and settings.

    Handles:
    - App lookup
    - Form fields and layout
    - Views, general settings and process management
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize App API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def get_app(self, id: AppID) -> Dict[str, Any]:
        """Get app information."""
        path = self._http.build_path("app")
        return self._http.get(path, {"id": id})

    def get_apps(
        self,
        ids: Optional[List[AppID]] = None,
        codes: Optional[List[str]] = None,
        name: Optional[str] = None,
        space_ids: Optional[List[Union[int, str]]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Search apps.

        Args:
            ids: App IDs
            codes: App codes
            name: Part of the app name
            space_ids: Space IDs the apps belong to
            limit: Maximum number of apps (100 at most)
            offset: Number of apps to skip

        Returns:
            ``{"apps": [...]}``
        """
        path = self._http.build_path("apps")
        params: Dict[str, Any] = {
            "ids": ids,
            "codes": codes,
            "name": name,
            "spaceIds": space_ids,
            "limit": limit,
            "offset": offset,
        }
        return self._http.get(path, {k: v for k, v in params.items() if v is not None})

    def get_form_fields(
        self,
        app: AppID,
        lang: Optional[str] = None,
        preview: bool = False
    ) -> Dict[str, Any]:
        """
        Get the field schema of an app.

        Args:
            app: App ID
            lang: Localization of labels ("default", "en", "ja", "zh", "user")
            preview: Get pre-live settings

        Returns:
            ``{"properties": {code: field}, "revision": ...}``
        """
        path = self._http.build_path("app/form/fields", preview=preview)
        params: Dict[str, Any] = {"app": app}
        if lang is not None:
            params["lang"] = lang
        return self._http.get(path, params)

    def get_form_layout(self, app: AppID, preview: bool = False) -> Dict[str, Any]:
        path = self._http.build_path("app/form/layout", preview=preview)
        return self._http.get(path, {"app": app})

    def get_views(
        self,
        app: AppID,
        lang: Optional[str] = None,
        preview: bool = False
    ) -> Dict[str, Any]:
        path = self._http.build_path("app/views", preview=preview)
        params: Dict[str, Any] = {"app": app}
        if lang is not None:
            params["lang"] = lang
        return self._http.get(path, params)

    def get_app_settings(
        self,
        app: AppID,
        lang: Optional[str] = None,
        preview: bool = False
    ) -> Dict[str, Any]:
        """Get general settings (name, description, icon, theme)."""
        path = self._http.build_path("app/settings", preview=preview)
        params: Dict[str, Any] = {"app": app}
        if lang is not None:
            params["lang"] = lang
        return self._http.get(path, params)

    def get_process_management(
        self,
        app: AppID,
        lang: Optional[str] = None,
        preview: bool = False
    ) -> Dict[str, Any]:
        """Get process management settings (statuses and actions)."""
        path = self._http.build_path("app/status", preview=preview)
        params: Dict[str, Any] = {"app": app}
        if lang is not None:
            params["lang"] = lang
        return self._http.get(path, params)
