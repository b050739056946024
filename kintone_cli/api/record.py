"""
Record API - Record CRUD, cursors, comments and process management.
"""

import logging
from typing import Optional, Dict, Any, List, Union

from ._http import HTTPClient
from ..exceptions import KintoneError, ValidationError

logger = logging.getLogger(__name__)

AppID = Union[int, str]
RecordID = Union[int, str]
Revision = Union[int, str]

# Maximum number of records the records endpoint returns per request
GET_RECORDS_LIMIT = 500


class RecordClient:
    """
    API for record operations.

    Handles:
    - Single and bulk record CRUD
    - Cursor-based and offset-based bulk retrieval
    - Record comments
    - Assignees and status (process management)
    """

    def __init__(self, http: HTTPClient):
        """
        Initialize Record API.

        Args:
            http: HTTP client instance
        """
        self._http = http

    def get_record(self, app: AppID, id: RecordID) -> Dict[str, Any]:
        """
        Get a single record.

        Args:
            app: App ID
            id: Record ID

        Returns:
            ``{"record": {...}}``
        """
        path = self._http.build_path("record")
        return self._http.get(path, {"app": app, "id": id})

    def add_record(
        self,
        app: AppID,
        record: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Add a record.

        Returns:
            ``{"id": ..., "revision": ...}``
        """
        path = self._http.build_path("record")
        params: Dict[str, Any] = {"app": app}
        if record is not None:
            params["record"] = record
        return self._http.post(path, params)

    def update_record(
        self,
        app: AppID,
        record: Optional[Dict[str, Any]] = None,
        id: Optional[RecordID] = None,
        update_key: Optional[Dict[str, Any]] = None,
        revision: Optional[Revision] = None
    ) -> Dict[str, Any]:
        """
        Update a record identified by its ID or by a unique-field update key.

        Args:
            app: App ID
            record: Field values to update
            id: Record ID
            update_key: ``{"field": code, "value": value}`` of a unique field
            revision: Expected revision; the update fails if it doesn't match

        Returns:
            ``{"revision": ...}``
        """
        if (id is None) == (update_key is None):
            raise ValidationError("Specify exactly one of id or update_key")

        path = self._http.build_path("record")
        params: Dict[str, Any] = {"app": app}
        if id is not None:
            params["id"] = id
        else:
            params["updateKey"] = update_key
        if record is not None:
            params["record"] = record
        if revision is not None:
            params["revision"] = revision
        return self._http.put(path, params)

    def get_records(
        self,
        app: AppID,
        fields: Optional[List[str]] = None,
        query: Optional[str] = None,
        total_count: Optional[bool] = None
    ) -> Dict[str, Any]:
        """
        Get records matching a query (at most 500 per request).

        Args:
            app: App ID
            fields: Field codes to include (all fields if omitted)
            query: kintone query string, may include order by/limit/offset
            total_count: Include the total number of matching records

        Returns:
            ``{"records": [...], "totalCount": ...}``
        """
        path = self._http.build_path("records")
        params: Dict[str, Any] = {"app": app}
        if fields is not None:
            params["fields"] = fields
        if query is not None:
            params["query"] = query
        if total_count is not None:
            params["totalCount"] = total_count
        return self._http.get(path, params)

    def add_records(self, app: AppID, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Add several records at once.

        Returns:
            ``{"ids": [...], "revisions": [...]}``
        """
        path = self._http.build_path("records")
        return self._http.post(path, {"app": app, "records": records})

    def update_records(self, app: AppID, records: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Update several records at once.

        Args:
            app: App ID
            records: Items of the form ``{"id"|"updateKey": ..., "record": {...},
                "revision": ...}``
        """
        path = self._http.build_path("records")
        return self._http.put(path, {"app": app, "records": records})

    def delete_records(
        self,
        app: AppID,
        ids: List[RecordID],
        revisions: Optional[List[Revision]] = None
    ) -> Dict[str, Any]:
        """Delete records by ID, optionally checking their revisions."""
        if revisions is not None and len(revisions) != len(ids):
            raise ValidationError("revisions must have the same length as ids")

        path = self._http.build_path("records")
        params: Dict[str, Any] = {"app": app, "ids": ids}
        if revisions is not None:
            params["revisions"] = revisions
        return self._http.delete(path, params)

    # ========== Cursors ==========

    def create_cursor(
        self,
        app: AppID,
        fields: Optional[List[str]] = None,
        query: Optional[str] = None,
        size: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Create a cursor over the records matching a query.

        Returns:
            ``{"id": cursor_id, "totalCount": ...}``
        """
        path = self._http.build_path("records/cursor")
        params: Dict[str, Any] = {"app": app}
        if fields is not None:
            params["fields"] = fields
        if query is not None:
            params["query"] = query
        if size is not None:
            params["size"] = size
        return self._http.post(path, params)

    def get_records_by_cursor(self, id: str) -> Dict[str, Any]:
        """
        Fetch the next chunk of a cursor.

        Returns:
            ``{"records": [...], "next": bool}``
        """
        path = self._http.build_path("records/cursor")
        return self._http.get(path, {"id": id})

    def delete_cursor(self, id: str) -> Dict[str, Any]:
        path = self._http.build_path("records/cursor")
        return self._http.delete(path, {"id": id})

    def get_all_records_with_cursor(
        self,
        app: AppID,
        fields: Optional[List[str]] = None,
        query: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Get every record matching a query by draining a cursor.

        The cursor is deleted if fetching fails part-way through.
        """
        cursor_id = self.create_cursor(app, fields=fields, query=query, size=GET_RECORDS_LIMIT)["id"]
        records: List[Dict[str, Any]] = []
        try:
            while True:
                result = self.get_records_by_cursor(cursor_id)
                records.extend(result.get("records", []))
                logger.debug(f"Fetched {len(records)} records from cursor {cursor_id}")
                if not result.get("next"):
                    break
        except Exception:
            try:
                self.delete_cursor(cursor_id)
            except KintoneError as cleanup_error:
                logger.warning(f"Failed to delete cursor {cursor_id}: {cleanup_error}")
            raise
        return records

    def get_all_records(
        self,
        app: AppID,
        fields: Optional[List[str]] = None,
        condition: Optional[str] = None,
        order_by: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Get every record matching a condition using offset paging.

        Args:
            app: App ID
            fields: Field codes to include
            condition: Query condition without order by/limit/offset
            order_by: Order by clause (e.g. "$id asc")
        """
        records: List[Dict[str, Any]] = []
        offset = 0
        while True:
            clauses = [condition] if condition else []
            if order_by:
                clauses.append(f"order by {order_by}")
            clauses.append(f"limit {GET_RECORDS_LIMIT} offset {offset}")

            chunk = self.get_records(app, fields=fields, query=" ".join(clauses)).get("records", [])
            records.extend(chunk)
            if len(chunk) < GET_RECORDS_LIMIT:
                return records
            offset += GET_RECORDS_LIMIT

    # ========== Comments ==========

    def add_record_comment(
        self,
        app: AppID,
        record: RecordID,
        text: str,
        mentions: Optional[List[Dict[str, str]]] = None
    ) -> Dict[str, Any]:
        """
        Add a comment to a record.

        Args:
            app: App ID
            record: Record ID
            text: Comment body
            mentions: Items of the form ``{"code": ..., "type": "USER"|"GROUP"|"ORGANIZATION"}``
        """
        path = self._http.build_path("record/comment")
        comment: Dict[str, Any] = {"text": text}
        if mentions:
            comment["mentions"] = mentions
        return self._http.post(path, {"app": app, "record": record, "comment": comment})

    def delete_record_comment(self, app: AppID, record: RecordID, comment: Union[int, str]) -> Dict[str, Any]:
        path = self._http.build_path("record/comment")
        return self._http.delete(path, {"app": app, "record": record, "comment": comment})

    def get_record_comments(
        self,
        app: AppID,
        record: RecordID,
        order: Optional[str] = None,
        offset: Optional[int] = None,
        limit: Optional[int] = None
    ) -> Dict[str, Any]:
        """Get the comments of a record, newest first unless order is "asc"."""
        path = self._http.build_path("record/comments")
        params: Dict[str, Any] = {"app": app, "record": record}
        if order is not None:
            params["order"] = order
        if offset is not None:
            params["offset"] = offset
        if limit is not None:
            params["limit"] = limit
        return self._http.get(path, params)

    # ========== Process Management ==========

    def update_record_assignees(
        self,
        app: AppID,
        id: RecordID,
        assignees: List[str],
        revision: Optional[Revision] = None
    ) -> Dict[str, Any]:
        path = self._http.build_path("record/assignees")
        params: Dict[str, Any] = {"app": app, "id": id, "assignees": assignees}
        if revision is not None:
            params["revision"] = revision
        return self._http.put(path, params)

    def update_record_status(
        self,
        app: AppID,
        id: RecordID,
        action: str,
        assignee: Optional[str] = None,
        revision: Optional[Revision] = None
    ) -> Dict[str, Any]:
        """
        Run a process management action on a record.

        Args:
            app: App ID
            id: Record ID
            action: Action name as shown on the status button
            assignee: Next assignee, when the action requires one
            revision: Expected revision
        """
        path = self._http.build_path("record/status")
        params: Dict[str, Any] = {"app": app, "id": id, "action": action}
        if assignee is not None:
            params["assignee"] = assignee
        if revision is not None:
            params["revision"] = revision
        return self._http.put(path, params)
