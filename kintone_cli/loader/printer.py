"""
CSV printer for kintone records.

Subtable fields are flattened: a record whose subtable has N rows becomes N
CSV rows. The first of them carries the top-level field values and the
PRIMARY_MARK cell; the following ones only carry subtable cells.
"""

import csv
import logging
import sys
from typing import Any, Dict, IO, List, Optional

from .constants import (
    ENTITY_LIST_TYPES,
    ENTITY_TYPES,
    FILE,
    LINE_BREAK,
    PRIMARY_MARK,
    SUBTABLE,
)

logger = logging.getLogger(__name__)

FieldsJson = Dict[str, Dict[str, Any]]
KintoneRecord = Dict[str, Dict[str, Any]]


def build_header_fields(fields_json: FieldsJson) -> List[str]:
    """
    Build the CSV header row from a field schema.

    Subtable fields are replaced by the codes of their columns, one level
    deep. The primary mark is never emitted.

    Args:
        fields_json: Mapping of field code to field definition, in form order
    """
    header_fields: List[str] = []
    for field in fields_json.values():
        if field["code"] == PRIMARY_MARK:
            continue
        if field["type"] == SUBTABLE:
            header_fields.extend(
                child["code"]
                for child in field.get("fields", {}).values()
                if child["code"] != PRIMARY_MARK
            )
        else:
            header_fields.append(field["code"])
    return header_fields


def has_subtable(fields_json: FieldsJson) -> bool:
    return any(field["type"] == SUBTABLE for field in fields_json.values())


def convert_field_value_to_string(field: Optional[Dict[str, Any]]) -> str:
    """Render one field of a record (``{"type": ..., "value": ...}``) as a cell."""
    if not field:
        return ""

    value = field.get("value")
    field_type = field.get("type")

    if value is None:
        return ""
    if field_type == FILE:
        return LINE_BREAK.join(item.get("name", "") for item in value)
    if field_type in ENTITY_LIST_TYPES:
        return LINE_BREAK.join(item.get("code", "") for item in value)
    if field_type in ENTITY_TYPES:
        return value.get("code", "")
    if isinstance(value, list):
        return LINE_BREAK.join(str(item) for item in value)
    return str(value)


def convert_record_to_rows(record: KintoneRecord, fields_json: FieldsJson) -> List[Dict[str, str]]:
    """
    Flatten one record into CSV rows keyed by header field.

    Args:
        record: Record as returned by the records API
        fields_json: Field schema of the app

    Returns:
        One row per subtable row, and at least one row
    """
    with_subtable = has_subtable(fields_json)
    subtable_lengths = [
        len((record.get(field["code"]) or {}).get("value") or [])
        for field in fields_json.values()
        if field["type"] == SUBTABLE
    ]
    row_count = max([1] + subtable_lengths)

    rows: List[Dict[str, str]] = []
    for i in range(row_count):
        row: Dict[str, str] = {}
        if with_subtable:
            row[PRIMARY_MARK] = PRIMARY_MARK if i == 0 else ""

        for field in fields_json.values():
            code = field["code"]
            if code == PRIMARY_MARK:
                continue
            if field["type"] == SUBTABLE:
                table_rows = (record.get(code) or {}).get("value") or []
                table_row = table_rows[i]["value"] if i < len(table_rows) else {}
                for child in field.get("fields", {}).values():
                    if child["code"] == PRIMARY_MARK:
                        continue
                    row[child["code"]] = convert_field_value_to_string(table_row.get(child["code"]))
            else:
                row[code] = convert_field_value_to_string(record.get(code)) if i == 0 else ""

        rows.append(row)
    return rows


def build_csv_rows(records: List[KintoneRecord], fields_json: FieldsJson) -> List[List[str]]:
    """
    Convert records into CSV rows, header first.

    The PRIMARY_MARK column leads the header when the schema has a subtable.
    """
    header = build_header_fields(fields_json)
    if has_subtable(fields_json):
        header = [PRIMARY_MARK] + header

    rows = [header]
    for record in records:
        for row in convert_record_to_rows(record, fields_json):
            rows.append([row.get(column, "") for column in header])

    logger.debug(f"Built {len(rows) - 1} CSV rows from {len(records)} records")
    return rows


def print_as_csv(
    records: List[KintoneRecord],
    fields_json: FieldsJson,
    stream: Optional[IO[str]] = None
) -> None:
    """
    Write records as CSV.

    Args:
        records: Records as returned by the records API
        fields_json: Field schema of the app
        stream: Text stream to write to (stdout by default)
    """
    writer = csv.writer(stream or sys.stdout, quoting=csv.QUOTE_ALL, lineterminator="\r\n")
    writer.writerows(build_csv_rows(records, fields_json))
