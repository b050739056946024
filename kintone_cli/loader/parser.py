"""
CSV parser for kintone records.

Reverses the printer: CSV rows are tagged with a record index, grouped by
that index and folded back into one record per group, rebuilding subtable
rows from the grouped lines.
"""

import csv
import io
import logging
from typing import Any, Dict, List, Optional

from ..exceptions import CsvFormatError
from .constants import (
    ENTITY_LIST_TYPES,
    ENTITY_TYPES,
    LINE_BREAK,
    MULTI_VALUE_TYPES,
    NON_WRITABLE_TYPES,
    PRIMARY_MARK,
    RECORD_INDEX,
    SUBTABLE,
    TIMESTAMP_TYPES,
)
from .printer import FieldsJson, KintoneRecord

logger = logging.getLogger(__name__)

CsvRecord = Dict[str, str]


def parse_csv(text: str) -> List[CsvRecord]:
    """
    Read CSV text into flat records tagged with RECORD_INDEX.

    A new index starts on every row with a non-empty PRIMARY_MARK cell. When
    the CSV has no PRIMARY_MARK column, every row is its own record.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    reader = csv.DictReader(io.StringIO(text))
    has_mark = PRIMARY_MARK in (reader.fieldnames or [])

    records: List[CsvRecord] = []
    index = -1
    for row in reader:
        record = {k: (v or "") for k, v in row.items() if k is not None}
        if not has_mark or record[PRIMARY_MARK] or index < 0:
            index += 1
        record[RECORD_INDEX] = str(index)
        records.append(record)
    return records


def group_by_index(records: List[CsvRecord]) -> Dict[str, List[CsvRecord]]:
    """
    Group flat records sharing a RECORD_INDEX value.

    Key order and the order of records within a key follow the input.

    Raises:
        CsvFormatError: If a record has no RECORD_INDEX column
    """
    groups: Dict[str, List[CsvRecord]] = {}
    for position, record in enumerate(records):
        if RECORD_INDEX not in record:
            raise CsvFormatError(f"Row {position + 1} has no {RECORD_INDEX} column")
        index = record[RECORD_INDEX]
        if index in groups:
            groups[index].append(record)
        else:
            groups[index] = [record]
    return groups


def convert_string_to_field_value(field_type: str, cell: str) -> Any:
    """
    Convert a CSV cell into a field value for the records API.

    Returns None when the cell cannot express a value for the type.
    """
    if field_type in MULTI_VALUE_TYPES:
        return [item for item in cell.split(LINE_BREAK) if item] if cell else []
    if field_type in ENTITY_LIST_TYPES:
        return [{"code": code} for code in cell.split(LINE_BREAK) if code] if cell else []
    if field_type in ENTITY_TYPES:
        return {"code": cell} if cell else None
    if field_type in TIMESTAMP_TYPES:
        return cell or None
    return cell


def _is_writable(field: Dict[str, Any]) -> bool:
    return field["code"] != PRIMARY_MARK and field["type"] not in NON_WRITABLE_TYPES


def convert_csv_records_to_kintone_record(
    rows: List[CsvRecord],
    fields_json: FieldsJson
) -> KintoneRecord:
    """
    Fold the CSV rows of one record back into a record.

    Top-level values come from the first row; every row whose subtable
    cells are not all empty becomes a subtable row. Columns missing from the
    CSV and non-writable field types are left out.
    """
    first = rows[0]
    record: KintoneRecord = {}

    for field in fields_json.values():
        code = field["code"]
        if field["type"] == SUBTABLE:
            columns = [
                child for child in field.get("fields", {}).values()
                if _is_writable(child) and child["code"] in first
            ]
            if not columns:
                continue
            table_rows = []
            for row in rows:
                if not any(row[child["code"]] for child in columns):
                    continue
                table_rows.append({
                    "value": {
                        child["code"]: {"value": convert_string_to_field_value(child["type"], row[child["code"]])}
                        for child in columns
                    }
                })
            record[code] = {"value": table_rows}
        elif _is_writable(field) and code in first:
            value = convert_string_to_field_value(field["type"], first[code])
            if value is not None:
                record[code] = {"value": value}

    return record


def parse_records(text: str, fields_json: FieldsJson) -> List[KintoneRecord]:
    """
    Parse CSV text into records ready for the records API.

    Args:
        text: CSV text as written by the printer
        fields_json: Field schema of the target app
    """
    groups = group_by_index(parse_csv(text))
    records = [convert_csv_records_to_kintone_record(rows, fields_json) for rows in groups.values()]
    logger.debug(f"Parsed {len(records)} records from CSV")
    return records


def chunk_records(records: List[KintoneRecord], size: Optional[int] = None) -> List[List[KintoneRecord]]:
    """Split records into chunks the bulk records endpoint accepts (100 per call)."""
    size = size or 100
    return [records[i:i + size] for i in range(0, len(records), size)]
