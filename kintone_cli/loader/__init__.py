"""
CSV import/export for kintone records.

Usage:
    from kintone_cli.loader import print_as_csv, parse_records

    fields = client.app.get_form_fields(app=1)["properties"]
    print_as_csv(records, fields)
    records = parse_records(csv_text, fields)
"""

from .constants import PRIMARY_MARK, RECORD_INDEX
from .printer import (
    build_header_fields,
    build_csv_rows,
    convert_field_value_to_string,
    convert_record_to_rows,
    print_as_csv,
)
from .parser import (
    chunk_records,
    convert_csv_records_to_kintone_record,
    convert_string_to_field_value,
    group_by_index,
    parse_csv,
    parse_records,
)

__all__ = [
    "PRIMARY_MARK",
    "RECORD_INDEX",
    # Export
    "build_header_fields",
    "build_csv_rows",
    "convert_field_value_to_string",
    "convert_record_to_rows",
    "print_as_csv",
    # Import
    "chunk_records",
    "convert_csv_records_to_kintone_record",
    "convert_string_to_field_value",
    "group_by_index",
    "parse_csv",
    "parse_records",
]
