"""
Tests for the CSV printer and parser.
"""

import io

import pytest

from kintone_cli.exceptions import CsvFormatError
from kintone_cli.loader import (
    PRIMARY_MARK,
    RECORD_INDEX,
    build_csv_rows,
    build_header_fields,
    convert_field_value_to_string,
    convert_string_to_field_value,
    group_by_index,
    parse_csv,
    parse_records,
    print_as_csv,
)
from kintone_cli.loader.parser import chunk_records


@pytest.fixture
def order_record():
    """Record with a two-row subtable."""
    return {
        "Record_number": {"type": "RECORD_NUMBER", "value": "1"},
        "$id": {"type": "__ID__", "value": "1"},
        "Created_by": {"type": "CREATOR", "value": {"code": "alice", "name": "Alice"}},
        "Assignee": {"type": "STATUS_ASSIGNEE", "value": [{"code": "bob", "name": "Bob"}]},
        "title": {"type": "SINGLE_LINE_TEXT", "value": "Order A"},
        "customer": {"type": "SINGLE_LINE_TEXT", "value": "ACME, Inc."},
        "order_date": {"type": "DATE", "value": "2024-01-02"},
        "items": {
            "type": "SUBTABLE",
            "value": [
                {
                    "id": "101",
                    "value": {
                        "item_name": {"type": "SINGLE_LINE_TEXT", "value": "Pen"},
                        "quantity": {"type": "NUMBER", "value": "2"},
                        "unit_price": {"type": "NUMBER", "value": "100"},
                        "item_tags": {"type": "MULTI_SELECT", "value": ["red", "blue"]},
                        "item_owner": {"type": "USER_SELECT", "value": [{"code": "carol", "name": "Carol"}]},
                    },
                },
                {
                    "id": "102",
                    "value": {
                        "item_name": {"type": "SINGLE_LINE_TEXT", "value": "Ink"},
                        "quantity": {"type": "NUMBER", "value": "1"},
                        "unit_price": {"type": "NUMBER", "value": "50"},
                        "item_tags": {"type": "MULTI_SELECT", "value": []},
                        "item_owner": {"type": "USER_SELECT", "value": []},
                    },
                },
            ],
        },
    }


class TestBuildHeaderFields:
    """Tests for build_header_fields."""

    def test_without_subtable(self, fields_json):
        """Test a schema of plain fields."""
        header = build_header_fields(fields_json)
        assert len(header) == 14
        assert PRIMARY_MARK not in header

    def test_with_subtable_and_primary_mark(self, subtable_fields_json):
        """Test subtable columns are flattened and the mark is skipped."""
        header = build_header_fields(subtable_fields_json)
        assert len(header) == 18
        assert PRIMARY_MARK not in header
        assert "items" not in header
        assert header[-5:] == ["item_name", "quantity", "unit_price", "item_tags", "item_owner"]

    def test_keeps_schema_order(self):
        """Test fields are emitted in schema order."""
        schema = {
            "b": {"type": "SINGLE_LINE_TEXT", "code": "b"},
            "t": {"type": "SUBTABLE", "code": "t", "fields": {
                "c": {"type": "NUMBER", "code": "c"},
                PRIMARY_MARK: {"type": "SINGLE_LINE_TEXT", "code": PRIMARY_MARK},
            }},
            "a": {"type": "SINGLE_LINE_TEXT", "code": "a"},
        }
        assert build_header_fields(schema) == ["b", "c", "a"]

    def test_empty_schema(self):
        assert build_header_fields({}) == []


class TestGroupByIndex:
    """Tests for group_by_index."""

    def test_groups_in_first_seen_order(self):
        """Test keys and records keep their input order."""
        records = [
            {RECORD_INDEX: "1", "a": "x"},
            {RECORD_INDEX: "2", "a": "y"},
            {RECORD_INDEX: "1", "a": "z"},
        ]
        groups = group_by_index(records)
        assert groups == {
            "1": [{RECORD_INDEX: "1", "a": "x"}, {RECORD_INDEX: "1", "a": "z"}],
            "2": [{RECORD_INDEX: "2", "a": "y"}],
        }
        assert list(groups) == ["1", "2"]

    def test_flattening_groups_is_stable_per_key(self):
        """Test concatenating the groups keeps each key's relative order."""
        records = [
            {RECORD_INDEX: "3", "n": "1"},
            {RECORD_INDEX: "1", "n": "2"},
            {RECORD_INDEX: "3", "n": "3"},
            {RECORD_INDEX: "2", "n": "4"},
            {RECORD_INDEX: "1", "n": "5"},
        ]
        flattened = [r for group in group_by_index(records).values() for r in group]
        assert sorted(flattened, key=lambda r: r["n"]) == records
        for key in ("1", "2", "3"):
            assert [r for r in flattened if r[RECORD_INDEX] == key] == \
                [r for r in records if r[RECORD_INDEX] == key]

    def test_empty_input(self):
        assert group_by_index([]) == {}

    def test_missing_index_column_raises(self):
        """Test rows without an index column are rejected."""
        with pytest.raises(CsvFormatError) as exc_info:
            group_by_index([{RECORD_INDEX: "0"}, {"a": "x"}])
        assert "Row 2" in str(exc_info.value)


class TestConvertFieldValue:
    """Tests for value conversion in both directions."""

    @pytest.mark.parametrize("field,expected", [
        (None, ""),
        ({"type": "SINGLE_LINE_TEXT", "value": "hello"}, "hello"),
        ({"type": "NUMBER", "value": None}, ""),
        ({"type": "CHECK_BOX", "value": ["a", "b"]}, "a\nb"),
        ({"type": "USER_SELECT", "value": [{"code": "u1", "name": "U"}, {"code": "u2", "name": "V"}]}, "u1\nu2"),
        ({"type": "MODIFIER", "value": {"code": "alice", "name": "Alice"}}, "alice"),
        ({"type": "FILE", "value": [{"name": "a.pdf", "fileKey": "k"}]}, "a.pdf"),
    ])
    def test_to_string(self, field, expected):
        assert convert_field_value_to_string(field) == expected

    @pytest.mark.parametrize("field_type,cell,expected", [
        ("SINGLE_LINE_TEXT", "hello", "hello"),
        ("NUMBER", "", ""),
        ("CHECK_BOX", "a\nb", ["a", "b"]),
        ("MULTI_SELECT", "", []),
        ("ORGANIZATION_SELECT", "sales\ndev", [{"code": "sales"}, {"code": "dev"}]),
        ("CREATOR", "alice", {"code": "alice"}),
        ("CREATOR", "", None),
        ("CREATED_TIME", "", None),
        ("UPDATED_TIME", "2024-01-02T03:04:05Z", "2024-01-02T03:04:05Z"),
    ])
    def test_from_string(self, field_type, cell, expected):
        assert convert_string_to_field_value(field_type, cell) == expected


class TestPrinter:
    """Tests for CSV export."""

    def test_rows_without_subtable(self, fields_json):
        """Test one row per record and no mark column."""
        record = {
            "title": {"type": "SINGLE_LINE_TEXT", "value": "Hello"},
            "tags": {"type": "CHECK_BOX", "value": ["urgent"]},
        }
        rows = build_csv_rows([record, record], fields_json)
        assert len(rows) == 3
        header = rows[0]
        assert PRIMARY_MARK not in header
        assert rows[1][header.index("title")] == "Hello"
        assert rows[1][header.index("tags")] == "urgent"
        assert rows[1][header.index("amount")] == ""

    def test_rows_with_subtable(self, subtable_fields_json, order_record):
        """Test a two-row subtable becomes two CSV rows."""
        rows = build_csv_rows([order_record], subtable_fields_json)
        header = rows[0]
        assert header[0] == PRIMARY_MARK
        assert len(header) == 19
        assert len(rows) == 3

        first, second = rows[1], rows[2]
        assert first[0] == PRIMARY_MARK
        assert second[0] == ""
        assert first[header.index("title")] == "Order A"
        assert second[header.index("title")] == ""
        assert first[header.index("Created_by")] == "alice"
        assert first[header.index("item_name")] == "Pen"
        assert first[header.index("item_tags")] == "red\nblue"
        assert second[header.index("item_name")] == "Ink"

    def test_record_with_empty_subtable(self, subtable_fields_json):
        """Test a record without subtable rows still gets one row."""
        record = {
            "title": {"type": "SINGLE_LINE_TEXT", "value": "Empty"},
            "items": {"type": "SUBTABLE", "value": []},
        }
        rows = build_csv_rows([record], subtable_fields_json)
        assert len(rows) == 2
        assert rows[1][0] == PRIMARY_MARK

    def test_print_as_csv_quotes_cells(self, subtable_fields_json, order_record):
        stream = io.StringIO()
        print_as_csv([order_record], subtable_fields_json, stream)
        output = stream.getvalue()
        assert output.startswith('"*","Record_number"')
        assert '"ACME, Inc."' in output


class TestParser:
    """Tests for CSV import."""

    def test_parse_csv_assigns_index_by_mark(self):
        text = '"*","title","item"\r\n"*","A","x"\r\n"","","y"\r\n"*","B","z"\r\n'
        rows = parse_csv(text)
        assert [r[RECORD_INDEX] for r in rows] == ["0", "0", "1"]

    def test_parse_csv_without_mark_column(self):
        """Test every row is its own record without a mark column."""
        rows = parse_csv("title,amount\nA,1\nB,2\n")
        assert [r[RECORD_INDEX] for r in rows] == ["0", "1"]
        assert rows[1]["title"] == "B"

    def test_parse_csv_leading_continuation_row(self):
        """Test rows before the first mark belong to the first record."""
        rows = parse_csv('*,title\n,A\n*,B\n')
        assert [r[RECORD_INDEX] for r in rows] == ["0", "1"]

    def test_parse_csv_strips_bom(self):
        rows = parse_csv("\ufefftitle\nA\n")
        assert rows[0]["title"] == "A"

    def test_parse_records_without_subtable(self, fields_json):
        """Test non-writable fields are skipped."""
        text = 'Record_number,title,tags,Created_by\n5,Hello,"urgent\ninternal",alice\n'
        records = parse_records(text, fields_json)
        assert records == [{
            "title": {"value": "Hello"},
            "tags": {"value": ["urgent", "internal"]},
            "Created_by": {"value": {"code": "alice"}},
        }]

    def test_export_then_import(self, subtable_fields_json, order_record):
        """Test an exported record is rebuilt with its subtable rows."""
        stream = io.StringIO()
        print_as_csv([order_record, order_record], subtable_fields_json, stream)

        records = parse_records(stream.getvalue(), subtable_fields_json)

        assert len(records) == 2
        record = records[0]
        assert record["title"] == {"value": "Order A"}
        assert record["customer"] == {"value": "ACME, Inc."}
        assert record["Created_by"] == {"value": {"code": "alice"}}
        assert "Record_number" not in record
        assert "Assignee" not in record
        assert "Created_datetime" not in record
        assert PRIMARY_MARK not in record
        assert record["items"] == {"value": [
            {"value": {
                "item_name": {"value": "Pen"},
                "quantity": {"value": "2"},
                "unit_price": {"value": "100"},
                "item_tags": {"value": ["red", "blue"]},
                "item_owner": {"value": [{"code": "carol"}]},
            }},
            {"value": {
                "item_name": {"value": "Ink"},
                "quantity": {"value": "1"},
                "unit_price": {"value": "50"},
                "item_tags": {"value": []},
                "item_owner": {"value": []},
            }},
        ]}

    def test_chunk_records(self):
        chunks = chunk_records([{}] * 250)
        assert [len(c) for c in chunks] == [100, 100, 50]
