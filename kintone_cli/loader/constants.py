"""
Constants shared by the CSV printer and parser.
"""

# Structural column marking the first CSV row of each record. It is never a
# field code, so header building skips it wherever it appears in a schema.
PRIMARY_MARK = "*"

# Column the parser assigns to correlate the CSV rows of one record
RECORD_INDEX = "__RECORD_INDEX__"

# Separator for multi-value cells (check boxes, user selections, ...)
LINE_BREAK = "\n"

SUBTABLE = "SUBTABLE"

# Values are lists of plain strings
MULTI_VALUE_TYPES = frozenset({"CHECK_BOX", "MULTI_SELECT", "CATEGORY"})

# Values are lists of {"code": ..., "name": ...} entities
ENTITY_LIST_TYPES = frozenset({
    "USER_SELECT",
    "ORGANIZATION_SELECT",
    "GROUP_SELECT",
    "STATUS_ASSIGNEE",
})

# Values are a single {"code": ..., "name": ...} entity
ENTITY_TYPES = frozenset({"CREATOR", "MODIFIER"})

# Record metadata the API only accepts when set to an actual value
TIMESTAMP_TYPES = frozenset({"CREATED_TIME", "UPDATED_TIME"})

FILE = "FILE"

# Types the records API computes or rejects on write
NON_WRITABLE_TYPES = frozenset({
    "RECORD_NUMBER",
    "__ID__",
    "__REVISION__",
    "CALC",
    "STATUS",
    "STATUS_ASSIGNEE",
    "CATEGORY",
    "FILE",
    "REFERENCE_TABLE",
    "GROUP",
})
