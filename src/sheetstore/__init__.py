"""
Google Sheets as a schema-on-read row store.

client  - memoized Sheets v4 service handle (credentials from env)
schema  - table registry and A1 range addressing
codec   - raw rows <-> keyed records
table   - per-table CRUD adapter (initialize, list, append, find, update, delete)
store   - owns the client and one adapter per table
"""
from .client import SheetsClient
from .codec import HEADER_MODE_DECLARED, HEADER_MODE_HEADER, decode_rows, encode_row
from .schema import TABLES, USERS, WORKLOGS, TableSchema, column_letter
from .store import SheetStore, get_store
from .table import RowMatch, SheetTable

__all__ = [
    "SheetsClient",
    "HEADER_MODE_DECLARED",
    "HEADER_MODE_HEADER",
    "decode_rows",
    "encode_row",
    "TABLES",
    "USERS",
    "WORKLOGS",
    "TableSchema",
    "column_letter",
    "SheetStore",
    "get_store",
    "RowMatch",
    "SheetTable",
]
