# ── src/sheetstore/schema.py ──────────────────────────────────────────────────
"""
Static table registry plus A1 range addressing.

Each logical table is a tab in the spreadsheet whose first row is the
header and whose columns are fixed at registration time.  Ranges are
addressed as  '<tab>'!A:<last col>  for whole-table reads and
'<tab>'!A<row>:<last col><row>  for single-row overwrites.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

# can address up to 'ZZZ'
MAX_COLUMNS = 18278


def column_letter(column_count: int) -> str:
    """1 -> 'A', 26 -> 'Z', 27 -> 'AA' ..."""
    if column_count < 1 or column_count > MAX_COLUMNS:
        raise ValueError(f"column index out of range: {column_count}")
    dividend = column_count
    name = ""
    while dividend > 0:
        modulo = (dividend - 1) % 26
        name = chr(65 + modulo) + name
        dividend = (dividend - modulo) // 26
    return name


def quote_title(title: str) -> str:
    # single quotes inside a tab title are escaped by doubling them
    return "'" + title.replace("'", "''") + "'"


@dataclass(frozen=True)
class TableSchema:
    name: str
    columns: Tuple[str, ...]
    # "USER_ENTERED" lets Sheets parse numbers/dates; "RAW" stores strings as-is
    value_input: str = "USER_ENTERED"

    def __post_init__(self):
        if not self.columns:
            raise ValueError(f"table {self.name!r} has no columns")
        if len(set(self.columns)) != len(self.columns):
            raise ValueError(f"table {self.name!r} has duplicate columns")

    @property
    def last_column(self) -> str:
        return column_letter(len(self.columns))

    @property
    def range(self) -> str:
        return f"{quote_title(self.name)}!A:{self.last_column}"

    @property
    def header_range(self) -> str:
        return f"{quote_title(self.name)}!A1"

    def row_range(self, position: int) -> str:
        if position < 2:
            # row 1 is the header
            raise ValueError(f"invalid data row position: {position}")
        return f"{quote_title(self.name)}!A{position}:{self.last_column}{position}"


# ───────────────────────────── registry ──────────────────────────────────────

USERS = TableSchema(
    name="users",
    columns=("id", "username", "password", "display_name"),
    # a password like "0123" must not come back as 123
    value_input="RAW",
)

WORKLOGS = TableSchema(
    name="worklogs",
    columns=("id", "user_id", "date", "duration_hours", "reason", "notes"),
    # dates come back exactly as sent, not reformatted to the sheet's locale
    value_input="RAW",
)

TABLES: Dict[str, TableSchema] = {t.name: t for t in (USERS, WORKLOGS)}


__all__ = [
    "MAX_COLUMNS",
    "column_letter",
    "quote_title",
    "TableSchema",
    "USERS",
    "WORKLOGS",
    "TABLES",
]
