# ── src/sheetstore/codec.py ───────────────────────────────────────────────────
"""
Row codec: raw sheet values (list of lists of strings) <-> keyed records.

Decoding has two modes, chosen per table:

- HEADER_MODE_DECLARED ("declared"): data rows are zipped against the
  registered column list.  The header row actually present in the sheet is
  skipped, not read.  A sheet whose header was reordered by hand silently
  misaligns.
- HEADER_MODE_HEADER ("header"): data rows are zipped against the header
  row found in the sheet.  Registered columns missing from that header
  decode as "".
"""
from typing import Any, Dict, List, Mapping, Optional, Sequence

HEADER_MODE_DECLARED = "declared"
HEADER_MODE_HEADER = "header"
HEADER_MODES = (HEADER_MODE_DECLARED, HEADER_MODE_HEADER)

Record = Dict[str, Any]


def _cell(row: Sequence[Any], index: int) -> Any:
    # the Sheets API drops trailing empty cells from each row
    if index < len(row) and row[index] is not None:
        return row[index]
    return ""


def row_to_record(row: Sequence[Any], columns: Sequence[str]) -> Record:
    return {col: _cell(row, i) for i, col in enumerate(columns)}


def decode_rows(
    raw_rows: Optional[Sequence[Sequence[Any]]],
    columns: Sequence[str],
    header_mode: str = HEADER_MODE_DECLARED,
) -> List[Record]:
    if not raw_rows:
        return []
    header, data_rows = raw_rows[0], raw_rows[1:]

    if header_mode == HEADER_MODE_HEADER:
        keys = [str(h) for h in header]
        records = []
        for row in data_rows:
            by_header = row_to_record(row, keys)
            records.append({col: by_header.get(col, "") for col in columns})
        return records
    if header_mode != HEADER_MODE_DECLARED:
        raise ValueError(f"unknown header mode: {header_mode!r}")

    return [row_to_record(row, columns) for row in data_rows]


def encode_row(record: Mapping[str, Any], columns: Sequence[str]) -> List[Any]:
    """Order record values by columns; None/absent -> "", extra keys dropped."""
    row = []
    for col in columns:
        value = record.get(col)
        row.append("" if value is None else value)
    return row


__all__ = [
    "HEADER_MODE_DECLARED",
    "HEADER_MODE_HEADER",
    "HEADER_MODES",
    "Record",
    "row_to_record",
    "decode_rows",
    "encode_row",
]
