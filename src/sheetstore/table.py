# ── src/sheetstore/table.py ───────────────────────────────────────────────────
"""
Table adapter: record-level CRUD over one spreadsheet tab.

The tab is a schema-on-read row store.  Row 1 is the header, data starts at
row 2, and a record is identified by its id column, never by its position.
Positions shift up by one for every row below a deleted row, so a position
returned by find_by_id is only good until the next mutation of the table.

There is no locking, no versioning and no snapshot isolation; every call
is a fresh round trip (find_by_id + update_at is two of them).  Transport
errors surface as StoreError and are never retried here.

Google's client is blocking, so each request's .execute() runs through
asyncio.to_thread and the awaiting task only suspends there.  httplib2.Http
is not thread-safe; every worker thread executes on its own authorized
transport from SheetsClient.thread_http().
"""
import asyncio
import logging
from typing import Any, Callable, List, Mapping, NamedTuple, Optional

import google.auth.exceptions
import httplib2
from googleapiclient.errors import HttpError

from errors import StoreError
from .client import SheetsClient
from .codec import HEADER_MODE_DECLARED, HEADER_MODES, Record, decode_rows, encode_row
from .schema import TableSchema, quote_title

_logger = logging.getLogger(__name__)

# statuses the Sheets API answers with when the tab/range does not exist
MISSING_RANGE_STATUSES = (400, 404)


class RowMatch(NamedTuple):
    position: int       # 1-based physical row, >= 2
    record: Record


def _status_of(exc: HttpError) -> Optional[int]:
    status = getattr(exc, "status_code", None) or getattr(exc.resp, "status", None)
    try:
        return int(status)
    except (TypeError, ValueError):
        return None


class SheetTable:
    def __init__(
        self,
        client: SheetsClient,
        schema: TableSchema,
        header_mode: str = HEADER_MODE_DECLARED,
    ) -> None:
        if header_mode not in HEADER_MODES:
            raise ValueError(f"unknown header mode: {header_mode!r}")
        self.client = client
        self.schema = schema
        self.header_mode = header_mode

    def __repr__(self) -> str:
        return f"SheetTable({self.schema.name!r}, {self.header_mode})"

    @property
    def name(self) -> str:
        return self.schema.name

    @property
    def columns(self):
        return self.schema.columns

    # ─────────────────────────── transport ───────────────────────────────

    async def _execute(self, make_request: Callable[[Any], Any], action: str) -> Any:
        """
        Build and run one API request off the event loop.
        HttpError passes through for status checks; auth, socket and httplib2
        failures become StoreError.
        """
        def _run():
            request = make_request(self.client.get_service())
            http = self.client.thread_http()
            if http is None:
                return request.execute()
            return request.execute(http=http)

        _logger.debug("sheets %s on %s", action, self.schema.name)
        try:
            return await asyncio.to_thread(_run)
        except (google.auth.exceptions.GoogleAuthError, OSError, httplib2.HttpLib2Error) as exc:
            _logger.error("sheets %s on %s failed: %r", action, self.schema.name, exc)
            raise StoreError(f"Spreadsheet {action} failed for {self.schema.name}") from exc

    async def _call(self, make_request: Callable[[Any], Any], action: str) -> Any:
        try:
            return await self._execute(make_request, action)
        except HttpError as exc:
            _logger.error("sheets %s on %s failed: %s", action, self.schema.name, exc)
            raise StoreError(f"Spreadsheet {action} failed for {self.schema.name}") from exc

    async def _get_values(self) -> Optional[List[List[Any]]]:
        """Raw rows of the table range, or None when the tab does not exist."""
        sid = self.client.spreadsheet_id
        try:
            response = await self._execute(
                lambda s: s.spreadsheets().values().get(spreadsheetId=sid, range=self.schema.range),
                "read",
            )
        except HttpError as exc:
            if _status_of(exc) in MISSING_RANGE_STATUSES:
                _logger.info("range %s not provisioned yet (%s)", self.schema.range, _status_of(exc))
                return None
            _logger.error("sheets read on %s failed: %s", self.schema.name, exc)
            raise StoreError(f"Spreadsheet read failed for {self.schema.name}") from exc
        # the API omits "values" entirely for an empty range
        return response.get("values", []) if response else []

    # ─────────────────────────── operations ──────────────────────────────

    async def initialize(self) -> bool:
        """
        Write the header row if the table has no rows at all.
        Adds the tab first when it does not exist.  Returns True when a header
        was written.  An existing first row is left alone, whatever it holds.
        """
        sid = self.client.spreadsheet_id
        rows = await self._get_values()
        if rows:
            return False

        if rows is None:
            body = {"requests": [{"addSheet": {"properties": {"title": self.schema.name}}}]}
            await self._call(
                lambda s: s.spreadsheets().batchUpdate(spreadsheetId=sid, body=body),
                "addSheet",
            )
            _logger.info("added sheet tab %s", self.schema.name)

        await self._call(
            lambda s: s.spreadsheets().values().update(
                spreadsheetId=sid,
                range=self.schema.header_range,
                valueInputOption="RAW",
                body={"values": [list(self.schema.columns)]},
            ),
            "header write",
        )
        _logger.info("wrote header row for %s", self.schema.name)
        return True

    async def list_all(self) -> List[Record]:
        rows = await self._get_values()
        return decode_rows(rows, self.schema.columns, self.header_mode)

    async def append(self, record: Mapping[str, Any]) -> Record:
        """Insert the record after the last populated row; returns what was written."""
        sid = self.client.spreadsheet_id
        row = encode_row(record, self.schema.columns)
        await self._call(
            lambda s: s.spreadsheets().values().append(
                spreadsheetId=sid,
                range=self.schema.range,
                valueInputOption=self.schema.value_input,
                insertDataOption="INSERT_ROWS",
                body={"values": [row]},
            ),
            "append",
        )
        return dict(zip(self.schema.columns, row))

    async def find_by_id(self, id_column: str, target_id: Any) -> Optional[RowMatch]:
        """First row whose id_column equals target_id (both trimmed), else None."""
        rows = await self._get_values()
        if not rows or len(rows) < 2:
            return None

        header = [str(h) for h in rows[0]]
        if id_column not in header:
            return None
        idx = header.index(id_column)

        wanted = "" if target_id is None else str(target_id).strip()
        for offset, row in enumerate(rows[1:]):
            value = row[idx] if idx < len(row) and row[idx] is not None else ""
            if str(value).strip() == wanted:
                record = decode_rows([rows[0], row], self.schema.columns, self.header_mode)[0]
                return RowMatch(position=offset + 2, record=record)
        return None

    async def update_at(self, position: int, record: Mapping[str, Any]) -> Record:
        """Overwrite the whole row at position (A..last column) with record."""
        sid = self.client.spreadsheet_id
        row = encode_row(record, self.schema.columns)
        row_range = self.schema.row_range(position)
        await self._call(
            lambda s: s.spreadsheets().values().update(
                spreadsheetId=sid,
                range=row_range,
                valueInputOption=self.schema.value_input,
                body={"values": [row]},
            ),
            "update",
        )
        return dict(zip(self.schema.columns, row))

    async def resolve_sheet_id(self) -> Optional[int]:
        sid = self.client.spreadsheet_id
        meta = await self._call(
            lambda s: s.spreadsheets().get(
                spreadsheetId=sid, fields="sheets.properties(sheetId,title)"
            ),
            "metadata",
        )
        for sheet in (meta or {}).get("sheets", []):
            props = sheet.get("properties", {})
            if props.get("title") == self.schema.name:
                return props.get("sheetId")
        return None

    async def delete_at(self, position: int) -> None:
        """Physically remove row `position`; every row below moves up one."""
        if position < 2:
            raise ValueError(f"invalid data row position: {position}")
        sheet_id = await self.resolve_sheet_id()
        if sheet_id is None:
            raise StoreError(f"Sheet not found: {quote_title(self.schema.name)}")

        sid = self.client.spreadsheet_id
        body = {
            "requests": [
                {
                    "deleteDimension": {
                        "range": {
                            "sheetId": sheet_id,
                            "dimension": "ROWS",
                            "startIndex": position - 1,
                            "endIndex": position,
                        }
                    }
                }
            ]
        }
        await self._call(
            lambda s: s.spreadsheets().batchUpdate(spreadsheetId=sid, body=body),
            "row delete",
        )


__all__ = ["MISSING_RANGE_STATUSES", "RowMatch", "SheetTable"]
