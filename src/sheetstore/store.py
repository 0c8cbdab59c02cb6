# ── src/sheetstore/store.py ───────────────────────────────────────────────────
"""
SheetStore: the single object that owns the Sheets client and one table
adapter per registered schema.  main.py creates it once and puts it on
app.state; routes reach it through the get_store dependency.
"""
import logging
import os
from typing import Dict, Iterable, Optional

from fastapi import Request

from errors import StoreError
from .client import SheetsClient
from .codec import HEADER_MODE_DECLARED, HEADER_MODES
from .schema import TABLES, TableSchema
from .table import SheetTable

_logger = logging.getLogger(__name__)


class SheetStore:
    def __init__(
        self,
        client: SheetsClient,
        schemas: Optional[Iterable[TableSchema]] = None,
        header_mode: str = HEADER_MODE_DECLARED,
    ) -> None:
        self.client = client
        self.tables: Dict[str, SheetTable] = {
            schema.name: SheetTable(client, schema, header_mode)
            for schema in (schemas if schemas is not None else TABLES.values())
        }

    @classmethod
    def from_env(cls) -> "SheetStore":
        header_mode = (os.getenv("SHEETS_HEADER_MODE") or HEADER_MODE_DECLARED).strip().lower()
        if header_mode not in HEADER_MODES:
            raise ValueError(
                f"SHEETS_HEADER_MODE must be one of {', '.join(HEADER_MODES)}; got {header_mode!r}"
            )
        return cls(SheetsClient(), header_mode=header_mode)

    @property
    def users(self) -> SheetTable:
        return self.tables["users"]

    @property
    def worklogs(self) -> SheetTable:
        return self.tables["worklogs"]

    async def initialize_all(self) -> Dict[str, bool]:
        """
        Ensure every table has its header row.  Failures are logged and
        reported as False; they never propagate so startup can proceed.
        """
        results: Dict[str, bool] = {}
        for name, table in self.tables.items():
            try:
                written = await table.initialize()
            except (StoreError, ValueError) as exc:
                _logger.error("Error initializing sheet %s: %s", name, exc)
                results[name] = False
                continue
            _logger.info("Sheet %s %s", name, "initialized" if written else "verified")
            results[name] = True
        return results


def get_store(request: Request) -> SheetStore:
    return request.app.state.store


__all__ = ["SheetStore", "get_store"]
