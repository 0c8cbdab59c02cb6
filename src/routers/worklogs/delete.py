# src/routers/worklogs/delete.py
import logging
from typing import Any, Dict

from sheetstore import SheetStore
from .helpers import locate_owned

_logger = logging.getLogger(__name__)


async def handle_delete(store: SheetStore, user_id: str, log_id: str) -> Dict[str, Any]:
    """Physically delete the worklog row; returns the record as it was."""
    found = await locate_owned(store, log_id, user_id, "delete")
    await store.worklogs.delete_at(found.position)
    _logger.info("Deleted worklog %s (row %s) for user %s", log_id, found.position, user_id)
    return found.record
