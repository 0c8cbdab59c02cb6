# src/routers/worklogs/update.py
import logging
from typing import Any, Dict

from sheetstore import SheetStore
from .helpers import locate_owned

_logger = logging.getLogger(__name__)


async def handle_update(
    store: SheetStore, user_id: str, log_id: str, patch: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Merge `patch` over the stored worklog and overwrite the whole row.
    id and user_id always keep their stored values.
    """
    found = await locate_owned(store, log_id, user_id, "update")

    merged = {
        **found.record,
        **patch,
        "id":      found.record["id"],
        "user_id": found.record["user_id"],
    }
    written = await store.worklogs.update_at(found.position, merged)
    _logger.info("Updated worklog %s (row %s) for user %s", log_id, found.position, user_id)
    return written
