# src/routers/worklogs/create.py
import logging
from typing import Any, Dict

from sheetstore import SheetStore
from routers.common import new_id, require_fields
from .helpers import MISSING_FIELDS_MSG, REQUIRED_FIELDS

_logger = logging.getLogger(__name__)


async def handle_create(store: SheetStore, user_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    require_fields(fields, REQUIRED_FIELDS, MISSING_FIELDS_MSG)

    payload = {
        "id":             new_id("log"),
        "user_id":        user_id,
        "date":           fields["date"],
        "duration_hours": fields["duration_hours"],
        "reason":         fields["reason"],
        "notes":          fields.get("notes") or "",
    }
    written = await store.worklogs.append(payload)
    _logger.info("Created worklog %s for user %s", payload["id"], user_id)
    return written
