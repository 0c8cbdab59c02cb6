# src/routers/worklogs/helpers.py
import datetime
import logging
from typing import Any, Dict

from errors import Forbidden, NotFound
from sheetstore import RowMatch, SheetStore

_logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("date", "duration_hours", "reason")
MISSING_FIELDS_MSG = "Missing required fields (date, duration_hours, reason)"
SHEET_DATE_FORMATS = ("%Y/%m/%d", "%m/%d/%Y")


def as_number(value: Any) -> Any:
    """'2' -> 2, '1.5' -> 1.5; anything unparsable is returned unchanged."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    try:
        num = float(str(value).strip())
    except ValueError:
        return value
    if num != num or num in (float("inf"), float("-inf")):
        return value
    return int(num) if num.is_integer() else num


def date_sort_key(log: Dict[str, Any]) -> datetime.datetime:
    """Parse the worklog date for newest-first sorting; unparsable dates sort last."""
    raw = str(log.get("date") or "").strip()
    try:
        return datetime.datetime.fromisoformat(raw).replace(tzinfo=None)
    except ValueError:
        pass
    # rows written before dates were stored RAW may carry the sheet locale's format
    for fmt in SHEET_DATE_FORMATS:
        try:
            return datetime.datetime.strptime(raw, fmt)
        except ValueError:
            continue
    return datetime.datetime.min


def same_id(a: Any, b: Any) -> bool:
    return str(a if a is not None else "").strip() == str(b if b is not None else "").strip()


async def locate_owned(store: SheetStore, log_id: str, user_id: str, action: str) -> RowMatch:
    """
    Resolve a worklog's current row and check it belongs to user_id.
    The returned position must be used right away; a delete in between
    shifts it.
    """
    found = await store.worklogs.find_by_id("id", log_id)
    if found is None:
        raise NotFound("Worklog not found")
    if not same_id(found.record.get("user_id"), user_id):
        _logger.warning("User %s tried to %s worklog %s owned by %s",
                        user_id, action, log_id, found.record.get("user_id"))
        raise Forbidden(f"Not allowed to {action} this worklog")
    return found
