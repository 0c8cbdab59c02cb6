# src/routers/worklogs/list_worklogs.py
from typing import Any, Dict, List

from sheetstore import SheetStore
from .helpers import as_number, date_sort_key, same_id


async def handle_list(store: SheetStore, user_id: str) -> List[Dict[str, Any]]:
    """The caller's worklogs, newest date first."""
    logs = await store.worklogs.list_all()
    mine = [
        {**log, "duration_hours": as_number(log.get("duration_hours"))}
        for log in logs
        if same_id(log.get("user_id"), user_id)
    ]
    mine.sort(key=date_sort_key, reverse=True)
    return mine
