# ── src/routers/worklogs/endpoints.py ────────────────────────────────
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional, Union

from sheetstore import SheetStore, get_store
from routers.auth.tokens import require_user

from .list_worklogs import handle_list
from .create import handle_create
from .update import handle_update
from .delete import handle_delete

router = APIRouter(prefix="/api/worklogs", tags=["worklogs"])

Hours = Union[int, float, str, None]

# ── Pydantic models ──────────────────────────────────────────────────
# Every field is optional here; required ones are checked by handle_create
# so the caller gets a 400, not pydantic's 422.
class WorklogIn(BaseModel):
    date:           Optional[str] = Field(None, description="YYYY-MM-DD")
    duration_hours: Hours         = Field(None, description="Overtime hours")
    reason:         Optional[str] = None
    notes:          Optional[str] = None


class WorklogPatch(BaseModel):
    """Partial update; only the fields actually sent are merged."""
    date:           Optional[str] = None
    duration_hours: Hours         = None
    reason:         Optional[str] = None
    notes:          Optional[str] = None


# ── Routes ───────────────────────────────────────────────────────────
@router.get("", summary="List the caller's worklogs, newest first")
async def list_worklogs(
    user: Dict[str, Any] = Depends(require_user),
    store: SheetStore = Depends(get_store),
):
    return {"data": await handle_list(store, user["id"])}


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a worklog")
async def create_worklog(
    body: WorklogIn,
    user: Dict[str, Any] = Depends(require_user),
    store: SheetStore = Depends(get_store),
):
    data = await handle_create(store, user["id"], body.model_dump())
    return {"message": "Worklog created", "data": data}


@router.put("/{log_id}", summary="Update one of the caller's worklogs")
async def update_worklog(
    log_id: str,
    body: WorklogPatch,
    user: Dict[str, Any] = Depends(require_user),
    store: SheetStore = Depends(get_store),
):
    data = await handle_update(store, user["id"], log_id, body.model_dump(exclude_unset=True))
    return {"message": "Worklog updated", "data": data}


@router.delete("/{log_id}", summary="Delete one of the caller's worklogs")
async def delete_worklog(
    log_id: str,
    user: Dict[str, Any] = Depends(require_user),
    store: SheetStore = Depends(get_store),
):
    data = await handle_delete(store, user["id"], log_id)
    return {"message": "Worklog deleted", "data": data}
