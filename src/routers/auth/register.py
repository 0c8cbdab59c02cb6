# ── src/routers/auth/register.py ─────────────────────────────────────────────
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

from errors import Conflict
from sheetstore import SheetStore, get_store
from routers.common import new_id, require_fields
from .tokens import issue_token, public_user

_logger = logging.getLogger(__name__)

# ────────────────────────── Pydantic model ─────────────────────
# Fields are optional at the model level so a missing one is a 400 from
# require_fields rather than pydantic's 422.
class RegisterIn(BaseModel):
    username:     Optional[str] = None
    password:     Optional[str] = None
    display_name: Optional[str] = None

# ───────────────────────── service ─────────────────────────────
async def handle_register(
    store: SheetStore, username: str, password: str, display_name: Optional[str] = None
) -> Dict[str, Any]:
    """
    Append a new user after a full-table scan for the username.

    The scan and the append are separate round trips: two concurrent
    registrations of one username can both pass the check.
    """
    require_fields(
        {"username": username, "password": password},
        ("username", "password"),
        "Username and password are required",
    )

    users = await store.users.list_all()
    if any(u.get("username") == username for u in users):
        _logger.info("Register rejected, username taken: %s", username)
        raise Conflict("Username already exists")

    new_user = {
        "id":           new_id("user"),
        "username":     username,
        "password":     password,          # stored as given; no hashing
        "display_name": display_name or username,
    }
    await store.users.append(new_user)
    _logger.info("Registered user %s (%s)", username, new_user["id"])

    user = public_user(new_user)
    return {"token": issue_token(user), "user": user}

# ──────────────────────────── Router ────────────────────────────
router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: RegisterIn, store: SheetStore = Depends(get_store)):
    result = await handle_register(store, body.username, body.password, body.display_name)
    return {"message": "Registered", **result}
