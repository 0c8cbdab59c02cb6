# ── src/routers/auth/login.py ────────────────────────────────────────────────
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Any, Dict, Optional
import logging

from errors import Unauthorized
from sheetstore import SheetStore, get_store
from routers.common import require_fields
from .tokens import JWT_EXPIRES_IN, issue_token, public_user

_logger = logging.getLogger(__name__)

# ────────────────────────── Pydantic model ─────────────────────
class LoginIn(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None

# ───────────────────────── service ─────────────────────────────
async def handle_login(store: SheetStore, username: str, password: str) -> Dict[str, Any]:
    require_fields(
        {"username": username, "password": password},
        ("username", "password"),
        "Username and password are required",
    )

    users = await store.users.list_all()
    # plaintext comparison; one message for either factor failing
    user = next(
        (u for u in users if u.get("username") == username and str(u.get("password")) == password),
        None,
    )
    if user is None:
        _logger.info("Login failed for %s", username)
        raise Unauthorized("Invalid username or password")

    claims = public_user(user)
    _logger.info("Login ok for %s", username)
    return {"token": issue_token(claims), "user": claims, "expiresIn": JWT_EXPIRES_IN}

# ──────────────────────────── Router ────────────────────────────
router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

@router.post("/login")
async def login(creds: LoginIn, store: SheetStore = Depends(get_store)):
    result = await handle_login(store, creds.username, creds.password)
    return {"message": "Logged in", **result}
