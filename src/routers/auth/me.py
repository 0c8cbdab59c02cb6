# ── src/routers/auth/me.py ───────────────────────────────────────────────────
from fastapi import APIRouter, Depends
from typing import Any, Dict

from .tokens import require_user

# ──────────────────────────── Router ────────────────────────────
router = APIRouter(
    prefix="/auth",
    tags=["auth"]
)

@router.get("/me")
async def me(user: Dict[str, Any] = Depends(require_user)):
    """
    Echo the verified token claims.
    Requires: Authorization: Bearer <JWT>.  Does not touch the store, so a
    token stays usable here after the account row changes.
    """
    return {"user": user}
