# ── src/routers/auth/endpoints.py ────────────────────────────────────────────
"""
Aggregator: main.py includes one auth router while each route lives in
its own module.
"""
from fastapi import APIRouter

from .register import router as register_router
from .login    import router as login_router
from .me       import router as me_router

router = APIRouter()

router.include_router(register_router)
router.include_router(login_router)
router.include_router(me_router)
