# ── src/routers/common.py ─────────────────────────────────────────────────────
"""
Small helpers shared by the auth and worklog handlers.

- new_id(prefix): "<prefix>-<epoch ms>-<6 hex>"; ids are opaque strings and
  the suffix keeps two requests in the same millisecond apart.
- is_missing(value): truthiness check used for required request fields
  (None, "", 0 and False all count as missing).
- require_fields(payload, names, message): raise ValidationError naming
  the missing fields.
"""
from typing import Any, Dict, Iterable
import time, uuid

from errors import ValidationError


def new_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"


def is_missing(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return not value


def require_fields(payload: Dict[str, Any], names: Iterable[str], message: str) -> None:
    missing = [n for n in names if is_missing(payload.get(n))]
    if missing:
        raise ValidationError(f"{message}: {', '.join(missing)}")


__all__ = ["new_id", "is_missing", "require_fields"]
