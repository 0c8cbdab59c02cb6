# ── src/routers/auth/tokens.py ───────────────────────────────────────────────
"""
Bearer-token issue/verify (HS256 JWT) and the FastAPI dependency that
gates per-user routes.

Claims carried: id, username, display_name (+ iat/exp).  Expired, forged
and malformed tokens are all reported as the same 401; there is no
revocation, a token stays valid until exp.
"""
from fastapi import Request
from typing import Any, Dict, Optional
import datetime, logging, os, re, jwt

from errors import Unauthorized

_logger = logging.getLogger(__name__)

_ALGORITHM = "HS256"
CLAIM_KEYS = ("id", "username", "display_name")

# ───────────────────────── lifetime parsing ─────────────────────────
_UNITS = {"s": 1, "m": 60, "h": 3600, "d": 86400, "w": 604800}
_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdw]?)\s*$", re.IGNORECASE)


def parse_lifetime(value: str) -> datetime.timedelta:
    """'3600' -> 1h, '12h', '365d', '2w' ..."""
    m = _DURATION_RE.match(value or "")
    if not m:
        raise ValueError(f"Invalid token lifetime: {value!r}")
    amount, unit = int(m.group(1)), (m.group(2) or "s").lower()
    return datetime.timedelta(seconds=amount * _UNITS[unit])


# ───────────────────────── config (env) ─────────────────────────────
_jwt_secret     = os.getenv("JWT_SECRET", "change-me-secret")
JWT_EXPIRES_IN  = os.getenv("JWT_EXPIRES_IN", "365d")
_jwt_lifetime   = parse_lifetime(JWT_EXPIRES_IN)


# ───────────────────────── issue / verify ───────────────────────────
def issue_token(claims: Dict[str, Any], lifetime: Optional[datetime.timedelta] = None) -> str:
    now = datetime.datetime.now(datetime.timezone.utc)
    payload = {k: claims.get(k, "") for k in CLAIM_KEYS}
    payload["iat"] = now
    payload["exp"] = now + (lifetime or _jwt_lifetime)
    return jwt.encode(payload, _jwt_secret, algorithm=_ALGORITHM)


def verify_token(token: Optional[str]) -> Dict[str, Any]:
    if not token:
        raise Unauthorized("Missing bearer token")
    try:
        payload = jwt.decode(token, _jwt_secret, algorithms=[_ALGORITHM])
    except jwt.InvalidTokenError as exc:
        # ExpiredSignatureError is a subclass; callers get the same answer
        _logger.info("Rejected bearer token: %s", type(exc).__name__)
        raise Unauthorized("Invalid or expired token")
    if not payload.get("id"):
        raise Unauthorized("Invalid or expired token")
    return {k: payload.get(k, "") for k in CLAIM_KEYS}


def _extract_bearer_token(req: Request) -> Optional[str]:
    auth = req.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth[len("Bearer "):].strip() or None


def require_user(request: Request) -> Dict[str, Any]:
    """Dependency: verified claims of the caller, else 401."""
    return verify_token(_extract_bearer_token(request))


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """The subset of a user record that is safe to return (no password)."""
    return {k: user.get(k, "") for k in CLAIM_KEYS}


__all__ = [
    "CLAIM_KEYS",
    "JWT_EXPIRES_IN",
    "parse_lifetime",
    "issue_token",
    "verify_token",
    "require_user",
    "public_user",
]
