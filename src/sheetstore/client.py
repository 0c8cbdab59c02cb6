# ── src/sheetstore/client.py ──────────────────────────────────────────────────
"""
Lazily-built, memoized Google Sheets v4 service handle.

Credentials come from exactly one of two sources, in priority order:

1. Inline service-account fields in the environment (GOOGLE_SA_*).  All of
   the required fields must be set, otherwise the whole source is ignored;
   partial credentials are never assembled.
2. A service-account key file: GOOGLE_APPLICATION_CREDENTIALS, or
   ./service-account.json when unset.

The handle is built at most once per SheetsClient.  If neither source is
usable every call to get_service() raises StoreError; nothing is retried.
"""
import logging
import os
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import google.auth.exceptions
import google_auth_httplib2
import httplib2
from google.oauth2 import service_account
from googleapiclient.discovery import build

from errors import StoreError

_logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]
DEFAULT_SHEET_ID = "1MeCb_ClcxP-H_e6vYid49l-ayRd0cF-TE_StXRO9dnM"
DEFAULT_CREDENTIALS_FILE = "service-account.json"
DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"

# env var -> service-account info key
INLINE_CREDENTIAL_FIELDS = {
    "GOOGLE_SA_TYPE":           "type",
    "GOOGLE_SA_PROJECT_ID":     "project_id",
    "GOOGLE_SA_PRIVATE_KEY_ID": "private_key_id",
    "GOOGLE_SA_PRIVATE_KEY":    "private_key",
    "GOOGLE_SA_CLIENT_EMAIL":   "client_email",
    "GOOGLE_SA_CLIENT_ID":      "client_id",
}


def inline_credentials(environ: Mapping[str, str]) -> Optional[Dict[str, str]]:
    """Service-account info from GOOGLE_SA_* or None if any field is missing."""
    if not all(environ.get(key) for key in INLINE_CREDENTIAL_FIELDS):
        return None
    info = {field: environ[key] for key, field in INLINE_CREDENTIAL_FIELDS.items()}
    # keys pasted into .env files usually carry literal "\n"
    info["private_key"] = info["private_key"].replace("\\n", "\n")
    info["token_uri"] = environ.get("GOOGLE_SA_TOKEN_URI") or DEFAULT_TOKEN_URI
    return info


def credentials_file(environ: Mapping[str, str]) -> Path:
    return Path(environ.get("GOOGLE_APPLICATION_CREDENTIALS") or DEFAULT_CREDENTIALS_FILE)


class SheetsClient:
    """
    Owns the spreadsheet id and the one Sheets service handle for the process.

    A prebuilt `service` may be passed in (tests, or callers that manage
    credentials themselves); otherwise it is built on first use.
    """

    def __init__(
        self,
        spreadsheet_id: Optional[str] = None,
        service: Any = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self.spreadsheet_id = (
            spreadsheet_id or self._environ.get("GOOGLE_SHEET_ID") or DEFAULT_SHEET_ID
        )
        self._service = service
        self._credentials = None
        self._lock = threading.Lock()
        self._local = threading.local()
        self.credential_source: Optional[str] = "injected" if service is not None else None

    def __repr__(self) -> str:
        state = self.credential_source or "unbuilt"
        return f"SheetsClient({self.spreadsheet_id!r}, {state})"

    @property
    def built(self) -> bool:
        return self._service is not None

    def get_service(self) -> Any:
        if self._service is not None:
            return self._service
        with self._lock:
            if self._service is None:
                self._service = self._build()
        return self._service

    def thread_http(self) -> Any:
        """
        Authorized transport owned by the calling thread, for request.execute(http=...).

        The service's own httplib2.Http is shared and not thread-safe, so each
        worker thread gets a separate one.  None for an injected service, whose
        transport the caller manages.
        """
        if self._credentials is None:
            return None
        http = getattr(self._local, "http", None)
        if http is None:
            http = google_auth_httplib2.AuthorizedHttp(self._credentials, http=httplib2.Http())
            self._local.http = http
        return http

    def _build(self) -> Any:
        try:
            credentials = self._load_credentials()
            service = build("sheets", "v4", credentials=credentials, cache_discovery=False)
        except (OSError, ValueError, google.auth.exceptions.GoogleAuthError) as exc:
            _logger.error("Unable to build Google Sheets client: %s", exc)
            raise StoreError("Unable to connect to the spreadsheet store") from exc
        self._credentials = credentials
        _logger.info(
            "Google Sheets client ready (credentials: %s, spreadsheet: %s)",
            self.credential_source, self.spreadsheet_id,
        )
        return service

    def _load_credentials(self):
        info = inline_credentials(self._environ)
        if info is not None:
            self.credential_source = "inline"
            return service_account.Credentials.from_service_account_info(info, scopes=SCOPES)

        path = credentials_file(self._environ)
        if not path.is_file():
            raise FileNotFoundError(f"service account file not found: {path}")
        self.credential_source = "file"
        return service_account.Credentials.from_service_account_file(str(path), scopes=SCOPES)


__all__ = [
    "SCOPES",
    "DEFAULT_SHEET_ID",
    "INLINE_CREDENTIAL_FIELDS",
    "inline_credentials",
    "credentials_file",
    "SheetsClient",
]
