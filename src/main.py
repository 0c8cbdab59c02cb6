# ── src/main.py ───────────────────────────────────────────────────────────────
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from errors import AppError
from sheetstore import SheetStore

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
_logger = logging.getLogger(__name__)


# ── startup: make sure both tables have a header row.
# Failures are logged only; requests then fail one by one with a StoreError
# instead of the process refusing to boot.
@asynccontextmanager
async def lifespan(app: FastAPI):
    store: SheetStore = app.state.store
    results = await store.initialize_all()
    if all(results.values()):
        _logger.info("Sheets initialized/verified: %s", ", ".join(results))
    else:
        failed = [name for name, ok in results.items() if not ok]
        _logger.warning("Sheets not initialized: %s", ", ".join(failed))
    yield


app = FastAPI(title="Sheets Overtime Tracker API", lifespan=lifespan)

# the store is lazy: building it here reads config but opens no connection
app.state.store = SheetStore.from_env()


# ── CORS
# Accept a comma/space-separated FRONTEND_ORIGIN list.
# If none provided, fall back to "*" with allow_credentials=False.
def _parse_origins(env_value: str) -> list[str]:
    if not env_value:
        return []
    raw = [p.strip() for chunk in env_value.split(",") for p in chunk.split()]
    origins = []
    for o in raw:
        o = o.rstrip("/")
        if o and o not in origins:
            origins.append(o)
    return origins

_frontend_origins = _parse_origins(os.getenv("FRONTEND_ORIGIN", ""))

app.add_middleware(
    CORSMiddleware,
    allow_origins=_frontend_origins or ["*"],
    allow_credentials=bool(_frontend_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── error mapping: the only place errors become responses ---------------------
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        _logger.error("%s %s failed: %s", request.method, request.url.path, exc,
                      exc_info=exc.__cause__ or exc)
        return JSONResponse(status_code=exc.status_code, content={"message": exc.default_message})
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        return JSONResponse(status_code=400, content={"message": "Malformed JSON body"})
    fields = []
    for e in errors:
        # loc is ("body", <field>, ...) for payload errors
        loc = [str(p) for p in e.get("loc", ()) if p != "body"]
        name = ".".join(loc) or "body"
        if name not in fields:
            fields.append(name)
    return JSONResponse(status_code=400, content={"message": f"Invalid fields: {', '.join(fields)}"})


# ── routes -------------------------------------------------------------------
from routers.healthz.endpoints  import router as health_router   # noqa: E402
from routers.auth.endpoints     import router as auth_router     # noqa: E402
from routers.worklogs.endpoints import router as worklogs_router # noqa: E402

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(worklogs_router)


@app.get("/", include_in_schema=False)
def root():
    return {
        "message": "Google Sheets Overwork Tracker API",
        "status": "ok",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
