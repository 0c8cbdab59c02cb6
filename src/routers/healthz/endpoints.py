from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter()

@router.get("/healthz", include_in_schema=False)
def health_check(request: Request):
    # liveness only; never calls the spreadsheet
    store = getattr(request.app.state, "store", None)
    client_state = "built" if store is not None and store.client.built else "lazy"
    return JSONResponse({"status": "healthy", "sheets_client": client_state})
