"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from drone_dispatch.api.endpoints import router as dispatch_router
from drone_dispatch.core.logging_config import LOG_LEVEL_ENV_VAR, configure
from drone_dispatch.core.errors import (
    AssignmentConflict,
    DispatchError,
    InvalidInput,
    NoStationAvailable,
    NoSuitableVehicle,
    RestrictedRoute,
)

logger = logging.getLogger(__name__)

STATUS_CODES = {
    InvalidInput: 422,
    RestrictedRoute: 403,
    NoSuitableVehicle: 404,
    NoStationAvailable: 404,
    AssignmentConflict: 409,
}

configure(os.environ.get(LOG_LEVEL_ENV_VAR, "INFO"))

app = FastAPI(title="Drone Dispatch")

# Enable CORS for all origins (adjust in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dispatch_router)


@app.exception_handler(DispatchError)
def dispatch_error_handler(request: Request, exc: DispatchError) -> JSONResponse:
    status = next((code for cls, code in STATUS_CODES.items() if isinstance(exc, cls)), 400)
    body: dict = {"error": type(exc).__name__, "message": str(exc)}
    if isinstance(exc, RestrictedRoute):
        body["restrictions"] = exc.restrictions
    logger.info("%s %s -> %d %s", request.method, request.url.path, status, body["error"])
    return JSONResponse(status_code=status, content=body)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
