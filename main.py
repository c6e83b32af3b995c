from __future__ import annotations

import logging
import os
import socket
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request
from fastapi import Query, Path
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from models.health import Health
from routers import (
    users,
    profiles,
    addresses,
)
from config.settings import settings
from config.logging_config import setup_logging
from services.database import init_db, close_db
from services.errors import ErrorKind, ServiceError

logger = logging.getLogger(__name__)

port = int(os.environ.get("FASTAPIPORT", 8000))


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info("Starting user service (%s)", settings.ENVIRONMENT)
    if settings.INIT_DB:
        await init_db()
    yield
    await close_db()
    logger.info("User service stopped")


app = FastAPI(
    title="User Microservice",
    description="FastAPI microservice managing users, their profiles and addresses.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------------------------------------------------------------
# Error handling
# -----------------------------------------------------------------------------
ERROR_STATUS = {
    ErrorKind.INVALID_INPUT: HTTPStatus.BAD_REQUEST,
    ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorKind.CONFLICT: HTTPStatus.CONFLICT,
    ErrorKind.LINK_CONSTRUCTION: HTTPStatus.INTERNAL_SERVER_ERROR,
    ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
}


def error_response(status: HTTPStatus, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.value,
        content={"error": status.phrase, "message": message, "status": status.value},
    )


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    status = ERROR_STATUS.get(exc.kind, HTTPStatus.INTERNAL_SERVER_ERROR)
    if status >= HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(status, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        # loc starts with the source ("body", "query", "path")
        field = ".".join(str(part) for part in first.get("loc", ())[1:])
        message = f"Invalid value for {field}: {first.get('msg')}" if field else first.get("msg")
    else:
        message = "Invalid request"
    return error_response(HTTPStatus.BAD_REQUEST, message)

# -----------------------------------------------------------------------------
# Health endpoints
# -----------------------------------------------------------------------------

def _ip_address() -> str:
    try:
        return socket.gethostbyname(socket.gethostname())
    except OSError:
        # unresolvable hostname
        return "127.0.0.1"

def make_health(echo: Optional[str], path_echo: Optional[str]=None) -> Health:
    return Health(
        status=200,
        status_message="OK",
        timestamp=datetime.now(timezone.utc).isoformat(),
        ip_address=_ip_address(),
        echo=echo,
        path_echo=path_echo
    )

@app.get("/health", response_model=Health, response_model_exclude_none=True)
def get_health_no_path(echo: str | None = Query(None, description="Optional echo string")):
    return make_health(echo=echo, path_echo=None)

@app.get("/health/{path_echo}", response_model=Health, response_model_exclude_none=True)
def get_health_with_path(
    path_echo: str = Path(..., description="Required echo in the URL path"),
    echo: str | None = Query(None, description="Optional echo string"),
):
    return make_health(echo=echo, path_echo=path_echo)

# -----------------------------------------------------------------------------
# Routers to public RESTful resources
# -----------------------------------------------------------------------------

app.include_router(router=users.router)
app.include_router(router=profiles.router)
app.include_router(router=addresses.router)


# -----------------------------------------------------------------------------
# Root
# -----------------------------------------------------------------------------
@app.get("/")
def root():
    return {"message": "Welcome to the User API. See /docs for OpenAPI UI."}

# -----------------------------------------------------------------------------
# Entrypoint for `python main.py`
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=True)
