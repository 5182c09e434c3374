# rasoi/main.py

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from rasoi import config
from rasoi.api.auth import router as auth_router
from rasoi.api.dashboard import router as dashboard_router
from rasoi.api.inventory import router as inventory_router
from rasoi.api.invoices import router as invoices_router
from rasoi.api.orders import router as orders_router
from rasoi.api.users import router as users_router
from rasoi.errors import RasoiError

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Rasoi Vasan Rental API",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _field_name(loc) -> str:
    # ("body", "items", 0, "quantity") -> "items.0.quantity"
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": errors},
    )


@app.exception_handler(RasoiError)
def handle_rasoi_error(request: Request, exc: RasoiError):
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.message)
    content = {"detail": exc.message}
    if exc.field:
        content["errors"] = [{"field": exc.field, "message": exc.message}]
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(IntegrityError)
def handle_integrity_error(request: Request, exc: IntegrityError):
    # e.g. two orders numbered from the same count; the client can retry
    logger.warning("Conflict on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=409,
        content={"detail": "Conflicting update, please retry"},
    )


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if config.DEBUG:
        content["trace"] = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return JSONResponse(status_code=500, content=content)


@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(auth_router)
app.include_router(users_router)
app.include_router(inventory_router)
app.include_router(orders_router)
app.include_router(invoices_router)
app.include_router(dashboard_router)
