from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from helpdesk.api.auth import router as auth_router
from helpdesk.api.profiles import router as profiles_router
from helpdesk.api.tickets import router as tickets_router
from helpdesk.core.config import settings
from helpdesk.core.database import close_db, init_db
from helpdesk.core.errors import HelpdeskError
from helpdesk.core.logging import bind_request_context, setup_logging
from helpdesk.views import router as views_router

logger = structlog.get_logger(__name__)

app = FastAPI(title="Helpdesk")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = bind_request_context(
        request.method, request.url.path, request.headers.get("x-request-id")
    )
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    logger.info(
        "request_completed",
        status=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 1),
    )
    return response


@app.exception_handler(HelpdeskError)
async def helpdesk_error_handler(request: Request, exc: HelpdeskError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            error_type=type(exc).__name__,
            error=exc.message,
            cause=str(exc.__cause__) if exc.__cause__ else None,
        )
    else:
        logger.info("request_rejected", status=exc.status_code, error=exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("request_invalid", errors=[error.get("msg") for error in exc.errors()])
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.on_event("startup")
async def on_startup() -> None:
    setup_logging()
    if settings.APP_ENV.lower() != "development" and settings.JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in non-development environments")
    await init_db()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await close_db()


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


app.include_router(tickets_router)
app.include_router(auth_router)
app.include_router(profiles_router)
app.include_router(views_router)
app.mount(
    "/storage",
    StaticFiles(directory=settings.STORAGE_DIR, check_dir=False),
    name="storage",
)
