import logging
import time
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError

from app.api.v1.histories import router as histories_router
from app.api.v1.reservations import router as reservations_router
from app.core.config import settings
from app.core.errors import ClinicError
from app.core.exceptions import clinic_error_handler, http_exception_handler, validation_exception_handler
from app.core.logging import setup_logging
from app.core.metrics import REQUEST_COUNT, REQUEST_LATENCY, render_metrics
from app.core.request_context import request_id_ctx_var

setup_logging(settings.log_level)
logger = logging.getLogger("app.request")

app = FastAPI(title="Clinic Queue API", version="0.1.0")
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ClinicError, clinic_error_handler)

app.include_router(reservations_router)
app.include_router(histories_router)


def _observe(method: str, path: str, status_code: int, started: float) -> float:
    elapsed = time.perf_counter() - started
    REQUEST_COUNT.labels(method=method, path=path, status_code=status_code).inc()
    REQUEST_LATENCY.labels(method=method, path=path).observe(elapsed)
    return elapsed * 1000


@app.middleware("http")
async def observability_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid4())
    token = request_id_ctx_var.set(request_id)
    started = time.perf_counter()
    method, path = request.method, request.url.path
    try:
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = _observe(method, path, 500, started)
            logger.exception("request_failed method=%s path=%s status=500 duration_ms=%.2f", method, path, duration_ms)
            raise

        duration_ms = _observe(method, path, response.status_code, started)
        response.headers["X-Request-ID"] = request_id
        logger.info(
            "request_completed method=%s path=%s status=%s duration_ms=%.2f",
            method,
            path,
            response.status_code,
            duration_ms,
        )
        return response
    finally:
        request_id_ctx_var.reset(token)


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/metrics", tags=["observability"])
def metrics() -> Response:
    payload, content_type = render_metrics()
    return Response(content=payload, media_type=content_type)
