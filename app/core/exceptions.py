import logging

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.errors import ClinicError, InvalidStatusTransitionError, NotFoundError
from app.core.request_context import request_id_ctx_var

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation_error": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _error_payload(code: str, message: str, detail):
    return {
        "error": {
            "code": code,
            "message": message,
            "detail": detail,
        },
        "detail": detail,
        "request_id": request_id_ctx_var.get(),
    }


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_payload(
            code=f"http_{exc.status_code}",
            message=str(exc.detail),
            detail=exc.detail,
        ),
        headers=exc.headers,
    )


async def validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_payload(
            code="validation_error",
            message="Request validation failed",
            detail=exc.errors(),
        ),
    )


async def clinic_error_handler(_: Request, exc: ClinicError) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)
    if status_code >= 500:
        logger.error("clinic_error kind=%s message=%s", exc.kind, exc.message, exc_info=exc)
        message = "Internal server error"
    else:
        message = exc.message

    detail: object = message
    if isinstance(exc, NotFoundError):
        detail = {"entity": exc.entity, "message": message}
    elif isinstance(exc, InvalidStatusTransitionError):
        detail = {"current_status": exc.current, "target_status": exc.target, "message": message}

    return JSONResponse(
        status_code=status_code,
        content=_error_payload(code=exc.kind, message=message, detail=detail),
    )
