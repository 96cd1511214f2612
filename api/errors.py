"""
Manejadores de excepciones de la API.

Traducen los errores de dominio al sobre JSON que consume el dashboard:
`{"success": false, "reason": ..., "message": ...}`.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from core.errors import RfidServiceError, ValidationFailed

logger = logging.getLogger("api.errors")

# campo del body -> reason
FIELD_REASONS = {
    "tag_id": "missing_tag_id",
    "rfid_data": "missing_tag_id",
    "status": "missing_status",
    "message": "missing_message",
}

# body ausente o no decodificable como objeto, por ruta
BODY_REASONS = {
    "/registrations": "missing_tag_id",
    "/registrations/status": "missing_tag_id",
    "/logs/test-publish": "missing_message",
}


def validation_reason(path: str, errors) -> str:
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if not loc or loc[0] != "body":
            continue
        if len(loc) == 1:
            return BODY_REASONS.get(path, ValidationFailed.reason)
        if loc[1] in FIELD_REASONS:
            return FIELD_REASONS[loc[1]]
    return ValidationFailed.reason


async def rfid_error_handler(request: Request, exc: RfidServiceError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.reason}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "reason": exc.reason, "message": exc.message},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Los 422 de FastAPI se devuelven como 400 con el mismo sobre."""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    reason = validation_reason(request.url.path, errors)
    return await rfid_error_handler(request, ValidationFailed(message, reason=reason))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RfidServiceError, rfid_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
