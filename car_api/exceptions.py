import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from car_api.services.exceptions import CarNotFoundError, StoreError, StoreErrorKind, ValidationError

logger = logging.getLogger(__name__)


async def validation_exception_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "error": "validation_error",
            "reason": exc.reason.value,
            "message": exc.message,
            "field": exc.field,
            "index": exc.index,
        },
    )


async def not_found_exception_handler(request: Request, exc: CarNotFoundError):
    return JSONResponse(
        status_code=404,
        content={"error": "not_found", "message": str(exc)},
    )


async def store_exception_handler(request: Request, exc: StoreError):
    logger.warning(f"Store failure on {request.method} {request.url.path}: {exc.message}")
    message = "Error writing to database" if exc.kind == StoreErrorKind.WRITE_FAILURE else "Error reading from database"
    return JSONResponse(
        status_code=500,
        content={"error": exc.kind.value, "message": message},
    )


async def request_body_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Unparsable request on {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={"error": "bad_request", "message": "Error parsing request body"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ValidationError, validation_exception_handler)
    app.add_exception_handler(CarNotFoundError, not_found_exception_handler)
    app.add_exception_handler(StoreError, store_exception_handler)
    app.add_exception_handler(RequestValidationError, request_body_exception_handler)
