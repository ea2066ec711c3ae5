"""
Mapping of error kinds to HTTP responses.

``ERROR_STATUS`` is the single place where service error kinds meet
HTTP status codes.  Every error response has the body
``{"message": "..."}``.  Exceptions that are not ``ClassroomError``
are not handled here and surface as 500 responses.
"""

import logging
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from classroom_api.app.core.errors import (
    ClassroomError,
    ConflictError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: Dict[Type[ClassroomError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
}


def status_for(exc: ClassroomError) -> int:
    """Return the status code for ``exc``, honouring subclasses."""
    for kind in type(exc).__mro__:
        if kind in ERROR_STATUS:
            return ERROR_STATUS[kind]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def classroom_error_handler(request: Request, exc: ClassroomError) -> JSONResponse:
    status_code = status_for(exc)
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, status_code, exc.message)
    return JSONResponse(status_code=status_code, content={"message": exc.message})


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Raised by FastAPI when the body is not valid JSON or a parameter
    # has the wrong type.
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    logger.warning("%s %s -> 400: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": message})


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ClassroomError, classroom_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
