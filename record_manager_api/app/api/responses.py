"""
Helpers turning service outcomes into enveloped HTTP responses.

* a normal result becomes ``success_response`` with 200 (201 for
  creations);
* ``None``/``False`` from a service becomes a 404 failure envelope;
* :class:`ConflictError` becomes a 400 failure envelope carrying the
  conflict message;
* anything else becomes a 500 failure envelope with a fixed message.
  The exception text is only added (as ``data.error``) when the
  application runs in development mode.
"""

import logging
from typing import Any, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from record_manager_api.app.core.config import is_development
from record_manager_api.app.core.errors import ConflictError
from record_manager_api.app.utils.response import error_response, success_response

logger = logging.getLogger(__name__)


def ok(data: Optional[Any] = None, message: str = "Success", status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(success_response(data, message)))


def created(data: Any, message: str = "Success") -> JSONResponse:
    return ok(data, message, status.HTTP_201_CREATED)


def not_found(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=error_response(message))


def conflict(exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_response(exc.message))


def server_error(message: str, exc: Exception) -> JSONResponse:
    logger.exception("%s: %s", message, exc)
    data = {"error": str(exc)} if is_development() else None
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response(message, data),
    )
