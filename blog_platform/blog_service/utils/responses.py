"""
JSON envelopes shared by every route.

Success: ``{"success": true, "message": ..., <payload>}``
Failure: ``{"success": false, "message": "<ErrorKind> : <detail>"}``
"""
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel
import logging

from ..errors import BlogError

logger = logging.getLogger(__name__)


def _dump(value):
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def success_response(message: str, status_code: int = status.HTTP_200_OK, **payload) -> JSONResponse:
    content = {"success": True}
    content.update({key: _dump(value) for key, value in payload.items()})
    content["message"] = message
    return JSONResponse(status_code=status_code, content=jsonable_encoder(content))


def failure_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def error_message(error: Exception) -> str:
    """Render an exception as ``<ErrorKind> : <detail>``."""
    if isinstance(error, BlogError):
        return f"{error.name} : {error.message}"
    return f"{type(error).__name__} : {error}"


def error_response(
    error: Exception,
    context: str,
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
) -> JSONResponse:
    """
    Log a failed operation with its stack trace and build the client envelope.

    Args:
        error: The exception raised by the data-access layer
        context: What was being attempted, e.g. "create user"
        status_code: HTTP status for the envelope (500 unless the caller
            knows better)
    """
    logger.error("Failed to %s : %s", context, error, exc_info=error)
    return failure_response(error_message(error), status_code)
