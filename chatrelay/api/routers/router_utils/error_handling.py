"""
Relay error handling for HTTP routes.

Maps the relay exception hierarchy to status codes and the uniform
``{success: false, error, details}`` response body.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import status
from fastapi.responses import JSONResponse

from chatrelay.core.exceptions import (
    AllProvidersFailedError,
    ChatRelayException,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
    ProviderError,
    ValidationError,
)
from chatrelay.models.common import ErrorResponse

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_STATUS_BY_ERROR: list[tuple[type[ChatRelayException], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (PersistenceError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (AllProvidersFailedError, status.HTTP_502_BAD_GATEWAY),
    (ProviderError, status.HTTP_502_BAD_GATEWAY),
]


def status_for(error: ChatRelayException) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str, details: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, details=details or None)
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def handle_relay_errors(func: F) -> F:
    """
    Decorator turning relay exceptions into JSON error responses.

    Client errors are logged at warning level, store and provider failures
    at error level, anything unexpected with a traceback as a 500.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except ChatRelayException as e:
            status_code = status_for(e)
            log = logger.error if status_code >= 500 else logger.warning
            log(
                "Request failed",
                extra={"error_code": e.code, "error_msg": e.message, "status_code": status_code},
            )
            return error_response(status_code, e.message, {"code": e.code, **e.details})

        except Exception as e:
            logger.exception("Unexpected failure handling request", extra={"error_type": type(e).__name__})
            return error_response(
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                "Internal server error",
                {"code": "INTERNAL_ERROR"},
            )

    return wrapper  # type: ignore
