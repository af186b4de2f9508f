"""
Common decorators for the API Gateway Lambda handlers.

``api_gateway_handler`` turns every exception escaping a handler into a JSON
error response, so handlers only describe the success path.
``require_api_key`` guards the management endpoints with a bearer key.
"""

from __future__ import annotations

import hmac
import os
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger
from pydantic import ValidationError as RequestModelError

from core.models.errors import (
    AuthError,
    ImageServiceError,
    NotFoundError,
    ValidationError,
)
from core.utils.constants import ENV_API_KEY, ERROR_CODE_VALIDATION_FAILED, get_max_file_size_mb
from core.utils.events import get_header
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors

logger = Logger(service="api-gateway-handler", UTC=True)

JsonDict = dict[str, Any]
Handler = Callable[..., JsonDict]

# Checked in order; subclasses must precede their bases.
_SERVICE_ERROR_STATUS: tuple[tuple[type[ImageServiceError], HTTPStatus], ...] = (
    (ValidationError, HTTPStatus.BAD_REQUEST),
    (AuthError, HTTPStatus.UNAUTHORIZED),
    (NotFoundError, HTTPStatus.NOT_FOUND),
)

# Exceptions raised outside the service error taxonomy.
_FALLBACK_RESPONSES: tuple[tuple[tuple[type[BaseException], ...], HTTPStatus, str], ...] = (
    (
        (ValueError, KeyError, TypeError, AttributeError),
        HTTPStatus.BAD_REQUEST,
        "The request could not be understood. Check its body and parameters.",
    ),
    ((PermissionError,), HTTPStatus.FORBIDDEN, "You don't have permission to perform this action."),
    ((FileNotFoundError, LookupError), HTTPStatus.NOT_FOUND, "The requested image was not found."),
    (
        (MemoryError,),
        HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
        "The image is too large to process. Maximum size is {max_mb}MB.",
    ),
    ((TimeoutError,), HTTPStatus.GATEWAY_TIMEOUT, "The request took too long to process. Please try again."),
    ((ConnectionError, OSError), HTTPStatus.SERVICE_UNAVAILABLE, "The image store is unavailable. Please try again later."),
)


def _service_error_response(
    exc: ImageServiceError,
    *,
    failure_message: str | None,
    request_id: str | None,
) -> JsonDict:
    status = next(
        (status for error_type, status in _SERVICE_ERROR_STATUS if isinstance(exc, error_type)),
        HTTPStatus.INTERNAL_SERVER_ERROR,
    )

    if status is HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.exception(
            "Service error in handler",
            extra={"error_code": exc.error_code, "request_id": request_id},
        )
        message = f"{failure_message}: {exc.message}" if failure_message else exc.message
        return ResponseBuilder.error(
            status,
            message,
            error_code=exc.error_code,
            request_id=request_id,
        )

    logger.warning(
        "Request rejected",
        extra={"error_code": exc.error_code, "details": exc.details, "request_id": request_id},
    )
    if status is HTTPStatus.UNAUTHORIZED:
        return ResponseBuilder.unauthorized(exc.message, request_id=request_id)

    return ResponseBuilder.error(
        status,
        exc.message,
        error_code=exc.error_code,
        details=exc.details,
        request_id=request_id,
    )


def _fallback_response(exc: Exception, *, request_id: str | None) -> JsonDict:
    for error_types, status, message in _FALLBACK_RESPONSES:
        if isinstance(exc, error_types):
            break
    else:
        status = HTTPStatus.INTERNAL_SERVER_ERROR
        message = "We're experiencing technical difficulties. Please try again in a few moments."

    log_extra = {
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }
    if status < HTTPStatus.INTERNAL_SERVER_ERROR:
        logger.warning("Unhandled client error in handler", extra=log_extra)
    else:
        logger.exception("Unhandled error in handler", extra=log_extra)

    return ResponseBuilder.error(
        status,
        message.format(max_mb=get_max_file_size_mb()),
        request_id=request_id,
    )


def api_gateway_handler(
    func: Handler | None = None,
    *,
    failure_message: str | None = None,
) -> Handler | Callable[[Handler], Handler]:
    """
    Decorator for API Gateway Lambda handlers.

    Answers CORS preflight (OPTIONS) requests and converts exceptions:

    - request model validation errors: 400 ``Invalid request params``
    - ``ValidationError``: 400 with its error code and details
    - ``AuthError``: 401 with ``WWW-Authenticate: Bearer``
    - ``NotFoundError``: 404
    - other ``ImageServiceError``: 500, the message prefixed with
      ``failure_message`` when one is given
    - anything else: a generic 4xx/5xx by exception type

    Example:
        @api_gateway_handler(failure_message="Upload failed")
        def handler(event, context):
            ...
    """

    def decorate(handler: Handler) -> Handler:
        @wraps(handler)
        def wrapper(event: Any, context: Any) -> JsonDict:
            if event.get("httpMethod") == "OPTIONS":
                return ResponseBuilder.no_content()

            request_id = getattr(context, "aws_request_id", None)

            try:
                return handler(event, context)

            except RequestModelError as exc:
                errors = sanitize_validation_errors(exc.errors())
                logger.warning(
                    "Request validation failed",
                    extra={"errors": errors, "request_id": request_id},
                )
                return ResponseBuilder.error(
                    HTTPStatus.BAD_REQUEST,
                    "Invalid request params",
                    error_code=ERROR_CODE_VALIDATION_FAILED,
                    details={"errors": errors},
                    request_id=request_id,
                )

            except ImageServiceError as exc:
                return _service_error_response(
                    exc,
                    failure_message=failure_message,
                    request_id=request_id,
                )

            except Exception as exc:
                return _fallback_response(exc, request_id=request_id)

        return wrapper

    if func is not None:
        return decorate(func)
    return decorate


def _check_api_key(event: Any) -> None:
    """Raise AuthError unless the request carries the configured bearer key."""
    expected = os.getenv(ENV_API_KEY)
    provided = get_header(event, "Authorization") or ""

    if not expected or not hmac.compare_digest(
        provided.encode("utf-8"),
        f"Bearer {expected}".encode("utf-8"),
    ):
        raise AuthError(
            message="Unauthorized: Invalid API Key",
            details={"api_key_configured": bool(expected), "path": event.get("path")},
        )


def require_api_key(func: Handler) -> Handler:
    """
    Decorator guarding a handler with a static bearer API key.

    The request must carry ``Authorization: Bearer <API_KEY>``. When the
    ``API_KEY`` environment variable is not configured every request is
    rejected. The raised ``AuthError`` becomes a 401 in
    ``api_gateway_handler``, which must wrap this decorator so preflight
    requests are answered before the check.
    """

    @wraps(func)
    def wrapper(event: Any, context: Any) -> JsonDict:
        _check_api_key(event)
        return func(event, context)

    return wrapper
