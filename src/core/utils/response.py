"""
API Gateway proxy responses for the image hosting endpoints.

JSON bodies, plain-text webhook acknowledgements and raw image payloads all
carry the same CORS and ``nosniff`` headers.
"""

from __future__ import annotations

import base64
import json
from http import HTTPStatus
from typing import Any

from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
)
from core.utils.time import utc_now_iso

JsonDict = dict[str, Any]

TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


class ResponseBuilder:
    """Factory for API Gateway-compatible HTTP responses."""

    COMMON_HEADERS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
        "X-Content-Type-Options": "nosniff",
    }

    @staticmethod
    def headers(
        content_type: str = DEFAULT_CONTENT_TYPE,
        extra: dict[str, str] | None = None,
    ) -> dict[str, str]:
        return {"Content-Type": content_type, **ResponseBuilder.COMMON_HEADERS, **(extra or {})}

    @staticmethod
    def json_response(
        status: HTTPStatus,
        body: JsonDict,
        *,
        request_id: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> JsonDict:
        payload = dict(body)
        if request_id:
            payload["request_id"] = request_id

        return {
            "statusCode": status.value,
            "headers": ResponseBuilder.headers(extra=headers),
            "body": json.dumps(payload),
        }

    @staticmethod
    def ok(body: JsonDict, *, request_id: str | None = None) -> JsonDict:
        return ResponseBuilder.json_response(HTTPStatus.OK, body, request_id=request_id)

    @staticmethod
    def no_content() -> JsonDict:
        return {
            "statusCode": HTTPStatus.NO_CONTENT.value,
            "headers": ResponseBuilder.headers(),
            "body": "",
        }

    @staticmethod
    def text(body: str, *, status: HTTPStatus = HTTPStatus.OK) -> JsonDict:
        """Plain-text response, used for webhook acknowledgements."""
        return {
            "statusCode": status.value,
            "headers": ResponseBuilder.headers(TEXT_CONTENT_TYPE),
            "body": body,
        }

    @staticmethod
    def error(
        status: HTTPStatus,
        message: str,
        *,
        error_code: str | None = None,
        details: JsonDict | None = None,
        request_id: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> JsonDict:
        """
        Error body ``{error, error_code, timestamp, details?, request_id?}``.

        ``error_code`` defaults to the status name, e.g. ``NOT_FOUND``.
        """
        payload: JsonDict = {
            "error": message,
            "error_code": error_code or status.name,
            "timestamp": utc_now_iso(),
        }
        if details:
            payload["details"] = details

        return ResponseBuilder.json_response(status, payload, request_id=request_id, headers=headers)

    @staticmethod
    def unauthorized(message: str = "Unauthorized", *, request_id: str | None = None) -> JsonDict:
        return ResponseBuilder.error(
            HTTPStatus.UNAUTHORIZED,
            message,
            request_id=request_id,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @staticmethod
    def image(content: bytes, *, content_type: str, cache_control: str) -> JsonDict:
        """Binary image payload, base64-encoded for API Gateway."""
        return {
            "statusCode": HTTPStatus.OK.value,
            "headers": ResponseBuilder.headers(
                content_type,
                {"Content-Length": str(len(content)), "Cache-Control": cache_control},
            ),
            "body": base64.b64encode(content).decode("ascii"),
            "isBase64Encoded": True,
        }
