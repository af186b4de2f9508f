"""Helpers for reading API Gateway proxy events."""

import base64
from collections.abc import Mapping
from typing import Any


def get_header(event: Mapping[str, Any], name: str) -> str | None:
    """Return a request header value, matching the name case-insensitively."""
    headers = event.get("headers") or {}
    wanted = name.lower()

    for key, value in headers.items():
        if key.lower() == wanted:
            return value

    return None


def get_body_bytes(event: Mapping[str, Any]) -> bytes:
    """Return the raw request body, undoing API Gateway's base64 wrapping."""
    body = event.get("body")
    if body is None:
        return b""

    if event.get("isBase64Encoded"):
        return base64.b64decode(body)

    if isinstance(body, bytes):
        return body

    return str(body).encode("utf-8")


def public_base_url(event: Mapping[str, Any]) -> str:
    """Reconstruct the public base URL the request was addressed to.

    Uses the forwarded protocol and ``Host`` header, falling back to the
    API Gateway request context domain. When the gateway path carries a
    prefix in front of the resource path (the stage on a default
    ``execute-api`` endpoint, or a custom domain base path), the prefix is
    kept so that appended resource paths stay reachable.
    """
    scheme = get_header(event, "X-Forwarded-Proto") or "https"
    scheme = scheme.split(",", 1)[0].strip()

    request_context = event.get("requestContext") or {}
    host = get_header(event, "Host") or request_context.get("domainName") or "localhost"

    return f"{scheme}://{host}{_base_path(event, request_context)}"


def _base_path(event: Mapping[str, Any], request_context: Mapping[str, Any]) -> str:
    """Return ``requestContext.path`` minus the trailing resource ``path``."""
    gateway_path = request_context.get("path") or ""
    resource_path = event.get("path") or ""

    if not resource_path or not gateway_path.endswith(resource_path):
        return ""

    return gateway_path[: -len(resource_path)].rstrip("/")
