import base64
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

TEST_API_KEY = "test-api-key"
TEST_BOUNDARY = "----TestBoundary7MA4YWxkTrZu0gW"


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def api_key(monkeypatch) -> str:
    monkeypatch.setenv("API_KEY", TEST_API_KEY)
    return TEST_API_KEY


@pytest.fixture
def auth_headers(api_key) -> dict[str, str]:
    return {"Authorization": f"Bearer {api_key}"}


def build_multipart_body(
    parts: list[tuple[str, str | None, str | None, bytes]],
    boundary: str = TEST_BOUNDARY,
) -> bytes:
    """Encode ``(name, filename, content_type, data)`` tuples as a form body."""
    chunks: list[bytes] = []

    for name, filename, content_type, data in parts:
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'

        chunks.append(f"--{boundary}\r\n".encode())
        chunks.append(f"Content-Disposition: {disposition}\r\n".encode())
        if content_type is not None:
            chunks.append(f"Content-Type: {content_type}\r\n".encode())
        chunks.append(b"\r\n")
        chunks.append(data)
        chunks.append(b"\r\n")

    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


@pytest.fixture
def multipart_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway upload event.

    Usage:
        event = multipart_event([("image", "a.png", "image/png", b"...")])
    """

    def _build(
        parts: list[tuple[str, str | None, str | None, bytes]],
        *,
        path: str = "/upload",
        content_type: str | None = None,
    ) -> dict[str, Any]:
        body = build_multipart_body(parts)
        return {
            "httpMethod": "POST",
            "path": path,
            "headers": {
                "Content-Type": content_type or f"multipart/form-data; boundary={TEST_BOUNDARY}",
                "Host": "img.example.com",
            },
            "body": base64.b64encode(body).decode("ascii"),
            "isBase64Encoded": True,
        }

    return _build
