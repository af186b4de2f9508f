"""
Pytest configuration and fixtures for image hosting tests.
Provides AWS mocking, S3 fixtures with proper cleanup, and an in-process store.
"""

import base64
import json
import logging
import os
import threading
import time
from collections.abc import Callable
from typing import Any

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGES_BUCKET_NAME", "test-images-bucket")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "image-hosting")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "ImageHosting")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.pop("AWS_ENDPOINT_URL", None)

import boto3  # noqa: E402
import pytest  # noqa: E402
from botocore.exceptions import ClientError  # noqa: E402
from moto import mock_aws  # noqa: E402

from core.models.errors import StorageFailureError  # noqa: E402
from core.repositories.kv_store import KeyValueStore  # noqa: E402


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


def _cleanup_s3_objects(s3_client, bucket_name):
    """Helper to delete all objects from S3 bucket efficiently."""
    try:
        paginator = s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=bucket_name):
            objects = page.get("Contents", [])
            if objects:
                delete_keys = [{"Key": obj["Key"]} for obj in objects]
                s3_client.delete_objects(
                    Bucket=bucket_name, Delete={"Objects": delete_keys}
                )
    except ClientError as e:
        if e.response["Error"]["Code"] != "NoSuchBucket":
            raise


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """
    Create and manage S3 bucket for testing.

    Cleanup Strategy:
    - Objects are deleted after each test (teardown)
    - Bucket is NOT deleted (moto cleans up on context exit)
    """
    bucket_name = os.getenv("IMAGES_BUCKET_NAME")

    try:
        s3_client.head_bucket(Bucket=bucket_name)
    except ClientError:
        s3_client.create_bucket(Bucket=bucket_name)

    yield s3_client

    _cleanup_s3_objects(s3_client, bucket_name)


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[[str, str | bytes], None]:
    """
    Helper to store a raw value in the images bucket.

    Usage:
        s3_put_object("abcd1234.png", '{"data": ...}')
    """

    def _put(key: str, body: str | bytes) -> None:
        if isinstance(body, str):
            body = body.encode("utf-8")
        s3_bucket.put_object(
            Bucket=os.getenv("IMAGES_BUCKET_NAME"),
            Key=key,
            Body=body,
        )

    return _put


@pytest.fixture
def s3_get_object(s3_bucket) -> Callable[[str], bytes]:
    """
    Helper to read a raw value from the images bucket.

    Usage:
        content = s3_get_object("abcd1234.png")
    """

    def _get(key: str) -> bytes:
        response: dict[str, Any] = s3_bucket.get_object(
            Bucket=os.getenv("IMAGES_BUCKET_NAME"),
            Key=key,
        )
        data: bytes = response["Body"].read()
        return data

    return _get


@pytest.fixture
def s3_list_keys(s3_bucket) -> Callable[[], list[str]]:
    def _list() -> list[str]:
        response = s3_bucket.list_objects_v2(Bucket=os.getenv("IMAGES_BUCKET_NAME"))
        return [obj["Key"] for obj in response.get("Contents", [])]

    return _list


class RecordingStore(KeyValueStore):
    """In-process store recording read concurrency.

    For every ``get`` it remembers how many reads had already completed
    when the read started, which exposes batch boundaries.
    """

    def __init__(self, values: dict[str, str] | None = None, *, read_delay: float = 0.0) -> None:
        self.values: dict[str, str] = dict(values or {})
        self.read_delay = read_delay
        self.fail_on_get: set[str] = set()
        self.fail_on_put = False
        self.fail_on_list = False
        self.keys_override: list[Any] | None = None

        self._lock = threading.Lock()
        self._in_flight = 0
        self._completed = 0
        self.peak_in_flight = 0
        self.completed_at_start: dict[str, int] = {}

    def get(self, key: str) -> str | None:
        with self._lock:
            self.completed_at_start[key] = self._completed
            self._in_flight += 1
            self.peak_in_flight = max(self.peak_in_flight, self._in_flight)

        try:
            if self.read_delay:
                time.sleep(self.read_delay)
            if key in self.fail_on_get:
                raise StorageFailureError(message=f"read failed for {key}")
            return self.values.get(key)
        finally:
            with self._lock:
                self._in_flight -= 1
                self._completed += 1

    def put(self, key: str, value: str) -> None:
        if self.fail_on_put:
            raise StorageFailureError(message="quota exceeded")
        self.values[key] = value

    def list_keys(self) -> list[Any]:
        if self.fail_on_list:
            raise StorageFailureError(message="enumeration unavailable")
        if self.keys_override is not None:
            return list(self.keys_override)
        return list(self.values)

    def delete(self, key: str) -> None:
        self.values.pop(key, None)


@pytest.fixture
def debug_logging(caplog):
    """Enable DEBUG on the service loggers so every log call builds a record."""
    caplog.set_level(logging.DEBUG, logger=os.environ["POWERTOOLS_SERVICE_NAME"])
    caplog.set_level(logging.DEBUG, logger="api-gateway-handler")
    return caplog


@pytest.fixture
def memory_store() -> RecordingStore:
    return RecordingStore()


def make_stored_value(
    payload: bytes = b"\x89PNG\r\n\x1a\nimage",
    *,
    name: str = "a.png",
    mime_type: str = "image/png",
    upload_time: str | None = "2024-01-01T10:00:00+00:00",
    source: str | None = None,
) -> str:
    """Build a persisted value in the stored JSON format."""
    metadata: dict[str, Any] = {
        "name": name,
        "type": mime_type,
        "size": len(payload),
    }
    if upload_time is not None:
        metadata["uploadTime"] = upload_time
    if source is not None:
        metadata["source"] = source

    return json.dumps(
        {
            "data": base64.b64encode(payload).decode("ascii"),
            "metadata": metadata,
        }
    )


@pytest.fixture
def stored_value_factory() -> Callable[..., str]:
    return make_stored_value


@pytest.fixture
def sample_image_binary() -> bytes:
    """Sample binary image data (1x1 PNG)."""
    png_base64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
    return base64.b64decode(png_base64)


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """Sample binary JPEG data (minimal valid JPEG)."""
    return (
        b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00"
        b"\xff\xdb\x00C\x00\x08\x06\x06\x07\x06\x05\x08\x07\x07\x07\t\t\x08\n\x0c"
        b"\xff\xda\x00\x08\x01\x01\x00\x00?\x00\x7f\x00\xff\xd9"
    )
