import os

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from core.infrastructure.aws.s3_kv_store import S3KeyValueStore
from core.models.errors import StorageFailureError


def client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": "simulated"}}, operation)


class TestS3KeyValueStore:
    def test_put_then_get(self, s3_bucket, s3_get_object):
        store = S3KeyValueStore()

        store.put("abcd1234.png", '{"data":"","metadata":{}}')

        assert store.get("abcd1234.png") == '{"data":"","metadata":{}}'
        assert s3_get_object("abcd1234.png") == b'{"data":"","metadata":{}}'

    def test_put_sets_json_content_type(self, s3_bucket):
        S3KeyValueStore().put("abcd1234.png", "{}")

        head = s3_bucket.head_object(Bucket=os.getenv("IMAGES_BUCKET_NAME"), Key="abcd1234.png")
        assert head["ContentType"] == "application/json"

    def test_get_missing_key_returns_none(self, s3_bucket):
        assert S3KeyValueStore().get("missing.png") is None

    def test_get_other_client_error_raises(self, s3_bucket, monkeypatch):
        store = S3KeyValueStore()

        def raise_error(**_):
            raise client_error("AccessDenied", "GetObject")

        monkeypatch.setattr(store._s3, "get_object", raise_error)

        with pytest.raises(StorageFailureError) as exc:
            store.get("abcd1234.png")

        assert exc.value.details == {"key": "abcd1234.png"}

    def test_get_connection_error_raises(self, s3_bucket, monkeypatch):
        store = S3KeyValueStore()

        def raise_error(**_):
            raise EndpointConnectionError(endpoint_url="http://localhost:4566")

        monkeypatch.setattr(store._s3, "get_object", raise_error)

        with pytest.raises(StorageFailureError):
            store.get("abcd1234.png")

    def test_put_failure_raises(self, s3_bucket, monkeypatch):
        store = S3KeyValueStore()

        def raise_error(**_):
            raise client_error("SlowDown", "PutObject")

        monkeypatch.setattr(store._s3, "put_object", raise_error)

        with pytest.raises(StorageFailureError, match="SlowDown"):
            store.put("abcd1234.png", "{}")

    def test_list_keys(self, s3_bucket, s3_put_object):
        s3_put_object("b.png", "{}")
        s3_put_object("a.png", "{}")

        assert sorted(S3KeyValueStore().list_keys()) == ["a.png", "b.png"]

    def test_list_keys_empty_bucket(self, s3_bucket):
        assert S3KeyValueStore().list_keys() == []

    def test_list_keys_failure_raises(self, s3_bucket, monkeypatch):
        store = S3KeyValueStore()

        def raise_error():
            raise client_error("AccessDenied", "ListObjectsV2")
            yield  # pragma: no cover

        monkeypatch.setattr(store._s3, "iter_keys", raise_error)

        with pytest.raises(StorageFailureError):
            store.list_keys()

    def test_delete(self, s3_bucket, s3_put_object, s3_list_keys):
        s3_put_object("a.png", "{}")
        store = S3KeyValueStore()

        store.delete("a.png")
        store.delete("never-existed.png")

        assert s3_list_keys() == []
