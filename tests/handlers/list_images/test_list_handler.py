import json
from unittest.mock import patch

from core.models.errors import ListError
from handlers.list_images.handler import handler


class TestListHandler:
    def test_list_success(
        self,
        lambda_context,
        auth_headers,
        s3_put_object,
        stored_value_factory,
    ) -> None:
        s3_put_object("old12345.png", stored_value_factory(upload_time="2024-01-01T00:00:00+00:00"))
        s3_put_object("new12345.png", stored_value_factory(upload_time="2024-02-01T00:00:00+00:00"))
        s3_put_object("junk1234.png", "garbage")

        response = handler({"httpMethod": "GET", "path": "/list", "headers": auth_headers}, lambda_context)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["success"] is True
        assert body["count"] == 2
        assert [image["filename"] for image in body["images"]] == ["new12345.png", "old12345.png"]
        assert body["images"][0]["url"] == "/i/new12345.png"
        assert body["images"][0]["uploadTime"] == "2024-02-01T00:00:00+00:00"

    def test_empty_store(self, lambda_context, auth_headers, s3_bucket) -> None:
        response = handler({"httpMethod": "GET", "headers": auth_headers}, lambda_context)

        body = json.loads(response["body"])
        assert body == {"success": True, "count": 0, "images": []}

    def test_missing_api_key(self, lambda_context, api_key, s3_bucket) -> None:
        response = handler({"httpMethod": "GET", "headers": {}}, lambda_context)

        assert response["statusCode"] == 401
        assert response["headers"]["WWW-Authenticate"] == "Bearer"
        assert json.loads(response["body"])["error"] == "Unauthorized: Invalid API Key"

    def test_wrong_api_key(self, lambda_context, api_key, s3_bucket) -> None:
        response = handler(
            {"httpMethod": "GET", "headers": {"Authorization": "Bearer nope"}},
            lambda_context,
        )

        assert response["statusCode"] == 401

    def test_enumeration_failure(self, lambda_context, auth_headers, s3_bucket) -> None:
        with patch(
            "handlers.list_images.service.ListService.list_all",
            side_effect=ListError(message="bucket unavailable"),
        ):
            response = handler({"httpMethod": "GET", "headers": auth_headers}, lambda_context)

        assert response["statusCode"] == 500
        body = json.loads(response["body"])
        assert body["error"] == "Failed to list images: bucket unavailable"
        assert body["error_code"] == "LIST_FAILED"
