import base64
import json

import pytest

from handlers.get_image.handler import handler


def view_event(filename) -> dict:
    return {
        "httpMethod": "GET",
        "path": f"/i/{filename}",
        "pathParameters": {"filename": filename},
        "headers": {},
    }


class TestGetHandler:
    def test_serves_stored_bytes(
        self,
        lambda_context,
        s3_put_object,
        stored_value_factory,
    ) -> None:
        s3_put_object(
            "abcd1234.gif",
            stored_value_factory(b"GIF89a\x01\x00", mime_type="image/gif", name="anim.gif"),
        )

        response = handler(view_event("abcd1234.gif"), lambda_context)

        assert response["statusCode"] == 200
        assert response["isBase64Encoded"] is True
        assert base64.b64decode(response["body"]) == b"GIF89a\x01\x00"
        assert response["headers"]["Content-Type"] == "image/gif"
        assert "max-age" in response["headers"]["Cache-Control"]

    def test_missing_image(self, lambda_context, s3_bucket) -> None:
        response = handler(view_event("nothere1.png"), lambda_context)

        assert response["statusCode"] == 404
        assert json.loads(response["body"])["error"] == "Image not found: nothere1.png"

    def test_undecodable_record(self, lambda_context, s3_put_object) -> None:
        s3_put_object("broken12.png", "not json at all")

        response = handler(view_event("broken12.png"), lambda_context)

        assert response["statusCode"] == 500
        assert json.loads(response["body"])["error_code"] == "RECORD_DECODE_FAILED"

    def test_missing_image_with_debug_logging(self, debug_logging, lambda_context, s3_bucket) -> None:
        response = handler(view_event("nothere1.png"), lambda_context)

        assert response["statusCode"] == 404
        assert json.loads(response["body"])["error_code"] == "NOT_FOUND"

    def test_serves_with_debug_logging(
        self,
        debug_logging,
        lambda_context,
        s3_put_object,
        stored_value_factory,
    ) -> None:
        s3_put_object("abcd1234.png", stored_value_factory(b"\x89PNGbytes"))

        response = handler(view_event("abcd1234.png"), lambda_context)

        assert response["statusCode"] == 200
        assert base64.b64decode(response["body"]) == b"\x89PNGbytes"

    @pytest.mark.parametrize("filename", [None, "", "../etc/passwd", ".hidden"])
    def test_invalid_filename(self, lambda_context, s3_bucket, filename) -> None:
        response = handler(view_event(filename), lambda_context)

        assert response["statusCode"] == 400
