"""
Lambda handler serving stored images (``GET /i/{filename}``).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.s3_kv_store import S3KeyValueStore
from core.utils.constants import IMAGE_CACHE_CONTROL
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetImageRequest
from .service import GetService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image view requests.

    The stored record is decoded and its payload returned as a binary
    response typed with the recorded MIME type. A missing key is a 404 and
    an undecodable record a 500.

    Args:
        event: API Gateway event payload.
        context: AWS Lambda runtime context.

    Returns:
        API Gateway-compatible response dictionary.
    """
    logger.info(
        "Received image view request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    path_params = event.get("pathParameters") or {}
    request = validate_request(
        GetImageRequest,
        {"filename": path_params.get("filename")},
    )

    record = GetService(S3KeyValueStore()).get_image(request.filename)

    return ResponseBuilder.image(
        record.payload,
        content_type=record.metadata.type,
        cache_control=IMAGE_CACHE_CONTROL,
    )
