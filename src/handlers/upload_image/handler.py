"""
Lambda handler responsible for direct image uploads (``POST /upload`` and ``POST /``).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.s3_kv_store import S3KeyValueStore
from core.utils.decorators import api_gateway_handler
from core.utils.events import get_body_bytes, get_header
from core.utils.multipart import parse_multipart_form
from core.utils.response import ResponseBuilder

from .models import ImageUploadResponse
from .service import UploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(failure_message="Upload failed")
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    The handler parses the multipart form, validates the ``image`` field,
    stores the image as a self-contained record and returns its public key.

    Expected API Gateway event structure:
    {
        "headers": {"Content-Type": "multipart/form-data; boundary=..."},
        "body": "...",             # base64 when isBase64Encoded is true
        "isBase64Encoded": true
    }

    Args:
        event: API Gateway Lambda proxy event containing the upload form
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response describing the stored image
    """
    logger.info(
        "Received image upload request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
            "remaining_time_ms": context.get_remaining_time_in_millis()
            if hasattr(context, "get_remaining_time_in_millis")
            else None,
        },
    )

    fields = parse_multipart_form(
        get_body_bytes(event),
        get_header(event, "Content-Type"),
    )
    service = UploadService(S3KeyValueStore())
    part, result = service.upload_image(fields)

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)

    response = ImageUploadResponse(
        filename=result.key,
        url=result.url,
        originalName=part.filename or "",
        size=part.size,
    )

    return ResponseBuilder.ok(response.model_dump())
