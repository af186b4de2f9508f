"""
Lambda handler responsible for listing every stored image (``GET /list``).
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.s3_kv_store import S3KeyValueStore
from core.models.record import ListImagesResponse
from core.utils.decorators import api_gateway_handler, require_api_key
from core.utils.response import ResponseBuilder

from .service import ListService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler(failure_message="Failed to list images")
@require_api_key
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle requests to list images.

    Records that cannot be read or parsed are left out; only a failure to
    enumerate the store fails the request.

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response

    """
    logger.info(
        "Received image list request",
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

    images = ListService(S3KeyValueStore()).list_all()

    response = ListImagesResponse(count=len(images), images=images)

    return ResponseBuilder.ok(response.model_dump())
