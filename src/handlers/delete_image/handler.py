"""
Lambda handler responsible for deleting an image (``POST /delete`` or ``DELETE /delete``).
"""

import json
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.s3_kv_store import S3KeyValueStore
from core.utils.decorators import api_gateway_handler, require_api_key
from core.utils.events import get_body_bytes
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import DeleteImageRequest, DeleteImageResponse
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


def _requested_filename(event: dict[str, Any]) -> Any:
    """Read ``filename`` from the query string, else from a JSON body."""
    query_params = event.get("queryStringParameters") or {}
    if query_params.get("filename"):
        return query_params["filename"]

    body = get_body_bytes(event)
    if not body:
        return None

    payload = json.loads(body)
    return payload.get("filename") if isinstance(payload, dict) else None


@api_gateway_handler(failure_message="Delete failed")
@require_api_key
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Extracts the filename from the query string or JSON body
    - Validates the incoming request payload
    - Delegates deletion to the service layer

    Args:
        event: API Gateway Lambda proxy event
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible HTTP response
    """
    logger.info(
        "Received image delete request",
        extra={
            "http_method": event.get("httpMethod"),
            "path": event.get("path"),
            "query_params": event.get("queryStringParameters"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    request = validate_request(
        DeleteImageRequest,
        {"filename": _requested_filename(event)},
    )

    deleted_at = DeleteService(S3KeyValueStore()).delete_image(request.filename)

    response = DeleteImageResponse(
        filename=request.filename,
        deleted_at=deleted_at,
    )

    return ResponseBuilder.ok(response.model_dump())
