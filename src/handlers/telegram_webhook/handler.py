"""
Lambda handler receiving Telegram bot updates (``POST /telegram-webhook``).
"""

import binascii
import hmac
from http import HTTPStatus
import os
from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.aws.s3_kv_store import S3KeyValueStore
from core.infrastructure.telegram.telegram_client import TelegramClient
from core.utils.constants import (
    ENV_TG_BOT_TOKEN,
    ENV_TG_SECRET_TOKEN,
    TELEGRAM_SECRET_HEADER,
)
from core.utils.events import get_body_bytes, get_header, public_base_url
from core.utils.response import ResponseBuilder
from core.utils.validators import sanitize_validation_errors

from .models import TelegramUpdate
from .service import TelegramIngestService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()

ACK = "OK"


def _secret_matches(expected: str, provided: str | None) -> bool:
    return hmac.compare_digest(
        expected.encode("utf-8"),
        (provided or "").encode("utf-8"),
    )


@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle Telegram webhook deliveries.

    Without a configured bot token the endpoint answers 404 without reading
    the body. With a configured secret, deliveries lacking the matching
    secret header get 403. Every other outcome, including failed ingestion,
    is acknowledged with 200 so Telegram does not redeliver.

    Args:
        event: API Gateway Lambda proxy event carrying a Telegram update
        context: AWS Lambda execution context

    Returns:
        API Gateway-compatible plain-text response
    """
    token = os.getenv(ENV_TG_BOT_TOKEN)
    if not token:
        return ResponseBuilder.text("Not Found", status=HTTPStatus.NOT_FOUND)

    secret = os.getenv(ENV_TG_SECRET_TOKEN)
    if secret and not _secret_matches(secret, get_header(event, TELEGRAM_SECRET_HEADER)):
        logger.warning(
            "Rejected webhook with invalid secret token",
            extra={"request_id": getattr(context, "aws_request_id", None)},
        )
        return ResponseBuilder.text("Unauthorized", status=HTTPStatus.FORBIDDEN)

    logger.info(
        "Received Telegram webhook",
        extra={
            "path": event.get("path"),
            "request_id": getattr(context, "aws_request_id", None),
            "remaining_time_ms": context.get_remaining_time_in_millis()
            if hasattr(context, "get_remaining_time_in_millis")
            else None,
        },
    )

    try:
        update = TelegramUpdate.model_validate_json(get_body_bytes(event))
    except binascii.Error as exc:
        logger.warning("Ignoring undecodable webhook body", extra={"error": str(exc)})
        return ResponseBuilder.text(ACK)
    except PydanticValidationError as exc:
        logger.warning(
            "Ignoring malformed Telegram update",
            extra={"errors": sanitize_validation_errors(exc.errors())},
        )
        return ResponseBuilder.text(ACK)

    if update.message is None:
        logger.debug("Ignoring non-message update", extra={"update_id": update.update_id})
        return ResponseBuilder.text(ACK)

    try:
        service = TelegramIngestService(S3KeyValueStore(), TelegramClient(token))
        result = service.handle_message(update.message, base_url=public_base_url(event))
    except Exception:
        logger.exception(
            "Unexpected error processing Telegram update",
            extra={"update_id": update.update_id},
        )
        return ResponseBuilder.text(ACK)

    if result is not None:
        metrics.add_metric(name="TelegramImagesIngested", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.text(ACK)