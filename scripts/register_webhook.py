#!/usr/bin/env python3
"""
Register the deployed webhook endpoint with the Telegram Bot API.

Requires the project to be installed (``pip install -e .``).

Run:
    python scripts/register_webhook.py \
      --base-url https://abc.execute-api.us-east-1.amazonaws.com/prod \
      --bot-token <TG_BOT_TOKEN> \
      --secret-token <TG_SECRET_TOKEN>

The Bot API host follows TELEGRAM_API_BASE_URL, as in the webhook Lambda.
"""

import argparse
import os
import sys

from aws_lambda_powertools import Logger

from core.infrastructure.telegram.telegram_client import TelegramClient
from core.models.errors import RemoteFetchError
from core.utils.constants import (
    ENV_TG_BOT_TOKEN,
    ENV_TG_SECRET_TOKEN,
    TELEGRAM_WEBHOOK_PATH,
)

logger = Logger(service="register-webhook")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Register the Telegram webhook")

    parser.add_argument(
        "--base-url",
        help="Public base URL of the deployed API, including any stage prefix",
    )
    parser.add_argument(
        "--bot-token",
        default=os.getenv(ENV_TG_BOT_TOKEN),
        help=f"Bot token (defaults to {ENV_TG_BOT_TOKEN})",
    )
    parser.add_argument(
        "--secret-token",
        default=os.getenv(ENV_TG_SECRET_TOKEN),
        help=f"Shared secret sent back in X-Telegram-Bot-Api-Secret-Token (defaults to {ENV_TG_SECRET_TOKEN})",
    )
    parser.add_argument(
        "--delete",
        action="store_true",
        help="Remove the webhook instead of registering it",
    )

    args = parser.parse_args(argv)
    if not args.bot_token:
        parser.error(f"a bot token is required (--bot-token or {ENV_TG_BOT_TOKEN})")
    if not args.delete and not args.base_url:
        parser.error("--base-url is required unless --delete is given")

    return args


def register_webhook(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    client = TelegramClient(args.bot_token)

    try:
        if args.delete:
            client.delete_webhook()
        else:
            client.set_webhook(
                args.base_url.rstrip("/") + TELEGRAM_WEBHOOK_PATH,
                secret_token=args.secret_token,
            )
    except RemoteFetchError as exc:
        logger.error("Webhook update failed", extra={"error": exc.message, **exc.details})
        sys.exit(1)


if __name__ == "__main__":
    register_webhook()
