"""
Send a single push notification through FCM from the command line.

Credentials are read from the environment (or a .env file):
  FCM_SERVER_KEY                      legacy HTTP API
  FCM_SERVICE_ACCOUNT_KEY_FILE_PATH   HTTP v1, path to (or inline) service account JSON
  FCM_CREDENTIALS                     HTTP v1, inline service account JSON

Usage:
  fcm-send legacy --token TOKEN [--token TOKEN ...] --title T --body B [--data k=v ...]
  fcm-send v1 --token TOKEN --title T --body B [--data k=v ...] [--validate-only]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Sequence

import httpx

from pushnotifications.application.errors import FcmError
from pushnotifications.config.logging_setup import configure_logging
from pushnotifications.config.settings import FcmSettings, get_settings
from pushnotifications.domain.models import fcm_legacy, fcm_v1
from pushnotifications.infrastructure.push.fcm import FcmLegacyClient
from pushnotifications.infrastructure.push.fcm_v1 import FcmClient

logger = logging.getLogger(__name__)


def _parse_data(pairs: Sequence[str] | None) -> dict[str, str] | None:
    if not pairs:
        return None
    data: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"Invalid --data entry (expected key=value): {pair}")
        data[key] = value
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fcm-send", description="Send a push notification via FCM")
    parser.add_argument("--log-level", default=None, help="Overrides FCM_LOG_LEVEL")
    sub = parser.add_subparsers(dest="api", required=True)

    legacy = sub.add_parser("legacy", help="Use the legacy HTTP API (server key)")
    legacy.add_argument("--token", action="append", required=True, dest="tokens")
    v1 = sub.add_parser("v1", help="Use the HTTP v1 API (service account)")
    v1.add_argument("--token", required=True)
    v1.add_argument("--validate-only", action="store_true")

    for p in (legacy, v1):
        p.add_argument("--title", required=True)
        p.add_argument("--body", required=True)
        p.add_argument("--data", action="append", metavar="KEY=VALUE")
    return parser


async def send_legacy(settings: FcmSettings, args: argparse.Namespace) -> bool:
    request = fcm_legacy.FcmRequest(
        registration_ids=args.tokens,
        notification=fcm_legacy.FcmNotification(title=args.title, body=args.body),
        data=_parse_data(args.data),
    )
    async with FcmLegacyClient(
        settings.legacy_options(), timeout=settings.timeout_seconds
    ) as client:
        response = await client.send(request)
    print(json.dumps(response.model_dump(mode="json"), indent=2))
    return response.number_of_failures == 0 and response.number_of_successes > 0


async def send_v1(settings: FcmSettings, args: argparse.Namespace) -> bool:
    request = fcm_v1.FcmV1Request(
        message=fcm_v1.Message(
            token=args.token,
            notification=fcm_v1.Notification(title=args.title, body=args.body),
            data=_parse_data(args.data),
        ),
        validate_only=args.validate_only or None,
    )
    async with FcmClient(settings.fcm_options(), timeout=settings.timeout_seconds) as client:
        response = await client.send(request)
    print(json.dumps(response.model_dump(mode="json"), indent=2))
    return response.is_successful


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    handler = send_legacy if args.api == "legacy" else send_v1
    try:
        delivered = asyncio.run(handler(settings, args))
    except argparse.ArgumentTypeError as exc:
        parser.error(str(exc))
    except FcmError as exc:
        logger.error("%s: %s", exc.code, exc.message)
        return 2
    except httpx.HTTPError as exc:
        logger.error("Transport error talking to FCM: %s", exc)
        return 2
    return 0 if delivered else 1


if __name__ == "__main__":
    sys.exit(main())
