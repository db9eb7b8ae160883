#!/usr/bin/env python3
"""
Walk through the fire.com Open Payments client from the command line.

Examples:
    python scripts/run_fire_example.py --mock create --title "SandBox Payment" --amount 100 \
        --details "Make payment for testing system." --currency EUR --account-no 1234 --reference ref123
    python scripts/run_fire_example.py status <payment_uuid>
    python scripts/run_fire_example.py decode-webhook --token <jwt>

Credentials come from FIRE_CLIENT_ID, FIRE_CLIENT_KEY, FIRE_REFRESH_TOKEN and FIRE_MODE
(a .env file is read) or from --config pointing at a YAML file.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

# Add repo root to path so `fire_open_payments.*` imports work when running from scripts/
sys.path.insert(0, str(Path(__file__).parent.parent))

from fire_open_payments.error_handler import ConfigurationError, DecodeError
from fire_open_payments.integrations.clients.mocks.fire import MockFireAPI
from fire_open_payments.integrations.clients.real_http.fire import FireAPI
from fire_open_payments.integrations.contracts.payments import classify_status
from fire_open_payments.integrations.contracts.results import Result
from fire_open_payments.integrations.webhooks.decoder import decode_webhook_token
from fire_open_payments.utils.config_loader import load_fire_config


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Call the fire.com Open Payments API")
    parser.add_argument("--config", type=Path, default=None, help="YAML config file (default: FIRE_* environment)")
    parser.add_argument("--mock", action="store_true", help="Use the in-memory mock client instead of fire.com")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("token", help="Fetch an access token")

    create = sub.add_parser("create", help="Create a payment request and print its URL")
    create.add_argument("--title", required=True)
    create.add_argument("--amount", required=True, type=float)
    create.add_argument("--details", default="")
    create.add_argument("--currency", required=True)
    create.add_argument("--return-url", default="")
    create.add_argument("--account-no", required=True)
    create.add_argument("--reference", required=True)
    create.add_argument("--expiry", default=None, help="ISO-8601 expiry (default: 24 hours from now)")

    get_request = sub.add_parser("get-request", help="Show a payment request")
    get_request.add_argument("payment_id")

    status = sub.add_parser("status", help="Show a payment's status")
    status.add_argument("payment_uuid")

    transactions = sub.add_parser("transactions", help="List transactions for an account")
    transactions.add_argument("account_id")

    webhook = sub.add_parser("decode-webhook", help="Decode a webhook token")
    webhook.add_argument("--token", required=True)
    webhook.add_argument("--secret", default=None, help="Webhook secret used to verify the signature")

    return parser


def _print_result(result: Result) -> int:
    if result.is_ok:
        value: Any = result.value
        print(value if isinstance(value, str) else json.dumps(value, indent=2, default=str))
        return 0
    print(f"{result.kind.value} error: {result.detail}", file=sys.stderr)
    return 1


async def run(args: argparse.Namespace) -> int:
    if args.command == "decode-webhook":
        try:
            event = decode_webhook_token(args.token, secret=args.secret)
        except DecodeError as e:
            print(f"Unauthorized: {e}", file=sys.stderr)
            return 1
        print(json.dumps({"outcome": classify_status(event.status).value, "claims": event.claims}, indent=2, default=str))
        return 0

    if args.mock:
        client = MockFireAPI()
    else:
        client = FireAPI(load_fire_config(args.config))

    if args.command == "token":
        result = await client.get_access_token()
        if result.is_ok:
            print("Access token obtained")
            return 0
        return _print_result(result)
    if args.command == "create":
        result = await client.create_payment_request(
            args.title,
            args.amount,
            args.details,
            args.currency,
            return_url=args.return_url,
            account_no=args.account_no,
            reference=args.reference,
            expiry=args.expiry,
        )
    elif args.command == "get-request":
        result = await client.get_payment_request(args.payment_id)
    elif args.command == "status":
        result = await client.get_payment_request_status(args.payment_uuid)
    else:
        result = await client.get_transactions(args.account_id)
    return _print_result(result)


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        return asyncio.run(run(args))
    except (ConfigurationError, FileNotFoundError) as e:
        logging.getLogger(__name__).error(f"Configuration error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
