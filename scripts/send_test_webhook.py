#!/usr/bin/env python3
"""
Signed Test Webhook Sender

Signs a Tally-style JSON payload with WEBHOOK_SIGNING_SECRET (read from .env)
and POSTs it to a running instance, the way Tally itself would.

Usage:
    python scripts/send_test_webhook.py payload.json
    python scripts/send_test_webhook.py payload.json --path /webhook/participants/teams/update
    python scripts/send_test_webhook.py payload.json --url https://example.com
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path

# Add parent directory to path so we can import from enrolment_webhooks
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx
from dotenv import load_dotenv

from enrolment_webhooks.signature import SIGNATURE_HEADER, sign

# Load environment variables
load_dotenv()


async def main():
    parser = argparse.ArgumentParser(description="Send a signed Tally webhook")
    parser.add_argument("payload", type=Path, help="JSON file to send as the request body")
    parser.add_argument("--url", default="http://localhost:8000", help="Base URL of the service")
    parser.add_argument("--path", default="/webhook/submission", help="Webhook route")
    args = parser.parse_args()

    secret = os.environ.get("WEBHOOK_SIGNING_SECRET", "")
    if not secret:
        print("ERROR: WEBHOOK_SIGNING_SECRET must be set in .env")
        sys.exit(1)

    body = args.payload.read_bytes()
    headers = {"Content-Type": "application/json", SIGNATURE_HEADER: sign(body, secret)}
    url = f"{args.url.rstrip('/')}{args.path}"

    async with httpx.AsyncClient(timeout=30.0) as client:
        response = await client.post(url, content=body, headers=headers)

    print(f"POST {url}")
    print(f"Status: {response.status_code}")
    print(f"Response: {response.text}")


if __name__ == "__main__":
    asyncio.run(main())
