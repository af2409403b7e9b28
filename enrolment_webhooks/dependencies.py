"""Shared route dependencies: webhook signature check and optional API key."""

import hmac
import logging

from fastapi import Header, Request

from enrolment_webhooks.config import settings
from enrolment_webhooks.errors import BadApiKey, BadSignature
from enrolment_webhooks.signature import SIGNATURE_HEADER, verify

logger = logging.getLogger(__name__)


async def signed_body(request: Request) -> bytes:
    """Return the raw request body once its Tally signature has been verified."""
    logger.info(f"Webhook triggered: {request.url.path}")
    received_signature = request.headers.get(SIGNATURE_HEADER, "")
    raw_body = await request.body()

    if not settings.webhook_signing_secret:
        logger.warning("WEBHOOK_SIGNING_SECRET not set, rejecting webhook")
        raise BadSignature()

    if not verify(raw_body, received_signature, settings.webhook_signing_secret):
        logger.warning("Invalid webhook signature")
        raise BadSignature()

    logger.info("Signature valid.")
    return raw_body


async def verify_api_key(x_api_key: str | None = Header(None)) -> None:
    if not settings.api_key:
        return
    if not x_api_key or not hmac.compare_digest(x_api_key.encode(), settings.api_key.encode()):
        raise BadApiKey()
