"""Error taxonomy for webhook handling and shared error-parsing utilities."""

import json
import logging

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class WebhookError(Exception):
    """Base class for errors that abort a request with a fixed status code."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class BadSignature(WebhookError):
    status_code = 401
    message = "Invalid signature."


class BadApiKey(WebhookError):
    status_code = 401
    message = "Invalid or missing API key"


class MalformedPayload(WebhookError):
    status_code = 400
    message = "Invalid payload"


class Unauthorized(WebhookError):
    status_code = 403
    message = "Unauthorized: email-phone pair not found in team members"


class RecordNotFound(WebhookError):
    status_code = 404
    message = "Not found"


class InternalFailure(WebhookError):
    status_code = 500


class StoreUnavailable(InternalFailure):
    message = "List store unavailable"


async def webhook_error_handler(request: Request, exc: WebhookError) -> JSONResponse:
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse({"error": InternalFailure.message}, status_code=500)


def parse_upstash_error(response_text: str) -> str:
    """Extract a readable message from an Upstash REST error response.

    Upstash returns JSON like {"error": "ERR wrong number of arguments ..."}.
    Returns the error string when parseable, raw text otherwise.
    """
    try:
        body = json.loads(response_text)
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
    except ValueError:
        pass
    return response_text
