"""Upstash Redis REST list store."""

import logging
from typing import Any

import httpx

from enrolment_webhooks.errors import StoreUnavailable, parse_upstash_error
from .base import ListStore

logger = logging.getLogger(__name__)


class UpstashListStore(ListStore):
    """Upstash Redis over its REST API: each command is POSTed as a JSON array."""

    def __init__(
        self,
        url: str,
        token: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    @property
    def backend_name(self) -> str:
        return "upstash"

    def _get_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"}

    async def _command(self, *args: Any) -> Any:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, headers=self._get_headers(), json=list(args))
        except httpx.ConnectError:
            logger.error(f"Upstash unreachable for {args[0]}")
            raise StoreUnavailable()
        except httpx.TimeoutException:
            logger.error(f"Upstash timed out for {args[0]}")
            raise StoreUnavailable()
        except httpx.HTTPError as e:
            logger.error(f"Upstash request failed for {args[0]}: {e}")
            raise StoreUnavailable()

        if response.status_code != 200:
            logger.error(f"Upstash {args[0]} failed ({response.status_code}): {parse_upstash_error(response.text)}")
            raise StoreUnavailable()

        try:
            body = response.json()
        except ValueError:
            logger.error(f"Upstash {args[0]} returned a non-JSON body")
            raise StoreUnavailable()
        if not isinstance(body, dict):
            logger.error(f"Upstash {args[0]} returned an unexpected body: {body!r}")
            raise StoreUnavailable()
        if "error" in body:
            logger.error(f"Upstash {args[0]} failed: {body['error']}")
            raise StoreUnavailable()
        return body.get("result")

    async def push(self, key: str, value: str, *, head: bool = False) -> int:
        return await self._command("LPUSH" if head else "RPUSH", key, value)

    async def range(self, key: str, start: int = 0, end: int = -1) -> list:
        return await self._command("LRANGE", key, start, end) or []

    async def remove_one(self, key: str, value: str) -> int:
        return await self._command("LREM", key, 1, value)

    async def ping(self) -> bool:
        try:
            return await self._command("PING") == "PONG"
        except StoreUnavailable:
            return False
