"""Submission queue: enqueue new Tally events, list them, delete one by eventId."""

import json
import logging
from datetime import datetime, timezone
from typing import Any

from enrolment_webhooks.config import settings
from enrolment_webhooks.errors import MalformedPayload, RecordNotFound
from enrolment_webhooks.models import decode_entry
from enrolment_webhooks.store import ListStore

logger = logging.getLogger(__name__)


async def enqueue_submission(store: ListStore, raw_body: bytes) -> None:
    """Append the raw event JSON to the tail of the submissions queue.

    The body only has to parse as JSON; it is stored exactly as received.
    """
    try:
        text = raw_body.decode("utf-8")
        event = json.loads(text)
    except ValueError as e:
        logger.error(f"Invalid JSON in request body: {e}")
        raise MalformedPayload("Invalid JSON")

    await store.push(settings.submissions_queue_key, text)

    if isinstance(event, dict):
        data = event.get("data") if isinstance(event.get("data"), dict) else {}
        logger.info(f"Tally event queued. Type: {event.get('eventType')}, Form: {data.get('formName')}")
    else:
        logger.info("Tally event queued.")


def _created_at_timestamp(message: Any) -> float:
    """Sort key for ``createdAt``; missing or unparseable values count as the epoch."""
    value = message.get("createdAt") if isinstance(message, dict) else None
    if isinstance(value, bool) or not value:
        return 0.0
    if isinstance(value, (int, float)):
        return value / 1000  # JS epoch milliseconds
    if not isinstance(value, str):
        return 0.0
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


async def list_submissions(store: ListStore) -> list[Any]:
    """Return every queued submission, newest ``createdAt`` first."""
    raw_messages = await store.range(settings.submissions_queue_key)

    messages = []
    for index, raw in enumerate(raw_messages):
        try:
            messages.append(decode_entry(raw))
        except ValueError as e:
            logger.warning(f"Skipping unreadable queue entry at index {index}: {e}")

    messages.sort(key=_created_at_timestamp, reverse=True)
    return messages


async def delete_submission(store: ListStore, event_id: str) -> None:
    """Remove the first queued submission whose eventId matches.

    Raises RecordNotFound when no entry matches.
    """
    queue_key = settings.submissions_queue_key
    logger.info(f"[DELETE] Attempting to delete eventId: {event_id}")

    all_items = await store.range(queue_key)
    logger.info(f"[DELETE] Fetched {len(all_items)} items from queue")

    for index, raw in enumerate(all_items):
        try:
            entry = decode_entry(raw)
        except ValueError as e:
            logger.error(f"[DELETE] Failed to parse item at index {index}: {e}")
            continue

        if isinstance(entry, dict) and entry.get("eventId") == event_id:
            removed = await store.remove_one(queue_key, raw)
            logger.info(f"[DELETE] Removed {removed} item(s) for eventId: {event_id}")
            return

    logger.warning(f"[DELETE] No matching item found for eventId: {event_id}")
    raise RecordNotFound("Event not found")
