"""Submission webhook - queues new Tally events and exposes the queue for review."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response
from pydantic import BaseModel

from enrolment_webhooks.dependencies import signed_body, verify_api_key
from enrolment_webhooks.errors import MalformedPayload
from enrolment_webhooks.ingest import delete_submission, enqueue_submission, list_submissions
from enrolment_webhooks.store import ListStore, get_list_store

router = APIRouter()


class StatusResponse(BaseModel):
    status: str


class MessagesResponse(BaseModel):
    messages: list[Any]


class DeleteResponse(BaseModel):
    success: bool


@router.post("", response_model=StatusResponse)
async def receive_submission(
    raw_body: bytes = Depends(signed_body),
    store: ListStore = Depends(get_list_store),
):
    """Queue a signed Tally submission event."""
    await enqueue_submission(store, raw_body)
    return StatusResponse(status="ok")


# Some providers check the URL with HEAD before sending POST
@router.head("")
async def head_submission():
    return Response(status_code=200)


@router.options("")
async def preflight_submission():
    return Response(status_code=204)


@router.get("", response_model=MessagesResponse, dependencies=[Depends(verify_api_key)])
async def get_submissions(store: ListStore = Depends(get_list_store)):
    """List queued submissions, newest first."""
    return MessagesResponse(messages=await list_submissions(store))


@router.delete("", response_model=DeleteResponse, dependencies=[Depends(verify_api_key)])
async def remove_submission(request: Request, store: ListStore = Depends(get_list_store)):
    """Delete the first queued submission with the given eventId."""
    try:
        body = await request.json()
    except ValueError:
        raise MalformedPayload("Invalid JSON")

    event_id = body.get("eventId") if isinstance(body, dict) else None
    if not event_id:
        raise MalformedPayload("Missing eventId")

    await delete_submission(store, event_id)
    return DeleteResponse(success=True)
