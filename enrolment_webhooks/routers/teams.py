"""Team update webhook - merges a member's update form onto their team's record."""

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel

from enrolment_webhooks.dependencies import signed_body
from enrolment_webhooks.store import ListStore, get_list_store
from enrolment_webhooks.teams import apply_team_update

router = APIRouter()


class StatusResponse(BaseModel):
    status: str


@router.post("", response_model=StatusResponse)
async def receive_team_update(
    raw_body: bytes = Depends(signed_body),
    store: ListStore = Depends(get_list_store),
):
    await apply_team_update(store, raw_body)
    return StatusResponse(status="ok")


@router.head("")
async def head_team_update():
    return Response(status_code=200)


@router.options("")
async def preflight_team_update():
    return Response(status_code=204)
