from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from enrolment_webhooks import __version__
from enrolment_webhooks.config import settings
from enrolment_webhooks.store import ListStore, get_list_store


router = APIRouter(tags=["health"])

_startup_time = datetime.now(timezone.utc)


class EndpointInfo(BaseModel):
    path: str
    description: str
    methods: list[str]


class IntegrationStatus(BaseModel):
    connected: bool
    status: str
    last_check: str | None = None


class IntegrationsInfo(BaseModel):
    signing_secret: IntegrationStatus
    list_store: IntegrationStatus


class HealthResponse(BaseModel):
    status: str
    version: str
    uptime_seconds: float
    endpoints: list[EndpointInfo]
    integrations: IntegrationsInfo


ENDPOINTS = [
    EndpointInfo(path="/health", description="Service status", methods=["GET"]),
    EndpointInfo(
        path="/webhook/submission",
        description="Tally submission queue",
        methods=["POST", "GET", "DELETE", "HEAD", "OPTIONS"],
    ),
    EndpointInfo(
        path="/webhook/participants/teams/update",
        description="Team update merge",
        methods=["POST", "HEAD", "OPTIONS"],
    ),
]


def _check_signing_secret() -> IntegrationStatus:
    if not settings.webhook_signing_secret:
        return IntegrationStatus(connected=False, status="signing secret not configured")
    return IntegrationStatus(
        connected=True,
        status="ok",
        last_check=datetime.now(timezone.utc).isoformat(),
    )


async def _check_list_store(store: ListStore) -> IntegrationStatus:
    last_check = datetime.now(timezone.utc).isoformat()
    if not await store.ping():
        return IntegrationStatus(connected=False, status=f"{store.backend_name} unreachable", last_check=last_check)
    return IntegrationStatus(connected=True, status=f"ok ({store.backend_name})", last_check=last_check)


@router.get("/health", response_model=HealthResponse)
async def health_check(store: ListStore = Depends(get_list_store)):
    uptime = (datetime.now(timezone.utc) - _startup_time).total_seconds()

    return HealthResponse(
        status="ok",
        version=__version__,
        uptime_seconds=round(uptime, 2),
        endpoints=ENDPOINTS,
        integrations=IntegrationsInfo(
            signing_secret=_check_signing_secret(),
            list_store=await _check_list_store(store),
        ),
    )
