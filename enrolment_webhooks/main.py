"""Enrolment Webhooks - FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from enrolment_webhooks import __version__
from enrolment_webhooks.config import settings
from enrolment_webhooks.errors import WebhookError, unhandled_error_handler, webhook_error_handler
from enrolment_webhooks.routers import health, submissions, teams
from enrolment_webhooks.store import close_list_store

logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await close_list_store()


app = FastAPI(
    title="Enrolment Webhooks",
    description="Tally webhook relay into Redis-list queues",
    version=__version__,
    lifespan=lifespan,
)

app.add_exception_handler(WebhookError, webhook_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# Routers (webhook POSTs are authenticated by signature; queue reads/deletes by API key when set)
app.include_router(health.router)
app.include_router(submissions.router, prefix="/webhook/submission", tags=["submissions"])
app.include_router(teams.router, prefix="/webhook/participants/teams/update", tags=["teams"])
