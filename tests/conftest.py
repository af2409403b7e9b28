"""Shared fixtures: app client wired to an in-memory store and a known signing secret."""

import json

import pytest
from fastapi.testclient import TestClient

from enrolment_webhooks.config import settings
from enrolment_webhooks.main import app
from enrolment_webhooks.signature import SIGNATURE_HEADER, sign
from enrolment_webhooks.store import MemoryListStore, get_list_store

SECRET = "test-signing-secret"


@pytest.fixture()
def store() -> MemoryListStore:
    return MemoryListStore()


@pytest.fixture()
def client(store, monkeypatch):
    monkeypatch.setattr(settings, "webhook_signing_secret", SECRET)
    monkeypatch.setattr(settings, "api_key", "")
    app.dependency_overrides[get_list_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def post_signed(client):
    """POST a payload with a valid Tally signature over its exact bytes."""

    def _post(path: str, payload):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        headers = {"Content-Type": "application/json", SIGNATURE_HEADER: sign(body, SECRET)}
        return client.post(path, content=body, headers=headers)

    return _post
