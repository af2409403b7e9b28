"""Submission webhook: ingest, list, delete, HEAD and OPTIONS."""

import json

from enrolment_webhooks.config import settings
from enrolment_webhooks.errors import StoreUnavailable
from enrolment_webhooks.signature import SIGNATURE_HEADER, sign

PATH = "/webhook/submission"
QUEUE = "enrolment-submissions"

SUBMISSION = {
    "eventId": "e1",
    "eventType": "FORM_RESPONSE",
    "createdAt": "2025-03-01T10:00:00.000Z",
    "data": {
        "formName": "F",
        "submissionId": "s1",
        "fields": [
            {"label": "1: Email", "value": "a@x.com"},
            {"label": "1: Phone number", "value": "111"},
        ],
    },
}


def _seed(store, *items):
    store._lists.setdefault(QUEUE, []).extend(items)


class TestIngest:
    def test_valid_submission_is_queued_verbatim(self, client, store, post_signed):
        body = json.dumps(SUBMISSION, indent=2).encode()
        response = post_signed(PATH, body)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert store._lists[QUEUE] == [body.decode()]

    def test_new_submissions_go_to_the_tail(self, client, store, post_signed):
        post_signed(PATH, {"eventId": "first"})
        post_signed(PATH, {"eventId": "second"})
        assert [json.loads(raw)["eventId"] for raw in store._lists[QUEUE]] == ["first", "second"]

    def test_bad_signature_is_rejected_before_parsing(self, client, store):
        response = client.post(PATH, content=b"not json", headers={SIGNATURE_HEADER: "bogus"})
        assert response.status_code == 401
        assert QUEUE not in store._lists

    def test_missing_signature(self, client, store):
        response = client.post(PATH, json=SUBMISSION)
        assert response.status_code == 401
        assert QUEUE not in store._lists

    def test_unconfigured_secret_rejects_empty_key_signature(self, client, store, monkeypatch):
        monkeypatch.setattr(settings, "webhook_signing_secret", "")
        body = json.dumps(SUBMISSION).encode()
        response = client.post(PATH, content=body, headers={SIGNATURE_HEADER: sign(body, "")})
        assert response.status_code == 401
        assert response.json() == {"error": "Invalid signature."}
        assert QUEUE not in store._lists

    def test_invalid_json(self, client, store, post_signed):
        response = post_signed(PATH, b"{not json")
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}
        assert QUEUE not in store._lists

    def test_any_json_is_accepted(self, client, store, post_signed):
        assert post_signed(PATH, [1, 2, 3]).status_code == 200
        assert store._lists[QUEUE] == ["[1, 2, 3]"]

    def test_store_failure_is_500(self, client, store, post_signed, monkeypatch):
        async def failing_push(*args, **kwargs):
            raise StoreUnavailable()

        monkeypatch.setattr(store, "push", failing_push)
        response = post_signed(PATH, SUBMISSION)
        assert response.status_code == 500
        assert response.json() == {"error": "List store unavailable"}


class TestList:
    def test_newest_first(self, client, store):
        _seed(store, json.dumps({"eventId": "old", "createdAt": "2024-01-01T00:00:00Z"}))
        _seed(store, json.dumps({"eventId": "undated"}))
        _seed(store, json.dumps({"eventId": "new", "createdAt": "2025-06-01T12:00:00Z"}))

        response = client.get(PATH)

        assert response.status_code == 200
        assert [m["eventId"] for m in response.json()["messages"]] == ["new", "old", "undated"]
        # store order untouched
        assert [json.loads(raw)["eventId"] for raw in store._lists[QUEUE]] == ["old", "undated", "new"]

    def test_object_entries_and_unreadable_entries(self, client, store):
        _seed(store, {"eventId": "as-object"})
        _seed(store, "{broken")

        response = client.get(PATH)

        assert response.status_code == 200
        assert response.json()["messages"] == [{"eventId": "as-object"}]

    def test_non_object_entries_are_listed(self, client, store, post_signed):
        assert post_signed(PATH, [1, 2, 3]).status_code == 200
        _seed(store, json.dumps(SUBMISSION))

        response = client.get(PATH)

        assert response.status_code == 200
        assert response.json()["messages"] == [SUBMISSION, [1, 2, 3]]

    def test_empty_queue(self, client):
        assert client.get(PATH).json() == {"messages": []}

    def test_api_key_required_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(settings, "api_key", "admin-key")
        assert client.get(PATH).status_code == 401
        assert client.get(PATH, headers={"X-API-Key": "wrong"}).status_code == 401
        assert client.get(PATH, headers={"X-API-Key": "admin-key"}).status_code == 200


class TestDelete:
    def _delete(self, client, payload):
        return client.request("DELETE", PATH, json=payload)

    def test_removes_only_first_match(self, client, store):
        first = json.dumps({"eventId": "dup", "n": 1})
        second = json.dumps({"eventId": "dup", "n": 2})
        _seed(store, "{broken")
        _seed(store, first)
        _seed(store, second)

        response = self._delete(client, {"eventId": "dup"})

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert store._lists[QUEUE] == ["{broken", second]

    def test_missing_event_id(self, client):
        response = self._delete(client, {})
        assert response.status_code == 400
        assert response.json() == {"error": "Missing eventId"}

    def test_invalid_json_body(self, client):
        response = client.request("DELETE", PATH, content=b"nope")
        assert response.status_code == 400

    def test_non_object_entries_are_skipped(self, client, store):
        _seed(store, "[1, 2, 3]", "42", json.dumps(SUBMISSION))

        response = self._delete(client, {"eventId": "e1"})

        assert response.status_code == 200
        assert store._lists[QUEUE] == ["[1, 2, 3]", "42"]

    def test_unknown_event_id(self, client):
        response = self._delete(client, {"eventId": "nope"})
        assert response.status_code == 404
        assert response.json() == {"error": "Event not found"}


class TestHeadAndOptions:
    def test_head(self, client):
        response = client.head(PATH)
        assert response.status_code == 200
        assert response.content == b""

    def test_options(self, client):
        response = client.options(PATH)
        assert response.status_code == 204
        assert response.content == b""

    def test_preflight_from_browser_origin_reaches_route(self, client):
        response = client.options(
            PATH, headers={"Origin": "https://tally.so", "Access-Control-Request-Method": "POST"}
        )
        assert response.status_code == 204
        assert response.content == b""
        assert "access-control-allow-origin" not in response.headers


def test_ingest_list_delete_scenario(client, post_signed):
    assert post_signed(PATH, SUBMISSION).status_code == 200

    messages = client.get(PATH).json()["messages"]
    assert messages == [SUBMISSION]

    assert client.request("DELETE", PATH, json={"eventId": "e1"}).status_code == 200
    assert client.get(PATH).json()["messages"] == []
    assert client.request("DELETE", PATH, json={"eventId": "e1"}).status_code == 404
