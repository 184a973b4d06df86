"""Integration smoke tests for REST API (using mocked UoW via dependency override)."""
from __future__ import annotations

import jwt
import pytest
from fastapi.testclient import TestClient

from marketplace_chat.api.deps import get_notifier, get_uow, get_uploader
from marketplace_chat.app import create_app
from marketplace_chat.application.exceptions import PersistenceError
from marketplace_chat.config import settings
from tests.conftest import FakeUoW, at, make_message, make_offer


def _make_token(username: str = "alice") -> str:
    return jwt.encode(
        {"id": "1", "username": username, "email": f"{username}@example.com"},
        settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
    )


def _auth(username: str = "alice") -> dict[str, str]:
    return {"Authorization": f"Bearer {_make_token(username)}"}


@pytest.fixture
def app_with_uow(notifier):
    app = create_app()
    uow = FakeUoW()

    async def _override():
        yield uow

    app.dependency_overrides[get_uow] = _override
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_uploader] = lambda: None
    return app, uow


@pytest.fixture
def client(app_with_uow):
    app, _ = app_with_uow
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def uow(app_with_uow):
    _, uow = app_with_uow
    return uow


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_unauthorized_returns_error(client):
    resp = client.get("/api/v1/message/conversations/alice")
    assert resp.status_code in (401, 403)


def test_invalid_token_returns_401(client):
    resp = client.get(
        "/api/v1/message/conversations/alice",
        headers={"Authorization": "Bearer not-a-jwt"},
    )
    assert resp.status_code == 401


def test_send_message_new_conversation(client, uow, emitter, publisher):
    resp = client.post(
        "/api/v1/message",
        headers=_auth(),
        json={
            "conversationId": "c1",
            "senderUsername": "alice",
            "receiverUsername": "bob",
            "body": "hi",
            "hasOffer": True,
            "offer": {
                "gigTitle": "Logo",
                "price": 50,
                "description": "d",
                "deliveryInDays": 3,
            },
        },
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Message sent successfully"
    assert data["conversationId"] == "c1"
    assert data["messageData"]["body"] == "hi"
    assert data["messageData"]["offer"]["accepted"] is False
    assert [c.conversation_id for c in uow.conversations._store] == ["c1"]
    assert len(emitter.calls) == 1
    assert len(publisher.calls) == 1


def test_send_message_offer_required_when_flagged(client, uow):
    resp = client.post(
        "/api/v1/message",
        headers=_auth(),
        json={
            "conversationId": "c1",
            "senderUsername": "alice",
            "receiverUsername": "bob",
            "hasOffer": True,
        },
    )
    assert resp.status_code == 422
    assert uow.messages._messages == []


def test_get_conversation(client, uow):
    client.post(
        "/api/v1/message",
        headers=_auth(),
        json={"conversationId": "c1", "senderUsername": "alice", "receiverUsername": "bob"},
    )

    resp = client.get("/api/v1/message/conversation/bob/alice", headers=_auth())

    assert resp.status_code == 200
    data = resp.json()
    assert data["message"] == "Conversation retrieved successfully"
    assert [c["conversationId"] for c in data["conversation"]] == ["c1"]


def test_get_messages_between_users(client, uow):
    m1 = make_message(sender="alice", receiver="bob", created_at=at(1))
    m2 = make_message(sender="bob", receiver="alice", created_at=at(2))
    uow.messages._messages.extend([m2, m1])

    resp = client.get("/api/v1/message/alice/bob", headers=_auth())

    assert resp.status_code == 200
    assert [m["id"] for m in resp.json()["messages"]] == [str(m1.id), str(m2.id)]


def test_get_conversation_list(client, uow):
    uow.messages._messages.extend(
        [
            make_message(conversation_id="a", created_at=at(1)),
            make_message(conversation_id="a", created_at=at(2), body="latest"),
        ]
    )

    resp = client.get("/api/v1/message/conversations/alice", headers=_auth())

    assert resp.status_code == 200
    convs = resp.json()["conversations"]
    assert len(convs) == 1
    assert convs[0]["body"] == "latest"


def test_get_user_messages_by_conversation(client, uow):
    uow.messages._messages.append(make_message(conversation_id="c7"))

    resp = client.get("/api/v1/message/c7", headers=_auth())

    assert resp.status_code == 200
    assert len(resp.json()["messages"]) == 1


def test_update_offer(client, uow):
    msg = make_message(offer=make_offer())
    uow.messages._messages.append(msg)

    resp = client.put(
        "/api/v1/message/offer",
        headers=_auth(),
        json={"messageId": str(msg.id), "type": "accepted"},
    )

    assert resp.status_code == 200
    assert resp.json()["singleMessage"]["offer"]["accepted"] is True


def test_update_offer_unknown_type(client, uow):
    msg = make_message(offer=make_offer())
    uow.messages._messages.append(msg)

    resp = client.put(
        "/api/v1/message/offer",
        headers=_auth(),
        json={"messageId": str(msg.id), "type": "refunded"},
    )

    assert resp.status_code == 422


def test_mark_as_read_unknown_message(client):
    resp = client.put(
        "/api/v1/message/mark-as-read",
        headers=_auth(),
        json={"messageId": "missing"},
    )
    assert resp.status_code == 404


def test_mark_multiple_as_read(client, uow, emitter):
    msg = make_message(sender="alice", receiver="bob")
    uow.messages._messages.append(msg)

    resp = client.put(
        "/api/v1/message/mark-multiple-as-read",
        headers=_auth("bob"),
        json={"receiverUsername": "bob", "senderUsername": "alice", "messageId": str(msg.id)},
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Messages marked as read"
    assert emitter.calls == [("message updated", msg.id)]

    again = client.put(
        "/api/v1/message/mark-multiple-as-read",
        headers=_auth("bob"),
        json={"receiverUsername": "bob", "senderUsername": "alice", "messageId": str(msg.id)},
    )
    assert again.status_code == 409


def _send_body() -> dict:
    return {
        "conversationId": "c1",
        "senderUsername": "alice",
        "receiverUsername": "bob",
        "hasConversationId": True,
        "body": "hi",
    }


def test_storage_timeout_returns_503_with_retry_after(client, uow, emitter, monkeypatch):
    async def _timed_out() -> None:
        raise PersistenceError("commit: storage timed out", transient=True)

    monkeypatch.setattr(uow, "commit", _timed_out)

    resp = client.post("/api/v1/message", headers=_auth(), json=_send_body())

    assert resp.status_code == 503
    assert resp.headers["Retry-After"] == "1"
    assert resp.json()["detail"] == "commit: storage timed out"
    assert emitter.calls == []


def test_storage_failure_returns_503_without_retry_after(client, uow, emitter):
    uow.messages_w.fail_writes = True

    resp = client.post("/api/v1/message", headers=_auth(), json=_send_body())

    assert resp.status_code == 503
    assert "Retry-After" not in resp.headers
    assert emitter.calls == []


def test_update_offer_on_plain_message_rejected(client, uow):
    msg = make_message()
    uow.messages._messages.append(msg)

    resp = client.put(
        "/api/v1/message/offer",
        headers=_auth(),
        json={"messageId": str(msg.id), "type": "accepted"},
    )

    assert resp.status_code == 422
    assert uow.messages._messages[0].offer is None


def test_responses_carry_response_time(client):
    resp = client.get("/healthz")
    assert float(resp.headers["X-Response-Time-Ms"]) >= 0
