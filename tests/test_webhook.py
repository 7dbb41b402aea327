"""Tests for tenant resolution and the LINE webhook."""

import httpx
import pytest

from config import TENANT_POLICY_NONE
from conftest import register_channel
from utils import line_client
from utils.group_manager import GroupManager
from utils.tenant_resolver import TenantResolver


@pytest.fixture
def second_channel(db, admin, channel):
    return register_channel(db, admin, name="Second", line_channel_id="1650000002")


def test_resolves_registered_group(db, channel, second_channel):
    GroupManager(db).ensure_group(second_channel.id, "C-second")
    assert TenantResolver(db).resolve("C-second").id == second_channel.id


def test_unknown_group_falls_back_to_oldest_active(db, channel, second_channel):
    resolver = TenantResolver(db)
    assert resolver.resolve("C-unknown").id == channel.id
    assert resolver.resolve(None).id == channel.id


def test_inactive_owner_falls_back(db, channel, second_channel):
    GroupManager(db).ensure_group(second_channel.id, "C-second")
    second_channel.is_active = False
    db.commit()
    assert TenantResolver(db).resolve("C-second").id == channel.id


def test_no_active_channel_resolves_to_none(db, channel):
    channel.is_active = False
    db.commit()
    assert TenantResolver(db).resolve("C-anything") is None


def test_policy_none_has_no_default(db, channel, group):
    resolver = TenantResolver(db, default_policy=TENANT_POLICY_NONE)
    assert resolver.resolve("C-unknown") is None
    assert resolver.resolve(group.line_group_id).id == channel.id


def test_unknown_policy_is_rejected(db):
    with pytest.raises(ValueError):
        TenantResolver(db, default_policy="newest")


@pytest.fixture
def replies(monkeypatch):
    sent = []

    def fake_reply_text(channel_access_token, reply_token, text):
        sent.append((channel_access_token, reply_token, text))
        return True

    monkeypatch.setattr(line_client, "reply_text", fake_reply_text)
    return sent


def trigger_event(group_id="C-line-group-1", text="LIFF起動", reply_token="reply-1"):
    return {
        "type": "message",
        "replyToken": reply_token,
        "source": {"type": "group", "groupId": group_id, "userId": "U1"},
        "message": {"type": "text", "id": "1", "text": text},
    }


def test_webhook_replies_with_liff_link(client, channel, group, replies):
    resp = client.post("/webhook", json={"events": [trigger_event()]})
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "replied": 1}
    [(token, reply_token, text)] = replies
    assert token == channel.line_channel_access_token
    assert reply_token == "reply-1"
    assert text.endswith(f"https://liff.line.me/{channel.liff_id}")


def test_webhook_ignores_other_events(client, channel, replies):
    events = [
        trigger_event(text="hello"),
        {"type": "follow", "replyToken": "r", "source": {"type": "user", "userId": "U1"}},
        {"type": "message", "message": {"type": "sticker"}},
    ]
    resp = client.post("/webhook", json={"events": events})
    assert resp.json() == {"status": "ok", "replied": 0}
    assert replies == []


def test_webhook_without_channel_does_not_reply(client, replies):
    resp = client.post("/webhook", json={"events": [trigger_event()]})
    assert resp.status_code == 200
    assert resp.json()["replied"] == 0
    assert replies == []


def test_webhook_empty_events(client, replies):
    resp = client.post("/webhook", json={"events": []})
    assert resp.json() == {"status": "ok", "replied": 0}


def test_webhook_rejects_bad_payload(client):
    resp = client.post("/webhook", json={"events": "nope"})
    assert resp.status_code == 400


def test_reply_failure_is_not_raised(client, channel, monkeypatch):
    monkeypatch.setattr(line_client, "reply_text", lambda *args: False)
    resp = client.post("/webhook", json={"events": [trigger_event()]})
    assert resp.status_code == 200
    assert resp.json()["replied"] == 0


def test_reply_text_refuses_missing_credentials():
    assert line_client.reply_text("", "reply-token", "hi") is False
    assert line_client.reply_text("token", None, "hi") is False


def test_reply_text_posts_to_line(monkeypatch):
    captured = {}

    def handler(request):
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["authorization"]
        captured["body"] = request.content.decode("utf-8")
        return httpx.Response(200, json={})

    monkeypatch.setattr(line_client, "_httpx_client", httpx.Client(transport=httpx.MockTransport(handler)))
    assert line_client.reply_text("tok", "reply-1", "hello") is True
    assert captured["url"] == "https://api.line.me/v2/bot/message/reply"
    assert captured["auth"] == "Bearer tok"
    assert '"replyToken":"reply-1"' in captured["body"].replace(" ", "")


def test_reply_text_reports_rejection(monkeypatch):
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(400, text="bad")))
    monkeypatch.setattr(line_client, "_httpx_client", client)
    assert line_client.reply_text("tok", "reply-1", "hello") is False


def test_reply_text_reports_transport_error(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("down", request=request)

    monkeypatch.setattr(line_client, "_httpx_client", httpx.Client(transport=httpx.MockTransport(handler)))
    assert line_client.reply_text("tok", "reply-1", "hello") is False
