"""Tests for access keys and channel registration."""

import re
from datetime import timedelta

import pytest
from sqlalchemy import inspect

from core.exceptions import AccessKeyRejectedError, BadRequestError
from models.access_key import AccessKeyModel
from models.base import utcnow
from models.channel import ChannelModel
from models.group import GroupModel
from utils.access_key_manager import AccessKeyManager, generate_access_key

KEY_FORMAT = re.compile(r"^[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}-[A-Z0-9]{4}$")


def registration_body(key, line_channel_id="1650000001"):
    return {
        "accessKey": key,
        "name": "Tanaka family",
        "lineChannelId": line_channel_id,
        "lineChannelAccessToken": "access-token",
        "lineChannelSecret": "channel-secret",
        "liffId": "1650000001-abcd",
    }


def test_generated_key_format():
    keys = {generate_access_key() for _ in range(50)}
    assert all(KEY_FORMAT.match(k) for k in keys)
    assert len(keys) == 50


def test_issue_key_via_api(client, auth_headers, admin):
    resp = client.post("/api/admin/access-keys", json={"expiresInDays": 3}, headers=auth_headers)
    assert resp.status_code == 201
    body = resp.json()
    assert KEY_FORMAT.match(body["key"])
    assert body["created_by_admin_id"] == admin.id
    assert body["used_at"] is None
    assert body["channel_id"] is None


def test_issue_key_without_body_uses_default(client, auth_headers):
    resp = client.post("/api/admin/access-keys", headers=auth_headers)
    assert resp.status_code == 201


@pytest.mark.parametrize("days", [0, -1, 10000])
def test_issue_key_rejects_out_of_range_expiry(db, admin, days):
    with pytest.raises(BadRequestError):
        AccessKeyManager(db).issue_access_key(admin.id, expires_in_days=days)


def test_register_channel_redeems_key(client, db, access_key):
    resp = client.post("/api/channels/register", json=registration_body(access_key.key))
    assert resp.status_code == 201
    body = resp.json()
    assert body["name"] == "Tanaka family"
    assert body["is_active"] is True
    assert "line_channel_secret" not in body
    assert "line_channel_access_token" not in body

    db.expire_all()
    key = db.query(AccessKeyModel).filter(AccessKeyModel.id == access_key.id).one()
    assert key.used_at is not None
    assert key.channel_id == body["id"]


def test_register_accepts_lowercase_key(client, access_key):
    resp = client.post("/api/channels/register", json=registration_body(access_key.key.lower()))
    assert resp.status_code == 201


def test_key_cannot_be_redeemed_twice(client, db, access_key):
    first = client.post("/api/channels/register", json=registration_body(access_key.key))
    assert first.status_code == 201

    second = client.post(
        "/api/channels/register", json=registration_body(access_key.key, "1650000002")
    )
    assert second.status_code == 403
    assert second.json() == {"error": "Invalid or expired access key"}
    assert db.query(ChannelModel).count() == 1


def test_expired_key_is_rejected(client, db, access_key):
    access_key.expires_at = utcnow() - timedelta(minutes=1)
    db.commit()

    resp = client.post("/api/channels/register", json=registration_body(access_key.key))
    assert resp.status_code == 403
    assert db.query(ChannelModel).count() == 0


def test_unknown_key_is_rejected(db):
    from utils.channel_manager import ChannelManager

    with pytest.raises(AccessKeyRejectedError):
        ChannelManager(db).register_channel(
            access_key="AAAA-BBBB-CCCC-DDDD",
            name="x",
            line_channel_id="1",
            line_channel_access_token="t",
            line_channel_secret="s",
            liff_id="l",
        )
    assert db.query(ChannelModel).count() == 0


def test_register_missing_field_is_400(client, access_key):
    body = registration_body(access_key.key)
    del body["liffId"]
    resp = client.post("/api/channels/register", json=body)
    assert resp.status_code == 400
    assert "liffId" in resp.json()["error"]


def test_list_access_keys_shows_creator_and_channel(client, auth_headers, access_key):
    client.post("/api/channels/register", json=registration_body(access_key.key))
    unused = client.post("/api/admin/access-keys", headers=auth_headers).json()

    resp = client.get("/api/admin/access-keys", headers=auth_headers)
    assert resp.status_code == 200
    items = {item["id"]: item for item in resp.json()}
    assert items[access_key.id]["created_by_username"] == "root"
    assert items[access_key.id]["channel_name"] == "Tanaka family"
    assert items[unused["id"]]["channel_name"] is None


def test_delete_unused_key(client, auth_headers, access_key):
    resp = client.delete(f"/api/admin/access-keys/{access_key.id}", headers=auth_headers)
    assert resp.status_code == 200
    resp = client.delete(f"/api/admin/access-keys/{access_key.id}", headers=auth_headers)
    assert resp.status_code == 404


def test_used_key_cannot_be_deleted(client, auth_headers, access_key):
    client.post("/api/channels/register", json=registration_body(access_key.key))
    resp = client.delete(f"/api/admin/access-keys/{access_key.id}", headers=auth_headers)
    assert resp.status_code == 409


def test_update_channel(client, auth_headers, channel):
    resp = client.patch(
        f"/api/admin/channels/{channel.id}",
        json={"name": "Renamed", "isActive": False},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Renamed"
    assert body["is_active"] is False

    resp = client.get(f"/api/admin/channels/{channel.id}", headers=auth_headers)
    assert resp.json()["name"] == "Renamed"


def test_update_channel_ignores_nulls(client, auth_headers, channel):
    resp = client.patch(
        f"/api/admin/channels/{channel.id}", json={"name": None}, headers=auth_headers
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Family"


def test_get_missing_channel(client, auth_headers):
    resp = client.get("/api/admin/channels/999", headers=auth_headers)
    assert resp.status_code == 404
    assert resp.json() == {"error": "Channel not found"}


def test_models_rely_on_explicit_joins():
    for model in (AccessKeyModel, ChannelModel, GroupModel):
        assert not inspect(model).relationships
