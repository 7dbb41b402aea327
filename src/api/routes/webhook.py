"""LINE webhook route.

Answers the trigger phrase with a deep link into the group's LIFF app.
Signature verification of inbound events is not performed.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body

from config import LIFF_URL_BASE, WEBHOOK_TRIGGER_TEXT
from core.dependencies import TenantResolverDep
from core.exceptions import BadRequestError
from utils import line_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Webhook"])


def is_trigger_event(event: Any) -> bool:
    """True for a text message event whose text is the trigger phrase."""
    if not isinstance(event, dict) or event.get("type") != "message":
        return False
    message = event.get("message") or {}
    if not isinstance(message, dict) or message.get("type") != "text":
        return False
    return (message.get("text") or "").strip() == WEBHOOK_TRIGGER_TEXT


def extract_line_group_id(event: Dict[str, Any]) -> Optional[str]:
    source = event.get("source") or {}
    if not isinstance(source, dict):
        return None
    return source.get("groupId") or source.get("roomId")


def liff_url(liff_id: str) -> str:
    return f"{LIFF_URL_BASE}/{liff_id}"


@router.post("/webhook", summary="LINE Messaging API webhook")
def line_webhook(
    tenant_resolver: TenantResolverDep,
    payload: Dict[str, Any] = Body(...),
) -> dict:
    """Handle a batch of LINE webhook events.

    For each trigger message the owning channel is resolved from the event's
    group or room. Without a channel no reply is attempted. Reply failures
    are logged by the client and do not fail the webhook.

    Returns:
        ``{"status": "ok", "replied": <number of replies LINE accepted>}``.
    """
    events = payload.get("events")
    if not isinstance(events, list):
        raise BadRequestError("events must be a list")

    replied = 0
    for event in events:
        if not is_trigger_event(event):
            continue

        line_group_id = extract_line_group_id(event)
        channel = tenant_resolver.resolve(line_group_id)
        if channel is None:
            logger.warning(
                "No active channel for LINE group %s; not replying", line_group_id
            )
            continue

        ok = line_client.reply_text(
            channel.line_channel_access_token,
            event.get("replyToken"),
            f"グループツールを開く: {liff_url(channel.liff_id)}",
        )
        if ok:
            replied += 1

    return {"status": "ok", "replied": replied}
