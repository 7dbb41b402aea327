"""LINE Messaging API client.

Replies are best effort: a failure is logged and reported as False, never
raised, so it cannot undo the state change that triggered it.
"""

import logging
from typing import Optional

import httpx

from config import LINE_API_BASE, LINE_REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

_httpx_client: Optional[httpx.Client] = None


def _client() -> httpx.Client:
    global _httpx_client
    if _httpx_client is None:
        _httpx_client = httpx.Client(timeout=LINE_REQUEST_TIMEOUT)
    return _httpx_client


def reply_text(channel_access_token: str, reply_token: str, text: str) -> bool:
    """Send a text reply to a webhook event.

    Args:
        channel_access_token: The answering channel's access token.
        reply_token: Reply token from the inbound event.
        text: Message body.

    Returns:
        True if LINE accepted the reply, False otherwise.
    """
    if not channel_access_token:
        logger.error("Refusing to reply without a channel access token")
        return False
    if not reply_token:
        logger.error("Cannot reply: event has no reply token")
        return False

    url = f"{LINE_API_BASE}/v2/bot/message/reply"
    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {channel_access_token}",
    }
    body = {
        "replyToken": reply_token,
        "messages": [{"type": "text", "text": text}],
    }
    try:
        resp = _client().post(url, headers=headers, json=body)
    except httpx.HTTPError as e:
        logger.error("LINE reply failed: %s", e)
        return False

    if resp.status_code >= 400:
        logger.error("LINE reply rejected: status=%s body=%s", resp.status_code, resp.text)
        return False
    return True
