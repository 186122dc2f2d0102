# plugins/slack/client.py
"""
Slack Web API client and request verification.
"""

import hashlib
import hmac
import logging
import time
from typing import Any, Dict, Optional

import httpx

from plugins.slack.config import get_slack_settings
from runtime.errors import ExternalServiceError

logger = logging.getLogger(__name__)

settings = get_slack_settings()

def compute_signature(signing_secret: str, timestamp: str, body: bytes) -> str:
    """Compute the v0 signature Slack sends with every request."""
    base = b"v0:" + timestamp.encode() + b":" + body
    digest = hmac.new(signing_secret.encode(), base, hashlib.sha256).hexdigest()
    return f"v0={digest}"

def verify_slack_request(
    body: bytes,
    timestamp: Optional[str],
    signature: Optional[str],
    signing_secret: str,
    now: Optional[float] = None
) -> bool:
    """
    Check that a request was signed by Slack and is recent.

    Args:
        body (bytes): The raw request body
        timestamp (Optional[str]): X-Slack-Request-Timestamp header
        signature (Optional[str]): X-Slack-Signature header
        signing_secret (str): The Slack app's signing secret
        now (Optional[float]): Current time, defaults to time.time()

    Returns:
        bool: True if the signature matches and the request is not stale
    """
    if not timestamp or not signature or not signing_secret:
        return False

    try:
        request_time = int(timestamp)
    except ValueError:
        return False

    current_time = time.time() if now is None else now
    if abs(current_time - request_time) > settings.MAX_REQUEST_AGE_SECONDS:
        logger.warning(f"Rejected stale Slack request from {timestamp}")
        return False

    expected = compute_signature(signing_secret, timestamp, body)
    return hmac.compare_digest(expected.encode(), signature.encode())

class SlackClient:
    """
    Client for the Slack Web API, authenticated with a bot access token.
    """

    def __init__(self, access_token: Optional[str], transport: Optional[httpx.AsyncBaseTransport] = None):
        self._access_token = access_token
        self._transport = transport

    async def call(self, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Call a Slack Web API method.

        Raises:
            ExternalServiceError: If Slack answers with an error status or ``ok: false``
        """
        headers = {"Content-Type": "application/json; charset=utf-8"}
        if self._access_token:
            headers["Authorization"] = f"Bearer {self._access_token}"

        # Slack rejects explicit nulls in some fields
        body = {key: value for key, value in payload.items() if value is not None}

        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(f"{settings.API_URL}/{method}", json=body, headers=headers)

        if response.is_error:
            logger.error(f"Slack {method} failed with status {response.status_code}: {response.text}")
            raise ExternalServiceError(f"Slack API request failed ({response.status_code})")

        data = response.json()
        if not data.get("ok"):
            logger.error(f"Slack {method} returned error: {data.get('error')}")
            raise ExternalServiceError(f"Slack API error: {data.get('error', 'unknown')}")
        return data

    async def post_message(self, channel: str, thread_ts: Optional[str] = None, user: Optional[str] = None, **payload) -> Dict[str, Any]:
        """Post a message, ephemeral to ``user`` when one is given."""
        method = "chat.postEphemeral" if user else "chat.postMessage"
        return await self.call(method, {"channel": channel, "thread_ts": thread_ts, "user": user, **payload})
