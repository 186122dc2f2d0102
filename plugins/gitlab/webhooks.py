# plugins/gitlab/webhooks.py
"""
Project webhook management for the GitLab integration.

Every space installation gets one push webhook on its GitLab project. The
webhook's secret token is derived from the installation and space ids, so
incoming deliveries can be checked without storing the token anywhere.
"""

import hashlib
import hmac
import logging
from typing import Optional

import httpx

from config import get_settings
from plugins.gitlab.client import GitLabClient
from plugins.gitlab.config import GitLabProjectConfig

logger = logging.getLogger(__name__)

def get_webhook_token(installation_id: str, space_id: str) -> str:
    """Derive the secret token of the webhook installed for a space installation."""
    message = f"{installation_id}/{space_id}".encode()
    return hmac.new(get_settings().SECRET_KEY.encode(), message, hashlib.sha256).hexdigest()

def verify_webhook_token(token: Optional[str], installation_id: str, space_id: str) -> bool:
    if not token:
        return False
    return hmac.compare_digest(token.encode(), get_webhook_token(installation_id, space_id).encode())

async def install_webhook(
    config: GitLabProjectConfig,
    url: str,
    token: str,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> int:
    """
    Install a push webhook on the configured project.

    Returns:
        int: The id of the new hook
    """
    client = GitLabClient(config.auth_token, config.gitlab_host, transport=transport)
    hook_id = await client.add_project_hook(config.project, url, token)
    logger.info(f"Installed webhook {hook_id} on project {config.project}")
    return hook_id

async def uninstall_webhook(
    config: GitLabProjectConfig,
    hook_id: int,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> None:
    client = GitLabClient(config.auth_token, config.gitlab_host, transport=transport)
    await client.delete_project_hook(config.project, hook_id)
    logger.info(f"Uninstalled webhook {hook_id} from project {config.project}")
