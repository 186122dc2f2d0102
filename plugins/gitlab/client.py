# plugins/gitlab/client.py
"""
GitLab REST API Client
======================

Minimal async client for the GitLab v4 REST API: project webhooks and commit
statuses. Requests authenticate with the installation's access token.
"""

import logging
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from plugins.gitlab.config import get_gitlab_settings
from runtime.errors import ExternalServiceError

logger = logging.getLogger(__name__)

settings = get_gitlab_settings()

# GitLab spells the failure state differently from the platform
COMMIT_STATES = {
    "running": "running",
    "success": "success",
    "failure": "failed",
}

def project_path(project: str) -> str:
    """URL-encode a project id or path for use in an API path."""
    return quote(str(project), safe="")

class GitLabClient:
    """
    Client for a GitLab instance.

    Attributes:
        base_url (str): Root of the GitLab API (e.g. https://gitlab.com/api/v4)
    """

    def __init__(
        self,
        auth_token: str,
        gitlab_host: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        host = (gitlab_host or settings.DEFAULT_HOST).rstrip("/")
        self.base_url = f"{host}{settings.API_PATH}"
        self._auth_token = auth_token
        self._transport = transport

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False
    ) -> Any:
        """
        Send a request to the GitLab API and return the decoded JSON body.

        Raises:
            ExternalServiceError: If GitLab answers with an error status
        """
        headers = {
            "Authorization": f"Bearer {self._auth_token}",
            "Accept": "application/json",
        }
        async with httpx.AsyncClient(base_url=self.base_url, transport=self._transport) as client:
            response = await client.request(method, path, json=json, headers=headers)

        if response.status_code == 404 and allow_not_found:
            return None

        if response.is_error:
            logger.error(f"GitLab API {method} {path} failed with status {response.status_code}: {response.text}")
            raise ExternalServiceError(f"GitLab API request failed ({response.status_code})")

        if not response.content:
            return None
        return response.json()

    async def add_project_hook(self, project: str, url: str, token: str) -> int:
        """
        Install a push webhook on a project.

        Returns:
            int: The id GitLab assigned to the hook
        """
        hook = await self.request(
            "POST",
            f"/projects/{project_path(project)}/hooks",
            json={
                "url": url,
                "token": token,
                "push_events": True,
                "merge_requests_events": False,
                "enable_ssl_verification": True,
            }
        )
        return hook["id"]

    async def delete_project_hook(self, project: str, hook_id: int) -> None:
        """Delete a project webhook. A hook that no longer exists is not an error."""
        result = await self.request(
            "DELETE",
            f"/projects/{project_path(project)}/hooks/{hook_id}",
            allow_not_found=True
        )
        if result is None:
            logger.debug(f"Webhook {hook_id} of project {project} already removed")

    async def update_commit_status(
        self,
        project: str,
        sha: str,
        state: str,
        context: str,
        description: str,
        target_url: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create or update a commit status.

        Args:
            state: One of "running", "success" or "failure"
        """
        body = {
            "state": COMMIT_STATES[state],
            "name": context,
            "description": description,
        }
        if target_url:
            body["target_url"] = target_url
        return await self.request(
            "POST",
            f"/projects/{project_path(project)}/statuses/{sha}",
            json=body
        )
