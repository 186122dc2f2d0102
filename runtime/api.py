"""
Platform API Client
===================

Thin async client for the documentation platform's REST API. Integrations use
it to read published content URLs, persist installation configuration, look up
installations and ask the platform's search.

Each call opens its own httpx.AsyncClient; nothing is kept between requests.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from runtime.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class PlatformAPIClient:
    """
    Client for the host platform API.

    Attributes:
        base_url (str): Root URL of the platform API
        token (Optional[str]): Bearer token (installation or integration token)
        integration (str): Name of the integration the client acts for
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        integration: str = "",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.integration = integration
        self._transport = transport

    def with_token(self, token: str) -> "PlatformAPIClient":
        """Return a copy of this client authenticated with another token."""
        return PlatformAPIClient(
            base_url=self.base_url,
            token=token,
            integration=self.integration,
            transport=self._transport,
        )

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Send a request to the platform API and return the decoded JSON body.

        Raises:
            ExternalServiceError: If the platform answers with a non-2xx status
        """
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        async with httpx.AsyncClient(base_url=self.base_url, transport=self._transport) as client:
            response = await client.request(method, path, params=params, json=json, headers=headers)

        if response.is_error:
            logger.error(
                f"Platform API {method} {path} failed with status {response.status_code}: {response.text}"
            )
            raise ExternalServiceError(f"Platform API request failed ({response.status_code})")

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def get_site(self, organization_id: str, site_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/orgs/{organization_id}/sites/{site_id}")

    async def get_published_content_urls(self, organization_id: str, site_id: str) -> Dict[str, Any]:
        """Get the published URLs of a site (``published``, ``app``, ...)."""
        site = await self.get_site(organization_id, site_id)
        return (site or {}).get("urls") or {}

    async def update_site_installation(
        self,
        installation_id: str,
        site_id: str,
        configuration: Dict[str, Any],
    ) -> Dict[str, Any]:
        return await self.request(
            "PATCH",
            f"/integrations/{self.integration}/installations/{installation_id}/sites/{site_id}",
            json={"configuration": configuration},
        )

    async def update_space_installation(
        self,
        installation_id: str,
        space_id: str,
        configuration: Dict[str, Any],
    ) -> Dict[str, Any]:
        return await self.request(
            "PATCH",
            f"/integrations/{self.integration}/installations/{installation_id}/spaces/{space_id}",
            json={"configuration": configuration},
        )

    async def list_installations(self, external_id: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"externalId": external_id} if external_id else None
        data = await self.request(
            "GET", f"/integrations/{self.integration}/installations", params=params
        )
        return (data or {}).get("items", [])

    async def create_installation_token(self, installation_id: str) -> str:
        data = await self.request(
            "POST", f"/integrations/{self.integration}/installations/{installation_id}/tokens"
        )
        return data["token"]

    async def get_current_revision(self, space_id: str) -> Dict[str, Any]:
        return await self.request("GET", f"/spaces/{space_id}/content")

    async def ask_query(self, query: str) -> Dict[str, Any]:
        """Ask the platform's AI search. Returns ``{"answer": ...}``."""
        return await self.request("GET", "/search/ask", params={"query": query}) or {}

    async def import_git_repository(
        self,
        space_id: str,
        url: str,
        ref: str,
        commit_message: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = {"url": url, "ref": ref}
        if commit_message:
            body["commitMessage"] = commit_message
        return await self.request("POST", f"/spaces/{space_id}/git/import", json=body)
