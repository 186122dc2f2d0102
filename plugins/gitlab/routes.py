# plugins/gitlab/routes.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request

from plugins import RoutePlugin
from plugins.gitlab.webhooks import verify_webhook_token
from runtime.context import RuntimeContext, assert_space_installation, get_runtime_context
from runtime.errors import InvalidRequest, InvalidSignature

logger = logging.getLogger(__name__)

class GitLabRoutes(RoutePlugin):
    """
    Routes for GitLab webhook deliveries.

    Endpoints:
        POST /webhook - Receive a delivery from the project webhook
    """

    service_name = "gitlab"

    def get_router(self) -> APIRouter:
        router = APIRouter(tags=["gitlab"])

        @router.post("/webhook")
        async def gitlab_webhook(
            request: Request,
            x_gitlab_token: Optional[str] = Header(None),
            x_gitlab_event: Optional[str] = Header(None),
            context: RuntimeContext = Depends(get_runtime_context)
        ):
            space_installation = assert_space_installation(context.environment)
            if not verify_webhook_token(x_gitlab_token, space_installation.installation, space_installation.space):
                logger.warning(f"Rejected webhook delivery for space {space_installation.space}")
                raise InvalidSignature("Invalid webhook token")

            try:
                payload = await request.json()
            except ValueError:
                raise InvalidRequest("Invalid webhook payload")

            from plugin_manager import plugin_manager
            gitlab = plugin_manager.create_integration_plugin("gitlab")
            if not gitlab:
                raise HTTPException(status_code=500, detail="GitLab integration not available")

            return await gitlab.handle_webhook(x_gitlab_event, payload, context)

        return router
