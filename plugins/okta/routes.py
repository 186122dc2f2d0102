# plugins/okta/routes.py
"""
Okta Routes
===========

HTTP routes for Okta visitor authentication. The host forwards requests made
to the installation's public endpoint here, mounted under "/okta".
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from plugins import RoutePlugin
from runtime.context import RuntimeContext, get_runtime_context

logger = logging.getLogger(__name__)

class OktaRoutes(RoutePlugin):
    """
    Plugin for Okta routes.

    Class Attributes:
        service_name (str): The unique identifier for this plugin
    """

    service_name = "okta"

    def get_router(self) -> APIRouter:
        """
        Get the router for Okta routes.

        Returns:
            APIRouter: FastAPI router with the visitor-auth callback
        """
        router = APIRouter(tags=["okta", "visitor-auth"])

        @router.get("/visitor-auth/response")
        async def visitor_auth_response(
            code: Optional[str] = Query(None),
            state: Optional[str] = Query(None),
            context: RuntimeContext = Depends(get_runtime_context)
        ):
            """
            Handle Okta's redirect after a visitor signed in.

            Args:
                code (str): The authorization code returned by Okta
                state (str, optional): The state sent with the authorization request
                context (RuntimeContext): The request context

            Returns:
                RedirectResponse: Redirect to the published content
            """
            from plugin_manager import plugin_manager

            okta = plugin_manager.create_integration_plugin("okta")
            if not okta:
                raise HTTPException(
                    status_code=500,
                    detail="Okta plugin not available"
                )

            return await okta.handle_visitor_auth_callback(code, state, context)

        return router
