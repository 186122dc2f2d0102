# plugins/okta/auth.py
"""
Okta Visitor Authentication Plugin
==================================

This module implements visitor authentication against Okta for published
content. A visitor who needs to sign in is sent to Okta's authorize endpoint;
Okta sends them back to the installation's callback with an authorization
code, which is exchanged for an Okta access token. The claims of that token
are re-issued as a short-lived token signed with the site installation's
signing secret, and the visitor is redirected to the published content with
that token attached.

The location the visitor originally asked for travels through Okta in the
``state`` parameter as ``state-<location>``. Only the first ``-`` separates
the prefix from the location, so locations that themselves contain ``-`` come
back unchanged.
"""

import json
import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from fastapi.responses import RedirectResponse

from auth.jwt_service import decode_token_claims, sign_visitor_token
from plugins import IntegrationPlugin
from plugins.okta.config import (
    OktaAuthorizeConfig,
    OktaCredentials,
    OktaSiteInstallationConfiguration,
    get_okta_settings
)
from runtime.context import RuntimeContext, assert_org_id, assert_site_installation
from runtime.errors import (
    DownstreamDataMissing,
    InvalidRequest,
    MissingSigningKey,
    UpstreamAuthFailure
)

# Set up logging
logger = logging.getLogger(__name__)

# Get Okta settings
settings = get_okta_settings()

STATE_PREFIX = "state"
STATE_SEPARATOR = "-"

def encode_state(location: Optional[str]) -> str:
    """Encode the requested location as an OAuth state value."""
    return f"{STATE_PREFIX}{STATE_SEPARATOR}{location or ''}"

def decode_state_location(state: Optional[str]) -> str:
    """
    Decode the location carried by an OAuth state value.

    Everything after the first separator is the location, separators
    included. A state without any separator carries no location.
    """
    if not state:
        return ""
    _, separator, location = state.partition(STATE_SEPARATOR)
    return location if separator else ""

def get_callback_url(public_endpoint: str) -> str:
    """The visitor-auth callback URL of an installation."""
    return f"{public_endpoint}{settings.CALLBACK_PATH}"

class OktaVisitorAuthPlugin(IntegrationPlugin):
    """
    Plugin for Okta visitor authentication.

    Handles the ``fetch_visitor_authentication`` event (redirect to Okta),
    the visitor-auth callback (token exchange and re-signing) and the
    rendering of the configuration component.

    Class Attributes:
        service_name (str): The unique identifier for this plugin
    """

    service_name = "okta"

    DESCRIPTION = "Authenticate visitors of published content with Okta"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Initialize the Okta plugin.

        Args:
            transport: Optional httpx transport used for calls to Okta
        """
        self._transport = transport

    def get_event_handlers(self):
        return {
            "fetch_visitor_authentication": self.handle_fetch_visitor_authentication,
            "ui_render": self.handle_ui_render,
        }

    def get_authorization_url(
        self,
        config: OktaAuthorizeConfig,
        redirect_uri: str,
        location: Optional[str] = None
    ) -> str:
        """
        Build the Okta authorization URL for a visitor.

        Args:
            config (OktaAuthorizeConfig): Client id and Okta domain
            redirect_uri (str): The installation's visitor-auth callback URL
            location (Optional[str]): The location the visitor asked for

        Returns:
            str: The URL to redirect the visitor to
        """
        query = urlencode({
            "client_id": config.client_id,
            "response_type": "code",
            "redirect_uri": redirect_uri,
            "response_mode": "query",
            "scope": settings.SCOPE,
            "state": encode_state(location),
        })
        return f"https://{config.okta_domain}{settings.AUTHORIZE_PATH}?{query}"

    async def handle_fetch_visitor_authentication(self, event, context: RuntimeContext) -> RedirectResponse:
        """
        Redirect a visitor to Okta to sign in.

        Raises:
            ConfigurationMissing: If the client id or Okta domain is not configured
            InstallationMissing: If the context has no site installation
        """
        site_installation = assert_site_installation(context.environment)
        configuration = OktaSiteInstallationConfiguration.model_validate(
            site_installation.configuration
        ).require_authorize_config()

        url = self.get_authorization_url(
            configuration,
            get_callback_url(site_installation.urls.public_endpoint),
            event.location
        )
        return RedirectResponse(url, status_code=302)

    async def exchange_code(
        self,
        credentials: OktaCredentials,
        code: str,
        redirect_uri: str,
        context: RuntimeContext
    ) -> str:
        """
        Exchange an authorization code for an Okta access token.

        Okta's error details are logged and never returned to the caller.

        Returns:
            str: The Okta access token

        Raises:
            UpstreamAuthFailure: If Okta refuses the exchange or returns no token
        """
        access_token_url = f"https://{credentials.okta_domain}{settings.TOKEN_PATH}"
        async with httpx.AsyncClient(transport=self._transport) as client:
            response = await client.post(
                access_token_url,
                data={
                    "grant_type": "authorization_code",
                    "client_id": credentials.client_id,
                    "client_secret": credentials.client_secret,
                    "code": code,
                    "redirect_uri": redirect_uri,
                },
                headers={"content-type": "application/x-www-form-urlencoded"}
            )

        if not response.is_success:
            error_response = _read_json(response)
            context.logger.debug(json.dumps(error_response, indent=2))
            context.logger.debug(
                f"Did not receive access token. Error: {error_response.get('error', '')} "
                f"{error_response.get('error_description', '')}"
            )
            raise UpstreamAuthFailure("Error: Could not fetch token from Okta")

        token_data = _read_json(response)
        access_token = token_data.get("access_token")
        if not access_token:
            raise UpstreamAuthFailure("Error: No Access Token found in response from Okta")

        return access_token

    async def handle_visitor_auth_callback(
        self,
        code: Optional[str],
        state: Optional[str],
        context: RuntimeContext
    ) -> RedirectResponse:
        """
        Complete a visitor's sign-in after Okta redirects them back.

        Args:
            code (Optional[str]): The authorization code from Okta
            state (Optional[str]): The state sent with the authorization request
            context (RuntimeContext): The request context

        Returns:
            RedirectResponse: Redirect to the published content with ``jwt_token``

        Raises:
            ConfigurationMissing: Client id, client secret or Okta domain missing (400)
            InvalidRequest: No authorization code (400)
            UpstreamAuthFailure: Okta refused the exchange (401)
            MissingSigningKey: No site installation signing secret (400)
            SigningFailure: The claims could not be signed (500)
            DownstreamDataMissing: The site has no published URL (500)
        """
        site_installation = assert_site_installation(context.environment)
        credentials = OktaSiteInstallationConfiguration.model_validate(
            site_installation.configuration
        ).require_credentials()

        if not code:
            raise InvalidRequest("Error: Missing authorization code")

        access_token = await self.exchange_code(
            credentials,
            code,
            get_callback_url(site_installation.urls.public_endpoint),
            context
        )

        # Okta already includes user and custom claims in the access token
        claims = decode_token_claims(access_token)
        if claims is None:
            raise UpstreamAuthFailure("Error: Could not decode token from Okta")

        private_key = context.environment.signing_secrets.site_installation
        if not private_key:
            raise MissingSigningKey("Error: Missing private key from site installation")
        jwt_token = sign_visitor_token(claims, private_key)

        published_content_urls = await context.api.get_published_content_urls(
            assert_org_id(context.environment),
            site_installation.site
        )
        published_content_url = published_content_urls.get("published")
        if not published_content_url or not jwt_token:
            raise DownstreamDataMissing("Error: Either JWT token or site's published URL is missing")

        location = decode_state_location(state)
        url = httpx.URL(f"{published_content_url}{location}").copy_add_param("jwt_token", jwt_token)
        context.logger.info(f"Visitor authenticated for site {site_installation.site}")
        return RedirectResponse(str(url), status_code=302)

    async def handle_ui_render(self, event, context: RuntimeContext) -> Dict[str, Any]:
        from plugins.okta.ui import okta_ui
        return await okta_ui.render_event(event, context)

def _read_json(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {"error": response.text}
    return data if isinstance(data, dict) else {}
