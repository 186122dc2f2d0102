"""
Okta Plugin UI Components
=========================

This module provides the configuration component of the Okta plugin. The
platform renders it in the site installation settings; saving it stores the
Okta application credentials on the site installation.
"""

import logging
from typing import Any, Dict

from plugins.okta.auth import get_callback_url
from runtime.context import RuntimeContext, SiteInstallation, assert_site_installation
from runtime.errors import InvalidRequest

logger = logging.getLogger(__name__)

CREDENTIALS_DOCS_URL = "https://developer.okta.com/docs/guides/find-your-app-credentials/main/#find-your-app-integration-credentials"
DOMAIN_DOCS_URL = "https://developer.okta.com/docs/guides/find-your-domain/main/"

CONFIG_FIELDS = ("client_id", "okta_domain", "client_secret")

def _input(label: str, hint: str, docs_url: str, state: str, placeholder: str) -> Dict[str, Any]:
    return {
        "type": "input",
        "label": label,
        "hint": {
            "type": "text",
            "children": [
                hint,
                {"type": "link", "target": {"url": docs_url}, "children": [" More Details"]},
            ],
        },
        "element": {"type": "textinput", "state": state, "placeholder": placeholder},
    }

class OktaUIProvider:
    """Provides the configuration component for the Okta plugin."""

    component_id = "config"

    @staticmethod
    def initial_state(site_installation: SiteInstallation) -> Dict[str, str]:
        configuration = site_installation.configuration or {}
        return {field: configuration.get(field) or "" for field in CONFIG_FIELDS}

    @staticmethod
    def render(state: Dict[str, Any], site_installation: SiteInstallation) -> Dict[str, Any]:
        """
        Render the configuration form.

        Args:
            state: The current component state
            site_installation: The site installation being configured

        Returns:
            dict: The component element tree
        """
        callback_url = get_callback_url(site_installation.urls.public_endpoint)
        return {
            "type": "block",
            "children": [
                _input("Client ID", "The Client ID of your Okta application.",
                       CREDENTIALS_DOCS_URL, "client_id", "Client ID"),
                _input("Okta Domain", "The Domain of your Okta instance.",
                       DOMAIN_DOCS_URL, "okta_domain", "Okta Domain"),
                _input("Client Secret", "The Client Secret of your Okta application.",
                       CREDENTIALS_DOCS_URL, "client_secret", "Client Secret"),
                {"type": "divider", "size": "medium"},
                {
                    "type": "hint",
                    "children": [{
                        "type": "text",
                        "style": "bold",
                        "children": ["The following URL needs to be saved as a Sign-In Redirect URI in Okta:"],
                    }],
                },
                {"type": "codeblock", "content": callback_url},
                {
                    "type": "input",
                    "label": "",
                    "hint": "",
                    "element": {
                        "type": "button",
                        "style": "primary",
                        "disabled": False,
                        "label": "Save",
                        "tooltip": "Save configuration",
                        "onPress": {"action": "save.config"},
                    },
                },
            ],
        }

    @staticmethod
    async def save_config(state: Dict[str, Any], context: RuntimeContext) -> Dict[str, str]:
        """Merge the form state into the site installation configuration."""
        site_installation = assert_site_installation(context.environment)
        configuration = {
            **(site_installation.configuration or {}),
            **{field: state.get(field, "") for field in CONFIG_FIELDS},
        }
        await context.api.update_site_installation(
            site_installation.installation,
            site_installation.site,
            configuration
        )
        context.logger.info(f"Saved Okta configuration for site {site_installation.site}")
        return {"type": "complete"}

    async def render_event(self, event, context: RuntimeContext) -> Dict[str, Any]:
        """
        Handle a ui_render event for the configuration component.

        Raises:
            InvalidRequest: For an unknown component or action
        """
        if event.component_id != self.component_id:
            raise InvalidRequest(f"Unknown component: {event.component_id}")

        site_installation = assert_site_installation(context.environment)
        state = event.state or self.initial_state(site_installation)

        if event.action:
            action = event.action.get("action")
            if action == "save.config":
                return await self.save_config(state, context)
            raise InvalidRequest(f"Unknown action: {action}")

        return {"element": self.render(state, site_installation), "state": state}

# Create an instance of the UI provider
okta_ui = OktaUIProvider()
