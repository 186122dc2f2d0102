# plugins/smartcat/script.py
"""
Smartcat Published Script
=========================

Published sites load a script from each integration that provides one. The
Smartcat script loads Smartcat's website translation for the site tag
configured on the site installation.
"""

import json
import logging
import os
from functools import lru_cache

from fastapi import Response

from plugins import IntegrationPlugin
from plugins.smartcat.config import SmartcatSiteInstallationConfiguration, get_smartcat_settings
from runtime.context import RuntimeContext

logger = logging.getLogger(__name__)

SCRIPT_PATH = os.path.join(os.path.dirname(__file__), "script.raw.js")

@lru_cache()
def load_script_template() -> str:
    with open(SCRIPT_PATH, encoding="utf-8") as f:
        return f.read()

def _js_string(value: str) -> str:
    # json.dumps quotes and escapes; the template supplies its own quotes
    return json.dumps(value)[1:-1].replace("'", "\\'").replace("</", "<\\/")

def render_script(site_tag: str) -> str:
    """The published script with the site tag substituted in."""
    settings = get_smartcat_settings()
    return (
        load_script_template()
        .replace("<SITE_TAG>", _js_string(site_tag))
        .replace("<LOADER_URL>", _js_string(settings.LOADER_URL))
    )

class SmartcatIntegration(IntegrationPlugin):
    """
    Plugin serving the Smartcat script on published sites.

    Class Attributes:
        service_name (str): The unique identifier for this plugin
    """

    service_name = "smartcat"

    DESCRIPTION = "Translate published sites with Smartcat"

    def get_event_handlers(self):
        return {
            "fetch_published_script": self.handle_fetch_published_script,
        }

    async def handle_fetch_published_script(self, event, context: RuntimeContext) -> Response:
        site_installation = context.environment.site_installation
        configuration = SmartcatSiteInstallationConfiguration.model_validate(
            site_installation.configuration if site_installation else {}
        )
        if not configuration.site_tag:
            context.logger.debug("No Smartcat site tag configured, serving inactive script")

        return Response(
            content=render_script(configuration.site_tag or ""),
            media_type="application/javascript",
            headers={"Cache-Control": f"max-age={get_smartcat_settings().SCRIPT_MAX_AGE}"}
        )
