# plugins/slack/__init__.py
"""
Slack Plugin Package
====================

Answers questions asked in Slack with the platform's AI search.

Integrations:
------------
- SlackIntegration: Relays questions to the search and posts the answers

Routes:
------
- SlackRoutes: Receives slash commands
"""

from typing import Optional

import httpx

from plugins import IntegrationPlugin, register_integration_plugin, register_route_plugin
from .actions import query_lens
from .routes import SlackRoutes

class SlackIntegration(IntegrationPlugin):
    service_name = "slack"

    DESCRIPTION = "Ask questions about your documentation from Slack"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._transport = transport

    def get_event_handlers(self):
        # Slack talks to the proxy through its routes only
        return {}

    async def query_lens(self, **kwargs):
        await query_lens(transport=self._transport, **kwargs)

register_integration_plugin(SlackIntegration)
register_route_plugin(SlackRoutes)
