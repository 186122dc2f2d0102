# plugins/okta/__init__.py
"""
Okta Plugin Package
===================

This package provides visitor authentication with Okta for published
content.

Integrations:
------------
- OktaVisitorAuthPlugin: Handles the fetch_visitor_authentication and
  ui_render events

Routes:
------
- OktaRoutes: Serves the visitor-auth callback

Authentication Flow:
------------------
1. The platform asks the integration to authenticate a visitor
2. The visitor is redirected to Okta with the requested location in ``state``
3. Okta redirects back to /visitor-auth/response with an authorization code
4. The code is exchanged for an Okta access token
5. The token's claims are re-signed with the site installation's signing secret
6. The visitor is redirected to the published content with ``jwt_token``
"""

from .auth import OktaVisitorAuthPlugin
from .routes import OktaRoutes

# Register plugins
from plugins import register_integration_plugin, register_route_plugin

# Automatically register the plugins when this package is imported
register_integration_plugin(OktaVisitorAuthPlugin)
register_route_plugin(OktaRoutes)
