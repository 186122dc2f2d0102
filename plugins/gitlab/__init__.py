# plugins/gitlab/__init__.py
"""
GitLab Plugin Package
=====================

Git synchronisation between spaces and GitLab projects.

Integrations:
------------
- GitLabIntegration: Reconciles project webhooks on space_installation_setup
  and posts commit statuses on space_gitsync_started/space_gitsync_completed

Routes:
------
- GitLabRoutes: Receives push deliveries from the project webhook
"""

from .events import GitLabIntegration
from .routes import GitLabRoutes

from plugins import register_integration_plugin, register_route_plugin

register_integration_plugin(GitLabIntegration)
register_route_plugin(GitLabRoutes)
