# plugins/smartcat/__init__.py
"""
Smartcat Plugin Package
=======================

Serves the script that loads Smartcat website translation on published sites.
"""

from .script import SmartcatIntegration

from plugins import register_integration_plugin

register_integration_plugin(SmartcatIntegration)
