# plugin_manager.py
"""
Plugin Manager for the Integrations Proxy
=========================================

This module provides utilities for discovering, loading, and using plugins.
The PluginManager class is a facade over the lower-level plugin registry: it
imports plugin packages, creates plugin instances and dispatches host events
to the integration they belong to.

Usage:
------
The plugin_manager is instantiated as a singleton at the module level and should be
imported and used directly by application code:

    from plugin_manager import plugin_manager

    # Discover available plugins
    plugin_manager.discover_plugins()

    # Dispatch a host event to an integration
    result = await plugin_manager.dispatch_event("gitlab", event, context)

    # Mount fetch routes
    for service_name, router in plugin_manager.get_service_routers().items():
        app.include_router(router, prefix=f"/{service_name}")
"""

import importlib
import logging
import os
from typing import Any, Dict, Optional, Type

from fastapi import APIRouter

from plugins import (
    IntegrationPlugin,
    RoutePlugin,
    get_all_integration_plugins,
    get_all_route_plugins,
    get_integration_plugin
)

logger = logging.getLogger(__name__)

class PluginManager:
    """
    Manager for integration plugins.

    The PluginManager is responsible for:
    - Discovering plugin packages in the plugins directory
    - Creating plugin instances
    - Dispatching host events to integration plugins
    - Collecting the routers of route plugins
    """

    def __init__(self):
        """
        Initialize the plugin manager.

        Plugins are not loaded during initialization; discover_plugins must be
        called to import the plugin packages.
        """
        self._plugin_dir = os.path.join(os.path.dirname(__file__), "plugins")
        self._loaded_plugins = set()

    def discover_plugins(self):
        """
        Discover plugins in the plugins directory.

        Every subdirectory of plugins/ is imported as a package; importing it
        registers its plugins. Packages that fail to import are logged and
        skipped so one broken integration does not take the others down.
        """
        for item in sorted(os.listdir(self._plugin_dir)):
            if os.path.isdir(os.path.join(self._plugin_dir, item)) and not item.startswith('__'):
                module_name = f"plugins.{item}"
                if module_name not in self._loaded_plugins:
                    try:
                        importlib.import_module(module_name)
                        self._loaded_plugins.add(module_name)
                        logger.info(f"Discovered plugin: {module_name}")
                    except ImportError as e:
                        logger.error(f"Error loading plugin {module_name}: {e}")

    def get_integration_plugin(self, service_name: str) -> Optional[Type[IntegrationPlugin]]:
        return get_integration_plugin(service_name)

    def get_all_integration_plugins(self) -> Dict[str, Type[IntegrationPlugin]]:
        return get_all_integration_plugins()

    def get_all_route_plugins(self) -> Dict[str, Type[RoutePlugin]]:
        return get_all_route_plugins()

    def create_integration_plugin(self, service_name: str, **kwargs) -> Optional[IntegrationPlugin]:
        """
        Create an instance of an integration plugin.

        Args:
            service_name (str): The unique service name of the plugin to instantiate
            **kwargs: Additional keyword arguments to pass to the plugin constructor

        Returns:
            Optional[IntegrationPlugin]: A plugin instance if the plugin was found,
                                         None otherwise

        Example:
            >>> okta = plugin_manager.create_integration_plugin("okta")
            >>> if okta:
            ...     response = await okta.handle_event(event, context)
        """
        plugin_class = self.get_integration_plugin(service_name)
        if plugin_class:
            return plugin_class(**kwargs)
        return None

    async def dispatch_event(self, service_name: str, event: Any, context: Any) -> Any:
        """
        Dispatch a host event to the integration registered for service_name.

        Args:
            service_name (str): The integration the event is addressed to
            event: The parsed event model
            context: The RuntimeContext of the invocation

        Returns:
            Any: The handler result, or None when no handler matches

        Raises:
            LookupError: If no integration is registered under service_name
        """
        plugin = self.create_integration_plugin(service_name)
        if plugin is None:
            raise LookupError(f"No integration registered for {service_name}")
        logger.info(f"Dispatching {event.type} to {service_name}")
        return await plugin.handle_event(event, context)

    def get_service_routers(self) -> Dict[str, APIRouter]:
        """
        Get all routers from plugins that implement the RoutePlugin interface.

        Returns:
            Dict[str, APIRouter]: Dictionary mapping service names to their routers
        """
        routers = {}

        for service_name, plugin_class in self.get_all_route_plugins().items():
            plugin = plugin_class()
            routers[service_name] = plugin.get_router()
            logger.info(f"Found route plugin: {service_name}")

        return routers

    def get_plugin_info(self) -> Dict[str, Dict[str, Any]]:
        """
        Get information about all available integrations.

        Returns:
            Dict[str, Dict[str, Any]]: Mapping of service name to a summary with
                                       the description and supported events
        """
        plugin_info = {}
        for service_name, plugin_class in self.get_all_integration_plugins().items():
            try:
                plugin = plugin_class()
                plugin_info[service_name] = {
                    "name": service_name,
                    "description": getattr(plugin_class, "DESCRIPTION", f"Integration with {service_name.title()}"),
                    "events": sorted(plugin.get_event_handlers().keys()),
                    "routes": service_name in self.get_all_route_plugins(),
                }
            except Exception as e:
                logger.error(f"Error processing plugin info for {service_name}: {e}")
                plugin_info[service_name] = {
                    "name": service_name,
                    "description": f"Integration with {service_name.title()}",
                    "events": [],
                    "routes": False,
                }
        return plugin_info

# Create a singleton instance of the plugin manager
plugin_manager = PluginManager()
