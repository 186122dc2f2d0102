# plugins/__init__.py
"""
Plugin System for the Integrations Proxy
========================================

This module provides the foundation for the plugin architecture of the
integrations proxy. It defines the base interfaces that every integration
implements and provides functionality for plugin registration and lookup.

The plugin system supports two types of plugins:
1. Integration Plugins: Handle lifecycle events delivered by the host runtime
2. Route Plugins: Handle HTTP fetch requests forwarded by the host runtime

Design Philosophy:
-----------------
- Each external service lives in its own package under 'plugins/'
- Handlers receive a RuntimeContext explicitly instead of reading globals
- Plugins never keep state between invocations; installation configuration
  comes from the runtime environment and is written back through the host API

Plugin Lifecycle:
---------------
1. Plugin classes are defined in separate packages
2. Each package registers its plugins when it is imported
3. The application discovers and imports plugin packages at startup
4. Plugin instances are created per invocation by the plugin manager

Adding a New Integration:
------------------
1. Create a new directory under 'plugins/'
2. Implement an IntegrationPlugin mapping event types to handlers
3. Optionally implement a RoutePlugin for fetch requests
4. Register the plugins in the __init__.py of your plugin package
"""

from typing import Any, Awaitable, Callable, Dict, Optional, Type
import logging
from enum import Enum

logger = logging.getLogger(__name__)

EventHandler = Callable[[Any, Any], Awaitable[Any]]

class PluginType(str, Enum):
    """
    Enum defining the types of plugins supported by the system.

    Types:
        INTEGRATION: Plugins that handle lifecycle events from the host runtime
        ROUTE: Plugins that provide HTTP endpoints
    """
    INTEGRATION = "integration"
    ROUTE = "route"

class PluginBase:
    """
    Base class for all plugins.

    Class Attributes:
        plugin_type (PluginType): The type of plugin
        service_name (str): Unique identifier of the integration this plugin
                           belongs to (e.g., "okta", "gitlab"). It is also the
                           URL prefix the plugin is served under.
    """

    plugin_type: PluginType
    service_name: str

    @classmethod
    def get_metadata(cls) -> Dict[str, Any]:
        """
        Return metadata about the plugin for discovery and introspection.

        Returns:
            Dict[str, Any]: plugin_type, service_name and class_name
        """
        return {
            "plugin_type": cls.plugin_type,
            "service_name": cls.service_name,
            "class_name": cls.__name__
        }

class IntegrationPlugin(PluginBase):
    """
    Base class for plugins that handle host lifecycle events.

    Subclasses map event types (e.g. "space_installation_setup") to async
    handlers taking ``(event, context)``. Events without a handler are
    acknowledged and ignored.

    Class Attributes:
        plugin_type (PluginType): Set to INTEGRATION for all integration plugins
    """

    plugin_type = PluginType.INTEGRATION

    def get_event_handlers(self) -> Dict[str, EventHandler]:
        """
        Get the handlers of this integration keyed by event type.

        Returns:
            Dict[str, EventHandler]: Mapping of event type to async handler

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement get_event_handlers")

    async def handle_event(self, event: Any, context: Any) -> Any:
        """
        Dispatch an event to the matching handler.

        Args:
            event: A parsed event model with a ``type`` attribute
            context: The RuntimeContext of the invocation

        Returns:
            Any: Whatever the handler returns (a Response, a dict or None)
        """
        handler = self.get_event_handlers().get(event.type)
        if handler is None:
            logger.info(f"No handler for event {event.type} in {self.service_name}, ignoring")
            return None
        return await handler(event, context)

class RoutePlugin(PluginBase):
    """
    Base class for plugins that provide their own routes.

    The routes provided by a plugin are mounted under the service name,
    e.g. "/okta/visitor-auth/response".

    Class Attributes:
        plugin_type (PluginType): Set to ROUTE for all route plugins
    """

    plugin_type = PluginType.ROUTE

    def get_router(self):
        """
        Get the router for this plugin's routes.

        Returns:
            fastapi.APIRouter: The router with all plugin-specific routes

        Raises:
            NotImplementedError: If the subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement get_router")

# Plugin registry
_integration_plugins: Dict[str, Type[IntegrationPlugin]] = {}
_route_plugins: Dict[str, Type[RoutePlugin]] = {}

def register_integration_plugin(plugin_class: Type[IntegrationPlugin]) -> None:
    """
    Register an integration plugin with the system.

    Each plugin is registered under its service_name, which must be unique
    across all integration plugins.

    Example:
        >>> class MyIntegration(IntegrationPlugin):
        ...     service_name = "my_service"
        >>> register_integration_plugin(MyIntegration)
    """
    _integration_plugins[plugin_class.service_name] = plugin_class
    logger.info(f"Registered integration plugin: {plugin_class.service_name}")

def register_route_plugin(plugin_class: Type[RoutePlugin]) -> None:
    """
    Register a route plugin with the system.

    Each plugin is registered under its service_name, which must be unique
    across all route plugins.
    """
    _route_plugins[plugin_class.service_name] = plugin_class
    logger.info(f"Registered route plugin: {plugin_class.service_name}")

def get_integration_plugin(service_name: str) -> Optional[Type[IntegrationPlugin]]:
    """
    Get an integration plugin class by its service name.

    Returns:
        Optional[Type[IntegrationPlugin]]: The plugin class if found, None otherwise
    """
    return _integration_plugins.get(service_name)

def get_all_integration_plugins() -> Dict[str, Type[IntegrationPlugin]]:
    """
    Get all registered integration plugins.

    The dictionary is a copy of the internal registry, so modifying it will
    not affect the registry.
    """
    return _integration_plugins.copy()

def get_all_route_plugins() -> Dict[str, Type[RoutePlugin]]:
    """
    Get all registered route plugins.

    The dictionary is a copy of the internal registry, so modifying it will
    not affect the registry.
    """
    return _route_plugins.copy()
