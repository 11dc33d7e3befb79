"""
Plugin Registry - Discovery and registration of plugins.

This module provides the central registry for resource and data source
plugins, handling discovery, registration, and instantiation.
"""

from importlib.metadata import entry_points
from typing import Any, Dict, List, Optional, Type

from plugins.base import logger
from plugins.data_sources.base import DataSourcePlugin
from plugins.resources.base import ResourcePlugin

RESOURCE_ENTRY_POINT_GROUP = "airbrake_provider.resources"


class PluginRegistry:
    """
    Central registry for all plugins.

    Plugin classes are registered by type name and instantiated lazily,
    once; every instance shares the reconciler handed to configure_all().
    """

    def __init__(self):
        # Registered plugin classes (not instantiated)
        self._resource_plugins: Dict[str, Type[ResourcePlugin]] = {}
        self._data_source_plugins: Dict[str, Type[DataSourcePlugin]] = {}

        # Instantiated plugin instances
        self._resource_instances: Dict[str, ResourcePlugin] = {}
        self._data_source_instances: Dict[str, DataSourcePlugin] = {}

        # Reconciler handed to plugins instantiated after configure_all()
        self._reconciler: Optional[Any] = None

    # Registration methods

    def register_resource_plugin(self, plugin_class: Type[ResourcePlugin]) -> None:
        """
        Register a resource plugin class.

        Args:
            plugin_class: The ResourcePlugin subclass to register
        """
        name = plugin_class().type_name

        if name in self._resource_plugins:
            logger.warning(f"Overwriting existing resource plugin: {name}")

        self._resource_plugins[name] = plugin_class
        self._resource_instances.pop(name, None)
        logger.debug(f"Registered resource plugin: {name}")

    def register_data_source_plugin(
        self, plugin_class: Type[DataSourcePlugin]
    ) -> None:
        """
        Register a data source plugin class.

        Args:
            plugin_class: The DataSourcePlugin subclass to register
        """
        name = plugin_class().type_name

        if name in self._data_source_plugins:
            logger.warning(f"Overwriting existing data source plugin: {name}")

        self._data_source_plugins[name] = plugin_class
        self._data_source_instances.pop(name, None)
        logger.debug(f"Registered data source plugin: {name}")

    # Instantiation methods

    def get_resource_plugin(self, name: str) -> ResourcePlugin:
        """
        Get a resource plugin instance.

        Args:
            name: The resource type name

        Returns:
            A ResourcePlugin instance, configured if configure_all() ran

        Raises:
            ValueError: If the type name is not registered
        """
        if name not in self._resource_plugins:
            available = ", ".join(self._resource_plugins.keys()) or "none"
            raise ValueError(
                f"Unknown resource type: {name}. Available resources: {available}"
            )

        if name not in self._resource_instances:
            plugin = self._resource_plugins[name]()
            if self._reconciler is not None:
                plugin.configure(self._reconciler)
            self._resource_instances[name] = plugin

        return self._resource_instances[name]

    def get_data_source_plugin(self, name: str) -> DataSourcePlugin:
        """
        Get a data source plugin instance.

        Args:
            name: The data source type name

        Returns:
            A DataSourcePlugin instance, configured if configure_all() ran

        Raises:
            ValueError: If the type name is not registered
        """
        if name not in self._data_source_plugins:
            available = ", ".join(self._data_source_plugins.keys()) or "none"
            raise ValueError(
                f"Unknown data source: {name}. Available data sources: {available}"
            )

        if name not in self._data_source_instances:
            plugin = self._data_source_plugins[name]()
            if self._reconciler is not None:
                plugin.configure(self._reconciler)
            self._data_source_instances[name] = plugin

        return self._data_source_instances[name]

    def configure_all(self, reconciler: Any) -> None:
        """Hand a reconciler to every existing and future plugin instance."""
        self._reconciler = reconciler
        for plugin in self._resource_instances.values():
            plugin.configure(reconciler)
        for plugin in self._data_source_instances.values():
            plugin.configure(reconciler)

    # Discovery methods

    def list_resource_plugins(self) -> List[str]:
        """List all registered resource type names."""
        return list(self._resource_plugins.keys())

    def list_data_source_plugins(self) -> List[str]:
        """List all registered data source type names."""
        return list(self._data_source_plugins.keys())

    def has_resource_plugin(self, name: str) -> bool:
        """Check if a resource type is registered."""
        return name in self._resource_plugins

    def has_data_source_plugin(self, name: str) -> bool:
        """Check if a data source type is registered."""
        return name in self._data_source_plugins


# Global registry instance
_registry: Optional[PluginRegistry] = None


def get_registry() -> PluginRegistry:
    """Get the global plugin registry singleton."""
    global _registry
    if _registry is None:
        _registry = PluginRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry (mainly for testing)."""
    global _registry
    _registry = None


def register_builtin_plugins(registry: Optional[PluginRegistry] = None) -> None:
    """
    Register the built-in plugins and discover resource plugins via
    entry points.

    Args:
        registry: Registry to populate (defaults to the global registry)
    """
    registry = registry or get_registry()

    from plugins.data_sources.project import ProjectDataSource
    from plugins.resources.project import ProjectResource

    registry.register_resource_plugin(ProjectResource)
    registry.register_data_source_plugin(ProjectDataSource)

    # Discover and register third-party resource plugins via entry points
    for ep in entry_points(group=RESOURCE_ENTRY_POINT_GROUP):
        try:
            registry.register_resource_plugin(ep.load())
        except Exception as e:
            logger.warning(f"Could not load resource plugin {ep.name}: {e}")
