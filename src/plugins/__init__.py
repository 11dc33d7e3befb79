"""
Plugin system for the Airbrake provider.

This package provides the host-facing adapter layer: resource and data
source plugins implementing lifecycle hooks, and the registry that holds
them.
"""

from plugins.base import Diagnostic, DiagnosticSeverity, HookResult, ResourceState
from plugins.data_sources import DataSourcePlugin, ProjectDataSource
from plugins.registry import PluginRegistry, get_registry
from plugins.resources import ProjectResource, ResourcePlugin

__all__ = [
    "Diagnostic",
    "DiagnosticSeverity",
    "HookResult",
    "ResourceState",
    "DataSourcePlugin",
    "ProjectDataSource",
    "ResourcePlugin",
    "ProjectResource",
    "PluginRegistry",
    "get_registry",
]
