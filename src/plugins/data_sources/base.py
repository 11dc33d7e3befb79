"""
Data Source Plugin Base - Abstract interface for read-only lookups.

Data sources resolve existing remote objects from a configured lookup key
and never modify remote state.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from plugins.base import HookResult, ResourceState


class DataSourcePlugin(ABC):
    """Abstract base class for data source plugins."""

    def __init__(self):
        self.reconciler: Optional[Any] = None

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Unique data source type name (e.g., 'airbrake_project')."""
        pass

    @property
    @abstractmethod
    def schema(self) -> Dict[str, Any]:
        """JSON Schema describing the lookup configuration."""
        pass

    def configure(self, reconciler: Any) -> None:
        """Hand the plugin the reconciler built by the provider."""
        self.reconciler = reconciler

    @abstractmethod
    async def read(self, config: ResourceState) -> HookResult:
        """
        Look up a remote object.

        Args:
            config: The lookup attributes supplied by the host

        Returns:
            HookResult whose state holds the resolved attributes.
        """
        pass
