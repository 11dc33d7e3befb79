"""
Resource Plugin Base - Abstract interface for managed resource types.

Resource plugins implement the lifecycle hooks the orchestrating host calls
(create, read, update, delete, import) for one resource type. They receive
a configured ProjectReconciler from the provider and translate between host
state dicts and reconciler calls, reporting problems as diagnostics.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from plugins.base import HookResult, ResourceState
from validation import schema_errors


class ResourcePlugin(ABC):
    """
    Abstract base class for resource plugins.

    Resource plugins are registered with the PluginRegistry under their
    type name and configured by the provider once it has authenticated.
    Third-party resources are discovered via Python entry points in the
    'airbrake_provider.resources' group.
    """

    def __init__(self):
        self.reconciler: Optional[Any] = None

    @property
    @abstractmethod
    def type_name(self) -> str:
        """Unique resource type name (e.g., 'airbrake_project')."""
        pass

    @property
    @abstractmethod
    def schema(self) -> Dict[str, Any]:
        """JSON Schema describing the desired-state attributes."""
        pass

    @property
    def requires_replace(self) -> List[str]:
        """Attributes whose change cannot be applied in place."""
        return []

    @property
    def sensitive_attributes(self) -> List[str]:
        """Attributes that must be masked when state is displayed."""
        return []

    def configure(self, reconciler: Any) -> None:
        """
        Hand the plugin the reconciler built by the provider.

        Args:
            reconciler: A ProjectReconciler bound to an authenticated client
        """
        self.reconciler = reconciler

    def check_configured(self, result: HookResult) -> bool:
        """Add an error diagnostic and return False if configure() was never called."""
        if self.reconciler is None:
            result.add_error(
                "Unconfigured Airbrake client",
                "Expected a configured Airbrake client. Configure the provider "
                "before using its resources.",
            )
            return False
        return True

    def validate_desired(self, desired: ResourceState, result: HookResult) -> bool:
        """
        Validate desired state against the schema.

        Adds one error diagnostic per violation, pointing at the offending
        attribute where there is one.
        """
        violations = schema_errors(desired, self.schema)
        for attribute, message in violations:
            result.add_error(f"Invalid {self.type_name} configuration", message, attribute)
        return not violations

    @abstractmethod
    async def create(self, desired: ResourceState) -> HookResult:
        """
        Create the remote object described by ``desired``.

        Returns:
            HookResult whose state is the fully populated resource state.
        """
        pass

    @abstractmethod
    async def read(self, state: ResourceState) -> HookResult:
        """
        Refresh ``state`` from the remote service.

        Returns:
            HookResult with the refreshed state, or state=None if the remote
            object no longer exists.
        """
        pass

    @abstractmethod
    async def update(
        self, desired: ResourceState, prior: Optional[ResourceState] = None
    ) -> HookResult:
        """
        Apply ``desired`` to an existing remote object.

        Args:
            desired: The desired attributes, including the identifier
            prior: The state before this update, if known
        """
        pass

    @abstractmethod
    async def delete(self, state: ResourceState) -> HookResult:
        """Delete the remote object identified by ``state``."""
        pass

    @abstractmethod
    async def import_state(self, identifier: str) -> HookResult:
        """Seed state for an existing remote object from an external identifier."""
        pass
