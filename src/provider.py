"""
Airbrake Provider - Configuration-time entry point for the host.

The provider authenticates once per configuration, builds the single
ProjectReconciler shared by every resource and data source, and hands it to
the plugins in the registry. The session it creates is an explicit handle
owned by that reconciler, not module-level state.
"""

import logging
from typing import Any, Dict, Optional

from client import authenticate
from config import AirbrakeConfig, get_config
from errors import AirbrakeError
from plugins.base import HookResult
from plugins.data_sources.base import DataSourcePlugin
from plugins.registry import PluginRegistry, register_builtin_plugins
from plugins.resources.base import ResourcePlugin
from projects import ProjectReconciler
from validation import validate_against_schema

logger = logging.getLogger(__name__)

__version__ = "0.1.0"

PROVIDER_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "email": {
            "type": ["string", "null"],
            "description": "Email used to connect to Airbrake.",
        },
        "password": {
            "type": ["string", "null"],
            "description": "Password used to connect to Airbrake.",
        },
        "api_key": {
            "type": ["string", "null"],
            "description": "API key used to connect to Airbrake.",
        },
        "base_url": {
            "type": ["string", "null"],
            "description": "The Airbrake base API url with API version.",
        },
        "timeout": {
            "type": ["integer", "null"],
            "minimum": 1,
            "description": "Request timeout in seconds.",
        },
    },
    "additionalProperties": False,
}


class AirbrakeProvider:
    """Provider that configures Airbrake resources and data sources."""

    def __init__(
        self,
        version: str = __version__,
        registry: Optional[PluginRegistry] = None,
        env_config: Optional[AirbrakeConfig] = None,
    ):
        self.version = version
        self.env_config = env_config
        self.config: Optional[AirbrakeConfig] = None
        self.reconciler: Optional[ProjectReconciler] = None

        if registry is None:
            registry = PluginRegistry()
            register_builtin_plugins(registry)
        self.registry = registry

    @property
    def type_name(self) -> str:
        return "airbrake"

    @property
    def schema(self) -> Dict[str, Any]:
        return PROVIDER_SCHEMA

    @property
    def is_configured(self) -> bool:
        return self.reconciler is not None

    async def configure(
        self, provider_config: Optional[Dict[str, Any]] = None
    ) -> HookResult:
        """
        Authenticate and configure every plugin.

        Explicit ``provider_config`` values take precedence over the
        environment; the API key takes precedence over email/password.

        Returns:
            HookResult carrying diagnostics; state is always None.
        """
        result = HookResult()
        provider_config = provider_config or {}

        is_valid, error = validate_against_schema(provider_config, self.schema)
        if not is_valid:
            return result.add_error("Invalid Airbrake provider configuration", error)

        try:
            env_config = self.env_config or get_config().airbrake
        except ValueError as e:
            return result.add_error("Invalid Airbrake environment configuration", str(e))
        config = env_config.merged(provider_config)

        try:
            config.validate()
        except ValueError as e:
            return result.add_error("Missing Airbrake credentials", str(e), "api_key")

        try:
            client = await authenticate(
                config.base_url,
                email=config.email,
                password=config.password,
                api_key=config.api_key,
                timeout=config.timeout,
            )
        except AirbrakeError as e:
            return result.add_error(
                "Unable to connect to Airbrake API client",
                "An unexpected error occurred when creating the Airbrake API "
                f"client.\n\nAirbrake client error: {e.message}",
            )

        self.config = config
        self.reconciler = ProjectReconciler(client)
        self.registry.configure_all(self.reconciler)
        logger.info(
            f"Configured Airbrake provider v{self.version} against {config.base_url} "
            f"({'API key' if config.uses_api_key else 'email/password'} auth)"
        )
        return result

    def resource(self, type_name: str) -> ResourcePlugin:
        """Get the resource plugin for a type name."""
        return self.registry.get_resource_plugin(type_name)

    def data_source(self, type_name: str) -> DataSourcePlugin:
        """Get the data source plugin for a type name."""
        return self.registry.get_data_source_plugin(type_name)
