"""Airbrake Project Data Source - look up an existing project by name."""

from typing import Any, Dict

from errors import AirbrakeError
from plugins.base import HookResult, ResourceState
from plugins.data_sources.base import DataSourcePlugin
from plugins.resources.project import project_to_state
from validation import validate_against_schema


class ProjectDataSource(DataSourcePlugin):
    """Resolves an Airbrake project's id, API key and language from its name."""

    @property
    def type_name(self) -> str:
        return "airbrake_project"

    @property
    def schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string", "minLength": 1}},
        }

    async def read(self, config: ResourceState) -> HookResult:
        result = HookResult()
        if self.reconciler is None:
            return result.add_error(
                "Unconfigured Airbrake connection",
                "Expected a configured Airbrake connection. Configure the "
                "provider before reading data sources.",
            )

        is_valid, error = validate_against_schema(config, self.schema)
        if not is_valid:
            return result.add_error(f"Invalid {self.type_name} configuration", error)

        try:
            project = await self.reconciler.get_project_by_name(config["name"])
        except AirbrakeError as e:
            return result.add_error("Unable to fetch project", e.message)

        result.state = project_to_state(project)
        return result
