"""
Airbrake Project Resource - Lifecycle hooks for the 'airbrake_project' type.

Adapts host state dicts ({"id", "name", "api_key", "language"}) to the
ProjectReconciler. Errors raised by the reconciler are reported as
diagnostics; nothing from the host contract leaks into the reconciler.
"""

import logging
from typing import Any, Dict, List, Optional

from errors import AirbrakeError, NotFoundError, PartialCreateError
from plugins.base import HookResult, ResourceState
from plugins.resources.base import ResourcePlugin
from projects import Project

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = [
    "c#",
    "elixir",
    "go",
    "java",
    "javascript",
    "node.js",
    "php",
    "python",
    "ruby",
    "swift",
    "typescript",
    "other",
]


def project_to_state(project: Project) -> ResourceState:
    """Externally visible attribute set of a project."""
    return {
        "id": str(project.id),
        "name": project.name,
        "api_key": project.api_key,
        "language": project.language,
    }


def parse_project_id(value: Any) -> int:
    """Parse a state identifier into the numeric project id."""
    try:
        project_id = int(str(value))
    except (TypeError, ValueError):
        raise ValueError(f"project id must be numeric, got {value!r}")
    if project_id <= 0:
        raise ValueError(f"project id must be positive, got {value!r}")
    return project_id


class ProjectResource(ResourcePlugin):
    """Manages Airbrake projects."""

    @property
    def type_name(self) -> str:
        return "airbrake_project"

    @property
    def schema(self) -> Dict[str, Any]:
        return {
            "type": "object",
            "required": ["name", "language"],
            "properties": {
                "id": {"type": "string", "description": "Project identifier (computed)."},
                "name": {
                    "type": "string",
                    "minLength": 1,
                    "description": "Project name. Changing it forces a new project.",
                },
                "api_key": {
                    "type": "string",
                    "description": "Project API key (computed, sensitive).",
                },
                "language": {
                    "type": "string",
                    "enum": SUPPORTED_LANGUAGES,
                    "description": "Main language of the project.",
                },
            },
            "additionalProperties": False,
        }

    @property
    def requires_replace(self) -> List[str]:
        return ["name"]

    @property
    def sensitive_attributes(self) -> List[str]:
        return ["api_key"]

    async def create(self, desired: ResourceState) -> HookResult:
        result = HookResult()
        if not self.check_configured(result) or not self.validate_desired(
            desired, result
        ):
            return result

        logger.debug(f"Create project resource: name={desired['name']!r}")

        try:
            created = await self.reconciler.create_project(
                Project(name=desired["name"], language=desired["language"])
            )
        except PartialCreateError as e:
            orphan = e.result.created
            return result.add_error(
                "Error creating project",
                f"Project {orphan.name!r} was created with id {orphan.id} but its "
                f"language could not be set: {e.message}. Import it with id "
                f"{orphan.id} or delete it before retrying.",
            )
        except AirbrakeError as e:
            return result.add_error(
                "Error creating project",
                f"Could not create project, unexpected error: {e.message}",
            )

        result.state = project_to_state(created.created)
        return result

    async def read(self, state: ResourceState) -> HookResult:
        result = HookResult()
        if not self.check_configured(result):
            return result

        try:
            project_id = parse_project_id(state.get("id"))
        except ValueError as e:
            return result.add_error("Invalid Airbrake project id", str(e), "id")

        try:
            project = await self.reconciler.get_project_by_id(project_id)
        except NotFoundError:
            logger.info(f"Project {project_id} no longer exists, removing from state")
            return result.add_warning(
                "Airbrake project not found",
                f"Project {project_id} no longer exists and was removed from state.",
            )
        except AirbrakeError as e:
            return result.add_error(
                "Error reading Airbrake project",
                f"Could not read Airbrake project {state.get('name', project_id)}: "
                f"{e.message}",
            )

        result.state = project_to_state(project)
        return result

    async def update(
        self, desired: ResourceState, prior: Optional[ResourceState] = None
    ) -> HookResult:
        result = HookResult()
        if not self.check_configured(result) or not self.validate_desired(
            desired, result
        ):
            return result

        prior = prior or {}
        for attribute in self.requires_replace:
            if attribute in prior and prior[attribute] != desired.get(attribute):
                return result.add_error(
                    f"Cannot change {attribute} in place",
                    f"Changing {attribute} from {prior[attribute]!r} to "
                    f"{desired.get(attribute)!r} requires replacing the project.",
                    attribute,
                )

        try:
            project_id = parse_project_id(desired.get("id") or prior.get("id"))
        except ValueError as e:
            return result.add_error("Invalid Airbrake project id", str(e), "id")

        try:
            await self.reconciler.update_project(
                Project(
                    id=project_id,
                    name=desired["name"],
                    language=desired["language"],
                )
            )
        except AirbrakeError as e:
            return result.add_error(
                "Error updating Airbrake project",
                f"Could not update project, unexpected error: {e.message}",
            )

        result.state = {
            "id": str(project_id),
            "name": desired["name"],
            "api_key": desired.get("api_key") or prior.get("api_key", ""),
            "language": desired["language"],
        }
        return result

    async def delete(self, state: ResourceState) -> HookResult:
        result = HookResult()
        if not self.check_configured(result):
            return result

        try:
            project_id = parse_project_id(state.get("id"))
        except ValueError as e:
            return result.add_error("Invalid Airbrake project id", str(e), "id")

        try:
            await self.reconciler.delete_project(str(project_id))
        except AirbrakeError as e:
            return result.add_error(
                "Error deleting Airbrake project",
                f"Could not delete project, unexpected error: {e.message}",
            )
        return result

    async def import_state(self, identifier: str) -> HookResult:
        """
        Import an existing project.

        A numeric identifier is taken as the project id; anything else is
        resolved as a project name.
        """
        identifier = str(identifier).strip()
        if identifier.isdigit():
            result = await self.read({"id": identifier})
            if result.state is None and not result.has_error:
                result.diagnostics.clear()
                result.add_error(
                    "Cannot import non-existent Airbrake project",
                    f"No project with id {identifier}.",
                )
            return result

        result = HookResult()
        if not self.check_configured(result):
            return result

        try:
            project = await self.reconciler.get_project_by_name(identifier)
        except NotFoundError:
            return result.add_error(
                "Cannot import non-existent Airbrake project",
                f"No project named {identifier!r}.",
            )
        except AirbrakeError as e:
            return result.add_error("Error importing Airbrake project", e.message)

        result.state = project_to_state(project)
        return result
