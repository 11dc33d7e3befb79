"""
Project Reconciler - Lifecycle operations for Airbrake projects.

Translates desired project attributes into Airbrake API calls. The API only
offers a bulk listing endpoint, so lookups by name or id list every project
and scan the result. Creation is a two-step saga: the create endpoint only
accepts a name, so the language is written with a follow-up update.
"""

import logging
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List

from client import AirbrakeClient
from errors import (
    APIError,
    MalformedResponse,
    NotFoundError,
    PartialCreateError,
    TransportError,
)

logger = logging.getLogger(__name__)

PROJECTS_PATH = "projects"


@dataclass
class Project:
    """
    An Airbrake project.

    Only id, name, api_key and language take part in reconciliation; the
    remaining fields are reported by the API and passed through untouched.
    """

    id: int = 0
    name: str = ""
    api_key: str = field(default="", repr=False)
    language: str = ""
    created_at: str = ""
    updated_at: str = ""
    account_id: int = 0
    resolve_errors_on_deploy: bool = False
    min_app_version: str = ""
    strict_error_types: str = ""
    global_error_types: str = ""
    exceptional_app_id: str = ""
    severity_threshold: Dict[str, Any] = field(default_factory=dict)
    retention_period_days: int = 0
    enable_old_grouping: bool = False
    first_notice_received_at: str = ""
    apdex_threshold: str = ""
    notifier_name: str = ""
    notifier_version: str = ""
    anomaly_notification_environments: List[str] = field(default_factory=list)
    last_deploy_at: str = ""
    server_error_alert_threshold: int = 0
    last_comment_at: str = ""
    last_user_group_resolved_at: str = ""
    is_first_project: bool = False
    demo_mode_until_date: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        """
        Build a Project from an API record.

        Unknown keys are ignored; missing or null keys keep their zero value.
        """
        if not isinstance(data, dict):
            raise MalformedResponse(
                f"expected a project object, got {type(data).__name__}"
            )
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and v is not None}
        return cls(**values)


@dataclass
class CreateResult:
    """Outcome of the two-step create: the created project and whether its language was set."""

    created: Project
    language_set: bool = False


class ProjectReconciler:
    """CRUD operations for Airbrake projects on top of an authenticated client."""

    def __init__(self, client: AirbrakeClient):
        self.client = client

    async def list_projects(self) -> List[Project]:
        """
        List every project visible to the session.

        Raises:
            TransportError: The listing request did not reach the service.
            APIError: The service rejected the listing request.
            MalformedResponse: The body is not ``{"projects": [...]}``.
        """
        response = await self.client.list(PROJECTS_PATH)
        if response.error is not None:
            raise response.error
        if response.status >= 300:
            raise APIError(
                f"remote rejected projects listing (status {response.status})",
                status=response.status,
                operation="list",
            )

        data = response.json()
        if not isinstance(data, dict):
            raise MalformedResponse("projects listing is not a JSON object")

        records = data.get("projects") or []
        if not isinstance(records, list):
            raise MalformedResponse("projects listing field 'projects' is not a list")

        return [Project.from_dict(record) for record in records]

    async def get_project_by_name(self, name: str) -> Project:
        """Return the first listed project whose name equals ``name`` (case-sensitive)."""
        for project in await self.list_projects():
            if project.name == name:
                return project
        raise NotFoundError(name)

    async def get_project_by_id(self, project_id: int) -> Project:
        """Return the listed project whose id equals ``project_id``."""
        for project in await self.list_projects():
            if project.id == project_id:
                return project
        raise NotFoundError(project_id)

    async def create_project(self, desired: Project) -> CreateResult:
        """
        Create a project, then set its language.

        The create endpoint only takes a name and ignores the language, so a
        second call writes it. This is not transactional: if the second step
        fails, the project stays on the remote side without a language and
        PartialCreateError (an APIError) is raised with the partial result.

        An undecodable create response, or one without an id, raises
        MalformedResponse rather than APIError.
        """
        logger.debug(f"Creating project {desired.name!r}")

        response = await self.client.create(PROJECTS_PATH, {"name": desired.name})
        if response.error is not None:
            raise response.error
        if response.status >= 300:
            raise APIError(
                f"error creating project {desired.name!r} (status {response.status})",
                status=response.status,
                operation="create",
            )

        created = Project.from_dict(response.json())
        if not created.id:
            raise MalformedResponse("created project has no id")

        logger.info(f"Created project {created.name!r} with id {created.id}")

        created.language = desired.language
        result = CreateResult(created=created)

        try:
            await self.update_project(created)
        except (APIError, TransportError) as e:
            raise PartialCreateError(
                f"project {created.id} was created but its language could not "
                f"be set: {e.message}",
                result=result,
                status=getattr(e, "status", None),
            ) from e

        result.language_set = True
        return result

    async def update_project(self, project: Project) -> None:
        """
        Write the project's language.

        Only ``language`` is ever sent; name and identity are immutable once
        the project exists.
        """
        response = await self.client.update(
            PROJECTS_PATH, str(project.id), {"language": project.language}
        )
        if response.error is not None:
            raise response.error
        if response.status >= 300:
            raise APIError(
                f"error updating project {project.id} (status {response.status})",
                status=response.status,
                operation="update",
            )
        logger.info(f"Updated project {project.id} language to {project.language!r}")

    async def delete_project(self, project_id: str) -> None:
        """Delete a project. No read-back is performed."""
        response = await self.client.remove(PROJECTS_PATH, str(project_id))
        if response.error is not None:
            raise response.error
        if response.status >= 300:
            raise APIError(
                f"error deleting project {project_id} (status {response.status})",
                status=response.status,
                operation="delete",
            )
        logger.info(f"Deleted project {project_id}")
