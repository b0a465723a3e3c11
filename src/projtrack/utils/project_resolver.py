"""Utility for resolving project names to IDs."""

from projtrack.domain.errors import NotFoundError, project_name_not_found, project_not_found
from projtrack.domain.project import ProjectService


def resolve_project(project_service: ProjectService, project: str | int) -> int:
    """Resolve project name or ID to project ID.

    A value that parses as an integer is treated as an ID; anything else is
    looked up by exact name.

    Args:
        project_service: ProjectService instance
        project: Project name (str) or ID (int or string representation of int)

    Returns:
        Project ID

    Raises:
        NotFoundError: If project is not found
    """
    if isinstance(project, int):
        project_id = project
    else:
        try:
            project_id = int(project)
        except (ValueError, TypeError):
            found = project_service.get_project_by_name(project)
            if found is None:
                raise NotFoundError(project_name_not_found(project)) from None
            return found.id

    if project_service.get_project(project_id) is None:
        raise NotFoundError(project_not_found(project_id))
    return project_id
