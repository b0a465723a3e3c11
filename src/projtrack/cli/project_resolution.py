"""CLI helpers for project resolution."""

from __future__ import annotations

import click
from projtrack.cli.error_handling import handle_domain_error
from projtrack.domain.errors import DomainError
from projtrack.domain.project import ProjectService
from projtrack.utils.project_resolver import resolve_project


def resolve_project_or_exit(
    ctx: click.Context, project_service: ProjectService, project: str | int
) -> int:
    """Resolve project name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_project(project_service, project)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
