"""Project management commands."""

import click
from projtrack.cli.error_handling import fail, handle_domain_error, parse_or_fail
from projtrack.cli.project_resolution import resolve_project_or_exit
from projtrack.cli.services import get_user_id, metrics_service, project_service
from projtrack.domain.entities import ProjectStatus
from projtrack.domain.errors import DomainError
from projtrack.domain.metrics import compute_project_metrics
from projtrack.utils.amount_parser import format_amount, parse_amount
from projtrack.utils.date_parser import parse_date

STATUS_CHOICES = [status.value for status in ProjectStatus]


def _parse_optional_date(ctx, label: str, value: str | None):
    if value is None:
        return None
    return parse_or_fail(ctx, parse_date, value, label)


@click.group()
def project_group():
    """Manage projects."""
    pass


@project_group.command("create")
@click.argument("name", metavar="PROJECT_NAME")
@click.option("--description", help="Project description")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'today')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'next month')")
@click.option("--budget", help="Budget amount (e.g., 1000 or 1,250.00)")
@click.option("--currency", help="3-letter currency code (defaults to PROJTRACK_DEFAULT_CURRENCY)")
@click.pass_context
def create_project(
    ctx,
    name: str,
    description: str | None,
    start_date: str | None,
    end_date: str | None,
    budget: str | None,
    currency: str | None,
):
    """Create a new project.

    New projects always start as "Not Started".

    Examples:
        projtrack project create "Website Redesign" --budget 1000
        projtrack project create "Migration" --start-date today --end-date "next month" --currency EUR
    """
    service = project_service(ctx)
    start = _parse_optional_date(ctx, "start date", start_date)
    end = _parse_optional_date(ctx, "end date", end_date)

    try:
        project = service.create_project(
            name=name,
            description=description,
            start_date=start,
            end_date=end,
            budget=parse_amount(budget) if budget is not None else None,
            currency=currency,
            created_by=get_user_id(ctx),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created project '{project.name}' (ID: {project.id})")
    if project.budget is not None:
        click.echo(f"Budget: {format_amount(project.budget, project.currency)}")


@project_group.command("list")
@click.option("--mine", is_flag=True, help="Only projects owned by, or with tasks for, the --user")
@click.pass_context
def list_projects(ctx, mine: bool):
    """List projects, newest first."""
    service = project_service(ctx)
    user_id = get_user_id(ctx)
    if mine and user_id is None:
        fail(ctx, "--mine requires --user")

    projects = service.list_projects(user_id=user_id if mine else None)
    if not projects:
        click.echo("No projects found.")
        return

    click.echo("\nProjects:")
    click.echo("-" * 80)
    for p in projects:
        budget = format_amount(p.budget, p.currency)
        click.echo(f"ID: {p.id:3d} | {p.name:25s} | {p.status.value:12s} | Budget: {budget}")


@project_group.command("show")
@click.argument("project", metavar="PROJECT")
@click.pass_context
def show_project(ctx, project: str):
    """Show a project with its derived figures.

    PROJECT can be a project name or ID.
    """
    service = project_service(ctx)
    project_id = resolve_project_or_exit(ctx, service, project)

    metrics_svc = metrics_service(ctx)
    try:
        snapshot = metrics_svc.get_project_snapshot(project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    # Figures and task counts come from the same snapshot
    metrics = compute_project_metrics(snapshot, metrics_svc.mode)

    p = snapshot.project
    currency = p.currency
    click.echo(f"\nProject: {p.name} (ID: {p.id})")
    click.echo("=" * 60)
    click.echo(f"Status: {p.status.value}")
    if p.description:
        click.echo(f"Description: {p.description}")
    if p.start_date or p.end_date:
        click.echo(f"Dates: {p.start_date or '?'} to {p.end_date or '?'}")
    click.echo(f"Budget: {format_amount(p.budget, currency)}")
    click.echo(f"Total expenditure: {format_amount(metrics.total_expenditure, currency)}")
    click.echo(f"Total task cost: {format_amount(metrics.total_task_cost, currency)}")
    if metrics.remaining_budget is None:
        click.echo("Remaining budget: n/a (no budget set)")
    else:
        click.echo(
            f"Remaining budget: {format_amount(metrics.remaining_budget, currency)}"
            f" (by {metrics.cost_tracking_mode.value})"
        )
    completed = sum(1 for t in snapshot.tasks if t.is_completed)
    click.echo(
        f"Progress: {metrics.progress_percentage}% ({completed} of {len(snapshot.tasks)} tasks completed)"
    )


@project_group.command("update")
@click.argument("project", metavar="PROJECT")
@click.option("--name", help="New project name")
@click.option("--description", help="New description (empty string to clear)")
@click.option("--status", type=click.Choice(STATUS_CHOICES, case_sensitive=False), help="New status")
@click.option("--start-date", help="New start date (empty string to clear)")
@click.option("--end-date", help="New end date (empty string to clear)")
@click.option("--budget", help="New budget (empty string to clear)")
@click.option("--currency", help="New 3-letter currency code")
@click.pass_context
def update_project(
    ctx,
    project: str,
    name: str | None,
    description: str | None,
    status: str | None,
    start_date: str | None,
    end_date: str | None,
    budget: str | None,
    currency: str | None,
) -> None:
    """Update a project.

    Updates only the fields that are provided. PROJECT can be a project name or ID.

    Examples:
        projtrack project update "Website Redesign" --status "In Progress"
        projtrack project update 1 --budget 1500 --end-date 2025-12-31
        projtrack project update 1 --budget ""  # Clear budget
    """
    service = project_service(ctx)
    project_id = resolve_project_or_exit(ctx, service, project)

    changes = {}
    if name is not None:
        changes["name"] = name
    if description is not None:
        changes["description"] = description or None
    if status is not None:
        changes["status"] = status
    for key, value in (("start_date", start_date), ("end_date", end_date)):
        if value is not None:
            changes[key] = _parse_optional_date(ctx, key.replace("_", " "), value) if value else None
    if currency is not None:
        changes["currency"] = currency

    try:
        if budget is not None:
            changes["budget"] = parse_amount(budget) if budget else None
        updated = service.update_project(project_id, changes, actor_id=get_user_id(ctx))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated project '{updated.name}' (ID: {updated.id})")


@project_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_project(ctx, project: str, yes: bool) -> None:
    """Delete a project with all of its tasks, expenditures, time entries and comments.

    PROJECT can be a project name or ID.
    """
    service = project_service(ctx)
    project_id = resolve_project_or_exit(ctx, service, project)
    project_obj = service.require_project(project_id)

    if not yes:
        click.confirm(f"Delete project '{project_obj.name}' and everything in it?", abort=True)

    try:
        service.delete_project(project_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted project '{project_obj.name}' (ID: {project_id})")


def register_commands(cli):
    """Register project commands with main CLI."""
    cli.add_command(project_group, name="project")
