"""Task management commands."""

import click
from projtrack.cli.error_handling import fail, handle_domain_error, parse_or_fail
from projtrack.cli.project_resolution import resolve_project_or_exit
from projtrack.cli.services import (
    get_db,
    get_user_id,
    lifecycle_service,
    metrics_service,
    project_service,
    task_service,
)
from projtrack.domain.access import ensure_can_modify_task
from projtrack.domain.entities import TaskPriority, TaskStatus
from projtrack.domain.errors import DomainError
from projtrack.utils.amount_parser import format_amount, parse_amount
from projtrack.utils.date_parser import parse_date
from projtrack.utils.duration_parser import format_duration

STATUS_CHOICES = [status.value for status in TaskStatus]
PRIORITY_CHOICES = [priority.value for priority in TaskPriority]


def _parse_due_date(ctx, value: str):
    today = lifecycle_service(ctx).today()
    return parse_or_fail(ctx, lambda text: parse_date(text, today=today), value, "due date")


def _authorize(ctx, task_id: int) -> None:
    """Exit unless the acting user is the assignee or the project owner."""
    user_id = get_user_id(ctx)
    if user_id is None:
        fail(ctx, "This command requires --user (or PROJTRACK_USER_ID)")

    try:
        task = task_service(ctx).get_task(task_id)
        project = project_service(ctx).require_project(task.project_id)
        ensure_can_modify_task(task, project, user_id)
    except DomainError as e:
        handle_domain_error(ctx, e)


@click.group()
def task_group():
    """Manage tasks."""
    pass


@task_group.command("add")
@click.argument("project", metavar="PROJECT")
@click.argument("title", metavar="TITLE")
@click.option("--description", help="Task description")
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES, case_sensitive=False), help="Priority (default medium)")
@click.option("--assign", "assigned_user_id", type=int, help="Assignee user ID")
@click.option("--due", help="Due date (YYYY-MM-DD or relative like 'next friday'), not in the past")
@click.option("--cost", help="Actual cost in the project's currency")
@click.pass_context
def add_task(
    ctx,
    project: str,
    title: str,
    description: str | None,
    priority: str | None,
    assigned_user_id: int | None,
    due: str | None,
    cost: str | None,
):
    """Add a task to a project.

    PROJECT can be a project name or ID. New tasks are always pending.

    Examples:
        projtrack task add "Website Redesign" "Draft wireframes"
        projtrack --user 1 task add 1 "Fix login" --priority high --assign 2 --due tomorrow
    """
    project_id = resolve_project_or_exit(ctx, project_service(ctx), project)
    due_date = _parse_due_date(ctx, due) if due is not None else None

    try:
        task = lifecycle_service(ctx).create_task(
            project_id=project_id,
            title=title,
            description=description,
            priority=priority,
            assigned_user_id=assigned_user_id,
            due_date=due_date,
            actual_cost=parse_amount(cost) if cost is not None else None,
            created_by=get_user_id(ctx),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created task '{task.title}' (ID: {task.id}) in project {project_id}")


@task_group.command("list")
@click.option("--project", help="Project name or ID")
@click.option("--status", type=click.Choice(STATUS_CHOICES, case_sensitive=False), help="Only tasks with this status")
@click.option("--mine", is_flag=True, help="Only tasks assigned to or created by the --user")
@click.pass_context
def list_tasks(ctx, project: str | None, status: str | None, mine: bool):
    """List tasks, newest first."""
    project_id = None
    if project is not None:
        project_id = resolve_project_or_exit(ctx, project_service(ctx), project)

    user_id = get_user_id(ctx)
    if mine and user_id is None:
        fail(ctx, "--mine requires --user")

    try:
        tasks = task_service(ctx).list_tasks(
            project_id=project_id, status=status, user_id=user_id if mine else None
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not tasks:
        click.echo("No tasks found.")
        return

    click.echo(f"\nFound {len(tasks)} task(s):")
    click.echo("-" * 100)
    for t in tasks:
        assignee = t.assigned_user_id if t.assigned_user_id is not None else "-"
        due = t.due_date.isoformat() if t.due_date else "-"
        click.echo(
            f"ID: {t.id:3d} | {t.title:30s} | {t.status.value:11s} | "
            f"{t.priority.value:6s} | Assignee: {assignee} | Due: {due}"
        )


@task_group.command("show")
@click.argument("task_id", type=int)
@click.pass_context
def show_task(ctx, task_id: int):
    """Show a task with time spent and comment count."""
    try:
        task = task_service(ctx).get_task(task_id)
        project = project_service(ctx).require_project(task.project_id)
        metrics = metrics_service(ctx).get_task_metrics(task_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    comments = get_db(ctx).list_comments(task_id)

    click.echo(f"\nTask: {task.title} (ID: {task.id})")
    click.echo("=" * 60)
    click.echo(f"Project: {project.name} (ID: {project.id})")
    click.echo(f"Status: {task.status.value}")
    if task.completed_at is not None:
        click.echo(f"Completed at: {task.completed_at.isoformat(timespec='seconds')}")
    click.echo(f"Priority: {task.priority.value}")
    if task.description:
        click.echo(f"Description: {task.description}")
    if task.assigned_user_id is not None:
        click.echo(f"Assignee: {task.assigned_user_id}")
    if task.due_date is not None:
        click.echo(f"Due: {task.due_date}")
    if task.actual_cost is not None:
        click.echo(f"Actual cost: {format_amount(task.actual_cost, project.currency)}")
    click.echo(
        f"Time spent: {format_duration(metrics.total_time_spent)} ({metrics.total_time_spent} minutes)"
    )
    click.echo(f"Comments: {len(comments)}")


@task_group.command("update")
@click.argument("task_id", type=int)
@click.option("--title", help="New title")
@click.option("--description", help="New description (empty string to clear)")
@click.option("--priority", type=click.Choice(PRIORITY_CHOICES, case_sensitive=False), help="New priority")
@click.option("--status", type=click.Choice(STATUS_CHOICES, case_sensitive=False), help="New status (use 'complete' to finish a task)")
@click.option("--assign", "assigned_user_id", help="New assignee user ID (empty string to unassign)")
@click.option("--due", help="New due date (empty string to clear)")
@click.option("--cost", help="New actual cost (empty string to clear)")
@click.pass_context
def update_task(
    ctx,
    task_id: int,
    title: str | None,
    description: str | None,
    priority: str | None,
    status: str | None,
    assigned_user_id: str | None,
    due: str | None,
    cost: str | None,
) -> None:
    """Update a task.

    Updates only the fields that are provided. Moving a task away from
    completed clears its completion time.

    Examples:
        projtrack task update 3 --priority high --due 2025-06-30
        projtrack task update 3 --status pending
        projtrack task update 3 --assign ""  # Unassign
    """
    changes = {}
    if title is not None:
        changes["title"] = title
    if description is not None:
        changes["description"] = description or None
    if priority is not None:
        changes["priority"] = priority
    if status is not None:
        changes["status"] = status
    if assigned_user_id is not None:
        if assigned_user_id == "":
            changes["assigned_user_id"] = None
        elif assigned_user_id.isdigit():
            changes["assigned_user_id"] = int(assigned_user_id)
        else:
            fail(ctx, f"Invalid assignee '{assigned_user_id}'")
    if due is not None:
        changes["due_date"] = _parse_due_date(ctx, due) if due else None

    try:
        if cost is not None:
            changes["actual_cost"] = parse_amount(cost) if cost else None
        task = task_service(ctx).update_task(task_id, changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated task {task.id} ({task.status.value})")


@task_group.command("complete")
@click.argument("task_id", type=int)
@click.pass_context
def complete_task(ctx, task_id: int) -> None:
    """Mark a task as completed.

    Only the task's assignee or the project's owner may do this.
    """
    _authorize(ctx, task_id)
    try:
        task = lifecycle_service(ctx).mark_complete(task_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Task {task.id} completed at {task.completed_at.isoformat(timespec='seconds')}")


@task_group.command("undo")
@click.argument("task_id", type=int)
@click.pass_context
def undo_task(ctx, task_id: int) -> None:
    """Revert a completed task to in progress.

    Only the task's assignee or the project's owner may do this.
    """
    _authorize(ctx, task_id)
    try:
        task = lifecycle_service(ctx).undo_complete(task_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Task {task.id} is {task.status.value} again")


@task_group.command("delete")
@click.argument("task_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation")
@click.pass_context
def delete_task(ctx, task_id: int, yes: bool) -> None:
    """Delete a task with its time entries and comments."""
    service = task_service(ctx)
    try:
        task = service.get_task(task_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not yes:
        click.confirm(f"Delete task '{task.title}'?", abort=True)

    try:
        service.delete_task(task_id, actor_id=get_user_id(ctx))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted task {task_id}")


def register_commands(cli):
    """Register task commands with main CLI."""
    cli.add_command(task_group, name="task")
