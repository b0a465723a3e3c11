"""Time logging commands."""

import click
from projtrack.cli.error_handling import handle_domain_error, parse_or_fail
from projtrack.cli.services import get_db, get_user_id
from projtrack.domain.errors import DomainError
from projtrack.domain.time_entry import TimeEntryService
from projtrack.utils.date_parser import parse_date
from projtrack.utils.duration_parser import format_duration, parse_duration


@click.group()
def time_group():
    """Log time against tasks."""
    pass


@time_group.command("log")
@click.argument("task_id", type=int)
@click.argument("duration")
@click.option("--date", "date_worked", help="Day worked (YYYY-MM-DD or relative); defaults to today")
@click.option("--description", help="What was done")
@click.pass_context
def log_time(ctx, task_id: int, duration: str, date_worked: str | None, description: str | None):
    """Log time spent on a task.

    DURATION is in minutes, or written like "1h30m".

    Examples:
        projtrack --user 2 time log 3 45
        projtrack time log 3 1h30m --date yesterday --description "Code review"
    """
    service = TimeEntryService(get_db(ctx))
    worked_on = None
    if date_worked is not None:
        today = service.today()
        worked_on = parse_or_fail(ctx, lambda text: parse_date(text, today=today), date_worked, "date")

    try:
        entry = service.log_time(
            task_id=task_id,
            duration=parse_duration(duration),
            date_worked=worked_on,
            user_id=get_user_id(ctx),
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(
        f"Logged {format_duration(entry.duration)} on task {task_id} for {entry.date_worked}"
        f" (entry ID: {entry.id})"
    )


@time_group.command("list")
@click.argument("task_id", type=int)
@click.pass_context
def list_time(ctx, task_id: int):
    """List a task's time entries, latest first."""
    try:
        entries = TimeEntryService(get_db(ctx)).list_time_entries(task_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not entries:
        click.echo("No time entries found.")
        return

    click.echo(f"\nTime entries for task {task_id}:")
    click.echo("-" * 70)
    for entry in entries:
        user = entry.user_id if entry.user_id is not None else "-"
        line = f"ID: {entry.id:3d} | {entry.date_worked} | {format_duration(entry.duration):>7s} | User: {user}"
        if entry.description:
            line += f" | {entry.description}"
        click.echo(line)
    total = sum(entry.duration for entry in entries)
    click.echo("-" * 70)
    click.echo(f"Total: {format_duration(total)} ({total} minutes)")


@time_group.command("delete")
@click.argument("task_id", type=int)
@click.argument("time_entry_id", type=int)
@click.pass_context
def delete_time(ctx, task_id: int, time_entry_id: int) -> None:
    """Delete a time entry of a task."""
    try:
        TimeEntryService(get_db(ctx)).delete_time_entry(task_id, time_entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted time entry {time_entry_id}")


def register_commands(cli):
    """Register time commands with main CLI."""
    cli.add_command(time_group, name="time")
