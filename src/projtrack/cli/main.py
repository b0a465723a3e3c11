"""Main CLI entry point."""

import dataclasses

import click
from projtrack.cli.error_handling import fail
from projtrack.config import (
    ENV_COST_TRACKING_MODE,
    ENV_DB_PATH,
    ENV_LOG_FILE,
    ENV_LOG_LEVEL,
    Settings,
    parse_cost_tracking_mode,
)
from projtrack.database.factories import create_sqlite_database
from projtrack.domain.entities import CostTrackingMode
from projtrack.domain.errors import DomainError
from projtrack.utils.logging_setup import setup_logging

# Import and register all commands at module level
from projtrack.cli.commands import (
    project,
    task,
    expense,
    time_cmd,
    comment,
    events,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {ENV_DB_PATH} environment variable)",
    envvar=ENV_DB_PATH,
)
@click.option(
    "--user",
    "user_id",
    type=int,
    envvar="PROJTRACK_USER_ID",
    help="ID of the acting user (recorded on new entities and events)",
)
@click.option(
    "--cost-mode",
    type=click.Choice([mode.value for mode in CostTrackingMode]),
    envvar=ENV_COST_TRACKING_MODE,
    help="What remaining budget is measured against",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    envvar=ENV_LOG_LEVEL,
    help="Logging level (default WARNING)",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    envvar=ENV_LOG_FILE,
    help="Also write logs to this rotating file",
)
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    user_id: int | None,
    cost_mode: str | None,
    log_level: str | None,
    log_file: str | None,
):
    """Projtrack - Project and task tracking.

    Track projects with budgets and expenditures, tasks with a completion
    lifecycle, time logged against tasks, and comments.
    """
    ctx.ensure_object(dict)

    try:
        settings = Settings.from_env()
    except DomainError as e:
        fail(ctx, f"Invalid configuration: {e}")

    overrides = {}
    if db_path:
        overrides["database_path"] = db_path
    if cost_mode:
        overrides["cost_tracking_mode"] = parse_cost_tracking_mode(cost_mode)
    if log_level:
        overrides["log_level"] = log_level.upper()
    if log_file:
        overrides["log_file"] = log_file
    settings = dataclasses.replace(settings, **overrides)

    ctx.obj["settings"] = settings
    ctx.obj["user_id"] = user_id

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        setup_logging(settings.log_level, settings.log_file)
        db = create_sqlite_database(database_path=settings.database_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
project.register_commands(cli)
task.register_commands(cli)
expense.register_commands(cli)
time_cmd.register_commands(cli)
comment.register_commands(cli)
events.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
