"""Expenditure commands."""

from decimal import Decimal

import click
from projtrack.cli.error_handling import handle_domain_error, parse_or_fail
from projtrack.cli.project_resolution import resolve_project_or_exit
from projtrack.cli.services import get_db, get_user_id, project_service
from projtrack.domain.errors import DomainError
from projtrack.domain.expenditure import ExpenditureService
from projtrack.utils.amount_parser import format_amount, parse_amount
from projtrack.utils.date_parser import parse_date


def _parse_expense_date(ctx, value: str):
    return parse_or_fail(ctx, parse_date, value, "date")


@click.group()
def expense_group():
    """Manage project expenditures."""
    pass


@expense_group.command("add")
@click.argument("project", metavar="PROJECT")
@click.argument("description")
@click.argument("amount")
@click.option("--date", "expense_date", default="today", show_default=True, help="Expense date (YYYY-MM-DD or relative)")
@click.pass_context
def add_expense(ctx, project: str, description: str, amount: str, expense_date: str):
    """Record an expenditure against a project.

    PROJECT can be a project name or ID. AMOUNT must be positive.

    Examples:
        projtrack expense add "Website Redesign" "Stock photos" 250.50
        projtrack expense add 1 "Hosting" '$1,200' --date 2025-01-31
    """
    project_id = resolve_project_or_exit(ctx, project_service(ctx), project)
    spent_on = _parse_expense_date(ctx, expense_date)
    service = ExpenditureService(get_db(ctx))

    try:
        expenditure = service.add_expenditure(
            project_id=project_id,
            description=description,
            amount=parse_amount(amount),
            expense_date=spent_on,
            recorded_by=get_user_id(ctx),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    currency = project_service(ctx).require_project(project_id).currency
    click.echo(
        f"Recorded expenditure {expenditure.id}: {format_amount(expenditure.amount, currency)}"
        f" on {expenditure.expense_date}"
    )


@expense_group.command("list")
@click.argument("project", metavar="PROJECT")
@click.pass_context
def list_expenses(ctx, project: str):
    """List a project's expenditures, latest first."""
    projects = project_service(ctx)
    project_id = resolve_project_or_exit(ctx, projects, project)
    currency = projects.require_project(project_id).currency

    expenditures = ExpenditureService(get_db(ctx)).list_expenditures(project_id)
    if not expenditures:
        click.echo("No expenditures found.")
        return

    click.echo(f"\nFound {len(expenditures)} expenditure(s):")
    click.echo("-" * 80)
    for e in expenditures:
        click.echo(
            f"ID: {e.id:3d} | {e.expense_date} | {format_amount(e.amount, currency):>16s} | {e.description}"
        )
    total = sum((e.amount for e in expenditures), Decimal("0"))
    click.echo("-" * 80)
    click.echo(f"Total: {format_amount(total, currency)}")


@expense_group.command("update")
@click.argument("project", metavar="PROJECT")
@click.argument("expenditure_id", type=int)
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--date", "expense_date", help="New expense date")
@click.pass_context
def update_expense(
    ctx,
    project: str,
    expenditure_id: int,
    description: str | None,
    amount: str | None,
    expense_date: str | None,
) -> None:
    """Update an expenditure of a project."""
    project_id = resolve_project_or_exit(ctx, project_service(ctx), project)

    changes = {}
    if description is not None:
        changes["description"] = description
    if expense_date is not None:
        changes["expense_date"] = _parse_expense_date(ctx, expense_date)

    try:
        if amount is not None:
            changes["amount"] = parse_amount(amount)
        ExpenditureService(get_db(ctx)).update_expenditure(project_id, expenditure_id, changes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated expenditure {expenditure_id}")


@expense_group.command("delete")
@click.argument("project", metavar="PROJECT")
@click.argument("expenditure_id", type=int)
@click.pass_context
def delete_expense(ctx, project: str, expenditure_id: int) -> None:
    """Delete an expenditure of a project."""
    project_id = resolve_project_or_exit(ctx, project_service(ctx), project)
    try:
        ExpenditureService(get_db(ctx)).delete_expenditure(project_id, expenditure_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Deleted expenditure {expenditure_id}")


def register_commands(cli):
    """Register expense commands with main CLI."""
    cli.add_command(expense_group, name="expense")
