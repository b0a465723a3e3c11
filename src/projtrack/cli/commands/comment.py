"""Task comment commands."""

import click
from projtrack.cli.error_handling import handle_domain_error
from projtrack.cli.services import get_db, get_user_id
from projtrack.domain.comment import CommentService
from projtrack.domain.errors import DomainError


@click.group()
def comment_group():
    """Comment on tasks."""
    pass


@comment_group.command("add")
@click.argument("task_id", type=int)
@click.argument("body")
@click.pass_context
def add_comment(ctx, task_id: int, body: str):
    """Add a comment to a task.

    Example:
        projtrack --user 2 comment add 3 "Blocked on design review"
    """
    try:
        comment = CommentService(get_db(ctx)).add_comment(task_id, body, user_id=get_user_id(ctx))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Added comment {comment.id} to task {task_id}")


@comment_group.command("list")
@click.argument("task_id", type=int)
@click.pass_context
def list_comments(ctx, task_id: int):
    """List a task's comments, oldest first."""
    try:
        comments = CommentService(get_db(ctx)).list_comments(task_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not comments:
        click.echo("No comments found.")
        return

    for c in comments:
        author = f"user {c.user_id}" if c.user_id is not None else "anonymous"
        stamp = c.created_at.strftime("%Y-%m-%d %H:%M") if c.created_at else ""
        click.echo(f"[{c.id}] {stamp} {author}: {c.body}")


def register_commands(cli):
    """Register comment commands with main CLI."""
    cli.add_command(comment_group, name="comment")
