"""Outbox event commands."""

import json

import click
from projtrack.cli.services import get_db
from projtrack.domain.entities import OutboxEvent
from projtrack.domain.events import EventRelay


def _describe(event: OutboxEvent) -> str:
    actor = event.actor_id if event.actor_id is not None else "-"
    return f"#{event.id} {event.kind.value} {event.entity_type} {event.entity_id} (actor: {actor})"


@click.group()
def events_group():
    """Inspect and relay lifecycle events."""
    pass


@events_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include delivered events")
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum number of events")
@click.pass_context
def list_events(ctx, show_all: bool, limit: int):
    """List outbox events in the order they were recorded."""
    events = get_db(ctx).list_events(pending_only=not show_all, limit=limit)
    if not events:
        click.echo("No events found.")
        return

    for event in events:
        state = "delivered" if event.delivered_at is not None else "pending"
        line = f"{_describe(event)} [{state}]"
        if event.last_error:
            line += f" attempts={event.attempts} last_error={event.last_error}"
        click.echo(line)


@events_group.command("relay")
@click.option("--limit", type=int, default=100, show_default=True, help="Maximum number of events")
@click.option("--json", "as_json", is_flag=True, help="Print each event as a JSON line")
@click.pass_context
def relay_events(ctx, limit: int, as_json: bool):
    """Deliver pending events to stdout and mark them delivered."""
    relay = EventRelay(get_db(ctx))

    def echo_event(event: OutboxEvent) -> None:
        if as_json:
            click.echo(
                json.dumps(
                    {
                        "id": event.id,
                        "kind": event.kind.value,
                        "entity_type": event.entity_type,
                        "entity_id": event.entity_id,
                        "actor_id": event.actor_id,
                        "payload": event.payload,
                    }
                )
            )
        else:
            click.echo(_describe(event))

    relay.subscribe(echo_event)
    delivered = relay.relay(limit=limit)
    if not as_json:
        click.echo(f"Relayed {delivered} event(s)")


def register_commands(cli):
    """Register events commands with main CLI."""
    cli.add_command(events_group, name="events")
