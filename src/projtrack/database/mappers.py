"""Mapper functions to convert SQLAlchemy models to domain entities.

This layer isolates the conversion logic, so the domain model stays stable
when the database schema changes. SQLite hands back naive datetimes; they
are stored as UTC and re-tagged here.
"""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from projtrack.domain import entities as domain
from projtrack.database.models import (
    Project as ORMProject,
    Task as ORMTask,
    Expenditure as ORMExpenditure,
    TimeEntry as ORMTimeEntry,
    Comment as ORMComment,
    OutboxEvent as ORMOutboxEvent,
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


def _as_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return value if isinstance(value, Decimal) else Decimal(str(value))


def project_to_domain(orm_project: ORMProject) -> domain.Project:
    """Convert SQLAlchemy Project model to domain Project entity."""
    return domain.Project(
        id=orm_project.id,
        name=orm_project.name,
        description=orm_project.description,
        start_date=orm_project.start_date,
        end_date=orm_project.end_date,
        status=domain.ProjectStatus(orm_project.status),
        budget=_as_decimal(orm_project.budget),
        currency=orm_project.currency,
        created_by=orm_project.created_by,
        created_at=_as_utc(orm_project.created_at),
    )


def task_to_domain(orm_task: ORMTask) -> domain.Task:
    """Convert SQLAlchemy Task model to domain Task entity."""
    return domain.Task(
        id=orm_task.id,
        project_id=orm_task.project_id,
        title=orm_task.title,
        description=orm_task.description,
        status=domain.TaskStatus(orm_task.status),
        priority=domain.TaskPriority(orm_task.priority),
        assigned_user_id=orm_task.assigned_user_id,
        created_by=orm_task.created_by,
        due_date=orm_task.due_date,
        completed_at=_as_utc(orm_task.completed_at),
        actual_cost=_as_decimal(orm_task.actual_cost),
        created_at=_as_utc(orm_task.created_at),
    )


def expenditure_to_domain(orm_expenditure: ORMExpenditure) -> domain.Expenditure:
    """Convert SQLAlchemy Expenditure model to domain Expenditure entity."""
    return domain.Expenditure(
        id=orm_expenditure.id,
        project_id=orm_expenditure.project_id,
        description=orm_expenditure.description,
        amount=_as_decimal(orm_expenditure.amount),
        expense_date=orm_expenditure.expense_date,
        recorded_by=orm_expenditure.recorded_by,
        created_at=_as_utc(orm_expenditure.created_at),
    )


def time_entry_to_domain(orm_entry: ORMTimeEntry) -> domain.TimeEntry:
    """Convert SQLAlchemy TimeEntry model to domain TimeEntry entity."""
    return domain.TimeEntry(
        id=orm_entry.id,
        task_id=orm_entry.task_id,
        user_id=orm_entry.user_id,
        date_worked=orm_entry.date_worked,
        duration=orm_entry.duration,
        description=orm_entry.description,
        created_at=_as_utc(orm_entry.created_at),
    )


def comment_to_domain(orm_comment: ORMComment) -> domain.Comment:
    """Convert SQLAlchemy Comment model to domain Comment entity."""
    return domain.Comment(
        id=orm_comment.id,
        task_id=orm_comment.task_id,
        user_id=orm_comment.user_id,
        body=orm_comment.body,
        created_at=_as_utc(orm_comment.created_at),
    )


def project_snapshot_to_domain(orm_project: ORMProject) -> domain.ProjectSnapshot:
    """Convert a Project with loaded tasks and expenditures to a snapshot."""
    return domain.ProjectSnapshot(
        project=project_to_domain(orm_project),
        tasks=tuple(task_to_domain(t) for t in orm_project.tasks),
        expenditures=tuple(expenditure_to_domain(e) for e in orm_project.expenditures),
    )


def task_snapshot_to_domain(orm_task: ORMTask) -> domain.TaskSnapshot:
    """Convert a Task with loaded time entries to a snapshot."""
    return domain.TaskSnapshot(
        task=task_to_domain(orm_task),
        time_entries=tuple(time_entry_to_domain(e) for e in orm_task.time_entries),
    )


def outbox_event_to_domain(orm_event: ORMOutboxEvent) -> domain.OutboxEvent:
    """Convert SQLAlchemy OutboxEvent model to domain OutboxEvent."""
    return domain.OutboxEvent(
        id=orm_event.id,
        kind=domain.EventKind(orm_event.kind),
        entity_type=orm_event.entity_type,
        entity_id=orm_event.entity_id,
        actor_id=orm_event.actor_id,
        payload=dict(orm_event.payload or {}),
        created_at=_as_utc(orm_event.created_at),
        delivered_at=_as_utc(orm_event.delivered_at),
        attempts=orm_event.attempts,
        last_error=orm_event.last_error,
    )
