"""Tests for task editing, listing and deletion."""

from datetime import date
from decimal import Decimal

import pytest

from projtrack.domain.entities import EventKind, TaskPriority, TaskStatus
from projtrack.domain.errors import (
    CompletionRequiredError,
    InvalidAmountError,
    NotFoundError,
    ValidationError,
)


def test_update_fields(task_service, sample_task):
    task = task_service.update_task(
        sample_task.id,
        {
            "title": "Final wireframes",
            "priority": "high",
            "due_date": date(2025, 5, 1),
            "actual_cost": "80.00",
        },
    )

    assert task.title == "Final wireframes"
    assert task.priority == TaskPriority.HIGH
    assert task.due_date == date(2025, 5, 1)
    assert task.actual_cost == Decimal("80.00")


def test_update_clears_optional_fields(task_service, sample_task):
    task_service.update_task(sample_task.id, {"description": "Temp", "actual_cost": Decimal("5")})
    task = task_service.update_task(
        sample_task.id, {"description": None, "actual_cost": None, "assigned_user_id": None}
    )

    assert task.description is None
    assert task.actual_cost is None
    assert task.assigned_user_id is None


def test_status_edit_away_from_completed_clears_timestamp(task_service, lifecycle_service, sample_task):
    lifecycle_service.mark_complete(sample_task.id)
    task = task_service.update_task(sample_task.id, {"status": "pending", "title": "Reopened"})

    assert task.status == TaskStatus.PENDING
    assert task.completed_at is None
    assert task.title == "Reopened"


def test_status_edit_to_completed_refused(task_service, sample_task):
    with pytest.raises(CompletionRequiredError):
        task_service.update_task(sample_task.id, {"status": "completed", "title": "Done?"})

    task = task_service.get_task(sample_task.id)
    assert task.status == TaskStatus.PENDING
    assert task.title == "Draft wireframes"


def test_invalid_cost_changes_nothing(task_service, sample_task):
    with pytest.raises(InvalidAmountError):
        task_service.update_task(sample_task.id, {"title": "Changed", "actual_cost": "-5"})

    assert task_service.get_task(sample_task.id).title == "Draft wireframes"


def test_cost_with_fractional_cents_rejected(task_service, sample_task):
    with pytest.raises(InvalidAmountError):
        task_service.update_task(sample_task.id, {"actual_cost": "10.005"})


def test_past_due_date_rejected(task_service, sample_task):
    with pytest.raises(ValidationError):
        task_service.update_task(sample_task.id, {"due_date": date(2024, 1, 1)})


def test_unknown_field_rejected(task_service, sample_task):
    with pytest.raises(ValidationError, match="completed_at"):
        task_service.update_task(sample_task.id, {"completed_at": None})


def test_update_unknown_task(task_service):
    with pytest.raises(NotFoundError):
        task_service.update_task(999, {"title": "Nope"})


def test_list_tasks_filters(task_service, lifecycle_service, sample_project, sample_task):
    other = lifecycle_service.create_task(sample_project.id, "Other", assigned_user_id=3, created_by=3)
    lifecycle_service.mark_complete(other.id)

    assert {t.id for t in task_service.list_tasks(project_id=sample_project.id)} == {
        sample_task.id,
        other.id,
    }
    assert [t.id for t in task_service.list_tasks(status="completed")] == [other.id]
    assert [t.id for t in task_service.list_tasks(user_id=2)] == [sample_task.id]
    assert [t.id for t in task_service.list_tasks(user_id=3)] == [other.id]


def test_list_tasks_newest_first(task_service, lifecycle_service, sample_project):
    first = lifecycle_service.create_task(sample_project.id, "First")
    second = lifecycle_service.create_task(sample_project.id, "Second")

    ids = [t.id for t in task_service.list_tasks(project_id=sample_project.id)]
    assert ids.index(second.id) < ids.index(first.id)


def test_delete_task_records_event_with_last_state(task_service, temp_db, sample_task):
    task_service.delete_task(sample_task.id, actor_id=1)

    assert temp_db.get_task(sample_task.id) is None
    deleted = [e for e in temp_db.list_events() if e.kind == EventKind.TASK_DELETED]
    assert len(deleted) == 1
    assert deleted[0].entity_id == sample_task.id
    assert deleted[0].actor_id == 1
    assert deleted[0].payload["title"] == "Draft wireframes"


def test_delete_task_removes_children(task_service, time_entry_service, comment_service, temp_db, sample_task):
    entry = time_entry_service.log_time(sample_task.id, 30)
    comment = comment_service.add_comment(sample_task.id, "Looks good", user_id=2)

    task_service.delete_task(sample_task.id)

    assert temp_db.get_time_entry(entry.id) is None
    assert temp_db.get_comment(comment.id) is None


def test_delete_unknown_task(task_service, temp_db):
    with pytest.raises(NotFoundError):
        task_service.delete_task(999)
    assert not [e for e in temp_db.list_events() if e.kind == EventKind.TASK_DELETED]
