"""Tests for project service."""

from datetime import date
from decimal import Decimal

import pytest

from projtrack.domain.defaults import ProjectDefaults
from projtrack.domain.entities import EventKind, ProjectStatus
from projtrack.domain.errors import InvalidAmountError, NotFoundError, ValidationError
from projtrack.domain.project import ProjectService


def test_create_project(project_service):
    """Test creating a project."""
    project = project_service.create_project(
        name="Website Redesign",
        start_date=date(2025, 1, 1),
        end_date=date(2025, 6, 30),
        budget=Decimal("1000.00"),
        currency="eur",
        created_by=1,
    )

    assert project.id is not None
    assert project.name == "Website Redesign"
    assert project.status == ProjectStatus.NOT_STARTED
    assert project.budget == Decimal("1000.00")
    assert project.currency == "EUR"
    assert project.created_by == 1


def test_create_project_defaults(project_service):
    project = project_service.create_project(name="Side project")

    assert project.status == ProjectStatus.NOT_STARTED
    assert project.budget is None
    assert project.currency == "USD"


def test_create_project_with_deployment_currency(temp_db):
    service = ProjectService(temp_db, ProjectDefaults(currency="SEK"))
    assert service.create_project(name="Local").currency == "SEK"


def test_create_project_records_event(project_service, temp_db):
    project = project_service.create_project(name="Evented", created_by=7)

    events = temp_db.list_events()
    assert [e.kind for e in events] == [EventKind.PROJECT_CREATED]
    assert events[0].entity_type == "project"
    assert events[0].entity_id == project.id
    assert events[0].actor_id == 7
    assert events[0].payload["name"] == "Evented"
    assert events[0].payload["status"] == "Not Started"


def test_create_project_validation(project_service, temp_db):
    with pytest.raises(ValidationError):
        project_service.create_project(name="")
    with pytest.raises(InvalidAmountError):
        project_service.create_project(name="Broke", budget=Decimal("-1"))
    with pytest.raises(ValidationError):
        project_service.create_project(name="Backwards", start_date=date(2025, 2, 1), end_date=date(2025, 1, 1))
    with pytest.raises(ValidationError):
        project_service.create_project(name="Money", currency="EURO")

    assert project_service.list_projects() == []
    assert temp_db.list_events() == []


def test_update_project(project_service, sample_project, temp_db):
    updated = project_service.update_project(
        sample_project.id,
        {"status": "in progress", "budget": Decimal("1500.00"), "description": None},
        actor_id=1,
    )

    assert updated.status == ProjectStatus.IN_PROGRESS
    assert updated.budget == Decimal("1500.00")
    assert updated.description is None

    kinds = [e.kind for e in temp_db.list_events()]
    assert kinds == [EventKind.PROJECT_CREATED, EventKind.PROJECT_UPDATED]


def test_update_project_clear_budget(project_service, sample_project):
    updated = project_service.update_project(sample_project.id, {"budget": None})
    assert updated.budget is None


def test_update_project_checks_dates_against_stored_values(project_service):
    project = project_service.create_project(
        name="Dated", start_date=date(2025, 3, 1), end_date=date(2025, 4, 1)
    )
    with pytest.raises(ValidationError):
        project_service.update_project(project.id, {"end_date": date(2025, 2, 1)})


def test_update_project_rejects_unknown_status(project_service, sample_project):
    with pytest.raises(ValidationError):
        project_service.update_project(sample_project.id, {"status": "Abandoned"})


def test_update_project_rejects_unknown_field(project_service, sample_project):
    with pytest.raises(ValidationError):
        project_service.update_project(sample_project.id, {"created_by": 5})


def test_update_without_changes_records_nothing(project_service, sample_project, temp_db):
    project_service.update_project(sample_project.id, {})
    assert len(temp_db.list_events()) == 1


def test_update_unknown_project(project_service):
    with pytest.raises(NotFoundError):
        project_service.update_project(999, {"name": "Ghost"})


def test_get_project_by_name(project_service, sample_project):
    assert project_service.get_project_by_name("Website Redesign").id == sample_project.id
    assert project_service.get_project_by_name("Missing") is None


def test_list_projects_for_user(project_service, lifecycle_service):
    owned = project_service.create_project(name="Owned", created_by=1)
    assigned = project_service.create_project(name="Assigned", created_by=9)
    project_service.create_project(name="Unrelated", created_by=9)
    lifecycle_service.create_task(assigned.id, "Help out", assigned_user_id=1)

    names = {p.name for p in project_service.list_projects(user_id=1)}
    assert names == {owned.name, assigned.name}
    assert len(project_service.list_projects()) == 3


def test_delete_project_cascades(
    project_service,
    expenditure_service,
    time_entry_service,
    comment_service,
    temp_db,
    sample_project,
    sample_task,
):
    expenditure = expenditure_service.add_expenditure(
        sample_project.id, "Hosting", Decimal("50.00"), date(2025, 3, 1)
    )
    entry = time_entry_service.log_time(sample_task.id, 60)
    comment = comment_service.add_comment(sample_task.id, "On it", user_id=2)

    project_service.delete_project(sample_project.id)

    assert project_service.get_project(sample_project.id) is None
    assert temp_db.get_task(sample_task.id) is None
    assert temp_db.get_expenditure(expenditure.id) is None
    assert temp_db.get_time_entry(entry.id) is None
    assert temp_db.get_comment(comment.id) is None


def test_delete_unknown_project(project_service):
    with pytest.raises(NotFoundError):
        project_service.delete_project(999)
