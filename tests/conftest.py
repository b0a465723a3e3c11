"""Shared pytest fixtures for projtrack tests."""

import logging
import tempfile
import os
import time
from datetime import date, datetime, UTC
from decimal import Decimal
import pytest

from projtrack.database.factories import create_sqlite_database
from projtrack.domain.comment import CommentService
from projtrack.domain.expenditure import ExpenditureService
from projtrack.domain.lifecycle import TaskLifecycleService
from projtrack.domain.metrics import MetricsService
from projtrack.domain.project import ProjectService
from projtrack.domain.task import TaskService
from projtrack.domain.time_entry import TimeEntryService

# Frozen "now" for services that stamp completion times or check dates
FIXED_NOW = datetime(2025, 3, 14, 9, 30, tzinfo=UTC)
FIXED_TODAY = date(2025, 3, 14)

OWNER_ID = 1
ASSIGNEE_ID = 2


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def now():
    """The frozen current time used by the clock fixture."""
    return FIXED_NOW


@pytest.fixture
def clock(now):
    """A clock that always returns FIXED_NOW."""
    return lambda: now


@pytest.fixture
def today():
    """A calendar-day source that always returns FIXED_TODAY."""
    return lambda: FIXED_TODAY


@pytest.fixture
def far_east_timezone(monkeypatch):
    """Run the test with the process timezone at UTC+14."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "Etc/GMT-14")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.fixture
def project_service(temp_db):
    """Create a ProjectService with a temporary database."""
    return ProjectService(temp_db)


@pytest.fixture
def lifecycle_service(temp_db, clock, today):
    """Create a TaskLifecycleService with a temporary database and fixed clock."""
    return TaskLifecycleService(temp_db, clock=clock, today=today)


@pytest.fixture
def task_service(temp_db, lifecycle_service):
    """Create a TaskService sharing the lifecycle fixture."""
    return TaskService(temp_db, lifecycle_service)


@pytest.fixture
def expenditure_service(temp_db):
    """Create an ExpenditureService with a temporary database."""
    return ExpenditureService(temp_db)


@pytest.fixture
def time_entry_service(temp_db, clock, today):
    """Create a TimeEntryService with a temporary database and fixed clock."""
    return TimeEntryService(temp_db, clock=clock, today=today)


@pytest.fixture
def comment_service(temp_db):
    """Create a CommentService with a temporary database."""
    return CommentService(temp_db)


@pytest.fixture
def metrics_service(temp_db):
    """Create a MetricsService in expenditures mode."""
    return MetricsService(temp_db)


@pytest.fixture
def sample_project(project_service):
    """Create a sample project with a 1000 USD budget owned by OWNER_ID."""
    return project_service.create_project(
        name="Website Redesign",
        description="New marketing site",
        budget=Decimal("1000.00"),
        created_by=OWNER_ID,
    )


@pytest.fixture
def sample_task(lifecycle_service, sample_project):
    """Create a pending task in the sample project assigned to ASSIGNEE_ID."""
    return lifecycle_service.create_task(
        project_id=sample_project.id,
        title="Draft wireframes",
        assigned_user_id=ASSIGNEE_ID,
        created_by=OWNER_ID,
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture(autouse=True)
def reset_projtrack_logging():
    """Drop handlers installed by setup_logging once a test is done."""
    yield
    logger = logging.getLogger("projtrack")
    for handler in list(logger.handlers):
        if getattr(handler, "_projtrack_handler", False):
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(logging.NOTSET)
