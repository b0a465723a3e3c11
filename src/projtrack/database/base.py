"""Abstract database interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional, Any, Mapping
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from projtrack.domain.entities import (
    Comment,
    EventKind,
    Expenditure,
    OutboxEvent,
    Project,
    ProjectSnapshot,
    ProjectStatus,
    Task,
    TaskPriority,
    TaskSnapshot,
    TaskStatus,
    TimeEntry,
)


class Database(ABC):
    """Abstract database interface for projtrack.

    Write methods commit immediately unless called inside transaction(),
    in which case everything commits together when the block exits.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """Group writes into one commit; roll all back if the block raises."""
        pass

    # Project operations
    @abstractmethod
    def create_project(
        self,
        name: str,
        status: ProjectStatus,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        budget: Optional[Decimal] = None,
        currency: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        """Create a project. Returns project ID."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def get_project_by_name(self, name: str) -> Optional[Project]:
        """Get project by exact name (first match by ID)."""
        pass

    @abstractmethod
    def list_projects(self, user_id: Optional[int] = None) -> list[Project]:
        """List projects, newest first.

        Args:
            user_id: If given, only projects created by the user or holding a
                task assigned to the user
        """
        pass

    @abstractmethod
    def update_project(self, project_id: int, fields: Mapping[str, Any]) -> None:
        """Update project columns. A None value clears the column."""
        pass

    @abstractmethod
    def delete_project(self, project_id: int) -> None:
        """Delete a project with its tasks and expenditures."""
        pass

    @abstractmethod
    def get_project_snapshot(self, project_id: int) -> Optional[ProjectSnapshot]:
        """Get a project with all its tasks and expenditures in one read."""
        pass

    # Task operations
    @abstractmethod
    def create_task(
        self,
        project_id: int,
        title: str,
        status: TaskStatus,
        priority: TaskPriority,
        completed_at: Optional[datetime] = None,
        description: Optional[str] = None,
        assigned_user_id: Optional[int] = None,
        created_by: Optional[int] = None,
        due_date: Optional[date] = None,
        actual_cost: Optional[Decimal] = None,
    ) -> int:
        """Create a task. Returns task ID."""
        pass

    @abstractmethod
    def get_task(self, task_id: int) -> Optional[Task]:
        """Get task by ID."""
        pass

    @abstractmethod
    def list_tasks(
        self,
        project_id: Optional[int] = None,
        status: Optional[TaskStatus] = None,
        user_id: Optional[int] = None,
    ) -> list[Task]:
        """List tasks, newest first, with optional filters.

        Args:
            project_id: Optional project filter
            status: Optional status filter
            user_id: Optional filter on tasks assigned to or created by the user
        """
        pass

    @abstractmethod
    def update_task(self, task_id: int, fields: Mapping[str, Any]) -> None:
        """Update editable task columns. Status columns are not accepted here."""
        pass

    @abstractmethod
    def update_task_status(
        self,
        task_id: int,
        status: TaskStatus,
        completed_at: Optional[datetime],
        require_status: Optional[TaskStatus] = None,
        exclude_status: Optional[TaskStatus] = None,
    ) -> bool:
        """Write status and completed_at together in one conditional UPDATE.

        Args:
            task_id: Task ID
            status: New status
            completed_at: New completion timestamp (None to clear)
            require_status: Only update if the stored status equals this
            exclude_status: Only update if the stored status differs from this

        Returns:
            True if the row was updated, False if the condition no longer held
        """
        pass

    @abstractmethod
    def delete_task(self, task_id: int) -> None:
        """Delete a task with its comments and time entries."""
        pass

    @abstractmethod
    def get_task_snapshot(self, task_id: int) -> Optional[TaskSnapshot]:
        """Get a task with all its time entries in one read."""
        pass

    # Expenditure operations
    @abstractmethod
    def create_expenditure(
        self,
        project_id: int,
        description: str,
        amount: Decimal,
        expense_date: date,
        recorded_by: Optional[int] = None,
    ) -> int:
        """Create an expenditure. Returns expenditure ID."""
        pass

    @abstractmethod
    def get_expenditure(self, expenditure_id: int) -> Optional[Expenditure]:
        """Get expenditure by ID."""
        pass

    @abstractmethod
    def list_expenditures(self, project_id: int) -> list[Expenditure]:
        """List a project's expenditures, latest expense date first."""
        pass

    @abstractmethod
    def update_expenditure(self, expenditure_id: int, fields: Mapping[str, Any]) -> None:
        """Update expenditure columns."""
        pass

    @abstractmethod
    def delete_expenditure(self, expenditure_id: int) -> None:
        """Delete an expenditure."""
        pass

    # Time entry operations
    @abstractmethod
    def create_time_entry(
        self,
        task_id: int,
        date_worked: date,
        duration: int,
        user_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        """Create a time entry. Returns time entry ID."""
        pass

    @abstractmethod
    def get_time_entry(self, time_entry_id: int) -> Optional[TimeEntry]:
        """Get time entry by ID."""
        pass

    @abstractmethod
    def list_time_entries(self, task_id: int) -> list[TimeEntry]:
        """List a task's time entries, latest date worked first."""
        pass

    @abstractmethod
    def delete_time_entry(self, time_entry_id: int) -> None:
        """Delete a time entry."""
        pass

    # Comment operations
    @abstractmethod
    def create_comment(self, task_id: int, body: str, user_id: Optional[int] = None) -> int:
        """Create a comment. Returns comment ID."""
        pass

    @abstractmethod
    def get_comment(self, comment_id: int) -> Optional[Comment]:
        """Get comment by ID."""
        pass

    @abstractmethod
    def list_comments(self, task_id: int) -> list[Comment]:
        """List a task's comments, oldest first."""
        pass

    # Outbox operations
    @abstractmethod
    def enqueue_event(
        self,
        kind: EventKind,
        entity_type: str,
        entity_id: int,
        actor_id: Optional[int],
        payload: Mapping[str, Any],
    ) -> int:
        """Record an event in the outbox. Returns event ID."""
        pass

    @abstractmethod
    def list_events(self, pending_only: bool = True, limit: Optional[int] = None) -> list[OutboxEvent]:
        """List outbox events in the order they were recorded."""
        pass

    @abstractmethod
    def mark_event_delivered(self, event_id: int, delivered_at: datetime) -> None:
        """Mark an outbox event as delivered."""
        pass

    @abstractmethod
    def record_event_failure(self, event_id: int, error: str) -> None:
        """Count a failed delivery attempt and keep the event pending."""
        pass
