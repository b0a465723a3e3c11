"""Task domain service: editing, listing and deleting tasks.

Creation and status transitions go through TaskLifecycleService.
"""

import logging
from typing import Any, Mapping, Optional

from projtrack.database.base import Database
from projtrack.domain.entities import EventKind, Task, TaskPriority, TaskStatus
from projtrack.domain.errors import (
    CompletionRequiredError,
    NotFoundError,
    ValidationError,
    completion_requires_action,
    task_not_found,
)
from projtrack.domain.events import record_event
from projtrack.domain.lifecycle import TaskLifecycleService
from projtrack.domain.validation import (
    optional_money,
    optional_text,
    parse_choice,
    require_not_past,
    require_text,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "description",
    "priority",
    "assigned_user_id",
    "due_date",
    "actual_cost",
    "status",
)


class TaskService:
    """Service for managing tasks."""

    def __init__(self, db: Database, lifecycle: Optional[TaskLifecycleService] = None):
        """Initialize task service.

        Args:
            db: Database instance
            lifecycle: Lifecycle service used for status edits and reads
        """
        self.db = db
        self.lifecycle = lifecycle if lifecycle is not None else TaskLifecycleService(db)

    def get_task(self, task_id: int) -> Task:
        """Get task by ID.

        Raises:
            NotFoundError: If task doesn't exist
            InconsistentStateError: If the stored task violates the
                status/completed_at invariant
        """
        return self.lifecycle.get_task(task_id)

    def list_tasks(
        self,
        project_id: Optional[int] = None,
        status: Optional[TaskStatus | str] = None,
        user_id: Optional[int] = None,
    ) -> list[Task]:
        """List tasks, newest first.

        Args:
            project_id: Optional project filter
            status: Optional status filter
            user_id: Optional filter on tasks assigned to or created by the user

        Returns:
            List of task entities
        """
        if status is not None:
            status = parse_choice(TaskStatus, status, "status")
        tasks = self.db.list_tasks(project_id=project_id, status=status, user_id=user_id)
        return [self.lifecycle.verify_task(t) for t in tasks]

    def update_task(self, task_id: int, changes: Mapping[str, Any]) -> Task:
        """Update task fields.

        Every value is validated before anything is written. A status change
        is applied through the lifecycle's generic status edit, in the same
        transaction as the other fields.

        Args:
            task_id: Task ID to update
            changes: Field name to new value; None clears optional fields

        Returns:
            The updated task

        Raises:
            NotFoundError: If task doesn't exist
            ValidationError: If a field is unknown or a value is invalid
            CompletionRequiredError: If status is set to completed on a task
                that is not completed
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update task field(s): {', '.join(sorted(unknown))}")

        task = self.get_task(task_id)
        fields: dict[str, Any] = {}
        if "title" in changes:
            fields["title"] = require_text("title", changes["title"])
        if "description" in changes:
            fields["description"] = optional_text("description", changes["description"])
        if "priority" in changes:
            fields["priority"] = parse_choice(TaskPriority, changes["priority"], "priority")
        if "assigned_user_id" in changes:
            fields["assigned_user_id"] = changes["assigned_user_id"]
        if "due_date" in changes:
            due_date = changes["due_date"]
            if due_date is not None:
                require_not_past("due_date", due_date, self.lifecycle.today())
            fields["due_date"] = due_date
        if "actual_cost" in changes:
            fields["actual_cost"] = optional_money("actual_cost", changes["actual_cost"])

        new_status = None
        if "status" in changes:
            new_status = parse_choice(TaskStatus, changes["status"], "status")
            if new_status == TaskStatus.COMPLETED and not task.is_completed:
                raise CompletionRequiredError(completion_requires_action(task_id))

        with self.db.transaction():
            if fields:
                self.db.update_task(task_id, fields)
            if new_status is not None and new_status != task.status:
                self.lifecycle.set_status(task_id, new_status)

        logger.info("Updated task %s", task_id)
        return self.get_task(task_id)

    def delete_task(self, task_id: int, actor_id: Optional[int] = None) -> None:
        """Delete a task with its comments and time entries.

        The task.deleted event is recorded before the row is removed,
        carrying the task's last state.

        Raises:
            NotFoundError: If task doesn't exist
        """
        task = self.db.get_task(task_id)
        if task is None:
            raise NotFoundError(task_not_found(task_id))

        with self.db.transaction():
            record_event(self.db, EventKind.TASK_DELETED, task, actor_id)
            self.db.delete_task(task_id)

        logger.info("Deleted task %s from project %s", task_id, task.project_id)
