"""Task lifecycle: creation and status transitions.

States are pending, in progress and completed. completed_at is set if and
only if the status is completed; every transition below writes both fields
in one statement so no intermediate state is ever stored.

    pending/in progress --mark_complete--> completed (completed_at = now)
    completed --undo_complete--> in progress (completed_at = None)
    any --set_status(non-completed)--> that status (completed_at = None)

Completion is only recorded by mark_complete. A generic status edit to
completed is refused rather than storing a completed task without a
timestamp.

The controller does not check authorization; callers do that first
(see projtrack.domain.access).
"""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Callable, Optional

from projtrack.database.base import Database
from projtrack.domain.defaults import TaskDefaults
from projtrack.domain.entities import EventKind, Task, TaskPriority, TaskStatus
from projtrack.domain.errors import (
    AlreadyCompletedError,
    CompletionRequiredError,
    InconsistentStateError,
    NotCompletedError,
    NotFoundError,
    completion_requires_action,
    inconsistent_task_state,
    project_not_found,
    task_already_completed,
    task_not_completed,
    task_not_found,
)
from projtrack.domain.events import record_event
from projtrack.domain.validation import (
    optional_money,
    optional_text,
    parse_choice,
    require_not_past,
    require_text,
)

logger = logging.getLogger(__name__)


def is_consistent(task: Task) -> bool:
    """True when status and completed_at agree."""
    return task.is_completed == (task.completed_at is not None)


class TaskLifecycleService:
    """Service enforcing legal task status transitions."""

    def __init__(
        self,
        db: Database,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
        defaults: TaskDefaults = TaskDefaults(),
        repair_inconsistent: bool = False,
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize task lifecycle service.

        Args:
            db: Database instance
            clock: Returns the current UTC time; used for completed_at
            defaults: Creation policy for new tasks
            repair_inconsistent: If True, fix stored tasks whose status and
                completed_at disagree instead of raising
            today: Returns the user's calendar day; defaults to clock()
                converted to the local timezone
        """
        self.db = db
        self.clock = clock
        self.defaults = defaults
        self.repair_inconsistent = repair_inconsistent
        self._today = today

    def today(self) -> date:
        """Return the calendar day due dates are checked against."""
        if self._today is not None:
            return self._today()
        return self.clock().astimezone().date()

    def create_task(
        self,
        project_id: int,
        title: str,
        description: Optional[str] = None,
        priority: Optional[TaskPriority | str] = None,
        assigned_user_id: Optional[int] = None,
        due_date: Optional[date] = None,
        actual_cost: Optional[Decimal] = None,
        created_by: Optional[int] = None,
    ) -> Task:
        """Create a task in its initial state.

        The new task is always pending with no completion timestamp.

        Args:
            project_id: Owning project ID
            title: Task title
            description: Optional description
            priority: Optional priority (defaults to medium)
            assigned_user_id: Optional assignee
            due_date: Optional due date, not in the past
            actual_cost: Optional non-negative cost in the project's currency
            created_by: ID of the creating user

        Returns:
            The created task

        Raises:
            ValidationError: If any input is invalid
            NotFoundError: If project doesn't exist
        """
        title = require_text("title", title)
        description = optional_text("description", description)
        if priority is not None:
            priority = parse_choice(TaskPriority, priority, "priority")
        if due_date is not None:
            require_not_past("due_date", due_date, self.today())
        actual_cost = optional_money("actual_cost", actual_cost)

        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))

        with self.db.transaction():
            task_id = self.db.create_task(
                project_id=project_id,
                title=title,
                description=description,
                assigned_user_id=assigned_user_id,
                created_by=created_by,
                due_date=due_date,
                actual_cost=actual_cost,
                **self.defaults.initial_fields(priority),
            )
            task = self.db.get_task(task_id)
            record_event(self.db, EventKind.TASK_CREATED, task, created_by)

        logger.info("Created task %s in project %s", task.id, project_id)
        return task

    def get_task(self, task_id: int) -> Task:
        """Get a task, checking its status/completed_at invariant.

        Raises:
            NotFoundError: If task doesn't exist
            InconsistentStateError: If the stored task violates the invariant
                and repair is disabled
        """
        task = self.db.get_task(task_id)
        if task is None:
            raise NotFoundError(task_not_found(task_id))
        return self.verify_task(task)

    def verify_task(self, task: Task) -> Task:
        """Check (or repair) the status/completed_at invariant of a loaded task."""
        if is_consistent(task):
            return task

        message = inconsistent_task_state(task.id, task.status.value, task.completed_at)
        if not self.repair_inconsistent:
            logger.error("Data integrity violation: %s", message)
            raise InconsistentStateError(message)

        # A completed label without a timestamp gets stamped now; a timestamp
        # on a non-completed task is dropped.
        completed_at = self.clock() if task.is_completed else None
        logger.error("Repairing task %s: %s; setting completed_at=%r", task.id, message, completed_at)
        self.db.update_task_status(task.id, task.status, completed_at)
        return self._reload(task.id)

    def set_status(self, task_id: int, new_status: TaskStatus | str) -> Task:
        """Generic status edit.

        Moving to a non-completed status clears completed_at in the same
        write. Re-asserting completed on a completed task is a no-op.

        Raises:
            NotFoundError: If task doesn't exist
            CompletionRequiredError: If asked to move a non-completed task to
                completed (use mark_complete)
        """
        new_status = parse_choice(TaskStatus, new_status, "status")
        task = self.get_task(task_id)

        if new_status == TaskStatus.COMPLETED:
            if task.is_completed:
                return task
            raise CompletionRequiredError(completion_requires_action(task_id))

        if not self.db.update_task_status(task_id, new_status, None):
            raise NotFoundError(task_not_found(task_id))

        logger.info("Task %s status %s -> %s", task_id, task.status.value, new_status.value)
        return self._reload(task_id)

    def mark_complete(self, task_id: int) -> Task:
        """Record completion: status completed, completed_at now.

        Raises:
            NotFoundError: If task doesn't exist
            AlreadyCompletedError: If the task is (or concurrently became)
                completed; nothing is changed
        """
        task = self.get_task(task_id)
        if task.is_completed:
            logger.warning("mark_complete rejected: task %s already completed", task_id)
            raise AlreadyCompletedError(task_already_completed(task_id))

        updated = self.db.update_task_status(
            task_id,
            TaskStatus.COMPLETED,
            self.clock(),
            exclude_status=TaskStatus.COMPLETED,
        )
        if not updated:
            self._raise_lost_race(task_id, AlreadyCompletedError(task_already_completed(task_id)))

        logger.info("Task %s marked complete", task_id)
        return self._reload(task_id)

    def undo_complete(self, task_id: int) -> Task:
        """Revert completion: status in progress, completed_at cleared.

        Undo always lands in "in progress", never the pre-completion status.

        Raises:
            NotFoundError: If task doesn't exist
            NotCompletedError: If the task is not (or concurrently stopped
                being) completed; nothing is changed
        """
        task = self.get_task(task_id)
        if not task.is_completed:
            logger.warning("undo_complete rejected: task %s is %s", task_id, task.status.value)
            raise NotCompletedError(task_not_completed(task_id))

        updated = self.db.update_task_status(
            task_id,
            TaskStatus.IN_PROGRESS,
            None,
            require_status=TaskStatus.COMPLETED,
        )
        if not updated:
            self._raise_lost_race(task_id, NotCompletedError(task_not_completed(task_id)))

        logger.info("Task %s completion undone", task_id)
        return self._reload(task_id)

    def _raise_lost_race(self, task_id: int, error: Exception) -> None:
        """A conditional update matched nothing: task gone or precondition lost."""
        if self.db.get_task(task_id) is None:
            raise NotFoundError(task_not_found(task_id))
        logger.warning("Concurrent update on task %s: %s", task_id, error)
        raise error

    def _reload(self, task_id: int) -> Task:
        task = self.db.get_task(task_id)
        if task is None:
            raise NotFoundError(task_not_found(task_id))
        return task
