"""Derived project and task figures.

Every figure is recomputed from a freshly loaded snapshot on each call;
nothing here is cached or persisted. Money sums stay in Decimal.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from projtrack.database.base import Database
from projtrack.domain.entities import (
    CostTrackingMode,
    ProjectMetrics,
    ProjectSnapshot,
    TaskMetrics,
    TaskSnapshot,
)
from projtrack.domain.errors import NotFoundError, project_not_found, task_not_found

ZERO = Decimal("0")


def compute_total_expenditure(snapshot: ProjectSnapshot) -> Decimal:
    """Sum of the project's expenditure amounts, 0 if there are none."""
    return sum((e.amount for e in snapshot.expenditures), ZERO)


def compute_total_task_cost(snapshot: ProjectSnapshot) -> Decimal:
    """Sum of the project's task actual costs; unset costs count as 0."""
    return sum(
        (t.actual_cost for t in snapshot.tasks if t.actual_cost is not None), ZERO
    )


def compute_remaining_budget(
    snapshot: ProjectSnapshot, mode: CostTrackingMode
) -> Optional[Decimal]:
    """Budget minus spend, measured per the deployment's cost tracking mode.

    Returns None when the project has no budget. A negative result is an
    overrun, not an error.
    """
    budget = snapshot.project.budget
    if budget is None:
        return None
    if mode == CostTrackingMode.TASK_COSTS:
        spent = compute_total_task_cost(snapshot)
    else:
        spent = compute_total_expenditure(snapshot)
    return budget - spent


def compute_progress_percentage(snapshot: ProjectSnapshot) -> int:
    """Percent of tasks completed, rounded half up; 0 for a project with no tasks."""
    total = len(snapshot.tasks)
    if total == 0:
        return 0
    completed = sum(1 for t in snapshot.tasks if t.is_completed)
    ratio = Decimal(100 * completed) / Decimal(total)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def compute_total_time_spent(snapshot: TaskSnapshot) -> int:
    """Total minutes logged on the task, 0 if none."""
    return sum(e.duration for e in snapshot.time_entries)


def compute_project_metrics(
    snapshot: ProjectSnapshot, mode: CostTrackingMode
) -> ProjectMetrics:
    return ProjectMetrics(
        project_id=snapshot.project.id,
        total_expenditure=compute_total_expenditure(snapshot),
        total_task_cost=compute_total_task_cost(snapshot),
        remaining_budget=compute_remaining_budget(snapshot, mode),
        progress_percentage=compute_progress_percentage(snapshot),
        cost_tracking_mode=mode,
    )


def compute_task_metrics(snapshot: TaskSnapshot) -> TaskMetrics:
    return TaskMetrics(
        task_id=snapshot.task.id,
        total_time_spent=compute_total_time_spent(snapshot),
    )


class MetricsService:
    """Service for reading derived figures of stored projects and tasks."""

    def __init__(
        self, db: Database, mode: CostTrackingMode = CostTrackingMode.EXPENDITURES
    ):
        """Initialize metrics service.

        Args:
            db: Database instance
            mode: Cost tracking mode of this deployment
        """
        self.db = db
        self.mode = mode

    def get_project_snapshot(self, project_id: int) -> ProjectSnapshot:
        """Load a project with its tasks and expenditures.

        Raises:
            NotFoundError: If project doesn't exist
        """
        snapshot = self.db.get_project_snapshot(project_id)
        if snapshot is None:
            raise NotFoundError(project_not_found(project_id))
        return snapshot

    def get_task_snapshot(self, task_id: int) -> TaskSnapshot:
        """Load a task with its time entries.

        Raises:
            NotFoundError: If task doesn't exist
        """
        snapshot = self.db.get_task_snapshot(task_id)
        if snapshot is None:
            raise NotFoundError(task_not_found(task_id))
        return snapshot

    def get_project_metrics(self, project_id: int) -> ProjectMetrics:
        """Compute all derived figures of a project from a fresh snapshot."""
        return compute_project_metrics(self.get_project_snapshot(project_id), self.mode)

    def get_task_metrics(self, task_id: int) -> TaskMetrics:
        """Compute derived figures of a task from a fresh snapshot."""
        return compute_task_metrics(self.get_task_snapshot(task_id))

    def total_expenditure(self, project_id: int) -> Decimal:
        return compute_total_expenditure(self.get_project_snapshot(project_id))

    def total_task_cost(self, project_id: int) -> Decimal:
        return compute_total_task_cost(self.get_project_snapshot(project_id))

    def remaining_budget(self, project_id: int) -> Optional[Decimal]:
        return compute_remaining_budget(self.get_project_snapshot(project_id), self.mode)

    def progress_percentage(self, project_id: int) -> int:
        return compute_progress_percentage(self.get_project_snapshot(project_id))

    def total_time_spent(self, task_id: int) -> int:
        return compute_total_time_spent(self.get_task_snapshot(task_id))
