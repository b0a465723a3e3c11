"""Domain model entities for projtrack.

These are pure data classes representing business concepts, independent of
database schema. Derived figures (totals, remaining budget, progress) are
never stored on them; see projtrack.domain.metrics.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class ProjectStatus(str, Enum):
    """Fixed project status enumeration."""

    NOT_STARTED = "Not Started"
    IN_PROGRESS = "In Progress"
    ON_HOLD = "On Hold"
    COMPLETED = "Completed"


class TaskStatus(str, Enum):
    """Task lifecycle states."""

    PENDING = "pending"
    IN_PROGRESS = "in progress"
    COMPLETED = "completed"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class CostTrackingMode(str, Enum):
    """Which spend figure remaining_budget is measured against."""

    EXPENDITURES = "expenditures"
    TASK_COSTS = "task_costs"


class EventKind(str, Enum):
    """Lifecycle events relayed to the notification emitter."""

    TASK_CREATED = "task.created"
    TASK_DELETED = "task.deleted"
    COMMENT_ADDED = "comment.added"
    PROJECT_CREATED = "project.created"
    PROJECT_UPDATED = "project.updated"


@dataclass(frozen=True)
class Project:
    """Project domain entity."""

    id: int
    name: str
    description: Optional[str]
    start_date: Optional[date]
    end_date: Optional[date]
    status: ProjectStatus
    budget: Optional[Decimal]
    currency: Optional[str]
    created_by: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Task:
    """Task domain entity."""

    id: int
    project_id: int
    title: str
    description: Optional[str]
    status: TaskStatus
    priority: TaskPriority
    assigned_user_id: Optional[int]
    created_by: Optional[int]
    due_date: Optional[date]
    completed_at: Optional[datetime]
    actual_cost: Optional[Decimal]
    created_at: datetime

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED


@dataclass(frozen=True)
class Expenditure:
    """Project-level spend not tied to a task."""

    id: int
    project_id: int
    description: str
    amount: Decimal
    expense_date: date
    recorded_by: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class TimeEntry:
    """Minutes worked on a task."""

    id: int
    task_id: int
    user_id: Optional[int]
    date_worked: date
    duration: int
    description: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Comment:
    id: int
    task_id: int
    user_id: Optional[int]
    body: str
    created_at: datetime


@dataclass(frozen=True)
class ProjectSnapshot:
    """A project with its tasks and expenditures, loaded together."""

    project: Project
    tasks: tuple[Task, ...] = ()
    expenditures: tuple[Expenditure, ...] = ()


@dataclass(frozen=True)
class TaskSnapshot:
    """A task with its time entries, loaded together."""

    task: Task
    time_entries: tuple[TimeEntry, ...] = ()


@dataclass(frozen=True)
class ProjectMetrics:
    """Derived financial and progress figures for one project."""

    project_id: int
    total_expenditure: Decimal
    total_task_cost: Decimal
    remaining_budget: Optional[Decimal]
    progress_percentage: int
    cost_tracking_mode: CostTrackingMode


@dataclass(frozen=True)
class TaskMetrics:
    task_id: int
    total_time_spent: int


@dataclass(frozen=True)
class OutboxEvent:
    """Event recorded in the outbox, awaiting delivery."""

    id: int
    kind: EventKind
    entity_type: str
    entity_id: int
    actor_id: Optional[int]
    payload: dict[str, Any] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    attempts: int = 0
    last_error: Optional[str] = None
