"""Construction-time defaults for new projects and tasks.

This is the one place that decides what a brand-new entity looks like.
Services ask these objects for creation fields instead of spelling out
literals themselves.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from projtrack.domain.entities import ProjectStatus, TaskPriority, TaskStatus


@dataclass(frozen=True)
class TaskDefaults:
    """Policy for new tasks: always pending and never completed."""

    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM

    def initial_fields(self, priority: Optional[TaskPriority] = None) -> dict:
        """Return the lifecycle fields of a new task.

        Caller-supplied status or completion values are never consulted;
        only priority may be chosen.
        """
        return {
            "status": self.status,
            "priority": priority if priority is not None else self.priority,
            "completed_at": None,
        }


@dataclass(frozen=True)
class ProjectDefaults:
    """Policy for new projects: Not Started, currency defaulted."""

    status: ProjectStatus = ProjectStatus.NOT_STARTED
    currency: str = "USD"

    def initial_fields(
        self, budget: Optional[Decimal] = None, currency: Optional[str] = None
    ) -> dict:
        return {
            "status": self.status,
            "budget": budget,
            "currency": currency if currency is not None else self.currency,
        }
