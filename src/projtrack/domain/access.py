"""Authorization rule callers apply before task state changes.

The lifecycle service trusts its caller; this is the check the caller runs.
"""

from typing import Optional

from projtrack.domain.entities import Project, Task
from projtrack.domain.errors import PermissionDeniedError, task_modify_denied


def can_modify_task(task: Task, project: Project, user_id: Optional[int]) -> bool:
    """A task may be modified by its assignee or by the project's owner."""
    if user_id is None:
        return False
    return user_id in (task.assigned_user_id, project.created_by)


def ensure_can_modify_task(task: Task, project: Project, user_id: Optional[int]) -> None:
    """Raise PermissionDeniedError unless user_id may modify the task."""
    if not can_modify_task(task, project, user_id):
        raise PermissionDeniedError(task_modify_denied(task.id, user_id))
