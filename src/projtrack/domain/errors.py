"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidAmountError(ValidationError):
    """Negative, zero where forbidden, or non-finite money/duration value."""


class CompletionRequiredError(ValidationError):
    """Generic status edit tried to complete a task without the completion action."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as a violated state precondition."""


class AlreadyCompletedError(ConflictError):
    """Task is already completed."""


class NotCompletedError(ConflictError):
    """Task is not in completed status."""


class InconsistentStateError(DomainError):
    """Stored task status and completion timestamp disagree."""


class PermissionDeniedError(DomainError):
    """Acting user may not modify the entity."""


def project_not_found(project_id: int) -> str:
    """Return message for missing project."""
    return f"Project {project_id} not found"


def project_name_not_found(name: str) -> str:
    """Return message for missing project by name."""
    return f"Project '{name}' not found"


def task_not_found(task_id: int) -> str:
    """Return message for missing task."""
    return f"Task {task_id} not found"


def expenditure_not_found(expenditure_id: int, project_id: int | None = None) -> str:
    """Return message for missing expenditure, optionally scoped to a project."""
    if project_id is None:
        return f"Expenditure {expenditure_id} not found"
    return f"Expenditure {expenditure_id} not found for project {project_id}"


def time_entry_not_found(time_entry_id: int) -> str:
    """Return message for missing time entry."""
    return f"Time entry {time_entry_id} not found"


def task_already_completed(task_id: int) -> str:
    return f"Task {task_id} is already completed"


def task_not_completed(task_id: int) -> str:
    return f"Task {task_id} is not marked as completed"


def completion_requires_action(task_id: int) -> str:
    return (
        f"Task {task_id} cannot be set to completed through a status edit; "
        "use the complete action instead"
    )


def inconsistent_task_state(task_id: int, status: str, completed_at) -> str:
    """Return message for a task whose status and completed_at disagree."""
    return (
        f"Task {task_id} has status '{status}' but completed_at={completed_at!r}"
    )


def invalid_amount(field: str, value) -> str:
    """Return message for a rejected money or duration value."""
    return f"Invalid {field}: {value}"


def task_modify_denied(task_id: int, user_id: int | None) -> str:
    return f"User {user_id} is not allowed to modify task {task_id}"
