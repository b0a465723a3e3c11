"""Domain layer for projtrack application.

Services are resolved lazily: the database layer imports domain.entities,
and the services import the database layer.
"""

_SERVICES = {
    "ProjectService": "projtrack.domain.project",
    "TaskLifecycleService": "projtrack.domain.lifecycle",
    "TaskService": "projtrack.domain.task",
    "ExpenditureService": "projtrack.domain.expenditure",
    "TimeEntryService": "projtrack.domain.time_entry",
    "CommentService": "projtrack.domain.comment",
    "MetricsService": "projtrack.domain.metrics",
    "EventRelay": "projtrack.domain.events",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib
        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
