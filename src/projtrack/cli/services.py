"""Build domain services from the CLI context.

The root command stores the database, the resolved Settings and the acting
user in ctx.obj; services that depend on deployment settings are wired here.
"""

from typing import Optional

import click

from projtrack.config import Settings
from projtrack.database.base import Database
from projtrack.domain.defaults import ProjectDefaults
from projtrack.domain.lifecycle import TaskLifecycleService
from projtrack.domain.metrics import MetricsService
from projtrack.domain.project import ProjectService
from projtrack.domain.task import TaskService


def get_db(ctx: click.Context) -> Database:
    return ctx.obj["db"]


def get_settings(ctx: click.Context) -> Settings:
    return ctx.obj.get("settings") or Settings()


def get_user_id(ctx: click.Context) -> Optional[int]:
    return ctx.obj.get("user_id")


def project_service(ctx: click.Context) -> ProjectService:
    settings = get_settings(ctx)
    return ProjectService(get_db(ctx), ProjectDefaults(currency=settings.default_currency))


def lifecycle_service(ctx: click.Context) -> TaskLifecycleService:
    settings = get_settings(ctx)
    return TaskLifecycleService(
        get_db(ctx), repair_inconsistent=settings.repair_inconsistent_tasks
    )


def task_service(ctx: click.Context) -> TaskService:
    return TaskService(get_db(ctx), lifecycle_service(ctx))


def metrics_service(ctx: click.Context) -> MetricsService:
    return MetricsService(get_db(ctx), mode=get_settings(ctx).cost_tracking_mode)
