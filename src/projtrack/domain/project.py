"""Project domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from projtrack.database.base import Database
from projtrack.domain.defaults import ProjectDefaults
from projtrack.domain.entities import EventKind, Project, ProjectStatus
from projtrack.domain.errors import NotFoundError, ValidationError, project_not_found
from projtrack.domain.events import record_event
from projtrack.domain.validation import (
    normalize_currency,
    optional_money,
    optional_text,
    parse_choice,
    require_date_order,
    require_text,
)

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "description", "start_date", "end_date", "status", "budget", "currency")


class ProjectService:
    """Service for managing projects."""

    def __init__(self, db: Database, defaults: ProjectDefaults = ProjectDefaults()):
        """Initialize project service.

        Args:
            db: Database instance
            defaults: Creation policy for new projects
        """
        self.db = db
        self.defaults = defaults

    def create_project(
        self,
        name: str,
        description: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        budget: Optional[Decimal] = None,
        currency: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> Project:
        """Create a project.

        New projects always start as Not Started; a missing currency falls
        back to the deployment default.

        Args:
            name: Project name
            description: Optional description
            start_date: Optional start date
            end_date: Optional end date, not before start_date
            budget: Optional non-negative budget
            currency: Optional 3-letter currency code
            created_by: ID of the owning user

        Returns:
            The created project

        Raises:
            ValidationError: If any input is invalid
        """
        name = require_text("name", name)
        description = optional_text("description", description)
        require_date_order(start_date, end_date)
        budget = optional_money("budget", budget)
        if currency is not None:
            currency = normalize_currency(currency)

        with self.db.transaction():
            project_id = self.db.create_project(
                name=name,
                description=description,
                start_date=start_date,
                end_date=end_date,
                created_by=created_by,
                **self.defaults.initial_fields(budget=budget, currency=currency),
            )
            project = self.db.get_project(project_id)
            record_event(self.db, EventKind.PROJECT_CREATED, project, created_by)

        logger.info("Created project %s '%s'", project.id, project.name)
        return project

    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID.

        Args:
            project_id: Project ID

        Returns:
            Project entity or None if not found
        """
        return self.db.get_project(project_id)

    def require_project(self, project_id: int) -> Project:
        """Get project by ID or raise NotFoundError."""
        project = self.db.get_project(project_id)
        if project is None:
            raise NotFoundError(project_not_found(project_id))
        return project

    def get_project_by_name(self, name: str) -> Optional[Project]:
        return self.db.get_project_by_name(name)

    def list_projects(self, user_id: Optional[int] = None) -> list[Project]:
        """List projects, newest first.

        Args:
            user_id: If given, only projects the user owns or has a task in

        Returns:
            List of project entities
        """
        return self.db.list_projects(user_id=user_id)

    def update_project(
        self,
        project_id: int,
        changes: Mapping[str, Any],
        actor_id: Optional[int] = None,
    ) -> Project:
        """Update project fields.

        Only keys present in changes are touched. For description, dates,
        budget and currency a None value clears the field.

        Args:
            project_id: Project ID to update
            changes: Field name to new value
            actor_id: ID of the acting user

        Returns:
            The updated project

        Raises:
            NotFoundError: If project doesn't exist
            ValidationError: If a field is unknown or a value is invalid
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update project field(s): {', '.join(sorted(unknown))}")

        project = self.require_project(project_id)
        fields: dict[str, Any] = {}
        if "name" in changes:
            fields["name"] = require_text("name", changes["name"])
        if "description" in changes:
            fields["description"] = optional_text("description", changes["description"])
        if "status" in changes:
            fields["status"] = parse_choice(ProjectStatus, changes["status"], "status")
        if "budget" in changes:
            fields["budget"] = optional_money("budget", changes["budget"])
        if "currency" in changes:
            currency = changes["currency"]
            fields["currency"] = normalize_currency(currency) if currency is not None else None
        for key in ("start_date", "end_date"):
            if key in changes:
                fields[key] = changes[key]
        require_date_order(
            fields.get("start_date", project.start_date),
            fields.get("end_date", project.end_date),
        )

        if not fields:
            return project

        with self.db.transaction():
            self.db.update_project(project_id, fields)
            project = self.db.get_project(project_id)
            record_event(self.db, EventKind.PROJECT_UPDATED, project, actor_id)

        logger.info("Updated project %s: %s", project_id, ", ".join(sorted(fields)))
        return project

    def delete_project(self, project_id: int) -> None:
        """Delete a project with all its tasks and expenditures.

        Raises:
            NotFoundError: If project doesn't exist
        """
        self.require_project(project_id)
        self.db.delete_project(project_id)
        logger.info("Deleted project %s", project_id)
