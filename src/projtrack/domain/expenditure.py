"""Expenditure domain service."""

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from projtrack.database.base import Database
from projtrack.domain.entities import Expenditure
from projtrack.domain.errors import (
    NotFoundError,
    ValidationError,
    expenditure_not_found,
    project_not_found,
)
from projtrack.domain.validation import (
    MAX_DESCRIPTION_LENGTH,
    require_date,
    require_money,
    require_text,
)

logger = logging.getLogger(__name__)


class ExpenditureService:
    """Service for project-level expenditures."""

    def __init__(self, db: Database):
        """Initialize expenditure service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_expenditure(
        self,
        project_id: int,
        description: str,
        amount: Decimal,
        expense_date: date,
        recorded_by: Optional[int] = None,
    ) -> Expenditure:
        """Record an expenditure against a project.

        Args:
            project_id: Project ID
            description: What the money was spent on
            amount: Positive amount in the project's currency
            expense_date: Date of the expense
            recorded_by: ID of the recording user

        Returns:
            The created expenditure

        Raises:
            InvalidAmountError: If amount is not positive
            ValidationError: If description or expense_date is missing
            NotFoundError: If project doesn't exist
        """
        description = require_text("description", description, MAX_DESCRIPTION_LENGTH)
        amount = require_money("amount", amount, allow_zero=False)
        expense_date = require_date("expense_date", expense_date)
        self._require_project(project_id)

        expenditure_id = self.db.create_expenditure(
            project_id=project_id,
            description=description,
            amount=amount,
            expense_date=expense_date,
            recorded_by=recorded_by,
        )
        logger.info("Recorded expenditure %s of %s on project %s", expenditure_id, amount, project_id)
        return self.db.get_expenditure(expenditure_id)

    def get_expenditure(self, project_id: int, expenditure_id: int) -> Expenditure:
        """Get an expenditure, checking it belongs to the project.

        Raises:
            NotFoundError: If missing or owned by a different project
        """
        expenditure = self.db.get_expenditure(expenditure_id)
        if expenditure is None or expenditure.project_id != project_id:
            raise NotFoundError(expenditure_not_found(expenditure_id, project_id))
        return expenditure

    def list_expenditures(self, project_id: int) -> list[Expenditure]:
        """List a project's expenditures, latest first."""
        self._require_project(project_id)
        return self.db.list_expenditures(project_id)

    def update_expenditure(
        self, project_id: int, expenditure_id: int, changes: Mapping[str, Any]
    ) -> Expenditure:
        """Update description, amount or expense_date of an expenditure.

        Raises:
            NotFoundError: If missing or owned by a different project
            ValidationError: If a field is unknown or a value is invalid
        """
        self.get_expenditure(project_id, expenditure_id)
        fields: dict[str, Any] = {}
        for key, value in changes.items():
            if key == "description":
                fields[key] = require_text("description", value, MAX_DESCRIPTION_LENGTH)
            elif key == "amount":
                fields[key] = require_money("amount", value, allow_zero=False)
            elif key == "expense_date":
                fields[key] = require_date("expense_date", value)
            else:
                raise ValidationError(f"Cannot update expenditure field '{key}'")

        if fields:
            self.db.update_expenditure(expenditure_id, fields)
        return self.db.get_expenditure(expenditure_id)

    def delete_expenditure(self, project_id: int, expenditure_id: int) -> None:
        """Delete an expenditure of a project."""
        self.get_expenditure(project_id, expenditure_id)
        self.db.delete_expenditure(expenditure_id)
        logger.info("Deleted expenditure %s from project %s", expenditure_id, project_id)

    def _require_project(self, project_id: int) -> None:
        if self.db.get_project(project_id) is None:
            raise NotFoundError(project_not_found(project_id))
