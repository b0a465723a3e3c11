"""Tests for expenditure service."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from projtrack.domain.errors import InvalidAmountError, NotFoundError, ValidationError


def test_add_expenditure(expenditure_service, sample_project):
    expenditure = expenditure_service.add_expenditure(
        sample_project.id, "Stock photos", Decimal("250.50"), date(2025, 3, 1), recorded_by=1
    )

    assert expenditure.id is not None
    assert expenditure.amount == Decimal("250.50")
    assert expenditure.description == "Stock photos"
    assert expenditure.recorded_by == 1


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10.00"), "NaN", "Infinity", "1.001"])
def test_add_expenditure_rejects_bad_amounts(expenditure_service, sample_project, amount):
    with pytest.raises(InvalidAmountError):
        expenditure_service.add_expenditure(sample_project.id, "Bad", amount, date(2025, 3, 1))
    assert expenditure_service.list_expenditures(sample_project.id) == []


def test_add_expenditure_requires_description(expenditure_service, sample_project):
    with pytest.raises(ValidationError):
        expenditure_service.add_expenditure(sample_project.id, "  ", Decimal("1.00"), date(2025, 3, 1))


@pytest.mark.parametrize("expense_date", [None, "2025-03-01", datetime(2025, 3, 1, 12, 0)])
def test_add_expenditure_requires_date(expenditure_service, sample_project, expense_date):
    with pytest.raises(ValidationError, match="expense_date"):
        expenditure_service.add_expenditure(sample_project.id, "Undated", Decimal("5.00"), expense_date)
    assert expenditure_service.list_expenditures(sample_project.id) == []


def test_store_usable_after_failed_write(temp_db, expenditure_service, metrics_service, sample_project):
    with pytest.raises(IntegrityError):
        temp_db.create_expenditure(sample_project.id, "Undated", Decimal("5.00"), None)

    spent = expenditure_service.add_expenditure(sample_project.id, "Hosting", Decimal("7.50"), date(2025, 3, 1))

    assert [e.id for e in expenditure_service.list_expenditures(sample_project.id)] == [spent.id]
    metrics = metrics_service.get_project_metrics(sample_project.id)
    assert metrics.total_expenditure == Decimal("7.50")
    assert metrics.remaining_budget == Decimal("992.50")


def test_add_expenditure_unknown_project(expenditure_service):
    with pytest.raises(NotFoundError):
        expenditure_service.add_expenditure(999, "Nowhere", Decimal("1.00"), date(2025, 3, 1))


def test_list_expenditures_latest_first(expenditure_service, sample_project):
    older = expenditure_service.add_expenditure(sample_project.id, "Older", Decimal("1.00"), date(2025, 1, 1))
    newer = expenditure_service.add_expenditure(sample_project.id, "Newer", Decimal("2.00"), date(2025, 2, 1))

    assert [e.id for e in expenditure_service.list_expenditures(sample_project.id)] == [newer.id, older.id]


def test_update_expenditure(expenditure_service, sample_project):
    expenditure = expenditure_service.add_expenditure(
        sample_project.id, "Hosting", Decimal("10.00"), date(2025, 3, 1)
    )
    updated = expenditure_service.update_expenditure(
        sample_project.id, expenditure.id, {"amount": Decimal("12.50"), "description": "Hosting (Q1)"}
    )

    assert updated.amount == Decimal("12.50")
    assert updated.description == "Hosting (Q1)"


def test_update_expenditure_rejects_zero(expenditure_service, sample_project):
    expenditure = expenditure_service.add_expenditure(
        sample_project.id, "Hosting", Decimal("10.00"), date(2025, 3, 1)
    )
    with pytest.raises(InvalidAmountError):
        expenditure_service.update_expenditure(sample_project.id, expenditure.id, {"amount": 0})


def test_expenditure_scoped_to_project(expenditure_service, project_service, sample_project):
    other = project_service.create_project(name="Other")
    expenditure = expenditure_service.add_expenditure(
        sample_project.id, "Hosting", Decimal("10.00"), date(2025, 3, 1)
    )

    with pytest.raises(NotFoundError):
        expenditure_service.get_expenditure(other.id, expenditure.id)
    with pytest.raises(NotFoundError):
        expenditure_service.delete_expenditure(other.id, expenditure.id)

    assert expenditure_service.get_expenditure(sample_project.id, expenditure.id) == expenditure


def test_delete_expenditure(expenditure_service, sample_project):
    expenditure = expenditure_service.add_expenditure(
        sample_project.id, "Hosting", Decimal("10.00"), date(2025, 3, 1)
    )
    expenditure_service.delete_expenditure(sample_project.id, expenditure.id)

    assert expenditure_service.list_expenditures(sample_project.id) == []
