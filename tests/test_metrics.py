"""Tests for derived project and task figures."""

from datetime import date, datetime, UTC
from decimal import Decimal

import pytest

from projtrack.domain.entities import (
    CostTrackingMode,
    Expenditure,
    Project,
    ProjectSnapshot,
    ProjectStatus,
    Task,
    TaskPriority,
    TaskSnapshot,
    TaskStatus,
    TimeEntry,
)
from projtrack.domain.errors import NotFoundError
from projtrack.domain.metrics import (
    MetricsService,
    compute_progress_percentage,
    compute_project_metrics,
    compute_remaining_budget,
    compute_task_metrics,
    compute_total_expenditure,
    compute_total_task_cost,
    compute_total_time_spent,
)

CREATED = datetime(2025, 1, 1, tzinfo=UTC)


def _project(budget=None):
    return Project(
        id=1,
        name="Website Redesign",
        description=None,
        start_date=None,
        end_date=None,
        status=ProjectStatus.IN_PROGRESS,
        budget=budget,
        currency="USD",
        created_by=1,
        created_at=CREATED,
    )


def _task(task_id, status=TaskStatus.PENDING, actual_cost=None):
    return Task(
        id=task_id,
        project_id=1,
        title=f"Task {task_id}",
        description=None,
        status=status,
        priority=TaskPriority.MEDIUM,
        assigned_user_id=None,
        created_by=1,
        due_date=None,
        completed_at=CREATED if status == TaskStatus.COMPLETED else None,
        actual_cost=actual_cost,
        created_at=CREATED,
    )


def _expenditure(expenditure_id, amount):
    return Expenditure(
        id=expenditure_id,
        project_id=1,
        description="Spend",
        amount=Decimal(amount),
        expense_date=date(2025, 1, 2),
        recorded_by=1,
        created_at=CREATED,
    )


def _time_entry(entry_id, minutes):
    return TimeEntry(
        id=entry_id,
        task_id=1,
        user_id=2,
        date_worked=date(2025, 1, 2),
        duration=minutes,
        description=None,
        created_at=CREATED,
    )


def _tasks_with_completed(total, completed):
    return tuple(
        _task(i, TaskStatus.COMPLETED if i <= completed else TaskStatus.PENDING)
        for i in range(1, total + 1)
    )


class TestExpenditureTotals:
    """Tests for expenditure and task cost sums."""

    def test_budget_with_one_expenditure(self):
        """Budget 1000, one expenditure of 250.50."""
        snapshot = ProjectSnapshot(
            project=_project(Decimal("1000.00")),
            expenditures=(_expenditure(1, "250.50"),),
        )

        assert compute_total_expenditure(snapshot) == Decimal("250.50")
        assert compute_remaining_budget(snapshot, CostTrackingMode.EXPENDITURES) == Decimal("749.50")

    def test_no_expenditures_totals_zero(self):
        snapshot = ProjectSnapshot(project=_project(Decimal("1000.00")))
        assert compute_total_expenditure(snapshot) == Decimal("0")

    def test_total_is_exact_decimal(self):
        """Money sums must not pick up binary float error."""
        snapshot = ProjectSnapshot(
            project=_project(),
            expenditures=(_expenditure(1, "0.10"), _expenditure(2, "0.20")),
        )
        assert compute_total_expenditure(snapshot) == Decimal("0.30")

    def test_task_cost_ignores_unset_costs(self):
        snapshot = ProjectSnapshot(
            project=_project(),
            tasks=(
                _task(1, actual_cost=Decimal("100.00")),
                _task(2),
                _task(3, actual_cost=Decimal("25.25")),
            ),
        )
        assert compute_total_task_cost(snapshot) == Decimal("125.25")


class TestRemainingBudget:
    """Tests for remaining budget in both cost tracking modes."""

    def test_no_budget_is_none_regardless_of_spend(self):
        snapshot = ProjectSnapshot(
            project=_project(None),
            tasks=(_task(1, actual_cost=Decimal("10.00")),),
            expenditures=(_expenditure(1, "99.99"),),
        )
        assert compute_remaining_budget(snapshot, CostTrackingMode.EXPENDITURES) is None
        assert compute_remaining_budget(snapshot, CostTrackingMode.TASK_COSTS) is None

    def test_zero_spend_leaves_full_budget(self):
        snapshot = ProjectSnapshot(project=_project(Decimal("500.00")))
        assert compute_remaining_budget(snapshot, CostTrackingMode.EXPENDITURES) == Decimal("500.00")
        assert compute_remaining_budget(snapshot, CostTrackingMode.TASK_COSTS) == Decimal("500.00")

    def test_task_costs_mode_ignores_expenditures(self):
        snapshot = ProjectSnapshot(
            project=_project(Decimal("1000.00")),
            tasks=(_task(1, actual_cost=Decimal("300.00")),),
            expenditures=(_expenditure(1, "250.50"),),
        )
        assert compute_remaining_budget(snapshot, CostTrackingMode.TASK_COSTS) == Decimal("700.00")
        assert compute_remaining_budget(snapshot, CostTrackingMode.EXPENDITURES) == Decimal("749.50")

    def test_overrun_is_negative(self):
        snapshot = ProjectSnapshot(
            project=_project(Decimal("100.00")),
            expenditures=(_expenditure(1, "150.00"),),
        )
        assert compute_remaining_budget(snapshot, CostTrackingMode.EXPENDITURES) == Decimal("-50.00")


class TestProgressPercentage:
    """Tests for the completed task ratio."""

    def test_no_tasks_is_zero(self):
        assert compute_progress_percentage(ProjectSnapshot(project=_project())) == 0

    def test_one_of_four_completed(self):
        snapshot = ProjectSnapshot(project=_project(), tasks=_tasks_with_completed(4, 1))
        assert compute_progress_percentage(snapshot) == 25

    def test_all_completed(self):
        snapshot = ProjectSnapshot(project=_project(), tasks=_tasks_with_completed(3, 3))
        assert compute_progress_percentage(snapshot) == 100

    def test_in_progress_does_not_count(self):
        tasks = (_task(1, TaskStatus.IN_PROGRESS), _task(2, TaskStatus.COMPLETED))
        snapshot = ProjectSnapshot(project=_project(), tasks=tasks)
        assert compute_progress_percentage(snapshot) == 50

    @pytest.mark.parametrize(
        "total,completed,expected",
        [
            (8, 1, 13),  # 12.5 rounds half up
            (3, 2, 67),  # 66.67
            (3, 1, 33),  # 33.33
            (200, 1, 1),  # 0.5 rounds half up
            (7, 0, 0),
        ],
    )
    def test_rounds_half_up(self, total, completed, expected):
        snapshot = ProjectSnapshot(project=_project(), tasks=_tasks_with_completed(total, completed))
        assert compute_progress_percentage(snapshot) == expected


class TestTimeSpent:
    """Tests for task time totals."""

    def test_sums_durations(self):
        snapshot = TaskSnapshot(task=_task(1), time_entries=(_time_entry(1, 30), _time_entry(2, 45)))
        assert compute_total_time_spent(snapshot) == 75

    def test_no_entries_is_zero(self):
        assert compute_total_time_spent(TaskSnapshot(task=_task(1))) == 0

    def test_task_metrics(self):
        snapshot = TaskSnapshot(task=_task(7), time_entries=(_time_entry(1, 90),))
        metrics = compute_task_metrics(snapshot)
        assert metrics.task_id == 7
        assert metrics.total_time_spent == 90


def test_project_metrics_bundle():
    snapshot = ProjectSnapshot(
        project=_project(Decimal("1000.00")),
        tasks=_tasks_with_completed(4, 1),
        expenditures=(_expenditure(1, "250.50"),),
    )
    metrics = compute_project_metrics(snapshot, CostTrackingMode.EXPENDITURES)

    assert metrics.project_id == 1
    assert metrics.total_expenditure == Decimal("250.50")
    assert metrics.total_task_cost == Decimal("0")
    assert metrics.remaining_budget == Decimal("749.50")
    assert metrics.progress_percentage == 25
    assert metrics.cost_tracking_mode == CostTrackingMode.EXPENDITURES


class TestMetricsService:
    """Tests for metrics read from the database."""

    def test_project_metrics_from_store(
        self, metrics_service, sample_project, expenditure_service, lifecycle_service
    ):
        expenditure_service.add_expenditure(
            sample_project.id, "Stock photos", Decimal("250.50"), date(2025, 3, 1)
        )
        task_ids = [
            lifecycle_service.create_task(sample_project.id, f"Task {i}").id for i in range(4)
        ]
        lifecycle_service.mark_complete(task_ids[0])

        metrics = metrics_service.get_project_metrics(sample_project.id)

        assert metrics.total_expenditure == Decimal("250.50")
        assert metrics.remaining_budget == Decimal("749.50")
        assert metrics.progress_percentage == 25

    def test_figures_reflect_latest_writes(self, metrics_service, sample_project, expenditure_service):
        """Nothing is cached between reads."""
        assert metrics_service.total_expenditure(sample_project.id) == Decimal("0")

        expenditure_service.add_expenditure(
            sample_project.id, "Hosting", Decimal("100.00"), date(2025, 3, 1)
        )
        assert metrics_service.total_expenditure(sample_project.id) == Decimal("100.00")
        assert metrics_service.remaining_budget(sample_project.id) == Decimal("900.00")

    def test_task_costs_mode(self, temp_db, sample_project, lifecycle_service):
        lifecycle_service.create_task(sample_project.id, "Build", actual_cost=Decimal("400.00"))
        service = MetricsService(temp_db, mode=CostTrackingMode.TASK_COSTS)

        assert service.total_task_cost(sample_project.id) == Decimal("400.00")
        assert service.remaining_budget(sample_project.id) == Decimal("600.00")

    def test_total_time_spent(self, metrics_service, sample_task, time_entry_service):
        time_entry_service.log_time(sample_task.id, 30)
        time_entry_service.log_time(sample_task.id, 45)

        assert metrics_service.total_time_spent(sample_task.id) == 75
        assert metrics_service.get_task_metrics(sample_task.id).total_time_spent == 75

    def test_unknown_project(self, metrics_service):
        with pytest.raises(NotFoundError):
            metrics_service.get_project_metrics(999)

    def test_unknown_task(self, metrics_service):
        with pytest.raises(NotFoundError):
            metrics_service.total_time_spent(999)
