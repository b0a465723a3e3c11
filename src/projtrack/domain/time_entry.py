"""Time entry domain service."""

import logging
from datetime import date, datetime, UTC
from typing import Callable, Optional

from projtrack.database.base import Database
from projtrack.domain.entities import TimeEntry
from projtrack.domain.errors import NotFoundError, task_not_found, time_entry_not_found
from projtrack.domain.validation import optional_text, require_duration, require_not_future

logger = logging.getLogger(__name__)


class TimeEntryService:
    """Service for logging time against tasks."""

    def __init__(
        self,
        db: Database,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
        today: Optional[Callable[[], date]] = None,
    ):
        """Initialize time entry service.

        Args:
            db: Database instance
            clock: Returns the current UTC time
            today: Returns the user's calendar day, used as the default
                date_worked and to reject future dates; defaults to clock()
                converted to the local timezone
        """
        self.db = db
        self.clock = clock
        self._today = today

    def today(self) -> date:
        if self._today is not None:
            return self._today()
        return self.clock().astimezone().date()

    def log_time(
        self,
        task_id: int,
        duration: int,
        date_worked: Optional[date] = None,
        user_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> TimeEntry:
        """Log time spent on a task.

        Args:
            task_id: Task ID
            duration: Minutes worked, a positive integer
            date_worked: Day the work happened (defaults to today, never in the future)
            user_id: ID of the user who did the work
            description: Optional note

        Returns:
            The created time entry

        Raises:
            InvalidAmountError: If duration is not a positive integer
            ValidationError: If date_worked is in the future
            NotFoundError: If task doesn't exist
        """
        duration = require_duration(duration)
        today = self.today()
        if date_worked is None:
            date_worked = today
        require_not_future("date_worked", date_worked, today)
        description = optional_text("description", description)
        self._require_task(task_id)

        entry_id = self.db.create_time_entry(
            task_id=task_id,
            date_worked=date_worked,
            duration=duration,
            user_id=user_id,
            description=description,
        )
        logger.info("Logged %d minute(s) on task %s", duration, task_id)
        return self.db.get_time_entry(entry_id)

    def list_time_entries(self, task_id: int) -> list[TimeEntry]:
        self._require_task(task_id)
        return self.db.list_time_entries(task_id)

    def delete_time_entry(self, task_id: int, time_entry_id: int) -> None:
        """Delete a time entry of a task.

        Raises:
            NotFoundError: If missing or logged against a different task
        """
        entry = self.db.get_time_entry(time_entry_id)
        if entry is None or entry.task_id != task_id:
            raise NotFoundError(time_entry_not_found(time_entry_id))
        self.db.delete_time_entry(time_entry_id)
        logger.info("Deleted time entry %s from task %s", time_entry_id, task_id)

    def _require_task(self, task_id: int) -> None:
        if self.db.get_task(task_id) is None:
            raise NotFoundError(task_not_found(task_id))
