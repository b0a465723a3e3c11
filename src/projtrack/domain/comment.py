"""Comment domain service."""

import logging
from typing import Optional

from projtrack.database.base import Database
from projtrack.domain.entities import Comment, EventKind
from projtrack.domain.errors import NotFoundError, task_not_found
from projtrack.domain.events import record_event
from projtrack.domain.validation import MAX_COMMENT_LENGTH, require_text

logger = logging.getLogger(__name__)


class CommentService:
    """Service for task comments."""

    def __init__(self, db: Database):
        self.db = db

    def add_comment(self, task_id: int, body: str, user_id: Optional[int] = None) -> Comment:
        """Add a comment to a task and record a comment.added event.

        Args:
            task_id: Task ID
            body: Comment text, at most 5000 characters
            user_id: ID of the commenting user

        Returns:
            The created comment

        Raises:
            ValidationError: If body is empty or too long
            NotFoundError: If task doesn't exist
        """
        body = require_text("body", body, MAX_COMMENT_LENGTH)
        if self.db.get_task(task_id) is None:
            raise NotFoundError(task_not_found(task_id))

        with self.db.transaction():
            comment_id = self.db.create_comment(task_id=task_id, body=body, user_id=user_id)
            comment = self.db.get_comment(comment_id)
            record_event(self.db, EventKind.COMMENT_ADDED, comment, user_id)

        logger.info("Added comment %s to task %s", comment.id, task_id)
        return comment

    def list_comments(self, task_id: int) -> list[Comment]:
        """List a task's comments, oldest first.

        Raises:
            NotFoundError: If task doesn't exist
        """
        if self.db.get_task(task_id) is None:
            raise NotFoundError(task_not_found(task_id))
        return self.db.list_comments(task_id)
