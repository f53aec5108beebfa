"""Task store: owner-scoped persistence for tasks.

Every query issued here carries the owner id in its predicate, so a task that
belongs to someone else is indistinguishable from one that does not exist.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from src.errors import ValidationError
from src.models.category import Category
from src.models.enums import Priority
from src.models.task import Task

logger = logging.getLogger(__name__)

# Fields a caller may change through update_task
UPDATABLE_FIELDS = ("title", "description", "priority", "due_date", "category_id", "completed")

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


@dataclass
class TaskListOptions:
    """Filter and pagination options for listing tasks."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    completed: bool | None = None
    priority: Priority | None = None
    category_id: int | None = None
    created_date: date | None = None


@dataclass
class TaskSummary:
    """Aggregate counts over all of one owner's tasks."""

    total: int = 0
    completed: int = 0
    pending: int = 0
    high_priority: int = 0
    tasks: list[Task] = field(default_factory=list)


def select_updates(updates: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only allow-listed fields that carry a value."""
    return {key: updates[key] for key in UPDATABLE_FIELDS if updates.get(key) is not None}


class TaskStore:
    """Service for task persistence scoped to an owner."""

    def __init__(self, db: Session):
        self.db = db

    def _owned(self, user_id: int) -> Query:
        return self.db.query(Task).filter(Task.user_id == user_id)

    def category_exists(self, category_id: int) -> bool:
        """Check whether a category with this id exists."""
        return self.db.query(Category.id).filter(Category.id == category_id).first() is not None

    def create_task(
        self,
        user_id: int,
        *,
        title: str,
        priority: Priority,
        due_date: date,
        category_id: int,
        description: str | None = None,
    ) -> Task:
        """Create a task for a user after checking its category exists."""
        if not self.category_exists(category_id):
            raise ValidationError("Category does not exist.")

        task = Task(
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            category_id=category_id,
            user_id=user_id,
            completed=False,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.info(f"Created task {task.id} for user {user_id}")
        return task

    def list_tasks(self, user_id: int, options: TaskListOptions | None = None) -> list[Task]:
        """Get one page of a user's tasks matching every supplied filter.

        Results are ordered by creation time, newest first. Tasks created at the
        same instant come back in whatever order the database returns them.
        A page number below 1 is treated as the first page.
        """
        options = options or TaskListOptions()
        if options.limit <= 0:
            raise ValidationError("limit must be a positive integer")
        page = max(options.page, 1)

        query = self._owned(user_id)

        # Apply filters if provided
        if options.completed is not None:
            query = query.filter(Task.completed.is_(options.completed))
        if options.priority is not None:
            query = query.filter(Task.priority == options.priority)
        if options.category_id is not None:
            query = query.filter(Task.category_id == options.category_id)
        if options.created_date is not None:
            query = query.filter(func.date(Task.created_at) == options.created_date.isoformat())

        return (
            query.order_by(Task.created_at.desc())
            .offset((page - 1) * options.limit)
            .limit(options.limit)
            .all()
        )

    def summarize(self, user_id: int) -> TaskSummary:
        """Count a user's tasks by state in one pass over all of them."""
        tasks = self._owned(user_id).all()

        summary = TaskSummary(total=len(tasks), tasks=tasks)
        for task in tasks:
            if task.completed:
                summary.completed += 1
            else:
                summary.pending += 1
            if task.priority == Priority.HIGH:
                summary.high_priority += 1
        return summary

    def update_task(self, user_id: int, task_id: int, updates: Mapping[str, Any]) -> Task | None:
        """Apply allow-listed field changes to a user's task.

        Returns None when nothing allow-listed was supplied, or when no task with
        this id belongs to the user. Storage is not touched in the first case.
        """
        update_data = select_updates(updates)
        if not update_data:
            return None

        query = self._owned(user_id).filter(Task.id == task_id)
        updated = query.update(update_data, synchronize_session=False)
        if not updated:
            self.db.rollback()
            return None

        task = query.populate_existing().one()
        self.db.commit()
        self.db.refresh(task)
        logger.info(f"Updated task {task_id} fields {sorted(update_data)} for user {user_id}")
        return task

    def delete_task(self, user_id: int, task_id: int) -> bool:
        """Delete a user's task. Returns whether a row was removed."""
        deleted = (
            self._owned(user_id)
            .filter(Task.id == task_id)
            .delete(synchronize_session=False)
        )
        self.db.commit()
        if deleted:
            logger.info(f"Deleted task {task_id} for user {user_id}")
        return deleted > 0
