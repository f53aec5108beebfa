"""Task API endpoints."""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError

from src.api.dependencies import get_app_settings, get_current_user_id, get_task_store
from src.config import Settings
from src.errors import NotFoundError, StorageError, ValidationError
from src.models.enums import Priority
from src.schemas.task import (
    MAX_ID,
    MAX_PAGE,
    TaskCreate,
    TaskResponse,
    TaskSummaryResponse,
    TaskUpdate,
)
from src.services.tasks import TaskListOptions, TaskStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=TaskSummaryResponse)
def get_task_summary(
    user_id: Annotated[int, Depends(get_current_user_id)],
    store: Annotated[TaskStore, Depends(get_task_store)],
):
    """Get task counts and every task the current user owns."""
    try:
        summary = store.summarize(user_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to summarize tasks for user {user_id}: {e}", exc_info=True)
        raise StorageError("Failed to fetch tasks.") from e

    return TaskSummaryResponse.model_validate(summary)


@router.get("/list", response_model=list[TaskResponse])
def list_tasks(
    user_id: Annotated[int, Depends(get_current_user_id)],
    store: Annotated[TaskStore, Depends(get_task_store)],
    settings: Annotated[Settings, Depends(get_app_settings)],
    page: int = Query(default=1, le=MAX_PAGE, description="Page number, starting at 1"),
    limit: int | None = Query(default=None, description="Tasks per page"),
    completed: bool | None = Query(default=None, description="Filter by completion status"),
    priority: Priority | None = Query(default=None, description="Filter by priority"),
    category_id: int | None = Query(default=None, le=MAX_ID, description="Filter by category"),
    created_date: date | None = Query(default=None, description="Filter by creation date"),
):
    """Get a filtered page of the current user's tasks, newest first."""
    if limit is None:
        limit = settings.default_page_size
    if limit <= 0 or limit > settings.max_page_size:
        raise ValidationError(f"limit must be between 1 and {settings.max_page_size}")

    options = TaskListOptions(
        page=page,
        limit=limit,
        completed=completed,
        priority=priority,
        category_id=category_id,
        created_date=created_date,
    )
    try:
        return store.list_tasks(user_id, options)
    except SQLAlchemyError as e:
        logger.error(f"Failed to list tasks for user {user_id}: {e}", exc_info=True)
        raise StorageError("Failed to fetch tasks.") from e


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task(
    task_data: TaskCreate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    store: Annotated[TaskStore, Depends(get_task_store)],
):
    """Create a new task for the current user."""
    try:
        return store.create_task(
            user_id,
            title=task_data.title,
            description=task_data.description,
            priority=task_data.priority,
            due_date=task_data.due_date,
            category_id=task_data.category_id,
        )
    except SQLAlchemyError as e:
        logger.error(f"Failed to add task for user {user_id}: {e}", exc_info=True)
        raise StorageError("Failed to add task.") from e


@router.patch("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: Annotated[int, Path(le=MAX_ID)],
    task_data: TaskUpdate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    store: Annotated[TaskStore, Depends(get_task_store)],
):
    """Update the fields sent in the body on one of the current user's tasks."""
    try:
        task = store.update_task(user_id, task_id, task_data.model_dump(exclude_unset=True))
    except SQLAlchemyError as e:
        logger.error(f"Failed to update task {task_id}: {e}", exc_info=True)
        raise StorageError("Failed to update task.") from e

    if task is None:
        raise NotFoundError("Task not found or nothing to update.")
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: Annotated[int, Path(le=MAX_ID)],
    user_id: Annotated[int, Depends(get_current_user_id)],
    store: Annotated[TaskStore, Depends(get_task_store)],
):
    """Delete one of the current user's tasks."""
    try:
        deleted = store.delete_task(user_id, task_id)
    except SQLAlchemyError as e:
        logger.error(f"Failed to delete task {task_id}: {e}", exc_info=True)
        raise StorageError("Failed to delete task.") from e

    if not deleted:
        raise NotFoundError("Task not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
