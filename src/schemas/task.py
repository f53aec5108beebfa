"""Task schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.models.enums import Priority

# Largest value a 64-bit integer column holds
MAX_ID = 2**63 - 1

# Keeps the row offset of the last page inside a 64-bit integer
MAX_PAGE = 2**31 - 1


class TaskCreate(BaseModel):
    """Create a new task."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    priority: Priority
    due_date: date
    category_id: int = Field(..., ge=1, le=MAX_ID)


class TaskUpdate(BaseModel):
    """Update a task. Only the fields that are sent are changed."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=1000)
    priority: Priority | None = None
    due_date: date | None = None
    category_id: int | None = Field(None, ge=1, le=MAX_ID)
    completed: bool | None = None

    @field_validator("title", "description", "priority", "due_date", "category_id", "completed")
    @classmethod
    def reject_null(cls, value):
        """Leave a field out to keep it; an explicit null is not a value."""
        if value is None:
            raise ValueError("must not be null")
        return value


class TaskResponse(BaseModel):
    """Task response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: str | None
    priority: Priority
    due_date: date
    category_id: int
    user_id: int
    completed: bool
    created_at: datetime
    updated_at: datetime


class TaskSummaryResponse(BaseModel):
    """Aggregate counts plus every task the user owns."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    completed: int
    pending: int
    high_priority: int
    tasks: list[TaskResponse]
