"""
Todo Pydantic schemas.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator
from typing import Annotated, Optional
from datetime import datetime, timezone

from app.models.todo import Priority
from app.schemas.category import CategoryRef
from app.services import derived_state

Tag = Annotated[str, Field(min_length=1, max_length=20)]


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class SubtaskIn(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=100)
    completed: bool = False
    created_at: Optional[datetime] = None

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, value):
        return to_naive_utc(value)


class Subtask(BaseModel):
    title: str
    completed: bool
    created_at: Optional[datetime] = None


class Attachment(BaseModel):
    """File reference metadata; the file itself lives elsewhere."""
    filename: Optional[str] = None
    original_name: Optional[str] = None
    mimetype: Optional[str] = None
    size: Optional[int] = Field(None, ge=0)
    url: Optional[str] = None
    uploaded_at: Optional[datetime] = None


class TodoBase(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    completed: bool = False
    priority: Priority = Priority.medium
    category_id: Optional[str] = None
    tags: list[Tag] = []
    due_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    position: Optional[int] = None
    subtasks: list[SubtaskIn] = []
    attachments: list[Attachment] = []
    progress: Optional[int] = Field(None, ge=0, le=100)
    estimated_time: Optional[float] = Field(None, ge=0)
    actual_time: float = Field(0, ge=0)

    @field_validator("due_date", "reminder_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)


class TodoCreate(TodoBase):
    """Schema for creating a todo. Omitting position appends at the end."""
    pass


# Columns that may not be set to null through an update
NON_NULLABLE_FIELDS = (
    "title", "completed", "priority", "tags", "position",
    "subtasks", "attachments", "progress", "actual_time",
)


class TodoUpdate(BaseModel):
    """Partial update; only the fields present in the request are applied."""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=500)
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    category_id: Optional[str] = None
    tags: Optional[list[Tag]] = None
    due_date: Optional[datetime] = None
    reminder_date: Optional[datetime] = None
    position: Optional[int] = None
    subtasks: Optional[list[SubtaskIn]] = None
    attachments: Optional[list[Attachment]] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    estimated_time: Optional[float] = Field(None, ge=0)
    actual_time: Optional[float] = Field(None, ge=0)

    @field_validator("due_date", "reminder_date")
    @classmethod
    def normalize_dates(cls, value):
        return to_naive_utc(value)

    @model_validator(mode="after")
    def reject_null_required(self):
        for field in NON_NULLABLE_FIELDS:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class TodoResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    completed: bool
    priority: Priority
    category: Optional[CategoryRef]
    tags: list[str]
    due_date: Optional[datetime]
    reminder_date: Optional[datetime]
    position: int
    subtasks: list[Subtask]
    attachments: list[Attachment]
    progress: int
    estimated_time: Optional[float]
    actual_time: float
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime]

    class Config:
        from_attributes = True

    @computed_field
    @property
    def is_overdue(self) -> bool:
        return derived_state.is_overdue(self.due_date, self.completed, datetime.utcnow())


class Pagination(BaseModel):
    current: int
    total: int
    count: int
    total_count: int
    has_next: bool
    has_prev: bool


class TodoListResponse(BaseModel):
    items: list[TodoResponse]
    pagination: Pagination


class ReorderRequest(BaseModel):
    todo_ids: list[str]


class BulkUpdateRequest(BaseModel):
    todo_ids: list[str] = Field(..., min_length=1)
    updates: TodoUpdate


class BulkUpdateResponse(BaseModel):
    updated: int
    items: list[TodoResponse]
