"""
Pydantic schemas package.
"""

from app.schemas.category import (
    CategoryBase,
    CategoryCreate,
    CategoryUpdate,
    CategoryRef,
    CategoryResponse,
    CategoryList,
)
from app.schemas.todo import (
    SubtaskIn,
    Subtask,
    Attachment,
    TodoCreate,
    TodoUpdate,
    TodoResponse,
    Pagination,
    TodoListResponse,
    ReorderRequest,
    BulkUpdateRequest,
    BulkUpdateResponse,
)
from app.schemas.stats import PriorityCount, CategoryCount, TodoStats

__all__ = [
    "CategoryBase",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryRef",
    "CategoryResponse",
    "CategoryList",
    "SubtaskIn",
    "Subtask",
    "Attachment",
    "TodoCreate",
    "TodoUpdate",
    "TodoResponse",
    "Pagination",
    "TodoListResponse",
    "ReorderRequest",
    "BulkUpdateRequest",
    "BulkUpdateResponse",
    "PriorityCount",
    "CategoryCount",
    "TodoStats",
]
