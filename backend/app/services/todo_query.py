"""Translate a todo filter request into an owner-scoped, paginated read."""

import enum
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from sqlalchemy import case, select
from sqlalchemy.orm import Session

from app.models.todo import Todo, TodoTag, Priority, PRIORITY_RANK
from app.services import store
from app.services.derived_state import fold_case


class StatusFilter(str, enum.Enum):
    completed = "completed"
    pending = "pending"


class SortOrder(str, enum.Enum):
    asc = "asc"
    desc = "desc"


class SortField(str, enum.Enum):
    created_at = "created_at"
    updated_at = "updated_at"
    due_date = "due_date"
    priority = "priority"
    title = "title"
    position = "position"
    progress = "progress"
    completed = "completed"


@dataclass(frozen=True)
class TodoFilter:
    """
    One optional field per filter dimension.

    Tags match if the todo carries any of them; every other dimension is
    ANDed. page and limit below 1 are clamped to 1.
    """
    status: Optional[StatusFilter] = None
    priority: Optional[Priority] = None
    category_id: Optional[str] = None
    tags: Tuple[str, ...] = ()
    search: Optional[str] = None
    sort_by: SortField = SortField.created_at
    sort_order: SortOrder = SortOrder.desc
    page: int = 1
    limit: int = 10

    @property
    def window(self) -> Tuple[int, int]:
        return max(self.page, 1), max(self.limit, 1)


@dataclass(frozen=True)
class TodoPage:
    items: List[Todo]
    page: int
    limit: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return -(-self.total_count // self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def pagination(self) -> dict:
        return {
            "current": self.page,
            "total": self.total_pages,
            "count": len(self.items),
            "total_count": self.total_count,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def compile_criteria(todo_filter: TodoFilter) -> List[Any]:
    """WHERE clauses for everything except the owner scope."""
    criteria: List[Any] = []

    if todo_filter.status is not None:
        criteria.append(Todo.completed == (todo_filter.status == StatusFilter.completed))

    if todo_filter.priority is not None:
        criteria.append(Todo.priority == todo_filter.priority)

    if todo_filter.category_id:
        criteria.append(Todo.category_id == todo_filter.category_id)

    tags = [t for t in todo_filter.tags if t]
    if tags:
        tagged = select(TodoTag.todo_id).where(TodoTag.tag.in_(tags))
        criteria.append(Todo.id.in_(tagged))

    search = (todo_filter.search or "").strip()
    if search:
        # search_text holds the casefolded title and description
        pattern = _like_pattern(fold_case(search))
        criteria.append(Todo.search_text.like(pattern, escape="\\"))

    return criteria


def compile_ordering(todo_filter: TodoFilter) -> Sequence[Any]:
    """Requested sort, then id ascending so pages are stable between requests."""
    if todo_filter.sort_by == SortField.priority:
        column = case(PRIORITY_RANK, value=Todo.priority)
    else:
        column = getattr(Todo, todo_filter.sort_by.value)

    primary = column.asc() if todo_filter.sort_order == SortOrder.asc else column.desc()
    return (primary, Todo.id.asc())


def list_todos(db: Session, owner_id: str, todo_filter: Optional[TodoFilter] = None) -> TodoPage:
    """Return the requested page of the owner's todos; pages past the end are empty."""
    todo_filter = todo_filter or TodoFilter()
    page, limit = todo_filter.window
    criteria = compile_criteria(todo_filter)

    total = store.count(db, Todo, owner_id, criteria)
    skip = (page - 1) * limit
    if skip >= total:
        # Past the end; never hand an oversized OFFSET to the database
        return TodoPage(items=[], page=page, limit=limit, total_count=total)

    items = store.find_many(
        db,
        Todo,
        owner_id,
        criteria,
        order_by=compile_ordering(todo_filter),
        skip=skip,
        limit=min(limit, total),
    )
    return TodoPage(items=items, page=page, limit=limit, total_count=total)


def get_todo(db: Session, owner_id: str, todo_id: str) -> Todo:
    return store.get_or_404(db, Todo, todo_id, owner_id, "Todo")
