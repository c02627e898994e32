"""
Todo API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.auth import get_current_owner
from app.dependencies import get_db, get_notifier
from app.models.todo import Priority
from app.schemas.stats import TodoStats
from app.schemas.todo import (
    TodoCreate,
    TodoUpdate,
    TodoResponse,
    TodoListResponse,
    Pagination,
    ReorderRequest,
    BulkUpdateRequest,
    BulkUpdateResponse,
)
from app.services import todo_service, stats_service
from app.services.notifier import ChangeNotifier
from app.services.todo_query import (
    TodoFilter,
    StatusFilter,
    SortField,
    SortOrder,
    list_todos as query_todos,
    get_todo as query_todo,
)

router = APIRouter(prefix="/todos", tags=["todos"])


def _split_tags(tags: Optional[List[str]]) -> tuple:
    """Accept both ?tags=a&tags=b and ?tags=a,b."""
    values = []
    for raw in tags or []:
        values.extend(t.strip() for t in raw.split(",") if t.strip())
    return tuple(values)


@router.get("", response_model=TodoListResponse)
def list_todos(
    status: Optional[StatusFilter] = None,
    priority: Optional[Priority] = None,
    category: Optional[str] = None,
    tags: Optional[List[str]] = Query(None),
    search: Optional[str] = None,
    sort_by: SortField = SortField.created_at,
    sort_order: SortOrder = SortOrder.desc,
    page: int = 1,
    limit: int = 10,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """List todos with filtering, sorting and pagination"""
    result = query_todos(db, owner_id, TodoFilter(
        status=status,
        priority=priority,
        category_id=category,
        tags=_split_tags(tags),
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    ))
    return TodoListResponse(
        items=[TodoResponse.model_validate(t) for t in result.items],
        pagination=Pagination(**result.pagination()),
    )


@router.get("/stats", response_model=TodoStats)
def get_stats(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Counts, completion rate and breakdowns for the current owner"""
    return stats_service.get_stats(db, owner_id)


@router.patch("/reorder")
def reorder_todos(
    request: ReorderRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Set positions from the order of todo_ids"""
    moved = todo_service.reorder_todos(db, owner_id, request.todo_ids, notifier)
    return {"reordered": moved, "todo_ids": request.todo_ids}


@router.patch("/bulk", response_model=BulkUpdateResponse)
def bulk_update_todos(
    request: BulkUpdateRequest,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Apply the same updates to several todos"""
    updated, todos = todo_service.bulk_update_todos(
        db, owner_id, request.todo_ids, request.updates, notifier
    )
    return BulkUpdateResponse(
        updated=updated,
        items=[TodoResponse.model_validate(t) for t in todos],
    )


@router.post("", response_model=TodoResponse, status_code=201)
def create_todo(
    todo: TodoCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Create a new todo."""
    created = todo_service.create_todo(db, owner_id, todo, notifier)
    return TodoResponse.model_validate(created)


@router.get("/{todo_id}", response_model=TodoResponse)
def get_todo(
    todo_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Get a single todo"""
    return TodoResponse.model_validate(query_todo(db, owner_id, todo_id))


@router.put("/{todo_id}", response_model=TodoResponse)
@router.patch("/{todo_id}", response_model=TodoResponse)
def update_todo(
    todo_id: str,
    update: TodoUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Update the fields sent; derived fields are recomputed"""
    todo = todo_service.update_todo(db, owner_id, todo_id, update, notifier)
    return TodoResponse.model_validate(todo)


@router.delete("/{todo_id}", status_code=204)
def delete_todo(
    todo_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Delete a todo."""
    todo_service.delete_todo(db, owner_id, todo_id, notifier)
    return None


@router.patch("/{todo_id}/toggle", response_model=TodoResponse)
def toggle_todo(
    todo_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Flip completion"""
    todo = todo_service.toggle_todo(db, owner_id, todo_id, notifier)
    return TodoResponse.model_validate(todo)
