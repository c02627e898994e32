"""Service for todo writes: validation, derived fields, persistence, then notification."""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import ConstraintViolation, InvalidReference
from app.models.category import Category
from app.models.todo import Todo
from app.schemas.todo import TodoCreate, TodoUpdate, TodoResponse, SubtaskIn, Attachment
from app.services import store
from app.services.derived_state import apply_completion_transition, compute_progress, search_text
from app.services.notifier import (
    ChangeNotifier, ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE, ACTION_REORDERED,
)

logger = logging.getLogger(__name__)


def serialize(todo: Todo) -> Dict[str, Any]:
    """JSON-ready todo with its category projection, as sent to subscribers."""
    return TodoResponse.model_validate(todo).model_dump(mode="json")


def validate_category(db: Session, owner_id: str, category_id: Optional[str]) -> None:
    """A todo may only point at one of its owner's categories."""
    if category_id is None:
        return
    if store.find_by_id(db, Category, category_id, owner_id) is None:
        raise InvalidReference("Invalid category")


def next_position(db: Session, owner_id: str) -> int:
    current = db.query(func.max(Todo.position)).filter(Todo.owner_id == owner_id).scalar()
    return 0 if current is None else current + 1


def _subtask_records(subtasks: Sequence[SubtaskIn], now: datetime) -> List[Dict[str, Any]]:
    return [
        {
            "title": s.title,
            "completed": s.completed,
            "created_at": (s.created_at or now).isoformat(),
        }
        for s in subtasks
    ]


def _attachment_records(attachments: Sequence[Attachment]) -> List[Dict[str, Any]]:
    return [a.model_dump(mode="json") for a in attachments]


def apply_patch(todo: Todo, data: TodoUpdate, now: datetime) -> None:
    """
    Apply the fields present in data to todo and keep derived fields consistent.

    New subtasks recompute progress, overriding any progress sent alongside.
    A completion transition then stamps or clears completed_at.
    """
    sent = data.model_fields_set
    previous_completed = bool(todo.completed)

    for field, value in data.model_dump(exclude_unset=True, exclude={"subtasks", "attachments"}).items():
        setattr(todo, field, value)

    if "title" in sent or "description" in sent:
        todo.search_text = search_text(todo.title, todo.description)

    if "attachments" in sent:
        todo.attachments = _attachment_records(data.attachments)

    if "subtasks" in sent:
        todo.subtasks = _subtask_records(data.subtasks, now)
        todo.progress = compute_progress(todo.subtasks, todo.completed)

    transition = apply_completion_transition(previous_completed, bool(todo.completed), now)
    if transition.changed:
        todo.completed_at = transition.completed_at
        if transition.progress_override is not None:
            todo.progress = transition.progress_override
        elif "progress" not in sent:
            todo.progress = compute_progress(todo.subtasks, todo.completed)

    todo.updated_at = now


def create_todo(
    db: Session,
    owner_id: str,
    data: TodoCreate,
    notifier: Optional[ChangeNotifier] = None,
) -> Todo:
    """Create a todo; without an explicit position it is appended after the owner's last one."""
    validate_category(db, owner_id, data.category_id)

    now = datetime.utcnow()
    todo = Todo(
        owner_id=owner_id,
        title=data.title,
        description=data.description,
        search_text=search_text(data.title, data.description),
        completed=data.completed,
        priority=data.priority,
        category_id=data.category_id,
        tags=data.tags,
        due_date=data.due_date,
        reminder_date=data.reminder_date,
        subtasks=_subtask_records(data.subtasks, now),
        attachments=_attachment_records(data.attachments),
        estimated_time=data.estimated_time,
        actual_time=data.actual_time,
        created_at=now,
        updated_at=now,
    )
    todo.position = data.position if data.position is not None else next_position(db, owner_id)

    if data.subtasks or data.progress is None:
        todo.progress = compute_progress(todo.subtasks, data.completed)
    else:
        todo.progress = data.progress

    transition = apply_completion_transition(False, data.completed, now)
    if transition.changed:
        todo.completed_at = transition.completed_at
        todo.progress = transition.progress_override

    store.insert(db, todo)
    store.commit(db)
    db.refresh(todo)
    logger.info(f"Created todo {todo.id} for owner {owner_id}")

    (notifier or ChangeNotifier()).emit(ACTION_CREATE, owner_id, serialize(todo))
    return todo


def update_todo(
    db: Session,
    owner_id: str,
    todo_id: str,
    data: TodoUpdate,
    notifier: Optional[ChangeNotifier] = None,
) -> Todo:
    todo = store.get_or_404(db, Todo, todo_id, owner_id, "Todo")
    if "category_id" in data.model_fields_set:
        validate_category(db, owner_id, data.category_id)

    apply_patch(todo, data, datetime.utcnow())
    store.commit(db)
    db.refresh(todo)

    (notifier or ChangeNotifier()).emit(ACTION_UPDATE, owner_id, serialize(todo))
    return todo


def toggle_todo(
    db: Session,
    owner_id: str,
    todo_id: str,
    notifier: Optional[ChangeNotifier] = None,
) -> Todo:
    """Flip completion, with the same transition handling as an update."""
    todo = store.get_or_404(db, Todo, todo_id, owner_id, "Todo")

    apply_patch(todo, TodoUpdate(completed=not todo.completed), datetime.utcnow())
    store.commit(db)
    db.refresh(todo)

    (notifier or ChangeNotifier()).emit(ACTION_UPDATE, owner_id, serialize(todo))
    return todo


def delete_todo(
    db: Session,
    owner_id: str,
    todo_id: str,
    notifier: Optional[ChangeNotifier] = None,
) -> None:
    todo = store.get_or_404(db, Todo, todo_id, owner_id, "Todo")

    store.delete(db, todo)
    store.commit(db)
    logger.info(f"Deleted todo {todo_id} for owner {owner_id}")

    (notifier or ChangeNotifier()).emit(ACTION_DELETE, owner_id, {"id": todo_id})


def reorder_todos(
    db: Session,
    owner_id: str,
    todo_ids: Sequence[str],
    notifier: Optional[ChangeNotifier] = None,
) -> int:
    """
    Set each todo's position to its index in todo_ids.

    Ids the owner does not have are skipped. Returns how many todos moved.
    """
    todo_ids = list(todo_ids)
    owned = {
        t.id: t
        for t in store.find_many(db, Todo, owner_id, [Todo.id.in_(set(todo_ids))])
    }

    moved = set()
    for index, todo_id in enumerate(todo_ids):
        todo = owned.get(todo_id)
        if todo is not None:
            todo.position = index
            moved.add(todo_id)

    store.commit(db)
    logger.info(f"Reordered {len(moved)} of {len(todo_ids)} todos for owner {owner_id}")

    (notifier or ChangeNotifier()).emit(ACTION_REORDERED, owner_id, {"todo_ids": todo_ids})
    return len(moved)


def bulk_update_todos(
    db: Session,
    owner_id: str,
    todo_ids: Sequence[str],
    data: TodoUpdate,
    notifier: Optional[ChangeNotifier] = None,
) -> Tuple[int, List[Todo]]:
    """
    Apply one patch to every listed todo the owner has.

    Ids belonging to other owners, or to nobody, are left out of the affected
    set. Each affected todo gets its own update event.
    """
    if not todo_ids:
        raise ConstraintViolation("todo_ids must be a non-empty array")
    if "category_id" in data.model_fields_set:
        validate_category(db, owner_id, data.category_id)

    todos = store.find_many(
        db,
        Todo,
        owner_id,
        [Todo.id.in_(set(todo_ids))],
        order_by=(Todo.position.asc(), Todo.id.asc()),
    )

    now = datetime.utcnow()
    for todo in todos:
        apply_patch(todo, data, now)

    store.commit(db)
    logger.info(f"Bulk updated {len(todos)} of {len(todo_ids)} todos for owner {owner_id}")

    notifier = notifier or ChangeNotifier()
    for todo in todos:
        db.refresh(todo)
        notifier.emit(ACTION_UPDATE, owner_id, serialize(todo))
    return len(todos), todos
