"""Service for per-owner todo statistics."""

from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.category import Category
from app.models.todo import Todo, Priority
from app.schemas.stats import TodoStats, PriorityCount, CategoryCount
from app.services import store
from app.services.derived_state import round_percent


def get_stats(db: Session, owner_id: str, now: Optional[datetime] = None) -> TodoStats:
    """
    Counts and breakdowns for one owner.

    Every date window is measured from the same captured ``now`` so the
    sub-counts agree with each other.
    """
    now = now or datetime.utcnow()
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end_of_day = start_of_day + timedelta(days=1)
    week_end = now + timedelta(days=7)

    total = store.count(db, Todo, owner_id)
    completed = store.count(db, Todo, owner_id, [Todo.completed.is_(True)])
    overdue = store.count(db, Todo, owner_id, [
        Todo.completed.is_(False),
        Todo.due_date.isnot(None),
        Todo.due_date < now,
    ])
    due_today = store.count(db, Todo, owner_id, [
        Todo.due_date >= start_of_day,
        Todo.due_date < end_of_day,
    ])
    due_this_week = store.count(db, Todo, owner_id, [
        Todo.due_date >= start_of_day,
        Todo.due_date < week_end,
    ])

    by_priority = dict(
        db.query(Todo.priority, func.count(Todo.id))
        .filter(Todo.owner_id == owner_id)
        .group_by(Todo.priority)
        .all()
    )
    priority_breakdown = [
        PriorityCount(priority=p, count=by_priority.get(p, 0))
        for p in Priority
    ]

    category_rows = (
        db.query(Todo.category_id, Category.name, Category.color, func.count(Todo.id))
        .outerjoin(Category, Category.id == Todo.category_id)
        .filter(Todo.owner_id == owner_id)
        .group_by(Todo.category_id, Category.name, Category.color)
        .all()
    )
    category_breakdown = sorted(
        (
            CategoryCount(
                category_id=category_id,
                name=(name or "Unknown") if category_id else "Uncategorized",
                color=color if category_id else None,
                count=count,
            )
            for category_id, name, color, count in category_rows
        ),
        key=lambda c: (-c.count, c.name),
    )

    return TodoStats(
        total=total,
        completed=completed,
        pending=total - completed,
        overdue=overdue,
        due_today=due_today,
        due_this_week=due_this_week,
        completion_rate=round_percent(completed, total),
        priority_breakdown=priority_breakdown,
        category_breakdown=category_breakdown,
    )
