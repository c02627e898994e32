"""Service for category management and the per-owner starter set."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.exceptions import ConstraintViolation, InvalidOperation
from app.models.category import Category
from app.models.todo import Todo
from app.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from app.services import store
from app.services.notifier import (
    ChangeNotifier, ACTION_CREATE, ACTION_UPDATE, ACTION_DELETE, ENTITY_CATEGORY,
)

logger = logging.getLogger(__name__)

# Exactly one entry is the default category
DEFAULT_CATEGORIES = [
    {
        "name": "General",
        "color": "#2196F3",
        "icon": "category",
        "description": "General todos",
        "is_default": True,
    },
    {
        "name": "Work",
        "color": "#FF9800",
        "icon": "work",
        "description": "Work-related tasks",
        "is_default": False,
    },
    {
        "name": "Personal",
        "color": "#4CAF50",
        "icon": "person",
        "description": "Personal tasks",
        "is_default": False,
    },
    {
        "name": "Shopping",
        "color": "#E91E63",
        "icon": "shopping_cart",
        "description": "Shopping lists",
        "is_default": False,
    },
]


def to_response(category: Category, todo_count: int = 0) -> CategoryResponse:
    response = CategoryResponse.model_validate(category)
    response.todo_count = todo_count
    return response


def serialize(category: Category, todo_count: int = 0) -> Dict[str, Any]:
    return to_response(category, todo_count).model_dump(mode="json")


def todo_count(db: Session, owner_id: str, category_id: str) -> int:
    return store.count(db, Todo, owner_id, [Todo.category_id == category_id])


def _ensure_name_available(db: Session, owner_id: str, name: str, exclude_id: Optional[str] = None) -> None:
    query = store.owned(db, Category, owner_id).filter(Category.name == name)
    if exclude_id:
        query = query.filter(Category.id != exclude_id)
    if query.first() is not None:
        raise ConstraintViolation(f"Category '{name}' already exists")


def list_categories(db: Session, owner_id: str) -> List[Tuple[Category, int]]:
    """Owner's categories, default first then oldest first, each with its todo count."""
    categories = store.find_many(
        db,
        Category,
        owner_id,
        order_by=(Category.is_default.desc(), Category.created_at.asc(), Category.name.asc()),
    )
    counts = dict(
        db.query(Todo.category_id, func.count(Todo.id))
        .filter(Todo.owner_id == owner_id, Todo.category_id.isnot(None))
        .group_by(Todo.category_id)
        .all()
    )
    return [(c, counts.get(c.id, 0)) for c in categories]


def get_category(db: Session, owner_id: str, category_id: str) -> Tuple[Category, int]:
    category = store.get_or_404(db, Category, category_id, owner_id, "Category")
    return category, todo_count(db, owner_id, category.id)


def create_category(
    db: Session,
    owner_id: str,
    data: CategoryCreate,
    notifier: Optional[ChangeNotifier] = None,
) -> Category:
    _ensure_name_available(db, owner_id, data.name)

    category = Category(owner_id=owner_id, is_default=False, **data.model_dump())
    store.insert(db, category)
    store.commit(db)
    db.refresh(category)
    logger.info(f"Created category {category.id} for owner {owner_id}")

    (notifier or ChangeNotifier()).emit(ACTION_CREATE, owner_id, serialize(category), ENTITY_CATEGORY)
    return category


def update_category(
    db: Session,
    owner_id: str,
    category_id: str,
    data: CategoryUpdate,
    notifier: Optional[ChangeNotifier] = None,
) -> Tuple[Category, int]:
    category = store.get_or_404(db, Category, category_id, owner_id, "Category")
    changes = data.model_dump(exclude_unset=True)

    if category.is_default and "name" in changes:
        logger.info(f"Rejected rename of default category {category_id}")
        raise InvalidOperation("Cannot change name of default category")
    if "name" in changes and changes["name"] != category.name:
        _ensure_name_available(db, owner_id, changes["name"], exclude_id=category.id)

    for field, value in changes.items():
        setattr(category, field, value)

    store.commit(db)
    db.refresh(category)
    count = todo_count(db, owner_id, category.id)

    (notifier or ChangeNotifier()).emit(ACTION_UPDATE, owner_id, serialize(category, count), ENTITY_CATEGORY)
    return category, count


def delete_category(
    db: Session,
    owner_id: str,
    category_id: str,
    notifier: Optional[ChangeNotifier] = None,
) -> None:
    """Delete an empty, non-default category. Todos are never reassigned."""
    category = store.get_or_404(db, Category, category_id, owner_id, "Category")

    if category.is_default:
        raise InvalidOperation("Cannot delete default category")

    count = todo_count(db, owner_id, category.id)
    if count > 0:
        logger.info(f"Rejected delete of category {category_id} holding {count} todo(s)")
        raise InvalidOperation(
            f"Cannot delete category. It contains {count} todo(s). "
            "Please move or delete the todos first."
        )

    store.delete(db, category)
    store.commit(db)
    logger.info(f"Deleted category {category_id} for owner {owner_id}")

    (notifier or ChangeNotifier()).emit(ACTION_DELETE, owner_id, {"id": category_id}, ENTITY_CATEGORY)


def create_default_categories(
    db: Session,
    owner_id: str,
    notifier: Optional[ChangeNotifier] = None,
) -> List[Category]:
    """Insert the starter set; refused once the owner has a default category."""
    existing_defaults = store.count(db, Category, owner_id, [Category.is_default.is_(True)])
    if existing_defaults > 0:
        raise InvalidOperation("Default categories already exist")

    categories = [Category(owner_id=owner_id, **preset) for preset in DEFAULT_CATEGORIES]
    for category in categories:
        store.insert(db, category)
    store.commit(db)
    logger.info(f"Created {len(categories)} default categories for owner {owner_id}")

    notifier = notifier or ChangeNotifier()
    for category in categories:
        db.refresh(category)
        notifier.emit(ACTION_CREATE, owner_id, serialize(category), ENTITY_CATEGORY)
    return categories
