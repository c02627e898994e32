"""
Category API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from app.auth import get_current_owner
from app.dependencies import get_db, get_notifier
from app.schemas.category import (
    CategoryCreate,
    CategoryUpdate,
    CategoryResponse,
    CategoryList,
)
from app.services import category_service
from app.services.notifier import ChangeNotifier

router = APIRouter()


@router.get("", response_model=CategoryList)
def list_categories(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """List the owner's categories with their todo counts."""
    rows = category_service.list_categories(db, owner_id)
    return CategoryList(
        items=[category_service.to_response(c, count) for c, count in rows],
        total=len(rows)
    )


@router.post("", response_model=CategoryResponse, status_code=201)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Create a new category."""
    created = category_service.create_category(db, owner_id, category, notifier)
    return category_service.to_response(created)


@router.post("/defaults", response_model=List[CategoryResponse], status_code=201)
def create_default_categories(
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Create the starter categories for a new owner."""
    created = category_service.create_default_categories(db, owner_id, notifier)
    return [category_service.to_response(c) for c in created]


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(
    category_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
):
    """Get a specific category."""
    category, count = category_service.get_category(db, owner_id, category_id)
    return category_service.to_response(category, count)


@router.put("/{category_id}", response_model=CategoryResponse)
@router.patch("/{category_id}", response_model=CategoryResponse)
def update_category(
    category_id: str,
    category_update: CategoryUpdate,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Update a category. The default category cannot be renamed."""
    category, count = category_service.update_category(
        db, owner_id, category_id, category_update, notifier
    )
    return category_service.to_response(category, count)


@router.delete("/{category_id}", status_code=204)
def delete_category(
    category_id: str,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_owner),
    notifier: ChangeNotifier = Depends(get_notifier),
):
    """Delete a category; refused while it still holds todos."""
    category_service.delete_category(db, owner_id, category_id, notifier)
    return None
