"""
Todo statistics schemas.
"""

from pydantic import BaseModel
from typing import List, Optional

from app.models.todo import Priority


class PriorityCount(BaseModel):
    priority: Priority
    count: int


class CategoryCount(BaseModel):
    category_id: Optional[str]
    name: str
    color: Optional[str]
    count: int


class TodoStats(BaseModel):
    total: int
    completed: int
    pending: int
    overdue: int
    due_today: int
    due_this_week: int
    completion_rate: int
    priority_breakdown: List[PriorityCount]
    category_breakdown: List[CategoryCount]
