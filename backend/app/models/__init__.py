"""
Database models package.
"""

from app.models.category import Category
from app.models.todo import Todo, TodoTag, Priority, PRIORITY_RANK

__all__ = [
    "Category",
    "Todo",
    "TodoTag",
    "Priority",
    "PRIORITY_RANK",
]
