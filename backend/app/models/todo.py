"""
Todo database models.
"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Boolean, DateTime, Enum, Integer, Float, Text, JSON, ForeignKey, Index,
)
from sqlalchemy.orm import relationship
import enum
from app.database import Base


class Priority(str, enum.Enum):
    """Todo priority enumeration."""
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


# Rank used when sorting by priority
PRIORITY_RANK = {
    Priority.low: 0,
    Priority.medium: 1,
    Priority.high: 2,
    Priority.critical: 3,
}


class Todo(Base):
    """Todo model."""

    __tablename__ = "todos"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(64), nullable=False, index=True)
    title = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    completed = Column(Boolean, default=False, nullable=False)
    priority = Column(Enum(Priority), default=Priority.medium, nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    due_date = Column(DateTime, nullable=True)
    reminder_date = Column(DateTime, nullable=True)
    position = Column(Integer, default=0, nullable=False)
    subtasks = Column(JSON, default=list, nullable=False)  # [{title, completed, created_at}]
    attachments = Column(JSON, default=list, nullable=False)
    progress = Column(Integer, default=0, nullable=False)
    estimated_time = Column(Float, nullable=True)  # minutes
    actual_time = Column(Float, default=0, nullable=False)  # minutes
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    search_text = Column(Text, default="", nullable=False)  # casefolded title + description

    # Relationships
    category = relationship("Category", back_populates="todos", lazy="joined")
    tag_links = relationship(
        "TodoTag",
        order_by="TodoTag.position",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_todo_owner_completed_due", "owner_id", "completed", "due_date"),
        Index("idx_todo_owner_category", "owner_id", "category_id"),
        Index("idx_todo_owner_position", "owner_id", "position"),
    )

    @property
    def tags(self) -> list:
        return [link.tag for link in self.tag_links]

    @tags.setter
    def tags(self, values) -> None:
        self.tag_links = [TodoTag(tag=tag, position=i) for i, tag in enumerate(values or [])]


class TodoTag(Base):
    """One tag of a todo, kept in its own table so tag filters stay indexable."""

    __tablename__ = "todo_tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    todo_id = Column(String(36), ForeignKey("todos.id", ondelete="CASCADE"), nullable=False)
    tag = Column(String(20), nullable=False)
    position = Column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_todo_tag_tag", "tag", "todo_id"),
    )
