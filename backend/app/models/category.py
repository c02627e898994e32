"""
Category database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from app.database import Base


class Category(Base):
    """Owner-scoped category; names are unique per owner."""

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(64), nullable=False, index=True)
    name = Column(String(30), nullable=False)
    color = Column(String(7), nullable=False)  # Hex color, 3 or 6 digits
    icon = Column(String(50), default="category", nullable=False)
    description = Column(String(200), nullable=True)
    is_default = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    todos = relationship("Todo", back_populates="category")

    __table_args__ = (
        UniqueConstraint("owner_id", "name", name="uq_category_owner_name"),
    )
