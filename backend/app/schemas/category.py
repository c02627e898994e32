"""
Category Pydantic schemas for API validation.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from datetime import datetime
from typing import Optional

HEX_COLOR_PATTERN = r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$"


class CategoryBase(BaseModel):
    """Base category schema."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=30)
    color: str = Field(..., pattern=HEX_COLOR_PATTERN)
    icon: str = Field("category", min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)


class CategoryCreate(CategoryBase):
    """Schema for creating a category."""
    pass


class CategoryUpdate(BaseModel):
    """Schema for updating a category. Only the fields sent are applied."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=30)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    icon: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=200)

    @model_validator(mode="after")
    def reject_null_required(self):
        for field in ("name", "color", "icon"):
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class CategoryRef(BaseModel):
    """Category projection embedded in todos."""
    id: str
    name: str
    color: str
    icon: str

    class Config:
        from_attributes = True


class CategoryResponse(BaseModel):
    """Schema for category response."""
    id: str
    name: str
    color: str
    icon: str
    description: Optional[str]
    is_default: bool
    created_at: datetime
    todo_count: int = 0

    class Config:
        from_attributes = True


class CategoryList(BaseModel):
    """Schema for listing categories."""
    items: list[CategoryResponse]
    total: int
