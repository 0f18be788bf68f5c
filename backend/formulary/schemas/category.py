"""Schemas for categories."""
from pydantic import BaseModel, Field
from typing import Optional

from formulary.models import Category
from formulary.utils.serialization import serialize_datetime


class CategoryCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    createdAt: Optional[str]
    updatedAt: Optional[str]

    @classmethod
    def from_orm(cls, obj: Category) -> "CategoryResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=obj.id,
            name=obj.name,
            description=obj.description,
            createdAt=serialize_datetime(obj.created_at),
            updatedAt=serialize_datetime(obj.updated_at),
        )
