"""Schemas for formulas."""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from urllib.parse import urlparse

from formulary.models import Formula
from formulary.utils.serialization import serialize_datetime


def _check_video_url(value: Optional[str]) -> Optional[str]:
    """Accept an http(s) URL or an empty string."""
    if value is None or value == "":
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Invalid video URL")
    return value


class FormulaCreate(BaseModel):
    """Request schema for creating a formula."""
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    formula: str = Field(..., min_length=1)
    videoUrl: str = Field("", description="Tutorial video URL or empty string")
    categoryIds: List[int] = Field(default_factory=list)

    @field_validator("videoUrl")
    @classmethod
    def check_video_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_video_url(value)


class FormulaUpdate(BaseModel):
    """Request schema for a partial formula update. Metrics are not writable."""
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    formula: Optional[str] = Field(None, min_length=1)
    videoUrl: Optional[str] = None
    categoryIds: Optional[List[int]] = None

    @field_validator("videoUrl")
    @classmethod
    def check_video_url(cls, value: Optional[str]) -> Optional[str]:
        return _check_video_url(value)


class FormulaResponse(BaseModel):
    """Public formula representation; copy metrics and scores are left out."""
    id: str
    name: str
    description: str
    formula: str
    videoUrl: Optional[str]
    categoryIds: List[int]
    createdAt: Optional[str]
    updatedAt: Optional[str]

    @classmethod
    def from_orm(cls, obj: Formula) -> "FormulaResponse":
        """Convert SQLAlchemy model to response model."""
        return cls(
            id=obj.id,
            name=obj.name,
            description=obj.description,
            formula=obj.formula,
            videoUrl=obj.video_url,
            categoryIds=obj.category_ids,
            createdAt=serialize_datetime(obj.created_at),
            updatedAt=serialize_datetime(obj.updated_at),
        )
