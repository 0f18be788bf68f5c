"""Pydantic schemas for request/response validation."""
from formulary.schemas.formula import FormulaCreate, FormulaUpdate, FormulaResponse
from formulary.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from formulary.schemas.metrics import CopyRequest, CopyResponse

__all__ = [
    "FormulaCreate",
    "FormulaUpdate",
    "FormulaResponse",
    "CategoryCreate",
    "CategoryUpdate",
    "CategoryResponse",
    "CopyRequest",
    "CopyResponse",
]
