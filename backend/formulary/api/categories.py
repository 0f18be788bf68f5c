"""Categories API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from formulary.auth.admin import require_admin
from formulary.database import get_db
from formulary.models import Category
from formulary.schemas.category import CategoryCreate, CategoryUpdate, CategoryResponse
from formulary.utils.db import get_by_id
from formulary.utils.exceptions import handle_database_error
from formulary.utils.logger import logger

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
def get_categories(db: Session = Depends(get_db)) -> list[CategoryResponse]:
    """Get all categories ordered by name."""
    try:
        categories = db.query(Category).order_by(Category.name).all()
        return [CategoryResponse.from_orm(c) for c in categories]
    except Exception as e:
        logger.error(f"Failed to get categories: {e}", exc_info=True)
        raise handle_database_error(e, "get_categories")


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(
    category: CategoryCreate,
    db: Session = Depends(get_db),
) -> CategoryResponse:
    """
    Create a new category.

    Args:
        category: Category creation data
        db: Database session

    Returns:
        Created category
    """
    try:
        new_category = Category(name=category.name, description=category.description)
        db.add(new_category)
        db.commit()
        db.refresh(new_category)
        return CategoryResponse.from_orm(new_category)
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create category {category.name}: {e}", exc_info=True)
        raise handle_database_error(e, "create_category")


@router.get("/{category_id}", response_model=CategoryResponse)
def get_category(category_id: int, db: Session = Depends(get_db)) -> CategoryResponse:
    """Get a specific category."""
    return CategoryResponse.from_orm(get_by_id(db, Category, category_id))


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    dependencies=[Depends(require_admin)],
)
def update_category(
    category_id: int,
    category_update: CategoryUpdate,
    db: Session = Depends(get_db),
) -> CategoryResponse:
    """
    Update a category's name and/or description.

    Args:
        category_id: The category to update
        category_update: Fields to change
        db: Database session

    Returns:
        Updated category
    """
    try:
        category = get_by_id(db, Category, category_id)

        changes = category_update.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if value is None and field == "name":
                continue
            setattr(category, field, value)

        db.commit()
        db.refresh(category)
        return CategoryResponse.from_orm(category)
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update category {category_id}: {e}", exc_info=True)
        raise handle_database_error(e, "update_category")


@router.delete("/{category_id}", dependencies=[Depends(require_admin)])
def delete_category(category_id: int, db: Session = Depends(get_db)) -> dict[str, str]:
    """Delete a category; formulas keep existing without it."""
    try:
        category = get_by_id(db, Category, category_id)
        db.delete(category)
        db.commit()
        return {"message": "Category deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete category {category_id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete_category")
