"""Formulas API endpoints."""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from formulary.auth.admin import require_admin
from formulary.auth.session import ensure_session
from formulary.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from formulary.database import get_db
from formulary.deps import get_ranking_engine
from formulary.models import Formula
from formulary.schemas.formula import FormulaCreate, FormulaUpdate, FormulaResponse
from formulary.services.catalog import (
    candidate_formula_ids,
    generate_formula_id,
    list_formulas,
    list_recent_formulas,
    load_formulas_in_order,
    set_formula_categories,
)
from formulary.services.ranking import RankingEngine
from formulary.utils.db import get_by_id
from formulary.utils.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    handle_database_error,
    validation_error,
)
from formulary.utils.logger import logger
from formulary.utils.serialization import parse_id_list

router = APIRouter(prefix="/api/formulas", tags=["formulas"])

# Request fields that map onto differently named columns
FIELD_COLUMNS = {"videoUrl": "video_url"}


@router.get("", response_model=list[FormulaResponse], dependencies=[Depends(ensure_session)])
def get_formulas(
    categoryIds: Optional[str] = Query(None, description="Comma-separated category ids"),
    page: int = Query(1, ge=1),
    pageSize: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
) -> list[FormulaResponse]:
    """
    List formulas.

    Without categoryIds every formula is returned, newest first. With it, the
    matching formulas are paginated by most recent copy activity; a value with
    no usable ids paginates the whole catalog that way.

    Args:
        categoryIds: Optional comma-separated category filter
        page: 1-based page (filtered listing only)
        pageSize: Page size (filtered listing only)
        db: Database session

    Returns:
        List of formulas
    """
    try:
        if categoryIds:
            formulas = list_recent_formulas(db, parse_id_list(categoryIds), page, pageSize)
        else:
            formulas = list_formulas(db)
        return [FormulaResponse.from_orm(f) for f in formulas]
    except Exception as e:
        logger.error(f"Failed to list formulas: {e}", exc_info=True)
        raise handle_database_error(e, "get_formulas")


@router.get(
    "/trending",
    response_model=list[FormulaResponse],
    dependencies=[Depends(ensure_session)],
)
def get_trending_formulas(
    categoryIds: Optional[str] = Query(None, description="Comma-separated category ids"),
    page: int = Query(1, ge=1),
    pageSize: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    ranking_engine: RankingEngine = Depends(get_ranking_engine),
) -> list[FormulaResponse]:
    """
    List formulas ordered by trending score.

    The score mixes recent copy activity (decaying with a three-day half-life)
    with all-time copy count. Scores are internal and not part of the response.

    Args:
        categoryIds: Optional comma-separated category filter
        page: 1-based page
        pageSize: Page size (1-100)
        db: Database session
        ranking_engine: Trending ranking engine

    Returns:
        One page of formulas in trending order
    """
    try:
        candidate_ids = candidate_formula_ids(db, parse_id_list(categoryIds))
        ranked = ranking_engine.get_ranked(candidate_ids, page, pageSize)
        formulas = load_formulas_in_order(db, [r.item_id for r in ranked])
        return [FormulaResponse.from_orm(f) for f in formulas]
    except InvalidArgumentError as e:
        raise validation_error(str(e))
    except Exception as e:
        logger.error(f"Failed to rank trending formulas: {e}", exc_info=True)
        raise handle_database_error(e, "get_trending_formulas")


@router.get("/{formula_id}", response_model=FormulaResponse)
def get_formula(formula_id: str, db: Session = Depends(get_db)) -> FormulaResponse:
    """Get a specific formula."""
    return FormulaResponse.from_orm(get_by_id(db, Formula, formula_id))


@router.post(
    "",
    response_model=FormulaResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_formula(
    formula: FormulaCreate,
    db: Session = Depends(get_db),
) -> FormulaResponse:
    """
    Create a new formula.

    Args:
        formula: Formula creation data
        db: Database session

    Returns:
        Created formula
    """
    try:
        new_formula = Formula(
            id=generate_formula_id(),
            name=formula.name,
            description=formula.description,
            formula=formula.formula,
            video_url=formula.videoUrl,
        )
        set_formula_categories(db, new_formula, formula.categoryIds)

        db.add(new_formula)
        db.commit()
        db.refresh(new_formula)

        logger.info(f"Created formula {new_formula.id}")
        return FormulaResponse.from_orm(new_formula)
    except NotFoundError as e:
        db.rollback()
        raise validation_error(str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to create formula: {e}", exc_info=True)
        raise handle_database_error(e, "create_formula")


@router.put(
    "/{formula_id}",
    response_model=FormulaResponse,
    dependencies=[Depends(require_admin)],
)
def update_formula(
    formula_id: str,
    formula_update: FormulaUpdate,
    db: Session = Depends(get_db),
) -> FormulaResponse:
    """
    Partially update a formula.

    Only fields present in the body change. ``categoryIds`` replaces the whole
    category set when given. Copy metrics cannot be written here.

    Args:
        formula_id: The formula to update
        formula_update: Fields to change
        db: Database session

    Returns:
        Updated formula
    """
    try:
        formula = get_by_id(db, Formula, formula_id)

        changes = formula_update.model_dump(exclude_unset=True)
        category_ids = changes.pop("categoryIds", None)
        for field, value in changes.items():
            if value is None and field != "videoUrl":
                continue
            setattr(formula, FIELD_COLUMNS.get(field, field), value)

        if category_ids is not None:
            set_formula_categories(db, formula, category_ids)

        db.commit()
        db.refresh(formula)
        return FormulaResponse.from_orm(formula)
    except HTTPException:
        raise
    except NotFoundError as e:
        db.rollback()
        raise validation_error(str(e))
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to update formula {formula_id}: {e}", exc_info=True)
        raise handle_database_error(e, "update_formula")


@router.delete("/{formula_id}", dependencies=[Depends(require_admin)])
def delete_formula(formula_id: str, db: Session = Depends(get_db)) -> dict[str, str]:
    """
    Delete a formula along with its copy events and category links.

    Args:
        formula_id: The formula to delete
        db: Database session

    Returns:
        Success message
    """
    try:
        formula = get_by_id(db, Formula, formula_id)

        # Copy events go with it via ON DELETE CASCADE
        db.delete(formula)
        db.commit()

        logger.info(f"Deleted formula {formula_id}")
        return {"message": "Formula deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Failed to delete formula {formula_id}: {e}", exc_info=True)
        raise handle_database_error(e, "delete_formula")
