"""Catalog queries shared by the formula endpoints."""
import secrets
import time
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Query, Session, selectinload

from formulary.models import Category, Formula, formula_categories
from formulary.utils.exceptions import NotFoundError


def generate_formula_id() -> str:
    """Generate a formula id (format: formula_<ms>_<random>)."""
    return f"formula_{int(time.time() * 1000)}_{secrets.token_hex(5)[:9]}"


def filter_by_categories(query: Query, category_ids: Optional[Sequence[int]]) -> Query:
    """Restrict a Formula query to formulas in any of ``category_ids``."""
    if not category_ids:
        return query
    member_ids = select(formula_categories.c.formula_id).where(
        formula_categories.c.category_id.in_(list(category_ids))
    )
    return query.filter(Formula.id.in_(member_ids))


def candidate_formula_ids(db: Session, category_ids: Optional[Sequence[int]] = None) -> List[str]:
    """Ids of every formula eligible for ranking under the category filter."""
    query = filter_by_categories(db.query(Formula.id), category_ids)
    return [row.id for row in query.all()]


def list_formulas(db: Session) -> List[Formula]:
    """All formulas, newest first."""
    return (
        db.query(Formula)
        .options(selectinload(Formula.categories))
        .order_by(Formula.created_at.desc(), Formula.id)
        .all()
    )


def list_recent_formulas(
    db: Session,
    category_ids: Optional[Sequence[int]],
    page: int,
    page_size: int,
) -> List[Formula]:
    """Formulas ordered by their latest copy (or creation when never copied)."""
    query = filter_by_categories(db.query(Formula), category_ids)
    return (
        query.options(selectinload(Formula.categories))
        .order_by(
            func.coalesce(Formula.last_event_at, Formula.created_at).desc(),
            Formula.created_at.desc(),
            Formula.id,
        )
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )


def load_formulas_in_order(db: Session, formula_ids: Sequence[str]) -> List[Formula]:
    """Load formulas by id, preserving the order of ``formula_ids``."""
    if not formula_ids:
        return []
    formulas: Dict[str, Formula] = {
        formula.id: formula
        for formula in db.query(Formula)
        .options(selectinload(Formula.categories))
        .filter(Formula.id.in_(list(formula_ids)))
        .all()
    }
    # Formulas deleted between ranking and loading are skipped
    return [formulas[formula_id] for formula_id in formula_ids if formula_id in formulas]


def set_formula_categories(db: Session, formula: Formula, category_ids: Sequence[int]) -> None:
    """
    Replace the formula's category set.

    Raises:
        NotFoundError: If any category id does not exist
    """
    unique_ids = sorted(set(category_ids))
    categories = db.query(Category).filter(Category.id.in_(unique_ids)).all() if unique_ids else []
    missing = set(unique_ids) - {category.id for category in categories}
    if missing:
        raise NotFoundError("Category", ",".join(str(i) for i in sorted(missing)))
    formula.categories = categories
