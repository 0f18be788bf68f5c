"""Database query utility functions."""
from typing import TypeVar, Type, Union
from sqlalchemy.orm import Session

from formulary.utils.exceptions import not_found_error

T = TypeVar("T")


def get_by_id(db: Session, model: Type[T], id_value: Union[str, int]) -> T:
    """
    Get a model instance by ID.

    Args:
        db: Database session
        model: SQLAlchemy model class
        id_value: Primary key value

    Returns:
        Model instance

    Raises:
        HTTPException: If model not found
    """
    instance = db.get(model, id_value)

    if not instance:
        raise not_found_error(model.__name__, str(id_value))

    return instance
