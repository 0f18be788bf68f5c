"""Sample data endpoint."""
from fastapi import APIRouter, Depends, Request

from formulary.auth.admin import require_admin
from formulary.seed import seed_database
from formulary.utils.exceptions import handle_database_error
from formulary.utils.logger import logger

router = APIRouter(prefix="/api/seed", tags=["seed"])


@router.post("", dependencies=[Depends(require_admin)])
def seed(request: Request) -> dict:
    """
    Fill empty catalog tables with the sample categories and formulas.

    Tables that already hold rows are left alone, so repeated calls are safe.
    """
    try:
        seed_database(request.app.state.database)
        return {"message": "Database seeded"}
    except Exception as e:
        logger.error(f"Failed to seed database: {e}", exc_info=True)
        raise handle_database_error(e, "seed")
