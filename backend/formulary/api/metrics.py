"""Interaction metrics endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status

from formulary.auth.session import ensure_session
from formulary.deps import get_event_store
from formulary.schemas.metrics import CopyRequest, CopyResponse
from formulary.services.event_store import EventStore
from formulary.utils.exceptions import NotFoundError, not_found_error
from formulary.utils.logger import logger

router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.post("/copy", response_model=CopyResponse)
def record_copy(
    request: CopyRequest,
    session_id: str = Depends(ensure_session),
    event_store: EventStore = Depends(get_event_store),
) -> CopyResponse:
    """
    Record that the visitor copied a formula.

    Repeated copies by the same session inside the rate-limit window are
    acknowledged but not counted; the response reports that with
    ``recorded=false``. The session cookie is issued either way.

    Args:
        request: Copy request with the formula id
        session_id: Visitor session from the signed cookie
        event_store: Copy event store

    Returns:
        Copy response with the recorded flag
    """
    try:
        result = event_store.record_event(request.formulaId, session_id)
    except NotFoundError:
        raise not_found_error("Formula", request.formulaId)
    except Exception as e:
        logger.error(f"Failed to record copy of {request.formulaId}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record copy",
        )

    return CopyResponse(
        success=True,
        recorded=result.accepted,
        message="Copy recorded" if result.accepted else "Rate limited",
    )
