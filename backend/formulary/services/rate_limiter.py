"""Per-session rate limiting for copy events."""
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from formulary.constants import RATE_LIMIT_WINDOW
from formulary.models.event import Event


class RateLimiter:
    """
    Rejects a copy when the same session already copied the same formula
    within ``window``.

    The check reads the event log through the caller's session, so it must run
    inside the same transaction as the insert it guards.
    """

    def __init__(self, window: timedelta = RATE_LIMIT_WINDOW):
        self.window = window

    def is_limited(self, db: Session, formula_id: str, session_id: str, now: datetime) -> bool:
        """Return True if an accepted event for the pair exists after ``now - window``."""
        cutoff = now - self.window
        recent = db.query(Event.id).filter(
            Event.formula_id == formula_id,
            Event.session_id == session_id,
            Event.occurred_at > cutoff,
        ).first()
        return recent is not None
