"""Durable copy-event log and the per-formula counters derived from it."""
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.orm import Session

from formulary.database import Database
from formulary.models.event import Event
from formulary.models.formula import Formula
from formulary.services.rate_limiter import RateLimiter
from formulary.utils.clock import as_utc, utcnow
from formulary.utils.exceptions import NotFoundError
from formulary.utils.logger import logger


class RecordResult(str, Enum):
    """Outcome of recording a copy. Being rate limited is not an error."""
    ACCEPTED = "accepted"
    RATE_LIMITED = "rate_limited"

    @property
    def accepted(self) -> bool:
        return self is RecordResult.ACCEPTED


@dataclass(frozen=True)
class ItemStats:
    """Detached snapshot of the fields ranking needs from a formula."""
    item_id: str
    total_events: int
    last_event_at: Optional[datetime]
    created_at: datetime


class EventStore:
    """
    Records copy events and answers the aggregate queries ranking needs.

    ``total_events`` is the all-time popularity counter and is authoritative on
    its own; the event rows are only used for recency inside the lookback
    window. Nothing reconciles one against the other.
    """

    def __init__(
        self,
        database: Database,
        rate_limiter: RateLimiter,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.database = database
        self.rate_limiter = rate_limiter
        self.clock = clock

    def record_event(
        self,
        item_id: str,
        session_id: str,
        now: Optional[datetime] = None,
    ) -> RecordResult:
        """
        Record one copy of ``item_id`` by ``session_id``.

        The rate-limit check, the event insert and the counter update run in a
        single write transaction. The formula row is locked for the duration, so
        concurrent calls for the same formula are serialized.

        Raises:
            NotFoundError: If the formula does not exist
        """
        now = as_utc(now) if now is not None else self.clock()

        with self.database.transaction() as db:
            formula_id = db.query(Formula.id).filter(
                Formula.id == item_id
            ).with_for_update().scalar()

            if formula_id is None:
                raise NotFoundError("Formula", item_id)

            if self.rate_limiter.is_limited(db, item_id, session_id, now):
                logger.debug(f"Rate limited copy of {item_id} by session {session_id}")
                return RecordResult.RATE_LIMITED

            db.add(Event(formula_id=item_id, session_id=session_id, occurred_at=now))
            db.execute(
                update(Formula)
                .where(Formula.id == item_id)
                .values(
                    total_events=Formula.total_events + 1,
                    last_event_at=now,
                    # Recording a copy is not an edit of the formula
                    updated_at=Formula.updated_at,
                )
            )

        logger.debug(f"Recorded copy of {item_id} by session {session_id}")
        return RecordResult.ACCEPTED

    def events_since(
        self,
        item_ids: Iterable[str],
        since: datetime,
        until: Optional[datetime] = None,
    ) -> Dict[str, List[datetime]]:
        """
        Return event timestamps per formula with ``occurred_at >= since``.

        Each list is ordered by ``occurred_at``; formulas without events are
        absent from the mapping.
        """
        item_ids = list(item_ids)
        if not item_ids:
            return {}

        with self.database.session() as db:
            return _query_events_since(db, item_ids, since, until)

    def get_item_stats(self, item_ids: Iterable[str]) -> List[ItemStats]:
        """Return counter snapshots for the formulas that exist among ``item_ids``."""
        item_ids = list(item_ids)
        if not item_ids:
            return []

        with self.database.session() as db:
            return _query_item_stats(db, item_ids)

    def ranking_snapshot(
        self,
        item_ids: Iterable[str],
        since: datetime,
        until: Optional[datetime] = None,
    ) -> Tuple[List[ItemStats], Dict[str, List[datetime]]]:
        """
        Read counters and recent events for ``item_ids`` from one snapshot.

        A copy committed while this runs shows up in both halves or in neither.
        """
        item_ids = list(item_ids)
        if not item_ids:
            return [], {}

        with self.database.snapshot() as db:
            items = _query_item_stats(db, item_ids)
            events = _query_events_since(db, item_ids, since, until)
        return items, events


def _query_events_since(
    db: Session,
    item_ids: List[str],
    since: datetime,
    until: Optional[datetime],
) -> Dict[str, List[datetime]]:
    query = db.query(Event.formula_id, Event.occurred_at).filter(
        Event.formula_id.in_(item_ids),
        Event.occurred_at >= since,
    )
    if until is not None:
        query = query.filter(Event.occurred_at <= until)

    events: Dict[str, List[datetime]] = defaultdict(list)
    for formula_id, occurred_at in query.order_by(Event.formula_id, Event.occurred_at):
        events[formula_id].append(as_utc(occurred_at))
    return dict(events)


def _query_item_stats(db: Session, item_ids: List[str]) -> List[ItemStats]:
    rows = db.query(
        Formula.id,
        Formula.total_events,
        Formula.last_event_at,
        Formula.created_at,
    ).filter(Formula.id.in_(item_ids)).all()

    return [
        ItemStats(
            item_id=row.id,
            total_events=row.total_events or 0,
            last_event_at=as_utc(row.last_event_at),
            created_at=as_utc(row.created_at),
        )
        for row in rows
    ]
