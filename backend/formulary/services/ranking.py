"""Trending ranking: recency-decayed, popularity-weighted scores."""
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from formulary.constants import (
    HALF_LIFE_DAYS,
    LOOKBACK_WINDOW,
    POPULARITY_WEIGHT,
    RECENCY_WEIGHT,
)
from formulary.services.event_store import EventStore, ItemStats
from formulary.utils.clock import as_utc, utcnow
from formulary.utils.exceptions import InvalidArgumentError

SECONDS_PER_DAY = 24 * 60 * 60


@dataclass(frozen=True)
class RankedItem:
    """A formula with its trending score. The score stays internal."""
    item: ItemStats
    score: float

    @property
    def item_id(self) -> str:
        return self.item.item_id


def recency_score(
    event_times: Iterable[datetime],
    now: datetime,
    half_life_days: float = HALF_LIFE_DAYS,
    lookback: timedelta = LOOKBACK_WINDOW,
) -> float:
    """
    Sum of ``exp(-ln(2) / half_life * age_in_days)`` over events.

    Events older than ``lookback`` (or later than ``now``) contribute nothing.
    """
    decay = math.log(2) / half_life_days
    max_age_days = lookback.total_seconds() / SECONDS_PER_DAY
    total = 0.0
    for occurred_at in event_times:
        age_days = (now - occurred_at).total_seconds() / SECONDS_PER_DAY
        if age_days < 0 or age_days > max_age_days:
            continue
        total += math.exp(-decay * age_days)
    return total


def popularity_score(total_events: int) -> float:
    return math.log10(total_events + 1)


def trending_score(popularity: float, recency: float) -> float:
    return POPULARITY_WEIGHT * popularity + RECENCY_WEIGHT * recency


def validate_pagination(page: int, page_size: int) -> None:
    if page < 1:
        raise InvalidArgumentError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise InvalidArgumentError(f"page_size must be >= 1, got {page_size}")


def rank_items(
    items: Sequence[ItemStats],
    events_by_item: Mapping[str, Sequence[datetime]],
    now: datetime,
    page: int,
    page_size: int,
) -> List[RankedItem]:
    """
    Score, sort and slice already-fetched data. Pure and deterministic.

    Ordering is by score descending, then by the most recent activity
    (``last_event_at``, or ``created_at`` for never-copied formulas) descending,
    then by id so equal rows always come back in the same order.
    """
    validate_pagination(page, page_size)

    scored = []
    for item in items:
        recency = recency_score(events_by_item.get(item.item_id, ()), now)
        popularity = popularity_score(item.total_events)
        scored.append(RankedItem(item=item, score=trending_score(popularity, recency)))

    def sort_key(ranked: RankedItem):
        activity = ranked.item.last_event_at or ranked.item.created_at
        return (-ranked.score, -activity.timestamp(), ranked.item_id)

    scored.sort(key=sort_key)

    start = (page - 1) * page_size
    return scored[start:start + page_size]


class RankingEngine:
    """Reads candidates and their recent events, then ranks them."""

    def __init__(self, event_store: EventStore, clock: Callable[[], datetime] = utcnow):
        self.event_store = event_store
        self.clock = clock

    def get_ranked(
        self,
        candidate_ids: Iterable[str],
        page: int,
        page_size: int,
        now: Optional[datetime] = None,
    ) -> List[RankedItem]:
        """
        Return one page of ``candidate_ids`` ordered by trending score.

        Raises:
            InvalidArgumentError: If page or page_size is below 1
        """
        validate_pagination(page, page_size)
        now = as_utc(now) if now is not None else self.clock()

        candidate_ids = set(candidate_ids)
        if not candidate_ids:
            return []

        items, events = self.event_store.ranking_snapshot(
            candidate_ids,
            since=now - LOOKBACK_WINDOW,
            until=now,
        )
        return rank_items(items, events, now, page, page_size)
