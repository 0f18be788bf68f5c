"""Request dependencies that hand out the components built at startup."""
from fastapi import Request

from formulary.services.event_store import EventStore
from formulary.services.ranking import RankingEngine


def get_event_store(request: Request) -> EventStore:
    """EventStore constructed in the application lifespan."""
    return request.app.state.event_store


def get_ranking_engine(request: Request) -> RankingEngine:
    """RankingEngine constructed in the application lifespan."""
    return request.app.state.ranking_engine
