"""Copy event model."""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from formulary.database import Base


class Event(Base):
    """Append-only record of one accepted copy of a formula by a session."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    formula_id = Column(String, ForeignKey("formulas.id", ondelete="CASCADE"), nullable=False)
    session_id = Column(String, nullable=False)  # Opaque, compared for equality only
    occurred_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    formula = relationship("Formula", back_populates="events")

    # Rate-limit lookups go by (formula, session); ranking scans by time
    __table_args__ = (
        Index("idx_events_formula_session", "formula_id", "session_id", "occurred_at"),
        Index("idx_events_formula_occurred", "formula_id", "occurred_at"),
    )
