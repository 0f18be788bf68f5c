"""Formula model (the ranked catalog item)."""
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Table, Index
from sqlalchemy.orm import relationship
from formulary.database import Base
from formulary.utils.clock import utcnow


formula_categories = Table(
    "formula_categories",
    Base.metadata,
    Column("formula_id", String, ForeignKey("formulas.id", ondelete="CASCADE"), primary_key=True),
    Column("category_id", Integer, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True),
)


class Formula(Base):
    """Spreadsheet formula with its copy metrics."""
    __tablename__ = "formulas"

    id = Column(String, primary_key=True)  # formula_<ms>_<random>
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    formula = Column(Text, nullable=False)
    video_url = Column(String(500), nullable=True)

    # Copy metrics, written only by EventStore.record_event
    total_events = Column(Integer, default=0, nullable=False)
    last_event_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    categories = relationship(
        "Category",
        secondary=formula_categories,
        back_populates="formulas",
        order_by="Category.id",
    )
    events = relationship(
        "Event",
        back_populates="formula",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Event.occurred_at",
    )

    __table_args__ = (
        Index("idx_formulas_last_event_at", "last_event_at"),
    )

    @property
    def category_ids(self) -> list[int]:
        return [category.id for category in self.categories]
