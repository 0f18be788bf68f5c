"""Category model."""
from sqlalchemy import Column, String, Text, Integer, DateTime
from sqlalchemy.orm import relationship
from formulary.database import Base
from formulary.models.formula import formula_categories
from formulary.utils.clock import utcnow


class Category(Base):
    """Category grouping formulas."""
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    formulas = relationship("Formula", secondary=formula_categories, back_populates="categories")
