"""Models package."""
from formulary.models.formula import Formula, formula_categories
from formulary.models.category import Category
from formulary.models.event import Event

__all__ = ["Formula", "Category", "Event", "formula_categories"]
