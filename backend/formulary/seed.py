"""Sample catalog for empty databases."""
from formulary.database import Database
from formulary.models import Category, Formula
from formulary.services.catalog import generate_formula_id
from formulary.utils.logger import logger

SAMPLE_CATEGORIES = [
    {"name": "Basic Functions", "description": "Essential formulas to get started with spreadsheets."},
    {"name": "Lookup and Reference", "description": "Find data quickly in large tables."},
    {"name": "Conditional Logic", "description": "Build smarter sheets with conditions."},
]

SAMPLE_FORMULAS = [
    {
        "name": "Total Sales",
        "description": "Quickly add up sales across a range of cells.",
        "formula": "=SUM(B2:B101)",
        "categories": ["Basic Functions"],
    },
    {
        "name": "Find Product by Code",
        "description": "Look up product details with VLOOKUP against a reference table.",
        "formula": "=VLOOKUP(E2,Products!A:D,3,FALSE)",
        "categories": ["Lookup and Reference"],
    },
    {
        "name": "Target Reached",
        "description": "Flag who hit their target with a simple condition.",
        "formula": '=IF(C2>=D2,"Target reached","In progress")',
        "categories": ["Conditional Logic", "Basic Functions"],
    },
]


def seed_database(database: Database) -> None:
    """Insert sample categories and formulas into whichever tables are empty."""
    with database.transaction() as db:
        if db.query(Category).count() == 0:
            db.add_all(Category(**category) for category in SAMPLE_CATEGORIES)
            db.flush()
            logger.info(f"Seeded {len(SAMPLE_CATEGORIES)} categories")

        if db.query(Formula).count() == 0:
            categories_by_name = {c.name: c for c in db.query(Category).all()}
            for sample in SAMPLE_FORMULAS:
                categories = [
                    categories_by_name[name]
                    for name in sample["categories"]
                    if name in categories_by_name
                ]
                # Formulas without a category would be unreachable from the filtered views
                if not categories:
                    continue
                db.add(
                    Formula(
                        id=generate_formula_id(),
                        name=sample["name"],
                        description=sample["description"],
                        formula=sample["formula"],
                        video_url="",
                        categories=categories,
                    )
                )
            logger.info("Seeded sample formulas")
