"""
Migration script: link dishes to categories by their legacy label.

Dishes used to carry a free-text category such as "🍔 Plats". This script
fills ``dish.category_id`` by matching that text against category labels,
case-insensitively: first the full "emoji name" label, then the bare name.

Usage:
    python -m migrations.link_dish_categories
    python cli.py link-dish-categories

The script is idempotent: dishes that already have a category are skipped.
"""

from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.orm import Session

from tableside_api.models import Dish
from tableside_api.services.domain import CustomizationResolver
from tableside_shared.config.logging import get_logger
from tableside_shared.infrastructure.db import get_db_context

logger = get_logger(__name__)


@dataclass
class LinkReport:
    linked: int = 0
    skipped: int = 0
    unmatched: list[tuple[int, str]] = field(default_factory=list)


def link_dish_categories(db: Session, dry_run: bool = False) -> LinkReport:
    """
    Backfill category_id for dishes that only have a legacy label.

    Commits unless ``dry_run`` is set.
    """
    report = LinkReport()
    resolver = CustomizationResolver(db)

    dishes = db.scalars(
        select(Dish).where(Dish.category_id.is_(None), Dish.is_active.is_(True))
    ).all()
    logger.info(f"Found {len(dishes)} dishes without a category")

    for dish in dishes:
        if not dish.legacy_category:
            report.skipped += 1
            continue

        category = resolver.find_category_by_label(dish.legacy_category)
        if category is None:
            logger.warning(
                "No category matches legacy label",
                dish_id=dish.id,
                legacy_category=dish.legacy_category,
            )
            report.unmatched.append((dish.id, dish.legacy_category))
            continue

        dish.category_id = category.id
        report.linked += 1
        logger.debug("Linked dish", dish_id=dish.id, category_id=category.id)

    if dry_run:
        db.rollback()
    else:
        db.commit()

    logger.info(
        "Dish category link complete",
        linked=report.linked,
        skipped=report.skipped,
        unmatched=len(report.unmatched),
        dry_run=dry_run,
    )
    return report


if __name__ == "__main__":
    with get_db_context() as session:
        result = link_dish_categories(session)
    print(f"Linked {result.linked}, skipped {result.skipped}, unmatched {len(result.unmatched)}")
