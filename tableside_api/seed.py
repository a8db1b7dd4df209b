"""
Seed data for development and demos.
Creates a small restaurant: categories, dishes, option groups, tables and
an admin account.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from tableside_api.models import Category, Dish, Option, OptionGroup, StaffUser, Table
from tableside_shared.config.constants import Roles, SelectionType
from tableside_shared.config.logging import get_logger
from tableside_shared.security.password import hash_password

logger = get_logger(__name__)


DEFAULT_ADMIN_EMAIL = "admin@tableside.app"
DEFAULT_ADMIN_PASSWORD = "admin123"
DEFAULT_TABLE_COUNT = 10

CATEGORIES = [
    ("Entrées", "🥗"),
    ("Plats", "🍔"),
    ("Desserts", "🍰"),
    ("Boissons", "🥤"),
]

DISHES = [
    # (category name, dish name, description, price in minor units)
    ("Entrées", "Salade César", "Laitue romaine, croûtons, parmesan", 3500),
    ("Plats", "Hamburger Classique", "Pain, viande, salade, tomate, oignon et sauce", 5000),
    ("Plats", "Poulet DG", "Poulet sauté aux plantains et légumes", 7500),
    ("Desserts", "Fondant au chocolat", None, 2500),
    ("Boissons", "Jus de bissap", None, 1000),
]

# Option groups for the "Plats" category:
# (name, selection type, required, [(option name, extra price)])
PLATS_OPTION_GROUPS = [
    ("Cuisson de la Viande", SelectionType.SINGLE, True, [
        ("Saignant", 0), ("À point", 0), ("Bien cuit", 0),
    ]),
    ("Choisissez votre Sauce", SelectionType.SINGLE, False, [
        ("Mayonnaise", 0), ("Ketchup", 0), ("Moutarde", 0), ("Sauce BBQ", 0),
    ]),
    ("Ajouter des Suppléments", SelectionType.MULTIPLE, False, [
        ("Bacon", 500), ("Œuf", 300), ("Fromage", 300),
    ]),
    ("Retirer des Ingrédients", SelectionType.MULTIPLE, False, [
        ("Sans oignon", 0), ("Sans tomate", 0), ("Sans salade", 0),
    ]),
]


def seed_staff(db: Session) -> None:
    if db.scalar(select(StaffUser.id).limit(1)):
        logger.info("Staff already seeded, skipping")
        return
    db.add(
        StaffUser(
            email=DEFAULT_ADMIN_EMAIL,
            password=hash_password(DEFAULT_ADMIN_PASSWORD),
            full_name="Administrator",
            role=Roles.ADMIN,
        )
    )
    logger.info("Seeded admin account", email=DEFAULT_ADMIN_EMAIL)


def seed_tables(db: Session, count: int = DEFAULT_TABLE_COUNT) -> None:
    if db.scalar(select(Table.id).limit(1)):
        logger.info("Tables already seeded, skipping")
        return
    for number in range(1, count + 1):
        db.add(Table(number=number, label=f"Table {number}"))
    logger.info("Seeded tables", count=count)


def seed_catalog(db: Session) -> None:
    if db.scalar(select(Category.id).limit(1)):
        logger.info("Catalog already seeded, skipping")
        return

    categories: dict[str, Category] = {}
    for order, (name, emoji) in enumerate(CATEGORIES, start=1):
        category = Category(name=name, emoji=emoji, display_order=order)
        db.add(category)
        categories[name] = category
    db.flush()

    for category_name, name, description, price in DISHES:
        category = categories[category_name]
        db.add(
            Dish(
                name=name,
                description=description,
                price_cents=price,
                category_id=category.id,
                legacy_category=category.label,
            )
        )

    plats = categories["Plats"]
    for group_order, (name, selection_type, required, options) in enumerate(PLATS_OPTION_GROUPS):
        group = OptionGroup(
            category_id=plats.id,
            name=name,
            selection_type=selection_type,
            is_required=required,
            display_order=group_order,
        )
        db.add(group)
        db.flush()
        for option_order, (option_name, extra) in enumerate(options):
            db.add(
                Option(
                    option_group_id=group.id,
                    name=option_name,
                    extra_price_cents=extra,
                    display_order=option_order,
                )
            )
    logger.info("Seeded catalog", categories=len(CATEGORIES), dishes=len(DISHES))


def seed(db: Session) -> None:
    """
    Seed the demo restaurant.
    Idempotent: each part is skipped when its table already has rows.
    """
    seed_staff(db)
    seed_tables(db)
    seed_catalog(db)
    db.commit()
