"""
Seed data for development and demos.
Creates the admin and demo accounts, the restaurant configuration, a few
dining tables and a small menu.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from ordo_api.models import DiningTable, MenuCategory, MenuItem, RestaurantConfig, User
from ordo_shared.config.constants import Roles
from ordo_shared.config.logging import get_logger
from ordo_shared.security.password import hash_password

logger = get_logger(__name__)

ADMIN_EMAIL = "admin@restaurant.com"
ADMIN_PASSWORD = "admin123"
DEMO_EMAIL = "demo@restaurant.com"
DEMO_PASSWORD = "demo123"

DEMO_SLUG = "demo-restaurant"

DEMO_OPENING_HOURS = {
    "monday": {"open": "09:00", "close": "22:00", "is_closed": False},
    "tuesday": {"open": "09:00", "close": "22:00", "is_closed": False},
    "wednesday": {"open": "09:00", "close": "22:00", "is_closed": False},
    "thursday": {"open": "09:00", "close": "22:00", "is_closed": False},
    "friday": {"open": "09:00", "close": "23:00", "is_closed": False},
    "saturday": {"open": "10:00", "close": "23:00", "is_closed": False},
    "sunday": {"open": "10:00", "close": "21:00", "is_closed": False},
}

# (number, seats)
DEMO_TABLES = [(1, 2), (2, 2), (3, 4), (4, 4), (5, 6), (6, 8)]

# Category name -> [(item name, description, price in cents, featured)]
DEMO_MENU = {
    "Entradas": [
        ("Guacamole Tradicional", "Aguacate, cebolla, cilantro y chile serrano con totopos", 8500, True),
        ("Quesadilla", "Tortilla de maíz con queso Oaxaca", 7500, False),
    ],
    "Platos Fuertes": [
        ("Tacos de Carnitas", "Orden de tres tacos con cebolla y cilantro", 9500, True),
    ],
    "Bebidas": [
        ("Agua de Horchata", "Bebida de arroz con canela", 3500, False),
    ],
    "Postres": [],
}


def seed_users(db: Session) -> None:
    if db.scalar(select(User.id).where(User.email == ADMIN_EMAIL)):
        logger.info("Users already seeded, skipping")
        return

    db.add_all([
        User(
            email=ADMIN_EMAIL,
            name="Administrador",
            password=hash_password(ADMIN_PASSWORD),
            role=Roles.ADMIN,
        ),
        User(
            email=DEMO_EMAIL,
            name="Usuario Demo",
            password=hash_password(DEMO_PASSWORD),
            role=Roles.CUSTOMER,
        ),
    ])
    db.flush()
    logger.info("Seeded users", admin=ADMIN_EMAIL, demo=DEMO_EMAIL)


def seed_restaurant(db: Session) -> None:
    if db.scalar(select(RestaurantConfig.id).limit(1)):
        logger.info("Restaurant already configured, skipping")
        return

    db.add(
        RestaurantConfig(
            name="Restaurante Demo",
            slug=DEMO_SLUG,
            description="Cocina mexicana tradicional",
            contact_info={"phone": "5512345678", "email": "contacto@restaurant.com"},
            address={"street": "Av. Reforma 123", "city": "Ciudad de México"},
            opening_hours=DEMO_OPENING_HOURS,
            services={"dine_in": True, "takeout": True, "delivery": True, "reservations": True},
            delivery_config={
                "fee_cents": 2500,
                "minimum_order_cents": 15000,
                "radius_km": 5.0,
                "estimated_time_minutes": 45,
                "free_over_cents": None,
            },
            branding={"primary_color": "#b91c1c"},
        )
    )
    db.add_all(DiningTable(number=number, seats=seats) for number, seats in DEMO_TABLES)
    db.flush()
    logger.info("Seeded restaurant configuration", slug=DEMO_SLUG, tables=len(DEMO_TABLES))


def seed_menu(db: Session) -> None:
    if db.scalar(select(MenuCategory.id).limit(1)):
        logger.info("Menu already seeded, skipping")
        return

    item_count = 0
    for order, (category_name, items) in enumerate(DEMO_MENU.items(), start=1):
        category = MenuCategory(name=category_name, sort_order=order)
        db.add(category)
        db.flush()
        for name, description, price_cents, featured in items:
            db.add(
                MenuItem(
                    category_id=category.id,
                    name=name,
                    description=description,
                    price_cents=price_cents,
                    is_featured=featured,
                    preparation_time_minutes=15,
                )
            )
            item_count += 1
    db.flush()
    logger.info("Seeded menu", categories=len(DEMO_MENU), items=item_count)


def seed(db: Session) -> None:
    """
    Seed the database with demo data.
    Idempotent: each section only inserts when its table is empty.
    """
    logger.info("Seeding database")
    seed_users(db)
    seed_restaurant(db)
    seed_menu(db)
    db.commit()
    logger.info("Seed complete")
