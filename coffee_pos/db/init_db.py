import logging
from datetime import datetime, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from coffee_pos import models
from coffee_pos.db.base import Base
from coffee_pos.schemas.promotions import PromotionType

logger = logging.getLogger(__name__)

SUGAR_LEVELS = ["0%", "25%", "50%", "75%", "100%"]
ICE_LEVELS = ["No Ice", "Less Ice", "Normal Ice"]

# name, price, discount %, sizes (name, modifier), has sugar/ice, extra shot modifier
SAMPLE_PRODUCTS = [
    ("Espresso", "2.50", "0", [("Single", "0"), ("Double", "0.75")], True, False, "0.75"),
    ("Iced Latte", "4.00", "10", [("Small", "0"), ("Medium", "0.50"), ("Large", "1.00")], True, True, "0.75"),
    ("Cappuccino", "3.75", "0", [("Small", "0"), ("Medium", "0.50"), ("Large", "1.00")], True, False, "0.75"),
    ("Matcha Frappe", "4.50", "0", [("Medium", "0"), ("Large", "0.75")], True, True, None),
    ("Butter Croissant", "2.25", "0", [], False, False, None),
]


def create_tables(engine) -> None:
    """create every catalog table that doesn't exist yet."""
    Base.metadata.create_all(bind=engine)


def drop_tables(engine) -> None:
    Base.metadata.drop_all(bind=engine)


def seed_catalog(db: Session) -> int:
    """insert the sample coffee menu and promotions; returns products created."""
    if db.query(models.Product).first() is not None:
        logger.info("Catalog already has products, skipping seed")
        return 0

    for name, price, discount, sizes, has_sugar, has_ice, shot_modifier in SAMPLE_PRODUCTS:
        product = models.Product(name=name, price=Decimal(price), discount=Decimal(discount), is_active=True)
        for size_name, modifier in sizes:
            product.sizes.append(models.Size(
                size_name=size_name,
                price_modifier=Decimal(modifier),
                full_price=Decimal(price) + Decimal(modifier),
            ))
        if has_sugar:
            product.sugars.extend(models.Sugar(name=level) for level in SUGAR_LEVELS)
        if has_ice:
            product.ices.extend(models.Ice(name=level) for level in ICE_LEVELS)
        if shot_modifier is not None:
            product.extra_shots.append(models.ExtraShot(name="Extra Shot", price_modifier=Decimal(shot_modifier)))
        db.add(product)
        logger.info(f"Created product {name}")

    start = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    db.add_all([
        models.Promotion(
            name="Buy 2 Get 1 Free",
            type=PromotionType.BUY_X_GET_Y.value,
            buy_quantity=2,
            free_quantity=1,
            start_date=start,
            end_date=start + timedelta(days=30),
            is_active=True,
        ),
        models.Promotion(
            name="Happy Hour",
            type=PromotionType.PERCENT_DISCOUNT.value,
            discount=Decimal("10"),
            start_date=start,
            end_date=start + timedelta(days=7),
            is_active=False,
        ),
    ])

    db.commit()
    logger.info("Sample catalog seeded")
    return len(SAMPLE_PRODUCTS)
