# storefront/data/seed.py
import os
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.database import Database, transaction
from storefront.data.models import CategoryModel, ProductModel, ProductImageModel, UserModel
from storefront.utils.security import hash_password
from storefront.utils.settings import DATABASE_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

DEMO_CATALOG = {
    ("Apparel", "apparel"): [
        ("Logo T-Shirt", "logo-t-shirt", Decimal("1500.00")),
        ("Hoodie", "hoodie", Decimal("3500.00")),
    ],
    ("Accessories", "accessories"): [
        ("Sticker Pack", "sticker-pack", Decimal("300.00")),
        ("Mug", "mug", Decimal("900.00")),
    ],
}


def seed(db: Session, admin_email: str, admin_password: str) -> None:
    # only seed an empty database
    if db.execute(select(CategoryModel.id).limit(1)).first():
        logger.info("Database already seeded, skipping")
        return

    with transaction(db):
        db.add(
            UserModel(
                username="admin",
                email=admin_email,
                password_hash=hash_password(admin_password),
                role="admin",
                email_verified=True,
            )
        )
        for sort_order, ((name, slug), products) in enumerate(DEMO_CATALOG.items()):
            category = CategoryModel(name=name, slug=slug, sort_order=sort_order)
            db.add(category)
            db.flush()
            for product_name, product_slug, price in products:
                db.add(
                    ProductModel(
                        name=product_name,
                        slug=product_slug,
                        category_id=category.id,
                        base_price=price,
                        images=[
                            ProductImageModel(
                                image_url=f"/static/products/{product_slug}.jpg",
                                alt_text=product_name,
                                display_order=1,
                                is_primary=True,
                            )
                        ],
                    )
                )

    logger.info(f"Seeded {len(DEMO_CATALOG)} categories and admin {admin_email}")


if __name__ == "__main__":
    database = Database(DATABASE_URL)
    database.create_tables()
    session = database.session()
    try:
        seed(
            session,
            admin_email=os.getenv("SEED_ADMIN_EMAIL", "admin@example.com"),
            admin_password=os.getenv("SEED_ADMIN_PASSWORD", "change-me-now"),
        )
    finally:
        session.close()
        database.dispose()
