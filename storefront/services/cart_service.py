# storefront/services/cart_service.py
from decimal import Decimal
from typing import Dict, Any

from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.domain.owner import Owner, UserOwner, GuestOwner, ensure_owner
from storefront.repos.cart_repo import CartRepo
from storefront.repos.catalog_repo import CatalogRepo
from storefront.domain.errors import NotFoundError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart of a single owner, either a logged in user or a guest session.
    commands (add, update, remove, clear, migrate) change state,
    summarize only reads
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CartRepo(db)
        self.catalog = CatalogRepo(db)

    #query
    def summarize(self, owner: Owner) -> Dict[str, Any]:
        """
        Prices come from the catalog at read time. Items of deactivated
        products are hidden here but their rows are kept.
        """
        ensure_owner(owner)
        lines = self.repo.get_active_lines(owner)

        items = [
            {
                "product_id": line.product_id,
                "name": line.name,
                "slug": line.slug,
                "price": line.price,
                "quantity": line.quantity,
                "line_total": line.price * line.quantity,
                "image_url": line.image_url,
            }
            for line in lines
        ]

        return {
            "items": items,
            "total_items": sum(line.quantity for line in lines),
            "subtotal": sum((i["line_total"] for i in items), Decimal("0.00")),
        }

    #commands
    def add_item(self, owner: Owner, product_id: int, quantity: int = 1) -> None:
        ensure_owner(owner)
        if quantity <= 0:
            quantity = 1

        if not self.catalog.get_product(product_id, active_only=True):
            raise NotFoundError("Product not found")

        with transaction(self.db):
            self.repo.upsert_add(owner, product_id, quantity)

        logger.info(f"Added product {product_id} x{quantity} to cart of {owner}")

    def update_quantity(self, owner: Owner, product_id: int, quantity: int) -> None:
        """Overwrites the quantity, zero or less removes the row."""
        ensure_owner(owner)

        with transaction(self.db):
            if quantity <= 0:
                self.repo.delete_item(owner, product_id)
            else:
                self.repo.set_quantity(owner, product_id, quantity)

        logger.info(f"Set product {product_id} quantity to {max(quantity, 0)} in cart of {owner}")

    def remove_item(self, owner: Owner, product_id: int) -> None:
        ensure_owner(owner)

        with transaction(self.db):
            removed = self.repo.delete_item(owner, product_id)

        logger.info(f"Removed product {product_id} from cart of {owner} ({removed} rows)")

    def clear(self, owner: Owner) -> int:
        ensure_owner(owner)

        with transaction(self.db):
            removed = self.repo.delete_all(owner)

        logger.info(f"Cleared cart of {owner} ({removed} rows)")
        return removed

    def migrate_guest_to_user(self, session_id: str, user_id: int) -> int:
        """
        Moves a guest cart into the user cart. Quantities of products already
        in the user cart are added up. Merge and clear run in one transaction,
        a second call finds an empty guest cart and does nothing.
        """
        guest = GuestOwner(session_id)
        user = UserOwner(user_id)

        with transaction(self.db):
            guest_items = self.repo.get_items(guest)
            for item in guest_items:
                self.repo.upsert_add(user, item.product_id, item.quantity)
            self.repo.delete_all(guest)

        if guest_items:
            logger.info(f"Migrated {len(guest_items)} items from {guest} to {user}")
        return len(guest_items)
