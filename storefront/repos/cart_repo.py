# storefront/repos/cart_repo.py
from datetime import datetime
from decimal import Decimal
from typing import List, NamedTuple

from sqlalchemy import select, delete, update, func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from storefront.data.models.cart_item import CartItemModel, GuestCartItemModel
from storefront.data.models.product import ProductModel, ProductImageModel
from storefront.data.models._time import utcnow
from storefront.domain.owner import Owner, UserOwner, GuestOwner, ensure_owner

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class CartLine(NamedTuple):
    product_id: int
    name: str
    slug: str
    price: Decimal
    quantity: int
    image_url: str | None


class CartRepo:
    """
    Both carts (user and guest) live in separate tables with the same shape.
    Every method picks the table from the owner type.
    """

    def __init__(self, db: Session):
        self.db = db

    @staticmethod
    def _table(owner: Owner):
        ensure_owner(owner)
        if isinstance(owner, UserOwner):
            return CartItemModel, CartItemModel.user_id, owner.user_id
        if isinstance(owner, GuestOwner):
            return GuestCartItemModel, GuestCartItemModel.session_id, owner.session_id
        raise TypeError(f"Unsupported owner {owner!r}")

    def _insert(self, model):
        dialect = self.db.get_bind().dialect.name
        try:
            return _UPSERT_INSERTS[dialect](model)
        except KeyError:
            raise RuntimeError(f"Atomic cart upsert is not supported on {dialect}") from None

    #commands
    def upsert_add(self, owner: Owner, product_id: int, quantity: int) -> None:
        """
        INSERT ... ON CONFLICT (owner, product) DO UPDATE quantity = quantity + excluded.
        The increment happens inside the database so parallel adds can't lose updates.
        """
        model, key_col, key = self._table(owner)
        now = utcnow()

        stmt = self._insert(model).values(
            {key_col.key: key, "product_id": product_id, "quantity": quantity,
             "created_at": now, "updated_at": now}
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[key_col.key, "product_id"],
            set_={
                "quantity": model.quantity + stmt.excluded.quantity,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)

    def set_quantity(self, owner: Owner, product_id: int, quantity: int) -> int:
        model, key_col, key = self._table(owner)
        result = self.db.execute(
            update(model)
            .where(key_col == key, model.product_id == product_id)
            .values(quantity=quantity, updated_at=utcnow())
        )
        return result.rowcount

    def delete_item(self, owner: Owner, product_id: int) -> int:
        model, key_col, key = self._table(owner)
        result = self.db.execute(
            delete(model).where(key_col == key, model.product_id == product_id)
        )
        return result.rowcount

    def delete_all(self, owner: Owner) -> int:
        model, key_col, key = self._table(owner)
        result = self.db.execute(delete(model).where(key_col == key))
        return result.rowcount

    def delete_by_ids(self, owner: Owner, item_ids: List[int]) -> int:
        """Deletes only the given rows of the owner, rows added meanwhile survive."""
        if not item_ids:
            return 0
        model, key_col, key = self._table(owner)
        result = self.db.execute(
            delete(model).where(key_col == key, model.id.in_(item_ids))
        )
        return result.rowcount

    def delete_guest_items_older_than(self, cutoff: datetime) -> int:
        result = self.db.execute(
            delete(GuestCartItemModel).where(GuestCartItemModel.updated_at < cutoff)
        )
        return result.rowcount

    #query
    def get_items(self, owner: Owner) -> List:
        """Raw rows, including the ones pointing at inactive products."""
        model, key_col, key = self._table(owner)
        return self.db.execute(
            select(model).where(key_col == key).order_by(model.id)
        ).scalars().all()

    def get_item(self, owner: Owner, product_id: int):
        model, key_col, key = self._table(owner)
        return self.db.execute(
            select(model).where(key_col == key, model.product_id == product_id)
        ).scalar_one_or_none()

    def lock_item_ids(self, owner: Owner) -> List[int]:
        """
        Locks every cart row of the owner FOR UPDATE, inactive products
        included, and returns their ids. Held until the transaction ends
        (ignored by SQLite).
        """
        model, key_col, key = self._table(owner)
        return self.db.execute(
            select(model.id).where(key_col == key).order_by(model.id).with_for_update()
        ).scalars().all()

    def get_active_lines(self, owner: Owner, item_ids: List[int] | None = None) -> List[CartLine]:
        """
        Cart rows joined with the live catalog. Rows of inactive products are
        left out but stay in the table. item_ids narrows the result to rows
        locked earlier.
        """
        model, key_col, key = self._table(owner)

        primary_image = (
            select(ProductImageModel.image_url)
            .where(ProductImageModel.product_id == ProductModel.id)
            .order_by(ProductImageModel.is_primary.desc(), ProductImageModel.display_order)
            .limit(1)
            .correlate(ProductModel)
            .scalar_subquery()
        )

        stmt = (
            select(
                model.product_id,
                ProductModel.name,
                ProductModel.slug,
                ProductModel.base_price,
                model.quantity,
                primary_image.label("image_url"),
            )
            .join(ProductModel, ProductModel.id == model.product_id)
            .where(key_col == key, ProductModel.is_active.is_(True))
            .order_by(model.id)
        )
        if item_ids is not None:
            stmt = stmt.where(model.id.in_(item_ids))

        return [CartLine(*row) for row in self.db.execute(stmt).all()]

    def count_items(self, owner: Owner) -> int:
        model, key_col, key = self._table(owner)
        return self.db.execute(
            select(func.count()).select_from(model).where(key_col == key)
        ).scalar_one()
