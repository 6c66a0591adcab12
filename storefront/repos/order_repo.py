# storefront/repos/order_repo.py
from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.domain.owner import Owner, UserOwner, GuestOwner, ensure_owner


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: OrderModel) -> OrderModel:
        self.db.add(order)
        self.db.flush()
        return order

    def add_items(self, items: List[OrderItemModel]) -> None:
        self.db.add_all(items)
        self.db.flush()

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def list_orders(self, owner: Owner | None = None) -> List[OrderModel]:
        stmt = select(OrderModel).options(selectinload(OrderModel.items))
        if owner is not None:
            ensure_owner(owner)
            if isinstance(owner, UserOwner):
                stmt = stmt.where(OrderModel.user_id == owner.user_id)
            elif isinstance(owner, GuestOwner):
                stmt = stmt.where(OrderModel.session_id == owner.session_id)
        stmt = stmt.order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
        return self.db.execute(stmt).scalars().all()

    def lock_order(self, order_id: int) -> OrderModel | None:
        """Order row locked FOR UPDATE until the transaction ends."""
        return self.db.execute(
            select(OrderModel)
            .where(OrderModel.id == order_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def update_order(self, order_id: int, fields: dict, expected_status: str | None = None) -> int:
        """
        With expected_status the UPDATE only matches while the order still
        has that status, 0 rows means someone changed it in between.
        """
        stmt = update(OrderModel).where(OrderModel.id == order_id)
        if expected_status is not None:
            stmt = stmt.where(OrderModel.status == expected_status)
        result = self.db.execute(stmt.values(**fields))
        return result.rowcount
