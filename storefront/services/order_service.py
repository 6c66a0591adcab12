# storefront/services/order_service.py
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.domain.errors import (
    EmptyCartError,
    NotFoundError,
    ForbiddenError,
    InvalidStatusTransition,
)
from storefront.domain.order_status import OrderStatus, PaymentStatus, can_transition
from storefront.domain.owner import Owner, UserOwner, GuestOwner, ensure_owner
from storefront.domain.schemas import OrderCreate, OrderStatusUpdate
from storefront.domain.updates import changed_fields
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.services.notification_service import NotificationService
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def generate_order_number(now: datetime | None = None) -> str:
    """
    ORD-YYYYMMDD-<12 hex>. The random part comes from uuid4, the column
    is unique so a collision aborts the insert instead of duplicating.
    """
    now = now or datetime.now(timezone.utc)
    return f"ORD-{now:%Y%m%d}-{uuid.uuid4().hex[:12].upper()}"


def product_sku(product_id: int, slug: str) -> str:
    return f"{slug.upper()}-{product_id}"


class OrderService:
    """
    Orders domain. An order is built from a whole cart and is frozen
    afterwards, only status fields change later.
    """

    def __init__(self, db: Session, notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.notification_service = notification_service or NotificationService()

    def create_order_from_cart(self, owner: Owner, payload: OrderCreate | None = None) -> OrderModel:
        """
        Use case: checkout.

        1. generates the order number
        2. locks all cart rows of the owner, reads the active ones
           (no active rows -> EmptyCartError)
        3. computes the total from current prices
        4. inserts the order (pending / pending)
        5. inserts a snapshot line per cart row
        6. deletes exactly the rows locked in step 2
        7. commits, re-reads the order and queues the notification

        Steps 1-6 share one transaction, any failure leaves the cart intact.
        """
        ensure_owner(owner)
        payload = payload or OrderCreate()

        with transaction(self.db):
            order_number = generate_order_number()

            locked_ids = self.cart_repo.lock_item_ids(owner)
            lines = self.cart_repo.get_active_lines(owner, item_ids=locked_ids)
            if not lines:
                raise EmptyCartError()

            total = sum((line.price * line.quantity for line in lines), Decimal("0.00"))

            order = OrderModel(
                order_number=order_number,
                user_id=owner.user_id if isinstance(owner, UserOwner) else None,
                session_id=owner.session_id if isinstance(owner, GuestOwner) else None,
                status=OrderStatus.PENDING.value,
                payment_status=PaymentStatus.PENDING.value,
                payment_method=payload.payment_method,
                total_amount=total,
                shipping_address=payload.shipping_address.model_dump() if payload.shipping_address else None,
                billing_address=payload.billing_address.model_dump() if payload.billing_address else None,
                notes=payload.notes,
            )
            self.repo.add_order(order)

            self.repo.add_items([
                OrderItemModel(
                    order_id=order.id,
                    product_id=line.product_id,
                    product_name=line.name,
                    product_sku=product_sku(line.product_id, line.slug),
                    unit_price=line.price,
                    quantity=line.quantity,
                    total_price=line.price * line.quantity,
                )
                for line in lines
            ])

            self.cart_repo.delete_by_ids(owner, locked_ids)

        logger.info(f"Order {order.id} ({order_number}) created for {owner}, total {total}")

        created = self.get_order(order.id)
        self.notification_service.send_order_notification(created.id, created.order_number, str(owner))
        return created

    #query
    def get_order(self, order_id: int) -> OrderModel:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def get_order_for(self, order_id: int, owner: Owner, is_admin: bool = False) -> OrderModel:
        ensure_owner(owner)
        order = self.get_order(order_id)

        if is_admin:
            return order
        if isinstance(owner, UserOwner) and order.user_id == owner.user_id:
            return order
        if isinstance(owner, GuestOwner) and order.session_id == owner.session_id:
            return order

        raise ForbiddenError("Access denied")

    def get_owner_orders(self, owner: Owner) -> List[OrderModel]:
        ensure_owner(owner)
        return self.repo.list_orders(owner)

    def list_orders(self) -> List[OrderModel]:
        return self.repo.list_orders()

    #commands - admin
    def update_order_status(self, order_id: int, payload: OrderStatusUpdate) -> OrderModel:
        fields = changed_fields(payload)

        with transaction(self.db):
            order = self.repo.lock_order(order_id)
            if not order:
                raise NotFoundError("Order not found")

            expected_status = None
            if "status" in fields:
                current = OrderStatus(order.status)
                target = OrderStatus(fields["status"])
                if not can_transition(current, target):
                    raise InvalidStatusTransition(
                        f"Cannot change order status from {current.value} to {target.value}"
                    )
                expected_status = current.value

            values = {k: v.value if hasattr(v, "value") else v for k, v in fields.items()}
            if self.repo.update_order(order_id, values, expected_status=expected_status) == 0:
                raise InvalidStatusTransition(
                    f"Order {order_id} changed status concurrently, reload and retry"
                )

        logger.info(f"Order {order_id} updated: {values}")
        return self.get_order(order_id)
