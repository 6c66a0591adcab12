from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint

from storefront.data.database import Base
from storefront.domain.owner import MAX_SESSION_ID_LENGTH
from storefront.data.models._time import utcnow


class CartItemModel(Base):
    """Cart of a logged in user, one row per (user, product)."""

    __tablename__ = "cart_items"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("user_id", "product_id", name="u_cart_user_product"),
        CheckConstraint("quantity > 0", name="ck_cart_items_quantity_positive"),
    )


class GuestCartItemModel(Base):
    """Guest cart, keyed by the session id from the X-Session-ID header."""

    __tablename__ = "guest_cart_items"

    id = Column(Integer, primary_key=True)
    session_id = Column(String(MAX_SESSION_ID_LENGTH), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)
    quantity = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        UniqueConstraint("session_id", "product_id", name="u_cart_session_product"),
        CheckConstraint("quantity > 0", name="ck_guest_cart_items_quantity_positive"),
    )
