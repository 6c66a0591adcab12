#all models imported here so SQLAlchemy registers them in Base.metadata

from storefront.data.models.user import UserModel
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel, ProductImageModel
from storefront.data.models.cart_item import CartItemModel, GuestCartItemModel
from storefront.data.models.order import OrderModel, OrderItemModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "ProductImageModel",
    "CartItemModel",
    "GuestCartItemModel",
    "OrderModel",
    "OrderItemModel",
]
