# storefront/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, EmailStr, field_validator
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from storefront.domain.order_status import OrderStatus, PaymentStatus


# ---------------------------------------------------------------- users


class RegisterIn(BaseModel):
    """Schema for user registration."""

    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, description="At least 6 characters")
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, value):
        # before the length check, so "   " fails min_length
        return value.strip() if isinstance(value, str) else value


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    is_active: bool
    email_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    message: str
    user: UserOut
    token: str


class ProfileOut(BaseModel):
    user: UserOut


class PointsOut(BaseModel):
    user_id: int
    balance: Decimal


class WalletAdjustIn(BaseModel):
    """Positive amount credits the wallet, negative debits it."""

    amount: Decimal = Field(..., description="Non-zero amount to add to the balance")
    reason: Optional[str] = Field(None, max_length=255)


class CustomerOut(BaseModel):
    id: int
    username: str
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    role: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CustomerListOut(BaseModel):
    customers: List[CustomerOut]
    total: int


# -------------------------------------------------------------- catalog


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    parent_id: Optional[int] = Field(None, gt=0)
    image_url: Optional[str] = Field(None, max_length=500)
    sort_order: int = 0
    is_active: bool = True


class CategoryUpdate(BaseModel):
    """Only the fields present in the request body are written."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=1, max_length=120)
    description: Optional[str] = None
    parent_id: Optional[int] = Field(None, gt=0)
    image_url: Optional[str] = Field(None, max_length=500)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    parent_id: Optional[int] = None
    image_url: Optional[str] = None
    sort_order: int
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class CategoryListOut(BaseModel):
    categories: List[CategoryOut]
    total: int


class ProductImageIn(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=500)
    alt_text: Optional[str] = Field(None, max_length=255)
    display_order: int = 0
    is_primary: bool = False


class ProductImageUpdate(BaseModel):
    image_url: Optional[str] = Field(None, min_length=1, max_length=500)
    alt_text: Optional[str] = Field(None, max_length=255)
    display_order: Optional[int] = None
    is_primary: Optional[bool] = None


class ProductImageOut(BaseModel):
    id: int
    product_id: int
    image_url: str
    alt_text: Optional[str] = None
    display_order: int
    is_primary: bool

    model_config = ConfigDict(from_attributes=True)


class ProductImageListOut(BaseModel):
    images: List[ProductImageOut]
    total: int


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=220)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    category_id: int = Field(..., gt=0)
    base_price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    is_active: bool = True
    is_featured: bool = False
    weight: Optional[Decimal] = Field(None, ge=0)
    dimensions: Optional[str] = Field(None, max_length=100)
    image_url: Optional[str] = Field(None, max_length=500, description="Becomes the primary image")
    images: List[ProductImageIn] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Only the fields present in the request body are written."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=220)
    description: Optional[str] = None
    short_description: Optional[str] = Field(None, max_length=500)
    category_id: Optional[int] = Field(None, gt=0)
    base_price: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    weight: Optional[Decimal] = Field(None, ge=0)
    dimensions: Optional[str] = Field(None, max_length=100)


class ProductOut(BaseModel):
    id: int
    name: str
    slug: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    category_id: int
    base_price: Decimal
    is_active: bool
    is_featured: bool
    weight: Optional[Decimal] = None
    dimensions: Optional[str] = None
    images: List[ProductImageOut] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductListOut(BaseModel):
    products: List[ProductOut]
    total: int


class ProductCreatedOut(BaseModel):
    message: str
    product: ProductOut
    images_created: int


# ----------------------------------------------------------------- cart


class ItemIn(BaseModel):
    """Schema for adding a product to the cart."""

    product_id: int = Field(..., gt=0, description="Product id (> 0)")
    quantity: int = Field(1, le=100, description="At most 100, zero or less counts as 1")


class QuantityIn(BaseModel):
    """Zero or less removes the item."""

    quantity: int = Field(..., le=100)


class CartItemOut(BaseModel):
    product_id: int
    name: str
    slug: str
    price: Decimal
    quantity: int
    line_total: Decimal
    image_url: Optional[str] = None


class CartOut(BaseModel):
    items: List[CartItemOut]
    total_items: int
    subtotal: Decimal


class MessageOut(BaseModel):
    message: str


# --------------------------------------------------------------- orders


class Address(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    line1: str = Field(..., min_length=1, max_length=255)
    line2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    region: Optional[str] = Field(None, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: str = Field(..., min_length=2, max_length=100)
    phone: Optional[str] = Field(None, max_length=30)


class OrderCreate(BaseModel):
    """Everything is optional, the cart itself is resolved from the caller."""

    shipping_address: Optional[Address] = None
    billing_address: Optional[Address] = None
    payment_method: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = Field(None, max_length=2000)


class OrderStatusUpdate(BaseModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None
    payment_method: Optional[str] = Field(None, min_length=1, max_length=50)


class OrderItemOut(BaseModel):
    id: int
    product_id: Optional[int] = None
    product_name: str
    product_sku: Optional[str] = None
    unit_price: Decimal
    quantity: int
    total_price: Decimal

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    order_number: str
    user_id: Optional[int] = None
    session_id: Optional[str] = None
    status: str
    total_amount: Decimal
    payment_status: str
    payment_method: Optional[str] = None
    shipping_address: Optional[dict] = None
    billing_address: Optional[dict] = None
    notes: Optional[str] = None
    items: List[OrderItemOut]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class OrderCreatedOut(BaseModel):
    message: str
    order: OrderOut


class OrderListOut(BaseModel):
    orders: List[OrderOut]
    total: int
