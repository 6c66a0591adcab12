# storefront/api/routers/admin.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.schemas import (
    ProductIn,
    ProductUpdate,
    ProductOut,
    ProductListOut,
    ProductCreatedOut,
    ProductImageIn,
    ProductImageUpdate,
    ProductImageOut,
    CategoryIn,
    CategoryUpdate,
    CategoryOut,
    CategoryListOut,
    OrderOut,
    OrderListOut,
    OrderStatusUpdate,
    CustomerListOut,
    WalletAdjustIn,
    PointsOut,
    MessageOut,
)
from storefront.services.catalog_service import CatalogService
from storefront.services.order_service import OrderService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/api/admin", tags=["admin"], dependencies=[Depends(require_admin)])


#products
@router.get("/products", response_model=ProductListOut)
def list_products(db: Session = Depends(get_db)):
    products = CatalogService(db).list_all_products()
    return {"products": products, "total": len(products)}


@router.post("/products", response_model=ProductCreatedOut, status_code=201)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    product, images_created = CatalogService(db).create_product(payload)
    return {"message": "Product created successfully", "product": product, "images_created": images_created}


@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return CatalogService(db).update_product(product_id, payload)


@router.delete("/products/{product_id}", response_model=MessageOut)
def delete_product(product_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_product(product_id)
    return {"message": "Product deleted successfully"}


#images
@router.post("/products/{product_id}/images", response_model=ProductImageOut, status_code=201)
def add_product_image(product_id: int, payload: ProductImageIn, db: Session = Depends(get_db)):
    return CatalogService(db).add_product_image(product_id, payload)


@router.put("/images/{image_id}", response_model=ProductImageOut)
def update_product_image(image_id: int, payload: ProductImageUpdate, db: Session = Depends(get_db)):
    return CatalogService(db).update_product_image(image_id, payload)


@router.delete("/images/{image_id}", response_model=MessageOut)
def delete_product_image(image_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_product_image(image_id)
    return {"message": "Product image deleted successfully"}


#categories
@router.get("/categories", response_model=CategoryListOut)
def list_categories(db: Session = Depends(get_db)):
    categories = CatalogService(db).list_all_categories()
    return {"categories": categories, "total": len(categories)}


@router.post("/categories", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    return CatalogService(db).create_category(payload)


@router.put("/categories/{category_id}", response_model=CategoryOut)
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    return CatalogService(db).update_category(category_id, payload)


@router.delete("/categories/{category_id}", response_model=MessageOut)
def delete_category(category_id: int, db: Session = Depends(get_db)):
    CatalogService(db).delete_category(category_id)
    return {"message": "Category deleted successfully"}


#orders
@router.get("/orders", response_model=OrderListOut)
def list_orders(db: Session = Depends(get_db)):
    orders = OrderService(db).list_orders()
    return {"orders": orders, "total": len(orders)}


@router.get("/orders/{order_id}", response_model=OrderOut)
def get_order(order_id: int, db: Session = Depends(get_db)):
    return OrderService(db).get_order(order_id)


@router.put("/orders/{order_id}/status", response_model=OrderOut)
def update_order_status(order_id: int, payload: OrderStatusUpdate, db: Session = Depends(get_db)):
    return OrderService(db).update_order_status(order_id, payload)


#customers
@router.get("/customers", response_model=CustomerListOut)
def list_customers(db: Session = Depends(get_db)):
    customers = UserService(db).list_customers()
    return {"customers": customers, "total": len(customers)}


@router.post("/users/{user_id}/wallet", response_model=PointsOut)
def adjust_wallet(user_id: int, payload: WalletAdjustIn, db: Session = Depends(get_db)):
    balance = UserService(db).adjust_wallet(user_id, payload.amount)
    return {"user_id": user_id, "balance": balance}
