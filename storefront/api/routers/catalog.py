# storefront/api/routers/catalog.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.domain.schemas import (
    ProductOut,
    ProductListOut,
    CategoryListOut,
    ProductImageListOut,
)
from storefront.services.catalog_service import CatalogService

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/products", response_model=ProductListOut)
def list_products(
    category_id: int | None = Query(None, gt=0),
    featured: bool | None = Query(None),
    db: Session = Depends(get_db),
):
    products = CatalogService(db).list_active_products(category_id=category_id, featured=featured)
    return {"products": products, "total": len(products)}


@router.get("/products/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return CatalogService(db).get_active_product(product_id)


@router.get("/products/{product_id}/images", response_model=ProductImageListOut)
def get_product_images(product_id: int, db: Session = Depends(get_db)):
    images = CatalogService(db).get_product_images(product_id)
    return {"images": images, "total": len(images)}


@router.get("/categories", response_model=CategoryListOut)
def list_categories(db: Session = Depends(get_db)):
    categories = CatalogService(db).list_active_categories()
    return {"categories": categories, "total": len(categories)}
