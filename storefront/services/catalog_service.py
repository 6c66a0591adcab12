# storefront/services/catalog_service.py
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.database import transaction
from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel, ProductImageModel
from storefront.domain.errors import (
    NotFoundError,
    ConflictError,
    CategoryInUseError,
    ProductInUseError,
)
from storefront.domain.schemas import (
    ProductIn,
    ProductUpdate,
    CategoryIn,
    CategoryUpdate,
    ProductImageIn,
    ProductImageUpdate,
)
from storefront.domain.updates import changed_fields
from storefront.repos.catalog_repo import CatalogRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CatalogService:
    """
    Products, categories and product images.
    Public reads only ever see active rows, the admin side sees everything.
    """

    def __init__(self, db: Session):
        self.db = db
        self.repo = CatalogRepo(db)

    #query
    def list_active_products(self, category_id: int | None = None, featured: bool | None = None):
        return self.repo.list_products(active_only=True, category_id=category_id, featured=featured)

    def list_all_products(self):
        return self.repo.list_products(active_only=False)

    def get_active_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id, active_only=True)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_active_categories(self):
        return self.repo.list_categories(active_only=True)

    def list_all_categories(self):
        return self.repo.list_categories(active_only=False)

    def get_product_images(self, product_id: int):
        self.get_active_product(product_id)
        return self.repo.list_images(product_id)

    #commands - products
    def create_product(self, payload: ProductIn) -> Tuple[ProductModel, int]:
        """
        Creates the product plus its images in one transaction.
        image_url becomes the primary image (display_order 1), the images
        list follows starting from display_order 2.
        """
        self._require_category(payload.category_id)

        data = payload.model_dump(exclude={"image_url", "images"})
        images: List[ProductImageModel] = []
        if payload.image_url:
            images.append(
                ProductImageModel(
                    image_url=payload.image_url,
                    alt_text=payload.name,
                    display_order=1,
                    is_primary=True,
                )
            )
        for i, img in enumerate(payload.images):
            images.append(
                ProductImageModel(
                    image_url=img.image_url,
                    alt_text=img.alt_text,
                    display_order=img.display_order or i + 2,
                    is_primary=img.is_primary and not payload.image_url,
                )
            )

        try:
            with transaction(self.db):
                product = self.repo.add_product(ProductModel(**data, images=images))
        except IntegrityError:
            raise ConflictError("Product with this slug already exists") from None

        logger.info(f"Created product {product.id} ({product.slug}) with {len(images)} images")
        return self.get_product(product.id), len(images)

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        fields = changed_fields(payload)
        if "category_id" in fields:
            self._require_category(fields["category_id"])

        try:
            with transaction(self.db):
                if self.repo.update_product(product_id, fields) == 0:
                    raise NotFoundError("Product not found")
        except IntegrityError:
            raise ConflictError("Product with this slug already exists") from None

        logger.info(f"Updated product {product_id}: {sorted(fields)}")
        self.db.expire_all()
        return self.get_product(product_id)

    def delete_product(self, product_id: int) -> None:
        """
        Hard delete, images and cart rows go with it. Products that appear in
        any order are refused, deactivate them instead.
        """
        with transaction(self.db):
            self.get_product(product_id)
            used = self.repo.count_order_items_for_product(product_id)
            if used:
                raise ProductInUseError(
                    f"Cannot delete product: it is used in {used} order items. Deactivate it instead."
                )
            self.repo.delete_product(product_id)

        logger.info(f"Deleted product {product_id}")

    #commands - categories
    def create_category(self, payload: CategoryIn) -> CategoryModel:
        if payload.parent_id is not None:
            self._require_category(payload.parent_id)

        try:
            with transaction(self.db):
                category = self.repo.add_category(CategoryModel(**payload.model_dump()))
        except IntegrityError:
            raise ConflictError("Category with this slug already exists") from None

        logger.info(f"Created category {category.id} ({category.slug})")
        return category

    def update_category(self, category_id: int, payload: CategoryUpdate) -> CategoryModel:
        fields = changed_fields(payload)
        if fields.get("parent_id") == category_id:
            raise ConflictError("Category cannot be its own parent")
        if "parent_id" in fields:
            self._require_category(fields["parent_id"])

        try:
            with transaction(self.db):
                if self.repo.update_category(category_id, fields) == 0:
                    raise NotFoundError("Category not found")
        except IntegrityError:
            raise ConflictError("Category with this slug already exists") from None

        logger.info(f"Updated category {category_id}: {sorted(fields)}")
        self.db.expire_all()
        return self.repo.get_category(category_id)

    def delete_category(self, category_id: int) -> None:
        with transaction(self.db):
            if not self.repo.get_category(category_id):
                raise NotFoundError("Category not found")

            products = self.repo.count_products_in_category(category_id)
            if products:
                raise CategoryInUseError(
                    f"Cannot delete category: {products} products are using this category. "
                    "Please reassign or delete those products first."
                )

            subcategories = self.repo.count_subcategories(category_id)
            if subcategories:
                raise CategoryInUseError(
                    f"Cannot delete category: {subcategories} subcategories exist. "
                    "Please delete or reassign them first."
                )

            self.repo.delete_category(category_id)

        logger.info(f"Deleted category {category_id}")

    #commands - images
    def add_product_image(self, product_id: int, payload: ProductImageIn) -> ProductImageModel:
        with transaction(self.db):
            self.get_product(product_id)
            image = self.repo.add_image(ProductImageModel(product_id=product_id, **payload.model_dump()))
            if image.is_primary:
                self.repo.clear_primary_images(product_id, keep_image_id=image.id)

        logger.info(f"Added image {image.id} to product {product_id}")
        return image

    def update_product_image(self, image_id: int, payload: ProductImageUpdate) -> ProductImageModel:
        fields = changed_fields(payload)

        with transaction(self.db):
            image = self.repo.get_image(image_id)
            if not image:
                raise NotFoundError("Product image not found")
            self.repo.update_image(image_id, fields)
            if fields.get("is_primary"):
                self.repo.clear_primary_images(image.product_id, keep_image_id=image_id)

        self.db.expire_all()
        return self.repo.get_image(image_id)

    def delete_product_image(self, image_id: int) -> None:
        with transaction(self.db):
            if self.repo.delete_image(image_id) == 0:
                raise NotFoundError("Product image not found")

        logger.info(f"Deleted product image {image_id}")

    def _require_category(self, category_id: int) -> None:
        if not self.repo.get_category(category_id):
            raise NotFoundError("Category not found")
