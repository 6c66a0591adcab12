# storefront/repos/catalog_repo.py
from typing import List

from sqlalchemy import select, update, delete, func
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.category import CategoryModel
from storefront.data.models.product import ProductModel, ProductImageModel
from storefront.data.models.order import OrderItemModel


class CatalogRepo:
    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------ products

    def list_products(
        self,
        active_only: bool = True,
        category_id: int | None = None,
        featured: bool | None = None,
    ) -> List[ProductModel]:
        stmt = select(ProductModel).options(selectinload(ProductModel.images))
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        if category_id is not None:
            stmt = stmt.where(ProductModel.category_id == category_id)
        if featured is not None:
            stmt = stmt.where(ProductModel.is_featured.is_(featured))
        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return self.db.execute(stmt).scalars().all()

    def get_product(self, product_id: int, active_only: bool = False) -> ProductModel | None:
        stmt = (
            select(ProductModel)
            .options(selectinload(ProductModel.images))
            .where(ProductModel.id == product_id)
        )
        if active_only:
            stmt = stmt.where(ProductModel.is_active.is_(True))
        return self.db.execute(stmt).scalar_one_or_none()

    def add_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def update_product(self, product_id: int, fields: dict) -> int:
        """fields: column name -> value, only the columns to change."""
        result = self.db.execute(
            update(ProductModel).where(ProductModel.id == product_id).values(**fields)
        )
        return result.rowcount

    def delete_product(self, product_id: int) -> int:
        result = self.db.execute(delete(ProductModel).where(ProductModel.id == product_id))
        return result.rowcount

    def count_order_items_for_product(self, product_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(OrderItemModel).where(OrderItemModel.product_id == product_id)
        ).scalar_one()

    # ---------------------------------------------------------- categories

    def list_categories(self, active_only: bool = True) -> List[CategoryModel]:
        stmt = select(CategoryModel)
        if active_only:
            stmt = stmt.where(CategoryModel.is_active.is_(True))
        stmt = stmt.order_by(CategoryModel.sort_order, CategoryModel.name)
        return self.db.execute(stmt).scalars().all()

    def get_category(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def add_category(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category

    def update_category(self, category_id: int, fields: dict) -> int:
        result = self.db.execute(
            update(CategoryModel).where(CategoryModel.id == category_id).values(**fields)
        )
        return result.rowcount

    def delete_category(self, category_id: int) -> int:
        result = self.db.execute(delete(CategoryModel).where(CategoryModel.id == category_id))
        return result.rowcount

    def count_products_in_category(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(ProductModel).where(ProductModel.category_id == category_id)
        ).scalar_one()

    def count_subcategories(self, category_id: int) -> int:
        return self.db.execute(
            select(func.count()).select_from(CategoryModel).where(CategoryModel.parent_id == category_id)
        ).scalar_one()

    # -------------------------------------------------------------- images

    def list_images(self, product_id: int) -> List[ProductImageModel]:
        return self.db.execute(
            select(ProductImageModel)
            .where(ProductImageModel.product_id == product_id)
            .order_by(ProductImageModel.is_primary.desc(), ProductImageModel.display_order, ProductImageModel.id)
        ).scalars().all()

    def get_image(self, image_id: int) -> ProductImageModel | None:
        return self.db.get(ProductImageModel, image_id)

    def add_image(self, image: ProductImageModel) -> ProductImageModel:
        self.db.add(image)
        self.db.flush()
        return image

    def update_image(self, image_id: int, fields: dict) -> int:
        result = self.db.execute(
            update(ProductImageModel).where(ProductImageModel.id == image_id).values(**fields)
        )
        return result.rowcount

    def clear_primary_images(self, product_id: int, keep_image_id: int | None = None) -> None:
        stmt = update(ProductImageModel).where(
            ProductImageModel.product_id == product_id,
            ProductImageModel.is_primary.is_(True),
        )
        if keep_image_id is not None:
            stmt = stmt.where(ProductImageModel.id != keep_image_id)
        self.db.execute(stmt.values(is_primary=False))

    def delete_image(self, image_id: int) -> int:
        result = self.db.execute(delete(ProductImageModel).where(ProductImageModel.id == image_id))
        return result.rowcount
