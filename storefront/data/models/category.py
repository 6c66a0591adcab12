from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey

from storefront.data.database import Base
from storefront.data.models._time import utcnow


class CategoryModel(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    # no cascade, a category with children can't be deleted
    parent_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)
    image_url = Column(String(500), nullable=True)
    sort_order = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)
