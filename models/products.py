from core.database import Base
from sqlalchemy import (Column, Integer, String, Numeric, Boolean, DateTime)
from sqlalchemy.orm import relationship
from .mixins import UUIDPrimaryKeyMixin, CreatedAtMixin, UpdatedAtMixin

class Product(Base, UUIDPrimaryKeyMixin, CreatedAtMixin, UpdatedAtMixin):
    """
    Catalog product. Owned by the catalog; the cart service only reads it.
    """
    __tablename__ = "products"

    #relationships
    cart_items = relationship("CartItem", back_populates="product")

    title = Column(String, nullable=False)
    description = Column(String)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    # Soft delete markers
    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
