from core.database import Base
from sqlalchemy import (Column, Integer, String, ForeignKey, UniqueConstraint)
from sqlalchemy.orm import relationship
from .mixins import CreatedAtMixin

class CartItem(Base, CreatedAtMixin):
    __tablename__ = "cart_items"
    __table_args__ = (UniqueConstraint("cart_id", "product_id", name="uq_cart_product"),)

    #pk, autoincrement keeps items in the order they were added
    id = Column(Integer, primary_key=True, index=True)

    #fk
    cart_id = Column(String(36), ForeignKey("carts.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=False)

    #relationships
    cart = relationship("Cart", back_populates="items")
    product = relationship("Product", back_populates="cart_items")

    quantity = Column(Integer, nullable=False, default=1)
