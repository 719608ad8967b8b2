from core.database import Base
from sqlalchemy import (Column, Integer, String, Numeric)
from sqlalchemy.orm import relationship
from .mixins import UUIDPrimaryKeyMixin, CreatedAtMixin, UpdatedAtMixin

class Cart(Base, UUIDPrimaryKeyMixin, CreatedAtMixin, UpdatedAtMixin):
    """
    One cart per user. total_items and total_price are kept in step with
    the items by the repository, never recomputed on read.
    """
    __tablename__ = "carts"

    user_id = Column(String(36), nullable=False, unique=True, index=True)

    #relationships
    items = relationship(
        "CartItem",
        back_populates="cart",
        cascade="all, delete-orphan",
        order_by="CartItem.id",
    )

    total_items = Column(Integer, nullable=False, default=0)
    total_price = Column(Numeric(10, 2), nullable=False, default=0)
