from sqlalchemy.orm import Session
from models.products import Product


class ProductRepository:
    def __init__(self, db: Session):
        self.db = db

    def find_active_by_id(self, product_id: str) -> Product | None:
        """Product by id, unless it has been soft deleted."""
        return self.db.query(Product).filter(
            Product.id == product_id,
            Product.is_deleted == False,
            Product.deleted_at.is_(None)
        ).one_or_none()
