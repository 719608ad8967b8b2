from repositories.cart_repository import CartRepository
from repositories.product_repository import ProductRepository

__all__ = ["CartRepository", "ProductRepository"]
