from models.products import Product
from models.carts import Cart
from models.cart_items import CartItem

__all__ = ["Product", "Cart", "CartItem"]
