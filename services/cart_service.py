from sqlalchemy.orm import Session
from core.exceptions import (InvalidRequestError, NotFoundError, ForbiddenError, ConflictError)
from models.carts import Cart
from models.products import Product
from repositories.cart_repository import CartRepository
from repositories.product_repository import ProductRepository
from schemas.cart_schemas import AddToCartRequest, UpdateCartRequest
from utils.validators import (is_valid_input_value, is_valid_id, is_valid_remove_flag)
from utils.logger import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Cart use cases: add to cart, update quantities, read and empty.

    Each method validates its input in a fixed order and stops at the first
    failure by raising one of the core.exceptions errors. A request makes
    at most one write.
    """

    def __init__(self, db: Session):
        self.carts = CartRepository(db)
        self.products = ProductRepository(db)

    def create_cart(self, user_id: str, body: AddToCartRequest) -> dict:
        """
        Add one unit of a product to the user's cart.

        Flow:
        1. Validate productId and load the product (must be active and in stock)
        2. With a cartId: check ownership, then bump the existing line or append a new one
        3. Without a cartId: create the user's cart, unless they already have one
        """
        product = self._get_product(body.product_id)

        if product.stock == 0:
            raise InvalidRequestError(f"{body.product_id} is out of stock currently")

        if not body.has_cart_id():
            return self._create_new_cart(user_id, product)

        cart_id = body.cart_id
        if not is_valid_input_value(cart_id):
            raise InvalidRequestError("cartId could not be blank")
        if not is_valid_id(cart_id):
            raise InvalidRequestError("cartId is not valid")

        cart = self._get_cart(cart_id)
        self._check_owner(cart, user_id)

        if self._find_line(cart, product.id):
            updated = self.carts.increment_item(cart.id, product.id, 1, product.price)
            message = "Item quantity updated to cart"
            missing = "No product found by this product id inside cart"
        else:
            updated = self.carts.add_item(cart.id, product.id, product.price)
            message = "Item updated to cart"
            missing = f"No cart found by {cart_id}"

        if updated is None:
            # The cart changed between the read above and the write
            logger.warning(
                "Cart changed concurrently, add skipped",
                extra={"user_id": user_id, "cart_id": cart.id, "product_id": product.id}
            )
            raise NotFoundError(missing)

        logger.info(message, extra={"user_id": user_id, "cart_id": cart.id, "product_id": product.id})
        return {"status": True, "message": message, "data": updated}

    def update_cart(self, user_id: str, body: UpdateCartRequest | None) -> dict:
        """
        Take a product out of the cart.

        removeProduct == 1 takes one unit off (dropping the line when it was the last one),
        removeProduct == 0 drops the whole line whatever its quantity.
        """
        if body is None or body.is_empty():
            raise NotFoundError("data is required to add products in cart")

        product = self._get_product(body.product_id)

        cart_id = body.cart_id
        if not is_valid_input_value(cart_id):
            raise InvalidRequestError("cart Id is required")
        if not is_valid_id(cart_id):
            raise InvalidRequestError("cart Id is not valid")

        cart = self._get_cart(cart_id)
        self._check_owner(cart, user_id)

        if not is_valid_remove_flag(body.remove_product):
            raise InvalidRequestError("RemoveProduct is required and its value must be either 0 or 1")

        line = self._find_line(cart, product.id)
        if line is None:
            raise NotFoundError("No product found by this product id inside cart")

        quantity = line.quantity

        if body.remove_product == 1 and quantity > 1:
            updated = self.carts.increment_item(cart.id, product.id, -1, product.price)
            message = "Item quantity reduced in cart"
        elif body.remove_product == 1:
            updated = self.carts.pull_item(cart.id, product.id, quantity, product.price)
            message = "Item updated to cart"
        else:
            updated = self.carts.pull_item(cart.id, product.id, quantity, product.price)
            message = "Item removed from cart"

        if updated is None:
            # The line changed between the read above and the write
            logger.warning(
                "Cart line changed concurrently, update skipped",
                extra={"user_id": user_id, "cart_id": cart.id, "product_id": product.id}
            )
            raise NotFoundError("No product found by this product id inside cart")

        logger.info(message, extra={"user_id": user_id, "cart_id": cart.id, "product_id": product.id})
        return {"status": True, "message": message, "data": updated}

    def get_cart_details(self, user_id: str) -> dict:
        cart = self.carts.find_by_user(user_id)
        if not cart:
            raise NotFoundError(f"no cart found by {user_id}")

        return {"status": True, "message": "Cart details are here", "data": cart}

    def empty_cart(self, user_id: str) -> dict:
        cart = self.carts.find_by_user(user_id)
        if not cart:
            raise NotFoundError(f"no cart found by {user_id}")

        emptied = self.carts.clear(user_id)
        if emptied is None:
            raise NotFoundError(f"no cart found by {user_id}")

        logger.info("Cart emptied", extra={"user_id": user_id, "cart_id": emptied.id})
        return {"status": True, "message": "cart made empty successfully", "data": emptied}

    # helpers
    def _create_new_cart(self, user_id: str, product: Product) -> dict:
        if self.carts.find_by_user(user_id):
            logger.warning("Cart creation attempted while user already owns one", extra={"user_id": user_id})
            raise ConflictError("cart already exist, provide cart id")

        cart = self.carts.create(user_id, product.id, product.price)

        logger.info("Cart created", extra={"user_id": user_id, "cart_id": cart.id, "product_id": product.id})
        return {"status": True, "message": "Item added to cart", "data": cart}

    def _get_product(self, product_id) -> Product:
        if not is_valid_input_value(product_id):
            raise InvalidRequestError("Product ID is required")
        if not is_valid_id(product_id):
            raise InvalidRequestError("Product ID is not valid")

        product = self.products.find_active_by_id(product_id)
        if not product:
            raise NotFoundError(f"No product found by {product_id}")
        return product

    def _get_cart(self, cart_id: str) -> Cart:
        cart = self.carts.find_by_id(cart_id)
        if not cart:
            raise NotFoundError(f"No cart found by {cart_id}")
        return cart

    def _check_owner(self, cart: Cart, user_id: str):
        """
        The user must own a cart, and it must be this one.
        A cartId belonging to someone else is answered 403, never 404.
        """
        own_cart = self.carts.find_by_user(user_id)
        if not own_cart or cart.user_id != own_cart.user_id:
            logger.warning(
                "Cart access denied",
                extra={"user_id": user_id, "cart_id": cart.id}
            )
            raise ForbiddenError()

    @staticmethod
    def _find_line(cart: Cart, product_id: str):
        return next((item for item in cart.items if item.product_id == product_id), None)
