from fastapi import APIRouter, Depends, Request
from starlette import status
from core.config import settings
from middleware.rate_limiter import limiter
from schemas.cart_schemas import AddToCartRequest, UpdateCartRequest, CartResponse
from utils.deps import cart_service_dependency, reject_query_params


router = APIRouter(
    prefix="/users/{user_id}/cart",
    tags=["cart"],
    dependencies=[Depends(reject_query_params)]
)


@router.post("", status_code=status.HTTP_200_OK, response_model=CartResponse)
@limiter.limit(settings.CART_RATE_LIMIT)
async def create_cart(request: Request, user_id: str, service: cart_service_dependency,
    body: AddToCartRequest | None = None):
    """
    Add a product to the user's cart.

    Without cartId a new cart is created (one per user).
    With cartId the product is added to that cart, or its quantity bumped.
    """
    return service.create_cart(user_id, body or AddToCartRequest())


@router.put("", status_code=status.HTTP_200_OK, response_model=CartResponse)
@limiter.limit(settings.CART_RATE_LIMIT)
async def update_cart(request: Request, user_id: str, service: cart_service_dependency,
    body: UpdateCartRequest | None = None):
    """
    Decrement a product by one (removeProduct=1) or remove its line (removeProduct=0).
    """
    return service.update_cart(user_id, body)


@router.get("", status_code=status.HTTP_200_OK, response_model=CartResponse)
@limiter.limit(settings.CART_RATE_LIMIT)
async def get_cart_details(request: Request, user_id: str, service: cart_service_dependency):
    return service.get_cart_details(user_id)


@router.delete("", status_code=status.HTTP_200_OK, response_model=CartResponse)
@limiter.limit(settings.CART_RATE_LIMIT)
async def empty_cart(request: Request, user_id: str, service: cart_service_dependency):
    """
    Remove every item from the user's cart. The cart itself is kept.
    """
    return service.empty_cart(user_id)
