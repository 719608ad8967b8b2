from datetime import datetime
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CartRequest(BaseModel):
    """
    Base for cart request bodies.

    Every field is optional and untyped on purpose: the handlers validate
    fields in a fixed order and answer with their own status codes, so a
    missing or malformed value must reach them instead of failing here.
    """
    model_config = ConfigDict(alias_generator=to_camel, extra="allow")

    def is_empty(self) -> bool:
        return not self.model_fields_set and not self.model_extra


class AddToCartRequest(CartRequest):
    product_id: Any = None
    cart_id: Any = None

    def has_cart_id(self) -> bool:
        # The key being present matters, even with a null or blank value
        return "cart_id" in self.model_fields_set


class UpdateCartRequest(CartRequest):
    product_id: Any = None
    cart_id: Any = None
    remove_product: Any = None


class CartItemOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    product_id: str
    quantity: int


class CartOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    user_id: str
    items: List[CartItemOut] = Field(default_factory=list)
    total_items: int
    total_price: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator('total_price', mode='before')
    @classmethod
    def price_as_number(cls, value):
        # Numeric columns come back as Decimal
        return float(value)


class CartResponse(BaseModel):
    status: bool
    message: str
    data: CartOut
