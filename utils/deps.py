from core.database import SessionLocal
from typing import Annotated
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from core.exceptions import PageNotFoundError
from services.cart_service import CartService
from utils.validators import is_valid_input_body


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

db_dependency = Annotated[Session, Depends(get_db)]


def reject_query_params(request: Request):
    """Cart routes take no query string; any query parameter makes the route unknown."""
    if is_valid_input_body(request.query_params):
        raise PageNotFoundError()


def get_cart_service(db: db_dependency) -> CartService:
    return CartService(db)

cart_service_dependency = Annotated[CartService, Depends(get_cart_service)]
