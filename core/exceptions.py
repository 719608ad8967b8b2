"""
Error taxonomy for the cart endpoints.

Every error is an HTTPException so services can raise it directly and
FastAPI stops the request there. main.py renders them all as
{"status": false, "message": ...}.
"""

from fastapi import HTTPException
from starlette import status


class PageNotFoundError(HTTPException):
    """Raised when a request carries a query string (no cart route accepts one)."""
    def __init__(self):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail="page not found")


class InvalidRequestError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "User is not allowed to update this cart"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):
    """Cart already exists for the user. Answered as 400 so clients resend with a cartId."""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)
