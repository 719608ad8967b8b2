from slowapi import Limiter
from slowapi.util import get_remote_address
from fastapi import Request
from core.config import settings

def get_user_key(request: Request):
    # Cart routes are per user, so limit per user id when the path has one
    user_id = request.path_params.get("user_id")
    if user_id:
        return f"user:{user_id}"

    return get_remote_address(request)

limiter = Limiter(
    key_func=get_user_key,
    enabled=settings.ENV != "testing"
)
