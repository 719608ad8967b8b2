from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from main import app
from models import Cart, CartItem
from repositories.cart_repository import CartRepository


async def test_empty_cart(client, session, user_id, product, make_product, make_cart):
    other = make_product(price="2.00")
    cart = make_cart(user_id, [(product, 2), (other, 5)])

    response = await client.delete(f"/users/{user_id}/cart")

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "cart made empty successfully"
    assert body["data"]["id"] == cart.id
    assert body["data"]["items"] == []
    assert body["data"]["totalItems"] == 0
    assert body["data"]["totalPrice"] == 0

    # Cart is kept, its lines are gone
    assert session.query(Cart).filter(Cart.user_id == user_id).count() == 1
    assert session.query(CartItem).filter(CartItem.cart_id == cart.id).count() == 0


async def test_empty_cart_twice(client, user_id, product, make_cart):
    """Test emptying is idempotent."""
    make_cart(user_id, [(product, 1)])

    first = await client.delete(f"/users/{user_id}/cart")
    second = await client.delete(f"/users/{user_id}/cart")

    assert first.status_code == second.status_code == 200
    for response in (first, second):
        data = response.json()["data"]
        assert (data["items"], data["totalItems"], data["totalPrice"]) == ([], 0, 0)


async def test_empty_leaves_other_carts_alone(client, user_id, other_user_id, product, make_cart):
    make_cart(user_id, [(product, 1)])
    make_cart(other_user_id, [(product, 3)])

    await client.delete(f"/users/{user_id}/cart")

    response = await client.get(f"/users/{other_user_id}/cart")
    assert response.json()["data"]["totalItems"] == 3


async def test_empty_cart_not_found(client, user_id):
    response = await client.delete(f"/users/{user_id}/cart")

    assert response.status_code == 404
    assert response.json()["message"] == f"no cart found by {user_id}"


async def test_empty_cart_with_query_params(client, user_id, product, make_cart):
    make_cart(user_id, [(product, 1)])

    response = await client.delete(f"/users/{user_id}/cart?all=true")

    assert response.status_code == 404

    # Verify nothing was emptied
    response = await client.get(f"/users/{user_id}/cart")
    assert response.json()["data"]["totalItems"] == 1


async def test_storage_failure_returns_500(client, user_id, product, make_cart, monkeypatch):
    """Test a database failure is answered 500 with the raw error message."""
    make_cart(user_id, [(product, 1)])

    def broken_clear(self, user_id):
        raise OperationalError("UPDATE carts", {}, Exception("database is locked"))

    monkeypatch.setattr(CartRepository, "clear", broken_clear)

    response = await client.delete(f"/users/{user_id}/cart")

    assert response.status_code == 500
    body = response.json()
    assert body["status"] is False
    assert "database is locked" in body["error"]


async def test_unexpected_failure_returns_500(client, user_id, monkeypatch):
    """Test any other exception is answered 500 with the same envelope."""
    def broken_find(self, user_id):
        raise RuntimeError("cache unavailable")

    monkeypatch.setattr(CartRepository, "find_by_user", broken_find)

    # Starlette re-raises unhandled errors after answering, so keep them out of the test
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test"
    ) as raw_client:
        response = await raw_client.delete(f"/users/{user_id}/cart")

    assert response.status_code == 500
    assert response.json() == {
        "status": False,
        "message": "Internal server error",
        "error": "cache unavailable"
    }
