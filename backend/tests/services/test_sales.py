"""Sale routes — stock decrement, delivery status and per-user listings.

Invariants:
    - Creating a sale decrements the product's stock by the sale quantity
    - Quantities above stock are refused and leave stock unchanged
    - Per-user listings never show another user's sales
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest
from sqlalchemy import update

from app.core.domain_types import MAX_QUANTITY
from app.core.errors import InsufficientStockError
from app.models import Product, Sale, User
from app.services.sales import SalesService


def _sale_body(product, user, quantity=2, address="1 Main Street"):
    return {
        "product": str(product.id),
        "user": str(user.id),
        "quantity": quantity,
        "address": address,
    }


@pytest.fixture
async def other_user(test_db):
    user = User(name="Bob Buyer", email="bob@example.com", password_hash="x")
    test_db.add(user)
    await test_db.commit()
    await test_db.refresh(user)
    return user


async def _product(client, auth_headers, product_id):
    res = await client.get(f"/api/v1/products/{product_id}", headers=auth_headers)
    return res.json()


async def test_create_sale_decrements_stock(client, auth_headers, seed_user, seed_product):
    res = await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user, 3), headers=auth_headers,
    )
    assert res.status_code == 201
    sale = res.json()
    assert sale["delivery_status"] == "Placed"
    assert sale["product"]["id"] == str(seed_product.id)
    assert sale["user"] == {
        "id": str(seed_user.id), "name": seed_user.name, "email": seed_user.email,
    }
    assert (await _product(client, auth_headers, seed_product.id))["stock"] == 7


async def test_sale_for_entire_stock_is_allowed(client, auth_headers, seed_user, seed_product):
    res = await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user, 10), headers=auth_headers,
    )
    assert res.status_code == 201
    assert (await _product(client, auth_headers, seed_product.id))["stock"] == 0


async def test_insufficient_stock_is_refused(client, auth_headers, seed_user, seed_product):
    res = await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user, 11), headers=auth_headers,
    )
    assert res.status_code == 422
    assert res.json()["error"]["message"] == "Not enough stock (10 remaining)"
    assert (await _product(client, auth_headers, seed_product.id))["stock"] == 10


async def test_sale_for_missing_product_returns_404(client, auth_headers, seed_user):
    res = await client.post(
        "/api/v1/sales",
        json={"product": str(uuid4()), "user": str(seed_user.id),
              "quantity": 1, "address": "x"},
        headers=auth_headers,
    )
    assert res.status_code == 404
    assert res.json()["error"]["context"]["entity"] == "Product"


async def test_zero_quantity_is_rejected(client, auth_headers, seed_user, seed_product):
    res = await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user, 0), headers=auth_headers,
    )
    assert res.status_code == 400


async def test_search_sales_by_day(client, auth_headers, seed_user, seed_product):
    await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user), headers=auth_headers,
    )
    today = datetime.now(timezone.utc).date()
    res = await client.get(
        "/api/v1/sales", params={"search": f"date:{today.isoformat()}"}, headers=auth_headers,
    )
    assert res.json()["count"] == 1

    yesterday = today - timedelta(days=1)
    res = await client.get(
        "/api/v1/sales", params={"search": f"date:{yesterday.isoformat()}"}, headers=auth_headers,
    )
    assert res.json()["count"] == 0


async def test_search_sales_by_delivery_status_is_exact(
    client, auth_headers, seed_user, seed_product,
):
    await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user), headers=auth_headers,
    )
    res = await client.get(
        "/api/v1/sales", params={"search": "delivery_status:Placed"}, headers=auth_headers,
    )
    assert res.json()["count"] == 1
    res = await client.get(
        "/api/v1/sales", params={"search": "delivery_status:Place"}, headers=auth_headers,
    )
    assert res.json()["count"] == 0


async def test_update_delivery_status(client, auth_headers, seed_user, seed_product):
    sale = (await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user), headers=auth_headers,
    )).json()
    res = await client.put(
        f"/api/v1/sales/{sale['id']}/delivery_status",
        json={"delivery_status": "Shipped"}, headers=auth_headers,
    )
    assert res.status_code == 200
    res = await client.get(f"/api/v1/sales/{sale['id']}", headers=auth_headers)
    assert res.json()["delivery_status"] == "Shipped"


async def test_unknown_delivery_status_is_rejected(client, auth_headers, seed_user, seed_product):
    sale = (await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user), headers=auth_headers,
    )).json()
    res = await client.put(
        f"/api/v1/sales/{sale['id']}/delivery_status",
        json={"delivery_status": "Lost"}, headers=auth_headers,
    )
    assert res.status_code == 400
    assert "Placed, Packed, Shipped, Delivered" in res.json()["error"]["message"]


async def test_update_sale_keeps_stock(client, auth_headers, seed_user, seed_product):
    sale = (await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user, 2), headers=auth_headers,
    )).json()
    res = await client.put(
        f"/api/v1/sales/{sale['id']}",
        json=_sale_body(seed_product, seed_user, 5, "2 Side Street"),
        headers=auth_headers,
    )
    assert res.status_code == 200
    updated = (await client.get(f"/api/v1/sales/{sale['id']}", headers=auth_headers)).json()
    assert updated["quantity"] == 5
    assert updated["address"] == "2 Side Street"
    assert (await _product(client, auth_headers, seed_product.id))["stock"] == 8


async def test_delete_sale(client, auth_headers, seed_user, seed_product):
    sale = (await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, seed_user), headers=auth_headers,
    )).json()
    res = await client.delete(f"/api/v1/sales/{sale['id']}", headers=auth_headers)
    assert res.status_code == 200
    res = await client.get(f"/api/v1/sales/{sale['id']}", headers=auth_headers)
    assert res.status_code == 404


async def test_user_sales_are_scoped(
    client, auth_headers, seed_user, other_user, seed_product,
):
    for user in (seed_user, other_user, other_user):
        await client.post(
            "/api/v1/sales", json=_sale_body(seed_product, user, 1), headers=auth_headers,
        )
    res = await client.get(f"/api/v1/sales/users/{seed_user.id}", headers=auth_headers)
    body = res.json()
    assert body["count"] == 1
    assert body["data"][0]["user"]["id"] == str(seed_user.id)


async def test_user_sales_search_cannot_escape_scope(
    client, auth_headers, seed_user, other_user, seed_product,
):
    await client.post(
        "/api/v1/sales", json=_sale_body(seed_product, other_user, 1, "Elm Road"),
        headers=auth_headers,
    )
    res = await client.get(
        f"/api/v1/sales/users/{seed_user.id}",
        params={"search": "address:Elm"}, headers=auth_headers,
    )
    assert res.json()["count"] == 0


async def test_sale_survives_product_deletion(test_db, client, auth_headers, seed_user, seed_product):
    sale = Sale(
        product=seed_product, user=seed_user, quantity=1, address="x",
        date=datetime.now(timezone.utc),
    )
    test_db.add(sale)
    await test_db.commit()

    await client.delete(f"/api/v1/products/{seed_product.id}", headers=auth_headers)
    res = await client.get(f"/api/v1/sales/{sale.id}", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["product"] is None


async def test_create_sale_checks_stock_in_the_row_not_the_loaded_object(
    test_db, seed_user, seed_product,
):
    # Another writer takes stock after the product was loaded into this session
    await test_db.execute(
        update(Product.__table__)
        .where(Product.__table__.c.id == seed_product.id)
        .values(stock=5)
    )
    await test_db.commit()
    assert seed_product.stock == 10

    with pytest.raises(InsufficientStockError) as exc_info:
        await SalesService(test_db).create_sale(seed_product.id, seed_user.id, 6, "x")

    assert exc_info.value.remaining == 5


async def test_sale_never_takes_stock_below_zero(test_db, seed_user, seed_product):
    service = SalesService(test_db)
    await service.create_sale(seed_product.id, seed_user.id, 7, "x")

    with pytest.raises(InsufficientStockError):
        await service.create_sale(seed_product.id, seed_user.id, 7, "x")

    await test_db.refresh(seed_product)
    assert seed_product.stock == 3


async def test_quantity_above_integer_column_range_is_rejected(
    client, auth_headers, seed_user, seed_product,
):
    res = await client.post(
        "/api/v1/sales",
        json=_sale_body(seed_product, seed_user, MAX_QUANTITY + 1),
        headers=auth_headers,
    )
    assert res.status_code == 400
