"""Tests for projection — public views of stored records."""

from types import SimpleNamespace

from app.core.projection import PRODUCT, SALE, USER, project


def test_user_projection_hides_password_hash():
    user = SimpleNamespace(id=1, name="Alice", email="a@example.com", password_hash="x")
    assert project(user, USER) == {"id": 1, "name": "Alice", "email": "a@example.com"}


def test_projection_accepts_dicts():
    product = {
        "id": 1, "name": "Shoe", "price": 9.5, "description": "d",
        "category": "c", "stock": 3, "created_at": "ignored",
    }
    projected = project(product, PRODUCT)
    assert "created_at" not in projected
    assert projected["stock"] == 3


def test_sale_projection_nests_product_and_user():
    sale = SimpleNamespace(
        id=7, date="2024-01-15", quantity=2, address="Main St", delivery_status="Placed",
        product={"id": 1, "name": "Shoe", "price": 1.0, "description": "",
                 "category": "c", "stock": 0},
        user={"id": 2, "name": "Bob", "email": "b@example.com", "password_hash": "x"},
    )
    projected = project(sale, SALE)
    assert projected["user"] == {"id": 2, "name": "Bob", "email": "b@example.com"}
    assert projected["product"]["name"] == "Shoe"


def test_missing_reference_projects_as_none():
    sale = SimpleNamespace(
        id=7, date=None, quantity=1, address="a", delivery_status="Placed",
        product=None, user=None,
    )
    projected = project(sale, SALE)
    assert projected["product"] is None
    assert projected["user"] is None
