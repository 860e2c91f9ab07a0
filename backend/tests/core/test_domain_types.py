"""Tests for domain enums."""

import pytest

from app.core.domain_types import DeliveryStatus, FieldKind


def test_delivery_status_values():
    assert [s.value for s in DeliveryStatus] == ["Placed", "Packed", "Shipped", "Delivered"]


def test_delivery_status_rejects_unknown():
    with pytest.raises(ValueError):
        DeliveryStatus("Lost")


def test_enums_serialize_as_strings():
    assert FieldKind.DATE == "date"
