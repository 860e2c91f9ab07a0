"""Projection — whitelisted public view of a stored record.

Invariants:
    - Only fields named in the descriptor leave the service layer
    - Nested records are projected through their own descriptor
      (a sale never leaks its user's password hash)
    - Missing attributes project as None instead of raising

Design Decisions:
    - EntityDescriptor bundles searchable field kinds with the projection so a
      single generic listing serves products, sales and users
    - Works on ORM objects and plain dicts alike
"""

from dataclasses import dataclass, field
from typing import Any, Mapping

from app.core.domain_types import FieldKind


@dataclass(frozen=True)
class EntityDescriptor:
    """Everything the generic listing needs to know about one entity type."""
    name: str
    public_fields: tuple[str, ...]
    searchable_fields: Mapping[str, FieldKind] = field(default_factory=dict)
    nested: Mapping[str, "EntityDescriptor"] = field(default_factory=dict)


def _read(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def project(record: Any, descriptor: EntityDescriptor) -> dict:
    """Project one record to its public dict."""
    result = {}
    for name in descriptor.public_fields:
        value = _read(record, name)
        child = descriptor.nested.get(name)
        if child is not None and value is not None:
            value = project(value, child)
        result[name] = value
    return result


PRODUCT = EntityDescriptor(
    name="Product",
    public_fields=("id", "name", "price", "description", "category", "stock"),
    searchable_fields={
        "name": FieldKind.TEXT,
        "description": FieldKind.TEXT,
        "category": FieldKind.TEXT,
        "price": FieldKind.NUMBER,
        "stock": FieldKind.NUMBER,
    },
)

USER = EntityDescriptor(
    name="User",
    public_fields=("id", "name", "email"),
    searchable_fields={
        "name": FieldKind.TEXT,
        "email": FieldKind.TEXT,
    },
)

SALE = EntityDescriptor(
    name="Sale",
    public_fields=(
        "id", "date", "quantity", "address", "delivery_status", "product", "user",
    ),
    searchable_fields={
        "date": FieldKind.DATE,
        "delivery_status": FieldKind.EXACT,
        "address": FieldKind.TEXT,
        "quantity": FieldKind.NUMBER,
    },
    nested={"product": PRODUCT, "user": USER},
)
