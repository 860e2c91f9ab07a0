"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProductId, SaleId, UserId wrap UUIDs — never use bare UUID in domain logic
    - Searchable field behaviour is encoded as FieldKind — no raw string matching
    - DeliveryStatus lists every valid sale state; anything else is rejected

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ProductId = NewType("ProductId", UUID)
SaleId = NewType("SaleId", UUID)
UserId = NewType("UserId", UUID)


# ─── Listing Defaults ────────────────────────────────────────────

DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# offset = (page - 1) * size stays far inside a signed 64-bit integer
MAX_PAGE_NUMBER = 1_000_000

# Upper bound for stock and quantity: both live in 32-bit integer columns
MAX_QUANTITY = 2 ** 31 - 1


# ─── Enums ───────────────────────────────────────────────────────

class FieldKind(str, Enum):
    """How a searchable field is matched by the query builder."""
    TEXT = "text"        # case-insensitive substring
    NUMBER = "number"    # exact numeric match
    EXACT = "exact"      # exact string match
    DATE = "date"        # whole local day range


class MatchOperator(str, Enum):
    """Store-agnostic comparison carried by a FieldFilter."""
    EQUALS = "equals"
    CONTAINS = "contains"
    BETWEEN = "between"


class DeliveryStatus(str, Enum):
    """Sale delivery lifecycle — maps to DB `delivery_status` column."""
    PLACED = "Placed"
    PACKED = "Packed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
