"""Query Builder — turns `sort` / `search` query strings into store-agnostic filters.

Invariants:
    - Pure function of its inputs: same strings + same field map → equal output
    - Never raises on malformed input: bad sort degrades to no ordering,
      bad search degrades to no filter
    - Integers outside the signed 64-bit range degrade to no filter, so no
      search value can overflow the store's integer columns
    - Fields missing from the descriptor map are treated as TEXT and passed
      through unchanged; the store decides they match nothing

Design Decisions:
    - Filters are frozen dataclasses, not ORM clauses: core stays free of
      SQLAlchemy and the accessor translates them
    - Search splits on the first colon only, so values may contain colons
    - DATE ranges are computed in the caller's local timezone, then expressed
      in UTC because timestamps are stored in UTC
"""

import math
from dataclasses import dataclass
from datetime import datetime, time, timezone, tzinfo
from typing import Any, Mapping

from app.core.domain_types import FieldKind, MatchOperator

# Integer columns are 32-bit: wider integers are compared as floats, and
# anything beyond 64 bits is not a searchable number
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class FieldFilter:
    """One condition on one field. BETWEEN carries an inclusive (low, high) tuple."""
    field: str
    operator: MatchOperator
    value: Any


@dataclass(frozen=True)
class SortOrder:
    """Explicit ordering on a single field."""
    field: str
    descending: bool = False


def parse_sort(sort_expr: str | None) -> SortOrder | None:
    """Parse `<field>:<asc|desc>`. Anything else means natural store order."""
    if not sort_expr or ":" not in sort_expr:
        return None
    field_name, _, direction = sort_expr.partition(":")
    field_name = field_name.strip()
    direction = direction.strip().lower()
    if not field_name or direction not in ("asc", "desc"):
        return None
    return SortOrder(field=field_name, descending=direction == "desc")


def parse_search(
    search_expr: str | None,
    searchable_fields: Mapping[str, FieldKind],
    tz: tzinfo = timezone.utc,
) -> tuple[FieldFilter, ...]:
    """Parse `<field>:<value>` into zero or one FieldFilter."""
    if not search_expr or ":" not in search_expr:
        return ()
    field_name, _, value = search_expr.partition(":")
    field_name = field_name.strip()
    if not field_name or not value:
        return ()

    kind = searchable_fields.get(field_name, FieldKind.TEXT)
    condition = _build_condition(field_name, kind, value, tz)
    return (condition,) if condition else ()


def build_query(
    sort_expr: str | None,
    search_expr: str | None,
    searchable_fields: Mapping[str, FieldKind],
    tz: tzinfo = timezone.utc,
) -> tuple[SortOrder | None, tuple[FieldFilter, ...]]:
    """Build (order, filters) for a listing request."""
    return (
        parse_sort(sort_expr),
        parse_search(search_expr, searchable_fields, tz),
    )


def day_bounds(value: str, tz: tzinfo = timezone.utc) -> tuple[datetime, datetime] | None:
    """Start and end of the local day named by `value`, in UTC."""
    try:
        day = datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day, time.max, tzinfo=tz)
    try:
        return start.astimezone(timezone.utc), end.astimezone(timezone.utc)
    except OverflowError:
        # first or last representable day shifted past year 1 or 9999
        return None


def _build_condition(
    field_name: str, kind: FieldKind, value: str, tz: tzinfo,
) -> FieldFilter | None:
    if kind is FieldKind.NUMBER:
        number = _parse_number(value)
        if number is None:
            return None
        return FieldFilter(field_name, MatchOperator.EQUALS, number)
    if kind is FieldKind.EXACT:
        return FieldFilter(field_name, MatchOperator.EQUALS, value)
    if kind is FieldKind.DATE:
        bounds = day_bounds(value, tz)
        if bounds is None:
            return None
        return FieldFilter(field_name, MatchOperator.BETWEEN, bounds)
    return FieldFilter(field_name, MatchOperator.CONTAINS, value)


def _parse_number(value: str) -> int | float | None:
    """Integers outside the signed 64-bit range and non-finite floats are not numbers here."""
    try:
        number = int(value)
    except ValueError:
        pass
    else:
        if abs(number) <= INT32_MAX:
            return number
        if INT64_MIN <= number <= INT64_MAX:
            return float(number)
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None
