"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, API responses)
    - Listing query params are NOT validated here: malformed paging degrades
      to defaults in core/pager.py

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
