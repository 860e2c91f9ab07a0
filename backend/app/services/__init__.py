"""Services Layer — entity CRUD orchestration, generic listing and login flow.

Invariants:
    - Services own the transaction: accessors flush, services commit
    - Services raise BackOfficeError subclasses, never return None for failure

Design Decisions:
    - One service class per entity, constructed per request with its AsyncSession
    - Listing shared through services/listing.py instead of per-entity copies
"""
