"""Core Layer — query building, paging, projection and login throttling.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No IO, no async, no DB: store access goes through repository_protocols

Design Decisions:
    - Functional core separated from imperative shell
"""
