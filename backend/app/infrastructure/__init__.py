"""Infrastructure Layer — database access, security primitives and logging.

Invariants:
    - Infrastructure implements core protocols; core never imports from here
    - Every driver exception is mapped to a BackOfficeError before leaving this layer

Design Decisions:
    - One generic SqlEntityAccessor instead of per-entity repositories
"""
