"""Infrastructure Layer — database session management and logging setup.

Invariants:
    - All storage failures surface as core.errors.DatabaseError subclasses

Design Decisions:
    - Resilient wrappers over raw clients: rollback, timeouts and error mapping in one place
"""
