"""Eventline — single-timeline event scheduling with conflict-checked writes.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
