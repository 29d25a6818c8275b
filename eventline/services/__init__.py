"""Services Layer — storage-facing operations around the pure core.

Invariants:
    - Only event_mutation commits; the other services run inside a caller's session

Design Decisions:
    - One module per component: conflict finder, category validator,
      association replacer, event queries, mutation coordinator
"""
