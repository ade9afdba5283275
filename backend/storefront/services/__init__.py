"""Services Layer — form/table controllers, gateway workflows, and API clients.

Invariants:
    - Services own IO (database, HTTP); pure rules stay in core/
    - Controllers report failures as state, never as unhandled exceptions

Design Decisions:
    - One module per workflow for locality
"""
