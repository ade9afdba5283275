"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (cart and form state mutate only themselves)

Design Decisions:
    - Functional core separated from imperative shell: controllers in services/
      orchestrate the awaits around these functions
"""
