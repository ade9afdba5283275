"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses, config files)
    - Wire names are camelCase where the storefront frontend expects them

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
