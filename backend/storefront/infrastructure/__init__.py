"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - All external calls wrapped with timeout and error mapping
    - Upstream failures surface as StorefrontError subclasses, never raw httpx errors

Design Decisions:
    - Resilient wrappers over raw clients (single responsibility)
"""
