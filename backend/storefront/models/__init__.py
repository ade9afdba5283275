"""ORM Models — SQLAlchemy declarative models for the admin-managed tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every table has an integer id plus created_at/updated_at
    - Table names match the JSON Schema files in storefront/data/schemas

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata knows every table before the
      generic table repository looks one up by name
"""

from storefront.models.newsletter_signup import NewsletterSignup  # noqa: F401
from storefront.models.community_fit import CommunityFit  # noqa: F401
from storefront.models.product import Product  # noqa: F401
