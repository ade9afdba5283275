"""CommunityFit ORM — outfit photo submitted by a community member.

Invariants:
    - New submissions start unapproved with zero likes
    - image_urls is a JSON list of hosted image URLs

Design Decisions:
    - approved as a boolean column: the public gallery filters on it
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base


class CommunityFit(Base):
    __tablename__ = "community_fits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_handle: Mapped[str | None] = mapped_column(String(64), nullable=True)
    image_urls: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    caption: Mapped[str] = mapped_column(Text, nullable=False, default="")
    approved: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
