"""NewsletterSignup ORM — one deduplicated form submission.

Invariants:
    - uniqueness_check is unique: the same submitter key is stored once
    - uniqueness_check is unbounded text: the fallback key is the whole
      serialized payload
    - form_data holds the submitted fields as-is (formId excluded)

Design Decisions:
    - JSON column for form_data: every form shares this table shape, whatever
      fields its schema declares
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NewsletterSignup(Base):
    __tablename__ = "newsletter_signups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uniqueness_check: Mapped[str] = mapped_column(
        Text, nullable=False, unique=True, index=True,
    )
    form_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    notification_email_sent: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    reply_email_sent: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    email_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
