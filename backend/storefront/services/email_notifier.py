"""Email Notifier — owner notification and submitter reply for one form submission.

Invariants:
    - Never raises to the caller: every failure becomes one entry in EmailReport.errors
    - Notification goes to the owner only when configured AND an owner email exists
    - Reply goes to the submitter's "email" field; a missing address is itself an error
    - notification_sent / reply_sent are True only for emails the platform accepted

Design Decisions:
    - Sender name for replies is the local part of the owner email, as the
      platform suffixes its own mail domain
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

from storefront.core.errors import StorefrontError
from storefront.core.submission import (
    notification_email_html, notification_subject, render_template,
)
from storefront.infrastructure.platform_client import PlatformApiClient
from storefront.schemas.forms import FormEmailConfig

logger = logging.getLogger(__name__)


@dataclass
class EmailReport:
    """Per-email outcome of one submission."""
    notification_sent: bool = False
    reply_sent: bool = False
    errors: list[str] = field(default_factory=list)


class EmailNotifier:
    def __init__(self, platform: PlatformApiClient, owner_email: str, project_id: str):
        self.platform = platform
        self.owner_email = owner_email
        self.project_id = project_id

    async def send_submission_emails(
        self,
        form_id: str,
        data: dict[str, Any],
        config: FormEmailConfig,
        now: datetime | None = None,
    ) -> EmailReport:
        """Send the configured emails."""
        now = now or datetime.now(timezone.utc)
        report = EmailReport()

        if config.send_notification_email and self.owner_email:
            error = await self._send(
                receivers=self.owner_email,
                title=notification_subject(self.project_id, form_id),
                body_html=notification_email_html(form_id, data, now),
                project_id=self.project_id,
            )
            if error:
                report.errors.append(f"Failed to send notification email: {error}")
            else:
                report.notification_sent = True

        if config.send_feedback_email:
            submitter = data.get("email")
            if not submitter:
                report.errors.append("No email address found in form data for reply email")
            else:
                error = await self._send(
                    receivers=str(submitter),
                    title=config.email_subject,
                    body_html=render_template(config.email_template, data, now),
                    project_id=self.project_id,
                    sender_name=self.owner_email.split("@")[0] or None,
                    reply_to=config.reply_to_email or None,
                )
                if error:
                    report.errors.append(f"Failed to send reply email: {error}")
                else:
                    report.reply_sent = True

        if report.errors:
            logger.error(
                f"Email sending errors: {report.errors}", extra={"form_id": form_id},
            )
        return report

    async def _send(self, **kwargs) -> str | None:
        try:
            await self.platform.send_email(**kwargs)
        except StorefrontError as e:
            return e.message
        except httpx.HTTPError as e:
            return str(e)
        return None
