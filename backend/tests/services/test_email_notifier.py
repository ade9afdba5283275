"""Email Notifier — which emails go out, and how failures are reported."""

from datetime import datetime, timezone

import httpx

from storefront.infrastructure.platform_client import PlatformApiClient
from storefront.schemas.forms import FormEmailConfig
from storefront.services.email_notifier import EmailNotifier, EmailReport

from tests.services.fake_upstream import FakeUpstream, platform_success

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
BOTH = FormEmailConfig(
    db_schema_name="newsletter_signups",
    send_notification_email=True,
    send_feedback_email=True,
    email_subject="Thanks",
    email_template="Hi {{name}}",
)


def _notifier(fake, owner_email="owner@example.com"):
    platform = PlatformApiClient("https://platform.test/v1/run", "k", transport=fake.transport)
    return EmailNotifier(platform, owner_email, "shop")


async def test_both_emails_sent():
    fake = FakeUpstream(platform_success)
    report = await _notifier(fake).send_submission_emails(
        "newsletter_signup", {"email": "a@b.com", "name": "Ana"}, BOTH, NOW,
    )
    assert report == EmailReport(notification_sent=True, reply_sent=True, errors=[])
    receivers = [b["inputs"]["receivers"] for b in fake.json_bodies()]
    assert receivers == ["owner@example.com", "a@b.com"]
    assert fake.json_bodies()[1]["inputs"]["body_html"] == "Hi Ana"


async def test_no_owner_email_skips_notification():
    fake = FakeUpstream(platform_success)
    report = await _notifier(fake, owner_email="").send_submission_emails(
        "f", {"email": "a@b.com"}, BOTH, NOW,
    )
    assert (report.notification_sent, report.reply_sent) == (False, True)
    assert [b["inputs"]["receivers"] for b in fake.json_bodies()] == ["a@b.com"]


async def test_missing_submitter_email_is_reported():
    fake = FakeUpstream(platform_success)
    report = await _notifier(fake).send_submission_emails("f", {"name": "Ana"}, BOTH, NOW)
    assert report.errors == ["No email address found in form data for reply email"]
    assert report.notification_sent is True
    assert report.reply_sent is False


async def test_unreachable_platform_becomes_error_entries():
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    report = await _notifier(FakeUpstream(refuse)).send_submission_emails(
        "f", {"email": "a@b.com"}, BOTH, NOW,
    )
    assert not (report.notification_sent or report.reply_sent)
    assert report.errors == [
        "Failed to send notification email: platform-api is unreachable",
        "Failed to send reply email: platform-api is unreachable",
    ]
