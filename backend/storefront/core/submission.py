"""Form Submission — pure helpers for persisting and mailing form submissions.

Invariants:
    - Uniqueness key: first non-empty of email, email_address, contact_email,
      phone, username; otherwise the whole payload serialized with sorted keys
    - render_template replaces {{field}} for every submitted field, then
      {{timestamp}}, {{date}}, {{time}} from the supplied clock
    - Notification HTML escapes every submitted key and value

Design Decisions:
    - Clock injected as `now`: callers (and tests) control the timestamps
    - Sorted-key serialization for the fallback key: two payloads with the same
      content dedupe regardless of field order
"""

import html
import json
from datetime import datetime
from typing import Any

UNIQUE_KEY_FIELDS = ("email", "email_address", "contact_email", "phone", "username")

COMMUNITY_FIT_FORM = "community_fit_upload"


def extract_unique_identifier(data: dict[str, Any]) -> str:
    for name in UNIQUE_KEY_FIELDS:
        value = data.get(name)
        if value:
            return str(value)
    return json.dumps(data, sort_keys=True, default=str)


def community_fit_record(data: dict[str, Any], now: datetime) -> dict[str, Any]:
    """Row for community_fits: image URL into a list, pending approval, no likes."""
    image_url = data.get("photoUrl") or data.get("image_url")
    return {
        "user_handle": data.get("user_handle") or None,
        "image_urls": [image_url] if image_url else [],
        "caption": data.get("caption") or "",
        "approved": False,
        "like_count": 0,
        "created_at": now,
        "updated_at": now,
    }


def submission_record(data: dict[str, Any], now: datetime) -> dict[str, Any]:
    """Row for a generic submission table (newsletter_signups and alike)."""
    return {
        "uniqueness_check": extract_unique_identifier(data),
        "form_data": data,
        "notification_email_sent": False,
        "reply_email_sent": False,
        "email_sent_at": now,
        "created_at": now,
        "updated_at": now,
    }


def render_template(template: str, data: dict[str, Any], now: datetime) -> str:
    result = template
    for key, value in data.items():
        result = result.replace("{{" + key + "}}", str(value) if value else "")
    result = result.replace("{{timestamp}}", now.isoformat())
    result = result.replace("{{date}}", now.strftime("%x"))
    result = result.replace("{{time}}", now.strftime("%X"))
    return result


def notification_subject(project_id: str, form_id: str) -> str:
    return f"{project_id} - NEW FORM SUBMISSION - {form_id}"


def notification_email_html(form_id: str, data: dict[str, Any], now: datetime) -> str:
    rows = "".join(
        "<tr>"
        f'<td style="padding: 8px; border: 1px solid #ddd; font-weight: bold;">{html.escape(str(key))}</td>'
        f'<td style="padding: 8px; border: 1px solid #ddd;">{html.escape(_cell_text(value))}</td>'
        "</tr>"
        for key, value in data.items()
    )
    return (
        "<!DOCTYPE html>"
        '<html><head><meta charset="UTF-8"><title>New Form Submission</title></head>'
        '<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">'
        '<div style="max-width: 600px; margin: 0 auto; padding: 20px;">'
        '<h1 style="color: #2563eb;">NEW FORM SUBMISSION NOTIFICATION</h1>'
        f"<p><strong>Form ID:</strong> {html.escape(form_id)}</p>"
        f"<p><strong>Submitted at:</strong> {now.strftime('%x %X')}</p>"
        "<h2>Submission Details:</h2>"
        f'<table style="width: 100%; border-collapse: collapse;">{rows}</table>'
        '<p style="font-size: 12px; color: #6b7280;">'
        "This is an automated notification from your form submission system.</p>"
        "</div></body></html>"
    )


def _cell_text(value: Any) -> str:
    if isinstance(value, (list, dict)):
        return json.dumps(value, default=str)
    return "" if value is None else str(value)
