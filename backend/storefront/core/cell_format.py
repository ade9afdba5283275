"""Cell Formatting — display text for admin table cells, by field type and name.

Invariants:
    - Presentation only: never changes the stored row value
    - Order: empty, date-time, URL-shaped name, rich text, boolean, long string, str()
    - Links keep the full URL as href; only the visible text is truncated

Design Decisions:
    - URL and rich-text detection by field name ("url", "rich_text"): the admin
      schemas carry no format hint for these columns
"""

import re
from dataclasses import dataclass
from typing import Any

from storefront.core.domain_types import FieldFormat
from storefront.core.form_schema import FieldDefinition
from storefront.core.validation import parse_date

LINK_TEXT_LIMIT = 50
TEXT_LIMIT = 100

_TAG_PATTERN = re.compile(r"<[^>]*>")


@dataclass(frozen=True)
class CellDisplay:
    text: str
    href: str | None = None


def truncate(text: str, limit: int) -> str:
    return f"{text[:limit]}..." if len(text) > limit else text


def strip_html(text: str) -> str:
    return _TAG_PATTERN.sub("", text)


def format_datetime(value: Any) -> str:
    """Localized date and time; unparseable text is shown as-is."""
    parsed = parse_date(value) if isinstance(value, str) else value
    if not hasattr(parsed, "strftime"):
        return str(value)
    return parsed.strftime("%x %X")


def format_cell(value: Any, field_name: str, field: FieldDefinition | None = None) -> CellDisplay:
    if value is None:
        return CellDisplay("")
    if field is not None and field.format == FieldFormat.DATE_TIME.value:
        return CellDisplay(format_datetime(value))
    if "url" in field_name and value:
        if isinstance(value, str):
            return CellDisplay(truncate(value, LINK_TEXT_LIMIT), href=value)
        if isinstance(value, (list, tuple)):
            return CellDisplay(truncate(", ".join(map(str, value)), TEXT_LIMIT))
    if "rich_text" in field_name and isinstance(value, str) and value:
        return CellDisplay(truncate(strip_html(value), TEXT_LIMIT))
    if isinstance(value, bool):
        return CellDisplay("Yes" if value else "No")
    if isinstance(value, str):
        return CellDisplay(truncate(value, TEXT_LIMIT))
    return CellDisplay(str(value))
