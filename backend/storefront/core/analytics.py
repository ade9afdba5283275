"""Analytics Reporting — injected event sink for storefront tracking events.

Invariants:
    - Core logic reports through AnalyticsReporter only (no ambient globals)
    - NullReporter is the default everywhere: missing integrations are silent no-ops
    - track() must never raise into the caller's flow

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Event names follow the pixel vendors' standard names (AddToCart, ...)
"""

import logging
from typing import Any, Protocol

logger = logging.getLogger(__name__)

ADD_TO_CART = "AddToCart"
INITIATE_CHECKOUT = "InitiateCheckout"
PURCHASE = "Purchase"
FORM_SUBMIT = "Lead"


class AnalyticsReporter(Protocol):
    def track(self, event: str, properties: dict[str, Any]) -> None: ...


class NullReporter:
    """Reporter for environments without any analytics integration."""

    def track(self, event: str, properties: dict[str, Any]) -> None:
        return None


class LoggingReporter:
    """Forwards every event to the application log."""

    def track(self, event: str, properties: dict[str, Any]) -> None:
        logger.info(f"Analytics event {event}: {properties}", extra={"event": event})
