"""Commerce GTM — Google Tag Manager Enhanced Ecommerce tracking.

Turns storefront activity (product impressions, detail views, clicks, cart
changes, checkout steps, purchases) into flat data layer payloads that a
GTM container can forward to GA4.

Integration points (pick any or combine):
    1. Direct API          — call tracker.add_to_cart(), tracker.purchase() ...
    2. Event subscriber    — wire CommerceEventsSubscriber into the host bus
    3. Starlette middleware — opt-in product detail view tracking
    4. Alteration hooks    — rewrite products / payloads before queueing
"""

from commerce_gtm.events import GTMEventPayload, GTMEventType
from commerce_gtm.hooks import AlterationHook, HookRegistry
from commerce_gtm.pricing import InvalidInputError, format_price
from commerce_gtm.product import GTMProduct
from commerce_gtm.storage import EventStorage, InMemoryEventStorage
from commerce_gtm.subscriber import CommerceEventsSubscriber
from commerce_gtm.tracker import GTMEventTracker


def __getattr__(name: str):
    if name == "GTMProductViewMiddleware":
        from commerce_gtm.middleware import GTMProductViewMiddleware

        return GTMProductViewMiddleware
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "GTMEventTracker",
    "GTMEventPayload",
    "GTMEventType",
    "GTMProduct",
    "AlterationHook",
    "HookRegistry",
    "EventStorage",
    "InMemoryEventStorage",
    "CommerceEventsSubscriber",
    "GTMProductViewMiddleware",
    "InvalidInputError",
    "format_price",
]

__version__ = "0.1.0"
