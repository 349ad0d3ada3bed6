"""GTM event names and the payload pushed to the data layer.

Event names follow GA4's Enhanced Ecommerce vocabulary.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class GTMEventType(str, Enum):
    """Enhanced Ecommerce event names."""

    # Catalog
    PRODUCT_IMPRESSIONS = "view_item_list"
    PRODUCT_DETAIL_VIEWS = "view_item"
    PRODUCT_CLICK = "select_item"

    # Cart
    ADD_CART = "add_to_cart"
    REMOVE_CART = "remove_from_cart"

    # Checkout steps (set by ALTER_CHECKOUT_STEP_EVENT_DATA listeners)
    BEGIN_CHECKOUT = "begin_checkout"
    ADD_SHIPPING_INFO = "add_shipping_info"
    ADD_PAYMENT_INFO = "add_payment_info"

    # Order
    PURCHASE = "purchase"


# ---------------------------------------------------------------------------
# Payload
# ---------------------------------------------------------------------------


@dataclass
class GTMEventPayload:
    """One data layer entry.

    ``event`` stays None for checkout steps until a listener names the step.
    ``ecommerce`` always carries ``items``; purchases add the transaction
    scalars (transaction_id, affiliation, value, tax, shipping, currency,
    coupon).
    """

    event: Optional[str] = None
    ecommerce: Dict[str, Any] = field(default_factory=lambda: {"items": []})

    @property
    def items(self) -> List[Dict[str, Any]]:
        return self.ecommerce.setdefault("items", [])

    def to_data_layer(self) -> Dict[str, Any]:
        """Serialize to the dict pushed onto the data layer."""
        event = self.event.value if isinstance(self.event, Enum) else self.event
        ecommerce = dict(self.ecommerce)
        ecommerce["items"] = [dict(item) for item in self.items]
        return {"event": event, "ecommerce": ecommerce}
