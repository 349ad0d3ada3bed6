"""Glue between the host's commerce events and GTMEventTracker.

Wire the handlers into whatever event bus the storefront uses::

    subscriber = CommerceEventsSubscriber(tracker)
    for event_name, handler in subscriber.subscribed_events().items():
        bus.subscribe(event_name, getattr(subscriber, handler))

Tracking must never break a cart or checkout action, so every handler logs
and swallows tracker failures.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from commerce_gtm.commerce import Order, OrderItem
from commerce_gtm.events import GTMEventPayload

logger = logging.getLogger(__name__)


class CommerceEventsSubscriber:
    """Forwards cart / checkout / order events to the tracker."""

    CART_ENTITY_ADD = "commerce_cart.entity.add"
    CART_ORDER_ITEM_REMOVE = "commerce_cart.order_item.remove"
    CHECKOUT_STEP = "commerce_checkout.step"
    ORDER_PLACE = "commerce_order.place.post_transition"

    def __init__(self, tracker: Any) -> None:
        self.tracker = tracker

    @classmethod
    def subscribed_events(cls) -> Dict[str, str]:
        return {
            cls.CART_ENTITY_ADD: "track_cart_add",
            cls.CART_ORDER_ITEM_REMOVE: "track_cart_remove",
            cls.CHECKOUT_STEP: "track_checkout_step",
            cls.ORDER_PLACE: "track_order_place",
        }

    def track_cart_add(
        self, order_item: OrderItem, quantity: Any
    ) -> Optional[GTMEventPayload]:
        try:
            return self.tracker.add_to_cart(order_item, int(quantity))
        except Exception:
            logger.exception("GTM add_to_cart tracking failed")
            return None

    def track_cart_remove(self, order_item: OrderItem) -> Optional[GTMEventPayload]:
        # The cart removes a whole order item; GA gets a quantity of 1.
        try:
            return self.tracker.remove_from_cart(order_item, 1)
        except Exception:
            logger.exception("GTM remove_from_cart tracking failed")
            return None

    def track_checkout_step(
        self, step_index: int, order: Order
    ) -> Optional[GTMEventPayload]:
        try:
            return self.tracker.checkout_step(step_index, order)
        except Exception:
            logger.exception("GTM checkout step %s tracking failed", step_index)
            return None

    def track_order_place(self, order: Order) -> Optional[GTMEventPayload]:
        try:
            return self.tracker.purchase(order)
        except Exception:
            logger.exception("GTM purchase tracking failed")
            return None
