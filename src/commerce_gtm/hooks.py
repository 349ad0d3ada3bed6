"""Alteration hooks — interceptor chains that rewrite products and payloads.

Listeners are plain callables taking the hook's event object.  They may
mutate the primary object in place or replace it on the event
(``event.product = ...`` / ``event.payload = ...``); the tracker reads the
primary object back after dispatch.

Usage::

    hooks = HookRegistry()

    @hooks.register(AlterationHook.ALTER_CHECKOUT_STEP_EVENT_DATA)
    def name_step(event):
        if event.step_index == 1:
            event.payload.event = GTMEventType.BEGIN_CHECKOUT.value

Listeners run synchronously in registration order.  There is no isolation:
an exception raised by a listener propagates to the tracker's caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from commerce_gtm.commerce import Order, OrderItem, ProductVariation
from commerce_gtm.events import GTMEventPayload
from commerce_gtm.product import GTMProduct

logger = logging.getLogger(__name__)


class AlterationHook(str, Enum):
    """Extension points exposed by the tracker."""

    # After a GTMProduct is built from a product variation.
    ALTER_PRODUCT = "commerce_gtm.alter_product"
    # After a GTMProduct is built from an order item's purchased entity,
    # which may not be a product variation.
    ALTER_PRODUCT_PURCHASED_ENTITY = "commerce_gtm.alter_product_purchased_entity"
    # Before any payload except a checkout step is queued.
    ALTER_EVENT_DATA = "commerce_gtm.alter_event_data"
    # Before a checkout step is queued; the only hook that names the event.
    ALTER_CHECKOUT_STEP_EVENT_DATA = "commerce_gtm.alter_checkout_step_event_data"


# ---------------------------------------------------------------------------
# Hook event objects
# ---------------------------------------------------------------------------


@dataclass
class AlterProductEvent:
    product: GTMProduct
    product_variation: ProductVariation


@dataclass
class AlterProductPurchasedEntityEvent:
    product: GTMProduct
    order_item: OrderItem
    purchased_entity: Any


@dataclass
class AlterEventDataEvent:
    payload: GTMEventPayload


@dataclass
class AlterCheckoutStepEventDataEvent:
    """Dispatched when a checkout step is tracked.

    ``step_index`` is 1-based.  The step payload is only queued if a
    listener sets ``payload.event``.
    """

    step_index: int
    order: Order
    payload: GTMEventPayload


Listener = Callable[[Any], None]


class HookRegistry:
    """Ordered listener lists, one per :class:`AlterationHook`."""

    def __init__(self) -> None:
        self._listeners: Dict[AlterationHook, List[Listener]] = {
            hook: [] for hook in AlterationHook
        }

    @staticmethod
    def _resolve(hook: Any) -> AlterationHook:
        try:
            return AlterationHook(hook)
        except ValueError:
            raise ValueError(f"Unknown alteration hook: {hook!r}") from None

    def register(self, hook: Any, listener: Optional[Listener] = None):
        """Append a listener; usable directly or as a decorator."""
        resolved = self._resolve(hook)
        if listener is None:

            def decorator(fn: Listener) -> Listener:
                self._listeners[resolved].append(fn)
                return fn

            return decorator

        self._listeners[resolved].append(listener)
        return listener

    def unregister(self, hook: Any, listener: Listener) -> None:
        self._listeners[self._resolve(hook)].remove(listener)

    def listeners(self, hook: Any) -> List[Listener]:
        return list(self._listeners[self._resolve(hook)])

    def dispatch(self, hook: Any, event: Any) -> Any:
        """Run every listener of ``hook`` on ``event`` and return the event."""
        resolved = self._resolve(hook)
        for listener in list(self._listeners[resolved]):
            listener(event)
        logger.debug(
            "Dispatched %s to %d listener(s)",
            resolved.value,
            len(self._listeners[resolved]),
        )
        return event
