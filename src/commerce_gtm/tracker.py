"""GTMEventTracker — builds Enhanced Ecommerce payloads and queues them.

Usage::

    tracker = GTMEventTracker(
        storage=InMemoryEventStorage(),
        price_calculator=calculator,
        current_store=current_store,
        current_user=account,
    )
    tracker.add_to_cart(order_item, 1)
    tracker.purchase(order)

    data_layer_events = tracker.storage.flush()

Every method builds fresh GTMProduct / GTMEventPayload objects, runs the
alteration hooks, and hands the payload to the storage.  Methods return the
queued payload, or None when a checkout step is suppressed.

Errors (invalid prices, listener exceptions) propagate; wrap calls in
:class:`commerce_gtm.subscriber.CommerceEventsSubscriber` to keep tracking
failures away from cart and checkout flows.

See https://developers.google.com/tag-manager/enhanced-ecommerce
"""

from __future__ import annotations

import logging
import re
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from commerce_gtm.commerce import (
    Account,
    Context,
    CurrentStore,
    Order,
    OrderItem,
    PriceCalculator,
    ProductVariation,
)
from commerce_gtm.events import GTMEventPayload, GTMEventType
from commerce_gtm.hooks import (
    AlterationHook,
    AlterCheckoutStepEventDataEvent,
    AlterEventDataEvent,
    AlterProductEvent,
    AlterProductPurchasedEntityEvent,
    HookRegistry,
)
from commerce_gtm.pricing import format_price, to_decimal
from commerce_gtm.product import GTMProduct
from commerce_gtm.storage import EventStorage

logger = logging.getLogger(__name__)

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)", re.ASCII)


class GTMEventTracker:
    """Tracks the Enhanced Ecommerce events of a storefront."""

    def __init__(
        self,
        storage: EventStorage,
        price_calculator: PriceCalculator,
        current_store: CurrentStore,
        current_user: Optional[Account] = None,
        *,
        hooks: Optional[HookRegistry] = None,
    ):
        self.storage = storage
        self.price_calculator = price_calculator
        self.current_store = current_store
        self.current_user = current_user
        self.hooks = hooks if hooks is not None else HookRegistry()

    # ------------------------------------------------------------------ #
    # Catalog events
    # ------------------------------------------------------------------ #

    def product_impressions(
        self,
        product_variations: Iterable[ProductVariation],
        list_name: str = "",
        *,
        context: Optional[Context] = None,
    ) -> GTMEventPayload:
        """Track product impressions (products shown in a list)."""
        return self._track_variations(
            GTMEventType.PRODUCT_IMPRESSIONS, product_variations, list_name, context
        )

    def product_detail_views(
        self,
        product_variations: Iterable[ProductVariation],
        list_name: str = "",
        *,
        context: Optional[Context] = None,
    ) -> GTMEventPayload:
        """Track product detail views."""
        return self._track_variations(
            GTMEventType.PRODUCT_DETAIL_VIEWS, product_variations, list_name, context
        )

    def product_click(
        self,
        product_variations: Iterable[ProductVariation],
        list_name: str = "",
        *,
        context: Optional[Context] = None,
    ) -> GTMEventPayload:
        """Track a click on a product."""
        return self._track_variations(
            GTMEventType.PRODUCT_CLICK, product_variations, list_name, context
        )

    # ------------------------------------------------------------------ #
    # Cart events
    # ------------------------------------------------------------------ #

    def add_to_cart(self, order_item: OrderItem, quantity: int) -> GTMEventPayload:
        return self._track_cart(GTMEventType.ADD_CART, order_item, quantity)

    def remove_from_cart(
        self, order_item: OrderItem, quantity: int
    ) -> GTMEventPayload:
        return self._track_cart(GTMEventType.REMOVE_CART, order_item, quantity)

    # ------------------------------------------------------------------ #
    # Checkout & purchase
    # ------------------------------------------------------------------ #

    def checkout_step(self, step_index: int, order: Order) -> Optional[GTMEventPayload]:
        """Track a checkout step (1-based).

        The payload is queued only if an ALTER_CHECKOUT_STEP_EVENT_DATA
        listener sets its event name.
        """
        payload = GTMEventPayload(
            event=None,
            ecommerce={"items": self._build_products_from_order_items(order.items)},
        )
        alter = AlterCheckoutStepEventDataEvent(step_index, order, payload)
        self.hooks.dispatch(AlterationHook.ALTER_CHECKOUT_STEP_EVENT_DATA, alter)
        payload = alter.payload

        if payload is None or payload.event is None:
            logger.debug("Checkout step %s not named by any listener; dropped", step_index)
            return None

        self.storage.add_event(payload)
        return payload

    def purchase(self, order: Order) -> GTMEventPayload:
        """Track the purchase of an order."""
        total = order.total_price
        payload = GTMEventPayload(
            event=GTMEventType.PURCHASE.value,
            ecommerce={
                "transaction_id": self._transaction_id(order.order_number),
                "affiliation": order.store.name,
                # Total value, tax and shipping included.
                "value": format_price(total.number),
                "tax": format_price(self._calculate_tax(order)),
                "shipping": format_price(self._calculate_shipping(order)),
                "currency": total.currency_code,
                "coupon": self._get_coupon_code(order),
                "items": self._build_products_from_order_items(order.items),
            },
        )
        return self._queue(payload)

    # ------------------------------------------------------------------ #
    # Product builders
    # ------------------------------------------------------------------ #

    def build_product_from_product_variation(
        self,
        product_variation: ProductVariation,
        context: Optional[Context] = None,
    ) -> GTMProduct:
        """Build a GTMProduct from a variation, priced for ``context``."""
        if context is None:
            context = self._current_context()

        parent = product_variation.product
        product = (
            GTMProduct()
            .set_name(parent.title)
            .set_id(parent.id)
            .set_variant(product_variation.title)
        )

        calculated_price = self.price_calculator.calculate(product_variation, 1, context)
        if calculated_price is not None:
            product.set_price(format_price(calculated_price.number)).set_currency(
                calculated_price.currency_code
            )
        else:
            logger.debug("No price resolved for variation %s", product_variation.id)

        alter = AlterProductEvent(product, product_variation)
        self.hooks.dispatch(AlterationHook.ALTER_PRODUCT, alter)
        return alter.product

    def build_product_from_order_item(self, order_item: OrderItem) -> GTMProduct:
        """Build a GTMProduct from an order item's purchased entity."""
        purchased_entity = order_item.purchased_entity

        if isinstance(purchased_entity, ProductVariation):
            product = self.build_product_from_product_variation(purchased_entity)
        else:
            # Not a product variation (custom line item etc.).
            product = (
                GTMProduct()
                .set_name(order_item.title)
                .set_id(order_item.purchased_entity_id)
                .set_price(format_price(order_item.total_price.number))
                .set_currency(order_item.unit_price.currency_code)
            )

        alter = AlterProductPurchasedEntityEvent(product, order_item, purchased_entity)
        self.hooks.dispatch(AlterationHook.ALTER_PRODUCT_PURCHASED_ENTITY, alter)
        return alter.product

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _current_context(self) -> Context:
        return Context(user=self.current_user, store=self.current_store.get_store())

    def _track_variations(
        self,
        event_type: GTMEventType,
        product_variations: Iterable[ProductVariation],
        list_name: str,
        context: Optional[Context],
    ) -> GTMEventPayload:
        if context is None:
            context = self._current_context()
        items = [
            {
                **self.build_product_from_product_variation(variation, context).to_dict(),
                "item_list_name": list_name,
            }
            for variation in product_variations
        ]
        return self._queue(GTMEventPayload(event=event_type.value, ecommerce={"items": items}))

    def _track_cart(
        self, event_type: GTMEventType, order_item: OrderItem, quantity: int
    ) -> GTMEventPayload:
        product = self.build_product_from_order_item(order_item)
        payload = GTMEventPayload(
            event=event_type.value,
            ecommerce={"items": [{**product.to_dict(), "quantity": quantity}]},
        )
        return self._queue(payload)

    def _build_products_from_order_items(
        self, order_items: Iterable[OrderItem]
    ) -> List[Dict[str, Any]]:
        return [
            {
                **self.build_product_from_order_item(order_item).to_dict(),
                "quantity": int(to_decimal(order_item.quantity)),
            }
            for order_item in order_items
        ]

    def _queue(self, payload: GTMEventPayload) -> GTMEventPayload:
        alter = AlterEventDataEvent(payload)
        self.hooks.dispatch(AlterationHook.ALTER_EVENT_DATA, alter)
        payload = alter.payload
        self.storage.add_event(payload)
        return payload

    @staticmethod
    def _transaction_id(order_number: Any) -> int:
        """Integer order number; leading digits of patterned numbers, else 0."""
        if isinstance(order_number, (int, float, Decimal)) and not isinstance(
            order_number, bool
        ):
            return int(order_number) if Decimal(order_number).is_finite() else 0
        if isinstance(order_number, str):
            match = _LEADING_INT_RE.match(order_number)
            return int(match.group(1)) if match else 0
        return 0

    @staticmethod
    def _calculate_tax(order: Order) -> Decimal:
        total = Decimal(0)
        for adjustment in order.collect_adjustments():
            if adjustment.type == "tax" and not _is_empty(adjustment.source_id):
                total += to_decimal(adjustment.amount.number)
        return total

    @staticmethod
    def _calculate_shipping(order: Order) -> Decimal:
        shipments = getattr(order, "shipments", None)
        if not shipments:
            return Decimal(0)
        return sum(
            (to_decimal(shipment.amount.number) for shipment in shipments), Decimal(0)
        )

    @staticmethod
    def _get_coupon_code(order: Order) -> str:
        coupons = getattr(order, "coupons", None)
        if not coupons:
            return ""

        codes = [coupon.code for coupon in coupons]
        if len(codes) == 1:
            return codes[0]
        return ", ".join(codes)


def _is_empty(value: Any) -> bool:
    # "0" counts as an unset source id, like the storefront's empty checks.
    return not value or value == "0"
