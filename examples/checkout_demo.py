#!/usr/bin/env python3
"""
Checkout Demo — browse, cart, checkout steps and purchase
=========================================================

Runs a small storefront session through GTMEventTracker and prints the
data layer events a GTM container would receive.

Run:
    python examples/checkout_demo.py

Environment:
    GTM_DATA_LAYER_VARIABLE   name of the JS data layer (default: dataLayer)
"""

from __future__ import annotations

import json
import logging
import os
from decimal import Decimal
from typing import Optional

from commerce_gtm import (
    AlterationHook,
    CommerceEventsSubscriber,
    GTMEventTracker,
    GTMEventType,
    HookRegistry,
    InMemoryEventStorage,
)
from commerce_gtm.commerce import (
    Account,
    Adjustment,
    Context,
    Coupon,
    Order,
    OrderItem,
    Price,
    Product,
    ProductVariation,
    PurchasableEntity,
    Shipment,
    Store,
)

DATA_LAYER_VARIABLE = os.environ.get("GTM_DATA_LAYER_VARIABLE", "dataLayer")

STORE = Store(name="Flower Shop")

CATALOG = {
    7: (ProductVariation(7, "Red, large", Product(3, "Roses")), Decimal("24.999")),
    8: (ProductVariation(8, "White", Product(4, "Tulips")), Decimal("9.5")),
}

CHECKOUT_STEPS = {
    1: GTMEventType.BEGIN_CHECKOUT,
    2: GTMEventType.ADD_SHIPPING_INFO,
    3: GTMEventType.ADD_PAYMENT_INFO,
}


class FixedStore:
    def get_store(self) -> Store:
        return STORE


class ListPriceCalculator:
    def calculate(
        self, variation: ProductVariation, quantity: int, context: Context
    ) -> Optional[Price]:
        entry = CATALOG.get(variation.id)
        if entry is None:
            return None
        return Price(entry[1] * quantity, "USD")


def build_hooks() -> HookRegistry:
    hooks = HookRegistry()

    @hooks.register(AlterationHook.ALTER_PRODUCT)
    def add_brand(event):
        event.product.set_brand("Bloom & Co").add_category("Flowers")

    @hooks.register(AlterationHook.ALTER_CHECKOUT_STEP_EVENT_DATA)
    def name_checkout_step(event):
        step = CHECKOUT_STEPS.get(event.step_index)
        if step is not None:
            event.payload.event = step.value

    return hooks


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    storage = InMemoryEventStorage()
    tracker = GTMEventTracker(
        storage=storage,
        price_calculator=ListPriceCalculator(),
        current_store=FixedStore(),
        current_user=Account(id="anonymous"),
        hooks=build_hooks(),
    )
    subscriber = CommerceEventsSubscriber(tracker)

    roses, tulips = CATALOG[7][0], CATALOG[8][0]
    tracker.product_impressions([roses, tulips], "Homepage")
    tracker.product_click([roses], "Homepage")
    tracker.product_detail_views([roses])

    roses_item = OrderItem(
        title="Roses - Red, large",
        purchased_entity=roses,
        quantity=2,
        unit_price=Price("24.99", "USD"),
        total_price=Price("49.98", "USD"),
    )
    card_item = OrderItem(
        title="Greeting card",
        purchased_entity=PurchasableEntity(id="card-1"),
        quantity=1,
        unit_price=Price("3.00", "USD"),
        total_price=Price("3.00", "USD"),
    )
    subscriber.track_cart_add(roses_item, 2)
    subscriber.track_cart_add(card_item, 1)

    order = Order(
        order_number="1001",
        store=STORE,
        total_price=Price("61.22", "USD"),
        items=[roses_item, card_item],
        adjustments=[Adjustment("tax", Price("4.24", "USD"), source_id="ny_sales_tax")],
        shipments=[Shipment(Price("4.00", "USD"))],
        coupons=[Coupon("SPRING10")],
    )
    for step_index in (1, 2, 3, 4):
        subscriber.track_checkout_step(step_index, order)
    subscriber.track_order_place(order)

    for event in storage.flush():
        print(f"{DATA_LAYER_VARIABLE}.push({json.dumps(event)});")


if __name__ == "__main__":
    main()
