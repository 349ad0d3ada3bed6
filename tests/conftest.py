"""Shared commerce fixtures."""

from unittest.mock import MagicMock

import pytest

from commerce_gtm.commerce import (
    Account,
    Order,
    OrderItem,
    Price,
    Product,
    ProductVariation,
    PurchasableEntity,
    Store,
)
from commerce_gtm.hooks import HookRegistry
from commerce_gtm.storage import InMemoryEventStorage
from commerce_gtm.tracker import GTMEventTracker


@pytest.fixture
def store():
    return Store(name="Flower Shop")


@pytest.fixture
def current_store(store):
    current = MagicMock()
    current.get_store.return_value = store
    return current


@pytest.fixture
def price_calculator():
    calculator = MagicMock()
    calculator.calculate.return_value = Price("12.999", "USD")
    return calculator


@pytest.fixture
def storage():
    return InMemoryEventStorage()


@pytest.fixture
def hooks():
    return HookRegistry()


@pytest.fixture
def tracker(storage, price_calculator, current_store, hooks):
    return GTMEventTracker(
        storage=storage,
        price_calculator=price_calculator,
        current_store=current_store,
        current_user=Account(id="42"),
        hooks=hooks,
    )


@pytest.fixture
def variation():
    return ProductVariation(
        id=7, title="Red roses, large", product=Product(id=3, title="Roses")
    )


@pytest.fixture
def variation_item(variation):
    return OrderItem(
        title="Roses - Red roses, large",
        purchased_entity=variation,
        quantity="2.00",
        unit_price=Price("12.99", "USD"),
        total_price=Price("25.98", "USD"),
    )


@pytest.fixture
def custom_item():
    return OrderItem(
        title="Gift wrapping",
        purchased_entity=PurchasableEntity(id=99),
        quantity=1,
        unit_price=Price("4.5", "EUR"),
        total_price=Price("4.509", "EUR"),
    )


@pytest.fixture
def order(store, variation_item, custom_item):
    return Order(
        order_number="1001",
        store=store,
        total_price=Price("40.4899", "USD"),
        items=[variation_item, custom_item],
    )
