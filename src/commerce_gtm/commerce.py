"""Commerce collaborator types consumed by the tracker.

The host storefront adapts its own entities into these small dataclasses
(or subclasses them).  Only the attributes the tracker reads are modelled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, List, Optional, Protocol, Union

Number = Union[int, float, str, Decimal]


@dataclass
class Price:
    number: Number
    currency_code: str


@dataclass
class Store:
    name: str


@dataclass
class Account:
    id: Optional[str] = None


@dataclass
class Context:
    """Explicit pricing context (who is buying, from which store)."""

    user: Optional[Account]
    store: Optional[Store]


class CurrentStore(Protocol):
    def get_store(self) -> Optional[Store]: ...


class PriceCalculator(Protocol):
    def calculate(
        self, variation: "ProductVariation", quantity: int, context: Context
    ) -> Optional[Price]: ...


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass
class Product:
    id: Any
    title: str


@dataclass
class PurchasableEntity:
    """Anything that can sit on an order line (custom line items etc.)."""

    id: Any


@dataclass
class ProductVariation(PurchasableEntity):
    title: str = ""
    product: Optional[Product] = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------


@dataclass
class OrderItem:
    title: str
    purchased_entity: Optional[PurchasableEntity]
    quantity: Number
    unit_price: Price
    total_price: Price

    @property
    def purchased_entity_id(self) -> Any:
        if self.purchased_entity is None:
            return None
        return self.purchased_entity.id


@dataclass
class Adjustment:
    type: str
    amount: Price
    source_id: Optional[str] = None


@dataclass
class Shipment:
    amount: Price


@dataclass
class Coupon:
    code: str


@dataclass
class Order:
    """An order.  ``shipments`` / ``coupons`` are None when the host order
    type has no such field."""

    order_number: Any
    store: Store
    total_price: Price
    items: List[OrderItem] = field(default_factory=list)
    adjustments: List[Adjustment] = field(default_factory=list)
    shipments: Optional[List[Shipment]] = None
    coupons: Optional[List[Coupon]] = None

    def collect_adjustments(self) -> List[Adjustment]:
        return list(self.adjustments)
