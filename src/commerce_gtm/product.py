"""GTMProduct — a line item in the domain of Google's Enhanced Ecommerce.

Flattening is driven by ``PRODUCT_FIELDS``, an ordered list of field
descriptors.  The output key order is the descriptor order, then the element
order inside each list field.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

# ---------------------------------------------------------------------------
# Field descriptors
# ---------------------------------------------------------------------------


class ListStyle(str, Enum):
    """How a list-valued field is expanded into flat keys."""

    # item_category, item_category2, item_category3 ... (empty values skipped)
    CATEGORY = "category"
    # item_dimension_1, item_dimension_2 ... (every value kept)
    INDEXED = "indexed"


@dataclass(frozen=True)
class ProductField:
    """Describes how one GTMProduct attribute lands in the flat item map."""

    attr: str
    key: str
    prefixed: bool = True
    list_style: Optional[ListStyle] = None
    # Emitted when the attribute is None; None means "omit the key".
    default: Optional[str] = None

    @property
    def output_key(self) -> str:
        return f"item_{self.key}" if self.prefixed else self.key


PRODUCT_FIELDS = (
    ProductField("name", "name"),
    ProductField("id", "id"),
    ProductField("price", "price", prefixed=False),
    ProductField("currency", "currency", prefixed=False, default=""),
    ProductField("brand", "brand"),
    ProductField("categories", "category", list_style=ListStyle.CATEGORY),
    ProductField("variant", "variant"),
    ProductField("dimensions", "dimension", list_style=ListStyle.INDEXED),
    ProductField("metrics", "metric", list_style=ListStyle.INDEXED),
)


def _expand_list(descriptor: ProductField, values: List[Any]) -> Dict[str, Any]:
    base = descriptor.output_key
    out: Dict[str, Any] = {}

    if descriptor.list_style is ListStyle.CATEGORY:
        kept = [v for v in values if v != "" and v is not None]
        for position, value in enumerate(kept, start=1):
            key = base if position == 1 else f"{base}{position}"
            out[key] = value
        return out

    for position, value in enumerate(values, start=1):
        out[f"{base}_{position}"] = value
    return out


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------


@dataclass
class GTMProduct:
    """One product / line item as GA's Enhanced Ecommerce sees it.

    ``currency`` is always emitted (``""`` when unset); every other unset
    scalar is left out of :meth:`to_dict`.
    """

    name: Optional[str] = None
    id: Optional[str] = None
    price: Optional[str] = None
    currency: Optional[str] = None
    brand: Optional[str] = None
    categories: List[str] = field(default_factory=list)
    variant: Optional[str] = None
    dimensions: List[str] = field(default_factory=list)
    metrics: List[str] = field(default_factory=list)

    # -- fluent setters --

    def set_name(self, name: str) -> "GTMProduct":
        self.name = name
        return self

    def set_id(self, product_id: Any) -> "GTMProduct":
        self.id = str(product_id)
        return self

    def set_price(self, price: Any) -> "GTMProduct":
        self.price = price
        return self

    def set_currency(self, currency: str) -> "GTMProduct":
        self.currency = currency
        return self

    def set_brand(self, brand: str) -> "GTMProduct":
        self.brand = brand
        return self

    def add_category(self, category: str) -> "GTMProduct":
        self.categories.append(category)
        return self

    def set_variant(self, variant: str) -> "GTMProduct":
        self.variant = variant
        return self

    def set_dimensions(self, dimensions: List[str]) -> "GTMProduct":
        self.dimensions = list(dimensions)
        return self

    def add_dimension(self, dimension: str) -> "GTMProduct":
        self.dimensions.append(dimension)
        return self

    def set_metrics(self, metrics: List[str]) -> "GTMProduct":
        self.metrics = list(metrics)
        return self

    def add_metric(self, metric: str) -> "GTMProduct":
        self.metrics.append(metric)
        return self

    # -- serialization --

    def to_dict(self) -> Dict[str, Any]:
        """Flatten into the key-suffixed item map GA expects."""
        data: Dict[str, Any] = {}
        for descriptor in PRODUCT_FIELDS:
            value = getattr(self, descriptor.attr)
            if value is None:
                value = descriptor.default

            if descriptor.list_style is not None:
                data.update(_expand_list(descriptor, list(value or [])))
            elif value is not None:
                data[descriptor.output_key] = value
        return data
