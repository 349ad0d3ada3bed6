"""Tests for GTMProduct flattening."""

from commerce_gtm.product import PRODUCT_FIELDS, GTMProduct


def _full_product() -> GTMProduct:
    return (
        GTMProduct()
        .set_name("Roses")
        .set_id(3)
        .set_price("12.99")
        .set_currency("USD")
        .set_brand("Bloom")
        .add_category("Flowers")
        .add_category("Roses")
        .set_variant("Red, large")
        .add_dimension("d1")
        .add_metric("m1")
    )


class TestToDict:
    def test_key_order_and_prefixes(self):
        data = _full_product().to_dict()

        assert list(data) == [
            "item_name",
            "item_id",
            "price",
            "currency",
            "item_brand",
            "item_category",
            "item_category2",
            "item_variant",
            "item_dimension_1",
            "item_metric_1",
        ]
        assert data["item_id"] == "3"
        assert data["price"] == "12.99"

    def test_empty_categories_skipped(self):
        product = GTMProduct(name="n", id="1", price="1.00")
        for category in ["A", "", "B"]:
            product.add_category(category)

        data = product.to_dict()
        category_keys = [k for k in data if k.startswith("item_category")]

        assert category_keys == ["item_category", "item_category2"]
        assert data["item_category"] == "A"
        assert data["item_category2"] == "B"

    def test_leading_empty_category(self):
        # Numbering follows surviving categories: the first kept value is
        # always the unsuffixed item_category.
        product = GTMProduct(name="n", id="1", categories=["", "A", "B", "C"])
        data = product.to_dict()

        assert data["item_category"] == "A"
        assert data["item_category2"] == "B"
        assert data["item_category3"] == "C"
        assert "item_category4" not in data

    def test_dimensions_keep_empty_values(self):
        product = GTMProduct(name="n", id="1", dimensions=["d1", "d2"])
        data = product.to_dict()

        assert {k: v for k, v in data.items() if "dimension" in k} == {
            "item_dimension_1": "d1",
            "item_dimension_2": "d2",
        }

        product.add_dimension("")
        assert product.to_dict()["item_dimension_3"] == ""

    def test_metrics_numbered(self):
        product = GTMProduct(name="n", id="1").set_metrics(["5", "10"])
        data = product.to_dict()

        assert data["item_metric_1"] == "5"
        assert data["item_metric_2"] == "10"

    def test_currency_defaults_to_empty_string(self):
        data = GTMProduct(name="n", id="1", price="1.00").to_dict()
        assert data["currency"] == ""

    def test_unset_scalars_omitted(self):
        data = GTMProduct(name="n", id="1", price="1.00").to_dict()

        assert "item_brand" not in data
        assert "item_variant" not in data
        assert None not in data.values()

    def test_unset_price_omitted(self):
        data = GTMProduct(name="n", id="1").to_dict()
        assert "price" not in data
        assert data["currency"] == ""

    def test_idempotent(self):
        product = _full_product()
        assert product.to_dict() == product.to_dict()
        assert list(product.to_dict()) == list(product.to_dict())

    def test_does_not_mutate(self):
        product = GTMProduct(name="n", id="1", categories=["", "A"])
        product.to_dict()
        assert product.categories == ["", "A"]


class TestFieldDescriptors:
    def test_price_and_currency_unprefixed(self):
        keys = {f.attr: f.output_key for f in PRODUCT_FIELDS}
        assert keys["price"] == "price"
        assert keys["currency"] == "currency"
        assert keys["categories"] == "item_category"
        assert keys["name"] == "item_name"


class TestSetters:
    def test_set_id_stringifies(self):
        assert GTMProduct().set_id(12).id == "12"

    def test_set_dimensions_copies(self):
        dims = ["a"]
        product = GTMProduct().set_dimensions(dims)
        dims.append("b")
        assert product.dimensions == ["a"]
