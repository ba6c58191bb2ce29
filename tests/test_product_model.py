# tests/test_product_model.py

"""Tests for the Product dataclass."""

import unittest

from promo_publisher.models.product import Product


class TestProductModel(unittest.TestCase):
    """Product dataclass unit tests."""

    def test_defaults(self) -> None:
        """Optional fields default to empty values."""
        product = Product(id="A1", name="Fone", price=99.9, link="http://x")
        self.assertEqual(product.store, "")
        self.assertEqual(product.image, "")
        self.assertIsNone(product.original_price)
        self.assertIsNone(product.discount)
        self.assertIsNone(product.generated_message)

    def test_has_discount(self) -> None:
        """A higher original price is a discount."""
        product = Product(
            id="A1", name="Fone", price=80.0, link="http://x",
            original_price=100.0,
        )
        self.assertTrue(product.has_discount)

    def test_no_discount_without_original_price(self) -> None:
        """Without original price there is no discount."""
        product = Product(id="A1", name="Fone", price=0.0, link="http://x")
        self.assertFalse(product.has_discount)

    def test_no_discount_when_original_not_higher(self) -> None:
        """An equal original price is not a discount."""
        product = Product(
            id="A1", name="Fone", price=100.0, link="http://x",
            original_price=100.0,
        )
        self.assertFalse(product.has_discount)

    def test_equality(self) -> None:
        """Two products with identical fields are equal."""
        a = Product(id="A1", name="Fone", price=1.0, link="l")
        b = Product(id="A1", name="Fone", price=1.0, link="l")
        self.assertEqual(a, b)


if __name__ == "__main__":
    unittest.main()
