# tests/test_result_normalizer.py

"""Tests for listing normalization and discount computation."""

import json
import unittest
from pathlib import Path

from src.filters.result_normalizer import ResultNormalizer, compute_discount

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _notebook_listings() -> list[dict[str, object]]:
    with open(FIXTURES_DIR / "ml_search_notebook.json", encoding="utf-8") as f:
        results: list[dict[str, object]] = json.load(f)["results"]
    return results


class TestComputeDiscount(unittest.TestCase):
    """Discount percent rules."""

    def test_no_original_price(self) -> None:
        self.assertEqual(compute_discount(100.0, None), 0)

    def test_original_not_above_price(self) -> None:
        """A 'markdown' that is not cheaper yields zero."""
        self.assertEqual(compute_discount(100.0, 100.0), 0)
        self.assertEqual(compute_discount(120.0, 100.0), 0)

    def test_rounded_percent(self) -> None:
        self.assertEqual(compute_discount(2400.0, 3000.0), 20)
        self.assertEqual(compute_discount(199.9, 299.9), 33)

    def test_half_rounds_up(self) -> None:
        """12.5% rounds to 13, not banker's 12."""
        self.assertEqual(compute_discount(87.5, 100.0), 13)


class TestResultNormalizer(unittest.TestCase):
    """Raw listing → Product mapping."""

    def test_notebook_scenario(self) -> None:
        """Two listings keep their order and get discounts 20 and 0."""
        products = ResultNormalizer.normalize_results(_notebook_listings())

        self.assertEqual(len(products), 2)
        self.assertEqual(
            [p.id for p in products], ["MLB3456789012", "MLB2233445566"]
        )
        self.assertEqual(products[0].discount, 20)
        self.assertEqual(products[1].discount, 0)

    def test_fields_mapped(self) -> None:
        first = ResultNormalizer.normalize_results(_notebook_listings())[0]

        self.assertEqual(
            first.title, "Notebook Lenovo IdeaPad 3 Ryzen 5 8GB 256GB SSD"
        )
        self.assertEqual(first.price, 2400.0)
        self.assertEqual(first.original_price, 3000.0)
        self.assertEqual(first.currency, "BRL")
        self.assertEqual(first.condition, "new")
        self.assertEqual(first.available_quantity, 50)
        self.assertEqual(first.sold_quantity, 1250)
        self.assertTrue(first.shipping.free_shipping)
        self.assertTrue(first.image.endswith("_092022-O.jpg"))
        self.assertIn("MLB-3456789012", first.permalink)

    def test_missing_optional_fields_degrade(self) -> None:
        """No shipping / original_price → defaults, no exception."""
        second = ResultNormalizer.normalize_results(_notebook_listings())[1]

        self.assertIsNone(second.original_price)
        self.assertFalse(second.shipping.free_shipping)
        self.assertEqual(second.price, 1234.5)

    def test_bare_listing_does_not_raise(self) -> None:
        product = ResultNormalizer.normalize_listing({"id": "MLB9"})

        self.assertEqual(product.id, "MLB9")
        self.assertEqual(product.title, "")
        self.assertEqual(product.price, 0.0)
        self.assertEqual(product.image, "")
        self.assertEqual(product.discount, 0)

    def test_zero_original_price_means_none(self) -> None:
        product = ResultNormalizer.normalize_listing(
            {"id": "MLB9", "price": 10, "original_price": 0}
        )
        self.assertIsNone(product.original_price)
        self.assertEqual(product.discount, 0)

    def test_null_shipping_block(self) -> None:
        product = ResultNormalizer.normalize_listing(
            {"id": "MLB9", "price": 10, "shipping": None}
        )
        self.assertFalse(product.shipping.free_shipping)

    def test_empty_results(self) -> None:
        """Empty input gives an empty list, never None."""
        self.assertEqual(ResultNormalizer.normalize_results([]), [])

    def test_discount_implies_markdown(self) -> None:
        """discount > 0 only when original_price > price."""
        listings = [
            {"id": "a", "price": 50, "original_price": 100},
            {"id": "b", "price": 100, "original_price": 50},
            {"id": "c", "price": 100, "original_price": 100},
            {"id": "d", "price": 100},
        ]
        for product in ResultNormalizer.normalize_results(listings):
            with self.subTest(id=product.id):
                if product.discount > 0:
                    self.assertIsNotNone(product.original_price)
                    self.assertTrue(product.has_markdown)
                else:
                    self.assertFalse(product.has_markdown)


if __name__ == "__main__":
    unittest.main()
