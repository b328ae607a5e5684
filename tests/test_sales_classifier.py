from __future__ import annotations

import unittest
from datetime import datetime
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from classification.errors import PartitionMismatch
from classification.labels import RETURN_LABEL_VOCABULARY, SALE_LABEL_VOCABULARY
from classification.records import TransactionRecord
from classification.returns import RETURN_LADDERS
from classification.sales import PRODUCT_TYPE, SALE_LADDERS, SaleLabels, classify_sale, classify_sales


def _sale(code: str, quantity: int = 1, unit_price: float = 2.55) -> TransactionRecord:
    return TransactionRecord(
        InvoiceNo="536365",
        InvoiceDate=datetime(2010, 12, 1, 8, 26),
        StockCode=code,
        DescriptionClean="WHITE HANGING HEART T-LIGHT HOLDER",
        Quantity=quantity,
        UnitPrice=unit_price,
        OrderValue=round(quantity * unit_price, 2),
        CustomerID="17850",
        Country="United Kingdom",
    )


class SalesClassifierTest(unittest.TestCase):
    def test_regular_product(self):
        self.assertEqual(
            classify_sale(_sale("85123A", 6)),
            SaleLabels("product", "regular", "revenue"),
        )

    def test_non_product_codes(self):
        expected = {
            "B": ("adjustment", "bad_debt", "adjustment"),
            "M": ("adjustment", "manual", "revenue"),
            "POST": ("service", "domestic_shipping", "fee"),
            "DOT": ("service", "international_shipping", "fee"),
            "AMAZONFEE": ("service", "amazon_fee", "fee"),
            "C2": ("service", "special_carriage", "fee"),
            "PADS": ("product", "accessory", "revenue"),
        }
        for code, labels in expected.items():
            with self.subTest(code=code):
                self.assertEqual(tuple(classify_sale(_sale(code))), labels)

    def test_free_sample(self):
        record = _sale("S", quantity=3, unit_price=0.0)
        self.assertEqual(record.OrderValue, 0)
        self.assertEqual(
            classify_sale(record),
            SaleLabels("adjustment", "free_sample", "non_revenue"),
        )

    def test_paid_sample(self):
        self.assertEqual(
            classify_sale(_sale("S", quantity=1, unit_price=15.0)),
            SaleLabels("product", "paid_sample", "revenue"),
        )

    def test_sample_with_negative_value_falls_to_defaults(self):
        record = _sale("S", quantity=1, unit_price=-40.0)
        self.assertEqual(
            classify_sale(record),
            SaleLabels("product", "regular", "revenue"),
        )
        self.assertEqual(PRODUCT_TYPE.explain(record), "default")

    def test_every_label_is_in_vocabulary(self):
        codes = ["B", "M", "POST", "DOT", "AMAZONFEE", "C2", "PADS", "S", "22423", "D"]
        prices = [0.0, 1.25, -3.0]
        records = [_sale(code, 2, price) for code in codes for price in prices]
        for labels in classify_sales(records):
            for column, value in zip(SALE_LABEL_VOCABULARY, labels):
                self.assertIn(value, SALE_LABEL_VOCABULARY[column])

    def test_ladders_cover_published_vocabulary(self):
        for ladder in SALE_LADDERS:
            with self.subTest(column=ladder.column):
                self.assertEqual(set(ladder.labels), set(SALE_LABEL_VOCABULARY[ladder.column]))
        for ladder in RETURN_LADDERS:
            with self.subTest(column=ladder.column):
                self.assertEqual(set(ladder.labels), set(RETURN_LABEL_VOCABULARY[ladder.column]))

    def test_deterministic(self):
        record = _sale("S", quantity=3, unit_price=0.0)
        self.assertEqual(classify_sale(record), classify_sale(record))

    def test_rejects_return_lines(self):
        with self.assertRaises(PartitionMismatch):
            classify_sale(_sale("85123A", quantity=-1))


if __name__ == "__main__":
    unittest.main()
