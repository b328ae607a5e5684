from __future__ import annotations

import unittest
from datetime import datetime, timedelta
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from classification.errors import PartitionMismatch
from classification.labels import RETURN_LABEL_VOCABULARY
from classification.records import TransactionRecord
from classification.returns import (
    REFUND_STATUS,
    ReturnConditions,
    ReturnLabels,
    classify_return_rows,
    classify_returns,
    label_return,
)
from classification.windows import compute_return_windows

BASE_DATE = datetime(2011, 3, 14, 11, 5)


def _ret(
    code: str = "85123A",
    value: float = -25.5,
    *,
    quantity: int = -1,
    customer: str | None = "14911",
    description: str | None = "WHITE HANGING HEART T-LIGHT HOLDER",
    when: datetime = BASE_DATE,
    invoice: str = "C545220",
) -> TransactionRecord:
    return TransactionRecord(
        InvoiceNo=invoice,
        InvoiceDate=when,
        StockCode=code,
        DescriptionClean=description,
        Quantity=quantity,
        UnitPrice=round(value / quantity, 2),
        OrderValue=value,
        CustomerID=customer,
        Country="EIRE",
    )


def _labels(record: TransactionRecord) -> ReturnLabels:
    return classify_return_rows([record])[0].labels


def _conditions(code: str, value: float, *, day_cancelled: bool = False, description: str = "") -> ReturnConditions:
    record = _ret(code, value, description=description)
    windows = compute_return_windows([record])
    base = ReturnConditions.of(record, windows)
    return ReturnConditions(
        stock_code=base.stock_code,
        order_value=base.order_value,
        day_cancelled=day_cancelled,
        damaged=base.damaged,
        manual_override=base.manual_override,
        frequent_returner=base.frequent_returner,
        auto_approved_discount=base.auto_approved_discount,
    )


class ReturnsLadderTest(unittest.TestCase):
    def test_large_discount_is_fraud_review(self):
        self.assertEqual(
            _labels(_ret("D", -600.0, description="DISCOUNT")),
            ReturnLabels("price_adjustment", "suspicious_discount", "fraud_review"),
        )

    def test_discount_thresholds(self):
        cases = {
            -500.0: ("suspicious_discount", "fraud_review"),
            -150.0: ("high_value_discount", "pending_approval"),
            -100.0: ("high_value_discount", "pending_approval"),
            -99.99: ("standard_discount", "processed"),
        }
        for value, (reason, status) in cases.items():
            with self.subTest(value=value):
                labels = _labels(_ret("D", value, description="DISCOUNT"))
                self.assertEqual(labels.return_type, "price_adjustment")
                self.assertEqual(labels.return_reason, reason)
                self.assertEqual(labels.refund_status, status)

    def test_auto_approved_discount_keywords_are_case_sensitive(self):
        loyal = _conditions("D", -20.0, description="LOYALTY DISCOUNT")
        lower = _conditions("D", -20.0, description="loyalty discount")
        self.assertEqual(REFUND_STATUS.explain(loyal), "auto_approved_discount")
        self.assertEqual(REFUND_STATUS.explain(lower), "default")
        self.assertEqual(label_return(loyal).refund_status, "processed")

    def test_large_discount_with_keyword_still_needs_review(self):
        labels = _labels(_ret("D", -750.0, description="BULK CONTRACT DISCOUNT"))
        self.assertEqual(labels.refund_status, "fraud_review")

    def test_manual_line(self):
        self.assertEqual(
            _labels(_ret("M", -1.25, description="MANUAL")),
            ReturnLabels("system_return", "manual_error", "pending"),
        )

    def test_shipping_lines(self):
        for code in ("POST", "DOT"):
            with self.subTest(code=code):
                self.assertEqual(
                    _labels(_ret(code, -18.0, description="POSTAGE")),
                    ReturnLabels("service_return", "shipping_error", "processed"),
                )

    def test_damage_keywords_case_insensitive(self):
        self.assertEqual(
            _labels(_ret(description="broken glass vase")),
            ReturnLabels("damaged_goods", "defective_product", "processed"),
        )

    def test_manual_override_description(self):
        self.assertEqual(
            _labels(_ret("22423", -12.75, description="PRICE OVERRIDE")),
            ReturnLabels("system_return", "manual_override", "pending"),
        )

    def test_high_value_customer_return(self):
        self.assertEqual(
            _labels(_ret("23166", -1200.0, quantity=-10, description="MEDIUM CERAMIC STORAGE JAR")),
            ReturnLabels("customer_return", "high_value", "pending_review"),
        )

    def test_exactly_minus_500_is_not_high_value(self):
        labels = _labels(_ret("23166", -500.0, quantity=-10))
        self.assertEqual(labels, ReturnLabels("customer_return", "unsatisfied", "processed"))

    def test_missing_description_never_matches_keywords(self):
        self.assertEqual(
            _labels(_ret(description=None)),
            ReturnLabels("customer_return", "unsatisfied", "processed"),
        )

    def test_cancellation_overrides_stock_code(self):
        for code in ("85123A", "M", "POST"):
            with self.subTest(code=code):
                labels = label_return(_conditions(code, -30.0, day_cancelled=True, description="DAMAGED"))
                self.assertEqual(labels, ReturnLabels("cancellation", "order_cancellation", "processed"))

    def test_cancelled_discount_falls_through_to_value_rules(self):
        cases = {-600.0: "fraud_review", -150.0: "pending_approval", -10.0: "processed"}
        for value, status in cases.items():
            with self.subTest(value=value):
                conditions = _conditions("D", value, day_cancelled=True)
                labels = label_return(conditions)
                self.assertEqual(labels.return_type, "cancellation")
                self.assertEqual(labels.return_reason, "order_cancellation")
                self.assertEqual(labels.refund_status, status)
                self.assertNotEqual(REFUND_STATUS.explain(conditions), "day_cancellation")


class ReturnsWindowTest(unittest.TestCase):
    def test_frequent_returner(self):
        rows = [
            _ret("21232", -50.0, quantity=-5, customer="12748", when=BASE_DATE + timedelta(days=i), description="STRAWBERRY CERAMIC TRINKET BOX")
            for i in range(6)
        ]
        results = classify_return_rows(rows)
        self.assertEqual(len(results), 6)
        for item in results:
            self.assertEqual(item.customer_return_count, 6)
            self.assertEqual(item.labels.return_reason, "frequent_returner")
            self.assertEqual(item.labels.refund_status, "review_required")
            self.assertEqual(item.labels.return_type, "customer_return")

    def test_five_returns_is_not_frequent(self):
        rows = [_ret(customer="12748", when=BASE_DATE + timedelta(days=i)) for i in range(5)]
        for item in classify_return_rows(rows):
            self.assertEqual(item.labels.return_reason, "unsatisfied")

    def test_discount_and_manual_rows_never_take_merchandise_reasons(self):
        rows = [
            _ret(code, value, customer="13408", when=BASE_DATE + timedelta(days=i), description="DAMAGED POSTAGE")
            for i, (code, value) in enumerate([("D", -5.0), ("M", -700.0)] * 4)
        ]
        reserved = {"defective_product", "shipping_error", "frequent_returner", "manual_override", "high_value"}
        for item in classify_return_rows(rows):
            self.assertEqual(item.customer_return_count, 8)
            self.assertNotIn(item.labels.return_reason, reserved)

    def test_day_net_quantity_uses_calendar_date(self):
        morning = _ret(quantity=-2, value=-5.0, when=datetime(2011, 3, 14, 9, 0))
        evening = _ret(quantity=-3, value=-7.5, when=datetime(2011, 3, 14, 18, 30))
        next_day = _ret(quantity=-4, value=-10.0, when=datetime(2011, 3, 15, 9, 0))
        results = classify_return_rows([morning, evening, next_day])
        self.assertEqual([r.day_net_quantity for r in results], [-5, -5, -4])
        self.assertEqual({r.customer_return_count for r in results}, {3})

    def test_window_independence(self):
        alice = [_ret(customer="13047", when=BASE_DATE + timedelta(days=i)) for i in range(2)]
        bob = [_ret(customer="17850", when=BASE_DATE + timedelta(days=i)) for i in range(3)]
        bob_changed = bob + [_ret(customer="17850", quantity=-9, value=-90.0)]

        before = compute_return_windows(alice + bob)
        after = compute_return_windows(alice + bob_changed)
        for record in alice:
            self.assertEqual(before.day_net_for(record), after.day_net_for(record))
            self.assertEqual(before.return_count_for(record), after.return_count_for(record))
        self.assertEqual(after.customer_return_count["17850"], 4)

    def test_guest_rows_share_one_window(self):
        guests = [_ret(customer=None, when=BASE_DATE + timedelta(days=i)) for i in range(6)]
        results = classify_return_rows(guests)
        self.assertEqual({r.customer_return_count for r in results}, {6})

    def test_zero_guest_id_is_its_own_window(self):
        zero = [_ret(customer="0", when=BASE_DATE + timedelta(days=i)) for i in range(3)]
        anonymous = [_ret(customer=None, when=BASE_DATE + timedelta(days=i)) for i in range(2)]
        windows = compute_return_windows(zero + anonymous)
        self.assertEqual(windows.customer_return_count["0"], 3)
        self.assertEqual(windows.customer_return_count[None], 2)
        self.assertEqual(windows.day_net_for(zero[0]), -1)

        exported = TransactionRecord.from_mapping(
            {
                "InvoiceNo": "C545221",
                "InvoiceDate": BASE_DATE,
                "StockCode": "85123A",
                "Quantity": -1,
                "UnitPrice": 25.5,
                "OrderValue": -25.5,
                "CustomerID": "0.0",
            }
        )
        self.assertEqual(windows.return_count_for(exported), 3)

    def test_totality_and_determinism(self):
        rows = [
            _ret("D", -600.0, customer="1"),
            _ret("M", -2.0, customer="2"),
            _ret("DOT", -30.0, customer="3"),
            _ret("22423", -12.0, customer="4", description="DEFECT"),
            _ret("22423", -800.0, customer="5"),
            _ret("PADS", -0.001, customer="6", description=None),
        ]
        first = classify_returns(rows)
        second = classify_returns(rows)
        self.assertEqual(first, second)
        self.assertEqual(set(first), set(rows))
        for labels in first.values():
            for column, value in zip(RETURN_LABEL_VOCABULARY, labels):
                self.assertIn(value, RETURN_LABEL_VOCABULARY[column])

    def test_does_not_mutate_input(self):
        rows = [_ret(), _ret(customer="99")]
        snapshot = list(rows)
        classify_return_rows(rows)
        self.assertEqual(rows, snapshot)

    def test_rejects_sale_lines(self):
        with self.assertRaises(PartitionMismatch):
            classify_return_rows([_ret(), _ret(quantity=2, value=5.0)])


if __name__ == "__main__":
    unittest.main()
