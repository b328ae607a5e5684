"""Label vocabulary and rule constants shared by the classifiers.

Downstream reports filter on these exact strings (e.g. ``FinancialType ==
"revenue"``), so the values are part of the public contract.
"""
from __future__ import annotations

import re

# ---------------------------------------------------------------------------
# STOCK CODES
# ---------------------------------------------------------------------------

BAD_DEBT = "B"
MANUAL = "M"
DISCOUNT = "D"
SAMPLE = "S"
POSTAGE = "POST"
DOTCOM_POSTAGE = "DOT"
AMAZON_FEE = "AMAZONFEE"
CARRIAGE = "C2"
PADS = "PADS"

SERVICE_CODES = frozenset({POSTAGE, DOTCOM_POSTAGE, AMAZON_FEE, CARRIAGE})
SHIPPING_CODES = frozenset({POSTAGE, DOTCOM_POSTAGE})
NON_MERCHANDISE_RETURN_CODES = frozenset({DISCOUNT, MANUAL})

# ---------------------------------------------------------------------------
# THRESHOLDS AND KEYWORDS
# ---------------------------------------------------------------------------

HIGH_VALUE_RETURN = -500
SUSPICIOUS_DISCOUNT = -500
HIGH_VALUE_DISCOUNT = -100
FREQUENT_RETURNER_MIN_LINES = 5

DAMAGE_PATTERN = re.compile(r"DAMAGED|BROKEN|DEFECT", re.IGNORECASE)
MANUAL_OVERRIDE_PATTERN = re.compile(r"MANUAL|OVERRIDE", re.IGNORECASE)
AUTO_APPROVED_DISCOUNT_KEYWORDS = ("LOYALTY", "CONTRACT", "BULK")

# ---------------------------------------------------------------------------
# SALES LABELS
# ---------------------------------------------------------------------------

TRANSACTION_CATEGORIES = ("product", "service", "adjustment")
PRODUCT_TYPES = (
    "regular",
    "bad_debt",
    "manual",
    "domestic_shipping",
    "international_shipping",
    "amazon_fee",
    "special_carriage",
    "accessory",
    "paid_sample",
    "free_sample",
)
FINANCIAL_TYPES = ("revenue", "fee", "adjustment", "non_revenue")

# ---------------------------------------------------------------------------
# RETURN LABELS
# ---------------------------------------------------------------------------

RETURN_TYPES = (
    "cancellation",
    "price_adjustment",
    "system_return",
    "service_return",
    "damaged_goods",
    "customer_return",
)
RETURN_REASONS = (
    "order_cancellation",
    "suspicious_discount",
    "high_value_discount",
    "standard_discount",
    "manual_error",
    "shipping_error",
    "defective_product",
    "manual_override",
    "high_value",
    "frequent_returner",
    "unsatisfied",
)
REFUND_STATUSES = (
    "processed",
    "fraud_review",
    "pending_approval",
    "pending",
    "pending_review",
    "review_required",
)

SALE_LABEL_VOCABULARY = {
    "TransactionCategory": TRANSACTION_CATEGORIES,
    "ProductType": PRODUCT_TYPES,
    "FinancialType": FINANCIAL_TYPES,
}
RETURN_LABEL_VOCABULARY = {
    "ReturnType": RETURN_TYPES,
    "ReturnReason": RETURN_REASONS,
    "RefundStatus": REFUND_STATUSES,
}


__all__ = [
    "SERVICE_CODES",
    "SHIPPING_CODES",
    "NON_MERCHANDISE_RETURN_CODES",
    "SALE_LABEL_VOCABULARY",
    "RETURN_LABEL_VOCABULARY",
    "TRANSACTION_CATEGORIES",
    "PRODUCT_TYPES",
    "FINANCIAL_TYPES",
    "RETURN_TYPES",
    "RETURN_REASONS",
    "REFUND_STATUSES",
]
