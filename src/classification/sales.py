"""Sales line classifier: TransactionCategory, ProductType, FinancialType."""
from __future__ import annotations

from typing import Iterable, List, NamedTuple

from classification import labels as L
from classification.errors import PartitionMismatch
from classification.records import TransactionRecord
from classification.rules import Rule, RuleLadder


class SaleLabels(NamedTuple):
    transaction_category: str
    product_type: str
    financial_type: str


def _code(*codes: str):
    wanted = frozenset(codes)
    return lambda r: r.StockCode in wanted


def _free_sample(r: TransactionRecord) -> bool:
    return r.StockCode == L.SAMPLE and r.OrderValue == 0


def _paid_sample(r: TransactionRecord) -> bool:
    return r.StockCode == L.SAMPLE and r.OrderValue > 0


# S lines with a negative OrderValue match no sample rung and land on the
# regular/revenue defaults.
TRANSACTION_CATEGORY = RuleLadder(
    column="TransactionCategory",
    rules=(
        Rule("bad_debt", _code(L.BAD_DEBT), "adjustment"),
        Rule("manual", _code(L.MANUAL), "adjustment"),
        Rule("service_fee", _code(*L.SERVICE_CODES), "service"),
        Rule("free_sample", _free_sample, "adjustment"),
    ),
    default="product",
)

PRODUCT_TYPE = RuleLadder(
    column="ProductType",
    rules=(
        Rule("bad_debt", _code(L.BAD_DEBT), "bad_debt"),
        Rule("manual", _code(L.MANUAL), "manual"),
        Rule("postage", _code(L.POSTAGE), "domestic_shipping"),
        Rule("dotcom_postage", _code(L.DOTCOM_POSTAGE), "international_shipping"),
        Rule("amazon_fee", _code(L.AMAZON_FEE), "amazon_fee"),
        Rule("carriage", _code(L.CARRIAGE), "special_carriage"),
        Rule("pads", _code(L.PADS), "accessory"),
        Rule("paid_sample", _paid_sample, "paid_sample"),
        Rule("free_sample", _free_sample, "free_sample"),
    ),
    default="regular",
)

FINANCIAL_TYPE = RuleLadder(
    column="FinancialType",
    rules=(
        Rule("bad_debt", _code(L.BAD_DEBT), "adjustment"),
        Rule("service_fee", _code(*L.SERVICE_CODES), "fee"),
        Rule("free_sample", _free_sample, "non_revenue"),
    ),
    default="revenue",
)

SALE_LADDERS = (TRANSACTION_CATEGORY, PRODUCT_TYPE, FINANCIAL_TYPE)


def classify_sale(record: TransactionRecord) -> SaleLabels:
    """Label one sales line. Pure: depends on nothing but ``record``."""
    if record.is_return:
        raise PartitionMismatch(
            f"Return line (Quantity={record.Quantity}) passed to the sales classifier"
        )
    return SaleLabels(*(ladder.evaluate(record) for ladder in SALE_LADDERS))


def classify_sales(records: Iterable[TransactionRecord]) -> List[SaleLabels]:
    return [classify_sale(record) for record in records]


__all__ = [
    "SaleLabels",
    "TRANSACTION_CATEGORY",
    "PRODUCT_TYPE",
    "FINANCIAL_TYPE",
    "SALE_LADDERS",
    "classify_sale",
    "classify_sales",
]
