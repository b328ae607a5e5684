"""Return line classifier: ReturnType, ReturnReason, RefundStatus.

Classification runs in two phases. ``compute_return_windows`` first reduces
the whole partition into per-customer lookups; each row is then reduced to a
``ReturnConditions`` value once and the three ladders branch on it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Sequence

from classification import labels as L
from classification.errors import PartitionMismatch
from classification.records import TransactionRecord
from classification.rules import Rule, RuleLadder
from classification.windows import ReturnWindows, compute_return_windows
from utils.io import logger


class ReturnLabels(NamedTuple):
    return_type: str
    return_reason: str
    refund_status: str


class ReturnClassification(NamedTuple):
    record: TransactionRecord
    labels: ReturnLabels
    day_net_quantity: int
    customer_return_count: int


@dataclass(frozen=True)
class ReturnConditions:
    stock_code: str
    order_value: float
    day_cancelled: bool
    damaged: bool
    manual_override: bool
    frequent_returner: bool
    auto_approved_discount: bool

    @property
    def discount(self) -> bool:
        return self.stock_code == L.DISCOUNT

    @property
    def manual(self) -> bool:
        return self.stock_code == L.MANUAL

    @property
    def shipping(self) -> bool:
        return self.stock_code in L.SHIPPING_CODES

    @property
    def merchandise(self) -> bool:
        return self.stock_code not in L.NON_MERCHANDISE_RETURN_CODES

    @classmethod
    def of(cls, record: TransactionRecord, windows: ReturnWindows) -> "ReturnConditions":
        description = record.DescriptionClean or ""
        return cls(
            stock_code=record.StockCode,
            order_value=record.OrderValue,
            day_cancelled=windows.day_net_for(record) == 0,
            damaged=bool(L.DAMAGE_PATTERN.search(description)),
            manual_override=bool(L.MANUAL_OVERRIDE_PATTERN.search(description)),
            frequent_returner=windows.return_count_for(record) > L.FREQUENT_RETURNER_MIN_LINES,
            auto_approved_discount=any(k in description for k in L.AUTO_APPROVED_DISCOUNT_KEYWORDS),
        )


def _damaged(c: ReturnConditions) -> bool:
    return c.damaged and c.merchandise


def _manual_override(c: ReturnConditions) -> bool:
    return c.manual_override and c.merchandise


def _high_value(c: ReturnConditions) -> bool:
    return c.order_value < L.HIGH_VALUE_RETURN and c.merchandise


def _frequent_returner(c: ReturnConditions) -> bool:
    return c.frequent_returner and c.merchandise


RETURN_TYPE = RuleLadder(
    column="ReturnType",
    rules=(
        Rule("day_cancellation", lambda c: c.day_cancelled, "cancellation"),
        Rule("discount", lambda c: c.discount, "price_adjustment"),
        Rule("manual", lambda c: c.manual, "system_return"),
        Rule("shipping", lambda c: c.shipping, "service_return"),
        Rule("damaged", _damaged, "damaged_goods"),
        Rule("manual_override", _manual_override, "system_return"),
        Rule("high_value", _high_value, "customer_return"),
    ),
    default="customer_return",
)

RETURN_REASON = RuleLadder(
    column="ReturnReason",
    rules=(
        Rule("day_cancellation", lambda c: c.day_cancelled, "order_cancellation"),
        Rule(
            "suspicious_discount",
            lambda c: c.discount and c.order_value <= L.SUSPICIOUS_DISCOUNT,
            "suspicious_discount",
        ),
        Rule(
            "high_value_discount",
            lambda c: c.discount and c.order_value <= L.HIGH_VALUE_DISCOUNT,
            "high_value_discount",
        ),
        Rule("standard_discount", lambda c: c.discount, "standard_discount"),
        Rule("manual", lambda c: c.manual, "manual_error"),
        Rule("shipping", lambda c: c.shipping, "shipping_error"),
        Rule("damaged", _damaged, "defective_product"),
        Rule("manual_override", _manual_override, "manual_override"),
        Rule("high_value", _high_value, "high_value"),
        Rule("frequent_returner", _frequent_returner, "frequent_returner"),
    ),
    default="unsatisfied",
)

# Discount lines never take the cancellation shortcut here; they fall
# through to the value thresholds.
REFUND_STATUS = RuleLadder(
    column="RefundStatus",
    rules=(
        Rule("day_cancellation", lambda c: c.day_cancelled and not c.discount, "processed"),
        Rule(
            "suspicious_discount",
            lambda c: c.discount and c.order_value <= L.SUSPICIOUS_DISCOUNT,
            "fraud_review",
        ),
        Rule(
            "high_value_discount",
            lambda c: c.discount and c.order_value <= L.HIGH_VALUE_DISCOUNT,
            "pending_approval",
        ),
        Rule("auto_approved_discount", lambda c: c.discount and c.auto_approved_discount, "processed"),
        Rule("manual", lambda c: c.manual, "pending"),
        Rule("manual_override", _manual_override, "pending"),
        Rule("high_value", _high_value, "pending_review"),
        Rule("frequent_returner", _frequent_returner, "review_required"),
    ),
    default="processed",
)

RETURN_LADDERS = (RETURN_TYPE, RETURN_REASON, REFUND_STATUS)


def label_return(conditions: ReturnConditions) -> ReturnLabels:
    return ReturnLabels(*(ladder.evaluate(conditions) for ladder in RETURN_LADDERS))


def classify_return_rows(partition: Sequence[TransactionRecord]) -> List[ReturnClassification]:
    """Classify the full returns partition, one result per input row in order.

    The partition must be complete: labels for one row depend on every other
    return row of the same customer.
    """
    for record in partition:
        if not record.is_return:
            raise PartitionMismatch(
                f"Sale line (Quantity={record.Quantity}) passed to the returns classifier"
            )

    windows = compute_return_windows(partition)
    logger.debug(
        "Return windows: %s customer-days, %s customers",
        len(windows.day_net_quantity),
        len(windows.customer_return_count),
    )

    results = []
    for record in partition:
        conditions = ReturnConditions.of(record, windows)
        results.append(
            ReturnClassification(
                record=record,
                labels=label_return(conditions),
                day_net_quantity=windows.day_net_for(record),
                customer_return_count=windows.return_count_for(record),
            )
        )
    return results


def classify_returns(partition: Sequence[TransactionRecord]) -> Dict[TransactionRecord, ReturnLabels]:
    """Map each return record to its labels.

    Identical duplicate rows share one key; they always receive identical
    labels since they share every input and every window.
    """
    return {item.record: item.labels for item in classify_return_rows(partition)}


__all__ = [
    "ReturnLabels",
    "ReturnClassification",
    "ReturnConditions",
    "RETURN_TYPE",
    "RETURN_REASON",
    "REFUND_STATUS",
    "RETURN_LADDERS",
    "label_return",
    "classify_return_rows",
    "classify_returns",
]
