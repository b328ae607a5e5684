"""DataFrame adapters around the record-level classifiers."""
from __future__ import annotations

from typing import Tuple

import pandas as pd

from classification import labels as L
from classification.records import records_from_frame
from classification.returns import RETURN_LADDERS, classify_return_rows
from classification.sales import SALE_LADDERS, classify_sales
from utils.io import logger


def split_partitions(df: pd.DataFrame) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split a transactions frame into (sales, returns) by quantity sign.

    Zero or missing quantities belong to neither partition and are dropped.
    """
    sales = df[df["Quantity"] > 0].copy()
    returns = df[df["Quantity"] < 0].copy()
    dropped = len(df) - len(sales) - len(returns)
    if dropped:
        logger.warning("Dropped %s rows with zero or missing Quantity", dropped)
    return sales, returns


def _log_distribution(df: pd.DataFrame, columns) -> None:
    counts = df.groupby(list(columns), dropna=False).size()
    logger.info("Label distribution (%s rows):\n%s", len(df), counts.to_string())


def classify_sales_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``df`` with the three sales label columns attached."""
    out = df.copy()
    labels = classify_sales(records_from_frame(out))
    for position, ladder in enumerate(SALE_LADDERS):
        out[ladder.column] = [item[position] for item in labels]
    if not out.empty:
        _log_distribution(out, L.SALE_LABEL_VOCABULARY)
    return out


def classify_returns_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``df`` with return labels and the audit aggregates."""
    out = df.copy()
    results = classify_return_rows(records_from_frame(out))
    out["IsDiscount"] = out["StockCode"].astype(str).str.strip().str.upper() == L.DISCOUNT
    out["CustomerReturnCount"] = [item.customer_return_count for item in results]
    out["DayNetQuantity"] = [item.day_net_quantity for item in results]
    for position, ladder in enumerate(RETURN_LADDERS):
        out[ladder.column] = [item.labels[position] for item in results]
    if not out.empty:
        _log_distribution(out, L.RETURN_LABEL_VOCABULARY)
    return out


__all__ = ["split_partitions", "classify_sales_frame", "classify_returns_frame"]
