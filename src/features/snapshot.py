"""Dataset-wide constants computed once and passed to consumers explicitly."""
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from features.metrics import identified_customers


@dataclass(frozen=True)
class ReferenceSnapshot:
    max_invoice_date: pd.Timestamp
    first_month: str
    last_month: str


def reference_snapshot(sales_classified: pd.DataFrame) -> ReferenceSnapshot:
    """Snapshot over revenue lines from identified customers."""
    mask = (sales_classified["FinancialType"] == "revenue") & identified_customers(sales_classified)
    dates = pd.to_datetime(sales_classified.loc[mask, "InvoiceDate"])
    if dates.empty:
        raise ValueError("No revenue lines from identified customers; cannot build snapshot")
    return ReferenceSnapshot(
        max_invoice_date=dates.max(),
        first_month=dates.min().strftime("%Y-%m"),
        last_month=dates.max().strftime("%Y-%m"),
    )


__all__ = ["ReferenceSnapshot", "reference_snapshot"]
