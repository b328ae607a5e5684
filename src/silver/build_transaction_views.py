"""Split cleaned transactions into the SALES, RETURNS and SALES_DATED views."""
from __future__ import annotations

import argparse
import sys

import pandas as pd

from classification.frames import split_partitions
from utils.data import load_clean_transactions
from utils.io import get_paths, logger, write_csv

PATHS = get_paths()
DEFAULT_INPUT = PATHS.bronze / "clean_transactions.csv"
VIEW_COLUMNS = [
    "InvoiceNo",
    "InvoiceDate",
    "StockCode",
    "DescriptionClean",
    "Quantity",
    "UnitPrice",
    "OrderValue",
    "CustomerID",
    "Country",
    "CustomerType",
]


def add_date_parts(sales: pd.DataFrame) -> pd.DataFrame:
    """Calendar parts for time series work. Weekday runs 1=Sunday .. 7=Saturday."""
    out = sales.copy()
    ts = pd.to_datetime(out["InvoiceDate"])
    out["invoice_date"] = ts.dt.date
    out["invoice_year"] = ts.dt.year
    out["invoice_month"] = ts.dt.month
    out["invoice_year_month"] = ts.dt.to_period("M").astype(str)
    out["invoice_weekday"] = (ts.dt.dayofweek + 1) % 7 + 1
    out["invoice_quarter"] = ts.dt.quarter
    return out


def build_transaction_views(df: pd.DataFrame) -> dict[str, pd.DataFrame]:
    cols = [c for c in VIEW_COLUMNS if c in df.columns]
    sales, returns = split_partitions(df[cols])
    logger.info("sales rows=%s | returns rows=%s", len(sales), len(returns))
    return {
        "sales": sales,
        "returns": returns,
        "sales_dated": add_date_parts(sales),
    }


def main(argv: list[str] | None = None) -> dict[str, pd.DataFrame]:
    parser = argparse.ArgumentParser(description="Build SALES / RETURNS views")
    parser.add_argument("--inp", default=str(DEFAULT_INPUT))
    args = parser.parse_args([] if argv is None else argv)

    views = build_transaction_views(load_clean_transactions(args.inp))
    for name, view in views.items():
        write_csv(view, PATHS.silver / f"{name}.csv", date_format="%Y-%m-%d %H:%M:%S")
    return views


if __name__ == "__main__":
    main(sys.argv[1:])
