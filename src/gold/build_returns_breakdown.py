"""Build GOLD returns breakdown tables from the classified returns view."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import pandas as pd

from features.metrics import safe_div
from utils.data import load_silver, read_transactions_csv
from utils.io import get_paths, logger, write_parquet

PATHS = get_paths()
DEFAULT_INPUT = PATHS.silver / "returns_classified.csv"
GOLD_DIR = PATHS.gold


def returns_totals(returns: pd.DataFrame) -> pd.DataFrame:
    return pd.DataFrame(
        {
            "metric_type": ["returns"],
            "total_return_qty": [-returns["Quantity"].sum()],
            "total_return_value": [round(-returns["OrderValue"].sum(), 2)],
        }
    )


def returns_by_type(returns: pd.DataFrame) -> pd.DataFrame:
    """Most negative total first (largest loss)."""
    out = returns.groupby("ReturnType").agg(
        n_transactions=("OrderValue", "size"),
        total_return_value=("OrderValue", "sum"),
    ).reset_index()
    out["total_return_value_abs"] = -out["total_return_value"]
    out["avg_return_value"] = safe_div(out["total_return_value"], out["n_transactions"])
    money = ["total_return_value", "total_return_value_abs", "avg_return_value"]
    out[money] = out[money].round(2)
    return out.sort_values("total_return_value").reset_index(drop=True)


def returns_by_reason(returns: pd.DataFrame) -> pd.DataFrame:
    keys = ["ReturnType", "ReturnReason", "RefundStatus"]
    out = returns.groupby(keys).agg(
        n_transactions=("OrderValue", "size"),
        total_return_value=("OrderValue", "sum"),
    ).reset_index()
    out["total_return_value_abs"] = -out["total_return_value"]
    out["avg_return_value_abs"] = safe_div(out["total_return_value_abs"], out["n_transactions"])
    out = out.drop(columns="total_return_value")
    out[["total_return_value_abs", "avg_return_value_abs"]] = (
        out[["total_return_value_abs", "avg_return_value_abs"]].round(2)
    )
    return out.sort_values("total_return_value_abs", ascending=False).reset_index(drop=True)


def returns_by_country(returns: pd.DataFrame) -> pd.DataFrame:
    df = returns.copy()
    df["Country"] = df["Country"].fillna("Unspecified")
    out = df.groupby("Country").agg(
        n_return_transactions=("OrderValue", "size"),
        total_return_value=("OrderValue", "sum"),
    ).reset_index()
    out["total_return_value_abs"] = (-out["total_return_value"]).round(2)
    out = out.drop(columns="total_return_value")
    return out.sort_values("total_return_value_abs", ascending=False).reset_index(drop=True)


def most_returned_products(returns: pd.DataFrame, n: int = 20) -> pd.DataFrame:
    out = (
        returns.groupby(["StockCode", "DescriptionClean"], dropna=False)["Quantity"]
        .sum()
        .mul(-1)
        .rename("total_return_qty")
        .reset_index()
    )
    return out.sort_values("total_return_qty", ascending=False).head(n).reset_index(drop=True)


def build_returns_breakdown(df: pd.DataFrame) -> dict[str, pd.DataFrame]:
    return {
        "returns_totals": returns_totals(df),
        "returns_by_type": returns_by_type(df),
        "returns_by_reason_status": returns_by_reason(df),
        "returns_by_country": returns_by_country(df),
        "returns_top_products": most_returned_products(df),
    }


def main(argv: list[str] | None = None) -> dict[str, pd.DataFrame]:
    parser = argparse.ArgumentParser(description="Build returns breakdown tables")
    parser.add_argument("--inp", default=str(DEFAULT_INPUT))
    parser.add_argument("--outdir", default=str(GOLD_DIR))
    args = parser.parse_args([] if argv is None else argv)

    if Path(args.inp) == DEFAULT_INPUT:
        df = load_silver("returns_classified")
    else:
        df = read_transactions_csv(args.inp)
    outputs = build_returns_breakdown(df)

    outdir = Path(args.outdir)
    for name, table in outputs.items():
        write_parquet(table, outdir / f"{name}.parquet")
    logger.info(
        " | ".join(f"{name} rows=%s" for name in outputs),
        *(len(table) for table in outputs.values()),
    )
    return outputs


if __name__ == "__main__":
    main(sys.argv[1:])
