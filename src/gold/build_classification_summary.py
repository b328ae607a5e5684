"""Validation summaries of the sales and returns label distributions."""
from __future__ import annotations

from typing import Sequence

import pandas as pd

from classification.labels import RETURN_LABEL_VOCABULARY, SALE_LABEL_VOCABULARY
from utils.data import load_silver
from utils.io import get_paths, logger, write_parquet

PATHS = get_paths()
GOLD_DIR = PATHS.gold


def summarize_labels(df: pd.DataFrame, label_cols: Sequence[str]) -> pd.DataFrame:
    """Row count and OrderValue range for each label combination."""
    cols = list(label_cols)
    missing = [c for c in cols if c not in df.columns]
    if missing:
        raise KeyError(f"Missing label columns: {missing}")
    summary = (
        df.groupby(cols, dropna=False)
        .agg(
            n_rows=("OrderValue", "size"),
            min_val=("OrderValue", "min"),
            max_val=("OrderValue", "max"),
        )
        .reset_index()
        .sort_values(cols)
        .reset_index(drop=True)
    )
    summary["n_rows"] = summary["n_rows"].astype("Int64")
    return summary


def build_classification_summary(
    sales: pd.DataFrame | None = None,
    returns: pd.DataFrame | None = None,
) -> dict[str, pd.DataFrame]:
    sales = sales if sales is not None else load_silver("sales_classified")
    returns = returns if returns is not None else load_silver("returns_classified")
    return {
        "sales_classification_summary": summarize_labels(sales, SALE_LABEL_VOCABULARY),
        "returns_classification_summary": summarize_labels(returns, RETURN_LABEL_VOCABULARY),
    }


def main() -> dict[str, pd.DataFrame]:
    outputs = build_classification_summary()
    for name, df in outputs.items():
        write_parquet(df, GOLD_DIR / f"{name}.parquet")
    logger.info(
        "sales_classification_summary rows=%s | returns_classification_summary rows=%s",
        len(outputs["sales_classification_summary"]),
        len(outputs["returns_classification_summary"]),
    )
    return outputs


if __name__ == "__main__":
    main()
