"""Quick QC checks for GOLD parquet outputs."""
from __future__ import annotations

import sys
from typing import Dict, Iterable

import numpy as np
import pandas as pd

sys.path.insert(0, "src")

from classification.labels import RETURN_LABEL_VOCABULARY, SALE_LABEL_VOCABULARY  # noqa: E402
from utils.io import get_paths, logger  # noqa: E402

PATHS = get_paths()
LABEL_VOCABULARY = {**SALE_LABEL_VOCABULARY, **RETURN_LABEL_VOCABULARY}


def _read_parquet_map() -> Dict[str, pd.DataFrame]:
    data = {}
    for parquet in PATHS.gold.glob("*.parquet"):
        data[parquet.stem] = pd.read_parquet(parquet)
    return data


def _check_nan_inf(name: str, df: pd.DataFrame, columns: Iterable[str]) -> int:
    issues = 0
    for col in columns:
        if col not in df.columns:
            continue
        series = pd.to_numeric(df[col], errors="coerce")
        n_nan = int(series.isna().sum())
        n_inf = int(np.isinf(series).sum())
        if n_nan or n_inf:
            logger.warning("[%s] Column '%s' has NaN=%s, Inf=%s", name, col, n_nan, n_inf)
            issues += 1
    return issues


def check_label_vocabulary(name: str, df: pd.DataFrame) -> int:
    """Count label columns holding values outside the published vocabulary."""
    issues = 0
    for col, allowed in LABEL_VOCABULARY.items():
        if col not in df.columns:
            continue
        unknown = sorted(set(df[col].dropna().astype(str)) - set(allowed))
        if unknown:
            logger.error("[%s] Column '%s' has unknown labels: %s", name, col, unknown)
            issues += 1
    return issues


def _check_summary_totals(data: Dict[str, pd.DataFrame]) -> int:
    if "returns_classification_summary" not in data or "returns_by_type" not in data:
        return 0
    summary_rows = int(data["returns_classification_summary"]["n_rows"].sum())
    by_type_rows = int(data["returns_by_type"]["n_transactions"].sum())
    if summary_rows != by_type_rows:
        logger.error("Return row counts disagree: summary=%s by_type=%s", summary_rows, by_type_rows)
        return 1
    logger.info("Return row counts aligned (%s rows)", summary_rows)
    return 0


def main() -> int:
    data = _read_parquet_map()
    if not data:
        raise FileNotFoundError(f"No parquet outputs found in {PATHS.gold}")

    issues = 0
    for name, df in sorted(data.items()):
        logger.info("[QC] %s rows=%s cols=%s", name, len(df), len(df.columns))
        issues += check_label_vocabulary(name, df)
        issues += _check_nan_inf(
            name, df, ["return_rate_value", "return_rate_qty", "avg_return_value", "avg_return_value_abs"]
        )
    issues += _check_summary_totals(data)
    logger.info("QC finished with %s issue(s)", issues)
    return issues


if __name__ == "__main__":
    sys.exit(1 if main() else 0)
