"""Reusable metric helpers for analytics tables."""
from __future__ import annotations

import numpy as np
import pandas as pd


def _replace_nonfinite(value, fill_value: float = 0.0):
    if isinstance(value, (pd.DataFrame, pd.Series)):
        return value.replace([np.inf, -np.inf], np.nan).fillna(fill_value)
    if np.isscalar(value) and not np.isfinite(value):
        return fill_value
    return value


def safe_div(numerator, denominator, fill_value: float = 0.0):
    """Safely divide and replace non-finite results with ``fill_value`` (defaults to 0)."""
    with np.errstate(divide="ignore", invalid="ignore"):
        result = numerator / denominator
    return _replace_nonfinite(result, fill_value=fill_value)


def ensure_period(df: pd.DataFrame, yearmonth_col: str = "YearMonth", period_col: str = "period") -> pd.DataFrame:
    """Ensure a DATE column (first day of month) derived from year-month string."""
    out = df.copy()
    if yearmonth_col not in out.columns:
        raise KeyError(f"Column '{yearmonth_col}' not found in DataFrame")
    ym = out[yearmonth_col].astype(str).str.slice(0, 7)
    out[period_col] = pd.to_datetime(ym + "-01", errors="coerce")
    return out


def identified_customers(df: pd.DataFrame, customer_col: str = "CustomerID") -> pd.Series:
    """Mask of rows with a known customer. NULL and ``"0"`` (or ``"0.0"``) are guests."""
    ids = df[customer_col].astype("string").str.strip().str.replace(r"\.0+$", "", regex=True)
    return (ids.notna() & (ids != "0") & (ids != "")).fillna(False).astype(bool)


def calc_return_rate_value(
    df: pd.DataFrame,
    *,
    returns_col: str = "returns_value",
    sales_col: str = "sales_value",
    target_col: str = "return_rate_value",
) -> pd.DataFrame:
    out = df.copy()
    out[target_col] = safe_div(out[returns_col], out[sales_col])
    return out


def calc_return_units(
    df: pd.DataFrame,
    *,
    returns_units_col: str = "returned_qty",
    base_units_col: str = "sold_qty",
    target_col: str = "return_rate_qty",
) -> pd.DataFrame:
    out = df.copy()
    out[target_col] = safe_div(out[returns_units_col], out[base_units_col])
    return out


__all__ = [
    "safe_div",
    "ensure_period",
    "identified_customers",
    "calc_return_rate_value",
    "calc_return_units",
]
