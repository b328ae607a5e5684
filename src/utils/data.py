"""Data loading helpers."""
from __future__ import annotations

from pathlib import Path

import pandas as pd

from utils.io import get_paths, logger, read_csv
from utils.schemas import clean_transactions_schema, returns_classified_schema, sales_classified_schema

TEXT_DTYPES = {
    "InvoiceNo": "string",
    "StockCode": "string",
    "CustomerID": "string",
    "Country": "string",
    "CustomerType": "string",
    "DescriptionClean": "string",
}

_SCHEMAS = {
    "sales": clean_transactions_schema,
    "returns": clean_transactions_schema,
    "sales_classified": sales_classified_schema,
    "returns_classified": returns_classified_schema,
}


def read_transactions_csv(path: str | Path) -> pd.DataFrame:
    return read_csv(path, parse_dates=["InvoiceDate"], dtype=TEXT_DTYPES)


def normalize_transactions(df: pd.DataFrame) -> pd.DataFrame:
    """Normalise keys/text and recompute ``OrderValue`` when it is absent."""
    out = df.copy()
    out["StockCode"] = out["StockCode"].astype("string").str.strip().str.upper()
    for col in ("InvoiceNo", "DescriptionClean", "Country", "CustomerType", "CustomerID"):
        if col in out.columns:
            out[col] = out[col].astype("string").str.strip()
    if "CustomerID" in out.columns:
        # 17850.0 / 0.0 come from float-typed exports of the ID column
        out["CustomerID"] = out["CustomerID"].str.replace(r"\.0+$", "", regex=True).replace("", pd.NA)
    out["InvoiceDate"] = pd.to_datetime(out["InvoiceDate"], errors="raise")
    if "OrderValue" not in out.columns:
        out["OrderValue"] = (out["Quantity"] * out["UnitPrice"]).round(2)
    return out


def load_clean_transactions(path: str | Path | None = None) -> pd.DataFrame:
    """Load the externally cleaned transactions, drop zero quantities, validate."""
    src = Path(path) if path else get_paths().bronze / "clean_transactions.csv"
    df = normalize_transactions(read_transactions_csv(src))
    invalid_qty = df["Quantity"].isna() | (df["Quantity"] == 0)
    if invalid_qty.any():
        logger.warning("Removing %s rows with zero or missing Quantity", int(invalid_qty.sum()))
    df = df.loc[~invalid_qty].copy()
    return clean_transactions_schema.validate(df, lazy=True)


def load_silver(name: str) -> pd.DataFrame:
    """Load and validate one silver artifact (``sales``, ``returns_classified``...)."""
    if name not in _SCHEMAS:
        raise KeyError(f"Unknown silver artifact '{name}'")
    df = read_transactions_csv(get_paths().silver / f"{name}.csv")
    return _SCHEMAS[name].validate(df, lazy=True)


__all__ = [
    "TEXT_DTYPES",
    "read_transactions_csv",
    "normalize_transactions",
    "load_clean_transactions",
    "load_silver",
]
