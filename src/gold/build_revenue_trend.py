"""Generate GOLD revenue tables from the classified views.

Only ``FinancialType == "revenue"`` lines count as revenue; fees, bad debt
and free samples are excluded.
"""
from __future__ import annotations

import pandas as pd

from features.metrics import calc_return_rate_value, calc_return_units, ensure_period
from features.snapshot import ReferenceSnapshot, reference_snapshot
from utils.data import load_silver
from utils.io import get_paths, logger, write_parquet

PATHS = get_paths()
GOLD_DIR = PATHS.gold


def _year_month(dates: pd.Series) -> pd.Series:
    return pd.to_datetime(dates).dt.to_period("M").astype(str)


def revenue_lines(sales_classified: pd.DataFrame) -> pd.DataFrame:
    return sales_classified[sales_classified["FinancialType"] == "revenue"].copy()


def monthly_revenue_trend(
    sales_classified: pd.DataFrame,
    returns_classified: pd.DataFrame,
    snapshot: ReferenceSnapshot,
) -> pd.DataFrame:
    sales = revenue_lines(sales_classified)
    sales["YearMonth"] = _year_month(sales["InvoiceDate"])
    returns = returns_classified.copy()
    returns["YearMonth"] = _year_month(returns["InvoiceDate"])

    monthly = sales.groupby("YearMonth").agg(sales_value=("OrderValue", "sum")).reset_index()
    ret_m = (
        returns.groupby("YearMonth")["OrderValue"].sum().mul(-1).rename("returns_value").reset_index()
    )
    monthly = monthly.merge(ret_m, on="YearMonth", how="left")
    monthly["returns_value"] = monthly["returns_value"].fillna(0.0)
    monthly = calc_return_rate_value(monthly)
    monthly = ensure_period(monthly, "YearMonth", "period")
    monthly["as_of"] = snapshot.max_invoice_date

    monthly[["sales_value", "returns_value"]] = monthly[["sales_value", "returns_value"]].round(2)
    monthly["return_rate_value"] = monthly["return_rate_value"].round(4)
    cols = ["period", "YearMonth", "sales_value", "returns_value", "return_rate_value", "as_of"]
    return monthly.sort_values("YearMonth")[cols].reset_index(drop=True)


def top_products(sales_classified: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    sales = revenue_lines(sales_classified)
    mask = (sales["TransactionCategory"] == "product") & (sales["OrderValue"] > 0)
    out = (
        sales[mask]
        .groupby("DescriptionClean", dropna=False)
        .agg(units_sold=("Quantity", "sum"), revenue=("OrderValue", "sum"))
        .reset_index()
    )
    out["revenue"] = out["revenue"].round(2)
    return out.sort_values("revenue", ascending=False).head(n).reset_index(drop=True)


def product_return_rates(
    sales_classified: pd.DataFrame,
    returns_classified: pd.DataFrame,
    *,
    min_sold: int = 100,
    n: int = 50,
) -> pd.DataFrame:
    """Units returned over units sold per product, for products sold at volume.

    Both sides are summed per StockCode before the join, so each return line
    is counted once regardless of how many sale lines share its code.
    """
    sold = (
        sales_classified.groupby(["StockCode", "DescriptionClean"], dropna=False)
        .agg(sold_qty=("Quantity", "sum"))
        .reset_index()
    )
    returned = (
        returns_classified.groupby("StockCode")["Quantity"].sum().mul(-1).rename("returned_qty").reset_index()
    )
    out = sold.merge(returned, on="StockCode", how="left")
    out["returned_qty"] = out["returned_qty"].fillna(0).astype("int64")
    out = calc_return_units(out)
    out["return_rate_qty"] = out["return_rate_qty"].round(4)
    out = out[(out["sold_qty"] >= min_sold) & (out["return_rate_qty"] > 0)]
    return out.sort_values("return_rate_qty", ascending=False).head(n).reset_index(drop=True)


def top_countries(sales_classified: pd.DataFrame, n: int = 5) -> pd.DataFrame:
    sales = revenue_lines(sales_classified)
    sales["Country"] = sales["Country"].fillna("Unspecified")
    out = sales.groupby("Country").agg(revenue=("OrderValue", "sum")).reset_index()
    out["revenue"] = out["revenue"].round(2)
    return out.sort_values("revenue", ascending=False).head(n).reset_index(drop=True)


def build_revenue_tables(
    sales: pd.DataFrame | None = None,
    returns: pd.DataFrame | None = None,
) -> dict[str, pd.DataFrame]:
    sales = sales if sales is not None else load_silver("sales_classified")
    returns = returns if returns is not None else load_silver("returns_classified")
    snapshot = reference_snapshot(sales)
    logger.info(
        "Revenue snapshot as of %s (%s -> %s)",
        snapshot.max_invoice_date,
        snapshot.first_month,
        snapshot.last_month,
    )
    return {
        "revenue_monthly": monthly_revenue_trend(sales, returns, snapshot),
        "revenue_top_products": top_products(sales),
        "revenue_top_countries": top_countries(sales),
        "product_return_rates": product_return_rates(sales, returns),
    }


def main() -> dict[str, pd.DataFrame]:
    outputs = build_revenue_tables()
    for name, table in outputs.items():
        write_parquet(table, GOLD_DIR / f"{name}.parquet")
    logger.info("revenue_monthly rows=%s", len(outputs["revenue_monthly"]))
    return outputs


if __name__ == "__main__":
    main()
