"""Build the SALES_CLASSIFIED view."""
from __future__ import annotations

import pandas as pd

from classification.frames import classify_sales_frame
from utils.data import load_silver
from utils.io import get_paths, logger, write_csv
from utils.schemas import sales_classified_schema

PATHS = get_paths()
OUTPUT_PATH = PATHS.silver / "sales_classified.csv"


def build_sales_classified(df: pd.DataFrame | None = None) -> pd.DataFrame:
    sales = df.copy() if df is not None else load_silver("sales")
    classified = classify_sales_frame(sales)
    return sales_classified_schema.validate(classified, lazy=True)


def main() -> pd.DataFrame:
    classified = build_sales_classified()
    write_csv(classified, OUTPUT_PATH, date_format="%Y-%m-%d %H:%M:%S")
    logger.info("sales_classified rows=%s", len(classified))
    return classified


if __name__ == "__main__":
    main()
