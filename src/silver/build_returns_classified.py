"""Build the RETURNS_CLASSIFIED view.

The whole returns partition is loaded at once; per-customer windows need
every return line before any line can be labelled.
"""
from __future__ import annotations

import pandas as pd

from classification.frames import classify_returns_frame
from utils.data import load_silver
from utils.io import get_paths, logger, write_csv
from utils.schemas import returns_classified_schema

PATHS = get_paths()
OUTPUT_PATH = PATHS.silver / "returns_classified.csv"


def build_returns_classified(df: pd.DataFrame | None = None) -> pd.DataFrame:
    returns = df.copy() if df is not None else load_silver("returns")
    classified = classify_returns_frame(returns)
    return returns_classified_schema.validate(classified, lazy=True)


def main() -> pd.DataFrame:
    classified = build_returns_classified()
    write_csv(classified, OUTPUT_PATH, date_format="%Y-%m-%d %H:%M:%S")
    logger.info("returns_classified rows=%s", len(classified))
    return classified


if __name__ == "__main__":
    main()
