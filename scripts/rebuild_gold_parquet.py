"""Rebuild all GOLD parquet outputs."""
from __future__ import annotations

import sys

sys.path.insert(0, "src")

from run_pipeline import load_config, run_pipeline  # noqa: E402
from utils.io import logger  # noqa: E402


def _gold_targets() -> list[str]:
    artifacts = load_config()
    return [name for name, spec in artifacts.items() if spec.get("layer") == "gold"]


def main() -> None:
    targets = _gold_targets()
    if not targets:
        raise RuntimeError("No gold artifacts found in configuration")
    logger.info("Rebuilding gold parquet outputs: %s", ", ".join(targets))
    run_pipeline(targets)


if __name__ == "__main__":
    main()
