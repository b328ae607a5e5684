"""Pipeline runner for returns intelligence artifacts."""
from __future__ import annotations

import argparse
import importlib
from pathlib import Path
from typing import Callable, Dict, Iterable, List

import yaml

from pipeline.task import Task
from utils.io import get_paths, logger

CONFIG_PATH = get_paths().configs / "artifacts.yml"


def _resolve_entrypoint(entrypoint: str) -> Callable[[], object]:
    if ":" not in entrypoint:
        raise ValueError(f"Entrypoint '{entrypoint}' must be 'module:function'")
    module_name, func_name = entrypoint.split(":", maxsplit=1)
    module = importlib.import_module(module_name)
    return getattr(module, func_name)


def load_config(path: Path = CONFIG_PATH) -> Dict[str, dict]:
    if not path.exists():
        raise FileNotFoundError(f"Pipeline config not found: {path}")
    with path.open("r", encoding="utf-8") as fh:
        config = yaml.safe_load(fh) or {}
    return config.get("artifacts", {})


def build_tasks(artifact_specs: Dict[str, dict]) -> Dict[str, Task]:
    output_map: Dict[str, str] = {}
    for name, spec in artifact_specs.items():
        for output in spec.get("outputs", []) or []:
            output_map[output] = name

    tasks: Dict[str, Task] = {}
    for name, spec in artifact_specs.items():
        entrypoint = spec.get("entrypoint")
        if not entrypoint:
            raise ValueError(f"Artifact '{name}' missing 'entrypoint'")
        tasks[name] = Task(
            name=name,
            run=_resolve_entrypoint(entrypoint),
            layer=spec.get("layer", "silver"),
            outputs=spec.get("outputs", []) or [],
        )

    for name, spec in artifact_specs.items():
        for input_path in spec.get("inputs", []) or []:
            dependency_name = output_map.get(input_path)
            if dependency_name and dependency_name != name:
                tasks[name].requires.append(tasks[dependency_name])
    return tasks


def run_pipeline(targets: Iterable[str] | None = None, *, config_path: Path = CONFIG_PATH) -> None:
    artifact_specs = load_config(config_path)
    if not artifact_specs:
        raise ValueError(f"No artifacts defined in {config_path}")

    tasks = build_tasks(artifact_specs)
    selected = list(targets) if targets else list(artifact_specs)
    for target in selected:
        if target not in tasks:
            raise KeyError(f"Unknown artifact '{target}'")
        tasks[target].execute()


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run returns intelligence pipeline")
    parser.add_argument(
        "artifacts",
        nargs="*",
        help="Specific artifacts to build (default: all).",
    )
    args = parser.parse_args(argv)

    logger.info("Starting pipeline (targets=%s)", args.artifacts or "ALL")
    run_pipeline(args.artifacts or None)
    logger.info("Pipeline finished")


if __name__ == "__main__":
    main()
