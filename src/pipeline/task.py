"""Artifact tasks with dependency-first execution."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Sequence

from utils.io import get_paths, logger


@dataclass
class Task:
    name: str
    run: Callable[[], object]
    layer: str = "silver"
    outputs: Sequence[str] = ()
    requires: List["Task"] = field(default_factory=list)
    _has_run: bool = field(default=False, init=False, repr=False)

    def output_paths(self) -> List[Path]:
        base = get_paths().base
        return [base / output for output in self.outputs]

    def execute(self, force: bool = False) -> None:
        if self._has_run and not force:
            logger.debug("Skipping task %s (already completed)", self.name)
            return
        for dependency in self.requires:
            dependency.execute(force=force)
        logger.info("Running task: %s [%s]", self.name, self.layer)
        started = time.perf_counter()
        self.run()
        missing = [str(p) for p in self.output_paths() if not p.exists()]
        if missing:
            raise RuntimeError(f"Task '{self.name}' did not produce: {missing}")
        logger.info("Finished task: %s in %.2fs", self.name, time.perf_counter() - started)
        self._has_run = True


__all__ = ["Task"]
