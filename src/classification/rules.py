"""Ordered first-match-wins rule ladders."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Rule(Generic[T]):
    name: str
    predicate: Callable[[T], bool]
    label: str


@dataclass(frozen=True)
class RuleLadder(Generic[T]):
    """Rules tested top to bottom; the first satisfied one decides the label.

    ``default`` is the unconditional last rung, so every input gets a label.
    """

    column: str
    rules: Sequence[Rule[T]]
    default: str

    def evaluate(self, subject: T) -> str:
        for rule in self.rules:
            if rule.predicate(subject):
                return rule.label
        return self.default

    def explain(self, subject: T) -> str:
        """Name of the rule that fired, or ``"default"``."""
        for rule in self.rules:
            if rule.predicate(subject):
                return rule.name
        return "default"

    @property
    def labels(self) -> tuple[str, ...]:
        seen = dict.fromkeys(rule.label for rule in self.rules)
        seen.setdefault(self.default, None)
        return tuple(seen)


__all__ = ["Rule", "RuleLadder"]
