"""Window aggregates over the full returns partition.

Both lookups are built in one group-by-reduce pass before any return row is
labelled; every row then reads the value for its whole key, never a running
total. Rows without a CustomerID share a single ``None`` key, the way a SQL
``PARTITION BY CustomerID`` groups NULLs together.
"""
from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from classification.records import TransactionRecord

DayKey = Tuple[Optional[str], date]


@dataclass(frozen=True)
class ReturnWindows:
    day_net_quantity: Mapping[DayKey, int]
    customer_return_count: Mapping[Optional[str], int]

    def day_net_for(self, record: TransactionRecord) -> int:
        return self.day_net_quantity[(record.CustomerID, record.invoice_day)]

    def return_count_for(self, record: TransactionRecord) -> int:
        return self.customer_return_count[record.CustomerID]


def compute_return_windows(returns: Iterable[TransactionRecord]) -> ReturnWindows:
    day_net: Dict[DayKey, int] = defaultdict(int)
    counts: Counter = Counter()
    for record in returns:
        day_net[(record.CustomerID, record.invoice_day)] += record.Quantity
        counts[record.CustomerID] += 1
    return ReturnWindows(
        day_net_quantity=MappingProxyType(dict(day_net)),
        customer_return_count=MappingProxyType(dict(counts)),
    )


__all__ = ["DayKey", "ReturnWindows", "compute_return_windows"]
