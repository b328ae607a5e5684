"""Transaction record model and partitioning."""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from classification.errors import MalformedRecord

RECORD_COLUMNS = [
    "InvoiceNo",
    "InvoiceDate",
    "StockCode",
    "DescriptionClean",
    "Quantity",
    "UnitPrice",
    "OrderValue",
    "CustomerID",
    "Country",
    "CustomerType",
]
REQUIRED_COLUMNS = ("InvoiceDate", "StockCode", "Quantity", "OrderValue")
_FLOAT_SUFFIX = re.compile(r"\.0+$")


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _optional_text(value: Any) -> Optional[str]:
    if _is_missing(value):
        return None
    text = str(value).strip()
    return text or None


def _customer_id(value: Any) -> Optional[str]:
    # CSV round-trips turn 12345 into 12345.0, as a float or as text
    if isinstance(value, float) and not _is_missing(value) and value.is_integer():
        value = int(value)
    text = _optional_text(value)
    if text is None:
        return None
    return _FLOAT_SUFFIX.sub("", text) or None


@dataclass(frozen=True)
class TransactionRecord:
    """One cleaned invoice line. Immutable; the classifiers only read it."""

    InvoiceNo: Optional[str]
    InvoiceDate: datetime
    StockCode: str
    DescriptionClean: Optional[str]
    Quantity: int
    UnitPrice: Optional[float]
    OrderValue: float
    CustomerID: Optional[str] = None
    Country: Optional[str] = None
    CustomerType: Optional[str] = None

    def __post_init__(self) -> None:
        for name in REQUIRED_COLUMNS:
            if _is_missing(getattr(self, name)):
                raise MalformedRecord(f"{name} is missing", invoice_no=self.InvoiceNo)
        if not str(self.StockCode).strip():
            raise MalformedRecord("StockCode is empty", invoice_no=self.InvoiceNo)
        if self.Quantity == 0:
            raise MalformedRecord("Quantity is zero", invoice_no=self.InvoiceNo)

    @property
    def is_return(self) -> bool:
        return self.Quantity < 0

    @property
    def invoice_day(self) -> date:
        return self.InvoiceDate.date()

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "TransactionRecord":
        """Build a record from a row mapping (e.g. ``DataFrame.itertuples`` dict).

        Missing required values raise ``MalformedRecord`` instead of being
        coerced, so a bad row never falls through to a default label.
        """
        invoice_no = _optional_text(row.get("InvoiceNo"))
        for name in REQUIRED_COLUMNS:
            if _is_missing(row.get(name)):
                raise MalformedRecord(f"{name} is missing", invoice_no=invoice_no)

        quantity = row["Quantity"]
        try:
            quantity_num = float(quantity)
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(f"Quantity is not numeric: {quantity!r}", invoice_no=invoice_no) from exc
        if not quantity_num.is_integer():
            raise MalformedRecord(f"Quantity is not integral: {quantity!r}", invoice_no=invoice_no)

        unit_price = row.get("UnitPrice")
        try:
            order_value = float(row["OrderValue"])
            unit_price = None if _is_missing(unit_price) else float(unit_price)
            invoice_date = pd.Timestamp(row["InvoiceDate"]).to_pydatetime()
        except (TypeError, ValueError) as exc:
            raise MalformedRecord(str(exc), invoice_no=invoice_no) from exc

        return cls(
            InvoiceNo=invoice_no,
            InvoiceDate=invoice_date,
            StockCode=str(row["StockCode"]).strip().upper(),
            DescriptionClean=_optional_text(row.get("DescriptionClean")),
            Quantity=int(quantity_num),
            UnitPrice=unit_price,
            OrderValue=order_value,
            CustomerID=_customer_id(row.get("CustomerID")),
            Country=_optional_text(row.get("Country")),
            CustomerType=_optional_text(row.get("CustomerType")),
        )


def records_from_frame(df: pd.DataFrame) -> List[TransactionRecord]:
    """Convert a transactions frame into records, failing on the first bad row."""
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise KeyError(f"Missing columns: {missing}")
    return [TransactionRecord.from_mapping(row) for row in df.to_dict(orient="records")]


def partition_records(
    records: Iterable[TransactionRecord],
) -> Tuple[List[TransactionRecord], List[TransactionRecord]]:
    """Split records into (sales, returns) by quantity sign."""
    sales: List[TransactionRecord] = []
    returns: List[TransactionRecord] = []
    for record in records:
        (returns if record.is_return else sales).append(record)
    return sales, returns


__all__ = [
    "RECORD_COLUMNS",
    "REQUIRED_COLUMNS",
    "TransactionRecord",
    "records_from_frame",
    "partition_records",
]
