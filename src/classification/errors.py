"""Classification error kinds."""
from __future__ import annotations

from typing import Optional


class ClassificationError(Exception):
    """Base class for errors raised by the classification engine."""


class MalformedRecord(ClassificationError):
    """A record is missing a field the rule ladders compare against."""

    def __init__(self, message: str, *, invoice_no: Optional[str] = None) -> None:
        self.invoice_no = invoice_no
        if invoice_no is not None:
            message = f"{message} (InvoiceNo={invoice_no})"
        super().__init__(message)


class PartitionMismatch(ClassificationError):
    """A sale line reached the returns classifier, or the reverse."""


__all__ = ["ClassificationError", "MalformedRecord", "PartitionMismatch"]
