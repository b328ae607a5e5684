"""DataFrame contracts for returns intelligence artifacts."""
from __future__ import annotations

import pandera as pa
from pandera import Check, Column, DataFrameSchema

from classification.labels import RETURN_LABEL_VOCABULARY, SALE_LABEL_VOCABULARY

# ---------------------------------------------------------------------------
# BRONZE / SILVER INPUT
# ---------------------------------------------------------------------------

_TRANSACTION_COLUMNS = {
    "InvoiceNo": Column(pa.String, required=True, nullable=True),
    "InvoiceDate": Column(pa.DateTime, required=True),
    "StockCode": Column(pa.String, Check.str_length(min_value=1), required=True),
    "DescriptionClean": Column(pa.String, required=False, nullable=True),
    "Quantity": Column(pa.Int64, Check.ne(0), required=True),
    "UnitPrice": Column(pa.Float, required=True, nullable=True),
    "OrderValue": Column(pa.Float, required=True),
    "CustomerID": Column(pa.String, required=False, nullable=True),
    "Country": Column(pa.String, required=False, nullable=True),
    "CustomerType": Column(pa.String, required=False, nullable=True),
}

clean_transactions_schema = DataFrameSchema(
    dict(_TRANSACTION_COLUMNS),
    coerce=True,
    strict=False,
)

# ---------------------------------------------------------------------------
# SILVER CLASSIFIED VIEWS
# ---------------------------------------------------------------------------

sales_classified_schema = DataFrameSchema(
    {
        **_TRANSACTION_COLUMNS,
        "Quantity": Column(pa.Int64, Check.gt(0), required=True),
        **{
            name: Column(pa.String, Check.isin(list(values)), required=True)
            for name, values in SALE_LABEL_VOCABULARY.items()
        },
    },
    coerce=True,
    strict=False,
)

returns_classified_schema = DataFrameSchema(
    {
        **_TRANSACTION_COLUMNS,
        "Quantity": Column(pa.Int64, Check.lt(0), required=True),
        "IsDiscount": Column(pa.Bool, required=True),
        "CustomerReturnCount": Column(pa.Int64, Check.ge(1), required=True),
        "DayNetQuantity": Column(pa.Int64, required=True),
        **{
            name: Column(pa.String, Check.isin(list(values)), required=True)
            for name, values in RETURN_LABEL_VOCABULARY.items()
        },
    },
    coerce=True,
    strict=False,
)


__all__ = [
    "clean_transactions_schema",
    "sales_classified_schema",
    "returns_classified_schema",
]
