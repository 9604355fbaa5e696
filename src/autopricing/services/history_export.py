"""
History export - tabular CSV/Excel downloads of the calculation history.
"""
import io
from typing import Iterable

import pandas as pd

from ..engine.models import ItemizedRecord, PricingRecord

EXPORT_COLUMNS = [
    'Date', 'Mode', 'Product', 'Base Cost', 'Profit', 'Discount', 'Tax',
    'Cost / Unit', 'Markup %', 'VAT', 'Final Price',
]


def _row(record: PricingRecord) -> dict:
    row = {
        'Date': record.timestamp,
        'Mode': record.mode.value,
        'Product': record.product_name,
        'Final Price': round(record.final_price, 2),
    }
    if isinstance(record, ItemizedRecord):
        row.update({
            'Base Cost': round(record.base_cost, 2),
            'Profit': round(record.profit_amount, 2),
            'Discount': round(record.discount_amount, 2),
            'Tax': round(record.tax_amount, 2),
        })
    else:
        row.update({
            'Cost / Unit': round(record.cost_per_unit, 2),
            'Markup %': record.markup_percentage,
            'VAT': round(record.vat_amount, 2),
        })
    return row


def history_frame(records: Iterable[PricingRecord]) -> pd.DataFrame:
    """One row per record, currency rounded to 2 decimals."""
    return pd.DataFrame([_row(r) for r in records], columns=EXPORT_COLUMNS)


def to_csv(records: Iterable[PricingRecord]) -> str:
    return history_frame(records).to_csv(index=False)


def to_excel(records: Iterable[PricingRecord]) -> bytes:
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
        history_frame(records).to_excel(writer, sheet_name='History', index=False)
    return buffer.getvalue()
