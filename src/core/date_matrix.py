# src/core/date_matrix.py

from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Union

from core.models import DateMatrixEntry
from core.query_builder import parse_iso_date

# ±3 days window around the anchor
DAY_OFFSETS = range(-3, 4)

BASE_PRICE = 1200
STEP_PRICE = 150


def indicative_price(day: date) -> Decimal:
    """
    Placeholder preview price for the date strip. Depends on the day of month
    only; this is decoration, never a quote.
    """
    raw = Decimal(BASE_PRICE + (day.day % 7) * STEP_PRICE)
    return raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def build_date_matrix(anchor: Union[date, str]) -> List[DateMatrixEntry]:
    anchor_day = parse_iso_date(anchor)
    return [
        DateMatrixEntry(date=d, indicative_price=indicative_price(d))
        for d in (anchor_day + timedelta(days=offset) for offset in DAY_OFFSETS)
    ]
