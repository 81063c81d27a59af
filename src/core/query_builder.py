# src/core/query_builder.py

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Any, Optional, Union

from core.errors import ValidationError
from core.models import (
    Anywhere,
    Cabin,
    DestinationMode,
    Fixed,
    Provider,
    RequestDescriptor,
    SearchQuery,
)

MIN_ADULTS = 1
MAX_ADULTS = 9

ANYWHERE_TOKENS = ("", "ANY", "ANYWHERE")

_IATA_RE = re.compile(r"^[A-Z]{3}$")

DATE_MARGIN = timedelta(days=3)
EARLIEST_DATE = date.min + DATE_MARGIN
LATEST_DATE = date.max - DATE_MARGIN


def clamp_adults(value: Any) -> int:
    """
    Coerce the passenger field into [1, 9].
    Blank or unparseable input falls back to a single adult.
    """
    try:
        if isinstance(value, float):
            n = int(value)
        else:
            n = int(str(value).strip() or MIN_ADULTS)
    except (TypeError, ValueError, OverflowError):
        n = MIN_ADULTS
    return max(MIN_ADULTS, min(MAX_ADULTS, n))


def _airport_code(value: Any, field_name: str) -> str:
    code = str(value or "").strip().upper()
    if not _IATA_RE.match(code):
        raise ValidationError(f"{field_name} must be a 3-letter airport code, got {value!r}")
    return code


def _destination_mode(value: Any) -> DestinationMode:
    if value is None or isinstance(value, Anywhere):
        return Anywhere()
    if isinstance(value, Fixed):
        return Fixed(_airport_code(value.code, "destination"))
    if str(value).strip().upper() in ANYWHERE_TOKENS:
        return Anywhere()
    return Fixed(_airport_code(value, "destination"))


def parse_iso_date(value: Union[str, date]) -> date:
    """Calendar date with room for the ±3-day matrix on either side."""
    if isinstance(value, datetime):
        day = value.date()
    elif isinstance(value, date):
        day = value
    else:
        try:
            day = date.fromisoformat(str(value).strip())
        except ValueError:
            raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD") from None
    if not EARLIEST_DATE <= day <= LATEST_DATE:
        raise ValidationError(f"Date {day.isoformat()} is out of range")
    return day


def _enum_value(enum_cls, value: Any, field_name: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}") from None


def make_query(
    origin: str,
    destination: Any,
    departure_date: Union[str, date],
    adults: Any = 1,
    cabin: Union[str, Cabin] = Cabin.ECONOMY,
    provider: Union[str, Provider] = Provider.AMADEUS,
) -> SearchQuery:
    """
    Build a canonical SearchQuery from raw form values.

    ``destination`` may be a code, ``None``/"ANY" for anywhere mode, or an
    already-built Fixed/Anywhere value.
    """
    return SearchQuery(
        origin=_airport_code(origin, "origin"),
        destination=_destination_mode(destination),
        departure_date=parse_iso_date(departure_date).isoformat(),
        adults=clamp_adults(adults),
        cabin=_enum_value(Cabin, cabin, "cabin"),
        provider=_enum_value(Provider, provider, "provider"),
    )


def default_query(config, today: Optional[date] = None) -> SearchQuery:
    """The query the page opens with (and searches once on activation)."""
    today = today or date.today()
    return make_query(
        origin=config.default_origin,
        destination=config.default_destination,
        departure_date=today + timedelta(days=config.default_days_ahead),
        provider=config.default_provider,
    )


def build_request(query: SearchQuery) -> RequestDescriptor:
    """
    Map a SearchQuery onto the /api/search request envelope.
    Pure; the only failure is a malformed date or an out-of-range adults count.
    """
    if not isinstance(query.adults, int) or not MIN_ADULTS <= query.adults <= MAX_ADULTS:
        raise ValidationError(f"adults must be between {MIN_ADULTS} and {MAX_ADULTS}")

    day = parse_iso_date(query.departure_date)

    if isinstance(query.destination, Fixed):
        return RequestDescriptor(
            provider=query.provider,
            origin=query.origin,
            date=day.isoformat(),
            adults=query.adults,
            cabin=query.cabin,
            destination=query.destination.code,
            everywhere=False,
        )

    return RequestDescriptor(
        provider=query.provider,
        origin=query.origin,
        date=day.isoformat(),
        adults=query.adults,
        cabin=query.cabin,
        destination=None,
        everywhere=True,
    )
