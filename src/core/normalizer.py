# src/core/normalizer.py

from __future__ import annotations

import math
import re
import secrets
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Optional, Set, Tuple

from core.errors import ParseError
from core.models import Itinerary, Offer, Segment

# Lookup chains, tried in order. Each path is a tuple of nested keys.
# "summary" shape (the search endpoint's own), then Amadeus, then Tequila.
PRICE_PATHS: Tuple[Tuple[str, ...], ...] = (
    ("total",),
    ("price", "grandTotal"),
    ("price", "total"),
    ("price",),
)
BAGGAGE_PATHS = (("bagIncluded",), ("baggageIncluded",))
DESTINATION_PATHS = (("destination",), ("dest",))

CARRIER_PATHS = (("carrier",), ("carrierCode",))
FLIGHT_NUMBER_PATHS = (("flight",), ("number",), ("flightNumber",))
FROM_PATHS = (("from",), ("departure", "iataCode"))
TO_PATHS = (("to",), ("arrival", "iataCode"))
DURATION_HOURS_PATHS = (("durationHrs",), ("durationHours",))

_TRUE_STRINGS = {"true", "1", "yes"}

DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?", re.ASCII)

# Amounts at or above 10^12 BRL are treated as unusable
MAX_AMOUNT_EXPONENT = 12
CENTS = Decimal("0.01")


def _lookup(obj: Any, path: Iterable[str]) -> Any:
    cur = obj
    for key in path:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    return cur


def _first(obj: Any, paths, accept) -> Any:
    """Return the first value along ``paths`` that ``accept`` turns into non-None."""
    for path in paths:
        value = accept(_lookup(obj, path))
        if value is not None:
            return value
    return None


def _as_amount(value: Any) -> Optional[Decimal]:
    # bool is an int subclass; a flag is never a price
    if value is None or isinstance(value, (bool, dict, list)):
        return None
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not amount.is_finite() or amount < 0 or amount.adjusted() >= MAX_AMOUNT_EXPONENT:
        return None
    return amount.quantize(CENTS)


def _as_hours(value: Any) -> Optional[float]:
    if value is None or isinstance(value, (bool, dict, list)):
        return None
    try:
        hours = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(hours) or math.isinf(hours) or hours < 0:
        return None
    return hours


def _as_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (bool, dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _as_flag(value: Any) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    if isinstance(value, (bool, int, float)):
        return bool(value)
    return None


def parse_iso8601_duration_hours(duration: Any) -> Optional[float]:
    """
    Parse durations like 'PT6H30M' into hours.
    Returns None for anything that is not a PT..H..M duration string.
    """
    if not duration or not isinstance(duration, str):
        return None
    match = DURATION_RE.fullmatch(duration.strip())
    if not match:
        return None
    hours = int(match.group(1) or 0)
    minutes = int(match.group(2) or 0)
    return hours + minutes / 60.0


def _to_segment(raw: Any) -> Segment:
    return Segment(
        carrier_code=_first(raw, CARRIER_PATHS, _as_text) or "",
        flight_number=_first(raw, FLIGHT_NUMBER_PATHS, _as_text) or "",
        origin=_first(raw, FROM_PATHS, _as_text) or "",
        destination=_first(raw, TO_PATHS, _as_text) or "",
    )


def _to_itinerary(raw: Any) -> Itinerary:
    segments_raw = _lookup(raw, ("segments",))
    if not isinstance(segments_raw, list):
        segments_raw = []

    duration = _first(raw, DURATION_HOURS_PATHS, _as_hours)
    if duration is None:
        duration = parse_iso8601_duration_hours(_lookup(raw, ("duration",)))

    return Itinerary(
        segments=tuple(_to_segment(s) for s in segments_raw),
        duration_hours=duration or 0.0,
    )


def _new_id(used: Set[str]) -> str:
    while True:
        token = secrets.token_hex(5)
        if token not in used:
            return token


def _offer_id(raw: Any, used: Set[str]) -> str:
    offer_id = _as_text(_lookup(raw, ("id",)))
    if offer_id is None or offer_id in used:
        offer_id = _new_id(used)
    used.add(offer_id)
    return offer_id


def _offers_list(raw_response: Any) -> List[Any]:
    offers = _lookup(raw_response, ("offers",))
    return offers if isinstance(offers, list) else []


def ensure_offers_list(raw_response: Any) -> None:
    """
    Raise ParseError when the response carries an ``offers`` key that is not
    a list. A missing or null key is an empty result, not an error.
    """
    if not isinstance(raw_response, dict):
        raise ParseError("Search response is not a JSON object")
    offers = raw_response.get("offers")
    if offers is not None and not isinstance(offers, list):
        raise ParseError("Search response has no usable offers list")


def normalize_offers(raw_response: Any, fallback_destination: Optional[str] = None) -> List[Offer]:
    """
    Convert an /api/search response into canonical Offer objects.

    Accepts any decoded JSON value. Missing or malformed fields take their
    defaults (price 0, no baggage, no itineraries); nothing here raises.
    Destination resolution: offer's own code, then the response's top-level
    ``destination``, then ``fallback_destination``.
    """
    response_destination = _as_text(_lookup(raw_response, ("destination",)))
    default_destination = response_destination or fallback_destination or ""

    used_ids: Set[str] = set()
    out: List[Offer] = []

    for raw in _offers_list(raw_response):
        itineraries_raw = _lookup(raw, ("itineraries",))
        if not isinstance(itineraries_raw, list):
            itineraries_raw = []

        out.append(
            Offer(
                id=_offer_id(raw, used_ids),
                total_price=_first(raw, PRICE_PATHS, _as_amount) or Decimal("0"),
                baggage_included=bool(_first(raw, BAGGAGE_PATHS, _as_flag)),
                destination=_first(raw, DESTINATION_PATHS, _as_text) or default_destination,
                itineraries=tuple(_to_itinerary(it) for it in itineraries_raw),
            )
        )

    return out
