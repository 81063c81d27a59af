# src/core/selection.py

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Union

from core.errors import ValidationError
from core.models import Offer, SortBy

ALLOWED_MAX_STOPS = (0, 1, 2)


def stop_count(offer: Offer) -> int:
    """Connections on the outbound itinerary. No itinerary counts as nonstop."""
    first = offer.first_itinerary
    if first is None:
        return 0
    return max(0, len(first.segments) - 1)


def validate_max_stops(value: Any) -> int:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool) or value not in ALLOWED_MAX_STOPS:
        raise ValidationError(f"max_stops must be one of {ALLOWED_MAX_STOPS}")
    return int(value)


def parse_sort_by(value: Union[str, SortBy]) -> SortBy:
    try:
        return SortBy(value)
    except ValueError:
        raise ValidationError(f"Unknown sort order {value!r}") from None


def _duration_key(offer: Offer) -> float:
    first = offer.first_itinerary
    return first.duration_hours if first is not None else 0.0


def _price_key(offer: Offer):
    return offer.total_price


def select_offers(
    offers: Iterable[Offer],
    max_stops: int,
    sort_by: Union[str, SortBy] = SortBy.PRICE,
) -> List[Offer]:
    """
    Drop offers with more than ``max_stops`` connections, then order them
    ascending by price or outbound duration.

    sorted() is stable, so equal keys keep their input order.
    """
    max_stops = validate_max_stops(max_stops)
    sort_by = parse_sort_by(sort_by)

    kept = [o for o in offers if stop_count(o) <= max_stops]
    key = _price_key if sort_by is SortBy.PRICE else _duration_key
    return sorted(kept, key=key)


def cheapest_offer(offers: Iterable[Offer]) -> Optional[Offer]:
    offers = list(offers)
    if not offers:
        return None
    return min(offers, key=_price_key)
