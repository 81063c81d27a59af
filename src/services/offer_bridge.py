# src/services/offer_bridge.py

from decimal import Decimal
from typing import Any, Dict, List, Union

from core.models import Offer, Segment
from core.selection import stop_count


def format_brl(amount: Union[Decimal, int, float]) -> str:
    """pt-BR currency formatting, e.g. 1234.5 -> 'R$ 1.234,50'."""
    text = f"{Decimal(str(amount)):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"


def segment_label(segment: Segment) -> str:
    return f"{segment.carrier_code}{segment.flight_number} {segment.origin}→{segment.destination}"


def segments_summary(offer: Offer) -> str:
    first = offer.first_itinerary
    if first is None:
        return ""
    return " · ".join(segment_label(s) for s in first.segments)


def baggage_label(offer: Offer) -> str:
    return "1st checked bag included" if offer.baggage_included else "Carry-on only"


def offers_to_rows(offers: List[Offer], origin: str) -> List[Dict[str, Any]]:
    """Flatten offers into dicts for the results table; keeps input order."""
    rows: List[Dict[str, Any]] = []

    for o in offers:
        first = o.first_itinerary
        rows.append(
            {
                "id": o.id,
                "route": f"{origin} → {o.destination}",
                "segments": segments_summary(o),
                "stops": stop_count(o),
                "duration_h": first.duration_hours if first is not None else 0.0,
                "price": format_brl(o.total_price),
                "baggage": baggage_label(o),
            }
        )

    return rows
