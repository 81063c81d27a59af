# src/core/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class Cabin(str, Enum):
    ECONOMY = "economy"
    PREMIUM_ECONOMY = "premium_economy"
    BUSINESS = "business"
    FIRST = "first"


class Provider(str, Enum):
    AMADEUS = "amadeus"  # exact route
    TEQUILA = "tequila"  # Kiwi, supports "anywhere"


class SortBy(str, Enum):
    PRICE = "price"
    DURATION = "duration"


@dataclass(frozen=True)
class Fixed:
    """Destination pinned to one airport."""

    code: str


@dataclass(frozen=True)
class Anywhere:
    """Destination left open; the provider picks candidates."""


DestinationMode = Union[Fixed, Anywhere]


@dataclass(frozen=True)
class SearchQuery:
    """
    What the user asked for. Never mutated: every form change produces a new
    value (see query_builder.make_query / dataclasses.replace).
    """

    origin: str
    destination: DestinationMode
    departure_date: str  # ISO "YYYY-MM-DD"
    adults: int = 1
    cabin: Cabin = Cabin.ECONOMY
    provider: Provider = Provider.AMADEUS

    @property
    def is_anywhere(self) -> bool:
        return isinstance(self.destination, Anywhere)

    @property
    def destination_code(self) -> Optional[str]:
        if isinstance(self.destination, Fixed):
            return self.destination.code
        return None


@dataclass(frozen=True)
class RequestDescriptor:
    """Provider-agnostic request for the upstream /api/search endpoint."""

    provider: Provider
    origin: str
    date: str
    adults: int
    cabin: Cabin
    destination: Optional[str] = None
    everywhere: bool = False

    def to_params(self) -> Dict[str, str]:
        params = {
            "provider": self.provider.value,
            "origin": self.origin,
        }
        if self.everywhere:
            params["everywhere"] = "1"
        else:
            params["destination"] = self.destination or ""
        params["date"] = self.date
        params["adults"] = str(self.adults)
        params["cabin"] = self.cabin.value
        return params


@dataclass(frozen=True)
class Segment:
    """A single flight leg."""

    carrier_code: str = ""
    flight_number: str = ""
    origin: str = ""
    destination: str = ""


@dataclass(frozen=True)
class Itinerary:
    """A collection of segments representing one direction of travel."""

    segments: Tuple[Segment, ...] = ()
    duration_hours: float = 0.0


@dataclass(frozen=True)
class Offer:
    """Canonical offer representation. Prices are BRL."""

    id: str
    total_price: Decimal = Decimal("0")
    baggage_included: bool = False
    destination: str = ""
    itineraries: Tuple[Itinerary, ...] = ()

    @property
    def first_itinerary(self) -> Optional[Itinerary]:
        return self.itineraries[0] if self.itineraries else None


@dataclass(frozen=True)
class DateMatrixEntry:
    date: date
    indicative_price: Decimal


# ---------------------------------------------------------------------------
# Session state variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Searching:
    seq: int


@dataclass(frozen=True)
class Success:
    offers: List[Offer] = field(default_factory=list)


@dataclass(frozen=True)
class Failed:
    message: str


SessionState = Union[Idle, Searching, Success, Failed]
