from decimal import Decimal

import pytest

from core.models import Itinerary, Segment
from core.errors import ParseError
from core.normalizer import ensure_offers_list, normalize_offers, parse_iso8601_duration_hours


@pytest.mark.parametrize(
    "raw",
    [None, {}, [], 42, "offers", {"offers": None}, {"offers": {}}, {"offers": "x"}, {"destination": 7}],
)
def test_normalize_never_fails_and_returns_nothing_without_offers_list(raw):
    assert normalize_offers(raw, "LIS") == []


@pytest.mark.parametrize("element", [{}, None, 5, "junk", [], {"itineraries": "nope", "price": {}}])
def test_malformed_offer_takes_defaults(element):
    offers = normalize_offers({"offers": [element]}, "LIS")
    assert len(offers) == 1
    offer = offers[0]
    assert offer.id
    assert offer.total_price == Decimal("0")
    assert offer.baggage_included is False
    assert offer.itineraries == ()
    assert offer.destination == "LIS"


def test_empty_offer_example():
    [offer] = normalize_offers({"offers": [{}]}, "LIS")
    assert isinstance(offer.id, str) and len(offer.id) > 0
    assert offer.total_price == 0
    assert offer.baggage_included is False
    assert offer.itineraries == ()
    assert offer.destination == "LIS"


@pytest.mark.parametrize(
    "raw_offer, expected",
    [
        ({"total": 1500}, Decimal("1500")),
        ({"total": "1499.90"}, Decimal("1499.90")),
        ({"total": 1500, "price": {"grandTotal": "900"}}, Decimal("1500")),
        ({"price": {"grandTotal": "987.65", "total": "900.00"}}, Decimal("987.65")),
        ({"price": {"total": "900.00", "currency": "BRL"}}, Decimal("900.00")),
        ({"price": 432}, Decimal("432")),
        ({"total": "n/a", "price": 432}, Decimal("432")),
        ({"total": -10, "price": {"grandTotal": "abc"}}, Decimal("0")),
        ({"total": True}, Decimal("0")),
        ({"total": "NaN"}, Decimal("0")),
        ({"total": 0, "price": 99}, Decimal("0")),
        ({"total": "1e999999", "price": 50}, Decimal("50")),
        ({"total": "1e12"}, Decimal("0")),
        ({"total": "999999999999.99"}, Decimal("999999999999.99")),
    ],
)
def test_price_lookup_chain(raw_offer, expected):
    [offer] = normalize_offers({"offers": [raw_offer]})
    assert offer.total_price == expected


@pytest.mark.parametrize(
    "raw_offer, expected",
    [
        ({"bagIncluded": True}, True),
        ({"bagIncluded": 1}, True),
        ({"bagIncluded": "true"}, True),
        ({"baggageIncluded": True}, True),
        ({"bagIncluded": False, "baggageIncluded": True}, False),
        ({"bagIncluded": "false"}, False),
        ({"bagIncluded": 0}, False),
        ({"bagIncluded": {"pieces": 1}}, False),
    ],
)
def test_baggage_flag(raw_offer, expected):
    [offer] = normalize_offers({"offers": [raw_offer]})
    assert offer.baggage_included is expected


def test_destination_fallback_order():
    payload = {
        "destination": "MAD",
        "offers": [{"destination": "BCN"}, {"dest": "CDG"}, {}],
    }
    offers = normalize_offers(payload, "LIS")
    assert [o.destination for o in offers] == ["BCN", "CDG", "MAD"]

    no_top_level = normalize_offers({"offers": [{}]}, "LIS")
    assert no_top_level[0].destination == "LIS"

    anywhere = normalize_offers({"offers": [{}]}, None)
    assert anywhere[0].destination == ""


def test_ids_kept_when_present_and_synthesized_unique_otherwise():
    payload = {"offers": [{"id": "X1"}, {}, {"id": 7}, {}, {"id": "X1"}] + [{} for _ in range(50)]}
    offers = normalize_offers(payload)
    ids = [o.id for o in offers]
    assert ids[0] == "X1"
    assert ids[2] == "7"
    assert ids[4] != "X1"
    assert len(set(ids)) == len(ids)


def test_summary_shape_itineraries():
    payload = {
        "offers": [
            {
                "id": "o1",
                "total": 2500,
                "bagIncluded": True,
                "itineraries": [
                    {
                        "durationHrs": 11.5,
                        "segments": [
                            {"carrier": "TP", "flight": "88", "from": "GRU", "to": "LIS"},
                            {"carrier": "TP", "flight": "1010"},
                        ],
                    }
                ],
            }
        ]
    }
    [offer] = normalize_offers(payload, "LIS")
    assert offer.itineraries == (
        Itinerary(
            segments=(
                Segment(carrier_code="TP", flight_number="88", origin="GRU", destination="LIS"),
                Segment(carrier_code="TP", flight_number="1010", origin="", destination=""),
            ),
            duration_hours=11.5,
        ),
    )


def test_amadeus_shape_itineraries():
    payload = {
        "offers": [
            {
                "id": "1",
                "price": {"currency": "BRL", "total": "3100.00", "grandTotal": "3150.00"},
                "itineraries": [
                    {
                        "duration": "PT12H45M",
                        "segments": [
                            {
                                "carrierCode": "LA",
                                "number": 8084,
                                "departure": {"iataCode": "GRU", "at": "2025-11-10T22:00:00"},
                                "arrival": {"iataCode": "LIS", "at": "2025-11-11T12:45:00"},
                            }
                        ],
                    }
                ],
            }
        ]
    }
    [offer] = normalize_offers(payload, "LIS")
    assert offer.total_price == Decimal("3150.00")
    it = offer.first_itinerary
    assert it.duration_hours == pytest.approx(12.75)
    assert it.segments[0] == Segment(carrier_code="LA", flight_number="8084", origin="GRU", destination="LIS")


@pytest.mark.parametrize(
    "itinerary",
    [
        {"durationHrs": -3},
        {"durationHrs": "abc"},
        {"duration": "12h"},
        {"duration": "PT²H"},
        {"duration": "PT٣H"},
        {},
        {"segments": "x"},
    ],
)
def test_bad_itinerary_fields_default(itinerary):
    [offer] = normalize_offers({"offers": [{"itineraries": [itinerary]}]})
    assert offer.itineraries == (Itinerary(),)


@pytest.mark.parametrize(
    "duration, hours",
    [
        ("PT6H30M", 6.5),
        ("PT2H", 2.0),
        ("PT45M", 0.75),
        ("PT", 0.0),
        ("P1D", None),
        ("PT²H", None),
        ("PT6H30M15S", None),
        (None, None),
        (90, None),
    ],
)
def test_parse_iso8601_duration_hours(duration, hours):
    assert parse_iso8601_duration_hours(duration) == hours


def test_normalize_does_not_reorder():
    payload = {"offers": [{"id": "a", "total": 300}, {"id": "b", "total": 100}, {"id": "c", "total": 200}]}
    assert [o.id for o in normalize_offers(payload)] == ["a", "b", "c"]


@pytest.mark.parametrize("raw", [{"offers": "x"}, {"offers": {}}, {"offers": 0}, [], "offers"])
def test_ensure_offers_list_rejects_unusable_shapes(raw):
    with pytest.raises(ParseError):
        ensure_offers_list(raw)


@pytest.mark.parametrize("raw", [{}, {"offers": None}, {"offers": []}, {"offers": [{}], "destination": "LIS"}])
def test_ensure_offers_list_accepts_missing_or_list(raw):
    ensure_offers_list(raw)


def test_accepted_prices_are_in_cents():
    [offer] = normalize_offers({"offers": [{"total": "1499.9"}]})
    assert str(offer.total_price) == "1499.90"
