"""Mock flight data, a drop-in replacement for the Amadeus responses.

Generates plausible offers on the fly so development and tests never hit rate limits or need
credentials. Response shapes match the Amadeus Self-Service JSON API (v2 flight-offers,
v1 reference-data/locations) so they go through the same parsing as live data.
"""

import random
from datetime import datetime, timedelta
from typing import Any

from ..models import SearchParams

MOCK_OFFER_COUNT = 25
MOCK_HUB = "XYZ"

CARRIERS = {
    "AA": "American Airlines",
    "BA": "British Airways",
    "DL": "Delta Air Lines",
    "EK": "Emirates",
    "SQ": "Singapore Airlines",
    "JL": "Japan Airlines",
    "QF": "Qantas",
    "AF": "Air France",
    "LH": "Lufthansa",
    "UA": "United Airlines",
}

AIRPORTS = [
    {"iataCode": "JFK", "name": "John F. Kennedy International", "city": "New York", "country": "United States"},
    {"iataCode": "LHR", "name": "Heathrow", "city": "London", "country": "United Kingdom"},
    {"iataCode": "CDG", "name": "Charles de Gaulle", "city": "Paris", "country": "France"},
    {"iataCode": "DXB", "name": "Dubai International", "city": "Dubai", "country": "United Arab Emirates"},
    {"iataCode": "SIN", "name": "Changi", "city": "Singapore", "country": "Singapore"},
    {"iataCode": "NRT", "name": "Narita", "city": "Tokyo", "country": "Japan"},
    {"iataCode": "HND", "name": "Haneda", "city": "Tokyo", "country": "Japan"},
    {"iataCode": "SYD", "name": "Kingsford Smith", "city": "Sydney", "country": "Australia"},
    {"iataCode": "LAX", "name": "Los Angeles International", "city": "Los Angeles", "country": "United States"},
    {"iataCode": "SFO", "name": "San Francisco International", "city": "San Francisco", "country": "United States"},
]

_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _segment(rng: random.Random, origin: str, dest: str, depart: datetime, hours: int, carrier: str) -> dict[str, Any]:
    return {
        "departure": {"iataCode": origin, "at": depart.strftime(_TIMESTAMP_FORMAT)},
        "arrival": {"iataCode": dest, "at": (depart + timedelta(hours=hours)).strftime(_TIMESTAMP_FORMAT)},
        "carrierCode": carrier,
        "number": str(rng.randint(1000, 9999)),
        "aircraft": {"code": "737"},
        "duration": f"PT{hours}H",
        "numberOfStops": 0,
    }


def _build_segments(rng: random.Random, params: SearchParams, depart: datetime, hours: int,
                    carrier: str, is_direct: bool) -> list[dict[str, Any]]:
    if is_direct:
        return [_segment(rng, params.origin, params.destination, depart, hours, carrier)]
    first_leg = hours // 2
    second_leg = hours - first_leg
    connection = depart + timedelta(hours=first_leg)
    return [
        _segment(rng, params.origin, MOCK_HUB, depart, first_leg, carrier),
        _segment(rng, MOCK_HUB, params.destination, connection, second_leg, carrier),
    ]


def mock_flight_search(params: SearchParams, seed: int | None = None) -> dict[str, Any]:
    """Generate a flight-offers response for `params`. The same seed always yields the same offers."""
    rng = random.Random(seed)
    travel_date = datetime.strptime(params.departure_date, "%Y-%m-%d")
    carrier_codes = list(CARRIERS)

    offers = []
    for i in range(MOCK_OFFER_COUNT):
        carrier = rng.choice(carrier_codes)
        base_price = 300 + rng.random() * 1000
        is_direct = rng.random() > 0.3
        hours = 2 + rng.randrange(12)
        depart = travel_date.replace(hour=rng.randrange(24))
        total = f"{base_price:.2f}"
        price = {"currency": "USD", "total": total, "base": f"{base_price * 0.8:.2f}", "grandTotal": total}

        offers.append({
            "id": str(i + 1),
            "type": "flight-offer",
            "source": "GDS",
            "nonStop": is_direct,
            "oneWay": not params.return_date,
            "numberOfBookableSeats": rng.randint(1, 9),
            "itineraries": [{
                "duration": f"PT{hours}H",
                "segments": _build_segments(rng, params, depart, hours, carrier, is_direct),
            }],
            "price": price,
            "pricingOptions": {"fareType": ["PUBLISHED"], "includedCheckedBagsOnly": rng.random() > 0.5},
            "validatingAirlineCodes": [carrier],
            "travelerPricings": [{
                "travelerId": "1",
                "fareOption": "STANDARD",
                "travelerType": "ADULT",
                "price": price,
                "fareDetailsBySegment": [{
                    "segmentId": "1",
                    "cabin": params.travel_class or "ECONOMY",
                    "includedCheckedBags": {"quantity": 1 if rng.random() > 0.5 else 0},
                }],
            }],
        })

    return {
        "meta": {"count": len(offers)},
        "data": offers,
        "dictionaries": {"locations": {}, "aircraft": {}, "currencies": {"USD": "US Dollar"}, "carriers": dict(CARRIERS)},
    }


def mock_airport_search(keyword: str) -> list[dict[str, Any]]:
    """Case-insensitive match on IATA code, airport name and city. Location dicts match Amadeus format."""
    if not keyword:
        return []
    keyword_lower = keyword.lower()
    return [
        {
            "type": "location",
            "subType": "AIRPORT",
            "name": a["name"],
            "iataCode": a["iataCode"],
            "address": {"cityName": a["city"], "countryName": a["country"]},
        }
        for a in AIRPORTS
        if keyword_lower in a["iataCode"].lower()
        or keyword_lower in a["name"].lower()
        or keyword_lower in a["city"].lower()
    ]
