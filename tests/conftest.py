from datetime import datetime, timedelta

import pytest

from skyfilter.models import Endpoint, FlightOffer, Itinerary, Price, PricingOptions, Segment

ISO = "%Y-%m-%dT%H:%M:%S"


def _make_offer(
        offer_id: str = "1",
        price: str = "100.00",
        stops: int = 0,
        departure: str = "2025-07-01T08:00:00",
        duration_minutes: int = 180,
        airlines: tuple[str, ...] = ("AA",),
        currency: str = "USD",
        bags: bool = False,
) -> FlightOffer:
    start = datetime.strptime(departure, ISO)
    leg = timedelta(minutes=duration_minutes / (stops + 1))
    airports = ["JFK"] + [f"X{i}X" for i in range(stops)] + ["LHR"]
    segments = [
        Segment(
            departure=Endpoint(airports[i], (start + i * leg).strftime(ISO)),
            arrival=Endpoint(airports[i + 1], (start + (i + 1) * leg).strftime(ISO)),
            carrier_code=airlines[0],
            number=str(100 + i),
        )
        for i in range(stops + 1)
    ]
    hours, minutes = divmod(duration_minutes, 60)
    return FlightOffer(
        id=offer_id,
        itineraries=[Itinerary(duration=f"PT{hours}H{minutes}M", segments=segments)],
        price=Price(currency=currency, total=price),
        validating_airline_codes=list(airlines),
        number_of_bookable_seats=4,
        pricing_options=PricingOptions(included_checked_bags_only=bags),
    )


@pytest.fixture
def make_offer():
    return _make_offer


@pytest.fixture
def raw_offer():
    """One offer exactly as the Amadeus v2 flight-offers endpoint returns it."""
    return {
        "type": "flight-offer",
        "id": "7",
        "source": "GDS",
        "oneWay": False,
        "numberOfBookableSeats": 5,
        "itineraries": [{
            "duration": "PT7H5M",
            "segments": [
                {
                    "departure": {"iataCode": "JFK", "terminal": "7", "at": "2025-07-01T18:30:00"},
                    "arrival": {"iataCode": "KEF", "at": "2025-07-02T04:00:00"},
                    "carrierCode": "FI",
                    "number": "614",
                    "aircraft": {"code": "76W"},
                    "duration": "PT5H30M",
                    "numberOfStops": 0,
                },
                {
                    "departure": {"iataCode": "KEF", "at": "2025-07-02T07:40:00"},
                    "arrival": {"iataCode": "LHR", "at": "2025-07-02T11:45:00"},
                    "carrierCode": "FI",
                    "number": "450",
                    "aircraft": {"code": "7M8"},
                    "duration": "PT3H5M",
                    "numberOfStops": 0,
                },
            ],
        }],
        "price": {
            "currency": "EUR",
            "total": "412.35",
            "base": "301.00",
            "fees": [{"amount": "0.00", "type": "SUPPLIER"}],
            "grandTotal": "412.35",
        },
        "pricingOptions": {"fareType": ["PUBLISHED"], "includedCheckedBagsOnly": True},
        "validatingAirlineCodes": ["FI"],
        "travelerPricings": [],
    }
