import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, Literal

import dacite

logger = logging.getLogger(__name__)

SortKey = Literal["price", "duration", "departure"]
TimeOfDay = Literal["morning", "afternoon", "evening", "night"]
TravelClass = Literal["ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST"]

SORT_KEYS: tuple[SortKey, ...] = ("price", "duration", "departure")
TIMES_OF_DAY: tuple[TimeOfDay, ...] = ("morning", "afternoon", "evening", "night")
TRAVEL_CLASSES: tuple[TravelClass, ...] = ("ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST")


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Departure or arrival point of a segment. `at` is a local ISO-8601 timestamp, no offset guaranteed."""
    iata_code: str
    at: str
    terminal: str | None = None


@dataclass(frozen=True, slots=True)
class Aircraft:
    code: str


@dataclass(frozen=True, slots=True)
class Segment:
    departure: Endpoint
    arrival: Endpoint
    carrier_code: str
    number: str
    duration: str = ""
    aircraft: Aircraft | None = None


@dataclass(frozen=True, slots=True)
class Itinerary:
    duration: str
    segments: list[Segment]


@dataclass(frozen=True, slots=True)
class Price:
    """Amounts stay numeric strings, exactly as the provider sends them."""
    currency: str
    total: str
    base: str | None = None
    grand_total: str | None = None


@dataclass(frozen=True, slots=True)
class PricingOptions:
    fare_type: list[str] = field(default_factory=list)
    included_checked_bags_only: bool = False


@dataclass(frozen=True, slots=True)
class FlightOffer:
    """Domain model of a single flight offer.

    itineraries[0] is the outbound journey; return itineraries are carried but never filtered or sorted on.
    validating_airline_codes[0] is the primary carrier shown to the user.
    """
    id: str
    itineraries: list[Itinerary]
    price: Price
    validating_airline_codes: list[str]
    number_of_bookable_seats: int = 0
    pricing_options: PricingOptions | None = None


@dataclass(frozen=True, slots=True)
class Airport:
    iata_code: str
    name: str
    city: str
    country: str


@dataclass(frozen=True, slots=True)
class SearchParams:
    origin: str
    destination: str
    departure_date: str
    return_date: str | None = None
    adults: int = 1
    children: int = 0
    infants: int = 0
    travel_class: TravelClass | None = None
    non_stop: bool = False
    max_price: int | None = None


@dataclass(frozen=True, slots=True)
class FilterSpec:
    """User selected filters.

    Empty sets mean "no constraint" for that dimension. price_range is always applied.
    included_baggage is carried for the UI only; the filter predicate does not consult it.
    """
    stops: frozenset[int] = frozenset()
    price_range: tuple[float, float] = (0.0, math.inf)
    airlines: frozenset[str] = frozenset()
    departure_time: frozenset[TimeOfDay] = frozenset()
    arrival_time: frozenset[TimeOfDay] = frozenset()
    max_duration: int | None = None
    included_baggage: bool | None = None


@dataclass(frozen=True, slots=True)
class PriceBucket:
    price_floor: float
    count: int
    label: str


@dataclass(slots=True)
class SearchResult:
    offers: list[FlightOffer]
    carriers: dict[str, str]
    currency: str
    source: Literal["amadeus", "mock"]


# ---------------- Parsing raw provider payloads -----------------
_CAMEL_BOUNDARY = re.compile(r'(?<!^)(?=[A-Z])')


def _snake_case_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {_CAMEL_BOUNDARY.sub('_', key).lower(): _snake_case_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_snake_case_keys(item) for item in value]
    return value


def parse_offer(raw: dict[str, Any]) -> FlightOffer:
    """Convert one camelCase flight-offer dict into a FlightOffer. Raises dacite errors on bad shape."""
    return dacite.from_dict(data_class=FlightOffer, data=_snake_case_keys(raw))


def parse_offers(raw_offers: list[dict[str, Any]]) -> list[FlightOffer]:
    """Parse a provider `data` list, dropping (and logging) records that do not fit the model."""
    offers = []
    for raw in raw_offers:
        try:
            offers.append(parse_offer(raw))
        except (dacite.DaciteError, TypeError, AttributeError) as e:
            logger.warning('Dropping malformed flight offer %s: %s', raw.get('id', '?') if isinstance(raw, dict) else raw, e)
    return offers


def parse_airport(raw: dict[str, Any]) -> Airport:
    address = raw.get('address') or {}
    data_to_parse = dict(
        iata_code=raw['iataCode'],
        name=raw.get('name', raw['iataCode']),
        city=address.get('cityName', ''),
        country=address.get('countryName', ''),
    )
    return dacite.from_dict(data=data_to_parse, data_class=Airport)


def parse_airports(raw_locations: list[dict[str, Any]]) -> list[Airport]:
    airports = []
    for raw in raw_locations:
        try:
            airports.append(parse_airport(raw))
        except (dacite.DaciteError, KeyError, TypeError, AttributeError) as e:
            logger.warning('Dropping malformed location record: %s', e)
    return airports
