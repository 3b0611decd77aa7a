import logging
import math
from typing import Iterable, Sequence

from ..models import FilterSpec, FlightOffer, Segment
from .pricing import parse_price
from .timeutils import elapsed_minutes, hour_of, time_of_day

logger = logging.getLogger(__name__)

# UI value of the "2+ stops" checkbox
TWO_PLUS_STOPS = 2


# ---------------- Offer accessors (outbound itinerary only) -----------------
def outbound_segments(offer: FlightOffer) -> list[Segment]:
    if not offer.itineraries:
        return []
    return offer.itineraries[0].segments


def first_departure_at(offer: FlightOffer) -> str:
    segments = outbound_segments(offer)
    return segments[0].departure.at if segments else ''


def last_arrival_at(offer: FlightOffer) -> str:
    segments = outbound_segments(offer)
    return segments[-1].arrival.at if segments else ''


def total_minutes(offer: FlightOffer) -> int:
    return elapsed_minutes(first_departure_at(offer), last_arrival_at(offer))


def stop_count(offer: FlightOffer) -> int:
    return max(0, len(outbound_segments(offer)) - 1)


def stops_label(count: int) -> str:
    if count == 0:
        return 'Non-stop'
    if count == 1:
        return '1 stop'
    return f'{count} stops'


def airline_name(code: str, carriers: dict[str, str]) -> str:
    return carriers.get(code) or code


# ---------------- Predicate -----------------
def matches(offer: FlightOffer, spec: FilterSpec) -> bool:
    """True when the offer passes every active filter dimension."""
    if spec.stops and stop_count(offer) not in spec.stops:
        return False

    low, high = spec.price_range
    # NaN fails both comparisons, so unparseable prices never pass
    if not low <= parse_price(offer.price.total) <= high:
        return False

    if spec.airlines and not any(code in spec.airlines for code in offer.validating_airline_codes):
        return False

    if spec.departure_time and time_of_day(hour_of(first_departure_at(offer))) not in spec.departure_time:
        return False

    if spec.arrival_time and time_of_day(hour_of(last_arrival_at(offer))) not in spec.arrival_time:
        return False

    if spec.max_duration and total_minutes(offer) > spec.max_duration:
        return False

    return True


def filter_flights(flights: Sequence[FlightOffer], spec: FilterSpec) -> list[FlightOffer]:
    """Offers matching all active criteria, in their original order. The input is not modified."""
    filtered = [offer for offer in flights if matches(offer, spec)]
    logger.debug('Filter kept %d of %d offers', len(filtered), len(flights))
    return filtered


# ---------------- Filter options derived from a result set -----------------
def observed_price_range(flights: Sequence[FlightOffer]) -> tuple[float, float]:
    prices = [p for p in (parse_price(f.price.total) for f in flights) if math.isfinite(p)]
    if not prices:
        return 0, 0
    return math.floor(min(prices)), math.ceil(max(prices))


def default_filter_spec(flights: Sequence[FlightOffer]) -> FilterSpec:
    """Reset state after a new search: nothing selected, price range spanning every observed price."""
    return FilterSpec(price_range=observed_price_range(flights))


def available_airlines(flights: Sequence[FlightOffer], carriers: dict[str, str]) -> list[tuple[str, str]]:
    """(code, display name) for every validating carrier, in order of first appearance."""
    seen: dict[str, str] = {}
    for offer in flights:
        for code in offer.validating_airline_codes:
            if code not in seen:
                seen[code] = airline_name(code, carriers)
    return list(seen.items())


def expand_stop_options(selected: Iterable[int | str], flights: Sequence[FlightOffer]) -> frozenset[int]:
    """Normalize UI stop choices into exact stop counts for FilterSpec.stops.

    The "2+" choice (either "2+" or TWO_PLUS_STOPS) becomes 2 plus every larger stop count present
    in the result set, so itineraries with three or more stops are not lost by the exact-match filter.
    """
    stops: set[int] = set()
    for choice in selected:
        if choice == '2+' or choice == TWO_PLUS_STOPS:
            stops.add(TWO_PLUS_STOPS)
            stops.update(n for n in map(stop_count, flights) if n > TWO_PLUS_STOPS)
        else:
            stops.add(int(choice))
    return frozenset(stops)
