import logging
import math
from typing import Callable, Sequence

from ..models import FlightOffer, SortKey
from .filters import first_departure_at, total_minutes
from .pricing import parse_price
from .timeutils import timestamp_of

logger = logging.getLogger(__name__)


def _price_key(offer: FlightOffer) -> tuple[bool, float]:
    price = parse_price(offer.price.total)
    # NaN cannot be ordered, park those offers after every real price
    return math.isnan(price), 0.0 if math.isnan(price) else price


def _duration_key(offer: FlightOffer) -> int:
    return total_minutes(offer)


def _departure_key(offer: FlightOffer) -> tuple[bool, float]:
    instant = timestamp_of(first_departure_at(offer))
    return instant is None, 0.0 if instant is None else instant


_SORT_KEYS: dict[str, Callable[[FlightOffer], object]] = {
    'price': _price_key,
    'duration': _duration_key,
    'departure': _departure_key,
}


def sort_flights(flights: Sequence[FlightOffer], key: SortKey) -> list[FlightOffer]:
    """New list ordered ascending by `key`; ties keep their input order. Unknown keys keep the input order."""
    key_func = _SORT_KEYS.get(key)
    if key_func is None:
        logger.debug('Unknown sort key %r, keeping input order', key)
        return list(flights)
    return sorted(flights, key=key_func)
