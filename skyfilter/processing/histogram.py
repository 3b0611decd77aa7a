"""Price distribution for the results chart."""
import logging
import math
from bisect import bisect_right
from typing import Sequence

from ..models import FlightOffer, PriceBucket
from .pricing import format_price, parse_price

logger = logging.getLogger(__name__)

MAX_BUCKETS = 15


def build_price_buckets(flights: Sequence[FlightOffer], currency: str) -> list[PriceBucket]:
    """Split the observed price span into equal-width buckets and count offers per bucket.

    Bucket i covers [floor_i, floor_i+1); the last bucket also includes the maximum price.
    When every price is equal a single bucket holds all offers. Unparseable prices are not counted.
    """
    if not flights:
        return []

    prices = [p for p in (parse_price(f.price.total) for f in flights) if math.isfinite(p)]
    if not prices:
        logger.debug('No parseable prices among %d offers', len(flights))
        return []

    min_price = min(prices)
    max_price = max(prices)
    bucket_count = min(MAX_BUCKETS, len(flights))
    bucket_width = (max_price - min_price) / bucket_count

    if bucket_width == 0:
        return [PriceBucket(price_floor=min_price, count=len(prices), label=format_price(min_price, currency))]

    floors = [min_price + i * bucket_width for i in range(bucket_count)]
    counts = [0] * bucket_count
    for price in prices:
        index = min(max(bisect_right(floors, price) - 1, 0), bucket_count - 1)
        counts[index] += 1

    return [
        PriceBucket(price_floor=floor, count=count, label=format_price(floor, currency))
        for floor, count in zip(floors, counts)
    ]
