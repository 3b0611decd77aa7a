import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from bs4 import BeautifulSoup
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models import FilterSpec, FlightOffer, PriceBucket, SearchParams, SortKey
from .filters import (airline_name, available_airlines, filter_flights, first_departure_at, last_arrival_at,
                      outbound_segments, stop_count, stops_label)
from .histogram import build_price_buckets
from .pricing import format_price
from .sorting import sort_flights
from .timeutils import format_date, format_time, parse_duration_label

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parents[1] / 'templates'


@dataclass(slots=True)
class ProcessedResults:
    offers: list[FlightOffer]
    buckets: list[PriceBucket]
    total_count: int


class FlightResultsProcessor:
    """Turn a search response into the view shown to the user: filtered, ordered and charted."""

    def __init__(self, filter_spec: FilterSpec, sort_key: SortKey = 'price', currency: str = 'USD'):
        self.filter_spec = filter_spec
        self.sort_key = sort_key
        self.currency = currency

    # ---------------- core steps -----------------
    def process(self, offers: list[FlightOffer]) -> ProcessedResults:
        filtered = filter_flights(offers, self.filter_spec)
        ordered = sort_flights(filtered, self.sort_key)
        # The chart follows what the user currently sees
        buckets = build_price_buckets(filtered, self.currency)
        logger.info('%d of %d offers match the filters', len(ordered), len(offers))
        return ProcessedResults(offers=ordered, buckets=buckets, total_count=len(offers))

    # ---------------- formatting -----------------
    def _offer_row(self, offer: FlightOffer, carriers: dict[str, str]) -> dict:
        segments = outbound_segments(offer)
        primary = offer.validating_airline_codes[0] if offer.validating_airline_codes else ''
        route = [s.departure.iata_code for s in segments] + ([segments[-1].arrival.iata_code] if segments else [])
        bags = offer.pricing_options.included_checked_bags_only if offer.pricing_options else False
        return {
            'id': offer.id,
            'airline': airline_name(primary, carriers),
            'airline_code': primary,
            'flight_numbers': ', '.join(f'{s.carrier_code} {s.number}' for s in segments),
            'route': ' → '.join(route),
            'departure_date': format_date(first_departure_at(offer)),
            'departure_time': format_time(first_departure_at(offer)),
            'arrival_time': format_time(last_arrival_at(offer)),
            'duration': parse_duration_label(offer.itineraries[0].duration) if offer.itineraries else '',
            'stops': stops_label(stop_count(offer)),
            'price': format_price(offer.price.total, offer.price.currency),
            'seats': offer.number_of_bookable_seats,
            'bags_included': bags,
        }

    def render_html(self, results: ProcessedResults, carriers: dict[str, str], params: SearchParams) -> str:
        max_count = max((b.count for b in results.buckets), default=0)
        chart = [
            {'label': b.label, 'count': b.count, 'height': round(100 * b.count / max_count) if max_count else 0}
            for b in results.buckets
        ]
        env = Environment(loader=FileSystemLoader(str(TEMPLATES_DIR)), autoescape=select_autoescape(['html', 'xml', 'html.j2']))
        tpl = env.get_template('flight_results.html.j2')
        rendered = tpl.render(
            params=params,
            sort_key=self.sort_key,
            shown_count=len(results.offers),
            total_count=results.total_count,
            offers=[self._offer_row(o, carriers) for o in results.offers],
            chart=chart,
            airlines=available_airlines(results.offers, carriers),
            generated_at=datetime.now().strftime('%d.%m.%Y %H:%M'),
        )
        soup = BeautifulSoup(rendered, 'lxml')
        return soup.prettify()
