"""High-level orchestration: fetch offers, narrow/order them and write an HTML report.

Usage patterns:

1. Live search (falls back to mock data when credentials are missing or the API fails):
   run_pipeline(SearchParams("JFK", "LHR", "2025-07-01"), sort_key="duration")

2. Offline, reproducible run against generated data:
   run_pipeline(params, mock=True, seed=42, stops=["0"])
"""
import argparse
import dataclasses
import logging
from pathlib import Path
from typing import Sequence

from skyfilter.config import Settings, settings
from skyfilter.fetching.provider import FlightDataProvider
from skyfilter.logging_config import setup_logging
from skyfilter.models import (SORT_KEYS, TIMES_OF_DAY, TRAVEL_CLASSES, FilterSpec, FlightOffer, SearchParams, SortKey,
                             TimeOfDay)
from skyfilter.processing.filters import default_filter_spec, expand_stop_options
from skyfilter.processing.pricing import format_price
from skyfilter.processing.results import FlightResultsProcessor

STOP_CHOICES = ["0", "1", "2+"]


def build_filter_spec(
        base: FilterSpec,
        stops: Sequence[int | str],
        offers: list[FlightOffer],
        min_price: float | None = None,
        max_price: float | None = None,
        airlines: Sequence[str] = (),
        departure_time: Sequence[TimeOfDay] = (),
        arrival_time: Sequence[TimeOfDay] = (),
        max_duration: int | None = None,
        included_baggage: bool | None = None,
) -> FilterSpec:
    low, high = base.price_range
    return dataclasses.replace(
        base,
        stops=expand_stop_options(stops, offers),
        price_range=(low if min_price is None else min_price, high if max_price is None else max_price),
        airlines=frozenset(code.upper() for code in airlines),
        departure_time=frozenset(departure_time),
        arrival_time=frozenset(arrival_time),
        max_duration=max_duration,
        included_baggage=included_baggage,
    )


def run_pipeline(
        params: SearchParams,
        sort_key: SortKey = "price",
        stops: Sequence[int | str] = (),
        min_price: float | None = None,
        max_price: float | None = None,
        airlines: Sequence[str] = (),
        departure_time: Sequence[TimeOfDay] = (),
        arrival_time: Sequence[TimeOfDay] = (),
        max_duration: int | None = None,
        included_baggage: bool | None = None,
        mock: bool = False,
        seed: int | None = None,
        output: Path | None = None,
        config: Settings = settings,
) -> Path:
    if mock:
        config = dataclasses.replace(config, use_mock_data=True)
    provider = FlightDataProvider(config, seed=seed)
    result = provider.fetch_offers(params)

    filter_spec = build_filter_spec(
        default_filter_spec(result.offers),
        stops,
        result.offers,
        min_price=min_price,
        max_price=max_price,
        airlines=airlines,
        departure_time=departure_time,
        arrival_time=arrival_time,
        max_duration=max_duration,
        included_baggage=included_baggage,
    )
    logging.debug(f"Filter spec: {filter_spec}")

    processor = FlightResultsProcessor(filter_spec, sort_key, result.currency)
    results = processor.process(result.offers)
    if results.offers and sort_key == "price":
        cheapest = results.offers[0]
        logging.info(f"Cheapest match: {format_price(cheapest.price.total, cheapest.price.currency)} "
                     f"({', '.join(cheapest.validating_airline_codes)})")

    html = processor.render_html(results, result.carriers, params)
    output = output or config.output_html
    output.write_text(html, encoding="utf-8")
    logging.info(f"Output written to {output}")
    return output


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Search flight offers, filter and sort them, write an HTML report")
    # Search
    p.add_argument("--origin", required=True, help="Origin airport IATA code")
    p.add_argument("--destination", required=True, help="Destination airport IATA code")
    p.add_argument("--date", required=True, help="Departure date YYYY-MM-DD")
    p.add_argument("--return-date", help="Return date YYYY-MM-DD (round trip)")
    p.add_argument("--adults", type=int, default=1)
    p.add_argument("--travel-class", choices=TRAVEL_CLASSES)
    p.add_argument("--non-stop", action="store_true", help="Ask the provider for non-stop flights only")
    # Filters
    p.add_argument("--stops", nargs="+", choices=STOP_CHOICES, default=[], help="Allowed stop counts")
    p.add_argument("--min-price", type=float)
    p.add_argument("--max-price", type=float)
    p.add_argument("--airline", nargs="+", default=[], help="Validating carrier codes, e.g. AA BA")
    p.add_argument("--departure-time", nargs="+", choices=TIMES_OF_DAY, default=[])
    p.add_argument("--arrival-time", nargs="+", choices=TIMES_OF_DAY, default=[])
    p.add_argument("--max-duration", type=int, help="Maximum outbound travel time in minutes")
    p.add_argument("--included-baggage", action="store_true", help="Prefer offers with checked bags (display only)")
    # Ordering / output
    p.add_argument("--sort", choices=SORT_KEYS, default="price")
    p.add_argument("--mock", action="store_true", help="Use generated data instead of the Amadeus API")
    p.add_argument("--seed", type=int, help="Seed for reproducible mock data")
    p.add_argument("--output", type=Path, help=f"HTML report path (default {settings.output_html})")
    p.add_argument("--log-level", default="INFO")
    return p


def main_cli(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level)

    params = SearchParams(
        origin=args.origin.upper(),
        destination=args.destination.upper(),
        departure_date=args.date,
        return_date=args.return_date,
        adults=args.adults,
        travel_class=args.travel_class,
        non_stop=args.non_stop,
    )
    try:
        run_pipeline(
            params,
            sort_key=args.sort,
            stops=args.stops,
            min_price=args.min_price,
            max_price=args.max_price,
            airlines=args.airline,
            departure_time=args.departure_time,
            arrival_time=args.arrival_time,
            max_duration=args.max_duration,
            included_baggage=args.included_baggage or None,
            mock=args.mock,
            seed=args.seed,
            output=args.output,
        )
    except Exception:  # noqa: BLE001
        logging.exception("Pipeline failed")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main_cli())
