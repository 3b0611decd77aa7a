"""Flight data source used by the pipeline.

The provider is the only stateful piece of the system: it owns the Amadeus client (and so the
cached token) and remembers whether it has fallen back to mock data. Once a live call fails the
provider stays in mock mode for the rest of its lifetime.
"""
import logging
from typing import Any

import requests

from ..config import Settings, settings
from ..models import Airport, SearchParams, SearchResult, parse_airports, parse_offers
from .amadeus_client import AmadeusClient
from .mock_data import mock_airport_search, mock_flight_search

logger = logging.getLogger(__name__)

MIN_AIRPORT_KEYWORD = 2

# Token payloads missing keys or bodies that are not JSON surface as KeyError / ValueError
_LIVE_ERRORS = (requests.RequestException, KeyError, ValueError)


class FlightDataProvider:
    def __init__(self, config: Settings = settings, client: AmadeusClient | None = None, seed: int | None = None):
        self.settings = config
        self.seed = seed
        self.use_mock = config.use_mock_data or (client is None and not config.credentials_configured())
        self.client = client
        if self.client is None and not self.use_mock:
            self.client = AmadeusClient(config.amadeus_client_id, config.amadeus_client_secret,
                                        config.amadeus_base_url)
        if self.use_mock:
            logger.info("Using mock flight data")

    def _fall_back(self, action: str, error: Exception) -> None:
        logger.warning("%s failed, falling back to mock data: %s", action, error)
        self.use_mock = True

    def fetch_offers(self, params: SearchParams) -> SearchResult:
        raw: dict[str, Any] | None = None
        if not self.use_mock:
            try:
                raw = self.client.flight_offers_search(params, self.settings.currency_code,
                                                       self.settings.max_results)
            except _LIVE_ERRORS as e:
                self._fall_back("Flight offers search", e)
        source = "amadeus" if raw is not None else "mock"
        if raw is None:
            raw = mock_flight_search(params, seed=self.seed)

        offers = parse_offers(raw.get("data", []))
        carriers = (raw.get("dictionaries") or {}).get("carriers", {})
        currency = offers[0].price.currency if offers else self.settings.currency_code
        logger.info("Fetched %d offers %s -> %s from %s", len(offers), params.origin, params.destination, source)
        return SearchResult(offers=offers, carriers=carriers, currency=currency, source=source)

    def fetch_airports(self, keyword: str) -> list[Airport]:
        if not keyword or len(keyword) < MIN_AIRPORT_KEYWORD:
            return []
        if not self.use_mock:
            try:
                return parse_airports(self.client.airport_city_search(keyword))
            except _LIVE_ERRORS as e:
                self._fall_back("Airport search", e)
        return parse_airports(mock_airport_search(keyword))

    def fetch_price_analysis(self, origin: str, destination: str, departure_date: str) -> list[dict[str, Any]]:
        """Cheapest-date matrix for the route. Mock mode has no such data and returns []."""
        if not self.use_mock:
            try:
                return self.client.flight_price_analysis(origin, destination, departure_date)
            except _LIVE_ERRORS as e:
                self._fall_back("Price analysis", e)
        return []
