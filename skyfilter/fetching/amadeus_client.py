"""Amadeus Self-Service API client with OAuth2 token lifecycle."""

import logging
import time
from typing import Any

import requests

from ..models import SearchParams

logger = logging.getLogger(__name__)

# Refresh this many seconds before the provider says the token expires
TOKEN_EXPIRY_MARGIN = 300


class AmadeusClient:
    """Manages Amadeus API authentication and requests. Errors propagate to the caller."""

    def __init__(self, client_id: str, client_secret: str, base_url: str, timeout: float = 15.0):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = requests.Session()
        self.token: str | None = None
        self.token_expiry = 0.0

    def _ensure_token(self) -> str:
        """Return the cached bearer token, fetching a new one when it is missing or about to expire."""
        if self.token and time.time() < self.token_expiry:
            return self.token
        resp = self.session.post(
            f"{self.base_url}/v1/security/oauth2/token",
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        self.token = data["access_token"]
        self.token_expiry = time.time() + data["expires_in"] - TOKEN_EXPIRY_MARGIN
        logger.info("Amadeus token refreshed")
        return self.token

    def _get(self, path: str, params: dict[str, Any], retries: int = 3) -> dict[str, Any]:
        """Authenticated GET with retry on 500s.

        The sandbox rate limit is 1 req/100ms and it throws intermittent 500s.
        """
        headers = {"Authorization": f"Bearer {self._ensure_token()}"}
        url = f"{self.base_url}{path}"

        for attempt in range(retries + 1):
            resp = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
            if resp.status_code < 500 or attempt == retries:
                if resp.status_code >= 400:
                    self._log_error_payload(resp)
                resp.raise_for_status()
                return resp.json()

            wait = 0.5 * (attempt + 1)
            logger.warning("Amadeus %s on GET %s, retry %d/%d in %.1fs",
                           resp.status_code, path, attempt + 1, retries, wait)
            time.sleep(wait)
        raise RuntimeError("unreachable")  # pragma: no cover

    @staticmethod
    def _log_error_payload(resp: requests.Response) -> None:
        try:
            errors = resp.json().get("errors", [])
        except ValueError:
            logger.error("Amadeus %s: %s", resp.status_code, resp.text[:500])
            return
        for e in errors:
            logger.error("Amadeus %s: [%s] %s - %s", resp.status_code, e.get("code"),
                         e.get("title", ""), e.get("detail", ""))

    # --- Flight Search APIs ---

    def flight_offers_search(self, params: SearchParams, currency: str = "USD",
                             max_results: int = 50) -> dict[str, Any]:
        """GET /v2/shopping/flight-offers. Returns the raw response (data + dictionaries)."""
        query: dict[str, Any] = {
            "originLocationCode": params.origin,
            "destinationLocationCode": params.destination,
            "departureDate": params.departure_date,
            "adults": params.adults,
            "max": max_results,
            "currencyCode": currency,
        }
        if params.return_date:
            query["returnDate"] = params.return_date
        if params.children:
            query["children"] = params.children
        if params.infants:
            query["infants"] = params.infants
        if params.travel_class:
            query["travelClass"] = params.travel_class
        if params.non_stop:
            query["nonStop"] = "true"
        if params.max_price:
            query["maxPrice"] = params.max_price
        return self._get("/v2/shopping/flight-offers", query)

    def flight_price_analysis(self, origin: str, destination: str, departure_date: str) -> list[dict[str, Any]]:
        """GET /v1/shopping/flight-dates: cheapest prices around a date for a 7 day round trip."""
        data = self._get("/v1/shopping/flight-dates", {
            "origin": origin,
            "destination": destination,
            "departureDate": departure_date,
            "oneWay": "false",
            "duration": 7,
            "nonStop": "false",
            "viewBy": "DATE",
        })
        return data.get("data", [])

    # --- Airport & Location APIs ---

    def airport_city_search(self, keyword: str) -> list[dict[str, Any]]:
        """GET /v1/reference-data/locations keyword search for airports and cities."""
        data = self._get("/v1/reference-data/locations", {
            "subType": "AIRPORT,CITY",
            "keyword": keyword,
            "page[limit]": 10,
        })
        return data.get("data", [])
