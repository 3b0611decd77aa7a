import logging

import dacite
import pytest

from skyfilter.models import Airport, parse_airports, parse_offer, parse_offers


def test_parse_offer_maps_camel_case_payload(raw_offer):
    offer = parse_offer(raw_offer)

    assert offer.id == "7"
    assert offer.number_of_bookable_seats == 5
    assert offer.validating_airline_codes == ["FI"]
    assert offer.price.total == "412.35"
    assert offer.price.grand_total == "412.35"
    assert offer.price.currency == "EUR"
    assert offer.pricing_options.included_checked_bags_only is True
    assert offer.pricing_options.fare_type == ["PUBLISHED"]

    first, second = offer.itineraries[0].segments
    assert first.departure.iata_code == "JFK"
    assert first.departure.terminal == "7"
    assert first.aircraft.code == "76W"
    assert second.arrival.at == "2025-07-02T11:45:00"
    assert second.arrival.terminal is None


def test_parse_offer_rejects_missing_price(raw_offer):
    del raw_offer["price"]
    with pytest.raises(dacite.DaciteError):
        parse_offer(raw_offer)


def test_parse_offers_drops_malformed_records(raw_offer, caplog):
    broken = dict(raw_offer, id="8")
    del broken["itineraries"]

    with caplog.at_level(logging.WARNING):
        offers = parse_offers([raw_offer, broken])

    assert [o.id for o in offers] == ["7"]
    assert "Dropping malformed flight offer 8" in caplog.text


def test_parse_airports():
    raw = [
        {"iataCode": "LHR", "name": "HEATHROW", "address": {"cityName": "LONDON", "countryName": "UNITED KINGDOM"}},
        {"iataCode": "XXX"},
        {"name": "no code"},
    ]
    assert parse_airports(raw) == [
        Airport(iata_code="LHR", name="HEATHROW", city="LONDON", country="UNITED KINGDOM"),
        Airport(iata_code="XXX", name="XXX", city="", country=""),
    ]
