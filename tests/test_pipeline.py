from unittest.mock import patch

import pytest

from skyfilter.config import Settings
from skyfilter.models import FilterSpec, SearchParams
from skyfilter.pipeline import build_filter_spec, main_cli, run_pipeline

PARAMS = SearchParams("JFK", "LHR", "2025-07-01")


@pytest.fixture(autouse=True)
def _keep_test_logging():
    # setup_logging replaces the root handlers, which would hide records from caplog
    with patch("skyfilter.pipeline.setup_logging"):
        yield


def test_build_filter_spec_overrides_defaults(make_offer):
    offers = [make_offer(stops=0), make_offer(stops=3)]
    base = FilterSpec(price_range=(120, 880))

    spec = build_filter_spec(base, ["0", "2+"], offers, max_price=500, airlines=["ba", "aa"],
                             departure_time=["morning"], max_duration=600)

    assert spec.stops == frozenset({0, 2, 3})
    assert spec.price_range == (120, 500)
    assert spec.airlines == frozenset({"BA", "AA"})
    assert spec.departure_time == frozenset({"morning"})
    assert spec.arrival_time == frozenset()
    assert spec.max_duration == 600


def test_run_pipeline_with_mock_data(tmp_path):
    output = tmp_path / "report.html"
    config = Settings(amadeus_client_id="id", amadeus_client_secret="secret", use_mock_data=False)

    written = run_pipeline(PARAMS, sort_key="duration", mock=True, seed=11, output=output, config=config)

    assert written == output
    html = output.read_text(encoding="utf-8")
    assert "Showing 25 of 25 flights, sorted by duration" in html


def test_run_pipeline_is_reproducible_with_seed(tmp_path):
    config = Settings(use_mock_data=True)
    first = run_pipeline(PARAMS, stops=["0"], mock=True, seed=4, output=tmp_path / "a.html", config=config)
    second = run_pipeline(PARAMS, stops=["0"], mock=True, seed=4, output=tmp_path / "b.html", config=config)

    def table(path):
        html = path.read_text(encoding="utf-8")
        return html[html.index("<table"):]

    assert table(first) == table(second)


def test_main_cli_writes_report(tmp_path):
    output = tmp_path / "flights.html"
    code = main_cli(["--origin", "jfk", "--destination", "lhr", "--date", "2025-07-01", "--mock", "--seed", "3",
                     "--stops", "0", "1", "--sort", "departure", "--output", str(output)])
    assert code == 0
    html = output.read_text(encoding="utf-8")
    assert "Flights JFK → LHR" in html
    assert "sorted by departure" in html


def test_main_cli_reports_failure(tmp_path, caplog):
    code = main_cli(["--origin", "JFK", "--destination", "LHR", "--date", "01/07/2025", "--mock",
                     "--output", str(tmp_path / "x.html")])
    assert code == 1
    assert "Pipeline failed" in caplog.text


def test_main_cli_rejects_unknown_sort_key():
    with pytest.raises(SystemExit):
        main_cli(["--origin", "JFK", "--destination", "LHR", "--date", "2025-07-01", "--sort", "cheapest"])
