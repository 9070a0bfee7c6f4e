"""Tests for provider selection and the public geocode operations."""

import json

import pytest

from spatial_geocode import Configuration, Geocode, MAX_RESULTS
from spatial_geocode.__main__ import main
from spatial_geocode.geocoding import (
    GoogleMapsStrategy,
    InvalidConfigurationError,
    NominatimStrategy,
    TemplatedStrategy,
)
from spatial_geocode.geocoding import fetch as fetch_module
from spatial_geocode.procedures import clamp_max_results

from conftest import FakeFetch

OSM_RECORDS = [
    {"lat": str(i), "lon": str(-i), "display_name": f"Place {i}"} for i in range(150)
]


def make_geocode(settings, fake, registry, clock):
    return Geocode(
        Configuration(settings),
        registry=registry,
        fetch=fake,
        clock=clock.monotonic,
        sleeper=clock.sleep,
    )


@pytest.mark.parametrize(
    "requested, expected",
    [(0, 100), (1, 1), (7, 7), (100, 100), (101, 100), (5000, 100), (-3, 1)],
)
def test_clamp_max_results(requested, expected):
    assert clamp_max_results(requested) == expected


class TestProviderSelection:
    def test_defaults_to_osm(self, registry, clock):
        geocode = make_geocode({}, None, registry, clock)
        assert isinstance(geocode.get_strategy(), NominatimStrategy)

    def test_osm(self, registry, clock):
        geocode = make_geocode({"spatial.geocode.provider": "osm"}, None, registry, clock)
        assert isinstance(geocode.get_strategy(), NominatimStrategy)

    def test_google_is_case_insensitive(self, registry, clock):
        geocode = make_geocode({"spatial.geocode.provider": "Google"}, None, registry, clock)
        assert isinstance(geocode.get_strategy(), GoogleMapsStrategy)

    def test_other_names_are_templated_providers(self, registry, clock):
        settings = {
            "spatial.geocode.provider": "OpenCage",
            "spatial.geocode.opencage.url": "https://api.opencagedata.com/geocode/v1/json?q=PLACE&key=KEY",
            "spatial.geocode.opencage.key": "secret",
        }
        strategy = make_geocode(settings, None, registry, clock).get_strategy()

        assert isinstance(strategy, TemplatedStrategy)
        assert strategy.get_source_name() == "opencage"
        assert strategy.url_template.endswith("q=PLACE&key=secret")

    def test_templated_provider_without_url_fails(self, registry, clock):
        geocode = make_geocode({"spatial.geocode.provider": "acme"}, None, registry, clock)

        with pytest.raises(InvalidConfigurationError):
            geocode.geocode("Paris", 1)

    def test_settings_outside_prefix_are_ignored(self, registry, clock):
        geocode = make_geocode({"provider": "google", "google.key": "k"}, None, registry, clock)
        assert isinstance(geocode.get_strategy(), NominatimStrategy)


class TestGeocode:
    def test_zero_means_max_results(self, registry, clock):
        geocode = make_geocode({}, FakeFetch(OSM_RECORDS), registry, clock)
        assert len(list(geocode.geocode("Place", 0))) == MAX_RESULTS

    def test_large_requests_are_clamped(self, registry, clock):
        geocode = make_geocode({}, FakeFetch(OSM_RECORDS), registry, clock)
        assert len(list(geocode.geocode("Place", 1000))) == 100

    def test_negative_requests_return_one(self, registry, clock):
        geocode = make_geocode({}, FakeFetch(OSM_RECORDS), registry, clock)
        assert len(list(geocode.geocode("Place", -1))) == 1

    def test_geocode_once(self, registry, clock):
        geocode = make_geocode({}, FakeFetch(OSM_RECORDS), registry, clock)
        [result] = geocode.geocode_once("Place")

        assert result.to_record() == {
            "location": {"latitude": 0.0, "longitude": 0.0, "description": "Place 0"},
            "latitude": 0.0,
            "longitude": 0.0,
            "description": "Place 0",
            "data": OSM_RECORDS[0],
        }

    def test_throttle_persists_across_calls(self, registry, clock):
        settings = {"spatial.geocode.osm.throttle": "3000"}
        geocode = make_geocode(settings, FakeFetch(OSM_RECORDS), registry, clock)

        list(geocode.geocode_once("a"))
        list(geocode.geocode_once("b"))

        assert sum(clock.sleeps) == pytest.approx(3.0)

    def test_configuration_is_reread_per_call(self, registry, clock):
        settings = {}
        config = Configuration(settings)
        geocode = Geocode(config, registry=registry, fetch=None)
        assert isinstance(geocode.get_strategy(), NominatimStrategy)

        geocode.config = config.merged({"spatial.geocode.provider": "google"})
        assert isinstance(geocode.get_strategy(), GoogleMapsStrategy)

    def test_default_provider_outage_returns_no_results(self, registry, clock):
        fake = FakeFetch(OSError("down"))
        geocode = make_geocode({}, fake, registry, clock)

        assert list(geocode.geocode("Paris", 1)) == []
        assert len(fake.urls) == 2

    def test_selected_provider_is_logged(self, registry, clock, caplog):
        settings = {"spatial.geocode.osm.throttle": "1500"}
        geocode = make_geocode(settings, FakeFetch([]), registry, clock)

        with caplog.at_level("DEBUG", logger="spatial_geocode"):
            list(geocode.geocode_once("Paris"))

        assert "using osm, 1.5s between calls" in caplog.text

    def test_cancelled_caller_skips_throttle_wait(self, registry, clock):
        geocode = Geocode(
            Configuration({}),
            cancellation_check=lambda: "Transaction terminated",
            registry=registry,
            fetch=FakeFetch(OSM_RECORDS),
            clock=clock.monotonic,
            sleeper=clock.sleep,
        )
        list(geocode.geocode_once("a"))
        list(geocode.geocode_once("b"))

        assert clock.sleeps == []


class _FakeResponse:
    def __init__(self, payload):
        self.payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self.payload


class TestCommandLine:
    def test_prints_one_record_per_line(self, monkeypatch, capsys):
        monkeypatch.setattr(
            fetch_module.requests,
            "get",
            lambda url, headers=None, timeout=None: _FakeResponse(OSM_RECORDS[:3]),
        )

        main(["Place", "-n", "2", "--set", "osm.throttle=0"])

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["description"] == "Place 1"

    def test_configuration_error_exits_with_status_1(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["Paris", "--provider", "acme"])

        assert excinfo.value.code == 1
        assert "Missing 'url'" in capsys.readouterr().err

    def test_malformed_setting_exits_with_status_2(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["Paris", "--set", "novalue"])

        assert excinfo.value.code == 2
