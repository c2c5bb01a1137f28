"""
Tests for the filter engine.
"""

import pytest

from conftest import make_vector
from planetracker.filters import FilterCriteria, apply_filters, criteria_from_args, matches
from planetracker.ingestion.derived import derive_record
from planetracker.ingestion.parser import parse_state_vector


def record(**kwargs):
    return derive_record(parse_state_vector(make_vector(**kwargs)))


@pytest.fixture
def fleet():
    return [
        record(icao24="abc123", callsign="UAL123", country="United States",
               baro_altitude="10668", on_ground="false"),
        record(icao24="3c6444", callsign="DLH9CK ", country="Germany",
               baro_altitude="0", on_ground="true"),
        record(icao24="4ca2bf", callsign=None, country="Ireland",
               baro_altitude=None, on_ground="false"),
        record(icao24="a1b2c3", callsign="N123AB", country="United States",
               baro_altitude="914.4", on_ground="false"),
    ]


class TestMatches:
    def test_default_criteria_match_everything(self, fleet):
        assert all(matches(r, FilterCriteria()) for r in fleet)

    def test_search_callsign_case_insensitive(self, fleet):
        result = apply_filters(fleet, FilterCriteria(search_text="ual"))
        assert [r.icao24 for r in result] == ["abc123"]

    def test_search_icao24(self, fleet):
        result = apply_filters(fleet, FilterCriteria(search_text="3C64"))
        assert [r.icao24 for r in result] == ["3c6444"]

    def test_search_country(self, fleet):
        result = apply_filters(fleet, FilterCriteria(search_text="irel"))
        assert [r.icao24 for r in result] == ["4ca2bf"]

    def test_search_uses_display_callsign(self, fleet):
        result = apply_filters(fleet, FilterCriteria(search_text="unknown"))
        assert [r.icao24 for r in result] == ["4ca2bf"]

    def test_country_is_exact(self, fleet):
        result = apply_filters(fleet, FilterCriteria(country="United States"))
        assert [r.icao24 for r in result] == ["abc123", "a1b2c3"]
        assert apply_filters(fleet, FilterCriteria(country="united states")) == []

    def test_altitude_band_inclusive(self, fleet):
        low = fleet[3].altitude_feet
        high = fleet[0].altitude_feet
        band = FilterCriteria(min_altitude=low, max_altitude=high)
        result = apply_filters(fleet, band)
        # both edges are kept; a record without altitude passes
        assert [r.icao24 for r in result] == ["abc123", "4ca2bf", "a1b2c3"]

    def test_altitude_band_excludes(self, fleet):
        result = apply_filters(fleet, FilterCriteria(min_altitude=20000))
        assert [r.icao24 for r in result] == ["abc123", "4ca2bf"]

        result = apply_filters(fleet, FilterCriteria(max_altitude=100))
        assert [r.icao24 for r in result] == ["3c6444", "4ca2bf"]

    def test_on_ground_only(self, fleet):
        result = apply_filters(fleet, FilterCriteria(on_ground_only=True))
        assert [r.icao24 for r in result] == ["3c6444"]

    def test_airborne_only(self, fleet):
        result = apply_filters(fleet, FilterCriteria(airborne_only=True))
        assert [r.icao24 for r in result] == ["abc123", "4ca2bf", "a1b2c3"]

    def test_on_ground_and_airborne_matches_nothing(self, fleet):
        criteria = FilterCriteria(on_ground_only=True, airborne_only=True)
        assert not any(matches(r, criteria) for r in fleet)

    def test_constraints_combine(self, fleet):
        criteria = FilterCriteria(search_text="a", country="United States", airborne_only=True,
                                  min_altitude=5000)
        assert [r.icao24 for r in apply_filters(fleet, criteria)] == ["abc123"]


class TestCriteriaFromArgs:
    def test_defaults(self):
        assert criteria_from_args({}) == FilterCriteria()

    def test_all_params(self):
        criteria = criteria_from_args({
            "q": " ual ",
            "country": "Germany",
            "min_altitude": "1000",
            "max_altitude": "40000.5",
            "on_ground_only": "true",
            "airborne_only": "0",
        })
        assert criteria == FilterCriteria(
            search_text="ual",
            country="Germany",
            min_altitude=1000.0,
            max_altitude=40000.5,
            on_ground_only=True,
            airborne_only=False,
        )

    def test_blank_bound_is_unset(self):
        assert criteria_from_args({"min_altitude": ""}).min_altitude is None

    @pytest.mark.parametrize("value", ["high", "nan"])
    def test_bad_bound_raises(self, value):
        with pytest.raises(ValueError):
            criteria_from_args({"max_altitude": value})
