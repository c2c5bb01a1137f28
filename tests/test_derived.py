"""
Tests for derived display fields.
"""

import pytest

from conftest import UAL123_VECTOR, make_vector
from planetracker.ingestion.derived import (
    altitude_feet,
    derive_record,
    display_callsign,
    speed_knots,
)
from planetracker.ingestion.parser import parse_state_vector


class TestUnitConversions:
    @pytest.mark.parametrize("velocity", [0.0, 1.0, 231.2, 300.75])
    def test_speed_knots(self, velocity):
        assert speed_knots(velocity) == velocity * 1.94384

    @pytest.mark.parametrize("altitude", [-30.0, 0.0, 10668.0, 12496.8])
    def test_altitude_feet(self, altitude):
        assert altitude_feet(altitude) == altitude * 3.28084

    def test_absent_inputs_stay_absent(self):
        assert speed_knots(None) is None
        assert altitude_feet(None) is None

    def test_display_callsign(self):
        assert display_callsign("UAL123 ") == "UAL123"
        assert display_callsign("  ") == "Unknown"
        assert display_callsign(None) == "Unknown"


class TestDeriveRecord:
    def test_reference_vector(self):
        record = derive_record(parse_state_vector(UAL123_VECTOR))

        assert record.icao24 == "abc123"
        assert record.display_callsign == "UAL123"
        assert record.altitude_feet == pytest.approx(35000, abs=1)
        assert record.speed_knots == pytest.approx(449, abs=1)
        assert record.on_ground is False

    def test_missing_telemetry(self):
        record = derive_record(parse_state_vector(make_vector(baro_altitude=None, velocity=None)))

        assert record.altitude_feet is None
        assert record.speed_knots is None
        assert record.flight_level is None
        assert record.vertical_rate_fpm == 0

    def test_to_dict(self):
        record = derive_record(parse_state_vector(UAL123_VECTOR))
        data = record.to_dict()

        assert data["callsign"] == "UAL123"
        assert data["position"] == {"latitude": 37.7749, "longitude": -122.4194}
        assert data["telemetry"]["altitude_ft"] == 35000
        assert data["telemetry"]["flight_level"] == "FL350"
        assert data["telemetry"]["speed_kts"] == 449
        assert data["status"]["on_ground"] is False
