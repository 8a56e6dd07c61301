"""Tests for cargorate.flights."""

from cargorate.flights import (
    find_flight,
    flight_number_of,
    format_flight,
    parse_flight_display,
    resolve_flight,
)
from cargorate.models import Flight, ResolvedFlight
from cargorate.segmenter import segment_record


class TestResolveFlight:
    def test_resolves_canonical_endpoints(self, flights):
        resolved = resolve_flight("BT234", flights)
        assert resolved == ResolvedFlight(flight_number="BT234", origin="FRA", destination="RIX")

    def test_case_insensitive(self, flights):
        resolved = resolve_flight("bt234", flights)
        assert resolved is not None
        assert resolved.origin == "FRA"

    def test_unknown_returns_none(self, flights):
        assert resolve_flight("BT777", flights) is None

    def test_empty_returns_none(self, flights):
        assert resolve_flight(None, flights) is None
        assert resolve_flight("", flights) is None
        assert resolve_flight("   ", flights) is None

    def test_inactive_flight_not_resolved(self, snapshot):
        assert find_flight("BT999", snapshot.flights) is None

    def test_exact_match_only(self, flights):
        assert resolve_flight("BT23", flights) is None


class TestFormatFlight:
    def test_resolved_display(self, flights):
        assert format_flight("BT234", flights) == "BT234, FRA → RIX"

    def test_unresolved_returns_bare_number(self, flights):
        assert format_flight("BT777", flights) == "BT777"

    def test_none(self, flights):
        assert format_flight(None, flights) == ""


class TestParseFlightDisplay:
    def test_inverse_of_format(self, flights):
        text = format_flight("BT344", flights)
        parsed = parse_flight_display(text)
        assert parsed == resolve_flight("BT344", flights)

    def test_dash_arrow(self):
        parsed = parse_flight_display("BT344, DUS -> RIX")
        assert parsed.origin == "DUS"
        assert parsed.destination == "RIX"

    def test_parentheses(self):
        parsed = parse_flight_display("AA123 (CDG → JFK)")
        assert parsed.flight_number == "AA123"
        assert parsed.origin == "CDG"
        assert parsed.destination == "JFK"

    def test_flight_number_with_space(self):
        parsed = parse_flight_display("BT 344, FRA → DUS")
        assert parsed.flight_number == "BT 344"

    def test_bare_number_has_no_route(self):
        assert parse_flight_display("BT777") is None

    def test_placeholder(self):
        assert parse_flight_display("-") is None
        assert parse_flight_display("") is None
        assert parse_flight_display(None) is None

    def test_display_of_resolved_flight(self):
        flight = Flight(id="x", flight_number="LO1", origin="PLWAWX", destination="LVRIXX")
        assert format_flight("LO1", [flight]) == "LO1, WAW → RIX"


class TestStoredDisplayStrings:
    def test_flight_number_of(self):
        assert flight_number_of("BT344, DUS → RIX") == "BT344"
        assert flight_number_of("BT344 (DUS -> RIX)") == "BT344"
        assert flight_number_of(" BT344 ") == "BT344"
        assert flight_number_of(None) == ""

    def test_display_string_resolves(self, flights):
        resolved = resolve_flight("BT234, FRA → RIX", flights)
        assert resolved == ResolvedFlight(flight_number="BT234", origin="FRA", destination="RIX")

    def test_registry_endpoints_win(self, flights):
        """The stored route is ignored; the registry decides the endpoints."""
        resolved = resolve_flight("BT344, FRA → MAD", flights)
        assert resolved.origin == "DUS"
        assert resolved.destination == "RIX"

    def test_unregistered_display_string(self, flights):
        assert resolve_flight("BT777, FRA → RIX", flights) is None

    def test_segment_record_with_display_string(self, records, flights):
        record = records["r3"].model_copy(
            update={"inbound": "BT344, DUS → RIX", "outbound": "BT435 (RIX -> MAD)"}
        )
        seg = segment_record(record, flights)
        plain = segment_record(records["r3"], flights)
        assert seg.inbound == plain.inbound
        assert seg.outbound == plain.outbound
        assert seg.before_bt == plain.before_bt
        assert seg.after_bt == plain.after_bt
