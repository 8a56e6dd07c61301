"""Tests for cargorate.models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from cargorate.models import (
    ConversionForm,
    ConversionState,
    FlightRecord,
    PricedBreakdown,
    ResolvedFlight,
    SectorRate,
    SectorRateV3,
    Segmentation,
    to_money,
)


class TestToMoney:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (3, "3.00"),
            ("2.345", "2.35"),
            (Decimal("1.005"), "1.01"),
            (" 4.5 ", "4.50"),
            (None, "0.00"),
            ("n/a", "0.00"),
            ("", "0.00"),
            ("NaN", "0.00"),
            (True, "0.00"),
        ],
    )
    def test_values(self, value, expected):
        assert to_money(value) == Decimal(expected)


class TestSectorRate:
    def test_codes_uppercased(self):
        rate = SectorRate(id=1, origin="fra", destination="rix", sector_rate="3")
        assert rate.id == "1"
        assert rate.route == "FRA → RIX"
        assert rate.amount == Decimal("3.00")

    def test_code_length_enforced(self):
        with pytest.raises(ValidationError):
            SectorRate(id="1", origin="FRAX", destination="RIX", sector_rate=3)

    def test_rate_required(self):
        with pytest.raises(ValidationError):
            SectorRate(id="1", origin="FRA", destination="RIX")


class TestSectorRateV3:
    def test_store_arrays_unwrapped(self):
        rate = SectorRateV3.model_validate(
            {"id": 7, "airbaltic_origin": ["DEFRAX"], "airbaltic_destination": ["LVRIXX"]}
        )
        assert rate.id == "7"
        assert rate.origin == "FRA"
        assert rate.destination == "RIX"
        assert rate.base_route == "FRA -> RIX"

    def test_scalar_fields_win(self):
        rate = SectorRateV3.model_validate(
            {"id": "x", "origin": "AMS", "airbaltic_origin": ["FRA"], "destination": "ATH"}
        )
        assert rate.origin == "AMS"

    def test_empty_store_array(self):
        rate = SectorRateV3.model_validate({"id": "x", "airbaltic_origin": []})
        assert rate.origin == ""

    def test_null_lists(self):
        rate = SectorRateV3.model_validate(
            {"id": "x", "transit_routes": None, "transit_prices": None, "selected_routes": None}
        )
        assert rate.priced_stops == []
        assert rate.selected_routes == []

    def test_priced_stops(self):
        rate = SectorRateV3.model_validate(
            {"id": "x", "transit_routes": ["ams", "ath"], "transit_prices": [2, "5"]}
        )
        assert rate.priced_stops == [("AMS", 2), ("ATH", "5")]

    def test_blank_rate_is_none(self):
        assert SectorRateV3.model_validate({"id": "x", "sector_rate": ""}).sector_rate is None


class TestFlightRecord:
    def test_blank_strings_are_absent(self):
        record = FlightRecord(id="r", inbound="", outbound="  ", before_bt_from="")
        assert record.inbound is None
        assert record.outbound is None
        assert record.before_bt_from is None

    def test_null_origin(self):
        assert FlightRecord(id="r", origin=None).origin == ""

    def test_selected_ids_stringified(self):
        record = FlightRecord(id="r", selected_sector_rate_ids=[4, "6"])
        assert record.selected_sector_rate_ids == ["4", "6"]

    def test_state(self):
        assert FlightRecord(id="r").state == ConversionState.UNCONVERTED
        assert FlightRecord(id="r", is_converted=True).state == ConversionState.CONVERTED


class TestDerived:
    def test_resolved_flight_display(self):
        flight = ResolvedFlight(flight_number="BT234", origin="FRA", destination="RIX")
        assert flight.display == "BT234, FRA → RIX"
        assert flight.leg.key == ("FRA", "RIX")

    def test_segmentation_legs(self):
        seg = Segmentation(
            origin="FRA",
            destination="RIX",
            inbound=ResolvedFlight(flight_number="BT234", origin="FRA", destination="RIX"),
        )
        assert seg.legs[0] is None
        assert seg.legs[1].label == "FRA → RIX"
        assert len(seg.present_legs) == 1

    def test_breakdown_defaults(self):
        breakdown = PricedBreakdown(route="FRA → RIX")
        assert breakdown.total_sum == Decimal("0")
        assert not breakdown.has_rates
        assert breakdown.rate_ids == []

    def test_conversion_form_normalizes(self):
        form = ConversionForm(
            origin="FRA", destination="RIX", before_bt_from=" dus ", after_bt_to="", sector_rate_id=4
        )
        assert form.before_bt_from == "DUS"
        assert form.after_bt_to is None
        assert form.sector_rate_id == "4"
