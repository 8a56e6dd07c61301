"""Tests for cargorate.conversion manual overrides."""

from decimal import Decimal

from cargorate.conversion import (
    OVERRIDE_FIELDS,
    SAME_AFTER_BT,
    SAME_BEFORE_BT,
    SAME_FLIGHTS,
    SAME_ORIGIN_DESTINATION,
    apply_conversion,
    override_fields,
    validate_conversion,
)
from cargorate.models import ConversionForm, ConversionState


def _form(**kwargs):
    data = {"origin": "FRA", "destination": "MAD"}
    data.update(kwargs)
    return ConversionForm.model_validate(data)


class TestValidateConversion:
    def test_valid_form(self, flights):
        assert validate_conversion(_form(before_bt_from="FRA", before_bt_to="DUS"), flights) == []

    def test_two_failures_reported_together(self, records, flights):
        form = _form(destination="FRA", before_bt_from="RIX", before_bt_to="RIX")
        errors = validate_conversion(form, flights)
        assert errors == [SAME_ORIGIN_DESTINATION, SAME_BEFORE_BT]

        result = apply_conversion(records["r3"], form, flights)
        assert result.errors == errors
        assert result.state == ConversionState.UNCONVERTED
        assert not result.converted

    def test_origin_compared_canonically(self, flights):
        errors = validate_conversion(_form(origin="DEFRAX", destination="FRA"), flights)
        assert errors == [SAME_ORIGIN_DESTINATION]

    def test_same_flight(self, flights):
        errors = validate_conversion(_form(inbound="BT234", outbound="BT234"), flights)
        assert errors == [SAME_FLIGHTS]

    def test_same_unregistered_flight(self, flights):
        errors = validate_conversion(_form(inbound="BT777", outbound="BT777"), flights)
        assert errors == [SAME_FLIGHTS]

    def test_different_flights(self, flights):
        assert validate_conversion(_form(inbound="BT344", outbound="BT435"), flights) == []

    def test_same_after_bt(self, flights):
        errors = validate_conversion(_form(after_bt_from="lhr", after_bt_to="LHR"), flights)
        assert errors == [SAME_AFTER_BT]

    def test_half_filled_pair_not_checked(self, flights):
        assert validate_conversion(_form(before_bt_from="FRA", after_bt_to="LHR"), flights) == []

    def test_all_four_failures(self, flights):
        form = _form(
            destination="FRA",
            before_bt_from="DUS",
            before_bt_to="DUS",
            inbound="BT344",
            outbound="BT344",
            after_bt_from="LHR",
            after_bt_to="LHR",
        )
        assert len(validate_conversion(form, flights)) == 4


class TestApplyConversion:
    def test_success(self, records, flights):
        record = records["r3"]
        form = _form(
            origin="DEFRAX",
            destination="ESMADX",
            before_bt_from="FRA",
            before_bt_to="DUS",
            applied_rate="7.50",
            sector_rate_id=4,
        )
        result = apply_conversion(record, form, flights)
        assert result.errors == []
        assert result.converted
        converted = result.record
        assert converted.is_converted
        assert converted.converted_origin == "FRA"
        assert converted.converted_destination == "MAD"
        assert converted.before_bt_from == "FRA"
        assert converted.applied_rate == Decimal("7.50")
        assert converted.sector_rate_id == "4"
        # Flights kept when the form leaves them out
        assert converted.inbound == "BT344"
        assert converted.state == ConversionState.CONVERTED
        assert not record.is_converted

    def test_reconvert(self, records, flights):
        record = records["r5"]
        result = apply_conversion(record, _form(applied_rate="9.00", outbound="BT435"), flights)
        assert result.converted
        assert result.record.applied_rate == Decimal("9.00")
        assert result.record.before_bt_from is None

    def test_override_fields(self, records):
        fields = override_fields(records["r5"])
        assert set(fields) == set(OVERRIDE_FIELDS)
        assert fields["is_converted"] is True
        assert fields["converted_origin"] == "FRA"
        assert fields["sector_rate_id"] == "4"
