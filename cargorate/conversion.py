"""Manual conversion overrides for flight records.

A user may replace the derived segmentation and price of a record with
explicit values. Saving a valid override moves the record from
UNCONVERTED to CONVERTED; a converted record can be edited again. Once
converted, the record's price is the applied rate chosen here and the
sector-rate matcher is no longer run for it.
"""

import logging
from typing import Sequence

from cargorate.airports import normalize_airport_code
from cargorate.flights import format_flight
from cargorate.models import (
    ConversionForm,
    ConversionResult,
    Flight,
    FlightRecord,
)

logger = logging.getLogger(__name__)

# Fields written to the store by a conversion
OVERRIDE_FIELDS: tuple[str, ...] = (
    "is_converted",
    "converted_origin",
    "converted_destination",
    "before_bt_from",
    "before_bt_to",
    "inbound",
    "outbound",
    "after_bt_from",
    "after_bt_to",
    "applied_rate",
    "sector_rate_id",
)

SAME_ORIGIN_DESTINATION = "Origin and destination cannot be the same."
SAME_BEFORE_BT = "Before BT from and to cannot be the same airport."
SAME_FLIGHTS = "Inbound and outbound cannot be the same flight."
SAME_AFTER_BT = "After BT from and to cannot be the same airport."


def validate_conversion(form: ConversionForm, flights: Sequence[Flight]) -> list[str]:
    """Check an override form; every failed check contributes its own message."""
    errors: list[str] = []

    if normalize_airport_code(form.origin) == normalize_airport_code(form.destination):
        errors.append(SAME_ORIGIN_DESTINATION)

    if form.before_bt_from and form.before_bt_to and form.before_bt_from == form.before_bt_to:
        errors.append(SAME_BEFORE_BT)

    if form.inbound and form.outbound:
        if format_flight(form.inbound, flights) == format_flight(form.outbound, flights):
            errors.append(SAME_FLIGHTS)

    if form.after_bt_from and form.after_bt_to and form.after_bt_from == form.after_bt_to:
        errors.append(SAME_AFTER_BT)

    return errors


def apply_conversion(
    record: FlightRecord, form: ConversionForm, flights: Sequence[Flight]
) -> ConversionResult:
    """Validate and apply an override.

    On failure the record is returned unchanged with all messages. On
    success a converted copy of the record is returned.
    """
    errors = validate_conversion(form, flights)
    if errors:
        logger.info("Conversion of record %s rejected: %s", record.id, "; ".join(errors))
        return ConversionResult(record=record, errors=errors)

    update = {
        "is_converted": True,
        "converted_origin": normalize_airport_code(form.origin),
        "converted_destination": normalize_airport_code(form.destination),
        "before_bt_from": form.before_bt_from,
        "before_bt_to": form.before_bt_to,
        "after_bt_from": form.after_bt_from,
        "after_bt_to": form.after_bt_to,
        "applied_rate": form.applied_rate,
        "sector_rate_id": form.sector_rate_id,
    }
    if form.inbound:
        update["inbound"] = form.inbound
    if form.outbound:
        update["outbound"] = form.outbound

    converted = record.model_copy(update=update)
    logger.info("Record %s converted", record.id)
    return ConversionResult(record=converted)


def override_fields(record: FlightRecord) -> dict:
    """The persisted override fields of a record, JSON-ready."""
    data = record.model_dump(mode="json")
    return {key: data.get(key) for key in OVERRIDE_FIELDS}
