"""Route segmentation: derive the four legs of a record's journey.

A record names an overall origin and destination plus optional inbound and
outbound flight numbers. The booked flights rarely start at the origin or
end at the destination, so the segmenter reconstructs the connecting legs:

    origin --before BT--> inbound --> outbound --after BT--> destination

Rules:
- inbound/outbound legs are the registered endpoints of the flight, or
  none when the number is absent or not in the registry
- before BT runs from the origin to the inbound origin, falling back to
  the outbound origin when there is no resolved inbound
- after BT runs from the outbound destination to the destination; there
  is no fallback to inbound
- a connection whose two ends are equal collapses to none
"""

import logging
from typing import Optional, Sequence

from cargorate.airports import normalize_airport_code
from cargorate.flights import resolve_flight
from cargorate.models import (
    ARROW,
    Flight,
    FlightRecord,
    ResolvedFlight,
    RouteLeg,
    Segmentation,
)
from cargorate.settings import EMPTY_LEG

logger = logging.getLogger(__name__)


def _connection(start: str, end: str) -> Optional[RouteLeg]:
    if not start or not end or start == end:
        return None
    return RouteLeg(origin=start, destination=end)


def segment(
    origin: str,
    destination: str,
    inbound: Optional[str],
    outbound: Optional[str],
    flights: Sequence[Flight],
) -> Segmentation:
    """Segment a journey given canonical origin/destination and flight numbers."""
    inbound_flight = resolve_flight(inbound, flights)
    outbound_flight = resolve_flight(outbound, flights)

    before_bt: Optional[RouteLeg] = None
    if inbound_flight is not None:
        before_bt = _connection(origin, inbound_flight.origin)
    elif outbound_flight is not None:
        before_bt = _connection(origin, outbound_flight.origin)

    after_bt: Optional[RouteLeg] = None
    if outbound_flight is not None:
        after_bt = _connection(outbound_flight.destination, destination)

    seg = Segmentation(
        origin=origin,
        destination=destination,
        inbound_number=inbound or None,
        outbound_number=outbound or None,
        before_bt=before_bt,
        inbound=inbound_flight,
        outbound=outbound_flight,
        after_bt=after_bt,
    )
    logger.debug(
        "Segmented %s: %s",
        seg.route,
        [leg.label if leg else EMPTY_LEG for leg in seg.legs],
    )
    return seg


def segment_record(record: FlightRecord, flights: Sequence[Flight]) -> Segmentation:
    """Normalize a record's raw codes and segment its journey."""
    return segment(
        normalize_airport_code(record.origin),
        normalize_airport_code(record.destination),
        record.inbound,
        record.outbound,
        flights,
    )


def _leg_text(leg: Optional[RouteLeg]) -> str:
    return leg.label if leg is not None else EMPTY_LEG


def _flight_text(number: Optional[str], resolved: Optional[ResolvedFlight]) -> str:
    if resolved is not None:
        return resolved.display
    return number or EMPTY_LEG


def _override_text(start: Optional[str], end: Optional[str]) -> Optional[str]:
    if start and end:
        return f"{start} {ARROW} {end}"
    return None


def display_legs(record: FlightRecord, seg: Segmentation) -> dict[str, str]:
    """Render the display columns for a record.

    Unresolved flight numbers are still shown, bare. For converted records
    the persisted override fields take precedence, and inbound, outbound
    and destination are suppressed.
    """
    columns = {
        "origin": seg.origin or EMPTY_LEG,
        "before_bt": _leg_text(seg.before_bt),
        "inbound": _flight_text(seg.inbound_number, seg.inbound),
        "outbound": _flight_text(seg.outbound_number, seg.outbound),
        "after_bt": _leg_text(seg.after_bt),
        "destination": seg.destination or EMPTY_LEG,
    }
    if not record.is_converted:
        return columns

    if record.converted_origin:
        columns["origin"] = normalize_airport_code(record.converted_origin)
    columns["before_bt"] = (
        _override_text(record.before_bt_from, record.before_bt_to) or columns["before_bt"]
    )
    columns["after_bt"] = (
        _override_text(record.after_bt_from, record.after_bt_to) or columns["after_bt"]
    )
    columns["inbound"] = EMPTY_LEG
    columns["outbound"] = EMPTY_LEG
    columns["destination"] = EMPTY_LEG
    return columns
