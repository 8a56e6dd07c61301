"""Flight number resolution against the flight registry.

A resolved flight carries its flight number and canonical endpoints as a
tagged structure; ``ResolvedFlight.display`` renders the console string
``"BT234, FRA → RIX"``. ``parse_flight_display`` reads such strings back
for records that stored the rendered text instead of the structure.
"""

import logging
import re
from typing import Iterable, Optional

from cargorate.airports import normalize_airport_code
from cargorate.models import Flight, ResolvedFlight

logger = logging.getLogger(__name__)

# "BT344 (DUS → RIX)", "BT344 (DUS -> RIX)"
_PAREN_ROUTE = re.compile(r"\(([A-Z]{3})\s*(?:→|->)\s*([A-Z]{3})\)")
# "BT344, DUS → RIX", "BT344, DUS -> RIX"
_COMMA_ROUTE = re.compile(r",\s*([A-Z]{3})\s*(?:→|->)\s*([A-Z]{3})")
_FLIGHT_NUMBER = re.compile(r"^\s*([A-Za-z0-9 ]+?)\s*(?:,|\(|$)")


def flight_number_of(text: Optional[str]) -> str:
    """The flight number of a bare number or a stored display string.

    ``"BT344, DUS → RIX"`` and ``"BT344 (DUS -> RIX)"`` both yield ``"BT344"``.
    """
    if not text or not text.strip():
        return ""
    parsed = parse_flight_display(text)
    if parsed is not None and parsed.flight_number:
        return parsed.flight_number
    return text.strip()


def find_flight(flight_number: Optional[str], flights: Iterable[Flight]) -> Optional[Flight]:
    """Case-insensitive exact match on flight number among active flights."""
    wanted = flight_number_of(flight_number).lower()
    if not wanted:
        return None
    for flight in flights:
        if flight.is_active and flight.flight_number.lower() == wanted:
            return flight
    return None


def resolve_flight(
    flight_number: Optional[str], flights: Iterable[Flight]
) -> Optional[ResolvedFlight]:
    """Resolve a flight number to its canonical origin/destination.

    Stored display strings are looked up by their leading flight number.
    Returns None when the number is empty or not registered.
    """
    flight = find_flight(flight_number, flights)
    if flight is None:
        if flight_number:
            logger.debug("Flight %s not in registry", flight_number)
        return None
    return ResolvedFlight(
        flight_number=flight_number_of(flight_number),
        origin=normalize_airport_code(flight.origin),
        destination=normalize_airport_code(flight.destination),
    )


def format_flight(flight_number: Optional[str], flights: Iterable[Flight]) -> str:
    """Render "<number>, <origin> → <destination>", or the bare number if unresolved."""
    resolved = resolve_flight(flight_number, flights)
    if resolved is None:
        return flight_number or ""
    return resolved.display


def parse_flight_display(text: Optional[str]) -> Optional[ResolvedFlight]:
    """Parse a rendered flight string back into a ResolvedFlight.

    Accepts both arrow glyphs, with the route after a comma or in
    parentheses. Returns None when the string carries no route.
    """
    if not text or text.strip() in ("", "-"):
        return None
    match = _PAREN_ROUTE.search(text) or _COMMA_ROUTE.search(text)
    if match is None:
        return None
    number = _FLIGHT_NUMBER.match(text)
    return ResolvedFlight(
        flight_number=number.group(1) if number else "",
        origin=match.group(1),
        destination=match.group(2),
    )
