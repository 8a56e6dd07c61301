"""Transit route options for v2 (composite) sector rates.

A v2 rate prices one airport pair and carries an ordered list of transit
stops, each with an incremental price. Its ``selected_routes`` are the stop
combinations offered to the user, written as ``"ORG -> AMS -> ATH -> DST"``.
The price of a route is the base rate plus the price of each interior stop.
"""

import itertools
import logging
import re
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence, Union

from cargorate.airports import normalize_airport_code
from cargorate.flights import resolve_flight
from cargorate.models import (
    DASH_ARROW,
    Customer,
    Flight,
    FlightRecord,
    RateSelection,
    SectorRateV3,
    TransitRouteOption,
    to_money,
)
from cargorate.settings import NO_CUSTOMER_LABEL, format_money

logger = logging.getLogger(__name__)

_ROUTE_SPLIT = re.compile(r"\s*(?:->|→)\s*")

CustomerLookup = Union[Mapping[str, Customer], Iterable[Customer]]


def route_tokens(route: Optional[str]) -> list[str]:
    """Split "A -> B -> C" (either arrow glyph) into uppercased codes."""
    if not route:
        return []
    return [t.strip().upper() for t in _ROUTE_SPLIT.split(route) if t.strip()]


def coerce_price(value) -> Decimal:
    """Read a stored transit price; anything non-numeric counts as zero."""
    return to_money(value)


def calculate_total_price(rate: SectorRateV3, selected_route: Optional[str]) -> Decimal:
    """Base rate plus the price of every interior stop of the route.

    Stops are looked up by their first position in ``transit_routes``. A stop
    that is not a priced transit stop adds nothing.
    """
    total = to_money(rate.sector_rate)
    stops = rate.priced_stops
    if not stops or not selected_route:
        return total

    codes = [code for code, _ in stops]
    for stop in route_tokens(selected_route)[1:-1]:
        if stop not in codes:
            logger.debug("Transit stop %s not priced on rate %s", stop, rate.id)
            continue
        total += coerce_price(stops[codes.index(stop)][1])
    return to_money(total)


def _customer_map(customers: Optional[CustomerLookup]) -> Mapping[str, Customer]:
    if customers is None:
        return {}
    if isinstance(customers, Mapping):
        return customers
    return {c.id: c for c in customers}


def display_text(
    rate: SectorRateV3,
    total_price: Decimal,
    transit_route: Optional[str],
    customers: Optional[CustomerLookup] = None,
) -> str:
    """Compose "€<total> - <label> - <route> - <customer>".

    Only the route part is dropped when there is no transit route; the label
    slot is always present.
    """
    customer = _customer_map(customers).get(rate.customer_id) if rate.customer_id else None
    parts = [format_money(total_price), rate.label]
    if transit_route:
        parts.append(transit_route)
    parts.append(customer.name if customer else NO_CUSTOMER_LABEL)
    return " - ".join(parts)


def _option(
    rate: SectorRateV3,
    transit_route: Optional[str],
    customers: Optional[CustomerLookup],
) -> TransitRouteOption:
    total = calculate_total_price(rate, transit_route)
    return TransitRouteOption(
        sector_rate_id=rate.id,
        transit_route=transit_route,
        display_text=display_text(rate, total, transit_route, customers),
        total_price=total,
    )


def generate_options(
    rate: SectorRateV3, customers: Optional[CustomerLookup] = None
) -> list[TransitRouteOption]:
    """All selectable options for one v2 rate.

    Without selected routes there is a single base option; otherwise one
    option per selected route.
    """
    if not rate.selected_routes:
        return [_option(rate, None, customers)]
    return [_option(rate, str(route), customers) for route in rate.selected_routes]


def enumerate_transit_routes(origin: str, destination: str, stops: Sequence[str]) -> list[str]:
    """Every non-empty, order-preserving subset of stops as a route string.

    Shorter routes come first; within a length, stop order follows ``stops``.
    """
    joiner = f" {DASH_ARROW} "
    routes: list[str] = []
    for size in range(1, len(stops) + 1):
        for combo in itertools.combinations(stops, size):
            routes.append(joiner.join([origin, *combo, destination]))
    return routes


def _record_codes(record: FlightRecord, flights: Sequence[Flight]) -> tuple[bool, set[str]]:
    """Return (has a resolved flight, airport codes the record touches)."""
    codes: set[str] = set()
    for raw in (record.origin, record.destination):
        code = normalize_airport_code(raw)
        if code and code != "-":
            codes.add(code)

    has_flight = False
    for number in (record.inbound, record.outbound):
        resolved = resolve_flight(number, flights)
        if resolved is not None:
            has_flight = True
            codes.update(c for c in (resolved.origin, resolved.destination) if c)
    return has_flight, codes


def options_for_record(
    record: FlightRecord,
    rates: Iterable[SectorRateV3],
    flights: Sequence[Flight],
    customers: Optional[CustomerLookup] = None,
) -> list[TransitRouteOption]:
    """Options offered to one record.

    Only active rates with no customer or the record's customer are
    considered. A record without a resolvable inbound or outbound flight is
    offered nothing. An option is kept when its route touches any airport
    of the record or of its flights.
    """
    has_flight, codes = _record_codes(record, flights)
    if not has_flight:
        return []

    lookup = _customer_map(customers)
    options: list[TransitRouteOption] = []
    for rate in rates:
        if not rate.status:
            continue
        if record.customer_id and rate.customer_id not in (None, record.customer_id):
            continue
        for option in generate_options(rate, lookup):
            tokens = route_tokens(option.transit_route) or [rate.origin, rate.destination]
            if codes.intersection(tokens):
                options.append(option)
    return options


def select_option(
    record: FlightRecord,
    option: TransitRouteOption,
    customer_id: Optional[str] = None,
) -> RateSelection:
    """Build the selection fields for persisting an option onto a record."""
    return RateSelection(
        record_id=record.id,
        sector_rate_id=option.sector_rate_id,
        transit_route=option.transit_route,
        customer_id=customer_id if customer_id is not None else record.customer_id,
    )


def apply_selection(record: FlightRecord, selection: RateSelection) -> FlightRecord:
    """Return a copy of the record carrying the selection; the rate row is untouched."""
    update = {
        "v3_rate_id": selection.sector_rate_id,
        "transit_route": selection.transit_route,
    }
    if selection.customer_id is not None:
        update["customer_id"] = selection.customer_id
    return record.model_copy(update=update)
