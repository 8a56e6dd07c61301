"""Single-hop alternatives for a direct airport pair.

Lists the direct rate (if any) followed by every other active rate that
departs from the same origin or arrives at the same destination. Display
only: alternatives are not chained into multi-leg routes.
"""

from typing import Iterable

from cargorate.models import AlternativeRoute, SectorRate


def _as_alternative(rate: SectorRate, is_direct: bool = False) -> AlternativeRoute:
    return AlternativeRoute(
        route=rate.route,
        rate=rate.amount,
        is_direct=is_direct,
        sector_rate_id=rate.id,
    )


def find_alternatives(
    origin: str, destination: str, sector_rates: Iterable[SectorRate]
) -> list[AlternativeRoute]:
    """Return the direct rate first, then connected rates sorted by rate ascending."""
    origin = origin.upper()
    destination = destination.upper()
    active = [r for r in sector_rates if r.is_active]

    direct = [r for r in active if r.origin == origin and r.destination == destination]
    same_origin = [r for r in active if r.origin == origin and r.destination != destination]
    same_destination = [
        r for r in active if r.destination == destination and r.origin != origin
    ]

    seen: set[str] = set()
    head: list[AlternativeRoute] = []
    rest: list[AlternativeRoute] = []
    if direct:
        alt = _as_alternative(direct[0], is_direct=True)
        seen.add(alt.route)
        head.append(alt)

    for rate in same_origin + same_destination:
        if rate.route in seen:
            continue
        seen.add(rate.route)
        rest.append(_as_alternative(rate))

    rest.sort(key=lambda a: a.rate)
    return head + rest
