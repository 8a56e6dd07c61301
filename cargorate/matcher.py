"""Sector rate matching: price the legs of a segmented journey.

Each present leg is looked up exactly (directional, no reverse match)
among active sector rates. Matches are collected in leg order, deduplicated
by rate id (first occurrence wins) and summed.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from cargorate.models import (
    PricedBreakdown,
    RouteLeg,
    SectorRate,
    Segmentation,
    to_money,
)

logger = logging.getLogger(__name__)


def match_leg(leg: Optional[RouteLeg], sector_rates: Iterable[SectorRate]) -> list[SectorRate]:
    """Return active rates whose (origin, destination) equals the leg exactly."""
    if leg is None:
        return []
    matches = [
        r
        for r in sector_rates
        if r.is_active and r.origin == leg.origin and r.destination == leg.destination
    ]
    if len({r.id for r in matches}) > 1:
        # Every match is priced; the store is expected to hold one active row per pair
        logger.warning(
            "%d active sector rates for %s; all are summed", len(matches), leg.label
        )
    logger.debug("Leg %s matched %d rate(s)", leg.label, len(matches))
    return matches


def _dedupe(rates: Iterable[SectorRate]) -> list[SectorRate]:
    seen: set[str] = set()
    unique: list[SectorRate] = []
    for rate in rates:
        if rate.id in seen:
            continue
        seen.add(rate.id)
        unique.append(rate.model_copy(update={"sector_rate": rate.amount}))
    return unique


def collect_rates(
    legs: Sequence[Optional[RouteLeg]], sector_rates: Sequence[SectorRate]
) -> list[SectorRate]:
    """Union the matches of all legs in order, deduplicated by id."""
    matched: list[SectorRate] = []
    for leg in legs:
        matched.extend(match_leg(leg, sector_rates))
    return _dedupe(matched)


def sum_rates(rates: Iterable[SectorRate]) -> Decimal:
    return to_money(sum((r.amount for r in rates), Decimal("0")))


def price_legs(
    route: str,
    legs: Sequence[Optional[RouteLeg]],
    sector_rates: Sequence[SectorRate],
) -> PricedBreakdown:
    """Price legs given in order [before BT, inbound, outbound, after BT]."""
    rates = collect_rates(legs, sector_rates)
    return PricedBreakdown(route=route, total_sum=sum_rates(rates), rates=rates)


def price_segmentation(seg: Segmentation, sector_rates: Sequence[SectorRate]) -> PricedBreakdown:
    """Price a segmentation; the route uses the record's overall origin/destination."""
    return price_legs(seg.route, seg.present_legs, sector_rates)


def available_rates(seg: Segmentation, sector_rates: Sequence[SectorRate]) -> list[SectorRate]:
    """Deduplicated matched rates, highest rate first, for manual selection."""
    rates = collect_rates(seg.present_legs, sector_rates)
    return sorted(rates, key=lambda r: r.amount, reverse=True)


def selected_total(
    available: Iterable[SectorRate], selected_ids: Iterable[str]
) -> Optional[Decimal]:
    """Sum the available rates the user ticked, or None if nothing is ticked."""
    wanted = set(selected_ids)
    if not wanted:
        return None
    return sum_rates(r for r in available if r.id in wanted)
