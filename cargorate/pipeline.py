"""Pricing pipeline: turns flight records into priced display rows.

raw record -> normalize codes -> segment (flight registry)
           -> match legs (sector rate registry) -> priced breakdown

Converted records skip segmentation pricing entirely; their price is the
rate applied at conversion time.
"""

import logging
from typing import Iterable

from cargorate.airports import normalize_airport_code
from cargorate.matcher import available_rates, price_segmentation, selected_total
from cargorate.models import ARROW, FlightRecord, PricedRow, to_money
from cargorate.registry import RegistrySnapshot
from cargorate.segmenter import display_legs, segment_record
from cargorate.settings import format_money

logger = logging.getLogger(__name__)


class PricingEngine:
    """Prices records against one registry snapshot."""

    def __init__(self, snapshot: RegistrySnapshot) -> None:
        self.snapshot = snapshot
        self._flights = snapshot.active_flights
        self._rates = snapshot.active_sector_rates

    def price_record(self, record: FlightRecord) -> PricedRow:
        """Segment, match and render one record."""
        seg = segment_record(record, self._flights)
        columns = display_legs(record, seg)

        if record.is_converted:
            origin = normalize_airport_code(record.converted_origin or record.origin)
            destination = normalize_airport_code(
                record.converted_destination or record.destination
            )
            return PricedRow(
                record_id=record.id,
                sector_rates=(
                    f"{origin} {ARROW} {destination}, "
                    f"{format_money(to_money(record.applied_rate))}"
                ),
                state=record.state,
                **columns,
            )

        breakdown = price_segmentation(seg, self._rates)
        logger.debug("Record %s matched rates %s", record.id, breakdown.rate_ids)
        available = available_rates(seg, self._rates)
        chosen = selected_total(available, record.selected_sector_rate_ids)
        price = chosen if chosen is not None else breakdown.total_sum
        return PricedRow(
            record_id=record.id,
            sector_rates=f"{breakdown.route}, {format_money(price)}",
            breakdown=breakdown,
            available_rates=available,
            selected_total=chosen,
            state=record.state,
            **columns,
        )

    def price_all(self, records: Iterable[FlightRecord]) -> list[PricedRow]:
        """Recompute the whole working set, in input order."""
        rows = [self.price_record(r) for r in records]
        logger.info(
            "Priced %d record(s), %d without sector rates",
            len(rows),
            sum(1 for r in rows if r.breakdown is not None and not r.breakdown.has_rates),
        )
        return rows
