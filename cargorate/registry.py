"""Registry snapshots: immutable slices of the store handed to the engine.

The data-access layer exports the store's tables as plain rows, keyed by
table name. Snapshot building fails open: a missing or unreadable export,
or an invalid row, is logged and dropped so the pipeline sees "no data"
instead of an exception.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from cargorate.models import (
    AirportCode,
    Customer,
    Flight,
    FlightRecord,
    SectorRate,
    SectorRateV3,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# Store table names
AIRPORT_CODES_TABLE = "airport_code"
FLIGHTS_TABLE = "flights"
SECTOR_RATES_TABLE = "sector_rates"
SECTOR_RATES_V3_TABLE = "sector_rates_v3"
CUSTOMERS_TABLE = "customers"
RECORDS_TABLE = "flight_uploads"


@dataclass(frozen=True)
class RegistrySnapshot:
    """Point-in-time copy of the registries the engine reads."""

    airport_codes: tuple[AirportCode, ...] = ()
    flights: tuple[Flight, ...] = ()
    sector_rates: tuple[SectorRate, ...] = ()
    sector_rates_v3: tuple[SectorRateV3, ...] = ()
    customers: tuple[Customer, ...] = ()
    customers_by_id: dict[str, Customer] = field(default_factory=dict, compare=False)

    @property
    def active_flights(self) -> tuple[Flight, ...]:
        return tuple(f for f in self.flights if f.is_active)

    @property
    def active_sector_rates(self) -> tuple[SectorRate, ...]:
        return tuple(r for r in self.sector_rates if r.is_active)

    @property
    def is_empty(self) -> bool:
        return not (self.flights or self.sector_rates or self.sector_rates_v3)


def _parse_rows(model: type[ModelT], rows: Any, table: str) -> list[ModelT]:
    """Validate rows into models, skipping invalid ones."""
    if rows is None:
        return []
    if not isinstance(rows, list):
        logger.warning("Table %s is not a list of rows; ignoring it", table)
        return []
    parsed: list[ModelT] = []
    for i, row in enumerate(rows):
        if not isinstance(row, dict):
            logger.warning("%s row %d is not a mapping; skipped", table, i)
            continue
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as exc:
            errors = "; ".join(
                f"{'.'.join(str(x) for x in e['loc'])}: {e['msg']}" for e in exc.errors()
            )
            logger.warning("%s row %d skipped: %s", table, i, errors)
    return parsed


def build_snapshot(tables: Optional[dict]) -> RegistrySnapshot:
    """Build a snapshot from exported table rows."""
    tables = tables or {}
    customers = tuple(_parse_rows(Customer, tables.get(CUSTOMERS_TABLE), CUSTOMERS_TABLE))
    return RegistrySnapshot(
        airport_codes=tuple(
            _parse_rows(AirportCode, tables.get(AIRPORT_CODES_TABLE), AIRPORT_CODES_TABLE)
        ),
        flights=tuple(_parse_rows(Flight, tables.get(FLIGHTS_TABLE), FLIGHTS_TABLE)),
        sector_rates=tuple(
            _parse_rows(SectorRate, tables.get(SECTOR_RATES_TABLE), SECTOR_RATES_TABLE)
        ),
        sector_rates_v3=tuple(
            _parse_rows(SectorRateV3, tables.get(SECTOR_RATES_V3_TABLE), SECTOR_RATES_V3_TABLE)
        ),
        customers=customers,
        customers_by_id={c.id: c for c in customers},
    )


def build_records(tables: Optional[dict]) -> list[FlightRecord]:
    """Parse the uploaded flight records from exported table rows."""
    return _parse_rows(FlightRecord, (tables or {}).get(RECORDS_TABLE), RECORDS_TABLE)


def read_tables(path: Union[str, Path]) -> dict:
    """Read a YAML table export. Returns {} if missing or unreadable."""
    path = Path(path)
    if not path.exists():
        logger.warning("Registry export not found: %s", path)
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as exc:
        logger.warning("Failed to read registry export %s: %s", path, exc)
        return {}
    if not isinstance(raw, dict):
        logger.warning("Registry export %s is not a mapping of tables", path)
        return {}
    return raw


def load_snapshot(path: Union[str, Path]) -> RegistrySnapshot:
    """Load a registry snapshot from a YAML export."""
    return build_snapshot(read_tables(path))


def load_records(path: Union[str, Path]) -> list[FlightRecord]:
    """Load the flight records from a YAML export."""
    return build_records(read_tables(path))
