"""Domain models for cargorate.

Pydantic models for the registries the pricing engine reads (airport codes,
flights, sector rates, customers), the uploaded flight records it prices,
and the derived results it produces (segmentations, priced breakdowns,
alternative routes, transit options, conversion results).
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

ARROW = "→"
DASH_ARROW = "->"

_CENT = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Round a numeric value half-up to 2 decimal places.

    Returns Decimal("0.00") for None or anything that cannot be read as a number.
    """
    if value is None or isinstance(value, bool):
        return Decimal("0.00")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
        if not amount.is_finite():
            return Decimal("0.00")
        return amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        return Decimal("0.00")


def _upper(v: Any) -> Any:
    return v.strip().upper() if isinstance(v, str) else v


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v.strip() if isinstance(v, str) else v


# --- Enums ---


class ConversionState(str, Enum):
    """Conversion lifecycle of a flight record."""

    UNCONVERTED = "unconverted"
    CONVERTED = "converted"  # Manual override saved; re-editable


# --- Registry Models ---


class AirportCode(BaseModel):
    """Airport code registry row."""

    id: str
    code: str = Field(min_length=3, max_length=3)
    is_active: bool = True
    is_eu: bool = False

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("code", mode="before")
    @classmethod
    def uppercase_code(cls, v: str) -> str:
        return _upper(v)


class Flight(BaseModel):
    """Flight registry row. Origin/destination are stored in raw long form."""

    id: str
    flight_number: str = Field(min_length=1)
    origin: str = ""
    destination: str = ""
    is_active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("flight_number", mode="before")
    @classmethod
    def strip_number(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class Customer(BaseModel):
    """Customer registry row."""

    id: str
    name: str
    code: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v


class SectorRate(BaseModel):
    """Flat price for one directed airport pair."""

    id: str
    origin: str = Field(min_length=3, max_length=3)
    destination: str = Field(min_length=3, max_length=3)
    sector_rate: Decimal
    is_active: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def uppercase_airports(cls, v: str) -> str:
        return _upper(v)

    @property
    def route(self) -> str:
        return f"{self.origin} {ARROW} {self.destination}"

    @property
    def amount(self) -> Decimal:
        """Rate rounded to cents."""
        return to_money(self.sector_rate)


class SectorRateV3(BaseModel):
    """Composite v2 pricing fact: base pair plus ordered, priced transit stops.

    The store keeps origin/destination as single-element arrays
    (``airbaltic_origin``/``airbaltic_destination``); those are accepted on
    input and reduced to scalars.
    """

    id: str
    label: str = ""
    origin: str = ""
    destination: str = ""
    sector_rate: Optional[Decimal] = None
    transit_routes: list[str] = Field(default_factory=list)
    transit_prices: list[Any] = Field(default_factory=list)
    selected_routes: list[str] = Field(default_factory=list)
    customer_id: Optional[str] = None
    status: bool = True

    @model_validator(mode="before")
    @classmethod
    def unwrap_store_arrays(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for store_key, key in (
            ("airbaltic_origin", "origin"),
            ("airbaltic_destination", "destination"),
        ):
            if store_key in data and not data.get(key):
                values = data.pop(store_key)
                if isinstance(values, (list, tuple)):
                    data[key] = values[0] if values else ""
                else:
                    data[key] = values
            else:
                data.pop(store_key, None)
        for key in ("transit_routes", "transit_prices", "selected_routes"):
            if data.get(key) is None:
                data[key] = []
        return data

    @field_validator("id", "customer_id", mode="before")
    @classmethod
    def stringify_ids(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("label", mode="before")
    @classmethod
    def none_label(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def normalize_endpoints(cls, v: Any) -> Any:
        from cargorate.airports import normalize_airport_code

        return normalize_airport_code(v) if isinstance(v, str) else v

    @field_validator("sector_rate", mode="before")
    @classmethod
    def lenient_rate(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        return v

    @field_validator("transit_routes", mode="before")
    @classmethod
    def uppercase_stops(cls, v: Any) -> Any:
        if isinstance(v, list):
            return [_upper(s) if isinstance(s, str) else str(s) for s in v]
        return v

    @property
    def base_route(self) -> str:
        return f"{self.origin} {DASH_ARROW} {self.destination}"

    @property
    def priced_stops(self) -> list[tuple[str, Any]]:
        """(stop, raw price) pairs; empty when the two arrays disagree in length."""
        if len(self.transit_routes) != len(self.transit_prices):
            return []
        return list(zip(self.transit_routes, self.transit_prices))


# --- Flight Records ---


class FlightRecord(BaseModel):
    """An uploaded flight record awaiting pricing."""

    id: str
    origin: str = ""
    destination: str = ""
    inbound: Optional[str] = None
    outbound: Optional[str] = None
    is_converted: bool = False
    converted_origin: Optional[str] = None
    converted_destination: Optional[str] = None
    before_bt_from: Optional[str] = None
    before_bt_to: Optional[str] = None
    after_bt_from: Optional[str] = None
    after_bt_to: Optional[str] = None
    applied_rate: Optional[Decimal] = None
    sector_rate_id: Optional[str] = None
    selected_sector_rate_ids: list[str] = Field(default_factory=list)
    customer_id: Optional[str] = None
    transit_route: Optional[str] = None
    # v2 selection; separate from the rate applied at conversion
    v3_rate_id: Optional[str] = None

    @field_validator("id", "sector_rate_id", "customer_id", "v3_rate_id", mode="before")
    @classmethod
    def stringify_ids(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator(
        "inbound",
        "outbound",
        "converted_origin",
        "converted_destination",
        "before_bt_from",
        "before_bt_to",
        "after_bt_from",
        "after_bt_to",
        "transit_route",
        mode="before",
    )
    @classmethod
    def empty_is_absent(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("origin", "destination", mode="before")
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("selected_sector_rate_ids", mode="before")
    @classmethod
    def stringify_selected(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, list):
            return [str(x) for x in v]
        return v

    @property
    def state(self) -> ConversionState:
        return ConversionState.CONVERTED if self.is_converted else ConversionState.UNCONVERTED


# --- Derived Models ---


class RouteLeg(BaseModel):
    """One directed leg of a segmented journey."""

    origin: str
    destination: str

    @property
    def label(self) -> str:
        return f"{self.origin} {ARROW} {self.destination}"

    @property
    def key(self) -> tuple[str, str]:
        return (self.origin, self.destination)


class ResolvedFlight(BaseModel):
    """A flight number together with its registered canonical endpoints."""

    flight_number: str
    origin: str
    destination: str

    @property
    def leg(self) -> RouteLeg:
        return RouteLeg(origin=self.origin, destination=self.destination)

    @property
    def display(self) -> str:
        """e.g. "BT234, FRA → RIX"."""
        return f"{self.flight_number}, {self.origin} {ARROW} {self.destination}"


class Segmentation(BaseModel):
    """The four legs derived for one record."""

    origin: str
    destination: str
    inbound_number: Optional[str] = None
    outbound_number: Optional[str] = None
    before_bt: Optional[RouteLeg] = None
    inbound: Optional[ResolvedFlight] = None
    outbound: Optional[ResolvedFlight] = None
    after_bt: Optional[RouteLeg] = None

    @property
    def route(self) -> str:
        return f"{self.origin} {ARROW} {self.destination}"

    @property
    def legs(self) -> list[Optional[RouteLeg]]:
        """Legs in fixed order: before BT, inbound, outbound, after BT."""
        return [
            self.before_bt,
            self.inbound.leg if self.inbound else None,
            self.outbound.leg if self.outbound else None,
            self.after_bt,
        ]

    @property
    def present_legs(self) -> list[RouteLeg]:
        return [leg for leg in self.legs if leg is not None]


class PricedBreakdown(BaseModel):
    """Deduplicated matched rates for a record and their sum."""

    route: str
    total_sum: Decimal = Decimal("0.00")
    rates: list[SectorRate] = Field(default_factory=list)

    @property
    def has_rates(self) -> bool:
        return bool(self.rates)

    @property
    def rate_ids(self) -> list[str]:
        return [r.id for r in self.rates]


class AlternativeRoute(BaseModel):
    """A priced segment connected to a direct pair, for display."""

    route: str
    rate: Decimal
    is_direct: bool = False
    sector_rate_id: str


class TransitRouteOption(BaseModel):
    """One selectable v2 price: the base route or a transit variant."""

    sector_rate_id: str
    transit_route: Optional[str] = None
    display_text: str
    total_price: Decimal


class RateSelection(BaseModel):
    """v2 selection fields written onto a record."""

    record_id: str
    sector_rate_id: str
    transit_route: Optional[str] = None
    customer_id: Optional[str] = None


class ConversionForm(BaseModel):
    """Manual override values submitted for a record."""

    origin: str
    destination: str
    before_bt_from: Optional[str] = None
    before_bt_to: Optional[str] = None
    inbound: Optional[str] = None
    outbound: Optional[str] = None
    after_bt_from: Optional[str] = None
    after_bt_to: Optional[str] = None
    applied_rate: Optional[Decimal] = None
    sector_rate_id: Optional[str] = None

    @field_validator(
        "before_bt_from",
        "before_bt_to",
        "after_bt_from",
        "after_bt_to",
        mode="before",
    )
    @classmethod
    def uppercase_codes(cls, v: Any) -> Any:
        return _upper(_blank_to_none(v))

    @field_validator("inbound", "outbound", "sector_rate_id", mode="before")
    @classmethod
    def empty_is_absent(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        return str(v) if isinstance(v, int) else v


class ConversionResult(BaseModel):
    """Outcome of a conversion attempt."""

    record: FlightRecord
    errors: list[str] = Field(default_factory=list)

    @property
    def converted(self) -> bool:
        return not self.errors and self.record.is_converted

    @property
    def state(self) -> ConversionState:
        return self.record.state


class PricedRow(BaseModel):
    """Display row for one record in the pricing table."""

    record_id: str
    origin: str
    before_bt: str
    inbound: str
    outbound: str
    after_bt: str
    destination: str
    sector_rates: str
    breakdown: Optional[PricedBreakdown] = None
    available_rates: list[SectorRate] = Field(default_factory=list)
    selected_total: Optional[Decimal] = None
    state: ConversionState = ConversionState.UNCONVERTED

    @property
    def is_converted(self) -> bool:
        return self.state == ConversionState.CONVERTED
