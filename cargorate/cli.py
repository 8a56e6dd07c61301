"""cargorate CLI -- sector rate pricing for uploaded cargo flight records.

Provides commands for pricing records, showing their segmentation, listing
alternative and transit routes, and saving manual conversions and v2 rate
selections.
"""

import logging
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated, Optional

import typer
import yaml
from pydantic import ValidationError

from cargorate.models import FlightRecord
from cargorate.registry import RegistrySnapshot, build_records, build_snapshot

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# App and sub-apps
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="cargorate",
    help="Air-cargo sector rate pricing -- segment, price, convert, select.",
    no_args_is_help=True,
)

state_app = typer.Typer(
    name="state",
    help="Manage saved conversions and rate selections.",
    no_args_is_help=True,
)

app.add_typer(state_app, name="state")


# ---------------------------------------------------------------------------
# Global option types
# ---------------------------------------------------------------------------

JsonFlag = Annotated[bool, typer.Option("--json", help="Output as JSON.")]
PlainFlag = Annotated[bool, typer.Option("--plain", help="Output as plain text (no color).")]
VerboseFlag = Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output.")]
QuietFlag = Annotated[bool, typer.Option("--quiet", "-q", help="Suppress non-essential output.")]
StateOption = Annotated[
    Optional[Path],
    typer.Option("--state", help="Override state file (default: ~/.cargorate/overrides.json)."),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_format(json_flag: bool = False, plain_flag: bool = False) -> str:
    """Determine output format: json > plain > TTY auto-detect > rich."""
    if json_flag:
        return "json"
    if plain_flag:
        return "plain"
    if sys.stdout.isatty():
        return "rich"
    return "plain"


def _setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging based on verbosity flags."""
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)


def _load_tables(file: str) -> dict:
    """Load a YAML table export, with helpful errors for the user.

    Unlike registry.read_tables, a bad file given on the command line is an
    error rather than an empty snapshot.
    """
    path = Path(file)

    if not path.exists():
        hint = ""
        if not path.is_absolute():
            hint = f" (looked in {Path.cwd()})"
        raise typer.BadParameter(
            f"File not found: {file}{hint}\n  Hint: Check the file path and try again."
        )

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        msg = f"YAML parse error in {file}"
        if hasattr(exc, "problem_mark") and exc.problem_mark is not None:
            mark = exc.problem_mark
            msg += f" at line {mark.line + 1}, column {mark.column + 1}"
        if hasattr(exc, "problem") and exc.problem:
            msg += f": {exc.problem}"
        raise typer.BadParameter(msg)

    if not isinstance(raw, dict):
        raise typer.BadParameter(
            f"Expected a YAML mapping of tables in {file}, got {type(raw).__name__}"
        )
    return raw


def _load_workspace(
    file: str, state: Optional[Path] = None
) -> tuple[RegistrySnapshot, list[FlightRecord]]:
    """Load the snapshot and records, overlaying saved overrides."""
    from cargorate.store import OverrideStore

    tables = _load_tables(file)
    snapshot = build_snapshot(tables)
    records = OverrideStore(state).apply_to(build_records(tables))
    return snapshot, records


def _find_record(records: list[FlightRecord], record_id: str) -> FlightRecord:
    for record in records:
        if record.id == record_id:
            return record
    raise typer.BadParameter(f"No record with id {record_id!r}.")


def _parse_amount(value: Optional[str]) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        raise typer.BadParameter(f"Not a valid amount: {value!r}")


def _error_panel(message: str) -> None:
    """Print an error message, using Rich panel if available."""
    try:
        from rich.console import Console
        from rich.panel import Panel

        console = Console(stderr=True)
        console.print(Panel(message, title="Error", border_style="red"))
    except Exception:
        typer.echo(f"Error: {message}", err=True)


# ---------------------------------------------------------------------------
# Pricing commands
# ---------------------------------------------------------------------------


@app.command()
def price(
    file: str = typer.Argument(help="Path to registry export YAML file"),
    record: Optional[str] = typer.Option(None, "--record", "-r", help="Only this record id."),
    state: StateOption = None,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Price flight records from their sector rates."""
    _setup_logging(verbose, quiet)
    try:
        snapshot, records = _load_workspace(file, state)
        if record is not None:
            records = [_find_record(records, record)]

        from cargorate.pipeline import PricingEngine
        from cargorate.output import get_formatter

        rows = PricingEngine(snapshot).price_all(records)
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_pricing(rows))
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def segment(
    file: str = typer.Argument(help="Path to registry export YAML file"),
    state: StateOption = None,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Show the before BT / inbound / outbound / after BT legs of each record."""
    _setup_logging(verbose, quiet)
    try:
        snapshot, records = _load_workspace(file, state)

        from cargorate.pipeline import PricingEngine
        from cargorate.output import get_formatter

        rows = PricingEngine(snapshot).price_all(records)
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_segments(rows))
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def alternatives(
    file: str = typer.Argument(help="Path to registry export YAML file"),
    origin: str = typer.Argument(help="Origin airport code"),
    destination: str = typer.Argument(help="Destination airport code"),
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """List sector rates sharing an endpoint with a direct pair."""
    _setup_logging(verbose, quiet)
    try:
        snapshot = build_snapshot(_load_tables(file))

        from cargorate.airports import is_known_code, normalize_airport_code
        from cargorate.alternatives import find_alternatives
        from cargorate.output import get_formatter

        origin = normalize_airport_code(origin)
        destination = normalize_airport_code(destination)
        if snapshot.airport_codes:
            for code in (origin, destination):
                if not is_known_code(code, snapshot.airport_codes):
                    logger.warning("Airport code %s is not an active registry code", code)
        alts = find_alternatives(origin, destination, snapshot.sector_rates)
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_alternatives(origin, destination, alts))
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def transit(
    file: str = typer.Argument(help="Path to registry export YAML file"),
    record: Optional[str] = typer.Option(
        None, "--record", "-r", help="Options offered to this record."
    ),
    rate: Optional[str] = typer.Option(None, "--rate", help="Options of this v2 rate id."),
    state: StateOption = None,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """List v2 transit route options with their total prices."""
    _setup_logging(verbose, quiet)
    try:
        snapshot, records = _load_workspace(file, state)

        from cargorate.transit import generate_options, options_for_record
        from cargorate.output import get_formatter

        rates = list(snapshot.sector_rates_v3)
        if rate is not None:
            rates = [r for r in rates if r.id == rate]
            if not rates:
                raise typer.BadParameter(f"No v2 sector rate with id {rate!r}.")

        if record is not None:
            target = _find_record(records, record)
            options = options_for_record(
                target, rates, snapshot.active_flights, snapshot.customers_by_id
            )
        else:
            options = [
                o for r in rates if r.status for o in generate_options(r, snapshot.customers_by_id)
            ]

        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_transit(options))
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def routes(
    origin: str = typer.Argument(help="Base origin airport code"),
    destination: str = typer.Argument(help="Base destination airport code"),
    stops: list[str] = typer.Argument(help="Transit stops, in order"),
    json: JsonFlag = False,
) -> None:
    """Enumerate every transit route variant through a subset of stops."""
    from cargorate.airports import normalize_airport_code
    from cargorate.transit import enumerate_transit_routes
    import json as json_mod

    variants = enumerate_transit_routes(
        normalize_airport_code(origin),
        normalize_airport_code(destination),
        [normalize_airport_code(s) for s in stops],
    )
    if json:
        typer.echo(json_mod.dumps({"selected_routes": variants}, indent=2))
        return
    for route in variants:
        typer.echo(route)


# ---------------------------------------------------------------------------
# Mutation commands
# ---------------------------------------------------------------------------


@app.command()
def convert(
    file: str = typer.Argument(help="Path to registry export YAML file"),
    record_id: str = typer.Argument(help="Record to convert"),
    origin: Optional[str] = typer.Option(None, help="Override origin (default: record's)."),
    destination: Optional[str] = typer.Option(
        None, help="Override destination (default: record's)."
    ),
    before_from: Optional[str] = typer.Option(None, "--before-from", help="Before BT from."),
    before_to: Optional[str] = typer.Option(None, "--before-to", help="Before BT to."),
    inbound: Optional[str] = typer.Option(None, help="Inbound flight number."),
    outbound: Optional[str] = typer.Option(None, help="Outbound flight number."),
    after_from: Optional[str] = typer.Option(None, "--after-from", help="After BT from."),
    after_to: Optional[str] = typer.Option(None, "--after-to", help="After BT to."),
    applied_rate: Optional[str] = typer.Option(None, "--rate", help="Applied rate amount."),
    sector_rate_id: Optional[str] = typer.Option(None, "--rate-id", help="Applied sector rate id."),
    state: StateOption = None,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Save a manual override of a record's segmentation and price."""
    _setup_logging(verbose, quiet)
    try:
        snapshot, records = _load_workspace(file, state)
        target = _find_record(records, record_id)

        from cargorate.conversion import apply_conversion
        from cargorate.models import ConversionForm
        from cargorate.output import get_formatter
        from cargorate.store import OverrideStore

        try:
            form = ConversionForm(
                origin=origin or target.converted_origin or target.origin,
                destination=destination or target.converted_destination or target.destination,
                before_bt_from=before_from,
                before_bt_to=before_to,
                inbound=inbound,
                outbound=outbound,
                after_bt_from=after_from,
                after_bt_to=after_to,
                applied_rate=_parse_amount(applied_rate),
                sector_rate_id=sector_rate_id,
            )
        except ValidationError as exc:
            raise typer.BadParameter(str(exc))

        result = apply_conversion(target, form, snapshot.active_flights)
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_conversion(result))

        if not result.converted:
            raise typer.Exit(code=1)
        OverrideStore(state).save_conversion(result.record)
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def select(
    file: str = typer.Argument(help="Path to registry export YAML file"),
    record_id: str = typer.Argument(help="Record to assign the rate to"),
    rate_id: str = typer.Argument(help="v2 sector rate id"),
    transit_route: Optional[str] = typer.Option(
        None, "--transit-route", "-t", help="Selected transit route (omit for base route)."
    ),
    customer: Optional[str] = typer.Option(None, "--customer", help="Customer id to assign."),
    state: StateOption = None,
    quiet: QuietFlag = False,
) -> None:
    """Assign a v2 sector rate option to a record."""
    try:
        snapshot, records = _load_workspace(file, state)
        target = _find_record(records, record_id)

        from cargorate.transit import generate_options, route_tokens, select_option
        from cargorate.store import OverrideStore

        rate = next((r for r in snapshot.sector_rates_v3 if r.id == rate_id), None)
        if rate is None:
            raise typer.BadParameter(f"No v2 sector rate with id {rate_id!r}.")

        wanted = route_tokens(transit_route)
        option = next(
            (
                o
                for o in generate_options(rate, snapshot.customers_by_id)
                if route_tokens(o.transit_route) == wanted
            ),
            None,
        )
        if option is None:
            raise typer.BadParameter(
                f"Rate {rate_id!r} has no option for route {transit_route or '(base)'}."
            )

        selection = select_option(target, option, customer_id=customer)
        OverrideStore(state).save_selection(selection)
        if not quiet:
            typer.echo(f"Record {record_id}: {option.display_text}")
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


# ---------------------------------------------------------------------------
# State commands
# ---------------------------------------------------------------------------


@state_app.command(name="show")
def state_show(
    state: StateOption = None,
    json: JsonFlag = False,
) -> None:
    """Show saved conversions and selections."""
    from cargorate.store import OverrideStore
    import json as json_mod

    store = OverrideStore(state)
    conversions = store.load()
    selections = store.load_selections()
    if json:
        data = {"conversions": conversions, "selections": selections}
        typer.echo(json_mod.dumps(data, indent=2, ensure_ascii=False))
        return
    if not conversions and not selections:
        typer.echo("No saved overrides.")
        return
    for record_id in sorted(set(conversions) | set(selections)):
        kinds = []
        if conversions.get(record_id, {}).get("is_converted"):
            kinds.append("converted")
        if record_id in selections:
            kinds.append(f"selection {selections[record_id].get('v3_rate_id')}")
        typer.echo(f"  {record_id}: {', '.join(kinds) or 'saved'}")


@state_app.command(name="clear")
def state_clear(state: StateOption = None) -> None:
    """Remove all saved conversions and selections."""
    from cargorate.store import OverrideStore

    OverrideStore(state).clear()
    typer.echo("Saved overrides cleared.")
