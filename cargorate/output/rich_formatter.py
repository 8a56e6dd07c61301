"""Rich-based output formatter with colored tables and panels."""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cargorate.models import (
    AlternativeRoute,
    ConversionResult,
    PricedRow,
    TransitRouteOption,
)
from cargorate.settings import EMPTY_LEG, NO_RATES_NOTICE, format_money


def _render(renderable) -> str:
    """Render a Rich object to a string."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=True, width=140)
    console.print(renderable)
    return buf.getvalue()


def _leg_cell(value: str) -> Text:
    return Text(value, style="dim" if value == EMPTY_LEG else "")


def _legs_table(title: str) -> Table:
    table = Table(title=title, show_lines=True)
    table.add_column("Record", style="dim")
    table.add_column("Origin", style="cyan")
    table.add_column("Before BT")
    table.add_column("Inbound")
    table.add_column("Outbound")
    table.add_column("After BT")
    table.add_column("Destination", style="cyan")
    return table


class RichFormatter:
    """Format pricing results using Rich tables and panels."""

    def format_pricing(self, rows: list[PricedRow]) -> str:
        """Format priced records, highlighting converted and unpriced rows."""
        table = _legs_table("Price Assignment")
        table.add_column("Sector Rates", min_width=20)
        table.add_column("Rates")

        for r in rows:
            if r.is_converted:
                price = Text(r.sector_rates, style="bold magenta")
                detail = Text("converted", style="magenta")
            elif r.breakdown is not None and not r.breakdown.has_rates:
                price = Text(r.sector_rates, style="yellow")
                detail = Text(NO_RATES_NOTICE, style="yellow")
            else:
                price = Text(r.sector_rates, style="bold green")
                detail = Text(
                    "\n".join(
                        f"{rate.route}  {format_money(rate.amount)}"
                        for rate in (r.breakdown.rates if r.breakdown else [])
                    )
                )
                if r.selected_total is not None:
                    detail.append(f"\nselected: {format_money(r.selected_total)}", style="cyan")

            table.add_row(
                r.record_id,
                _leg_cell(r.origin),
                _leg_cell(r.before_bt),
                _leg_cell(r.inbound),
                _leg_cell(r.outbound),
                _leg_cell(r.after_bt),
                _leg_cell(r.destination),
                price,
                detail,
            )

        return _render(table)

    def format_segments(self, rows: list[PricedRow]) -> str:
        """Format segmentation legs as a table."""
        table = _legs_table("Segmentation")
        for r in rows:
            table.add_row(
                r.record_id,
                _leg_cell(r.origin),
                _leg_cell(r.before_bt),
                _leg_cell(r.inbound),
                _leg_cell(r.outbound),
                _leg_cell(r.after_bt),
                _leg_cell(r.destination),
            )
        return _render(table)

    def format_alternatives(
        self, origin: str, destination: str, alternatives: list[AlternativeRoute]
    ) -> str:
        """Format alternatives, direct route first."""
        if not alternatives:
            return _render(
                Panel(NO_RATES_NOTICE, title=f"{origin} → {destination}", border_style="yellow")
            )

        table = Table(title=f"Alternatives for {origin} → {destination}", show_lines=True)
        table.add_column("Route", style="cyan")
        table.add_column("Rate", justify="right")
        table.add_column("Direct")
        for a in alternatives:
            table.add_row(
                a.route,
                Text(format_money(a.rate), style="bold green" if a.is_direct else ""),
                Text("direct", style="green") if a.is_direct else "",
            )
        return _render(table)

    def format_transit(self, options: list[TransitRouteOption]) -> str:
        """Format transit options as a numbered table."""
        table = Table(title="Transit Route Options", show_lines=True)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Rate ID", style="dim")
        table.add_column("Route", style="cyan")
        table.add_column("Total", justify="right", style="bold green")
        table.add_column("Option")
        for i, o in enumerate(options, start=1):
            table.add_row(
                str(i),
                o.sector_rate_id,
                o.transit_route or EMPTY_LEG,
                format_money(o.total_price),
                o.display_text,
            )
        return _render(table)

    def format_conversion(self, result: ConversionResult) -> str:
        """Format a conversion outcome as a panel."""
        record = result.record
        if result.errors:
            text = Text("\n".join(f"- {e}" for e in result.errors), style="red")
            return _render(
                Panel(text, title=f"Record {record.id}: not converted", border_style="red")
            )

        lines = [
            f"Origin:       {record.converted_origin}",
            f"Destination:  {record.converted_destination}",
        ]
        if record.before_bt_from and record.before_bt_to:
            lines.append(f"Before BT:    {record.before_bt_from} → {record.before_bt_to}")
        if record.after_bt_from and record.after_bt_to:
            lines.append(f"After BT:     {record.after_bt_from} → {record.after_bt_to}")
        lines.append(f"Applied rate: {format_money(record.applied_rate)}")
        return _render(
            Panel(Text("\n".join(lines)), title=f"Record {record.id}: converted", border_style="green")
        )
