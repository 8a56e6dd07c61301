"""Plain text output formatter -- no ANSI escapes."""

from __future__ import annotations

from cargorate.models import (
    AlternativeRoute,
    ConversionResult,
    PricedRow,
    TransitRouteOption,
)
from cargorate.settings import NO_RATES_NOTICE, format_money


def _header(title: str) -> str:
    """Create a plain text section header."""
    return f"\n{'=' * 60}\n  {title}\n{'=' * 60}\n"


def _subheader(title: str) -> str:
    """Create a plain text sub-header."""
    return f"\n--- {title} ---\n"


def _leg_row(r: PricedRow) -> str:
    return (
        f"  {r.record_id:<8} {r.origin:<5} {r.before_bt:<12} {r.inbound:<22} "
        f"{r.outbound:<22} {r.after_bt:<12} {r.destination:<5}"
    )


def _leg_header() -> list[str]:
    return [
        f"  {'Record':<8} {'Org':<5} {'Before BT':<12} {'Inbound':<22} "
        f"{'Outbound':<22} {'After BT':<12} {'Dst':<5}",
        f"  {'-' * 8} {'-' * 5} {'-' * 12} {'-' * 22} {'-' * 22} {'-' * 12} {'-' * 5}",
    ]


class PlainFormatter:
    """Format pricing results as plain text without ANSI escapes."""

    def format_pricing(self, rows: list[PricedRow]) -> str:
        """Format priced records with a rate breakdown per record."""
        lines: list[str] = []
        converted = sum(1 for r in rows if r.is_converted)

        lines.append(_header("Pricing Summary"))
        lines.append(f"  Records:   {len(rows)}")
        lines.append(f"  Converted: {converted}")

        lines.append(_subheader("Records"))
        lines.extend(_leg_header())
        for r in rows:
            lines.append(_leg_row(r))

        lines.append(_subheader("Sector Rates"))
        for r in rows:
            status = "CONVERTED" if r.is_converted else ""
            lines.append(f"  {r.record_id:<8} {r.sector_rates}  {status}".rstrip())
            if r.breakdown is None:
                continue
            if not r.breakdown.has_rates:
                lines.append(f"  {'':<8}   {NO_RATES_NOTICE}")
                continue
            for rate in r.breakdown.rates:
                lines.append(f"  {'':<8}   {rate.route:<12} {format_money(rate.amount):>10}")
            if r.selected_total is not None:
                lines.append(f"  {'':<8}   {'Selected':<12} {format_money(r.selected_total):>10}")

        return "\n".join(lines)

    def format_segments(self, rows: list[PricedRow]) -> str:
        """Format segmentation legs as a plain text table."""
        lines: list[str] = [_header("Segmentation")]
        lines.extend(_leg_header())
        for r in rows:
            lines.append(_leg_row(r))
        return "\n".join(lines)

    def format_alternatives(
        self, origin: str, destination: str, alternatives: list[AlternativeRoute]
    ) -> str:
        """Format alternatives for a pair."""
        lines: list[str] = [_header(f"Alternatives for {origin} → {destination}")]
        if not alternatives:
            lines.append(f"  {NO_RATES_NOTICE}")
            return "\n".join(lines)

        lines.append(f"  {'Route':<12} {'Rate':>10}  Direct")
        lines.append(f"  {'-' * 12} {'-' * 10}  {'-' * 6}")
        for a in alternatives:
            direct = "yes" if a.is_direct else ""
            lines.append(f"  {a.route:<12} {format_money(a.rate):>10}  {direct}")
        return "\n".join(lines)

    def format_transit(self, options: list[TransitRouteOption]) -> str:
        """Format transit options."""
        lines: list[str] = [_header("Transit Route Options")]
        if not options:
            lines.append("  No options available.")
            return "\n".join(lines)

        for i, o in enumerate(options, start=1):
            lines.append(f"  {i:>3}. {o.display_text}")
        return "\n".join(lines)

    def format_conversion(self, result: ConversionResult) -> str:
        """Format a conversion outcome."""
        lines: list[str] = [_header("Conversion")]
        record = result.record
        if result.errors:
            lines.append(f"  Record {record.id}: NOT CONVERTED")
            for err in result.errors:
                lines.append(f"    - {err}")
            return "\n".join(lines)

        lines.append(f"  Record {record.id}: CONVERTED")
        lines.append(f"  Origin:       {record.converted_origin}")
        lines.append(f"  Destination:  {record.converted_destination}")
        if record.before_bt_from and record.before_bt_to:
            lines.append(f"  Before BT:    {record.before_bt_from} → {record.before_bt_to}")
        if record.after_bt_from and record.after_bt_to:
            lines.append(f"  After BT:     {record.after_bt_from} → {record.after_bt_to}")
        lines.append(f"  Applied rate: {format_money(record.applied_rate)}")
        return "\n".join(lines)
