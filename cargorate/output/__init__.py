"""Output formatters for cargorate.

Provides a Formatter protocol and three implementations:
- RichFormatter: colored Rich tables and panels
- PlainFormatter: plain text without ANSI escapes
- JsonFormatter: valid JSON for piping to jq
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from cargorate.models import (
        AlternativeRoute,
        ConversionResult,
        PricedRow,
        TransitRouteOption,
    )


class Formatter(Protocol):
    """Protocol for formatting pricing results."""

    def format_pricing(self, rows: list[PricedRow]) -> str:
        """Format priced records."""
        ...

    def format_segments(self, rows: list[PricedRow]) -> str:
        """Format the segmentation legs of records."""
        ...

    def format_alternatives(
        self, origin: str, destination: str, alternatives: list[AlternativeRoute]
    ) -> str:
        """Format single-hop alternatives for a pair."""
        ...

    def format_transit(self, options: list[TransitRouteOption]) -> str:
        """Format v2 transit route options."""
        ...

    def format_conversion(self, result: ConversionResult) -> str:
        """Format a conversion outcome."""
        ...


def get_formatter(name: str = "rich") -> Formatter:
    """Get a formatter by name.

    Args:
        name: One of "rich", "plain", "json".

    Returns:
        A Formatter instance.

    Raises:
        ValueError: If the name is not recognized.
    """
    if name == "rich":
        from cargorate.output.rich_formatter import RichFormatter

        return RichFormatter()
    elif name == "plain":
        from cargorate.output.plain_formatter import PlainFormatter

        return PlainFormatter()
    elif name == "json":
        from cargorate.output.json_formatter import JsonFormatter

        return JsonFormatter()
    else:
        raise ValueError(f"Unknown formatter: {name!r}. Use 'rich', 'plain', or 'json'.")
