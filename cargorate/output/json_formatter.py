"""JSON output formatter -- valid JSON suitable for piping to jq."""

from __future__ import annotations

import json

from cargorate.models import (
    AlternativeRoute,
    ConversionResult,
    PricedRow,
    TransitRouteOption,
)

_LEG_COLUMNS = ("origin", "before_bt", "inbound", "outbound", "after_bt", "destination")


class JsonFormatter:
    """Format pricing results as pretty-printed JSON."""

    def format_pricing(self, rows: list[PricedRow]) -> str:
        """Format priced records as JSON."""
        data = {
            "type": "pricing",
            "summary": {
                "record_count": len(rows),
                "converted_count": sum(1 for r in rows if r.is_converted),
                "unpriced_count": sum(
                    1 for r in rows if r.breakdown is not None and not r.breakdown.has_rates
                ),
            },
            "rows": [r.model_dump(mode="json") for r in rows],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def format_segments(self, rows: list[PricedRow]) -> str:
        """Format segmentation legs as JSON."""
        data = {
            "type": "segments",
            "rows": [
                {"record_id": r.record_id, **{c: getattr(r, c) for c in _LEG_COLUMNS}}
                for r in rows
            ],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def format_alternatives(
        self, origin: str, destination: str, alternatives: list[AlternativeRoute]
    ) -> str:
        """Format alternatives as JSON."""
        data = {
            "type": "alternatives",
            "origin": origin,
            "destination": destination,
            "has_direct": any(a.is_direct for a in alternatives),
            "alternatives": [a.model_dump(mode="json") for a in alternatives],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def format_transit(self, options: list[TransitRouteOption]) -> str:
        """Format transit options as JSON."""
        data = {
            "type": "transit_options",
            "option_count": len(options),
            "options": [o.model_dump(mode="json") for o in options],
        }
        return json.dumps(data, indent=2, ensure_ascii=False)

    def format_conversion(self, result: ConversionResult) -> str:
        """Format a conversion outcome as JSON."""
        data = {
            "type": "conversion",
            "converted": result.converted,
            "state": result.state.value,
            "errors": result.errors,
            "record": result.record.model_dump(mode="json"),
        }
        return json.dumps(data, indent=2, ensure_ascii=False)
