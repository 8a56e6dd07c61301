"""Persistence for conversion overrides and v2 rate selections.

Stands in for the store's mutation interface. Conversions and v2 selections
are kept in separate maps keyed by record id, so selecting a v2 option never
touches the rate applied at conversion time.
"""

import json
import logging
import time
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from cargorate.conversion import override_fields
from cargorate.models import FlightRecord, RateSelection
from cargorate.settings import DEFAULT_STATE_PATH

logger = logging.getLogger(__name__)

CONVERSIONS_KEY = "records"
SELECTIONS_KEY = "selections"


class OverrideStore:
    """Saves and loads per-record override fields in a JSON file."""

    def __init__(self, state_path: Optional[Path] = None) -> None:
        self.state_path = state_path or DEFAULT_STATE_PATH

    def _read(self) -> dict:
        if not self.state_path.exists():
            return {}
        try:
            raw = json.loads(self.state_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Failed to load override state: %s", exc)
            return {}
        if not isinstance(raw, dict):
            logger.warning("Override state %s is not a JSON object", self.state_path)
            return {}
        return raw

    def _section(self, raw: dict, key: str) -> dict[str, dict]:
        section = raw.get(key, {})
        if not isinstance(section, dict):
            logger.warning("Override state %s has a malformed %r map", self.state_path, key)
            return {}
        return {str(k): v for k, v in section.items() if isinstance(v, dict)}

    def load(self) -> dict[str, dict]:
        """Return {record_id: conversion fields}. Empty if missing or corrupted."""
        return self._section(self._read(), CONVERSIONS_KEY)

    def load_selections(self) -> dict[str, dict]:
        """Return {record_id: v2 selection fields}. Empty if missing or corrupted."""
        return self._section(self._read(), SELECTIONS_KEY)

    def _update(self, key: str, record_id: str, fields: dict) -> None:
        raw = self._read()
        data = {
            CONVERSIONS_KEY: self._section(raw, CONVERSIONS_KEY),
            SELECTIONS_KEY: self._section(raw, SELECTIONS_KEY),
        }
        data[key][record_id] = {**data[key].get(record_id, {}), **fields}
        data["_saved_at"] = time.time()

        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        self.state_path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
        logger.info("Saved %s fields %s for record %s", key, sorted(fields), record_id)

    def save_conversion(self, record: FlightRecord) -> None:
        """Persist the override fields of a converted record."""
        self._update(CONVERSIONS_KEY, record.id, override_fields(record))

    def save_selection(self, selection: RateSelection) -> None:
        """Persist a v2 rate selection."""
        fields = {
            "v3_rate_id": selection.sector_rate_id,
            "transit_route": selection.transit_route,
        }
        if selection.customer_id is not None:
            fields["customer_id"] = selection.customer_id
        self._update(SELECTIONS_KEY, selection.record_id, fields)

    def get(self, record_id: str) -> Optional[dict]:
        return self.load().get(record_id)

    def get_selection(self, record_id: str) -> Optional[dict]:
        return self.load_selections().get(record_id)

    def apply_to(self, records: Iterable[FlightRecord]) -> list[FlightRecord]:
        """Overlay persisted conversions, then selections, onto freshly loaded records."""
        raw = self._read()
        conversions = self._section(raw, CONVERSIONS_KEY)
        selections = self._section(raw, SELECTIONS_KEY)

        merged: list[FlightRecord] = []
        for record in records:
            fields = {**conversions.get(record.id, {}), **selections.get(record.id, {})}
            if fields:
                try:
                    record = FlightRecord.model_validate({**record.model_dump(), **fields})
                except ValidationError as exc:
                    logger.warning("Ignoring saved fields for record %s: %s", record.id, exc)
            merged.append(record)
        return merged

    def clear(self) -> None:
        if self.state_path.exists():
            self.state_path.unlink()

    @property
    def record_count(self) -> int:
        raw = self._read()
        ids = set(self._section(raw, CONVERSIONS_KEY)) | set(self._section(raw, SELECTIONS_KEY))
        return len(ids)
