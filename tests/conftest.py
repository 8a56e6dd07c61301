"""Shared test fixtures for cargorate."""

import yaml
import pytest
from pathlib import Path

from cargorate.registry import build_records, build_snapshot

FIXTURES_DIR = Path(__file__).parent / "fixtures"
REGISTRY_FILE = FIXTURES_DIR / "registry.yaml"


@pytest.fixture
def load_yaml():
    """Return a function that loads a YAML fixture file."""

    def _load(name: str) -> dict:
        path = FIXTURES_DIR / name
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)

    return _load


@pytest.fixture
def tables(load_yaml):
    """Raw table rows of the registry export."""
    return load_yaml("registry.yaml")


@pytest.fixture
def snapshot(tables):
    """Registry snapshot built from the export."""
    return build_snapshot(tables)


@pytest.fixture
def records(tables):
    """Flight records keyed by id."""
    return {r.id: r for r in build_records(tables)}


@pytest.fixture
def flights(snapshot):
    return snapshot.active_flights


@pytest.fixture
def sector_rates(snapshot):
    return snapshot.active_sector_rates
