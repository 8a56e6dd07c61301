"""Smoke tests to verify basic project setup."""

from pathlib import Path


def test_fixtures_dir_exists():
    assert (Path(__file__).parent / "fixtures").is_dir()


def test_registry_fixture_loads(tables):
    assert tables is not None
    assert len(tables["flight_uploads"]) == 8
    assert len(tables["sector_rates"]) == 8


def test_cargorate_importable():
    import cargorate

    assert cargorate.__version__


def test_settings_loaded():
    from cargorate.settings import CURRENCY_SYMBOL, EMPTY_LEG, format_money

    assert CURRENCY_SYMBOL == "€"
    assert EMPTY_LEG == "-"
    assert format_money("3") == "€3.00"
