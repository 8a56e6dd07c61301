"""Bundled display settings.

Loaded once from cargorate/data/settings.yaml. Missing keys fall back to
the defaults below.
"""

from pathlib import Path

import yaml

from cargorate.models import to_money

_DATA_DIR = Path(__file__).parent / "data"

_DEFAULTS: dict = {
    "currency_symbol": "€",
    "empty_leg": "-",
    "no_customer_label": "No Customer",
    "no_rates_notice": "No sector rates found for this route",
    "state_dir": ".cargorate",
    "state_file": "overrides.json",
}

with open(_DATA_DIR / "settings.yaml", encoding="utf-8") as f:
    _SETTINGS: dict = {**_DEFAULTS, **(yaml.safe_load(f) or {})}

CURRENCY_SYMBOL: str = _SETTINGS["currency_symbol"]
EMPTY_LEG: str = _SETTINGS["empty_leg"]
NO_CUSTOMER_LABEL: str = _SETTINGS["no_customer_label"]
NO_RATES_NOTICE: str = _SETTINGS["no_rates_notice"]
DEFAULT_STATE_PATH: Path = Path.home() / _SETTINGS["state_dir"] / _SETTINGS["state_file"]


def format_money(amount) -> str:
    """Render an amount as e.g. "€3.00"."""
    return f"{CURRENCY_SYMBOL}{to_money(amount):.2f}"
