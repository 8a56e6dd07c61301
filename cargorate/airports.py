"""Airport code normalization and airport-code registry lookups.

Uploaded records and the flight registry store locations in a longer raw
form such as ``USFRAT``; the canonical IATA code sits at characters 3-5.
"""

from typing import Iterable, Optional

from cargorate.models import AirportCode

_RAW_CODE_MIN_LENGTH = 5
_CODE_SLICE = slice(2, 5)


def normalize_airport_code(code: Optional[str]) -> str:
    """Reduce a raw location code to a canonical 3-letter airport code.

    Codes of 5 or more characters yield characters [2, 5) uppercased,
    anything shorter is returned whole, uppercased. Never consults the
    airport registry; unknown codes pass through unchanged.
    """
    if not code:
        return ""
    if len(code) >= _RAW_CODE_MIN_LENGTH:
        return code[_CODE_SLICE].upper()
    return code.upper()


def active_codes(airport_codes: Iterable[AirportCode]) -> set[str]:
    """Return the set of active canonical codes in the registry."""
    return {a.code for a in airport_codes if a.is_active}


def is_known_code(code: Optional[str], airport_codes: Iterable[AirportCode]) -> bool:
    """Check whether a raw or canonical code is an active registry code."""
    return normalize_airport_code(code) in active_codes(airport_codes)
