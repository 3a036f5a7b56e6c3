"""Global Trade Item Number (GTIN) helpers.

Accepts EAN-8, UPC-12, EAN-13 and GTIN-14 codes. Values are handled as digit
strings throughout; Python integers are only used for the numeric comparison
which ignores leading zeros, so 14 digit codes never lose precision.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

    from harmonipy.domain.model import GTIN

GTIN_LENGTHS: Final[frozenset[int]] = frozenset({8, 12, 13, 14})
_GTIN_FORMAT: Final[re.Pattern[str]] = re.compile(r"[0-9]+")


class InvalidGTINError(ValueError):
    """Raised when a GTIN has an invalid format, length or check digit."""


def _checksum(gtin: str) -> int:
    # factors alternate between 1 and 3, starting with 1 for the last digit
    length = len(gtin)
    return sum(int(digit) * (1 if (length - index) % 2 else 3) for index, digit in enumerate(gtin))


def ensure_valid_gtin(gtin: GTIN | int) -> None:
    """Raise ``InvalidGTINError`` unless the GTIN has an accepted length and a valid check digit."""

    code = str(gtin)
    if not code:
        raise InvalidGTINError("GTIN is empty")
    if len(code) not in GTIN_LENGTHS:
        raise InvalidGTINError(f"GTIN '{code}' has an invalid length")
    if not _GTIN_FORMAT.fullmatch(code):
        raise InvalidGTINError(f"GTIN '{code}' contains invalid non-numeric characters")
    # the checksum of the whole code (including the check digit) has to be a multiple of 10
    if _checksum(code) % 10 != 0:
        raise InvalidGTINError(f"Checksum of GTIN '{code}' is invalid")


def is_valid_gtin(gtin: GTIN | int) -> bool:
    try:
        ensure_valid_gtin(gtin)
    except InvalidGTINError:
        return False
    return True


def check_digit(gtin: GTIN | int) -> int:
    """Calculate the check digit of the given GTIN, regardless of its length.

    The last position has to hold the current check digit or an arbitrary
    placeholder, it is ignored for the calculation.
    """

    code = str(gtin)
    if not code or not _GTIN_FORMAT.fullmatch(code[:-1] + "0"):
        raise InvalidGTINError(f"GTIN '{code}' contains invalid non-numeric characters")
    # a zero in place of the check digit has no effect on the checksum
    return (10 - _checksum(code[:-1] + "0") % 10) % 10


def is_equal_gtin(a: GTIN | int, b: GTIN | int, *, strict: bool = False) -> bool:
    """Compare two GTINs, ignoring leading zeros unless ``strict`` is set."""

    a_code, b_code = str(a), str(b)
    if strict:
        return a_code == b_code
    try:
        return int(a_code) == int(b_code)
    except ValueError:
        return a_code == b_code


def gtin_value(gtin: GTIN | int) -> int:
    """Numeric value of a GTIN which is identical for variants with leading zeros."""

    return int(str(gtin))


def unique_gtin_set(gtins: Iterable[GTIN | int]) -> set[int]:
    """Return the numeric set of all unique GTINs."""

    return {gtin_value(gtin) for gtin in gtins}


def format_gtin(gtin: GTIN | int, length: int = 13) -> str:
    """Zero-pad a GTIN to the given length (at least its significant digits)."""

    code = str(gtin_value(gtin))
    return code.zfill(length)
