"""Human-readable file size parsing."""

import re
from typing import Final

# Base-1024 multipliers by unit suffix
_UNITS: Final = {
    'K': 1024,
    'M': 1024 ** 2,
    'G': 1024 ** 3,
    'T': 1024 ** 4,
    'P': 1024 ** 5,
}

# Leading number in float syntax, e.g. '10', '1.5', '.5', '2e3'
_NUMBER_PATTERN: Final = re.compile(
    r'\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?',
)


def to_bytes(size: str | int | float) -> int:
    """Convert a human-readable size to bytes.

    Numbers are taken as bytes. Strings use their leading number and an
    optional K/M/G/T/P suffix (case-insensitive, trailing 'B' ignored),
    so '10M', '10m' and '10MB' are all 10 MiB. Unknown suffixes are
    ignored and garbage parses as 0.

    Args:
        size: Size like 500, '500', '1.5G' or '10MB'.

    Returns:
        Size in bytes, rounded to the nearest integer.
    """
    if isinstance(size, int | float):
        return round(size)

    number = _NUMBER_PATTERN.match(size)
    if number is None:
        return 0

    amount = float(number.group())
    unit = size.strip().rstrip('Bb')[-1:].upper()
    return round(amount * _UNITS.get(unit, 1))
