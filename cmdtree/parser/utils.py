# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Contains value coercion and formatting utilities for cmdtree values.

This module converts raw command-line strings into Python values with the
grammar a Go-flavoured CLI user expects (`1h30m`, `t`/`F`, `%g` numbers), and
renders them back for help output and structured-argument decoding.

Functions:
- coerce_bool: Convert a string to a boolean (strict grammar).
- coerce_duration: Convert a duration string such as `1h30m` to a `timedelta`.
- format_duration: Render a `timedelta` as a duration string.
- coerce_datetime: Convert a string to a `datetime` using dateutil.
- format_float: Render a float the way `%g` does.
- split_csv: Split a comma-separated value respecting quotes.
"""
import csv
import re
from datetime import datetime, timedelta
from decimal import Decimal

from dateutil import parser as date_parser

TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
FALSE_STRINGS = frozenset({"", "0", "f", "F", "FALSE", "false", "False"})

_DURATION_UNITS = {
    "ns": 1e-3,
    "us": 1.0,
    "µs": 1.0,
    "μs": 1.0,
    "ms": 1e3,
    "s": 1e6,
    "m": 60e6,
    "h": 3600e6,
}
_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|μs|ms|s|m|h)")


def coerce_bool(value: str) -> bool:
    """
    Convert a string to a boolean.

    Accepts `1, t, T, TRUE, true, True` and `0, f, F, FALSE, false, False`.
    The empty string is false.

    Args:
        value (str): The input string.

    Returns:
        bool: Parsed boolean result.

    Raises:
        ValueError: If the value is not one of the accepted spellings.
    """
    if isinstance(value, bool):
        return value
    value = value.strip()
    if value in TRUE_STRINGS:
        return True
    if value in FALSE_STRINGS:
        return False
    raise ValueError(f"invalid syntax for bool: {value!r}")


def coerce_duration(value: str) -> timedelta:
    """
    Convert a duration string to a `timedelta`.

    A duration is an optionally signed sequence of decimal numbers with a unit
    suffix, such as `300ms`, `-1.5h` or `2h45m`. Valid units are `ns`, `us`
    (or `µs`), `ms`, `s`, `m`, `h`. A bare `0` is accepted.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    raw = value.strip()
    if not raw:
        raise ValueError("invalid duration: empty string")
    sign = 1
    body = raw
    if body[0] in "+-":
        sign = -1 if body[0] == "-" else 1
        body = body[1:]
    if body == "0":
        return timedelta(0)
    if not body:
        raise ValueError(f"invalid duration: {raw!r}")

    micros = 0.0
    position = 0
    while position < len(body):
        match = _DURATION_PART.match(body, position)
        if not match:
            raise ValueError(f"invalid duration: {raw!r}")
        number, unit = match.groups()
        micros += float(number) * _DURATION_UNITS[unit]
        position = match.end()
    return timedelta(microseconds=sign * micros)


def format_duration(value: timedelta) -> str:
    """Render a `timedelta` as a duration string, e.g. `1h30m0s`."""
    micros = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_trim_decimal(Decimal(micros) / 1000)}ms"

    hours, rest = divmod(micros, 3600 * 1_000_000)
    minutes, rest = divmod(rest, 60 * 1_000_000)
    seconds = _trim_decimal(Decimal(rest) / 1_000_000)
    text = f"{seconds}s"
    if hours or minutes:
        text = f"{minutes}m{text}"
    if hours:
        text = f"{hours}h{text}"
    return f"{sign}{text}"


def _trim_decimal(number: Decimal) -> str:
    text = format(number, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def coerce_datetime(value: str) -> datetime:
    """Parse a date/time string with dateutil."""
    try:
        return date_parser.parse(value)
    except (ValueError, OverflowError) as error:
        raise ValueError(f"Value '{value}' could not be parsed as a datetime") from error


def format_float(value: float) -> str:
    """
    Render a float like Go's `%g` verb with the shortest precision.

    Exponent notation is used when the decimal exponent is below -4 or at
    least 6 (`1e+06`, `1.5e-05`), plain notation otherwise (`123`, `0.25`).
    """
    number = Decimal(repr(float(value)))
    if number == 0:
        return "-0" if number.is_signed() else "0"
    number = number.normalize()
    exponent = number.adjusted()
    if exponent < -4 or exponent >= 6:
        _, digits, _ = number.as_tuple()
        mantissa = str(digits[0])
        if len(digits) > 1:
            mantissa += "." + "".join(str(digit) for digit in digits[1:])
        sign = "-" if number.is_signed() else ""
        exp_sign = "+" if exponent >= 0 else "-"
        return f"{sign}{mantissa}e{exp_sign}{abs(exponent):02d}"
    return format(number, "f")


def split_csv(value: str) -> list[str]:
    """Split a comma-separated value, honoring double-quoted fields."""
    if value == "":
        return []
    return next(csv.reader([value], skipinitialspace=False))
