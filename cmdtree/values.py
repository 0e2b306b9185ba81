# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Typed values that options and args bind raw command-line strings into.

Every value implements the `Value` contract:

- `set(raw)` converts `raw` and stores it, raising `ParseError` when `raw` is
  not valid for the type.
- `str(value)` renders the current value.
- `type_name()` returns a stable tag used in help output.
- `preset(raw)` stores a value that a later explicit `set` replaces. Defaults
  and environment variables are applied this way so that list values do not
  accumulate a default and a command-line token.

Optional capabilities (`NoOptDefaulter`, `Chooser`) are declared in
`cmdtree.protocols` and implemented where they make sense.

Values:
- String, Int64, Float64, Bool, Duration, DateTime
- StringArray: comma-separated, repeated flags append.
- Enum, EnumArray: case-insensitive choice matching.
- URL, HostPort
- Discard: accepts and drops anything.
- Validate: wraps another value with a predicate.
"""
from __future__ import annotations

import csv
import io
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Callable, Sequence
from urllib.parse import ParseResult, urlparse

from cmdtree.exceptions import ParseError, ValidationError
from cmdtree.parser.utils import (
    coerce_bool,
    coerce_datetime,
    coerce_duration,
    format_duration,
    format_float,
    split_csv,
)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class Value(ABC):
    """Base class for bindable values."""

    @abstractmethod
    def set(self, raw: str) -> None:
        """Convert `raw` and store it."""

    @abstractmethod
    def type_name(self) -> str:
        """Return the type tag shown in help output."""

    @abstractmethod
    def __str__(self) -> str: ...

    def preset(self, raw: str) -> None:
        """Store `raw` as a value that the next `set` replaces."""
        self.set(raw)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self)!r})"


class String(Value):
    def __init__(self, value: str = "") -> None:
        self.value = value

    def set(self, raw: str) -> None:
        self.value = raw

    def type_name(self) -> str:
        return "string"

    def __str__(self) -> str:
        return self.value


class Int64(Value):
    """A signed 64-bit integer. Only base-10 digits with an optional sign."""

    def __init__(self, value: int = 0) -> None:
        self.value = value

    def set(self, raw: str) -> None:
        text = raw.strip()
        body = text[1:] if text[:1] in "+-" else text
        if not body.isdigit():
            raise ParseError(f"invalid syntax for int64: {raw!r}", raw=raw)
        number = int(text)
        if not INT64_MIN <= number <= INT64_MAX:
            raise ParseError(f"value out of range for int64: {raw!r}", raw=raw)
        self.value = number

    def type_name(self) -> str:
        return "int64"

    def __str__(self) -> str:
        return str(self.value)


class Float64(Value):
    def __init__(self, value: float = 0.0) -> None:
        self.value = value

    def set(self, raw: str) -> None:
        try:
            self.value = float(raw.strip())
        except ValueError as error:
            raise ParseError(f"invalid syntax for float64: {raw!r}", raw=raw) from error

    def type_name(self) -> str:
        return "float64"

    def __str__(self) -> str:
        return format_float(self.value)


class Bool(Value):
    """A boolean. A bare `--flag` sets it to true."""

    def __init__(self, value: bool = False) -> None:
        self.value = value

    def set(self, raw: str) -> None:
        try:
            self.value = coerce_bool(raw)
        except ValueError as error:
            raise ParseError(str(error), raw=raw) from error

    def no_opt_default(self) -> str:
        return "true"

    def type_name(self) -> str:
        return "bool"

    def __str__(self) -> str:
        return "true" if self.value else "false"


class Duration(Value):
    def __init__(self, value: timedelta | None = None) -> None:
        self.value = value if value is not None else timedelta(0)

    def set(self, raw: str) -> None:
        try:
            self.value = coerce_duration(raw)
        except ValueError as error:
            raise ParseError(str(error), raw=raw) from error

    def type_name(self) -> str:
        return "duration"

    def __str__(self) -> str:
        return format_duration(self.value)


class DateTime(Value):
    def __init__(self, value: datetime | None = None) -> None:
        self.value = value

    def set(self, raw: str) -> None:
        try:
            self.value = coerce_datetime(raw)
        except ValueError as error:
            raise ParseError(str(error), raw=raw) from error

    def type_name(self) -> str:
        return "datetime"

    def __str__(self) -> str:
        return self.value.isoformat() if self.value else ""


def _write_csv(values: Sequence[str]) -> str:
    if not values:
        return ""
    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="").writerow(values)
    return buffer.getvalue()


class _ListValue(Value):
    """Shared behavior for values that accumulate across repeated `set` calls."""

    def __init__(self, value: Sequence[str] | None = None) -> None:
        self.value: list[str] = list(value or [])
        self._preset = False

    def set(self, raw: str) -> None:
        try:
            items = split_csv(raw)
        except csv.Error as error:
            raise ParseError(f"invalid list value: {raw!r}", raw=raw) from error
        items = [self.check(item) for item in items]
        if self._preset:
            self.value = []
            self._preset = False
        self.value.extend(items)

    def preset(self, raw: str) -> None:
        self.value = []
        self._preset = False
        self.set(raw)
        self._preset = True

    def check(self, item: str) -> str:
        return item

    def __str__(self) -> str:
        return _write_csv(self.value)


class StringArray(_ListValue):
    def type_name(self) -> str:
        return "stringArray"


class Enum(Value):
    """One of a fixed set of choices, matched case-insensitively.

    The value is stored as it was typed.
    """

    def __init__(self, choices: Sequence[str], value: str = "") -> None:
        self.choices = list(choices)
        self.value = value

    def set(self, raw: str) -> None:
        self.value = _match_choice(raw, self.choices)

    def choice_text(self) -> str:
        return "|".join(self.choices)

    def type_name(self) -> str:
        return "enum"

    def __str__(self) -> str:
        return self.value


class EnumArray(_ListValue):
    def __init__(self, choices: Sequence[str], value: Sequence[str] | None = None) -> None:
        super().__init__(value)
        self.choices = list(choices)

    def check(self, item: str) -> str:
        return _match_choice(item, self.choices)

    def choice_text(self) -> str:
        return f"[{'|'.join(self.choices)}]"

    def type_name(self) -> str:
        return "enumArray"


def _match_choice(raw: str, choices: Sequence[str]) -> str:
    for choice in choices:
        if raw.casefold() == choice.casefold():
            return raw
    raise ParseError(
        f"invalid choice: {raw}, should be one of {', '.join(choices)}", raw=raw
    )


class URL(Value):
    def __init__(self, value: str = "") -> None:
        self.value: ParseResult = urlparse(value)

    def set(self, raw: str) -> None:
        try:
            self.value = urlparse(raw)
            # Accessing the port validates it.
            _ = self.value.port
        except ValueError as error:
            raise ParseError(f"invalid URL {raw!r}: {error}", raw=raw) from error

    def type_name(self) -> str:
        return "url"

    def __str__(self) -> str:
        return self.value.geturl()


class HostPort(Value):
    """A `host:port` pair. IPv6 hosts are written in brackets, `[::1]:8080`."""

    def __init__(self, host: str = "", port: str = "") -> None:
        self.host = host
        self.port = port

    def set(self, raw: str) -> None:
        host, sep, port = raw.rpartition(":")
        if not sep:
            raise ParseError(f"missing port in address {raw!r}", raw=raw)
        if host.startswith("["):
            if not host.endswith("]"):
                raise ParseError(f"missing ']' in address {raw!r}", raw=raw)
            host = host[1:-1]
        elif ":" in host:
            raise ParseError(f"too many colons in address {raw!r}", raw=raw)
        if not port:
            raise ParseError(f"missing port in address {raw!r}", raw=raw)
        if not port.isdigit() or int(port) > 65535:
            raise ParseError(f"invalid port {port!r} in address {raw!r}", raw=raw)
        self.host = host
        self.port = port

    def type_name(self) -> str:
        return "host:port"

    def __str__(self) -> str:
        if not self.host and not self.port:
            return ""
        if ":" in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


class Discard(Value):
    """Accepts any string and keeps nothing."""

    def set(self, raw: str) -> None:
        return None

    def type_name(self) -> str:
        return "discard"

    def __str__(self) -> str:
        return ""


class Validate(Value):
    """
    Wraps a value with a predicate that runs after every successful `set`.

    The predicate receives the wrapped value. Returning a message (anything
    other than `None`) or raising `ValueError` rejects the input with a
    `ValidationError`. Type name and rendering are those of the wrapped value.
    """

    def __init__(self, value: Value, predicate: Callable[[Value], Any]) -> None:
        self.inner = value
        self.predicate = predicate

    def set(self, raw: str) -> None:
        self.inner.set(raw)
        self._check(raw)

    def preset(self, raw: str) -> None:
        self.inner.preset(raw)
        self._check(raw)

    def _check(self, raw: str) -> None:
        try:
            problem = self.predicate(self.inner)
        except ValueError as error:
            raise ValidationError(f"invalid value {raw!r}: {error}") from error
        if problem is not None:
            raise ValidationError(f"invalid value {raw!r}: {problem}")

    @property
    def value(self) -> Any:
        return getattr(self.inner, "value", None)

    def no_opt_default(self) -> str:
        if hasattr(self.inner, "no_opt_default"):
            return self.inner.no_opt_default()
        return ""

    def type_name(self) -> str:
        return self.inner.type_name()

    def __str__(self) -> str:
        return str(self.inner)
