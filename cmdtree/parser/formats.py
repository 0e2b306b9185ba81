# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Detects and decodes structured argument tokens.

A single positional token may carry several named values in one of three
textual formats:

- QUERY: `name=John&age=30&tags=go&tags=cli`
- FORM: `user='admin user' email=a@b.com active=false`
- JSON: `{"id":123,"title":"Test"}` or `["v1","v2"]`

Every decoder returns an insertion-ordered `dict[str, list[str]]`. Values that
belong to no key (form segments without `=`, JSON array elements) are stored
under the empty key `""`.

`detect_format` only looks at the shape of a token. `decode_arg` decodes it
and falls back to treating the token as a plain positional when the detected
format does not actually decode, since a token containing `=` may well be an
ordinary value.
"""
from __future__ import annotations

import json
import math
import re
from enum import Enum
from typing import Any, Iterable, Mapping
from urllib.parse import quote_plus

from cmdtree.exceptions import FormatError
from cmdtree.logger import logger
from cmdtree.parser.utils import format_float

ArgValues = dict[str, list[str]]

_PERCENT_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_QUERY_SAFE = "-_.~"


class ArgFormat(Enum):
    """Shape of a positional token."""

    POSITIONAL = "positional"
    QUERY = "query"
    FORM = "form"
    JSON = "json"

    @classmethod
    def _missing_(cls, value: object) -> ArgFormat:
        if isinstance(value, str):
            normalized = value.lower()
            for member in cls:
                if member.value == normalized:
                    return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid ArgFormat: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


def detect_format(token: str) -> ArgFormat:
    """Classify a token by shape. The first matching rule wins."""
    text = token.strip()
    if (text.startswith("{") and text.endswith("}")) or (
        text.startswith("[") and text.endswith("]")
    ):
        return ArgFormat.JSON
    if "=" in text and not text.startswith("-"):
        if "&" in text or " " not in text:
            return ArgFormat.QUERY
        return ArgFormat.FORM
    return ArgFormat.POSITIONAL


def _unquote_query(text: str, raw: str) -> str:
    if _PERCENT_ESCAPE.search(text):
        raise FormatError(f"invalid URL escape in {raw!r}")
    data = text.replace("+", " ").encode("utf-8")
    out = bytearray()
    index = 0
    while index < len(data):
        byte = data[index]
        if byte == 0x25:  # %
            out.append(int(data[index + 1 : index + 3], 16))
            index += 3
        else:
            out.append(byte)
            index += 1
    try:
        return out.decode("utf-8")
    except UnicodeDecodeError as error:
        raise FormatError(f"invalid UTF-8 escape in {raw!r}") from error


def parse_query_args(text: str) -> ArgValues:
    """
    Decode a URL query string.

    Pairs are separated by `&`. Keys and values are percent-decoded and `+`
    becomes a space. Repeated keys accumulate in order, and a pair without
    `=` gets an empty value.

    Raises:
        FormatError: On a malformed percent escape or a `;` separator.
    """
    result: ArgValues = {}
    for pair in text.split("&"):
        if not pair:
            continue
        if ";" in pair:
            raise FormatError(f"invalid semicolon separator in query {text!r}")
        key, _, value = pair.partition("=")
        key = _unquote_query(key, text)
        value = _unquote_query(value, text)
        result.setdefault(key, []).append(value)
    return result


def encode_query_args(values: Mapping[str, Iterable[str]]) -> str:
    """Encode values as a query string, keeping per-key order and repeats."""
    parts = []
    for key, items in values.items():
        for item in items:
            parts.append(
                f"{quote_plus(key, safe=_QUERY_SAFE)}={quote_plus(item, safe=_QUERY_SAFE)}"
            )
    return "&".join(parts)


def parse_form_args(text: str) -> ArgValues:
    """
    Decode whitespace-separated `key=value` segments.

    Single or double quotes group characters, including spaces and `=`, and
    are removed from the result. A segment without an unquoted `=` is stored
    under the `""` key.

    Raises:
        FormatError: On an unterminated quote.
    """
    result: ArgValues = {}
    for segment in _split_quoted_pairs(text):
        key, value = segment
        result.setdefault(key, []).append(value)
    return result


def _split_quoted_pairs(text: str) -> list[tuple[str, str]]:
    """Split form text into (key, value) pairs, honoring only unquoted `=`."""
    pairs: list[tuple[str, str]] = []
    key: list[str] | None = None
    current: list[str] = []
    quote = ""
    in_segment = False

    def finish() -> None:
        if key is None:
            pairs.append(("", "".join(current)))
        else:
            pairs.append(("".join(key), "".join(current)))

    for char in text:
        if quote:
            if char == quote:
                quote = ""
            else:
                current.append(char)
        elif char in "'\"":
            quote = char
            in_segment = True
        elif char.isspace():
            if in_segment:
                finish()
                key, current, in_segment = None, [], False
        elif char == "=" and key is None:
            key, current = current, []
            in_segment = True
        else:
            current.append(char)
            in_segment = True
    if quote:
        raise FormatError(f"unterminated quote in {text!r}")
    if in_segment:
        finish()
    return pairs


def _reject_constant(name: str) -> Any:
    raise FormatError(f"invalid JSON number {name}")


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise FormatError(f"invalid JSON number {value!r}")
        try:
            return format_float(float(value))
        except OverflowError as error:
            raise FormatError(f"JSON number out of range: {error}") from error
    return json.dumps(value, separators=(",", ":"), sort_keys=True, ensure_ascii=False)


def parse_json_args(text: str) -> ArgValues:
    """
    Decode a JSON object or array.

    Object members are stored under their key, array elements under `""`.
    Strings pass through, numbers are rendered like `%g`, booleans become
    `true`/`false`, null becomes an empty string, and nested objects or
    arrays are re-serialized compactly with sorted keys.

    Raises:
        FormatError: If the text is not a JSON object or array.
    """
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except ValueError as error:
        raise FormatError(f"invalid JSON {text!r}: {error}") from error
    if isinstance(data, dict):
        return {key: [_stringify(value)] for key, value in data.items()}
    if isinstance(data, list):
        return {"": [_stringify(item) for item in data]} if data else {}
    raise FormatError(f"JSON argument must be an object or array, got {text!r}")


_DECODERS = {
    ArgFormat.QUERY: parse_query_args,
    ArgFormat.FORM: parse_form_args,
    ArgFormat.JSON: parse_json_args,
}


def decode_arg(token: str) -> tuple[ArgFormat, ArgValues | None]:
    """
    Detect and decode a token.

    Returns the detected format and its values. `None` values mean the token
    is a plain positional, either by shape or because decoding failed.
    """
    arg_format = detect_format(token)
    if arg_format is ArgFormat.POSITIONAL:
        return arg_format, None
    try:
        return arg_format, _DECODERS[arg_format](token.strip())
    except FormatError as error:
        logger.debug("Treating %r as positional: %s", token, error)
        return ArgFormat.POSITIONAL, None
