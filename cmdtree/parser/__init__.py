"""
cmdtree CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .flag_set import Flag, FlagSet, ValueSource
from .formats import (
    ArgFormat,
    decode_arg,
    detect_format,
    encode_query_args,
    parse_form_args,
    parse_json_args,
    parse_query_args,
)
from .tokens import TokenKind, classify, command_candidates

__all__ = [
    "ArgFormat",
    "Flag",
    "FlagSet",
    "TokenKind",
    "ValueSource",
    "classify",
    "command_candidates",
    "decode_arg",
    "detect_format",
    "encode_query_args",
    "parse_form_args",
    "parse_json_args",
    "parse_query_args",
]
