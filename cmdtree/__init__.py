"""
cmdtree CLI Framework

Copyright (c) 2025 rtj.dev LLC.
Licensed under the MIT License. See LICENSE file for details.
"""

from .argument import Arg
from .command import Command
from .context import RunContext
from .exceptions import (
    CmdTreeError,
    ConfigurationError,
    FormatError,
    HandlerError,
    ParseError,
    UnknownSubcommandError,
    ValidationError,
)
from .invocation import Invocation
from .middleware import chain, require_n_args, require_range_args
from .option import Option
from .signals import CancelSignal, FlowSignal, HelpSignal
from .tree import CommandTree
from .values import (
    URL,
    Bool,
    DateTime,
    Discard,
    Duration,
    Enum,
    EnumArray,
    Float64,
    HostPort,
    Int64,
    String,
    StringArray,
    Validate,
    Value,
)

__all__ = [
    "Arg",
    "Bool",
    "CancelSignal",
    "CmdTreeError",
    "Command",
    "CommandTree",
    "ConfigurationError",
    "DateTime",
    "Discard",
    "Duration",
    "Enum",
    "EnumArray",
    "Float64",
    "FlowSignal",
    "FormatError",
    "HandlerError",
    "HelpSignal",
    "HostPort",
    "Int64",
    "Invocation",
    "Option",
    "ParseError",
    "RunContext",
    "String",
    "StringArray",
    "URL",
    "UnknownSubcommandError",
    "Validate",
    "ValidationError",
    "Value",
    "chain",
    "require_n_args",
    "require_range_args",
]
