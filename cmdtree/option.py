# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Option`, the declarative description of a command's configuration
knob, and the helpers that turn options into a runtime `FlagSet`.

An option may be set from three sources, in increasing priority:

1. `default`, applied when the flag set is built.
2. The first environment variable in `envs` with a non-empty value.
3. A command-line token.

Options without a `flag` are environment-only. They never appear in a flag
set but still receive their default and environment value.

`global_options()` returns the flags every root command carries (`--help`,
`--version`, `--list-commands`, `--list-flags`, `--debug`, `--log-level`).
"""
from __future__ import annotations

import os
from typing import IO, Any, Callable, Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from cmdtree.exceptions import CmdTreeError, ConfigurationError
from cmdtree.logger import logger
from cmdtree.parser.flag_set import Flag, FlagSet, ValueSource
from cmdtree.protocols import NoOptDefaulter
from cmdtree.values import Bool, Discard, Enum, Value

LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


class Option(BaseModel):
    """
    A configuration option of a command.

    Attributes:
        flag (str): Long flag name. Empty disables flag parsing for the option.
        shorthand (str): One-character flag name.
        description (str): Help text. Normalized when the tree is built.
        envs (list[str]): Environment variables consulted in order.
        default (str): Raw default applied with `Value.preset`.
        value (Value | None): Where parsed input is stored.
        required (bool): Whether some source must provide a value.
        hidden (bool): Hide from help and listings.
        deprecated (str): Deprecation message printed when the flag is used.
        category (str): Free-form grouping label.
        action (Callable | None): Called with the value after parsing when the
            flag was set from the command line or the environment.
    """

    flag: str = ""
    shorthand: str = ""
    description: str = ""
    envs: list[str] = Field(default_factory=list)
    default: str = ""
    value: Value | None = None
    required: bool = False
    hidden: bool = False
    deprecated: str = ""
    category: str = ""
    action: Callable[[Value | None], Any] | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @property
    def identifier(self) -> str:
        if self.flag:
            return self.flag
        return self.envs[0] if self.envs else ""

    def type_name(self) -> str:
        if self.value is None:
            return "string"
        return self.value.type_name()

    def __str__(self) -> str:
        return f"Option(flag='{self.flag}', envs={self.envs}, default='{self.default}')"


def _preset_default(option: Option, value: Value) -> None:
    if not option.default:
        return
    try:
        value.preset(option.default)
    except (CmdTreeError, ValueError) as error:
        raise ConfigurationError(
            f"invalid default {option.default!r} for option "
            f"{option.identifier!r}: {error}"
        ) from error


def _apply_env(
    option: Option, value: Value, environ: Mapping[str, str]
) -> str | None:
    """Preset the first usable environment value. Returns its variable name."""
    for env in option.envs:
        raw = environ.get(env, "")
        if not raw:
            continue
        try:
            value.preset(raw)
        except (CmdTreeError, ValueError) as error:
            logger.warning("Ignoring $%s for option '%s': %s", env, option.identifier, error)
            continue
        logger.debug("Option '%s' set from $%s", option.identifier, env)
        return env
    return None


def build_flag_set(
    options: Sequence[Option],
    name: str,
    output: IO[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> FlagSet:
    """
    Build a `FlagSet` for `options` with defaults and environment applied.

    Every option with a `flag` becomes one `Flag` that shares the option's
    value. Options without a value write to a `Discard`. Environment-only
    options are not registered but still get their default and environment
    value applied.

    Raises:
        ConfigurationError: If a default does not convert.
    """
    environ = os.environ if environ is None else environ
    flag_set = FlagSet(name, output)
    for option in options:
        value = option.value
        if not option.flag:
            if value is not None:
                _preset_default(option, value)
                _apply_env(option, value, environ)
            continue

        if value is None:
            value = Discard()
        no_opt_default = ""
        if isinstance(value, NoOptDefaulter):
            no_opt_default = value.no_opt_default()
        flag = Flag(
            name=option.flag,
            value=value,
            shorthand=option.shorthand,
            usage=option.description,
            default=option.default,
            no_opt_default=no_opt_default,
            deprecated=option.deprecated,
            hidden=option.hidden,
        )
        _preset_default(option, value)
        if option.default:
            flag.source = ValueSource.DEFAULT
        if _apply_env(option, value, environ):
            flag.changed = True
            flag.source = ValueSource.ENV
        flag_set.add_flag(flag)
    return flag_set


def build_flag_shape(options: Sequence[Option], name: str) -> FlagSet:
    """
    Build a flag set that only knows names, shorthands and which flags take
    an operand. Nothing is preset, so it is safe to use for `split()` while
    resolving.
    """
    shape = FlagSet(name)
    for option in options:
        if not option.flag:
            continue
        no_opt_default = ""
        if isinstance(option.value, NoOptDefaulter):
            no_opt_default = option.value.no_opt_default()
        shape.add_flag(
            Flag(
                name=option.flag,
                value=Discard(),
                shorthand=option.shorthand,
                no_opt_default=no_opt_default,
            )
        )
    return shape


def global_options() -> list[Option]:
    """Return freshly constructed global options for one run."""
    return [
        Option(
            flag="help",
            shorthand="h",
            description="Show help for the command.",
            value=Bool(),
        ),
        Option(
            flag="version",
            shorthand="v",
            description="Show version information.",
            value=Bool(),
        ),
        Option(
            flag="list-commands",
            description="List all commands, including subcommands.",
            value=Bool(),
        ),
        Option(
            flag="list-flags",
            description="List all flags, including subcommand flags.",
            value=Bool(),
        ),
        Option(
            flag="debug",
            description="Enable debug logging.",
            value=Bool(),
        ),
        Option(
            flag="log-level",
            description="Set the log level.",
            default="info",
            value=Enum(LOG_LEVELS),
        ),
    ]
