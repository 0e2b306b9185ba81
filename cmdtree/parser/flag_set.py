# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Flag` and `FlagSet`, the runtime flag table of one command run.

A `FlagSet` understands the POSIX/GNU flag grammar:

- `--name value`, `--name=value`
- `-n value`, `-nvalue`, `-n=value`
- bundled shorthands `-abc` for flags that need no operand
- `--` ends flag parsing, a lone `-` is a positional
- positionals may be interspersed with flags

Parsing happens in two phases. `split()` classifies tokens into flags and
positionals without touching any value, which the resolver uses to find
subcommand names while the final flag table is not known yet. `parse()` runs
once against the final table, sets values and records which flags changed.

Key Components:
- ValueSource: Where a flag's current value came from.
- Flag: One registered flag and its value.
- FlagSet: Flag registry, lookup and parsing.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import IO, TYPE_CHECKING, Iterator, Sequence

from cmdtree.exceptions import CmdTreeError, ConfigurationError, ParseError
from cmdtree.logger import logger
from cmdtree.utils import DiscardStream

if TYPE_CHECKING:
    from cmdtree.values import Value


class ValueSource(Enum):
    """Origin of a flag's current value, in increasing priority."""

    NONE = "none"
    DEFAULT = "default"
    ENV = "env"
    FLAG = "flag"

    @classmethod
    def _missing_(cls, value: object) -> ValueSource:
        if isinstance(value, str):
            normalized = value.lower()
            for member in cls:
                if member.value == normalized:
                    return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid ValueSource: '{value}'. Must be one of: {valid}")

    def __str__(self) -> str:
        return self.value


@dataclass
class Flag:
    """
    A flag registered in a `FlagSet`.

    Attributes:
        name (str): Long name, used as `--name`.
        value (Value): Value the flag writes to. Shared with the declaring option.
        shorthand (str): Optional one-character name, used as `-n`.
        usage (str): Description shown in help.
        default (str): Default text shown in help.
        no_opt_default (str): Operand implied by a bare `--name`, if any.
        deprecated (str): Deprecation message. Empty means not deprecated.
        hidden (bool): Whether help output skips the flag.
        changed (bool): Whether a value was applied from the environment or the
            command line.
        source (ValueSource): Where the current value came from.
    """

    name: str
    value: Value
    shorthand: str = ""
    usage: str = ""
    default: str = ""
    no_opt_default: str = ""
    deprecated: str = ""
    hidden: bool = False
    changed: bool = False
    source: ValueSource = ValueSource.NONE

    def display_name(self) -> str:
        if self.shorthand:
            return f"-{self.shorthand}, --{self.name}"
        return f"--{self.name}"


class FlagSet:
    """
    Registry of flags for one command run.

    Re-adding a name replaces the earlier flag, and a shorthand always points
    at the most recently added flag that declares it. This is how deeper
    commands override the flags they inherit.
    """

    def __init__(self, name: str = "", output: IO[str] | None = None) -> None:
        self.name = name
        self.output = output or DiscardStream()
        self._flags: dict[str, Flag] = {}
        self._shorthands: dict[str, str] = {}
        self._args: list[str] = []
        self.parsed = False

    def add_flag(self, flag: Flag) -> None:
        previous = self._flags.pop(flag.name, None)
        if previous and previous.shorthand:
            self._shorthands.pop(previous.shorthand, None)
        if flag.shorthand:
            if len(flag.shorthand) != 1:
                raise ConfigurationError(
                    f"shorthand {flag.shorthand!r} for --{flag.name} is more than one "
                    "character"
                )
            stolen = self._shorthands.get(flag.shorthand)
            if stolen and stolen != flag.name:
                logger.debug(
                    "[%s] -%s moves from --%s to --%s",
                    self.name,
                    flag.shorthand,
                    stolen,
                    flag.name,
                )
            self._shorthands[flag.shorthand] = flag.name
        self._flags[flag.name] = flag

    def lookup(self, name: str) -> Flag | None:
        return self._flags.get(name)

    def shorthand_lookup(self, shorthand: str) -> Flag | None:
        name = self._shorthands.get(shorthand)
        if name is None:
            return None
        flag = self._flags.get(name)
        if flag is None or flag.shorthand != shorthand:
            return None
        return flag

    def __iter__(self) -> Iterator[Flag]:
        return iter(list(self._flags.values()))

    def __len__(self) -> int:
        return len(self._flags)

    def __contains__(self, name: object) -> bool:
        return name in self._flags

    def visible(self) -> list[Flag]:
        return [flag for flag in self._flags.values() if not flag.hidden]

    def changed(self, name: str) -> bool:
        flag = self._flags.get(name)
        return bool(flag and flag.changed)

    def get_bool(self, name: str) -> bool:
        flag = self._flags.get(name)
        if flag is None:
            return False
        return str(flag.value) == "true"

    def value_of(self, name: str) -> Value | None:
        flag = self._flags.get(name)
        return flag.value if flag else None

    @property
    def args(self) -> list[str]:
        """Positionals collected by the last `parse()`."""
        return list(self._args)

    def split(self, args: Sequence[str]) -> list[str]:
        """
        Return the positionals of `args` without setting any value.

        Unknown flags are skipped and assumed to take no operand.
        """
        return self._scan(args, apply=False)

    def parse(self, args: Sequence[str]) -> list[str]:
        """
        Apply flags in `args` and return the positionals.

        Raises:
            ParseError: On an unknown flag, a missing operand or a value that
                does not convert. Positionals seen before the failure remain
                available through `args`.
        """
        self._args = []
        self.parsed = True
        return self._scan(args, apply=True)

    def _scan(self, args: Sequence[str], apply: bool) -> list[str]:
        positionals: list[str] = self._args if apply else []
        remaining = list(args)
        while remaining:
            token = remaining.pop(0)
            if token == "--":
                positionals.extend(remaining)
                break
            if not token.startswith("-") or token == "-":
                positionals.append(token)
                continue
            if token.startswith("--"):
                self._scan_long(token, remaining, apply)
            else:
                self._scan_short(token, remaining, apply)
        return list(positionals)

    def _scan_long(self, token: str, remaining: list[str], apply: bool) -> None:
        name, has_value, value = token[2:].partition("=")
        flag = self._flags.get(name)
        if flag is None:
            if apply:
                raise ParseError(f"unknown flag: --{name}", name=name, raw=token)
            return
        if not has_value:
            if flag.no_opt_default:
                value = flag.no_opt_default
            elif remaining:
                value = remaining.pop(0)
            else:
                if apply:
                    raise ParseError(
                        f"flag needs an argument: --{name}", name=name, raw=token
                    )
                return
        if apply:
            self._apply(flag, value)

    def _scan_short(self, token: str, remaining: list[str], apply: bool) -> None:
        shorthands = token[1:]
        while shorthands:
            char, shorthands = shorthands[0], shorthands[1:]
            flag = self.shorthand_lookup(char)
            if flag is None:
                if apply:
                    raise ParseError(
                        f"unknown shorthand flag: {char!r} in {token}",
                        name=char,
                        raw=token,
                    )
                return
            if shorthands.startswith("="):
                value, shorthands = shorthands[1:], ""
            elif flag.no_opt_default:
                value = flag.no_opt_default
            elif shorthands:
                value, shorthands = shorthands, ""
            elif remaining:
                value = remaining.pop(0)
            else:
                if apply:
                    raise ParseError(
                        f"flag needs an argument: {char!r} in -{char}",
                        name=flag.name,
                        raw=token,
                    )
                return
            if apply:
                self._apply(flag, value)

    def _apply(self, flag: Flag, value: str) -> None:
        try:
            flag.value.set(value)
        except (CmdTreeError, ValueError) as error:
            raise ParseError(
                f'invalid argument "{value}" for "{flag.display_name()}" flag: {error}',
                name=flag.name,
                raw=value,
            ) from error
        flag.changed = True
        flag.source = ValueSource.FLAG
        if flag.deprecated:
            self.output.write(
                f"Flag --{flag.name} has been deprecated, {flag.deprecated}\n"
            )

    def __str__(self) -> str:
        return f"<FlagSet '{self.name}' | flags: {list(self._flags)}>"
