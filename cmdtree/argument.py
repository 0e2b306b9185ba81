# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Arg`, a named positional argument slot of a command.

Positional tokens are bound to declared args by `cmdtree.parser.binding`.
Structured tokens (`name=John`, `{"name":"John"}`) bind by name, plain tokens
bind in declaration order.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from cmdtree.protocols import Chooser
from cmdtree.values import String, Value


class Arg(BaseModel):
    """
    A positional argument declared on a command.

    Attributes:
        name (str): Name used for structured binding and in help output.
        description (str): Help text.
        required (bool): Whether the run fails when no token binds the arg.
            Ignored when `default` is set.
        default (str): Raw value applied when no token binds the arg.
        value (Value | None): Where the bound input is stored.
    """

    name: str = ""
    description: str = ""
    required: bool = False
    default: str = ""
    value: Value | None = None

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def type_name(self) -> str:
        if self.value is None:
            return "string"
        if isinstance(self.value, Chooser):
            return self.value.choice_text()
        return self.value.type_name()

    def summary(self) -> str:
        """Return `name type (default: x, required)` for listings."""
        text = f"{self.name} {self.type_name()}"
        notes = []
        if self.default:
            notes.append(f"default: {self.default}")
        if self.required:
            notes.append("required")
        if notes:
            text += f" ({', '.join(notes)})"
        return text

    def __str__(self) -> str:
        return f"Arg(name='{self.name}', required={self.required})"


def synthesize_args(tokens: list[str]) -> list[Arg]:
    """Create one untyped string arg per token, named `arg1`, `arg2`, ..."""
    args = []
    for index, token in enumerate(tokens, start=1):
        args.append(Arg(name=f"arg{index}", value=String(token)))
    return args
