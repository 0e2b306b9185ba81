# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""command.py

Defines the Command class for cmdtree.

A Command is one node of a command tree. It declares:

- Its name and aliases (`use`, `aliases`) and help text (`short`, `long`)
- Options bound from flags, environment variables and defaults
- Positional args bound from plain or structured tokens
- An optional middleware wrapping its handler and every descendant's handler
- A handler, sync or async, called with the `Invocation`

A command without a handler renders its help when invoked. Trees are
initialized and validated at the start of every run (see `cmdtree.tree`).
"""
from __future__ import annotations

import asyncio
import sys
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator
from rich.markup import escape

from cmdtree.argument import Arg
from cmdtree.console import error_console
from cmdtree.context import RunContext
from cmdtree.exceptions import CmdTreeError
from cmdtree.logger import logger
from cmdtree.option import Option
from cmdtree.signals import FlowSignal
from cmdtree.utils import ensure_async, setup_logging

if TYPE_CHECKING:
    from cmdtree.invocation import Invocation

Handler = Callable[..., Awaitable[Any]]
Middleware = Callable[[Handler], Handler]


class Command(BaseModel):
    """
    A node in a command tree.

    Attributes:
        use (str): Usage line. Its first word is the command name, the rest is
            shown in help (`<file>` placeholders mark commands that take
            free-form args).
        aliases (list[str]): Alternate names accepted on the command line.
        short (str): One-line description for listings.
        long (str): Full description for help output.
        children (list[Command]): Subcommands.
        options (list[Option]): Options declared by this command. Descendants
            inherit them.
        args (list[Arg]): Positional args declared by this command.
        middleware (Middleware | None): Wrapper applied to the handler of this
            command and of every descendant.
        handler (Handler | None): Called with the `Invocation`. `None` means the
            command shows help.
        hidden (bool): Hide from help and listings.
        deprecated (str): Deprecation message. Empty means not deprecated.
        raw_args (bool): Do not parse flags, pass every token to the handler.
        version (str): Printed by `--version` when set on the root.

    Methods:
        invoke(*args): Create an `Invocation` with discarded output.
        run(context): Run with the process streams and arguments.
        execute(argv): Synchronous host entry that exits the process.
    """

    use: str = ""
    aliases: list[str] = Field(default_factory=list)
    short: str = ""
    long: str = ""
    children: list[Command] = Field(default_factory=list)
    options: list[Option] = Field(default_factory=list)
    args: list[Arg] = Field(default_factory=list)
    middleware: Middleware | None = None
    handler: Handler | None = None
    hidden: bool = False
    deprecated: str = ""
    raw_args: bool = False
    version: str = ""

    _parent: Command | None = PrivateAttr(default=None)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    @field_validator("handler", mode="before")
    @classmethod
    def wrap_callable_as_async(cls, handler: Any) -> Any:
        if handler is None:
            return None
        if callable(handler):
            return ensure_async(handler)
        raise TypeError("Handler must be a callable or None")

    @property
    def name(self) -> str:
        words = self.use.split()
        return words[0] if words else "unnamed"

    @property
    def parent(self) -> Command | None:
        return self._parent

    @property
    def full_name(self) -> str:
        if self._parent is not None:
            return f"{self._parent.full_name} {self.name}"
        return self.name

    @property
    def full_usage(self) -> str:
        use = self.use or self.name
        if self._parent is not None:
            return f"{self._parent.full_name} {use}"
        return use

    def full_options(self) -> list[Option]:
        """Options of this command and its ancestors, root first."""
        options: list[Option] = []
        if self._parent is not None:
            options.extend(self._parent.full_options())
        options.extend(self.options)
        return options

    def root(self) -> Command:
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def visible_children(self) -> list[Command]:
        return [child for child in self.children if not child.hidden]

    def invoke(self, *args: str) -> Invocation:
        """
        Create an invocation of this command with `args`.

        Output is discarded and stdin is empty until the invocation is given
        real streams. The invocation does nothing until `run()` is awaited.
        """
        from cmdtree.invocation import Invocation

        return Invocation(command=self, args=list(args))

    async def run(self, context: RunContext | None = None) -> None:
        """Run the command with the process streams and `sys.argv`."""
        from cmdtree.invocation import Invocation

        invocation = Invocation(command=self).with_os()
        if context is not None:
            invocation = invocation.with_context(context)
        await invocation.run()

    def execute(self, argv: list[str] | None = None, log_mode: str | None = None) -> None:
        """
        Run the command as the main program and exit the process.

        Configures logging, runs the event loop and exits with 0 on success,
        1 on error and 130 when interrupted.
        """
        from cmdtree.invocation import Invocation

        setup_logging(mode=log_mode)
        invocation = Invocation(command=self).with_os()
        if argv is not None:
            invocation = invocation.model_copy(update={"args": list(argv)})
        try:
            asyncio.run(invocation.run())
        except KeyboardInterrupt:
            logger.info("[KeyboardInterrupt]. <- Exiting run.")
            sys.exit(130)
        except CmdTreeError as error:
            error_console.print(f"[error]error:[/] {escape(str(error))}")
            sys.exit(1)
        except FlowSignal as signal:
            logger.info("[%s]. <- Exiting run.", type(signal).__name__)
            sys.exit(1)
        sys.exit(0)

    def __str__(self) -> str:
        return f"Command(use='{self.use}', children={[c.name for c in self.children]})"
