# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines `Invocation`, one run of a command tree with its arguments, streams
and context.

`await invocation.run()` drives a run end to end:

1. Build and validate the tree snapshot (`CommandTree.build`).
2. Resolve the command to execute, one step at a time.
3. Build the flag set of the resolved command (global options, then the
   options of every ancestor down to the command) and parse the remaining
   tokens once.
4. Handle `--list-commands`, `--list-flags` and `--version`.
5. Validate required options, run option actions and bind positional args.
6. Compose the middleware chain and await the handler, or render help when
   `--help` is given or the command has no handler.

Errors are raised as `CmdTreeError` subclasses. Handler failures are wrapped
in `HandlerError` with the original exception as `__cause__`.
"""
from __future__ import annotations

import inspect
import logging
import os
import sys
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field
from rich.markup import escape

from cmdtree.argument import Arg, synthesize_args
from cmdtree.command import Command
from cmdtree.console import make_console
from cmdtree.context import RunContext
from cmdtree.exceptions import (
    HandlerError,
    ParseError,
    UnknownSubcommandError,
    ValidationError,
)
from cmdtree.help import USAGE_WANTS_ARG, print_commands, print_flags, render_help
from cmdtree.logger import logger
from cmdtree.middleware import chain
from cmdtree.option import Option, build_flag_set, global_options
from cmdtree.parser.binding import bind_args
from cmdtree.parser.flag_set import FlagSet
from cmdtree.parser.tokens import TokenKind, classify
from cmdtree.signals import HelpSignal
from cmdtree.tree import CommandTree, ResolutionState
from cmdtree.utils import DiscardStream, EmptyStream, get_program_name


class Invocation(BaseModel):
    """
    A single run of a command.

    Attributes:
        command (Command): The command to run. Reassigned to the resolved
            command while running.
        args (list[str]): Raw arguments, reduced to the positional args of the
            resolved command after the run.
        flags (FlagSet | None): The parsed flag set, available once running.
        stdout, stderr, stdin: Streams the run reads and writes. Output is
            discarded and input is empty unless set.
        annotations (dict[str, Any]): Free-form values for handlers and
            middleware.
        context (RunContext): Cancellation and value scope.
        argv0 (str): Name the program was invoked as, for busybox-style
            dispatch.
        arg_set (list[Arg]): Declared args after binding, or the `argN` args
            synthesized when the command declares none.
    """

    command: Command
    args: list[str] = Field(default_factory=list)
    flags: FlagSet | None = None
    stdout: Any = Field(default_factory=DiscardStream)
    stderr: Any = Field(default_factory=DiscardStream)
    stdin: Any = Field(default_factory=EmptyStream)
    annotations: dict[str, Any] = Field(default_factory=dict)
    context: RunContext = Field(default_factory=RunContext)
    argv0: str = ""
    arg_set: list[Arg] = Field(default_factory=list)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def with_os(self) -> Invocation:
        """Return a copy wired to the process streams and `sys.argv`."""
        return self.model_copy(
            update={
                "stdout": sys.stdout,
                "stderr": sys.stderr,
                "stdin": sys.stdin,
                "args": sys.argv[1:],
                "argv0": get_program_name(),
            }
        )

    def with_context(self, context: RunContext) -> Invocation:
        return self.model_copy(update={"context": context})

    def with_argv0(self, argv0: str) -> Invocation:
        return self.model_copy(update={"argv0": os.path.basename(argv0)})

    def arg(self, name: str) -> Arg | None:
        """Return the bound arg named `name`."""
        for arg in self.arg_set:
            if arg.name == name:
                return arg
        return None

    def _console(self, stream: Any):
        return make_console(stream)

    def _argv0_args(
        self, tree: CommandTree, args: list[str], global_opts: Sequence[Option]
    ) -> list[str]:
        if not self.argv0:
            return args
        entry = tree.child(tree.root, self.argv0)
        if entry is None:
            return args
        if tree.resolve_all(args, global_opts).command is not tree.root:
            return args
        logger.debug("Dispatching to '%s' from argv0 %r", entry.name, self.argv0)
        return [entry.name, *args]

    def _warn_deprecated(self, tree: CommandTree, command: Command) -> None:
        console = self._console(self.stderr)
        for node in tree.ancestors(command):
            if node.deprecated:
                console.print(
                    f"[help.header]WARNING:[/] {escape(repr(node.full_name))} is "
                    f"deprecated! {escape(node.deprecated)}"
                )

    def _raw_args(self, state: ResolutionState, flags: FlagSet) -> list[str]:
        if state.depth == 0:
            return list(state.args)
        names = {state.command.name, *state.command.aliases}
        index = find_arg(names, state.args, flags)
        return list(state.args[index + 1 :])

    def _validate_required(self, command: Command, flags: FlagSet) -> None:
        missing = []
        for option in command.options:
            if not option.required:
                continue
            if option.flag and flags.changed(option.flag):
                continue
            if option.default:
                continue
            if option.envs:
                if not any(os.environ.get(env) for env in option.envs):
                    logger.debug(
                        "Required option '%s' accepted through its env mapping %s "
                        "although none of them is set",
                        option.identifier,
                        option.envs,
                    )
                continue
            missing.append(option.identifier)
        if missing:
            raise ValidationError(
                f"missing values for the required flags: {', '.join(missing)}",
                missing=missing,
            )

    async def _run_actions(self, options: Sequence[Option], flags: FlagSet) -> None:
        processed: set[str] = set()
        for option in reversed(options):
            if not option.action or not option.flag or option.flag in processed:
                continue
            flag = flags.lookup(option.flag)
            if flag is None or not flag.changed:
                continue
            try:
                result = option.action(flag.value)
                if inspect.isawaitable(result):
                    await result
            except Exception as error:
                raise ValidationError(
                    f"action for flag {option.flag!r} failed: {error}"
                ) from error
            processed.add(option.flag)

    def _set_log_level(self, flags: FlagSet) -> None:
        if flags.changed("debug") and flags.get_bool("debug"):
            logger.setLevel(logging.DEBUG)
        elif flags.changed("log-level"):
            level = str(flags.value_of("log-level")).upper()
            if isinstance(logging.getLevelName(level), int):
                logger.setLevel(level)

    def _show_help(self, global_opts: Sequence[Option]) -> None:
        render_help(self._console(self.stdout), self.command, global_opts)
        if self.args and not USAGE_WANTS_ARG.search(self.command.use):
            raise UnknownSubcommandError(self.args)

    async def run(self) -> None:
        """
        Run the command tree with this invocation's arguments.

        `--debug` and `--log-level` change the `cmdtree` logger level for the
        duration of the run only.

        Raises:
            ConfigurationError: If the command tree is invalid.
            ParseError: If flags do not parse for the resolved command.
            ValidationError: If required options or args are missing.
            UnknownSubcommandError: If help was shown and unknown tokens remain.
            HandlerError: If the handler or a middleware raised.
        """
        previous_level = logger.level
        try:
            await self._run()
        finally:
            logger.setLevel(previous_level)

    async def _run(self) -> None:
        tree = CommandTree.build(self.command)
        global_opts = global_options()

        state = tree.resolve_all(
            self._argv0_args(tree, list(self.args), global_opts), global_opts
        )
        command = state.command
        self.command = command
        logger.debug(
            "[%s] resolved at depth %d, tokens: %s",
            command.full_name,
            state.depth,
            [f"{token}:{classify(token)}" for token in state.args],
        )
        self._warn_deprecated(tree, command)

        options = tree.merged_options(command, global_opts)
        flags = build_flag_set(options, command.name, output=self.stderr)
        self.flags = flags

        parse_error: ParseError | None = None
        if command.raw_args:
            self.args = self._raw_args(state, flags)
        else:
            try:
                flags.parse(state.args)
            except ParseError as error:
                parse_error = error
            self.args = flags.args[state.depth :]

        if flags.get_bool("list-commands"):
            print_commands(self._console(self.stdout), tree.root)
            return
        if flags.get_bool("list-flags"):
            print_flags(self._console(self.stdout), tree.root, global_opts)
            return
        if flags.get_bool("version"):
            version = tree.root.version or "unknown"
            self._console(self.stdout).print(f"{escape(tree.root.name)} {escape(version)}")
            return

        self._set_log_level(flags)

        if parse_error is not None:
            raise ParseError(
                f"parsing flags ({' '.join(state.args)}) for "
                f"{command.full_name!r}: {parse_error}",
                name=parse_error.name,
                raw=parse_error.raw,
            ) from parse_error

        help_requested = flags.get_bool("help")
        validate = not help_requested and command.handler is not None
        if validate:
            self._validate_required(command, flags)
            await self._run_actions(options, flags)
        if command.args:
            if validate:
                bind_args(command.args, self.args)
            self.arg_set = list(command.args)
        else:
            self.arg_set = synthesize_args(self.args)

        middlewares = [
            node.middleware for node in tree.ancestors(command) if node.middleware
        ]

        context = self.context.child()
        invocation = self.with_context(context)
        try:
            if help_requested or command.handler is None:
                invocation._show_help(global_opts)
                return
            handler = chain(*middlewares)(command.handler)
            try:
                await handler(invocation)
            except HelpSignal:
                invocation._show_help(global_opts)
            except Exception as error:
                raise HandlerError(command, error) from error
        finally:
            context.cancel("command finished")

    def __str__(self) -> str:
        return f"<Invocation '{self.command.full_name}' | args: {self.args}>"


def find_arg(names: set[str], args: Sequence[str], flags: FlagSet) -> int:
    """
    Return the index of the first token in `names`, skipping flags and their
    operands.

    Raises:
        ParseError: If a flag is unknown or the name is not found.
    """
    index = 0
    while index < len(args):
        token = args[index]
        kind = classify(token)
        if kind is TokenKind.TERMINATOR:
            break
        if kind is not TokenKind.FLAG:
            if token in names:
                return index
            index += 1
            continue
        if "=" in token:
            index += 1
            continue
        flag = flags.lookup(token.lstrip("-"))
        if flag is None and not token.startswith("--") and len(token) == 2:
            flag = flags.shorthand_lookup(token[1])
        if flag is None:
            raise ParseError(f"unknown flag: {token}", name=token.lstrip("-"), raw=token)
        if flag.no_opt_default:
            index += 1
            continue
        if index == len(args) - 1:
            raise ParseError(f"flag {token} requires a value", name=flag.name, raw=token)
        index += 2
    raise ParseError(f"arg {' or '.join(sorted(names))!r} not found", raw=" ".join(args))
