# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Help output for cmdtree commands.

- `render_help`: usage, description, subcommands, args and options of one
  command, written to the invocation's stdout.
- `print_commands`: every visible command path (`app:user:add`) with its
  short description and declared args, for `--list-commands`.
- `print_flags`: global options, then the options of every command, for
  `--list-flags`.

All output goes through a Rich console bound to the stream passed in. User
supplied text is escaped so that brackets in descriptions are printed as is.
"""
from __future__ import annotations

import re
from typing import Collection, Sequence

from rich.console import Console
from rich.markup import escape
from rich.padding import Padding
from rich.text import Text

from cmdtree.command import Command
from cmdtree.option import Option
from cmdtree.protocols import Chooser

USAGE_WANTS_ARG = re.compile(r"<.*>")


def header(text: str) -> str:
    return f"[help.header]{escape(text.upper())}:[/]"


def keyword(text: str) -> str:
    return f"[help.keyword]{escape(text)}[/]"


def option_type_text(option: Option) -> str:
    if isinstance(option.value, Chooser):
        return option.value.choice_text()
    return option.type_name()


def _print_indented(console: Console, text: str, spaces: int) -> None:
    console.print(Padding(Text(text), (0, 0, 0, spaces), expand=False))


def _notes(default: str, required: bool) -> str:
    notes = []
    if default:
        notes.append(f"default: {default}")
    if required:
        notes.append("required")
    return f" ({', '.join(notes)})" if notes else ""


def print_option(console: Console, option: Option, indent: int = 2) -> None:
    """Print one option line and its indented description."""
    pad = " " * indent
    if option.shorthand:
        line = f"{pad}{keyword('-' + option.shorthand)}, {keyword('--' + option.flag)}"
    else:
        line = f"{pad}    {keyword('--' + option.flag)}"
    type_text = option_type_text(option)
    if type_text:
        line += f" {escape(type_text)}"
    if option.envs:
        line += ", " + keyword(", ".join(f"${env}" for env in option.envs))
    line += escape(_notes(option.default, option.required))
    console.print(line)
    if option.description:
        _print_indented(console, option.description, indent + 8)
    if option.deprecated:
        console.print(
            Padding(
                Text(f"DEPRECATED: {option.deprecated}", style="help.deprecated"),
                (0, 0, 0, indent + 8),
                expand=False,
            )
        )


def _visible_options(
    options: Sequence[Option], exclude: Collection[str] = ()
) -> list[Option]:
    merged: dict[str, Option] = {}
    for option in options:
        if option.flag and not option.hidden and option.flag not in exclude:
            merged[option.flag] = option
    return list(merged.values())


def option_groups(
    command: Command, global_opts: Sequence[Option] = ()
) -> list[tuple[str, list[Option]]]:
    """Options grouped by declaring command, root first.

    The root group also holds the global options and is named `Global`.
    """
    chain = []
    node: Command | None = command
    while node is not None:
        chain.append(node)
        node = node.parent
    chain.reverse()

    groups = []
    global_names: set[str] = set()
    for node in chain:
        if node.parent is None:
            options = _visible_options([*global_opts, *node.options])
            global_names = {option.flag for option in options}
            name = "Global"
        else:
            options = _visible_options(node.options, exclude=global_names)
            name = node.name
        if options:
            groups.append((name, options))
    return groups


def render_help(
    console: Console, command: Command, global_opts: Sequence[Option] = ()
) -> None:
    """Print the help page of `command`."""
    console.print(header("Usage"))
    usage = command.full_usage
    if command.children:
        usage += " <subcommand>"
    console.print(f"  {escape(usage)}\n")

    description = command.long or command.short
    if description:
        _print_indented(console, description.strip(), 2)
        console.print()

    if command.aliases:
        console.print(header("Aliases"))
        console.print(f"  {escape(', '.join(command.aliases))}\n")

    children = command.visible_children()
    if children:
        console.print(header("Subcommands"))
        width = max(len(child.name) for child in children)
        for child in children:
            console.print(f"    {keyword(child.name.ljust(width))}    {escape(child.short)}")
        console.print()

    if command.args:
        console.print(header("Arguments"))
        for arg in command.args:
            console.print(f"    {escape(arg.summary())}")
            if arg.description:
                _print_indented(console, arg.description, 6)
        console.print()

    for name, options in option_groups(command, global_opts):
        console.print(header(f"{name} Options"))
        for option in options:
            print_option(console, option)
        console.print()

    if children:
        console.print(
            f"Run '{escape(command.full_name)} <subcommand> --help' for more information."
        )


def print_commands(console: Console, root: Command) -> None:
    """Print every visible command below `root` with its full path."""
    for child in root.children:
        _print_command_entry(console, child, root.name)


def _print_command_entry(console: Console, command: Command, prefix: str) -> None:
    if command.hidden:
        return
    path = f"{prefix}:{command.name}"
    console.print(f"  {keyword(path)}")
    if command.short:
        _print_indented(console, command.short, 4)
    if command.args:
        if command.short:
            console.print()
        for arg in command.args:
            console.print(f"    {escape(arg.summary())}")
            if arg.description:
                _print_indented(console, arg.description, 6)
    for child in command.children:
        _print_command_entry(console, child, path)


def print_flags(
    console: Console, root: Command, global_opts: Sequence[Option] = ()
) -> None:
    """Print the global options, then each command's own options."""
    globals_ = _visible_options([*global_opts, *root.options])
    global_names = {option.flag for option in globals_}
    if globals_:
        console.print(header("Global Options"))
        for option in globals_:
            print_option(console, option, indent=1)
        console.print()

    printed_header = False
    for path, command in _walk(root, ""):
        options = _visible_options(command.options, exclude=global_names)
        if not options:
            continue
        if not printed_header:
            console.print(header("Command-Specific Options"))
            printed_header = True
        console.print(f"\n  {escape(path)}")
        for option in options:
            print_option(console, option, indent=4)

    if not printed_header and not globals_:
        console.print("No flags available.")


def _walk(command: Command, prefix: str):
    for child in command.children:
        path = f"{prefix}:{child.name}" if prefix else child.name
        yield path, child
        yield from _walk(child, path)
