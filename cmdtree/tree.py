# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Command tree initialization and subcommand resolution.

`CommandTree.build(root)` validates and normalizes a tree of `Command`
objects, then records a read-only snapshot of it:

- `lookup`: every command by colon-joined path (`app`, `app:user`,
  `app:user:add`). Paths must be unique.
- parent links, ancestor chains and alias-aware child lookup.

Initialization is idempotent. Running it again on an already initialized
tree changes nothing.

Resolution walks the tree one step at a time. `resolve()` consumes leading
tokens that name commands (exact paths, colon paths, or names and aliases
walked through children). `advance()` adds the second, flag-aware step: the
remaining tokens are split against the flags the current command accepts,
and the positional at the current depth may name a child. A token is never
taken for a command name when it is really the operand of a flag.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence

from cmdtree.command import Command
from cmdtree.exceptions import ConfigurationError
from cmdtree.logger import logger
from cmdtree.option import Option, build_flag_shape
from cmdtree.parser.tokens import command_candidates


@dataclass(frozen=True)
class ResolutionState:
    """
    Position of an in-progress resolution.

    Attributes:
        command (Command): The deepest command resolved so far.
        args (tuple[str, ...]): Tokens not consumed as command names.
        depth (int): Number of positionals in `args` that name commands.
    """

    command: Command
    args: tuple[str, ...]
    depth: int = 0


def normalize_description(text: str) -> str:
    """Trim, capitalize the first letter and end with exactly one period."""
    text = text.strip().strip(".").strip()
    if not text:
        return ""
    return f"{text[0].upper()}{text[1:]}."


def _init_command(
    command: Command,
    parent: Command | None,
    seen: set[int],
    errors: list[str],
) -> None:
    seen.add(id(command))
    if not command.use.strip():
        command.use = "unnamed"
    command._parent = parent

    for option in command.options:
        if not option.flag and not option.envs:
            errors.append(
                f"command {command.full_name!r}: option must have a flag or envs"
            )
        if option.description:
            option.description = normalize_description(option.description)
    command.options.sort(key=lambda option: option.identifier)

    for index, arg in enumerate(command.args, start=1):
        if not arg.name:
            arg.name = f"arg{index}"

    command.children.sort(key=lambda child: child.name)
    for child in command.children:
        if id(child) in seen:
            errors.append(
                f"command {child.name!r} appears more than once in the tree "
                f"(under {command.full_name!r})"
            )
            continue
        _init_command(child, command, seen, errors)


class CommandTree:
    """
    Read-only snapshot of an initialized command tree.

    Use `CommandTree.build(root)` to create one.
    """

    def __init__(self, root: Command, lookup: dict[str, Command]) -> None:
        self.root = root
        self.lookup = lookup
        self._paths = {id(command): path for path, command in lookup.items()}

    @classmethod
    def build(cls, root: Command) -> CommandTree:
        """
        Initialize `root` and its descendants and snapshot the result.

        Raises:
            ConfigurationError: If an option has neither a flag nor envs, a
                command object appears twice, or two commands share a path.
        """
        errors: list[str] = []
        _init_command(root, None, set(), errors)
        if errors:
            raise ConfigurationError(
                "initializing command tree: " + "; ".join(errors)
            )

        lookup: dict[str, Command] = {}
        for path, command in cls._walk(root, ""):
            if path in lookup:
                raise ConfigurationError(f"duplicate command path {path!r}")
            lookup[path] = command
        logger.debug("Built command tree '%s' with %d commands", root.name, len(lookup))
        return cls(root, lookup)

    @classmethod
    def _walk(cls, command: Command, prefix: str) -> Iterator[tuple[str, Command]]:
        path = f"{prefix}:{command.name}" if prefix else command.name
        yield path, command
        for child in command.children:
            yield from cls._walk(child, path)

    def path_of(self, command: Command) -> str:
        return self._paths[id(command)]

    def ancestors(self, command: Command) -> list[Command]:
        """Return the chain from the root down to `command`, inclusive."""
        chain = []
        node: Command | None = command
        while node is not None:
            chain.append(node)
            node = node.parent
        chain.reverse()
        return chain

    def is_descendant(self, command: Command, ancestor: Command) -> bool:
        """Whether `command` is strictly below `ancestor`."""
        node = command.parent
        while node is not None:
            if node is ancestor:
                return True
            node = node.parent
        return False

    def child(self, command: Command, token: str) -> Command | None:
        """Find a child of `command` by name, then by alias."""
        for child in command.children:
            if child.name == token:
                return child
        for child in command.children:
            if token in child.aliases:
                return child
        return None

    def walk_path(self, command: Command, segments: Sequence[str]) -> Command | None:
        node = command
        for segment in segments:
            found = self.child(node, segment)
            if found is None:
                return None
            node = found
        return node

    def merged_options(
        self, command: Command, global_opts: Sequence[Option] = ()
    ) -> list[Option]:
        """Global options, then every ancestor's options from the root down."""
        return [*global_opts, *command.full_options()]

    def resolve(self, command: Command, args: Sequence[str]) -> tuple[Command, int]:
        """
        Consume leading tokens that name commands below `command`.

        Returns the deepest command reached and the number of tokens consumed.
        Only tokens before the first flag-like or `=`-containing token are
        considered.
        """
        candidates = command_candidates(args)
        if not candidates:
            return command, 0

        token = candidates[0]
        target = self.lookup.get(token)
        if target is not None and self.is_descendant(target, command):
            logger.debug("Resolved %r by path to '%s'", token, target.full_name)
            return target, 1

        if ":" in token:
            target = self.walk_path(command, token.split(":"))
            if target is not None and target is not command:
                logger.debug("Resolved %r by colon path to '%s'", token, target.full_name)
                return target, 1

        node = command
        consumed = 0
        for candidate in candidates:
            found = self.child(node, candidate)
            if found is None:
                break
            node = found
            consumed += 1
        return node, consumed

    def advance(
        self, state: ResolutionState, global_opts: Sequence[Option] = ()
    ) -> ResolutionState | None:
        """
        Take one resolution step. Returns `None` once no deeper command
        can be reached.
        """
        command, consumed = self.resolve(state.command, state.args)
        if consumed:
            return ResolutionState(command, state.args[consumed:], state.depth)

        shape = build_flag_shape(
            self.merged_options(state.command, global_opts), state.command.name
        )
        positionals = shape.split(state.args)
        if len(positionals) > state.depth:
            child = self.child(state.command, positionals[state.depth])
            if child is not None:
                return ResolutionState(child, state.args, state.depth + 1)
        return None

    def resolve_all(
        self, args: Sequence[str], global_opts: Sequence[Option] = ()
    ) -> ResolutionState:
        """Resolve from the root until no step makes progress."""
        state = ResolutionState(self.root, tuple(args))
        while True:
            next_state = self.advance(state, global_opts)
            if next_state is None:
                return state
            state = next_state

    def __iter__(self) -> Iterator[Command]:
        return iter(self.lookup.values())

    def __len__(self) -> int:
        return len(self.lookup)
