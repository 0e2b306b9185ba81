# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Rich consoles for cmdtree output.

`console` writes to the process streams and is only used at the host
boundary. Everything driven by an `Invocation` goes through `make_console`
bound to the invocation's injected stream.
"""
from typing import IO

from rich.console import Console

from cmdtree.themes import get_help_theme

console = Console(theme=get_help_theme(), highlight=False)
error_console = Console(theme=get_help_theme(), highlight=False, stderr=True)


def make_console(file: IO[str]) -> Console:
    """Return a themed console writing to `file`."""
    return Console(file=file, theme=get_help_theme(), highlight=False)
