# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Middleware composition and stock middleware.

A middleware takes the next handler and returns a new handler:

    def timing(next_handler):
        async def handler(inv):
            ...  # before
            await next_handler(inv)
            ...  # after
        return handler

`chain(m1, m2)` composes middleware so that `m1` runs outermost: before-logic
runs in the order given and after-logic unwinds in reverse. Handlers passed
through a chain are normalized with `ensure_async`, so sync handlers and sync
middleware results work too.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from cmdtree.command import Handler, Middleware
from cmdtree.exceptions import ValidationError
from cmdtree.utils import ensure_async

if TYPE_CHECKING:
    from cmdtree.invocation import Invocation


def chain(*middlewares: Middleware) -> Middleware:
    """Compose `middlewares` so the first one given runs outermost."""

    def compose(handler: Handler) -> Handler:
        wrapped = ensure_async(handler)
        for middleware in reversed(middlewares):
            wrapped = ensure_async(middleware(wrapped))
        return wrapped

    return compose


def require_n_args(want: int) -> Middleware:
    """Require exactly `want` positional args."""
    return require_range_args(want, want)


def require_range_args(start: int, end: int) -> Middleware:
    """
    Require between `start` and `end` positional args, inclusive.

    An `end` of -1 means no upper bound.

    Raises:
        ValueError: If the range is invalid. Checked when the middleware is
            created, not when the command runs.
    """
    if start < 0:
        raise ValueError("start must be >= 0")
    if end != -1 and start > end:
        raise ValueError("start must be <= end")

    def middleware(next_handler: Handler) -> Handler:
        async def handler(inv: Invocation) -> None:
            got = len(inv.args)
            if start == end and got != start:
                if start == 0:
                    if inv.command.children:
                        raise ValidationError(f"unrecognized subcommand {inv.args[0]!r}")
                    raise ValidationError(f"wanted no args but got {got} {inv.args}")
                raise ValidationError(f"wanted {start} args but got {got} {inv.args}")
            if end == -1:
                if got < start:
                    raise ValidationError(f"wanted at least {start} args but got {got}")
            elif not start <= got <= end:
                raise ValidationError(
                    f"wanted between {start} and {end} args but got {got}"
                )
            await next_handler(inv)

        return handler

    return middleware
