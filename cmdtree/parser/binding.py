# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Binds positional tokens to the args a command declares.

Each token goes through the format detector:

- Structured tokens (query, form, JSON object) whose keys name declared args
  set those args, every value in order. Keys that name no arg are ignored,
  and a structured token where no key matches is treated as a plain token.
- Values under the empty key (JSON array elements, form segments without
  `=`) and plain tokens fill the remaining args in declaration order.

Args left unbound take their default. Every required arg without a value or
default is reported in one `ValidationError`.
"""
from __future__ import annotations

from typing import Sequence

from cmdtree.argument import Arg
from cmdtree.exceptions import CmdTreeError, ParseError, ValidationError
from cmdtree.logger import logger
from cmdtree.parser.formats import decode_arg


def _set(arg: Arg, raw: str) -> None:
    if arg.value is None:
        return
    try:
        arg.value.set(raw)
    except (CmdTreeError, ValueError) as error:
        raise ParseError(
            f"setting value for arg {arg.name!r}: {error}", name=arg.name, raw=raw
        ) from error


def bind_args(args: Sequence[Arg], tokens: Sequence[str]) -> list[str]:
    """
    Bind `tokens` to `args` and return the tokens no arg consumed.

    Raises:
        ParseError: If a value does not convert for its arg.
        ValidationError: If required args are left without a value.
    """
    by_name = {arg.name: arg for arg in args if arg.name}
    bound: set[str] = set()
    positional: list[str] = []

    for token in tokens:
        arg_format, values = decode_arg(token)
        if values is None:
            positional.append(token)
            continue
        matched = False
        for key, items in values.items():
            if key == "":
                positional.extend(items)
                matched = True
                continue
            arg = by_name.get(key)
            if arg is None:
                logger.debug("No arg named %r for %s token %r", key, arg_format, token)
                continue
            for item in items:
                _set(arg, item)
            bound.add(key)
            matched = True
        if not matched:
            positional.append(token)

    unbound = [arg for arg in args if arg.name not in bound]
    leftover = positional[len(unbound) :]
    for arg, raw in zip(unbound, positional):
        _set(arg, raw)
        bound.add(arg.name)

    missing = []
    for arg in args:
        if arg.name in bound:
            continue
        if arg.default:
            _set(arg, arg.default)
        elif arg.required:
            missing.append(arg.name)
    if missing:
        raise ValidationError(
            f"missing values for the required args: {', '.join(missing)}",
            missing=missing,
        )
    return leftover
