# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""
Defines structural protocols for optional value capabilities.

These runtime-checkable `Protocol` classes describe behavior a value type may
opt into. Shared code asks for a capability with `isinstance` instead of
switching on concrete value classes, so new value kinds need no changes
elsewhere.

Protocols:
- NoOptDefaulter: A value that a bare `--flag` (no operand) can set.
- Chooser: A value restricted to a fixed set of choices.
"""
from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable


@runtime_checkable
class NoOptDefaulter(Protocol):
    def no_opt_default(self) -> str: ...


@runtime_checkable
class Chooser(Protocol):
    choices: Sequence[str]

    def choice_text(self) -> str: ...
