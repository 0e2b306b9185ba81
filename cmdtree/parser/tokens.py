# cmdtree CLI Framework — (c) 2025 rtj.dev LLC — MIT Licensed
"""Lightweight token classification used before any flag is parsed."""
from __future__ import annotations

from enum import Enum
from typing import Sequence

from cmdtree.parser.formats import ArgFormat, detect_format


class TokenKind(Enum):
    """What a raw token looks like, without consuming any operand."""

    FLAG = "flag"
    TERMINATOR = "terminator"
    STRUCTURED = "structured"
    PLAIN = "plain"

    def __str__(self) -> str:
        return self.value


def classify(token: str) -> TokenKind:
    if token == "--":
        return TokenKind.TERMINATOR
    if token.startswith("-") and token != "-":
        return TokenKind.FLAG
    if "=" in token or detect_format(token) is ArgFormat.JSON:
        return TokenKind.STRUCTURED
    return TokenKind.PLAIN


def command_candidates(args: Sequence[str]) -> list[str]:
    """Return the leading tokens that may name commands.

    Stops at the first token that starts with `-` or contains `=`.
    """
    candidates = []
    for token in args:
        if token.startswith("-") or "=" in token:
            break
        candidates.append(token)
    return candidates
